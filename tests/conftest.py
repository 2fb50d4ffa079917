from __future__ import annotations

from types import SimpleNamespace
from typing import List

import pytest
from fastapi.testclient import TestClient

from agent import agent as agent_module
from agent.agent import get_ai_delegate
from app.main import app
from config.settings import Settings, get_settings


TEST_EMAIL = "tester@example.com"


class _TestSettings(Settings):
    official_email = TEST_EMAIL
    groq_api_key = "test-key"


class FakeDelegate:
    """Stand-in for the AI delegate that records prompts."""

    def __init__(self, reply: str = "Mumbai") -> None:
        self.reply = reply
        self.prompts: List[str] = []

    async def __call__(self, question: str) -> str:
        self.prompts.append(question)
        return self.reply


class FakeChatGroq:
    """Replaces ``ChatGroq``; replies with ``reply`` and records every call."""

    reply = "  Mumbai\n"
    instances: List["FakeChatGroq"] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.calls = []
        FakeChatGroq.instances.append(self)

    async def ainvoke(self, messages):
        self.calls.append(messages)
        return SimpleNamespace(content=self.reply)


@pytest.fixture
def fake_groq(monkeypatch):
    monkeypatch.setattr(FakeChatGroq, "instances", [])
    monkeypatch.setattr(agent_module, "ChatGroq", FakeChatGroq)
    return FakeChatGroq


@pytest.fixture
def test_settings() -> Settings:
    return _TestSettings()


@pytest.fixture
def fake_delegate() -> FakeDelegate:
    return FakeDelegate()


@pytest.fixture
def client(test_settings, fake_delegate):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_ai_delegate] = lambda: fake_delegate
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
