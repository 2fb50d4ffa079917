from __future__ import annotations

import logging
from functools import partial
from typing import Awaitable, Callable, Optional

from fastapi import Depends
from langchain_core.messages import HumanMessage
from langchain_groq import ChatGroq

from config.settings import Settings, get_settings


logger = logging.getLogger("bfhl.agent")

AI_ERROR = "AI_error"

AskAI = Callable[[str], Awaitable[str]]


def build_llm(settings: Settings) -> ChatGroq:
    if not settings.groq_api_key:
        raise RuntimeError(
            "GROQ_API_KEY not set. Please configure it in environment or .env"
        )

    return ChatGroq(
        model=settings.groq_model,
        groq_api_key=settings.groq_api_key,
        max_retries=0,
    )


async def ask_ai(question: str, settings: Optional[Settings] = None) -> str:
    """Send ``question`` as a single user message and return the trimmed reply.

    Any failure is logged and reported as the ``AI_error`` sentinel instead of
    being raised.
    """
    settings = settings or get_settings()
    try:
        llm = build_llm(settings)
        result = await llm.ainvoke([HumanMessage(content=question)])
        content = result.content
        if not isinstance(content, str):
            raise TypeError(f"Unexpected completion content: {type(content).__name__}")
        return content.strip()
    except Exception as exc:
        logger.warning("AI call failed: %s", exc)
        return AI_ERROR


def get_ai_delegate(settings: Settings = Depends(get_settings)) -> AskAI:
    return partial(ask_ai, settings=settings)
