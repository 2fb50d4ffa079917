from __future__ import annotations

import json
import logging
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError, field_validator

from agent.agent import AskAI
from app.arithmetic import as_integer, fibonacci, filter_primes, hcf_of, lcm_of


logger = logging.getLogger("bfhl.dispatch")


class RequestError(ValueError):
    """Client-caused failure; the message is returned to the caller as-is."""


class FibonacciQuery(BaseModel):
    key: ClassVar[str] = "fibonacci"

    count: int

    @field_validator("count", mode="before")
    @classmethod
    def check_count(cls, value: Any) -> int:
        n = as_integer(value)
        if n is None or n <= 0:
            raise ValueError("fibonacci must be a positive integer")
        return n


class PrimeQuery(BaseModel):
    key: ClassVar[str] = "prime"

    # Non-integer elements are kept here and dropped by the prime filter.
    values: List[Any]

    @field_validator("values", mode="before")
    @classmethod
    def check_array(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            raise ValueError("prime must be an array")
        return value


class _ReductionQuery(BaseModel):
    key: ClassVar[str]

    values: List[int]

    @field_validator("values", mode="before")
    @classmethod
    def check_positive_integers(cls, value: Any) -> List[int]:
        message = f"{cls.key} must be an array of positive integers"
        if not isinstance(value, list) or not value:
            raise ValueError(message)
        numbers = []
        for item in value:
            n = as_integer(item)
            if n is None or n <= 0:
                raise ValueError(message)
            numbers.append(n)
        return numbers


class LcmQuery(_ReductionQuery):
    key: ClassVar[str] = "lcm"


class HcfQuery(_ReductionQuery):
    key: ClassVar[str] = "hcf"


class AIQuery(BaseModel):
    key: ClassVar[str] = "AI"

    prompt: str

    @field_validator("prompt", mode="before")
    @classmethod
    def check_string(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("AI input must be a string")
        return value


Query = Union[FibonacciQuery, PrimeQuery, LcmQuery, HcfQuery, AIQuery]

QUERY_TYPES: Dict[str, Type[BaseModel]] = {
    model.key: model for model in (FibonacciQuery, PrimeQuery, LcmQuery, HcfQuery, AIQuery)
}


def _first_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    original = (error.get("ctx") or {}).get("error")
    if original is not None:
        return str(original)
    return error["msg"]


def decode_body(raw: bytes, content_type: Optional[str] = "application/json") -> Any:
    """Decode a request body.

    Empty bodies and bodies not sent as ``application/json`` decode to None.
    """
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type != "application/json" or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RequestError("Invalid JSON body") from exc


def parse_query(body: Any) -> Query:
    if not isinstance(body, dict) or len(body) != 1:
        raise RequestError("Request must contain exactly one key")

    key, value = next(iter(body.items()))
    model = QUERY_TYPES.get(key)
    if model is None:
        raise RequestError("Invalid key")

    field = next(iter(model.model_fields))
    try:
        return model(**{field: value})
    except ValidationError as exc:
        raise RequestError(_first_message(exc)) from exc


def compute(query: Query) -> Any:
    if isinstance(query, FibonacciQuery):
        return fibonacci(query.count)
    if isinstance(query, PrimeQuery):
        return filter_primes(query.values)
    if isinstance(query, LcmQuery):
        return lcm_of(query.values)
    if isinstance(query, HcfQuery):
        return hcf_of(query.values)
    raise TypeError(f"Unhandled query type: {type(query).__name__}")


async def execute(query: Query, ask: AskAI) -> Any:
    logger.info("Handling %s request", query.key)
    if isinstance(query, AIQuery):
        return await ask(query.prompt)
    # Arithmetic is CPU-bound; keep it off the event loop.
    return await run_in_threadpool(compute, query)


def success_envelope(official_email: Optional[str], data: Any) -> Dict[str, Any]:
    return {"is_success": True, "official_email": official_email, "data": data}


def failure_envelope(message: str) -> Dict[str, Any]:
    return {"is_success": False, "message": message}
