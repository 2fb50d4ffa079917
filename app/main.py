from __future__ import annotations

import logging
import sys
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agent.agent import AskAI, get_ai_delegate
from app.dispatch import (
    RequestError,
    decode_body,
    execute,
    failure_envelope,
    parse_query,
    success_envelope,
)
from config.settings import Settings, get_settings


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("bfhl")

# Results such as long Fibonacci terms exceed the default int-to-text digit cap.
if hasattr(sys, "set_int_max_str_digits"):
    sys.set_int_max_str_digits(0)

logger.info("Loaded email: %s", settings.official_email)
logger.info("Groq key set: %s", bool(settings.groq_api_key))

app = FastAPI(title="BFHL Utility Service", version="1.0.0")

# Cross-origin requests are allowed from anywhere.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/bfhl")
async def bfhl(
    request: Request,
    settings: Settings = Depends(get_settings),
    ask: AskAI = Depends(get_ai_delegate),
) -> JSONResponse:
    try:
        body = decode_body(await request.body(), request.headers.get("content-type"))
        query = parse_query(body)
        data = await execute(query, ask)
        return JSONResponse(success_envelope(settings.official_email, data))
    except RequestError as e:
        logger.info("Rejected request: %s", e)
        return JSONResponse(failure_envelope(str(e)), status_code=400)
    except Exception as e:
        logger.exception("Request processing failed: %s", e)
        return JSONResponse(failure_envelope("Internal server error"), status_code=500)


@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {"is_success": True, "official_email": settings.official_email}


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
