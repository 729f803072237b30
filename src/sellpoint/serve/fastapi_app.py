"""FastAPI service for selling-point generation.

Endpoints:
- GET /health
- POST /api/generate  { "description": "..." }
"""
from __future__ import annotations
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sellpoint.common.config import ProviderConfig
from sellpoint.common.errors import AdmissionError, ConfigurationError, InputError, UserFacingError
from sellpoint.common.logging_setup import setup_logging
from sellpoint.common.schema import GenerationRequest
from sellpoint.common.templates import build_prompt, load_template
from sellpoint.pipeline.extract import REQUIRED_TEXT_FIELDS
from sellpoint.pipeline.generator import generate_copy
from sellpoint.pipeline.rate_limit import AdmissionPolicy, SlidingWindowRateLimiter

LOGGER = logging.getLogger("sellpoint.serve.app")
setup_logging()

CONFIG = ProviderConfig.from_env()
LIMITER: AdmissionPolicy = SlidingWindowRateLimiter()

class GenerateIn(BaseModel):
    description: Any = None

class GenerateOut(BaseModel):
    result: dict[str, Any]

app = FastAPI(title="Sellpoint API")

@app.on_event("startup")
def _check_config_on_startup() -> None:
    """Log provider settings and warn about a missing key or a malformed prompt."""
    LOGGER.info("Model: %s | API base: %s", CONFIG.model, CONFIG.api_base)
    if not CONFIG.has_credentials:
        LOGGER.warning("AI_API_KEY is not set; /api/generate will answer 500")
    try:
        prompt = build_prompt("-", template=load_template(CONFIG.prompt_template))
    except (OSError, ValueError) as e:
        LOGGER.warning("Failed to read prompt template: %s", e)
        return
    missing = [f for f in ("sellingPoints", *REQUIRED_TEXT_FIELDS) if f not in prompt.user]
    if missing:
        LOGGER.warning("Prompt template does not mention fields: %s", ", ".join(missing))

@app.exception_handler(UserFacingError)
def _user_facing_error(request: Request, exc: UserFacingError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    LOGGER.info("Rejected malformed body: %s", exc.errors())
    err = InputError()
    return JSONResponse(status_code=err.status_code, content={"error": err.message})

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "model": CONFIG.model}

@app.post("/api/generate", response_model=GenerateOut)
def generate(body: GenerateIn, request: Request) -> GenerateOut:
    identity = request.client.host if request.client else "unknown"
    if not LIMITER.admit(identity):
        raise AdmissionError()

    gen_request = GenerationRequest.parse(body.description)
    if not CONFIG.has_credentials:
        LOGGER.error("AI_API_KEY missing; refusing to call provider")
        raise ConfigurationError()

    result = generate_copy(gen_request, CONFIG)
    return GenerateOut(result=result.to_dict())
