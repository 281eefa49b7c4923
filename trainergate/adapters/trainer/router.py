"""Trainer coach route: validate, build the coaching prompt, call upstream, extract text."""

from __future__ import annotations

import logging
import sys
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from trainergate.adapters.trainer.extract import extract_text
from trainergate.adapters.trainer.mapper import parse_inbound_request, to_outbound_result
from trainergate.adapters.trainer.upstream import UpstreamCaller, usable_api_key
from trainergate.config.settings import settings
from trainergate.core.errors import TrainerGateError, UpstreamError
from trainergate.core.models import InboundRequest
from trainergate.core.prompt import build_system_prompt
from trainergate.observability.logging import log_event
from trainergate.observability.metrics import emit_counter
from trainergate.util.debug_excerpt import debug_log_original
from trainergate.util.logger import logger


router = APIRouter()

BACKEND_UNAVAILABLE_TEXT = (
    "Coach backend unavailable: the server has no completion service API key configured. "
    "Please try again later."
)
_ALLOWED_METHODS = "GET, POST, OPTIONS"
_DEBUG_HEADERS_REDACT = frozenset({"authorization", "cookie", "x-api-key"})


def _cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Methods": _ALLOWED_METHODS,
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
    }


def _json(content: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=_cors_headers())


def _error_response(exc: TrainerGateError) -> JSONResponse:
    content: dict[str, Any] = {"error": exc.reason, "detail": exc.detail}
    if isinstance(exc, UpstreamError):
        content["status"] = exc.status
        content["body"] = exc.body
    emit_counter("trainer_request_failed", labels={"reason": exc.reason})
    return _json(content, status_code=exc.status_code)


def _runtime_label() -> str:
    return f"python{sys.version_info.major}.{sys.version_info.minor}"


def _log_request_if_debug(request: Request, inbound: InboundRequest, body_size: int) -> None:
    """At DEBUG, log method/path/headers and a truncated user text; the full body only when configured."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    headers_safe = {}
    for k, v in request.headers.items():
        key_lower = k.lower()
        if key_lower in _DEBUG_HEADERS_REDACT or "key" in key_lower or "token" in key_lower:
            headers_safe[k] = "***"
        else:
            headers_safe[k] = v
    logger.debug(
        "incoming trainer request method=%s path=%s headers=%s body_size=%d goal=%s injuries=%d lifts=%d",
        request.method,
        request.url.path,
        headers_safe,
        body_size,
        inbound.goal or "-",
        len(inbound.injuries),
        len(inbound.recent_lifts),
    )
    if settings.log_full_request_body:
        logger.debug("incoming trainer request body:\n%s", inbound.model_dump_json(indent=2))
    else:
        debug_log_original("trainer_user_text", inbound.user_text)


def _build_upstream_caller(api_key: str) -> UpstreamCaller:
    return UpstreamCaller(api_key, base_url=settings.upstream_base_url, model=settings.upstream_model)


@router.options("")
async def trainer_preflight() -> Response:
    return Response(status_code=204, headers=_cors_headers())


@router.get("")
async def trainer_info() -> JSONResponse:
    return _json({"ok": True, "route": settings.route_path, "runtime": _runtime_label()})


@router.post("")
async def trainer(request: Request) -> JSONResponse:
    body = await request.body()
    if settings.max_request_body_bytes > 0 and len(body) > settings.max_request_body_bytes:
        logger.warning(
            "trainer reject oversize request actual_size=%s max=%s",
            len(body),
            settings.max_request_body_bytes,
        )
        return _json(
            {"error": "request_body_too_large", "detail": f"request body exceeds {settings.max_request_body_bytes} bytes"},
            status_code=413,
        )

    try:
        inbound = parse_inbound_request(body)
    except TrainerGateError as exc:
        logger.info("trainer request rejected reason=%s", exc.reason)
        return _error_response(exc)
    _log_request_if_debug(request, inbound, len(body))

    system_prompt = build_system_prompt(inbound)
    api_key = usable_api_key(settings.openai_api_key)
    if not api_key:
        logger.warning("trainer backend unavailable: api key missing or malformed")
        log_event("trainer.degraded", reason="missing_api_key")
        return _json(to_outbound_result(BACKEND_UNAVAILABLE_TEXT, inbound).model_dump())

    caller = _build_upstream_caller(api_key)
    try:
        payload = await caller.complete(system_prompt, inbound.user_text)
    except UpstreamError as exc:
        logger.warning("trainer upstream failed reason=%s status=%s", exc.reason, exc.status)
        return _error_response(exc)

    text = extract_text(payload)
    log_event("trainer.answered", model=caller.model, text_chars=len(text))
    return _json(to_outbound_result(text, inbound).model_dump())


@router.api_route("", methods=["PUT", "PATCH", "DELETE"])
async def trainer_method_not_allowed(request: Request) -> JSONResponse:
    response = _json(
        {"error": "method_not_allowed", "detail": f"{request.method} not supported; use POST with {{ userText }}"},
        status_code=405,
    )
    response.headers["Allow"] = _ALLOWED_METHODS
    return response
