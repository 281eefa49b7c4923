"""
Completion service client: builds the outbound Responses request and maps failures to UpstreamError.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx

from trainergate.adapters.trainer.mapper import to_upstream_request
from trainergate.config.settings import settings
from trainergate.core.errors import UpstreamError
from trainergate.core.models import UpstreamRequest
from trainergate.util.debug_excerpt import debug_log_original
from trainergate.util.logger import logger

RESPONSES_PATH = "/responses"

_upstream_async_client: httpx.AsyncClient | None = None
_upstream_client_lock: Any = None


def _upstream_http_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=max(10, int(settings.upstream_max_connections)),
        max_keepalive_connections=max(5, int(settings.upstream_max_keepalive_connections)),
    )


def _upstream_http_timeout() -> httpx.Timeout:
    timeout = float(settings.upstream_timeout_seconds)
    return httpx.Timeout(connect=timeout, read=timeout, write=timeout, pool=timeout)


async def _get_upstream_async_client() -> httpx.AsyncClient:
    global _upstream_async_client, _upstream_client_lock
    if _upstream_async_client is not None:
        return _upstream_async_client
    if _upstream_client_lock is None:
        _upstream_client_lock = asyncio.Lock()
    async with _upstream_client_lock:
        if _upstream_async_client is None:
            _upstream_async_client = httpx.AsyncClient(
                timeout=_upstream_http_timeout(),
                limits=_upstream_http_limits(),
            )
    return _upstream_async_client


async def close_upstream_async_client() -> None:
    global _upstream_async_client
    if _upstream_async_client is not None:
        await _upstream_async_client.aclose()
        _upstream_async_client = None


def usable_api_key(raw: str | None) -> str:
    """Return the trimmed key, or "" when it is absent or cannot go into a header."""
    candidate = (raw or "").strip()
    if not candidate:
        return ""
    if any(ch.isspace() or not ch.isprintable() for ch in candidate):
        return ""
    return candidate


def _truncate(text: str, limit: int | None = None) -> str:
    max_chars = settings.upstream_error_body_max_chars if limit is None else limit
    if max_chars <= 0:
        return text
    return text[:max_chars]


class UpstreamCaller:
    """One best-effort call to the completion service per ``complete``; no retries."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        model: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        key = usable_api_key(api_key)
        if not key:
            raise ValueError("missing_or_malformed_api_key")
        self._api_key = key
        self.base_url = (base_url or settings.upstream_base_url).strip().rstrip("/")
        self.model = model or settings.upstream_model
        self._client = client

    @property
    def url(self) -> str:
        return f"{self.base_url}{RESPONSES_PATH}"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def _client_for_call(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await _get_upstream_async_client()

    async def send(self, request: UpstreamRequest) -> Any:
        body = json.dumps(request.model_dump(), ensure_ascii=False).encode("utf-8")
        logger.debug("upstream call start url=%s model=%s payload_bytes=%d", self.url, request.model, len(body))
        client = await self._client_for_call()
        try:
            response = await client.post(self.url, content=body, headers=self._headers())
        except httpx.HTTPError as exc:
            detail = (str(exc) or "").strip() or "connection_failed_or_timeout"
            logger.warning("upstream call http_error url=%s error=%s", self.url, detail)
            raise UpstreamError(
                "upstream_unreachable",
                "Failed to reach the completion service",
                body=_truncate(detail),
            ) from exc

        logger.debug("upstream call done url=%s status=%s", self.url, response.status_code)
        if response.status_code < 200 or response.status_code >= 300:
            error_text = response.content.decode("utf-8", errors="replace")
            debug_log_original("upstream_error_body", error_text, reason=str(response.status_code))
            logger.warning("upstream call rejected url=%s status=%s", self.url, response.status_code)
            raise UpstreamError(
                "upstream_http_error",
                "Upstream error",
                status=response.status_code,
                body=_truncate(error_text),
            )
        try:
            return response.json()
        except ValueError as exc:
            error_text = response.content.decode("utf-8", errors="replace")
            logger.warning("upstream call returned non-json url=%s status=%s", self.url, response.status_code)
            raise UpstreamError(
                "upstream_invalid_response",
                "Upstream returned a non-JSON body",
                status=response.status_code,
                body=_truncate(error_text),
            ) from exc

    async def complete(self, system_prompt: str, user_text: str) -> Any:
        return await self.send(to_upstream_request(self.model, system_prompt, user_text))
