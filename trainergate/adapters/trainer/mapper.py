"""Trainer wire payloads <-> internal model mapping."""

from __future__ import annotations

import json
from typing import Any

from trainergate.core.errors import InvalidBodyError, MissingFieldError
from trainergate.core.models import InboundRequest, InputMessage, OutboundResult, UpstreamRequest
from trainergate.core.prompt import format_number


def _coerce_user_text(value: Any) -> str:
    return str(value or "").strip()


def _coerce_injuries(value: Any) -> list[str]:
    if isinstance(value, str):
        items: list[Any] = [value]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return []
    injuries: list[str] = []
    for item in items:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            injuries.append(text)
    return injuries


def _coerce_weight(value: Any) -> str | None:
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return format_number(value) or None
    return None


def decode_body(body: bytes) -> Any:
    try:
        return json.loads(body.decode("utf-8"))
    except ValueError as exc:
        raise InvalidBodyError("Invalid JSON body") from exc


def to_inbound_request(payload: Any) -> InboundRequest:
    """Validate ``userText`` and default every optional field individually."""
    if not isinstance(payload, dict):
        payload = {}
    user_text = _coerce_user_text(payload.get("userText"))
    if not user_text:
        raise MissingFieldError("Missing userText")

    memory = payload.get("memory")
    recent_lifts = payload.get("recentLifts")
    goal = payload.get("goal")
    return InboundRequest(
        user_text=user_text,
        memory=memory if isinstance(memory, dict) else None,
        goal=str(goal).strip() if isinstance(goal, (str, int, float)) and not isinstance(goal, bool) else "",
        injuries=_coerce_injuries(payload.get("injuries")),
        weight_lb=_coerce_weight(payload.get("weightLb")),
        recent_lifts=list(recent_lifts) if isinstance(recent_lifts, list) else [],
    )


def parse_inbound_request(body: bytes) -> InboundRequest:
    return to_inbound_request(decode_body(body))


def to_upstream_request(model: str, system_prompt: str, user_text: str) -> UpstreamRequest:
    return UpstreamRequest(
        model=model,
        input=[
            InputMessage(role="system", content=system_prompt),
            InputMessage(role="user", content=user_text),
        ],
    )


def to_outbound_result(text: str, inbound: InboundRequest) -> OutboundResult:
    echo: dict[str, Any] = {"userText": inbound.user_text}
    if inbound.memory is not None:
        echo["memory"] = inbound.memory
    return OutboundResult(text=text, echo=echo)
