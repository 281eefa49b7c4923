"""Internal transport models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RecentLift(BaseModel):
    name: str
    best: str
    reps: str | None = None


class InboundRequest(BaseModel):
    user_text: str
    memory: dict[str, Any] | None = None
    goal: str = ""
    injuries: list[str] = Field(default_factory=list)
    weight_lb: str | None = None
    recent_lifts: list[Any] = Field(default_factory=list)


class InputMessage(BaseModel):
    role: str
    content: str


class UpstreamRequest(BaseModel):
    model: str
    input: list[InputMessage] = Field(default_factory=list)


class OutboundResult(BaseModel):
    text: str
    echo: dict[str, Any] = Field(default_factory=dict)
