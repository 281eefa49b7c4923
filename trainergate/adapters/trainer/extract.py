"""Plain-text extraction from the completion service's variably-shaped reply."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

FALLBACK_TEXT = "Coach online. Ask about training, injuries, or nutrition."
FRAGMENT_SEPARATOR = " "


@dataclass(slots=True, frozen=True)
class FlatTextShape:
    text: str


@dataclass(slots=True, frozen=True)
class OutputBlocksShape:
    blocks: list[Any] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class UnrecognizedShape:
    pass


ResponseShape = Union[FlatTextShape, OutputBlocksShape, UnrecognizedShape]


def classify_shapes(payload: Any) -> list[ResponseShape]:
    """Return every shape present in ``payload`` in resolution order."""
    if not isinstance(payload, dict):
        return [UnrecognizedShape()]
    shapes: list[ResponseShape] = []
    output_text = payload.get("output_text")
    if isinstance(output_text, str) and output_text.strip():
        shapes.append(FlatTextShape(text=output_text))
    output = payload.get("output")
    if isinstance(output, list) and output:
        shapes.append(OutputBlocksShape(blocks=output))
    return shapes or [UnrecognizedShape()]


def _block_fragments(block: Any) -> list[str]:
    if not isinstance(block, dict):
        return []
    content = block.get("content")
    if isinstance(content, str):
        return [content]
    if isinstance(content, list):
        parts = [part["text"] for part in content if isinstance(part, dict) and isinstance(part.get("text"), str)]
        if parts:
            return parts
    if isinstance(block.get("text"), str):
        return [block["text"]]
    return []


def text_from_shape(shape: ResponseShape) -> str:
    if isinstance(shape, FlatTextShape):
        return shape.text.strip()
    if isinstance(shape, OutputBlocksShape):
        fragments: list[str] = []
        for block in shape.blocks:
            fragments.extend(fragment.strip() for fragment in _block_fragments(block))
        return FRAGMENT_SEPARATOR.join(fragment for fragment in fragments if fragment).strip()
    return ""


def extract_text(payload: Any, fallback: str = FALLBACK_TEXT) -> str:
    """Best plain-text answer from ``payload``; the fallback stands in when no text is found."""
    for shape in classify_shapes(payload):
        text = text_from_shape(shape)
        if text:
            return text
    return fallback
