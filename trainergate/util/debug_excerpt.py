"""
Truncated excerpts of user text and upstream bodies for DEBUG logs.
Callers only log through here when TRAINER_LOG_LEVEL=debug; this module only trims and formats.
"""

from __future__ import annotations

import logging

from trainergate.util.logger import logger

DEFAULT_EXCERPT_MAX_LEN = 500


def excerpt_for_debug(text: str, max_len: int = DEFAULT_EXCERPT_MAX_LEN) -> str:
    """Trim ``text`` to a readable excerpt without touching the original."""
    if not text:
        return ""
    s = str(text).strip()
    if len(s) <= max_len:
        return s
    return f"{s[:max_len]} ... [truncated, total {len(s)} chars]"


def debug_log_original(
    label: str,
    original_text: str,
    *,
    reason: str | None = None,
    max_len: int = DEFAULT_EXCERPT_MAX_LEN,
) -> None:
    """
    Log one excerpt line when DEBUG is enabled.
    label: e.g. "trainer_user_text", "upstream_error_body"
    reason: optional failure reason attached to the line
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    excerpt = excerpt_for_debug(original_text, max_len=max_len)
    if reason:
        logger.debug("%s excerpt reason=%s text=%s", label, reason, excerpt)
    else:
        logger.debug("%s excerpt text=%s", label, excerpt)
