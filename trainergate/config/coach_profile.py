"""Coach profile loader (goal labels and fixed directives) with mtime-based cache."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from threading import Lock
from typing import Any

import yaml

from trainergate.config.settings import settings
from trainergate.util.logger import logger


_DEFAULT_PROFILE: dict[str, Any] = {
    "persona": "You are a concise, practical strength and nutrition coach.",
    "goal_labels": {
        "gain": "hypertrophy & mild surplus",
        "lose": "fat loss & mild deficit",
        "tone": "recomposition",
        "strength": "max strength",
    },
    "default_goal_label": "general fitness",
    "directives": [
        "Keep answers short, specific and actionable.",
        "If the athlete reports injuries, suggest conservative, safe exercise substitutions that avoid the injured area.",
        "If asked about nutrition, include a quick macro rule of thumb in grams per kilogram of body weight"
        " (for example protein 1.6-2.2 g/kg, fat 0.6-1 g/kg, carbs fill the rest).",
        "Do not diagnose conditions or make medical claims; refer medical questions to a qualified professional.",
    ],
}

_CACHE_LOCK = Lock()
_CACHE_PATH = ""
_CACHE_MTIME_NS = -1
_CACHE_PROFILE: dict[str, Any] | None = None


def _resolve_profile_file(path: str) -> Path:
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    app_root = Path(__file__).resolve().parents[2]
    candidates = [Path.cwd() / candidate, app_root / candidate]
    for item in candidates:
        if item.exists():
            return item.resolve()
    return candidates[-1].resolve()


def _merge_profile(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if key == "goal_labels" and isinstance(value, dict):
            labels = dict(base.get("goal_labels", {}))
            labels.update({str(k).strip().lower(): str(v) for k, v in value.items()})
            base["goal_labels"] = labels
        elif key == "directives" and isinstance(value, list):
            base["directives"] = [str(item).strip() for item in value if str(item).strip()]
        elif key in {"persona", "default_goal_label"} and isinstance(value, str) and value.strip():
            base[key] = value.strip()
        else:
            logger.warning("coach profile ignores unknown or malformed key=%s", key)
    return base


def load_coach_profile(path: str | None = None) -> dict[str, Any]:
    global _CACHE_PATH, _CACHE_MTIME_NS, _CACHE_PROFILE

    profile_path = _resolve_profile_file(path or settings.coach_profile_path)
    path_key = str(profile_path)
    mtime_ns = profile_path.stat().st_mtime_ns if profile_path.exists() else -1

    with _CACHE_LOCK:
        if _CACHE_PROFILE is not None and _CACHE_PATH == path_key and _CACHE_MTIME_NS == mtime_ns:
            return deepcopy(_CACHE_PROFILE)

        profile = deepcopy(_DEFAULT_PROFILE)
        if profile_path.exists():
            raw = yaml.safe_load(profile_path.read_text(encoding="utf-8")) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"coach profile file must be a mapping: {profile_path}")
            profile = _merge_profile(profile, raw)
            logger.info("coach profile loaded path=%s", profile_path)
        else:
            logger.info("coach profile file not found, using defaults path=%s", profile_path)

        _CACHE_PATH = path_key
        _CACHE_MTIME_NS = mtime_ns
        _CACHE_PROFILE = profile
        return deepcopy(profile)
