"""System prompt synthesis from the athlete's optional profile fields."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from trainergate.config.coach_profile import load_coach_profile
from trainergate.core.models import InboundRequest, RecentLift


MAX_RECENT_LIFTS = 5
NO_INJURIES = "none reported"
NO_LIFTS = "none logged"
UNKNOWN_WEIGHT = "unknown"


def format_number(value: Any) -> str:
    """Render numbers the way a person would type them (``180.0`` -> ``180``)."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return ""
    return str(value).strip()


def coerce_lift(entry: Any) -> RecentLift | None:
    if not isinstance(entry, Mapping):
        return None
    name = format_number(entry.get("name"))
    best = format_number(entry.get("best"))
    if not name or not best:
        return None
    reps = format_number(entry.get("reps")) or None
    return RecentLift(name=name, best=best, reps=reps)


def render_lift(lift: RecentLift) -> str:
    if lift.reps:
        return f"{lift.name}: {lift.best}×{lift.reps}"
    return f"{lift.name}: {lift.best}"


def goal_label(goal: str, profile: Mapping[str, Any]) -> str:
    labels = profile.get("goal_labels") or {}
    return labels.get(str(goal or "").strip().lower()) or str(profile.get("default_goal_label") or "general fitness")


def render_injuries(injuries: Sequence[str]) -> str:
    if not injuries:
        return NO_INJURIES
    return ", ".join(injuries)


def render_recent_lifts(recent_lifts: Sequence[Any]) -> str:
    lifts = [coerce_lift(entry) for entry in list(recent_lifts)[:MAX_RECENT_LIFTS]]
    rendered = [render_lift(lift) for lift in lifts if lift is not None]
    return "; ".join(rendered) if rendered else NO_LIFTS


def render_weight(weight_lb: str | None) -> str:
    return f"{weight_lb} lb" if weight_lb else UNKNOWN_WEIGHT


def build_system_prompt(inbound: InboundRequest, profile: Mapping[str, Any] | None = None) -> str:
    """
    Assemble the coaching instruction sent with role ``system``.

    Only the first ``MAX_RECENT_LIFTS`` lifts are considered so the prompt stays bounded.
    Unknown goals fall back to the profile's default label.
    """
    resolved = profile if profile is not None else load_coach_profile()
    lines = [
        str(resolved.get("persona") or "").strip(),
        "Athlete profile:",
        f"- Goal: {goal_label(inbound.goal, resolved)}",
        f"- Injuries: {render_injuries(inbound.injuries)}",
        f"- Body weight: {render_weight(inbound.weight_lb)}",
        f"- Recent lifts: {render_recent_lifts(inbound.recent_lifts)}",
        "Guidelines:",
    ]
    lines.extend(f"- {directive}" for directive in resolved.get("directives") or [])
    return "\n".join(line for line in lines if line)
