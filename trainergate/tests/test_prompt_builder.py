from trainergate.core.models import InboundRequest
from trainergate.core.prompt import (
    MAX_RECENT_LIFTS,
    build_system_prompt,
    coerce_lift,
    render_recent_lifts,
)


def _inbound(**fields) -> InboundRequest:
    return InboundRequest(user_text="how do I bench more?", **fields)


def test_goal_lose_maps_to_fat_loss_label():
    prompt = build_system_prompt(_inbound(goal="lose"))
    assert "fat loss & mild deficit" in prompt
    assert "Goal: lose" not in prompt


def test_goal_lookup_is_case_insensitive():
    prompt = build_system_prompt(_inbound(goal="  Strength "))
    assert "Goal: max strength" in prompt


def test_unknown_or_missing_goal_defaults_to_general_fitness():
    assert "Goal: general fitness" in build_system_prompt(_inbound(goal="bulk-ish"))
    assert "Goal: general fitness" in build_system_prompt(_inbound())


def test_injuries_placeholder_and_order():
    assert "Injuries: none reported" in build_system_prompt(_inbound())
    prompt = build_system_prompt(_inbound(injuries=["left knee", "lower back"]))
    assert "Injuries: left knee, lower back" in prompt


def test_weight_renders_with_unit_or_unknown():
    assert "Body weight: 182 lb" in build_system_prompt(_inbound(weight_lb="182"))
    assert "Body weight: unknown" in build_system_prompt(_inbound())


def test_recent_lifts_capped_to_first_five():
    lifts = [{"name": f"lift{i}", "best": 100 + i, "reps": 5} for i in range(8)]
    prompt = build_system_prompt(_inbound(recent_lifts=lifts))

    for i in range(MAX_RECENT_LIFTS):
        assert f"lift{i}: {100 + i}×5" in prompt
    for i in range(MAX_RECENT_LIFTS, 8):
        assert f"lift{i}" not in prompt


def test_recent_lifts_reps_optional_and_malformed_entries_skipped():
    rendered = render_recent_lifts(
        [
            {"name": "squat", "best": 315.0},
            "not a lift",
            {"name": "deadlift"},
            {"name": "press", "best": "135", "reps": 3},
        ]
    )
    assert rendered == "squat: 315; press: 135×3"


def test_recent_lifts_placeholder_when_nothing_renderable():
    assert render_recent_lifts([]) == "none logged"
    assert render_recent_lifts([None, {"best": 100}]) == "none logged"


def test_coerce_lift_rejects_non_mapping():
    assert coerce_lift(["squat", 300]) is None


def test_fixed_directives_present_regardless_of_input():
    bare = build_system_prompt(_inbound())
    full = build_system_prompt(_inbound(goal="gain", injuries=["wrist"], weight_lb="170"))
    for prompt in (bare, full):
        assert "g/kg" in prompt
        assert "substitutions" in prompt
        assert "medical" in prompt
        assert "short" in prompt


def test_custom_profile_overrides_labels_and_directives():
    profile = {
        "persona": "You are a rowing coach.",
        "goal_labels": {"erg": "2k erg pace"},
        "default_goal_label": "rowing fitness",
        "directives": ["Mention stroke rate."],
    }
    prompt = build_system_prompt(_inbound(goal="erg"), profile=profile)
    assert prompt.startswith("You are a rowing coach.")
    assert "Goal: 2k erg pace" in prompt
    assert "- Mention stroke rate." in prompt
    assert "rowing fitness" in build_system_prompt(_inbound(goal="lose"), profile=profile)
