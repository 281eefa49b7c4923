import json

import pytest

from trainergate.adapters.trainer.mapper import (
    parse_inbound_request,
    to_outbound_result,
    to_upstream_request,
)
from trainergate.core.errors import InvalidBodyError, MissingFieldError


def _body(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.mark.parametrize("user_text", ["", "   ", None, 0])
def test_blank_user_text_rejected(user_text):
    with pytest.raises(MissingFieldError):
        parse_inbound_request(_body({"userText": user_text}))


def test_absent_user_text_rejected():
    with pytest.raises(MissingFieldError):
        parse_inbound_request(_body({"goal": "gain"}))


def test_non_object_json_counts_as_missing_user_text():
    with pytest.raises(MissingFieldError):
        parse_inbound_request(b'["userText"]')


@pytest.mark.parametrize("raw", [b'{"userText": "hi"', b"not json", b"\xff\xfe"])
def test_malformed_body_rejected(raw):
    with pytest.raises(InvalidBodyError):
        parse_inbound_request(raw)


def test_optional_fields_defaulted_individually():
    inbound = parse_inbound_request(
        _body(
            {
                "userText": "  help  ",
                "memory": "not a mapping",
                "goal": True,
                "injuries": {"knee": True},
                "weightLb": [180],
                "recentLifts": "bench 225",
            }
        )
    )
    assert inbound.user_text == "help"
    assert inbound.memory is None
    assert inbound.goal == ""
    assert inbound.injuries == []
    assert inbound.weight_lb is None
    assert inbound.recent_lifts == []


def test_optional_fields_coerced():
    inbound = parse_inbound_request(
        _body(
            {
                "userText": 12,
                "memory": {"lastSession": "legs"},
                "goal": " gain ",
                "injuries": ["shoulder", "", None, "  ankle "],
                "weightLb": 181.0,
                "recentLifts": [{"name": "bench", "best": 225, "reps": 5}],
            }
        )
    )
    assert inbound.user_text == "12"
    assert inbound.memory == {"lastSession": "legs"}
    assert inbound.goal == "gain"
    assert inbound.injuries == ["shoulder", "ankle"]
    assert inbound.weight_lb == "181"
    assert len(inbound.recent_lifts) == 1


def test_single_injury_string_becomes_list():
    inbound = parse_inbound_request(_body({"userText": "x", "injuries": "tennis elbow"}))
    assert inbound.injuries == ["tennis elbow"]


def test_upstream_request_has_system_then_user():
    request = to_upstream_request("gpt-4o-mini", "be a coach", "what now?")
    dumped = request.model_dump()
    assert dumped == {
        "model": "gpt-4o-mini",
        "input": [
            {"role": "system", "content": "be a coach"},
            {"role": "user", "content": "what now?"},
        ],
    }


def test_outbound_echo_includes_memory_only_when_supplied():
    with_memory = parse_inbound_request(_body({"userText": "q", "memory": {"a": 1}}))
    without_memory = parse_inbound_request(_body({"userText": "q"}))

    assert to_outbound_result("t", with_memory).model_dump() == {
        "text": "t",
        "echo": {"userText": "q", "memory": {"a": 1}},
    }
    assert to_outbound_result("t", without_memory).model_dump() == {"text": "t", "echo": {"userText": "q"}}
