"""Project error hierarchy."""

from __future__ import annotations


class TrainerGateError(Exception):
    """Base error."""

    status_code = 500
    reason = "trainer_error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.reason)
        self.detail = detail or self.reason


class InvalidBodyError(TrainerGateError):
    """Raised when the request body is not valid JSON."""

    status_code = 400
    reason = "invalid_json"


class MissingFieldError(TrainerGateError):
    """Raised when a required field is absent or blank."""

    status_code = 400
    reason = "missing_user_text"


class UpstreamError(TrainerGateError):
    """Raised when the completion service fails or cannot be reached."""

    status_code = 502

    def __init__(self, reason: str, detail: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(detail)
        self.reason = reason
        self.status = status
        self.body = body
