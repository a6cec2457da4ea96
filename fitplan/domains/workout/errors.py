from __future__ import annotations

from typing import Any, Dict, Optional

from fitplan.domains.workout.contract import (
    MSG_MISSING_EDIT_FIELDS,
    MSG_UNRECOGNIZED_ACTION,
    MSG_VALIDATION_FAILED,
    msg_day_exhausted,
    msg_day_failed,
)


class PlanError(Exception):
    """Base error cho plan generation."""

    message: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message or str(self)}


class InvalidRequest(PlanError):
    """Request sai shape; trả về ngay, không retry."""

    def __init__(self, details: Optional[Dict[str, Any]] = None, message: str = MSG_VALIDATION_FAILED) -> None:
        self.details = details or {}
        self.message = message
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MissingFields(InvalidRequest):
    """action=edit nhưng thiếu day / existingPlan / editInstructions."""

    def __init__(self, missing: Optional[list] = None) -> None:
        self.missing = list(missing or [])
        super().__init__(details=None, message=MSG_MISSING_EDIT_FIELDS)


class UnrecognizedAction(PlanError):
    def __init__(self, action: Any) -> None:
        self.action = action
        self.message = MSG_UNRECOGNIZED_ACTION
        super().__init__(f"{MSG_UNRECOGNIZED_ACTION} ({action!r})")


class GenerationExhausted(PlanError):
    """
    Đã thử hết số lần cho 1 ngày mà không có output hợp lệ.
    last_error chỉ dùng để log, không trả ra client.
    """

    def __init__(self, day: str, attempts: int, last_error: Optional[str] = None) -> None:
        self.day = day
        self.attempts = attempts
        self.last_error = last_error
        self.message = msg_day_failed(day)
        super().__init__(msg_day_exhausted(day, attempts))

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "day": self.day}
