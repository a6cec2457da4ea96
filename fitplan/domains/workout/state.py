from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fitplan.core.state import BaseGraphState, BaseResult, generate_request_id, new_audit
from fitplan.domains.workout.contract import MAX_ATTEMPTS
from fitplan.domains.workout.schemas import DayPlan


class DayGenerationState(BaseGraphState, total=False):
    """
    State của retry loop cho 1 ngày.
    iteration = số attempt đã chạy, max_iter = trần attempt (3).
    issues = lỗi từng attempt (để log), plan = DayPlan đã validate.
    """
    day: str
    prompt: str
    plan: Optional[DayPlan]
    last_error: Optional[str]


@dataclass
class DayGenerationResult(BaseResult):
    day: str = ""
    plan: Optional[DayPlan] = None
    attempts: int = 0
    last_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.plan is not None


@dataclass
class WeekPlanResult(BaseResult):
    """Kết quả sinh cả tuần (batch mode)"""
    days: List[DayPlan] = field(default_factory=list)


def init_day_state(
    day: str,
    prompt: str,
    max_attempts: int = MAX_ATTEMPTS,
    request_id: Optional[str] = None,
) -> DayGenerationState:
    # Mỗi ngày 1 state mới -> counter không bao giờ dính sang ngày sau
    return DayGenerationState(
        request_id=request_id or generate_request_id(),
        raw_input={"day": day},
        day=day,
        prompt=prompt,
        plan=None,
        last_error=None,
        iteration=0,
        max_iter=max_attempts,
        issues=[],
        warnings=[],
        audit=new_audit(),
    )


def to_day_result(state: Dict[str, Any]) -> DayGenerationResult:
    return DayGenerationResult(
        request_id=state["request_id"],
        day=state.get("day", ""),
        plan=state.get("plan"),
        attempts=int(state.get("iteration", 0)),
        last_error=state.get("last_error"),
        issues=state.get("issues", []),
        warnings=state.get("warnings", []),
        audit=state.get("audit", new_audit()),
    )
