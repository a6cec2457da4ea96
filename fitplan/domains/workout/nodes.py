from __future__ import annotations

from typing import Any, Callable, Dict

from fitplan.core.audit import append_event, append_iteration
from fitplan.domains.workout.schemas import DayPlan, check_day_plan
from fitplan.domains.workout.state import DayGenerationState


def _failed_attempt(
    state: DayGenerationState,
    attempt: int,
    audit: Dict[str, Any],
    error_type: str,
    detail: Any,
) -> Dict[str, Any]:
    day = state.get("day", "")
    print(f"[PLAN] attempt={attempt} day={day} failed error_type={error_type} detail={detail}")

    issues = list(state.get("issues", []))
    issues.append({"attempt": attempt, "type": error_type, "detail": detail})
    audit = append_event(audit, "attempt_failed", {"attempt": attempt, "error_type": error_type})
    return {
        "iteration": attempt,
        "issues": issues,
        "last_error": error_type,
        "audit": audit,
    }


def make_node_attempt(llm: Any) -> Callable[[DayGenerationState], Dict[str, Any]]:
    """
    Attempting(n): gọi LLM với đúng prompt cũ, validate DayPlan.
    Lỗi transport / provider / validate đều xử lý giống nhau -> thử lại (không backoff).
    """

    def node_attempt(state: DayGenerationState) -> Dict[str, Any]:
        attempt = int(state.get("iteration", 0)) + 1
        audit = append_iteration(state["audit"], attempt)

        try:
            raw = llm.generate_structured(prompt=state["prompt"], schema_model=DayPlan)
        except Exception as e:
            return _failed_attempt(state, attempt, audit, type(e).__name__, str(e))

        check = check_day_plan(raw)
        if not check.ok:
            return _failed_attempt(state, attempt, audit, "ValidationError", check.errors)

        # Repair: nhãn ngày luôn là ngày được yêu cầu
        plan = check.plan.model_copy(update={"day": state["day"]})
        audit = append_event(audit, "attempt_ok", {"attempt": attempt})
        return {"iteration": attempt, "plan": plan, "audit": audit}

    return node_attempt


def route_after_attempt(state: DayGenerationState) -> str:
    """
    - Có plan: Success -> dừng ngay
    - Hết lượt (iteration >= max_iter): Exhausted -> dừng
    - Còn lượt: Attempting(n+1)
    """
    if state.get("plan") is not None:
        return "done"
    if int(state.get("iteration", 0)) >= int(state.get("max_iter", 0)):
        return "exhausted"
    return "attempt"
