from __future__ import annotations

from typing import Any, Iterator, Optional, Sequence, Tuple

from django.conf import settings

from fitplan.core.audit import append_event, summarize_audit
from fitplan.core.state import generate_request_id, new_audit
from fitplan.domains.workout.contract import MAX_ATTEMPTS, WEEK_DAYS
from fitplan.domains.workout.errors import GenerationExhausted
from fitplan.domains.workout.graph import build_day_graph, generate_day_plan
from fitplan.domains.workout.schemas import DayPlan, day_plan_json
from fitplan.domains.workout.services.prompting import append_context, build_day_prompt
from fitplan.domains.workout.state import WeekPlanResult


def _max_attempts() -> int:
    return int(getattr(settings, "FITPLAN_MAX_ATTEMPTS", MAX_ATTEMPTS) or MAX_ATTEMPTS)


# ============================================================
# Single day
# ============================================================

def generate_single_day(
    llm: Any,
    day: str,
    fitness_goals: str,
    fitness_level: str,
    available_equipment: str = "",
    request_id: Optional[str] = None,
) -> DayPlan:
    """Sinh lại đúng 1 ngày, không có context tuần."""
    prompt = build_day_prompt(
        day=day,
        fitness_goals=fitness_goals,
        fitness_level=fitness_level,
        available_equipment=available_equipment,
        context="",
    )
    return generate_day_plan(build_day_graph(llm), day, prompt, max_attempts=_max_attempts(), request_id=request_id)


def edit_day_plan(
    llm: Any,
    day: str,
    existing_plan: DayPlan,
    edit_instructions: str,
    fitness_goals: str = "",
    fitness_level: str = "",
    available_equipment: str = "",
    request_id: Optional[str] = None,
) -> DayPlan:
    """
    Edit theo instructions. Prompt nhúng plan hiện tại thay cho context tuần.
    Output giữ nguyên nhãn ngày của existing_plan.
    """
    prompt = build_day_prompt(
        day=day,
        fitness_goals=fitness_goals,
        fitness_level=fitness_level,
        available_equipment=available_equipment,
        context="",
        existing_plan=existing_plan,
        edit_instructions=edit_instructions,
    )
    return generate_day_plan(
        build_day_graph(llm),
        existing_plan.day,
        prompt,
        max_attempts=_max_attempts(),
        request_id=request_id,
    )


# ============================================================
# Whole week (fold theo thứ tự ngày, context đi kèm tường minh)
# ============================================================

def _week_step(
    graph: Any,
    context: str,
    day: str,
    fitness_goals: str,
    fitness_level: str,
    available_equipment: str,
    request_id: Optional[str],
) -> Tuple[DayPlan, str]:
    """(context_n, day) -> (plan_n, context_n+1)"""
    prompt = build_day_prompt(
        day=day,
        fitness_goals=fitness_goals,
        fitness_level=fitness_level,
        available_equipment=available_equipment,
        context=context,
    )
    plan = generate_day_plan(graph, day, prompt, max_attempts=_max_attempts(), request_id=request_id)
    return plan, append_context(context, day, plan)


def iter_week(
    llm: Any,
    fitness_goals: str,
    fitness_level: str,
    available_equipment: str = "",
    days: Sequence[str] = WEEK_DAYS,
    request_id: Optional[str] = None,
) -> Iterator[DayPlan]:
    """
    Sinh tuần tự từng ngày; prompt ngày N chỉ thấy ngày 1..N-1.
    Mỗi ngày được yield ngay khi validate xong, trước khi bắt đầu ngày tiếp theo.
    """
    graph = build_day_graph(llm)
    context = ""
    for day in days:
        plan, context = _week_step(
            graph, context, day, fitness_goals, fitness_level, available_equipment, request_id
        )
        yield plan


def generate_week(
    llm: Any,
    fitness_goals: str,
    fitness_level: str,
    available_equipment: str = "",
    days: Sequence[str] = WEEK_DAYS,
    request_id: Optional[str] = None,
) -> WeekPlanResult:
    """
    Batch mode: all-or-nothing.
    1 ngày hết lượt -> raise GenerationExhausted, các ngày đã sinh bị bỏ.
    """
    request_id = request_id or generate_request_id()
    audit = new_audit()
    collected = []

    try:
        for plan in iter_week(llm, fitness_goals, fitness_level, available_equipment, days, request_id):
            collected.append(plan)
            audit = append_event(audit, "day_done", {"day": plan.day})
    except GenerationExhausted as e:
        audit = append_event(audit, "day_failed", {"day": e.day, "attempts": e.attempts})
        print(f"[WEEK] request_id={request_id} aborted day={e.day} discarded={len(collected)} {summarize_audit(audit)}")
        raise

    print(f"[WEEK] request_id={request_id} done days={len(collected)} {summarize_audit(audit)}")
    return WeekPlanResult(request_id=request_id, days=collected, audit=audit)


def stream_week_ndjson(
    llm: Any,
    fitness_goals: str,
    fitness_level: str,
    available_equipment: str = "",
    days: Sequence[str] = WEEK_DAYS,
    request_id: Optional[str] = None,
) -> Iterator[str]:
    """
    Streaming mode: mỗi ngày 1 dòng JSON + "\\n", flush ngay khi có.
    Lỗi giữa chừng -> raise lại để transport đóng kết nối, không có dòng sentinel.
    Các dòng đã gửi không thu hồi được.
    """
    request_id = request_id or generate_request_id()
    sent = 0

    try:
        for plan in iter_week(llm, fitness_goals, fitness_level, available_equipment, days, request_id):
            sent += 1
            yield day_plan_json(plan) + "\n"
    except GenerationExhausted as e:
        print(f"[WEEK] request_id={request_id} stream aborted day={e.day} sent={sent}")
        raise

    print(f"[WEEK] request_id={request_id} stream done sent={sent}")
