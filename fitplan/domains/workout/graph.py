from __future__ import annotations

from typing import Any, Optional

from langgraph.graph import START, END, StateGraph

from fitplan.core.audit import summarize_audit
from fitplan.core.execution import GraphExecutor
from fitplan.domains.workout.contract import MAX_ATTEMPTS
from fitplan.domains.workout.errors import GenerationExhausted
from fitplan.domains.workout.schemas import DayPlan
from fitplan.domains.workout.state import (
    DayGenerationResult,
    DayGenerationState,
    init_day_state,
    to_day_result,
)
from fitplan.domains.workout import nodes as workout_nodes


def build_day_graph(llm: Any):
    """
    Retry loop cho 1 ngày dưới dạng state machine:
    Attempting(n) -> Success | Attempting(n+1) | Exhausted
    """
    builder = StateGraph(DayGenerationState)

    builder.add_node("attempt", workout_nodes.make_node_attempt(llm))

    builder.add_edge(START, "attempt")
    builder.add_conditional_edges(
        "attempt",
        workout_nodes.route_after_attempt,
        {
            "attempt": "attempt",  # retry, cùng prompt
            "done": END,
            "exhausted": END,
        },
    )
    return builder.compile()


def run_day_generation(
    graph: Any,
    day: str,
    prompt: str,
    max_attempts: int = MAX_ATTEMPTS,
    request_id: Optional[str] = None,
) -> DayGenerationResult:
    init_state = init_day_state(day, prompt, max_attempts=max_attempts, request_id=request_id)
    # mỗi attempt là 1 step của graph
    config = {"recursion_limit": max_attempts + 2}
    return GraphExecutor.execute(graph, init_state, to_day_result, config=config)


def generate_day_plan(
    graph: Any,
    day: str,
    prompt: str,
    max_attempts: int = MAX_ATTEMPTS,
    request_id: Optional[str] = None,
) -> DayPlan:
    """Trả DayPlan đã validate, hoặc raise GenerationExhausted cho ngày đó."""
    result = run_day_generation(graph, day, prompt, max_attempts=max_attempts, request_id=request_id)
    if not result.ok:
        print(f"[PLAN] day={day} exhausted attempts={result.attempts} {summarize_audit(result.audit)}")
        raise GenerationExhausted(day, result.attempts, result.last_error)

    print(f"[PLAN] day={day} ok attempts={result.attempts}")
    return result.plan
