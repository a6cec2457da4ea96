"""Tests for the per-day retry state machine."""

import pytest

from fitplan.domains.workout.errors import GenerationExhausted
from fitplan.domains.workout.graph import build_day_graph, generate_day_plan, run_day_generation
from fitplan.domains.workout.nodes import route_after_attempt
from tests.conftest import FakeLLM, invalid_day, make_day

PROMPT = 'Genera un plan de entrenamiento estructurado en formato JSON para el día "Lunes".'


def test_first_valid_attempt_stops_immediately():
    llm = FakeLLM([make_day("Lunes")])

    plan = generate_day_plan(build_day_graph(llm), "Lunes", PROMPT)

    assert plan.day == "Lunes"
    assert llm.calls == 1


def test_third_attempt_result_is_returned():
    third = make_day("Lunes", warmup="tercer intento")
    llm = FakeLLM([invalid_day(), invalid_day(), third, make_day("Lunes")])

    plan = generate_day_plan(build_day_graph(llm), "Lunes", PROMPT)

    assert plan.warmup == "tercer intento"
    assert llm.calls == 3
    # identical prompt on every attempt
    assert set(llm.prompts) == {PROMPT}


def test_exhaustion_after_three_attempts():
    llm = FakeLLM([invalid_day(), invalid_day(), invalid_day(), make_day("Lunes")])

    with pytest.raises(GenerationExhausted) as exc:
        generate_day_plan(build_day_graph(llm), "Lunes", PROMPT)

    assert exc.value.day == "Lunes"
    assert exc.value.attempts == 3
    assert exc.value.last_error == "ValidationError"
    assert llm.calls == 3
    assert exc.value.to_payload() == {"error": "No se pudo generar el plan para el día Lunes.", "day": "Lunes"}


def test_backend_errors_are_retried_like_validation_errors():
    llm = FakeLLM([ConnectionError("timeout"), RuntimeError("quota"), make_day("Lunes")])

    result = run_day_generation(build_day_graph(llm), "Lunes", PROMPT)

    assert result.ok
    assert result.attempts == 3
    assert [i["type"] for i in result.issues] == ["ConnectionError", "RuntimeError"]
    assert len(result.audit["iterations"]) == 3


def test_transport_errors_can_exhaust():
    llm = FakeLLM([ConnectionError("a"), ConnectionError("b"), ConnectionError("c")])

    with pytest.raises(GenerationExhausted) as exc:
        generate_day_plan(build_day_graph(llm), "Lunes", PROMPT)

    assert exc.value.last_error == "ConnectionError"
    assert llm.calls == 3


def test_day_label_is_pinned_to_requested_day():
    llm = FakeLLM([make_day("Monday")])

    plan = generate_day_plan(build_day_graph(llm), "Lunes", PROMPT)

    assert plan.day == "Lunes"


def test_custom_attempt_cap():
    llm = FakeLLM([invalid_day()] * 5 + [make_day("Lunes")])

    result = run_day_generation(build_day_graph(llm), "Lunes", PROMPT, max_attempts=5)

    assert not result.ok
    assert result.attempts == 5
    assert llm.calls == 5


def test_route_after_attempt():
    assert route_after_attempt({"plan": object(), "iteration": 1, "max_iter": 3}) == "done"
    assert route_after_attempt({"plan": None, "iteration": 1, "max_iter": 3}) == "attempt"
    assert route_after_attempt({"plan": None, "iteration": 3, "max_iter": 3}) == "exhausted"
