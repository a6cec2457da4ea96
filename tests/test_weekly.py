"""Tests for whole-week generation (batch and streaming) and single-day flows."""

import json

import pytest

from fitplan.domains.workout.contract import WEEK_DAYS
from fitplan.domains.workout.errors import GenerationExhausted
from fitplan.domains.workout.schemas import DayPlan, check_day_plan
from fitplan.domains.workout.services.planning import (
    edit_day_plan,
    generate_single_day,
    generate_week,
    iter_week,
    stream_week_ndjson,
)
from tests.conftest import DayScriptedLLM, FakeLLM, day_from_prompt, invalid_day, make_day


def test_week_has_seven_days_in_fixed_order(fake_llm):
    result = generate_week(fake_llm, "ganar masa muscular", "Intermedio")

    assert [p.day for p in result.days] == list(WEEK_DAYS)
    assert fake_llm.calls == 7
    assert [e["name"] for e in result.audit["events"]] == ["day_done"] * 7


def test_context_is_strictly_causal(fake_llm):
    list(iter_week(fake_llm, "resistencia", "Avanzado"))

    for n, prompt in enumerate(fake_llm.prompts):
        assert day_from_prompt(prompt) == WEEK_DAYS[n]
        for earlier in WEEK_DAYS[:n]:
            assert f"Día {earlier}:" in prompt
        for later in WEEK_DAYS[n:]:
            assert f"Día {later}:" not in prompt


def test_retry_counter_is_per_day():
    # two failures on Lunes, two on Martes: each day still has its own 3 attempts
    llm = DayScriptedLLM({
        "Lunes": [invalid_day("Lunes"), invalid_day("Lunes")],
        "Martes": [ValueError("x"), invalid_day("Martes")],
    })

    result = generate_week(llm, "movilidad", "Principiante")

    assert len(result.days) == 7
    assert llm.calls == 7 + 4


def test_batch_is_all_or_nothing():
    llm = DayScriptedLLM({"Miércoles": [invalid_day("Miércoles")] * 3})

    with pytest.raises(GenerationExhausted) as exc:
        generate_week(llm, "perder peso", "Intermedio")

    assert exc.value.day == "Miércoles"
    # Lunes, Martes once each; Miércoles three times; nothing after
    assert llm.calls == 5
    assert all(day_from_prompt(p) != "Jueves" for p in llm.prompts)


def test_stream_emits_one_valid_json_line_per_day(fake_llm):
    lines = list(stream_week_ndjson(fake_llm, "perder peso", "Intermedio"))

    assert len(lines) == 7
    assert all(line.endswith("\n") and line.count("\n") == 1 for line in lines)
    assert [json.loads(line)["day"] for line in lines] == list(WEEK_DAYS)


def test_stream_stops_at_failure_point():
    llm = DayScriptedLLM({"Jueves": [RuntimeError("boom")] * 3})
    stream = stream_week_ndjson(llm, "perder peso", "Intermedio")

    received = []
    with pytest.raises(GenerationExhausted):
        for line in stream:
            received.append(line)

    assert len(received) == 3
    for line in received:
        assert check_day_plan(json.loads(line)).ok
    assert all(day_from_prompt(p) in ("Lunes", "Martes", "Miércoles", "Jueves") for p in llm.prompts)


def test_stream_yields_before_next_day_starts(fake_llm):
    stream = stream_week_ndjson(fake_llm, "perder peso", "Intermedio")

    first = next(stream)

    assert json.loads(first)["day"] == "Lunes"
    assert fake_llm.calls == 1


def test_single_day_has_no_week_context(fake_llm):
    plan = generate_single_day(fake_llm, "Lunes", "lose weight", "beginner")

    assert plan.day == "Lunes"
    assert len(plan.workout.exercises) >= 1
    assert "Día " not in fake_llm.prompts[0]


def test_edit_preserves_existing_day_label():
    existing = DayPlan.model_validate(make_day("Lunes"))
    llm = FakeLLM([make_day("Martes", warmup="con cardio")])

    plan = edit_day_plan(llm, "Lunes", existing, "add 10 minutes of cardio")

    assert plan.day == "Lunes"
    assert plan.warmup == "con cardio"
    assert "add 10 minutes of cardio" in llm.prompts[0]


def test_edit_exhaustion_names_the_day():
    existing = DayPlan.model_validate(make_day("Sábado"))
    llm = FakeLLM([invalid_day()] * 3)

    with pytest.raises(GenerationExhausted) as exc:
        edit_day_plan(llm, "Sábado", existing, "más corto")

    assert exc.value.day == "Sábado"


@pytest.mark.parametrize("attempts", [1, 2])
def test_max_attempts_follows_settings(settings, attempts):
    settings.FITPLAN_MAX_ATTEMPTS = attempts
    llm = FakeLLM([invalid_day()] * 3)

    with pytest.raises(GenerationExhausted):
        generate_single_day(llm, "Lunes", "x", "y")

    assert llm.calls == attempts
