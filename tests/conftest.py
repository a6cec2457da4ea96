"""Shared fixtures: fake LLM backends and sample day plans."""

import copy
import re
from typing import Any, Callable, Dict, List, Optional

import pytest

from fitplan.domains.workout.contract import WEEK_DAYS

_DAY_IN_PROMPT = re.compile(r'para el día "([^"]+)"')


def make_day(day: str = "Lunes", **overrides: Any) -> Dict[str, Any]:
    """Valid DayPlan payload in wire (camelCase) format."""
    plan = {
        "day": day,
        "warmup": "5 minutos de movilidad articular",
        "workout": {
            "type": "Fuerza",
            "durationMinutes": 45,
            "exercises": [
                {"name": "Sentadillas", "sets": 3, "reps": 12},
                {"name": "Plancha", "sets": 3, "reps": None, "timePerSetMinutes": 1},
            ],
        },
        "cooldown": "Estiramientos suaves",
    }
    plan.update(overrides)
    return plan


def invalid_day(day: str = "Lunes") -> Dict[str, Any]:
    """Fails validation: no workout block."""
    plan = make_day(day)
    del plan["workout"]
    return plan


def day_from_prompt(prompt: str) -> str:
    m = _DAY_IN_PROMPT.search(prompt)
    assert m, "prompt does not name a day"
    return m.group(1)


class FakeLLM:
    """
    Stand-in for LLMClient.

    `script` is consumed one item per call: a dict is returned, an Exception is
    raised, a callable is called with the prompt. When the script runs out, a
    valid plan for the day named in the prompt is returned.
    """

    def __init__(self, script: Optional[List[Any]] = None) -> None:
        self.script = list(script or [])
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate_structured(self, prompt: str, schema_model: Any) -> Dict[str, Any]:
        self.prompts.append(prompt)
        if self.script:
            item = self.script.pop(0)
        else:
            item = lambda p: make_day(day_from_prompt(p))  # noqa: E731

        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(prompt)
        return copy.deepcopy(item)


class DayScriptedLLM(FakeLLM):
    """Per-day scripts: {"Miércoles": [invalid, invalid, invalid]} makes that day fail."""

    def __init__(self, per_day: Dict[str, List[Any]]) -> None:
        super().__init__()
        self.per_day = {k: list(v) for k, v in per_day.items()}

    def generate_structured(self, prompt: str, schema_model: Any) -> Dict[str, Any]:
        self.prompts.append(prompt)
        day = day_from_prompt(prompt)
        queue = self.per_day.get(day) or []
        item: Any = queue.pop(0) if queue else make_day(day)
        if isinstance(item, Exception):
            raise item
        return copy.deepcopy(item)


@pytest.fixture
def sample_day() -> Dict[str, Any]:
    return make_day("Lunes")


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def week_days() -> List[str]:
    return list(WEEK_DAYS)


@pytest.fixture
def use_llm(monkeypatch) -> Callable[[Any], Any]:
    """Route the view's LLM client to the given fake."""

    def _use(llm: Any) -> Any:
        monkeypatch.setattr("fitplan.views.get_llm_client", lambda: llm)
        return llm

    return _use
