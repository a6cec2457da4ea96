from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# ============================================================
# Day plan schema (LLM output cho 1 ngày)
# Wire format dùng camelCase, attribute Python dùng snake_case
# ============================================================

class Exercise(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    sets: int = Field(ge=1)
    # None khi bài tập tính theo thời gian
    reps: Optional[int] = Field(default=None, ge=0)
    time_per_set_minutes: float = Field(default=0, ge=0, alias="timePerSetMinutes")

    @field_validator("time_per_set_minutes", mode="before")
    @classmethod
    def _null_time_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class Workout(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    duration_minutes: float = Field(gt=0, alias="durationMinutes")
    # Thứ tự có ý nghĩa (thứ tự hiển thị + thực hiện)
    exercises: List[Exercise] = Field(min_length=1)


class DayPlan(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: str
    warmup: str
    workout: Workout
    cooldown: str


# ============================================================
# Validate -> kết quả success/failure (không raise)
# ============================================================

@dataclass
class DayPlanCheck:
    plan: Optional[DayPlan] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.plan is not None


def check_day_plan(data: Any) -> DayPlanCheck:
    """
    Validate 1 structure bất kỳ theo DayPlan.
    Dùng chung cho service (sau mỗi lần gọi LLM) và client UI (trước khi hiển thị).
    """
    if isinstance(data, DayPlan):
        data = dump_day_plan(data)
    try:
        plan = DayPlan.model_validate(data)
    except ValidationError as e:
        return DayPlanCheck(errors=json.loads(e.json(include_url=False)))
    return DayPlanCheck(plan=plan)


def dump_day_plan(plan: DayPlan) -> Dict[str, Any]:
    return plan.model_dump(mode="json", by_alias=True)


def day_plan_json(plan: DayPlan, indent: Optional[int] = None) -> str:
    return json.dumps(dump_day_plan(plan), ensure_ascii=False, indent=indent)
