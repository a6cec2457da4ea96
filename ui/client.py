from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import requests

from fitplan.domains.workout.contract import WEEK_DAYS
from fitplan.domains.workout.schemas import DayPlan, check_day_plan, dump_day_plan

DEFAULT_BACKEND_URL = os.getenv("FITPLAN_BACKEND_URL", "http://localhost:8000")
DEFAULT_FITNESS_LEVEL = "Intermedio"


class PlanClientError(Exception):
    """Lỗi hiển thị được cho user (message lấy từ {"error": ...} của server nếu có)."""


def _error_message(resp: requests.Response, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


@dataclass
class PlanClient:
    """
    HTTP client cho /api/fitness-plan/.
    Mọi structure nhận về đều validate lại bằng DayPlan trước khi trả cho UI;
    cái nào fail thì bị loại và ghi vào `rejected`.
    """

    base_url: str = DEFAULT_BACKEND_URL
    timeout: float = 300.0
    fitness_level: str = DEFAULT_FITNESS_LEVEL
    rejected: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.session = requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/fitness-plan/"

    # -----------------------------
    # Helpers
    # -----------------------------
    def _post(self, payload: Dict[str, Any], default_error: str, stream: bool = False) -> requests.Response:
        # rejected chỉ phản ánh request gần nhất
        self.rejected.clear()
        try:
            resp = self.session.post(self.endpoint, json=payload, timeout=self.timeout, stream=stream)
        except requests.RequestException as e:
            raise PlanClientError(default_error) from e

        if not resp.ok:
            raise PlanClientError(_error_message(resp, default_error))
        return resp

    def _accept(self, data: Any) -> Optional[DayPlan]:
        check = check_day_plan(data)
        if not check.ok:
            self.rejected.append({"data": data, "errors": check.errors})
            return None
        return check.plan

    def _base_payload(self, action: str, goals: str, level: Optional[str], equipment: str) -> Dict[str, Any]:
        return {
            "action": action,
            "fitnessGoals": goals,
            "fitnessLevel": level or self.fitness_level,
            "availableEquipment": equipment or "",
        }

    # -----------------------------
    # Whole week
    # -----------------------------
    def generate_week(self, goals: str, level: Optional[str] = None, equipment: str = "") -> List[DayPlan]:
        """Batch: nhận JSON array 7 ngày; 1 ngày không hợp lệ -> cả tuần bị loại."""
        payload = self._base_payload("generate", goals, level, equipment)
        payload["stream"] = False
        resp = self._post(payload, "Error al generar el plan de entrenamiento.")

        try:
            data = resp.json()
        except ValueError as e:
            raise PlanClientError("Respuesta inválida del servidor.") from e
        if not isinstance(data, list):
            raise PlanClientError("Respuesta inválida del servidor.")

        plans = [self._accept(item) for item in data]
        if any(p is None for p in plans) or len(plans) != len(WEEK_DAYS):
            raise PlanClientError("El plan recibido no es válido.")
        return plans

    def iter_week(self, goals: str, level: Optional[str] = None, equipment: str = "") -> Iterator[DayPlan]:
        """
        Streaming: mỗi dòng NDJSON là 1 ngày, yield ngay khi nhận.
        Chỉ ngày hợp lệ mới được tính; chưa đủ 7 ngày hợp lệ khi kết nối đóng -> PlanClientError.
        """
        payload = self._base_payload("generate", goals, level, equipment)
        payload["stream"] = True
        resp = self._post(payload, "Error al generar el plan de entrenamiento.", stream=True)

        accepted = 0
        try:
            for line in resp.iter_lines(decode_unicode=True):
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except ValueError:
                    self.rejected.append({"data": line, "errors": [{"msg": "invalid json"}]})
                    continue
                plan = self._accept(data)
                if plan is not None:
                    accepted += 1
                    yield plan
        except requests.RequestException as e:
            raise PlanClientError(f"La generación se interrumpió después de {accepted} días.") from e
        finally:
            resp.close()

        if self.rejected:
            raise PlanClientError("El plan recibido no es válido.")
        if accepted < len(WEEK_DAYS):
            raise PlanClientError(f"La generación se interrumpió después de {accepted} días.")

    # -----------------------------
    # Single day
    # -----------------------------
    def regenerate_day(self, day: str, goals: str, level: Optional[str] = None, equipment: str = "") -> DayPlan:
        payload = self._base_payload("generate", goals, level, equipment)
        payload["day"] = day
        resp = self._post(payload, f"Error al generar el plan para {day}.")
        return self._single(resp, day)

    def edit_day(
        self,
        plan: DayPlan,
        instructions: str,
        goals: str = "",
        level: Optional[str] = None,
        equipment: str = "",
    ) -> DayPlan:
        payload = self._base_payload("edit", goals, level, equipment)
        payload.update(
            {
                "day": plan.day,
                "existingPlan": dump_day_plan(plan),
                "editInstructions": instructions,
            }
        )
        resp = self._post(payload, f"Error al editar el plan para {plan.day}.")
        return self._single(resp, plan.day)

    def _single(self, resp: requests.Response, day: str) -> DayPlan:
        try:
            data = resp.json()
        except ValueError as e:
            raise PlanClientError("Respuesta inválida del servidor.") from e
        plan = self._accept(data)
        if plan is None:
            raise PlanClientError(f"El plan recibido para {day} no es válido.")
        return plan


@dataclass
class WeekBoard:
    """Danh sách ngày đang hiển thị, chỉ sống trong session."""

    days: List[DayPlan] = field(default_factory=list)

    def load(self, plans: List[DayPlan]) -> None:
        self.days = list(plans)

    def add(self, plan: DayPlan) -> None:
        self.days.append(plan)

    def replace(self, plan: DayPlan) -> bool:
        for i, existing in enumerate(self.days):
            if existing.day == plan.day:
                self.days[i] = plan
                return True
        return False

    def get(self, day: str) -> Optional[DayPlan]:
        for plan in self.days:
            if plan.day == day:
                return plan
        return None

    def clear(self) -> None:
        self.days = []

    def labels(self) -> List[str]:
        return [p.day for p in self.days]
