from __future__ import annotations

import json
from typing import List, Optional

from fitplan.domains.workout.contract import RESPONSE_LANGUAGE
from fitplan.domains.workout.schemas import DayPlan, day_plan_json, dump_day_plan


def build_day_prompt(
    day: str,
    fitness_goals: str,
    fitness_level: str,
    available_equipment: str = "",
    context: str = "",
    existing_plan: Optional[DayPlan] = None,
    edit_instructions: Optional[str] = None,
) -> str:
    """
    Prompt cho đúng 1 ngày.
    - generate: nhúng context các ngày trước (chỉ khi sinh cả tuần)
    - edit: nhúng thêm plan hiện tại + instructions, yêu cầu trả về bản đã sửa
    Prompt bằng tiếng Tây Ban Nha vì output phải là tiếng Tây Ban Nha.
    """
    parts: List[str] = []

    parts.append(f'Genera un plan de entrenamiento estructurado en formato JSON para el día "{day}".')
    if fitness_goals:
        parts.append(f"El plan debe estar basado en los siguientes objetivos de fitness: {fitness_goals}.")
    if fitness_level:
        parts.append(f'El nivel de condición física del usuario es "{fitness_level}".')

    equipment = (available_equipment or "").strip()
    if equipment:
        parts.append(f"El usuario tiene acceso al siguiente equipo: {equipment}.")
    else:
        parts.append("El usuario no tiene acceso a equipos específicos.")

    parts.append('El plan debe incluir "warmup", "workout" y "cooldown".')
    parts.append("Aquí está el contexto de los días anteriores:")
    parts.append(context or "")

    if existing_plan is not None and edit_instructions:
        parts.append("")
        parts.append("Aquí está el plan de entrenamiento existente para referencia:")
        parts.append(json.dumps(dump_day_plan(existing_plan), ensure_ascii=False, indent=2))
        parts.append("")
        parts.append("Instrucciones para editar el plan:")
        parts.append(edit_instructions)

    parts.append("")
    parts.append(
        "Responde solo con el JSON actualizado. No incluyas explicaciones adicionales. "
        f"Responde en {RESPONSE_LANGUAGE}."
    )
    return "\n".join(parts)


def append_context(context: str, day: str, plan: DayPlan) -> str:
    """Trả context mới = context cũ + ngày vừa sinh (không mutate gì cả)."""
    return f"{context}\nDía {day}: {day_plan_json(plan, indent=2)}"
