# fitplan/domains/workout/contract.py
from __future__ import annotations

from typing import Tuple


# ============================================================
# Tuần / action / delivery (single source of truth)
# ============================================================

# Thứ tự cố định Monday..Sunday, nhãn tiếng Tây Ban Nha
WEEK_DAYS: Tuple[str, ...] = (
    "Lunes",
    "Martes",
    "Miércoles",
    "Jueves",
    "Viernes",
    "Sábado",
    "Domingo",
)

ACTIONS: Tuple[str, ...] = ("generate", "edit")
ACTION_GENERATE = "generate"
ACTION_EDIT = "edit"

# json   -> 1 JSON array 7 ngày (all-or-nothing)
# ndjson -> mỗi ngày 1 dòng JSON, flush ngay khi có
DELIVERY_JSON = "json"
DELIVERY_NDJSON = "ndjson"
DELIVERY_MODES: Tuple[str, ...] = (DELIVERY_JSON, DELIVERY_NDJSON)

MAX_ATTEMPTS = 3

RESPONSE_LANGUAGE = "español"


# ============================================================
# Messages trả về client (giữ tiếng Tây Ban Nha như UI)
# ============================================================

MSG_VALIDATION_FAILED = "Validación fallida"
MSG_MISSING_EDIT_FIELDS = "Faltan campos necesarios para la edición."
MSG_UNRECOGNIZED_ACTION = "Acción no reconocida."
MSG_GENERIC_FAILURE = "Error generando el plan de entrenamiento."


def msg_day_failed(day: str) -> str:
    return f"No se pudo generar el plan para el día {day}."


def msg_day_exhausted(day: str, attempts: int) -> str:
    return f"No se pudo generar el plan para el día {day} después de {attempts} intentos."


def msg_day_mismatch(day: str, plan_day: str) -> str:
    return f"El día solicitado ({day}) no coincide con el día del plan existente ({plan_day})."


def is_valid_delivery_mode(mode: str) -> bool:
    return (mode or "").strip().lower() in DELIVERY_MODES
