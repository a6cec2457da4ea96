from __future__ import annotations

from typing import Any, Dict, Optional


def append_event(audit: Dict[str, Any], name: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Append event vào audit trail (trả bản copy, không sửa audit cũ)"""
    events = list(audit.get("events", []))
    events.append({"name": name, "payload": payload or {}})
    return {**audit, "events": events}


def append_iteration(audit: Dict[str, Any], iteration: int) -> Dict[str, Any]:
    """Ghi lại 1 lần thử (attempt) vào audit trail"""
    iters = list(audit.get("iterations", []))
    iters.append({"iteration": iteration})
    return {**audit, "iterations": iters}


def summarize_audit(audit: Dict[str, Any]) -> str:
    names = [e.get("name") for e in audit.get("events", [])]
    return f"events={len(names)} attempts={len(audit.get('iterations', []))} trail={names}"
