"""Run record of one phase invocation: what ran, what failed.

The record is a report for the operator (and the hint for --start-at); steps
are not skipped based on it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    if _detect_format(p) in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def new_run_record(phase: str) -> Dict[str, Any]:
    return {
        "phase": phase,
        "current_step": None,
        "completed_steps": [],
        "errors": [],
        "decisions": {},
    }


def mark_step_completed(state: Dict[str, Any], step_id: str) -> None:
    completed = state.setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def record_error(state: Dict[str, Any], error: BaseException) -> None:
    state.setdefault("errors", []).append(
        {
            "step": state.get("current_step"),
            "error": str(error),
            "returncode": getattr(error, "returncode", None),
        }
    )
