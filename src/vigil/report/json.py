"""
JSON output for Vigil.

Machine-readable forms of decision records and errors, for scripting
against the CLI. Field names match the wire format: decision, rule,
confidence, risk_level, reason, latencyMs.
"""

import json
import traceback
from typing import Any

from vigil.schema import DecisionRecord


def build_decision_dict(record: DecisionRecord) -> dict[str, Any]:
    """Convert a decision record to a JSON-ready dictionary."""
    return record.to_dict()


def decision_to_json(record: DecisionRecord, indent: int = 2) -> str:
    """Render a decision record as JSON."""
    return json.dumps(build_decision_dict(record), indent=indent)


def error_to_json(error_type: str, message: str, include_traceback: bool = False) -> str:
    """Render an error as JSON."""
    output: dict[str, Any] = {
        "error": True,
        "error_type": error_type,
        "message": message,
    }
    if include_traceback:
        output["traceback"] = traceback.format_exc()
    return json.dumps(output, indent=2)
