"""
Reporting module for Vigil.

Output formats:
    - Console: Rich terminal output with colored decision and risk
    - JSON: Structured output for programmatic consumption

Example:
    from vigil import check_action
    from vigil.report import decision_to_json, render_decision

    record = check_action({"tool": "exec", "params": "ls"})
    render_decision(record)
    print(decision_to_json(record))
"""

from vigil.report.console import render_decision, render_policy_list, render_rule_table
from vigil.report.json import build_decision_dict, decision_to_json, error_to_json

__all__ = [
    "build_decision_dict",
    "decision_to_json",
    "error_to_json",
    "render_decision",
    "render_policy_list",
    "render_rule_table",
]
