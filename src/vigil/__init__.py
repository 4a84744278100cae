"""
Vigil - Pre-execution safety checks for AI agent tool calls.

Vigil inspects a proposed action (an agent calling a tool with some
parameters) and classifies it as ALLOW, BLOCK or ESCALATE before it runs.
It provides:
- A fixed corpus of regex rules in eight risk categories
- First-match-wins evaluation with sub-millisecond latency
- enforce / warn / log modes and a violation callback
- Built-in and file-based policy documents
- A generic pre-tool-call guard for framework adapters

Example usage:
    >>> from vigil import check_action
    >>> check_action({"tool": "exec", "params": {"command": "rm -rf /"}}).decision
    <Decision.BLOCK: 'BLOCK'>

    $ vigil check --tool exec --params '{"command": "rm -rf /"}'
    $ vigil policies
"""

import logging

from vigil.engine import Engine, check_action, configure, default_engine
from vigil.errors import (
    ActionBlockedError,
    ConfigurationError,
    PolicyLoadError,
    VigilError,
)
from vigil.guard import GuardResult, before_tool_call, guard_tool
from vigil.policy import dump_policy, list_policies, load_policy
from vigil.rules import RULE_TABLE, RuleSet, RuleTable
from vigil.schema import (
    ActionRequest,
    Decision,
    DecisionRecord,
    EngineConfig,
    Mode,
    PolicyDocument,
    RiskLevel,
    RuleCategory,
)

__version__ = "0.1.0"
__author__ = "Vigil Contributors"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "__author__",
    "ActionBlockedError",
    "ActionRequest",
    "ConfigurationError",
    "Decision",
    "DecisionRecord",
    "Engine",
    "EngineConfig",
    "GuardResult",
    "Mode",
    "PolicyDocument",
    "PolicyLoadError",
    "RULE_TABLE",
    "RiskLevel",
    "RuleCategory",
    "RuleSet",
    "RuleTable",
    "VigilError",
    "before_tool_call",
    "check_action",
    "configure",
    "default_engine",
    "dump_policy",
    "guard_tool",
    "list_policies",
    "load_policy",
]
