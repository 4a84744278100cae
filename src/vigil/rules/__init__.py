"""
Rule corpus for Vigil.

Eight fixed categories of risky behavior, each an ordered list of regex
patterns with a decision, risk level and description:

    ssrf, destructive, exfiltration, sql_injection, path_traversal,
    prompt_injection, encoding_attack, credential_leak

RULE_TABLE is compiled once at import and never mutated. Custom tables
can be built with RuleTable.from_corpus() and handed to an Engine.
"""

from vigil.rules.corpus import BUILTIN_CORPUS, RULE_TABLE
from vigil.rules.table import RuleSet, RuleTable, parse_flags

__all__ = [
    "BUILTIN_CORPUS",
    "RULE_TABLE",
    "RuleSet",
    "RuleTable",
    "parse_flags",
]
