"""
Policy documents for Vigil.

A policy document is a declarative permission set: allowed and
blocked tools, per-tool blocked patterns, path prefixes, numeric parameter
ceilings and network egress rules. Documents come from three built-in
templates or from JSON/YAML files.

Policy documents are data at rest. The rule engine does not consult them;
they are produced for policy-aware tooling built on top of Vigil.
"""

from vigil.policy.loader import dump_policy, list_policies, load_policy
from vigil.policy.templates import BUILTIN_POLICIES, POLICY_NAMES

__all__ = [
    "BUILTIN_POLICIES",
    "POLICY_NAMES",
    "dump_policy",
    "list_policies",
    "load_policy",
]
