"""
Compiled rule table.

A RuleTable maps each RuleCategory to a RuleSet: the category's ordered,
compiled patterns plus the decision, risk level and description reported
when one of them matches.

Tables are built from declarative corpus entries (see vigil.rules.corpus)
so a corpus can be swapped or extended without touching the engine:

    {
        "category": "ssrf",
        "decision": "BLOCK",
        "risk": "critical",
        "description": "SSRF/internal network access",
        "flags": "i",
        "patterns": [r"169\\.254\\.169\\.254", (r"2852039166", "")],
    }

A pattern is either a source string (compiled with the entry's flags) or
a (source, flags) pair. Flags are letters: "i" ignore case, "m" multiline,
"s" dot-all.
"""

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from vigil.schema import Decision, RiskLevel, RuleCategory

_FLAG_LETTERS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


@dataclass(frozen=True)
class RuleSet:
    """
    Patterns and outcome for one rule category.

    Attributes:
        patterns: Compiled patterns, in evaluation order
        decision: Decision reported under enforce mode
        risk: Risk level reported on match
        description: Short human-readable label used in reasons
    """

    patterns: tuple[re.Pattern[str], ...]
    decision: Decision
    risk: RiskLevel
    description: str


def parse_flags(letters: str) -> re.RegexFlag:
    """Convert flag letters ("im") to re flags."""
    flags = re.RegexFlag(0)
    for letter in letters:
        try:
            flags |= _FLAG_LETTERS[letter]
        except KeyError:
            msg = f"Unknown regex flag: {letter!r}"
            raise ValueError(msg) from None
    return flags


def _compile_pattern(pattern: Any, default_flags: str) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        return re.compile(pattern, parse_flags(default_flags))
    source, flags = pattern
    return re.compile(source, parse_flags(flags))


class RuleTable(Mapping[RuleCategory, RuleSet]):
    """
    Immutable, ordered mapping of RuleCategory -> RuleSet.

    Iteration follows declaration order, which is also the order the
    engine evaluates categories in.
    """

    def __init__(self, rule_sets: Iterable[tuple[RuleCategory, RuleSet]]) -> None:
        table: dict[RuleCategory, RuleSet] = {}
        for category, rule_set in rule_sets:
            if category in table:
                msg = f"Duplicate rule category: {category.value}"
                raise ValueError(msg)
            table[category] = rule_set
        self._table = MappingProxyType(table)

    @classmethod
    def from_corpus(cls, entries: Iterable[Mapping[str, Any]]) -> "RuleTable":
        """
        Compile declarative corpus entries into a table.

        Raises:
            ValueError: If an entry names an unknown category, decision,
                risk level or flag, or a pattern fails to compile
        """
        rule_sets = []
        for entry in entries:
            default_flags = entry.get("flags", "")
            try:
                patterns = tuple(
                    _compile_pattern(p, default_flags) for p in entry["patterns"]
                )
            except re.error as e:
                msg = f"Invalid pattern in {entry['category']}: {e}"
                raise ValueError(msg) from e
            rule_sets.append((
                RuleCategory(entry["category"]),
                RuleSet(
                    patterns=patterns,
                    decision=Decision(entry["decision"]),
                    risk=RiskLevel(entry["risk"]),
                    description=entry["description"],
                ),
            ))
        return cls(rule_sets)

    def __getitem__(self, category: RuleCategory) -> RuleSet:
        return self._table[category]

    def __iter__(self) -> Iterator[RuleCategory]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"RuleTable({[c.value for c in self._table]})"

    @property
    def pattern_count(self) -> int:
        """Total number of patterns across all categories."""
        return sum(len(rs.patterns) for rs in self._table.values())
