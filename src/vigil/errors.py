"""
Exception hierarchy for Vigil.

All Vigil exceptions inherit from VigilError, allowing callers to catch
all Vigil-specific exceptions with a single except clause.

Exception Categories:
    - NormalizationError: Request could not be turned into searchable text
    - ConfigurationError: Invalid engine configuration update
    - PolicyLoadError: Policy document missing or malformed
    - ActionBlockedError: A guarded tool call was blocked

Note that check_action() never raises for any input shape. Normalization
failures are converted into a fail-open decision inside the engine; the
exception type exists so the engine can tell them apart from bugs.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Input errors: 1xxx
ERROR_NORMALIZATION_FAILED = 1001

# Configuration errors: 2xxx
ERROR_CONFIG_INVALID = 2001

# Policy errors: 3xxx
ERROR_POLICY_LOAD_FAILED = 3001

# Guard errors: 4xxx
ERROR_ACTION_BLOCKED = 4001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class VigilError(Exception):
    """
    Base exception for all Vigil errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Input Errors
# =============================================================================


@dataclass
class NormalizationError(VigilError):
    """
    Raised when a request cannot be serialized into searchable text.

    Typical causes are cyclic parameter structures or mapping keys that
    have no text form.

    Attributes:
        field_name: The request field that failed to serialize
        underlying_error: The original error message
    """

    field_name: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Cannot serialize {self.field_name}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_NORMALIZATION_FAILED
        self.context.update({
            "field_name": self.field_name,
            "underlying_error": self.underlying_error,
        })


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class ConfigurationError(VigilError):
    """Raised when an engine configuration update is rejected."""

    changes: dict[str, Any] = field(default_factory=dict)
    validation_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid configuration: {self.validation_error}"
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID
        if not self.suggestion:
            self.suggestion = "Valid keys are mode, on_violation and max_input_chars"
        self.context.update({
            "changes": sorted(self.changes),
            "validation_error": self.validation_error,
        })


# =============================================================================
# Policy Errors
# =============================================================================


@dataclass
class PolicyLoadError(VigilError):
    """
    Raised when a policy document cannot be loaded.

    Attributes:
        policy_path: Resolved absolute path of the policy file
        underlying_error: The I/O, parse or validation error message
    """

    policy_path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f'Failed to load policy from "{self.policy_path}": {self.underlying_error}'
        if self.code == 0:
            self.code = ERROR_POLICY_LOAD_FAILED
        if not self.suggestion:
            self.suggestion = (
                "Use one of the built-in names (restrictive, moderate, permissive) "
                "or a path to a JSON/YAML policy file"
            )
        self.context.update({
            "policy_path": self.policy_path,
            "underlying_error": self.underlying_error,
        })


# =============================================================================
# Guard Errors
# =============================================================================


@dataclass
class ActionBlockedError(VigilError):
    """
    Raised by guarded tool handlers when a call is blocked.

    Attributes:
        tool: Name of the tool that was blocked
        rule: Rule category that triggered the block
        reason: Why the call was blocked
        result: The full DecisionRecord
    """

    tool: str = ""
    rule: str | None = None
    reason: str = ""
    result: Any = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Blocked {self.tool}: {self.reason} (rule: {self.rule})"
        if self.code == 0:
            self.code = ERROR_ACTION_BLOCKED
        self.context.update({
            "tool": self.tool,
            "rule": self.rule,
            "reason": self.reason,
        })
