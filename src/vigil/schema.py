"""
Schema definitions for Vigil.

This module defines the Pydantic models used throughout Vigil:
- ActionRequest: The proposed tool call to inspect
- DecisionRecord: The result of evaluating a request
- EngineConfig: Mode, violation callback and input bound of an engine
- PolicyDocument: Declarative permission document (allow/block lists)

Design Decisions:
    - Enums are str-valued so they serialize as their wire strings
    - Results and configs are immutable (frozen=True)
    - ActionRequest is lenient: wrongly-typed fields are coerced, and only
      values with no text form fail validation
    - PolicyDocument is strict (extra="forbid") and uses camelCase aliases
      to match the JSON/YAML file format
"""

import warnings
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vigil.errors import NormalizationError


# =============================================================================
# Enums
# =============================================================================


class Decision(str, Enum):
    """Outcome of a safety check."""

    ALLOW = "ALLOW"
    BLOCK = "BLOCK"
    ESCALATE = "ESCALATE"


class RiskLevel(str, Enum):
    """Risk classification attached to every decision."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RuleCategory(str, Enum):
    """
    Class of risky behavior a rule set detects.

    Declaration order is evaluation order: when a request matches patterns
    from several categories, the first one listed here is reported.
    """

    SSRF = "ssrf"
    DESTRUCTIVE = "destructive"
    EXFILTRATION = "exfiltration"
    SQL_INJECTION = "sql_injection"
    PATH_TRAVERSAL = "path_traversal"
    PROMPT_INJECTION = "prompt_injection"
    ENCODING_ATTACK = "encoding_attack"
    CREDENTIAL_LEAK = "credential_leak"


class Mode(str, Enum):
    """
    Enforcement posture of an engine.

    ENFORCE acts on matches. WARN and LOG report matches but always allow;
    LOG additionally logs matches at INFO instead of WARNING.
    """

    ENFORCE = "enforce"
    WARN = "warn"
    LOG = "log"


# =============================================================================
# Request / Result Models
# =============================================================================


def _text_form(value: Any, field_name: str) -> str:
    """str() of a value, raised as a validation error when it has none."""
    try:
        return str(value)
    except Exception as e:
        raise ValueError(f"{field_name} value has no text form ({type(e).__name__})") from e


class ActionRequest(BaseModel):
    """
    A proposed tool call to inspect.

    Every field is optional and an empty request is valid. Input comes
    from untrusted agents, so wrongly-typed values are normalized instead
    of rejected.

    Attributes:
        agent: Agent name or identifier
        tool: Tool being called (e.g., "exec", "read", "web_fetch")
        params: Tool parameters, either raw text or a mapping
        role: Agent's role description
        context: Recent conversation context, text or list of turns
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    agent: str | None = Field(default=None, description="Agent name or identifier")
    tool: str | None = Field(default=None, description="Tool being called")
    params: str | dict[Any, Any] | None = Field(
        default=None,
        description="Tool parameters (text or mapping)",
    )
    role: str | None = Field(default=None, description="Agent's role description")
    context: str | list[str] | None = Field(
        default=None,
        description="Recent conversation context",
    )

    @model_validator(mode="before")
    @classmethod
    def fold_parameters_alias(cls, data: Any) -> Any:
        """Move the deprecated `parameters` key into `params`."""
        if not isinstance(data, Mapping) or "parameters" not in data:
            return data
        data = dict(data)
        legacy = data.pop("parameters")
        if data.get("params") is None:
            warnings.warn(
                "'parameters' is deprecated, use 'params'",
                DeprecationWarning,
                stacklevel=2,
            )
            data["params"] = legacy
        return data

    @field_validator("agent", "tool", "role", mode="before")
    @classmethod
    def drop_non_text(cls, v: Any) -> str | None:
        """Treat non-string identifiers as absent."""
        return v if isinstance(v, str) else None

    @field_validator("params", mode="before")
    @classmethod
    def coerce_params(cls, v: Any) -> str | dict[Any, Any] | None:
        """Keep text and mappings; stringify anything else so it is still searched."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, Mapping):
            try:
                return dict(v)
            except Exception as e:
                raise ValueError(f"params mapping cannot be copied ({type(e).__name__})") from e
        return _text_form(v, "params")

    @field_validator("context", mode="before")
    @classmethod
    def coerce_context(cls, v: Any) -> str | list[str] | None:
        """Accept text or a sequence of turns."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (list, tuple)):
            return [item if isinstance(item, str) else _text_form(item, "context") for item in v]
        return _text_form(v, "context")

    @classmethod
    def coerce(cls, obj: Any) -> "ActionRequest":
        """
        Build a request from an ActionRequest, a mapping or anything else.

        Objects that are not mappings carry no fields and become the empty
        request.

        Raises:
            NormalizationError: If a mapping cannot be copied
            ValidationError: If a field value has no text form
        """
        if isinstance(obj, cls):
            return obj
        if not isinstance(obj, Mapping):
            return cls()
        try:
            data = dict(obj)
        except Exception as e:
            raise NormalizationError(field_name="request", underlying_error=str(e)) from e
        return cls.model_validate(data)


class DecisionRecord(BaseModel):
    """
    Result of evaluating an ActionRequest.

    Attributes:
        decision: ALLOW, BLOCK or ESCALATE
        rule: Rule category that matched (None if nothing matched)
        confidence: Fixed confidence for the path taken (0-1)
        risk_level: Risk classification
        reason: Human-readable explanation
        latency_ms: Wall-clock duration of the check in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    decision: Decision = Field(..., description="Safety decision")
    rule: RuleCategory | None = Field(default=None, description="Triggering rule category")
    confidence: float = Field(..., description="Confidence level", ge=0, le=1)
    risk_level: RiskLevel = Field(..., description="Risk classification")
    reason: str = Field(..., description="Human-readable explanation")
    latency_ms: float = Field(
        default=0.0,
        alias="latencyMs",
        description="Check latency in milliseconds",
        ge=0,
    )

    @property
    def allowed(self) -> bool:
        """Whether the caller may proceed without review."""
        return self.decision == Decision.ALLOW

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire form (string enums, camelCase latency)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Engine Configuration
# =============================================================================

ViolationCallback = Callable[[DecisionRecord, ActionRequest], None]


class EngineConfig(BaseModel):
    """
    Configuration snapshot of an Engine.

    Snapshots are immutable; Engine.configure() builds a new one and swaps
    it in, so a running evaluation never sees a partial update.

    Attributes:
        mode: Enforcement posture
        on_violation: Called with (record, request) when a BLOCK/ESCALATE
            rule matches, in every mode. request is the validated
            ActionRequest (the caller's own instance when one was passed)
        max_input_chars: Normalized text is truncated to this length
            before matching
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Mode = Field(default=Mode.ENFORCE, description="Enforcement posture")
    on_violation: ViolationCallback | None = Field(
        default=None,
        description="Callback for BLOCK/ESCALATE rule matches",
    )
    max_input_chars: int = Field(
        default=16 * 1024,
        description="Maximum characters of normalized input that are scanned",
        gt=0,
    )


# =============================================================================
# Policy Document
# =============================================================================


class NetworkRules(BaseModel):
    """Outbound network rules of a policy document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    allow_outbound: bool | None = Field(
        default=None,
        alias="allowOutbound",
        description="Whether outbound requests are allowed",
    )
    blocked_domains: list[str] | None = Field(
        default=None,
        alias="blockedDomains",
        description="Domains that must never be contacted",
    )


class PolicyRules(BaseModel):
    """
    Permission rules of a policy document.

    Attributes:
        allowed_tools: Tool names that may run ("*" for any)
        blocked_tools: Tool names that must not run
        blocked_patterns: Tool name -> literal/glob patterns blocked in its params
        allowed_paths: Path prefixes that may be touched
        blocked_paths: Path prefixes that must not be touched
        max_params: Dotted parameter key -> numeric ceiling
        network: Outbound network rules
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    allowed_tools: list[str] | None = Field(default=None, alias="allowedTools")
    blocked_tools: list[str] | None = Field(default=None, alias="blockedTools")
    blocked_patterns: dict[str, list[str]] | None = Field(default=None, alias="blockedPatterns")
    allowed_paths: list[str] | None = Field(default=None, alias="allowedPaths")
    blocked_paths: list[str] | None = Field(default=None, alias="blockedPaths")
    max_params: dict[str, int | float] | None = Field(default=None, alias="maxParams")
    network: NetworkRules | None = Field(default=None)


class PolicyDocument(BaseModel):
    """
    Declarative permission document.

    Policy documents are data at rest: the rule engine does not consult
    them when making decisions.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(..., description="Policy name")
    description: str = Field(default="", description="What this policy is for")
    version: str = Field(default="1.0", description="Policy document version")
    rules: PolicyRules = Field(default_factory=PolicyRules, description="Permission rules")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the file format (camelCase keys, unset fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
