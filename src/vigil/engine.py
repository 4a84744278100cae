"""
Decision engine for Vigil.

The Engine classifies a single proposed tool call as ALLOW, BLOCK or
ESCALATE before it executes. It never runs the action.

How it works:
    1. The request is normalized into one flat string
    2. Categories are scanned in declaration order, patterns in order
    3. The first matching pattern decides; remaining rules are skipped
    4. Under warn/log mode the decision is downgraded to ALLOW, but the
       matched rule is still reported
    5. check() additionally notifies the violation callback

Failure policy:
    Evaluation is fail-open. If a request cannot be normalized the engine
    returns ALLOW with reduced confidence instead of raising, so a
    malformed input never stalls or crashes the caller.

Usage:
    engine = Engine(EngineConfig(mode=Mode.WARN))
    record = engine.check({"tool": "exec", "params": {"command": "rm -rf /"}})
    record.decision  # Decision.ALLOW (warn mode), record.rule == "destructive"

    # Or the process-wide default engine
    from vigil import check_action, configure
    configure(mode="enforce")
    check_action({"tool": "exec", "params": "rm -rf /"}).decision  # BLOCK
"""

import logging
import threading
import time
from typing import Any

from pydantic import ValidationError

from vigil.errors import ConfigurationError, NormalizationError
from vigil.normalize import bound_text, normalize_request
from vigil.rules import RULE_TABLE, RuleTable
from vigil.schema import (
    ActionRequest,
    Decision,
    DecisionRecord,
    EngineConfig,
    Mode,
    RiskLevel,
)

logger = logging.getLogger(__name__)

CONFIDENCE_MATCH = 0.95
CONFIDENCE_NO_MATCH = 0.7
CONFIDENCE_PARSE_ERROR = 0.5

# Reason excerpts are bounded so injected payloads are not echoed back.
PATTERN_EXCERPT_CHARS = 60
MATCH_EXCERPT_CHARS = 40

REASON_NO_MATCH = "No rule patterns matched."
REASON_PARSE_ERROR = "Input parsing error: allowing with reduced confidence."


def _elapsed_ms(start: float) -> float:
    return max(0.0, round((time.perf_counter() - start) * 1000, 2))


class Engine:
    """
    Rule-matching decision engine.

    Each engine owns its configuration snapshot, so several independently
    configured engines can live in one process.

    Attributes:
        rules: The compiled rule table scanned on every evaluation
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        rules: RuleTable | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Initial configuration (defaults to enforce mode)
            rules: Rule table to scan (defaults to the built-in corpus)
        """
        self.rules = rules if rules is not None else RULE_TABLE
        self._config = config if config is not None else EngineConfig()
        self._config_lock = threading.Lock()

    @property
    def config(self) -> EngineConfig:
        """Current configuration snapshot."""
        return self._config

    def configure(self, **changes: Any) -> EngineConfig:
        """
        Merge configuration changes and swap in the new snapshot.

        Only the given fields change. Pass on_violation=None to remove the
        callback.

        Args:
            **changes: mode, on_violation and/or max_input_chars

        Returns:
            The new configuration snapshot

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid
        """
        with self._config_lock:
            merged = {**dict(self._config), **changes}
            try:
                new_config = EngineConfig(**merged)
            except ValidationError as e:
                raise ConfigurationError(changes=changes, validation_error=str(e)) from e
            self._config = new_config
        logger.debug("Engine configured: mode=%s", new_config.mode.value)
        return new_config

    def evaluate(self, request: Any) -> DecisionRecord:
        """
        Classify a request without side effects.

        Args:
            request: An ActionRequest, a mapping with the same keys, or None

        Returns:
            DecisionRecord; never raises for any input shape
        """
        start = time.perf_counter()
        return self._evaluate(request, self._config, start)[0]

    def check(self, request: Any) -> DecisionRecord:
        """
        Classify a request and notify the violation callback.

        The callback runs when the matched category's configured decision
        is not ALLOW, in every mode. A failing callback is logged and does
        not change the returned decision. latency_ms covers the callback.

        The callback receives the validated ActionRequest, which is the
        caller's own object when an ActionRequest was passed in. Mappings
        are validated into a new ActionRequest first. Its record equals the
        returned one except for latency_ms, which is stamped again after
        the callback returns.

        Args:
            request: An ActionRequest, a mapping with the same keys, or None

        Returns:
            DecisionRecord; never raises for any input shape
        """
        start = time.perf_counter()
        config = self._config
        record, parsed = self._evaluate(request, config, start)

        if config.on_violation is not None and parsed is not None and self._is_violation(record):
            try:
                config.on_violation(record, parsed)
            except Exception:
                logger.exception("Violation callback failed for rule %s", record.rule.value)

        return record.model_copy(update={"latency_ms": _elapsed_ms(start)})

    def _is_violation(self, record: DecisionRecord) -> bool:
        """Whether the matched category is configured to block or escalate."""
        if record.rule is None:
            return False
        return self.rules[record.rule].decision != Decision.ALLOW

    def _evaluate(
        self,
        request: Any,
        config: EngineConfig,
        start: float,
    ) -> tuple[DecisionRecord, ActionRequest | None]:
        """Run the decision pipeline against one config snapshot."""
        try:
            parsed = ActionRequest.coerce(request)
            text = bound_text(normalize_request(parsed), config.max_input_chars)
        except (NormalizationError, ValidationError) as e:
            logger.warning("Failing open on unparseable request: %s", e)
            return (
                DecisionRecord(
                    decision=Decision.ALLOW,
                    rule=None,
                    confidence=CONFIDENCE_PARSE_ERROR,
                    risk_level=RiskLevel.MEDIUM,
                    reason=REASON_PARSE_ERROR,
                    latency_ms=_elapsed_ms(start),
                ),
                None,
            )

        for category, rule_set in self.rules.items():
            for pattern in rule_set.patterns:
                match = pattern.search(text)
                if match is None:
                    continue

                decision = rule_set.decision if config.mode == Mode.ENFORCE else Decision.ALLOW
                self._log_match(config.mode, category.value, rule_set.decision, parsed)
                record = DecisionRecord(
                    decision=decision,
                    rule=category,
                    confidence=CONFIDENCE_MATCH,
                    risk_level=rule_set.risk,
                    reason=(
                        f"{rule_set.description}: matched pattern "
                        f'"{pattern.pattern[:PATTERN_EXCERPT_CHARS]}" '
                        f'in "{match.group(0)[:MATCH_EXCERPT_CHARS]}"'
                    ),
                    latency_ms=_elapsed_ms(start),
                )
                return record, parsed

        return (
            DecisionRecord(
                decision=Decision.ALLOW,
                rule=None,
                confidence=CONFIDENCE_NO_MATCH,
                risk_level=RiskLevel.LOW,
                reason=REASON_NO_MATCH,
                latency_ms=_elapsed_ms(start),
            ),
            parsed,
        )

    def _log_match(
        self,
        mode: Mode,
        category: str,
        configured: Decision,
        request: ActionRequest,
    ) -> None:
        """Log a rule match; LOG mode keeps it at INFO."""
        level = logging.INFO if mode == Mode.LOG else logging.WARNING
        if mode == Mode.ENFORCE:
            action = configured.value
        else:
            action = f"ALLOW (would {configured.value} in enforce mode)"
        logger.log(
            level,
            "Rule %s matched for tool=%s agent=%s: %s",
            category,
            request.tool,
            request.agent,
            action,
        )


# =============================================================================
# Process-wide default engine
# =============================================================================

default_engine = Engine()


def check_action(request: Any = None) -> DecisionRecord:
    """Check a tool call against the default engine."""
    return default_engine.check(request)


def configure(**changes: Any) -> EngineConfig:
    """Update the default engine's configuration (partial merge)."""
    return default_engine.configure(**changes)
