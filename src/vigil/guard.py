"""
Pre-tool-call guard.

Glue for agent frameworks that support pre-execution hooks. Framework
adapters wrap one of these two entry points:

    before_tool_call()  - check a call, get (allowed, result) back
    guard_tool()        - wrap a tool handler so blocked calls raise

ESCALATE is treated as allowed here: the call proceeds and a warning is
logged so the surrounding system can queue it for review.

Usage:
    exec_tool = guard_tool("exec", run_shell, agent="my-agent")
    exec_tool(command="git status")   # runs
    exec_tool(command="rm -rf /")     # raises ActionBlockedError
"""

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from vigil.engine import Engine, default_engine
from vigil.errors import ActionBlockedError
from vigil.schema import Decision, DecisionRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a pre-tool-call check."""

    allowed: bool
    result: DecisionRecord


def before_tool_call(
    agent: str | None,
    tool: str,
    params: dict[str, Any] | str | None,
    engine: Engine | None = None,
) -> GuardResult:
    """
    Check a tool call before executing it.

    Args:
        agent: Agent name or identifier
        tool: Tool being called
        params: Tool parameters
        engine: Engine to use (defaults to the process-wide engine)

    Returns:
        GuardResult; allowed is True for ALLOW and ESCALATE
    """
    engine = engine or default_engine
    result = engine.check({"agent": agent, "tool": tool, "params": params})
    return GuardResult(
        allowed=result.decision in (Decision.ALLOW, Decision.ESCALATE),
        result=result,
    )


def guard_tool(
    tool_name: str,
    handler: Callable[..., T],
    agent: str = "vigil-agent",
    engine: Engine | None = None,
) -> Callable[..., T]:
    """
    Wrap a tool handler with a safety check.

    The handler's keyword arguments are checked as the tool parameters.

    Args:
        tool_name: Tool name reported to the engine
        handler: Callable invoked with the tool's keyword parameters
        agent: Agent name or identifier
        engine: Engine to use (defaults to the process-wide engine)

    Returns:
        A callable with the same signature that raises ActionBlockedError
        when the call is blocked
    """

    @functools.wraps(handler)
    def guarded(**params: Any) -> T:
        outcome = before_tool_call(agent, tool_name, params, engine=engine)
        result = outcome.result

        if not outcome.allowed:
            raise ActionBlockedError(
                tool=tool_name,
                rule=result.rule.value if result.rule else None,
                reason=result.reason,
                result=result,
            )

        if result.decision == Decision.ESCALATE:
            logger.warning("Tool %s escalated: %s", tool_name, result.reason)

        return handler(**params)

    return guarded
