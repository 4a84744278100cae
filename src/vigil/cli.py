"""
CLI entry point for Vigil.

This module provides the Typer-based command-line interface for Vigil.

Commands:
    check       Check a tool call against the safety rules
    policies    List built-in policy templates (or show one document)
    rules       List rule categories in evaluation order

Exit codes (check):
    0 = ALLOW    1 = BLOCK    2 = ESCALATE
    3 = input or policy-load error
    64 = command-line usage error

Architecture Note:
    The CLI is intentionally thin. It parses arguments, builds a request,
    and delegates to an Engine. Each invocation uses its own Engine so the
    --mode option never leaks into the process-wide default engine.
"""

import json
import logging
import sys
import traceback
from typing import Annotated, Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from vigil import __version__
from vigil.engine import Engine
from vigil.errors import PolicyLoadError
from vigil.policy import dump_policy, list_policies, load_policy
from vigil.report import decision_to_json, error_to_json, render_decision, render_policy_list, render_rule_table
from vigil.rules import RULE_TABLE
from vigil.schema import Decision, EngineConfig, Mode

EXIT_CODES = {
    Decision.ALLOW: 0,
    Decision.BLOCK: 1,
    Decision.ESCALATE: 2,
}
EXIT_UNKNOWN_DECISION = 2
EXIT_INPUT_ERROR = 3
EXIT_USAGE_ERROR = 64
EXIT_INTERRUPTED = 130

# Initialize Typer app with metadata
app = typer.Typer(
    name="vigil",
    help="Pre-execution safety checks for AI agent tool calls.",
    add_completion=False,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]vigil[/bold] version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    Vigil - Safety guardrails for AI agents.

    Classifies a proposed tool call as ALLOW, BLOCK or ESCALATE before it
    executes.
    """
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(code=0)


def exit_code_for(decision: Any) -> int:
    """Map a decision to a process exit code (unknown decisions escalate)."""
    try:
        return EXIT_CODES[Decision(decision)]
    except (KeyError, ValueError):
        return EXIT_UNKNOWN_DECISION


def _enable_verbose_logging() -> None:
    """Route vigil log records to stderr through Rich."""
    vigil_logger = logging.getLogger("vigil")
    vigil_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in vigil_logger.handlers):
        vigil_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _fail(error_type: str, message: str, json_output: bool, debug: bool = False) -> NoReturn:
    """Report an input/load error and exit with EXIT_INPUT_ERROR."""
    if json_output:
        print(error_to_json(error_type, message, debug))
    else:
        console.print(Text(f"Error: {message}", style="red"))
        if debug:
            console.print(f"[dim]{traceback.format_exc()}[/dim]")
    raise typer.Exit(code=EXIT_INPUT_ERROR)


@app.command()
def check(
    tool: Annotated[
        Optional[str],
        typer.Option("--tool", "-t", help="Tool being called (e.g., exec, read, write)."),
    ] = None,
    agent: Annotated[
        Optional[str],
        typer.Option("--agent", "-a", help="Agent name or identifier."),
    ] = None,
    params: Annotated[
        Optional[str],
        typer.Option("--params", "-p", help="Tool parameters as a JSON string."),
    ] = None,
    role: Annotated[
        Optional[str],
        typer.Option("--role", "-r", help="Agent's role description."),
    ] = None,
    context: Annotated[
        Optional[list[str]],
        typer.Option("--context", "-c", help="Recent conversation turn (repeatable)."),
    ] = None,
    stdin: Annotated[
        bool,
        typer.Option("--stdin", help="Read the JSON request from stdin."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output raw JSON (for scripting)."),
    ] = False,
    mode: Annotated[
        Optional[Mode],
        typer.Option("--mode", "-m", help="Enforcement mode.", case_sensitive=False),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log rule matches to stderr."),
    ] = False,
) -> None:
    """
    Check a tool call against the safety rules.

    Example:
        $ vigil check --tool exec --params '{"command": "rm -rf /"}'
        $ echo '{"tool": "read", "params": {"path": "/etc/shadow"}}' | vigil check --stdin --json
    """
    if verbose:
        _enable_verbose_logging()

    request: dict[str, Any]
    if stdin:
        raw = sys.stdin.read()
        try:
            request = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            _fail("input_error", f"Invalid JSON on stdin: {e}", json_output)
        if not isinstance(request, dict):
            _fail("input_error", "JSON on stdin must be an object", json_output)
    else:
        request = {"tool": tool, "agent": agent, "role": role, "context": context or None}
        if params is not None:
            try:
                request["params"] = json.loads(params)
            except json.JSONDecodeError as e:
                _fail("input_error", f"Invalid JSON in --params: {e}", json_output)

    engine = Engine(EngineConfig(mode=mode or Mode.ENFORCE))
    result = engine.check(request)

    if json_output:
        print(decision_to_json(result))
    else:
        render_decision(result, console)

    raise typer.Exit(code=exit_code_for(result.decision))


@app.command()
def policies(
    show: Annotated[
        Optional[str],
        typer.Option("--show", "-s", help="Print one policy (built-in name or file path) as JSON."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output in JSON format."),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Include tracebacks in error output."),
    ] = False,
) -> None:
    """List built-in policy templates."""
    if show is not None:
        try:
            document = load_policy(show)
        except PolicyLoadError as e:
            _fail("policy_load_error", e.message, json_output, debug)
        print(dump_policy(document))
        raise typer.Exit(code=0)

    documents = [load_policy(name) for name in list_policies()]
    if json_output:
        output = {
            "policies": [
                {"name": d.name, "description": d.description, "version": d.version}
                for d in documents
            ],
            "count": len(documents),
        }
        print(json.dumps(output, indent=2))
    else:
        render_policy_list(documents, console)
    raise typer.Exit(code=0)


@app.command()
def rules(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output in JSON format."),
    ] = False,
) -> None:
    """List rule categories in evaluation order."""
    if json_output:
        output = [
            {
                "category": category.value,
                "decision": rule_set.decision.value,
                "risk": rule_set.risk.value,
                "description": rule_set.description,
                "patterns": [p.pattern for p in rule_set.patterns],
            }
            for category, rule_set in RULE_TABLE.items()
        ]
        print(json.dumps(output, indent=2))
    else:
        render_rule_table(RULE_TABLE, console)
    raise typer.Exit(code=0)


def main() -> None:
    """
    Console script entry point.

    Runs the app outside Typer's standalone mode so usage errors get their
    own exit code instead of colliding with ESCALATE (2).
    """
    try:
        exit_code = app(standalone_mode=False)
    except typer.Abort:
        console.print("[red]Aborted.[/red]")
        sys.exit(EXIT_INTERRUPTED)
    except typer.TyperException as e:
        Console(stderr=True).print(Text(f"Error: {e}", style="red"))
        sys.exit(EXIT_USAGE_ERROR)
    sys.exit(exit_code or 0)


if __name__ == "__main__":
    main()
