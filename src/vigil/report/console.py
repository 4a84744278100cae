"""
Console rendering for Vigil.

Renders decision records, policy catalogs and the rule table with Rich.

Design Principles:
    - Decision at a glance: colored, bold decision word first
    - Details follow in a fixed order: rule, risk, confidence, reason
    - Latency is dimmed; it is diagnostic, not part of the verdict
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from vigil.rules import RuleTable
from vigil.schema import Decision, DecisionRecord, PolicyDocument

DECISION_STYLES = {
    Decision.ALLOW: "bold green",
    Decision.BLOCK: "bold red",
    Decision.ESCALATE: "bold yellow",
}

RISK_STYLES = {
    "low": "green",
    "medium": "yellow",
    "high": "red",
    "critical": "bold red",
}


def render_decision(record: DecisionRecord, console: Console | None = None) -> None:
    """
    Print a decision record.

    Args:
        record: The record to render
        console: Rich Console instance (creates one if not provided)
    """
    if console is None:
        console = Console()

    label_width = 12
    decision = Text(record.decision.value, style=DECISION_STYLES.get(record.decision, "bold"))

    console.print()
    console.print(Text("  Decision:".ljust(label_width + 2), style="bold") + decision)
    if record.rule is not None:
        console.print(f"  [bold]Rule:[/bold]        {record.rule.value}")
    risk = record.risk_level.value
    console.print(f"  [bold]Risk:[/bold]        [{RISK_STYLES[risk]}]{risk}[/{RISK_STYLES[risk]}]")
    console.print(f"  [bold]Confidence:[/bold]  {record.confidence}")
    # Reasons echo matched input; keep Rich from interpreting it as markup.
    console.print(Text("  Reason:      ", style="bold") + Text(record.reason))
    console.print(f"  [dim]Latency:     {record.latency_ms}ms[/dim]")
    console.print()


def render_policy_list(documents: list[PolicyDocument], console: Console | None = None) -> None:
    """Print built-in policy names with their descriptions."""
    if console is None:
        console = Console()

    console.print("[bold]Built-in policy templates:[/bold]")
    console.print()
    for document in documents:
        console.print(Text("  ") + Text(document.name, style="green") + Text(f"  {document.description}"))


def render_rule_table(rules: RuleTable, console: Console | None = None) -> None:
    """Print rule categories in evaluation order."""
    if console is None:
        console = Console()

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Category", style="cyan")
    table.add_column("Decision", width=10)
    table.add_column("Risk", width=10)
    table.add_column("Patterns", justify="right")
    table.add_column("Description")

    for index, (category, rule_set) in enumerate(rules.items(), start=1):
        style = DECISION_STYLES.get(rule_set.decision, "")
        risk_style = RISK_STYLES[rule_set.risk.value]
        table.add_row(
            str(index),
            category.value,
            f"[{style}]{rule_set.decision.value}[/{style}]",
            f"[{risk_style}]{rule_set.risk.value}[/{risk_style}]",
            str(len(rule_set.patterns)),
            rule_set.description,
        )

    console.print(table)
    console.print(f"[dim]{len(rules)} categories, {rules.pattern_count} patterns. First match wins.[/dim]")
