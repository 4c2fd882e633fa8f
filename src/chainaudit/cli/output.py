"""Rich output formatting helpers for the chainaudit CLI.

Severity Color Mapping:
    CRITICAL = bold red, HIGH = yellow, MEDIUM = cyan, LOW = green, INFO = dim
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from chainaudit.audit import AnalysisReport
from chainaudit.core.analyzer import DetectorDefinition, Severity
from chainaudit.core.compliance import ComplianceSummary
from chainaudit.core.scoring import TrustLevel, trust_level_definition
from chainaudit.standards.models import ControlEntry, WeaknessEntry

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "yellow",
    Severity.MEDIUM: "cyan",
    Severity.LOW: "green",
    Severity.INFO: "dim",
}

_TRUST_LEVEL_STYLES: dict[TrustLevel, str] = {
    TrustLevel.CRITICAL_UNSAFE: "bold red",
    TrustLevel.HIGH_RISK: "yellow",
    TrustLevel.MEDIUM_RISK: "cyan",
    TrustLevel.LOW_RISK: "green",
    TrustLevel.SECURE: "bold green",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def trust_level_style(level: TrustLevel) -> str:
    """Return the Rich style string for a given trust level."""
    return _TRUST_LEVEL_STYLES.get(level, "white")


def print_report(report: AnalysisReport, show_checklist: bool = False) -> None:
    """Print a full analysis report.

    Args:
        report: The report to print.
        show_checklist: Also print every failed compliance control.
    """
    definition = trust_level_definition(report.trust_level)
    header = Text.assemble(
        ("File: ", "bold"), (report.file_name, ""),
        ("  Language: ", "bold"), (report.dialect.value, "dim"),
    )
    console.print(Panel(header, title="chainaudit Report"))
    console.print(
        f"  Security Score: [bold]{report.security_score}[/bold]/100 "
        f"({report.risk_level.value})"
    )
    console.print(
        "  EthTrust Level: ",
        Text(f"L{int(report.trust_level)} {definition.name}", style=trust_level_style(report.trust_level)),
    )
    if report.compliance is not None:
        c = report.compliance
        console.print(
            f"  SCSVS v2:       {c.percentage}% "
            f"([green]{c.passed} passed[/green], [red]{c.failed} failed[/red])"
        )

    _print_findings(report)
    if show_checklist and report.compliance is not None:
        _print_failed_controls(report.compliance)

    console.print("[bold]Recommendations[/bold]")
    for line in report.recommendations:
        console.print(f"  - {line}")
    console.print(f"[dim]Analyzed in {report.analysis_time_ms} ms[/dim]")


def _print_findings(report: AnalysisReport) -> None:
    if not report.findings:
        console.print("[green]No findings.[/green]")
        return
    table = Table(title="Findings", show_header=True)
    table.add_column("Severity", justify="center")
    table.add_column("Line", justify="right")
    table.add_column("Weakness")
    table.add_column("Name")
    table.add_column("Confidence", style="dim")
    for f in report.findings:
        table.add_row(
            Text(f.severity.label, style=severity_style(f.severity)),
            str(f.line_number) if f.line_number else "-",
            f.weakness_id,
            f.name,
            f.confidence.value,
        )
    console.print(table)
    s = report.statistics
    console.print(
        f"[bold]{s.total}[/bold] findings | [bold red]{s.critical} critical[/bold red] | "
        f"[yellow]{s.high} high[/yellow] | [cyan]{s.medium} medium[/cyan] | "
        f"[green]{s.low} low[/green] | {s.info} info"
    )


def _print_failed_controls(compliance: ComplianceSummary) -> None:
    failed = compliance.failed_controls
    if not failed:
        return
    table = Table(title="Failed SCSVS Controls", show_header=True)
    table.add_column("Control", style="bold")
    table.add_column("Title")
    table.add_column("Severity", justify="center")
    table.add_column("Findings", style="dim")
    for result in failed:
        table.add_row(
            result.control_id,
            result.title,
            Text(result.severity.label, style=severity_style(result.severity)),
            ", ".join(result.findings),
        )
    console.print(table)


def print_weaknesses(title: str, entries: list[WeaknessEntry]) -> None:
    """Print a weakness registry as a table."""
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="bold")
    table.add_column("Title")
    table.add_column("Severity", justify="center")
    table.add_column("CWE", style="dim")
    for entry in entries:
        table.add_row(
            entry.id,
            entry.title,
            Text(entry.severity.label, style=severity_style(entry.severity)),
            ", ".join(entry.cwe_ids),
        )
    console.print(table)


def print_controls(controls: list[ControlEntry]) -> None:
    """Print the SCSVS v2 control list as a table."""
    table = Table(title="SCSVS v2 Controls", show_header=True)
    table.add_column("ID", style="bold")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("Level", justify="center")
    for control in controls:
        table.add_row(control.id, control.category, control.title, str(control.level))
    console.print(table)


def print_detectors(title: str, detectors: tuple[DetectorDefinition, ...]) -> None:
    """Print a pattern library as a table."""
    table = Table(title=title, show_header=True)
    table.add_column("Detector", style="bold")
    table.add_column("Name")
    table.add_column("Severity", justify="center")
    table.add_column("Weakness", style="dim")
    table.add_column("SCSVS", style="dim")
    for detector in detectors:
        table.add_row(
            detector.id,
            detector.name,
            Text(detector.severity.label, style=severity_style(detector.severity)),
            detector.type_code,
            ", ".join(detector.scsv_ids),
        )
    console.print(table)
