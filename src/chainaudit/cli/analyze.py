"""``chainaudit analyze <path>`` -- Analyze one smart-contract source file.

Runs the full pipeline (static analysis, optional AI enhancement, scoring,
SCSVS v2 compliance) and prints the report as a table or as JSON.

Exit Codes:
    0 -- No Critical or High findings remain after filtering.
    1 -- One or more Critical or High findings.
    2 -- The input was rejected or the configuration is invalid.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from chainaudit.audit import AnalysisReport, AnalysisRequest, AnalysisType, ContractAuditor
from chainaudit.config import load_config
from chainaudit.exceptions import ConfigurationError, InputValidationError
from chainaudit.parsers import Dialect


def _run_audit(auditor: ContractAuditor, request: AnalysisRequest) -> AnalysisReport:
    """Run the async pipeline in a synchronous context."""
    return asyncio.run(auditor.analyze(request))


def _fail(message: str, output_format: str) -> NoReturn:
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(2)


@click.command("analyze")
@click.argument("contract_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--severity",
    type=click.Choice(["all", "critical", "high", "medium", "low"], case_sensitive=False),
    default="all",
    help="Keep findings at or above this severity (default: all).",
)
@click.option(
    "--type", "analysis_types",
    type=click.Choice([t.value for t in AnalysisType]),
    multiple=True,
    help="Analysis facet to run; repeatable (default: all facets).",
)
@click.option(
    "--language",
    type=click.Choice([d.value for d in Dialect]),
    default=None,
    help="Force the contract language instead of detecting it.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML configuration file (default: ./.chainaudit.yml if present).",
)
@click.option(
    "--checklist", is_flag=True, default=False,
    help="Also list failed SCSVS v2 controls (text output).",
)
def analyze_command(
    contract_path: str,
    output_format: str,
    severity: str,
    analysis_types: tuple[str, ...],
    language: str | None,
    config_path: str | None,
    checklist: bool,
) -> None:
    """Analyze the smart contract at CONTRACT_PATH.

    Exit code 0 when no Critical/High findings remain, 1 otherwise, and
    2 when the input or configuration is rejected.
    """
    path = Path(contract_path)
    try:
        config = load_config(config_path)
    except ConfigurationError as exc:
        _fail(str(exc), output_format)

    try:
        code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"Cannot read {contract_path}: {exc}", output_format)

    request = AnalysisRequest(
        contract_code=code,
        file_name=path.name,
        analysis_types=(
            frozenset(AnalysisType(t) for t in analysis_types)
            if analysis_types else frozenset(AnalysisType)
        ),
        severity=severity.lower(),
        language=Dialect(language) if language else None,
    )

    try:
        report = _run_audit(ContractAuditor(config=config), request)
    except InputValidationError as exc:
        _fail(str(exc), output_format)

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        from chainaudit.cli.output import print_report
        print_report(report, show_checklist=checklist)

    sys.exit(1 if report.has_blocking_findings else 0)
