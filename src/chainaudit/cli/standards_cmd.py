"""``chainaudit standards`` -- List the bundled reference registries.

Usage::

    chainaudit standards swc
    chainaudit standards csr --format json
    chainaudit standards scsvs --category "Access Control"

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

import click

from chainaudit.standards import (
    SCSVS_V2_CONTROLS,
    all_csr_entries,
    all_swc_entries,
    controls_by_category,
)
from chainaudit.standards.models import WeaknessEntry


def _weakness_to_json(entry: WeaknessEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "title": entry.title,
        "description": entry.description,
        "remediation": entry.remediation,
        "severity": entry.severity.label,
        "cweIds": list(entry.cwe_ids),
        "references": list(entry.references),
    }


@click.command("standards")
@click.argument("registry", type=click.Choice(["swc", "csr", "scsvs"]), default="swc")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--category", default=None,
    help="Only list SCSVS controls in this category.",
)
def standards_command(registry: str, output_format: str, category: str | None) -> None:
    """List entries of the SWC, CSR or SCSVS v2 registry."""
    if registry == "scsvs":
        controls = controls_by_category(category) if category else list(SCSVS_V2_CONTROLS)
        if output_format == "json":
            click.echo(json.dumps([asdict(c) for c in controls], indent=2))
        else:
            from chainaudit.cli.output import print_controls
            print_controls(controls)
        return

    if registry == "swc":
        title, entries = "SWC Registry", all_swc_entries()
    else:
        title, entries = "Cairo Security Registry", all_csr_entries()
    if output_format == "json":
        click.echo(json.dumps([_weakness_to_json(e) for e in entries], indent=2))
    else:
        from chainaudit.cli.output import print_weaknesses
        print_weaknesses(title, entries)
