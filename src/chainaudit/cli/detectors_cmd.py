"""``chainaudit detectors`` -- List the detectors of a pattern library.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import json

import click

from chainaudit.core.analyzer import patterns_for
from chainaudit.parsers import Dialect, language_display_name


@click.command("detectors")
@click.option(
    "--dialect",
    type=click.Choice([d.value for d in Dialect]),
    default=Dialect.SOLIDITY.value,
    help="Pattern library to list (default: solidity).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def detectors_command(dialect: str, output_format: str) -> None:
    """List the detectors run for one contract language."""
    detectors = patterns_for(Dialect(dialect))
    if output_format == "json":
        click.echo(json.dumps([
            {
                "id": d.id,
                "name": d.name,
                "severity": d.severity.label,
                "type": d.type_code,
                "scsvIds": list(d.scsv_ids),
            }
            for d in detectors
        ], indent=2))
        return

    from chainaudit.cli.output import print_detectors
    print_detectors(f"{language_display_name(dialect)} Detectors ({len(detectors)})", detectors)
