"""chainaudit CLI -- Static security analysis for smart contracts.

Entry point for the ``chainaudit`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    analyze    -- Analyze a Solidity, Vyper or Cairo source file.
    standards  -- List the SWC, CSR or SCSVS v2 registry.
    detectors  -- List the detectors of a pattern library.

Usage::

    chainaudit analyze ./contracts/Vault.sol
    chainaudit analyze ./contracts/Vault.sol --format json --severity high
    chainaudit analyze ./src/token.cairo --type static --type standards
    chainaudit standards scsvs
    chainaudit detectors --dialect vyper
"""

from __future__ import annotations

import logging

import click

from chainaudit import __version__
from chainaudit.cli.analyze import analyze_command
from chainaudit.cli.detectors_cmd import detectors_command
from chainaudit.cli.standards_cmd import standards_command


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """chainaudit: Static security analysis for smart contracts.

    Detect SWC-classified weaknesses in Solidity, Vyper and Cairo source,
    score them, and check compliance with the SCSVS v2 control list.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(analyze_command)
cli.add_command(standards_command)
cli.add_command(detectors_command)
