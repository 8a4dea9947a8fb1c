"""EndorseKit CLI — Provenance-backed endorsements for software artifacts.

Entry point for the ``endorsekit`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    endorse — Verify provenances and issue an endorsement statement.
    inspect — Load provenances and show their canonical form.

Usage::

    endorsekit endorse --binary-name app \\
        --binary-digest sha2-256:d059c38c... \\
        -p file:///tmp/provenance.json \\
        --policy policy.yaml -o endorsement.json
    endorsekit inspect https://example.com/provenance.json
"""

from __future__ import annotations

import logging

import click

from endorsekit import __version__
from endorsekit.cli.endorse_cmd import endorse_command
from endorsekit.cli.inspect_cmd import inspect_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
def cli(verbose: bool) -> None:
    """EndorseKit: Provenance-backed endorsements for software artifacts.

    Load SLSA provenances from local files or HTTP(S) endpoints, verify
    them against the binary's identity and a policy, and issue an
    endorsement statement.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(endorse_command)
cli.add_command(inspect_command)
