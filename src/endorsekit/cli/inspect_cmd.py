"""``endorsekit inspect <uri>...`` — Load provenances and show their canonical form.

Exit Codes:
    0 — All provenances loaded.
    2 — A provenance could not be fetched, parsed or mapped.
"""

from __future__ import annotations

import json
import sys

import click

from endorsekit.endorser import load_provenances
from endorsekit.exceptions import EndorseKitError
from endorsekit.fetch import Deadline


@click.command("inspect")
@click.argument("uris", nargs=-1, required=True)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Overall time limit in seconds for fetching all provenances.",
)
def inspect_command(
    uris: tuple[str, ...], output_format: str, timeout: float | None
) -> None:
    """Load the provenances at URIS and print their canonical fields."""
    deadline = Deadline.after(timeout) if timeout else None
    try:
        provenances = load_provenances(uris, deadline=deadline)
    except EndorseKitError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(2)

    from endorsekit.cli.output import print_provenance_table, provenance_to_json
    if output_format == "json":
        click.echo(json.dumps([provenance_to_json(p) for p in provenances], indent=2))
    else:
        print_provenance_table(provenances)
    sys.exit(0)
