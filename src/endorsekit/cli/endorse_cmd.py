"""``endorsekit endorse`` — Verify provenances and issue an endorsement.

Loads every ``--provenance-uri``, checks that each one names the binary and
its sha2-256 digest, applies the optional ``--policy`` file, and writes an
unsigned endorsement statement (in-toto JSON).

Exit Codes:
    0 — Endorsement issued.
    1 — Provenances failed verification.
    2 — A provenance or the policy could not be loaded.
"""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import click

from endorsekit.core.claims import DEFAULT_VALIDITY_DAYS, ClaimValidity
from endorsekit.core.model import SHA2_256, canonical_digest_set
from endorsekit.core.verifier import VerificationOptions, load_options
from endorsekit.endorser import generate_endorsement, load_provenances
from endorsekit.exceptions import EndorseKitError, VerificationError
from endorsekit.fetch import Deadline, ProvenanceFetcher


def _parse_digests(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning ``ALG:HEX`` options into a canonical digest set."""
    digests: dict[str, str] = {}
    for value in values:
        alg, sep, digest = value.partition(":")
        if not sep or not alg or not digest:
            raise click.BadParameter(f"expected ALG:HEX, got {value!r}")
        ((name, hex_digest),) = canonical_digest_set({alg: digest}).items()
        if digests.get(name, hex_digest) != hex_digest:
            raise click.BadParameter(f"conflicting digests for {name}")
        digests[name] = hex_digest
    if SHA2_256 not in digests:
        raise click.BadParameter(f"a {SHA2_256} digest is required")
    return digests


@click.command("endorse")
@click.option("--binary-name", required=True, help="Name of the binary to endorse.")
@click.option(
    "--binary-digest", "digests",
    multiple=True,
    required=True,
    callback=_parse_digests,
    help="Binary digest as ALG:HEX (repeatable; sha2-256 required).",
)
@click.option(
    "--provenance-uri", "-p", "provenance_uris",
    multiple=True,
    required=True,
    help="file://, http:// or https:// URI of a provenance (repeatable).",
)
@click.option(
    "--policy",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML/JSON verification policy (default: identity check only).",
)
@click.option(
    "--not-before",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="Start of the validity window, UTC (default: now).",
)
@click.option(
    "--validity-days",
    type=click.IntRange(min=1),
    default=DEFAULT_VALIDITY_DAYS,
    show_default=True,
    help="Length of the validity window in days.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Overall time limit in seconds for fetching all provenances.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the endorsement here instead of stdout.",
)
def endorse_command(
    binary_name: str,
    digests: dict[str, str],
    provenance_uris: tuple[str, ...],
    policy: str | None,
    not_before,
    validity_days: int,
    timeout: float | None,
    output: str | None,
) -> None:
    """Issue an endorsement for a binary backed by verified provenances.

    Exit code 0 when the endorsement is issued, 1 if verification fails,
    2 if a provenance or the policy cannot be loaded.
    """
    try:
        options = load_options(Path(policy)) if policy else VerificationOptions()
        deadline = Deadline.after(timeout) if timeout else None
        provenances = load_provenances(
            provenance_uris, deadline=deadline, fetcher=ProvenanceFetcher()
        )
    except EndorseKitError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    validity = ClaimValidity(
        not_before=not_before,
        duration=timedelta(days=validity_days),
    )
    try:
        statement = generate_endorsement(
            binary_name, digests, options, validity, provenances
        )
    except VerificationError as exc:
        click.echo(f"Verification failed: {exc}")
        sys.exit(1)

    if output is None:
        click.echo(statement.to_json())
        sys.exit(0)

    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(statement.to_json(), encoding="utf-8")

    from endorsekit.cli.output import print_endorsement_summary
    print_endorsement_summary(statement)
    click.echo(f"\nEndorsement written to: {out_path}")
    sys.exit(0)
