"""Policy evaluation over a set of ProvenanceIR.

``verify`` runs every check configured in a ``VerificationOptions`` and
collects all failures before raising, so a single run reports every
problem with the provenance set rather than only the first one.
"""

from __future__ import annotations

import logging
from typing import Sequence

from endorsekit.core.model.ir import SHA2_256, ProvenanceIR
from endorsekit.core.verifier.options import VerificationOptions
from endorsekit.exceptions import PolicyCheckError

logger = logging.getLogger(__name__)


def verify(provenances: Sequence[ProvenanceIR], options: VerificationOptions) -> None:
    """Check ``provenances`` against ``options``.

    Args:
        provenances: The provenance set under verification.
        options: The policy to enforce.

    Raises:
        PolicyCheckError: Listing every failed check.
    """
    failures = collect_failures(provenances, options)
    if failures:
        logger.debug("Policy rejected %d provenance(s): %s", len(provenances), failures)
        raise PolicyCheckError(failures)


def collect_failures(
    provenances: Sequence[ProvenanceIR], options: VerificationOptions
) -> list[str]:
    """Return a description of every failed check (empty if all pass)."""
    failures: list[str] = []
    count = len(provenances)

    if options.provenance_count_at_least is not None and count < options.provenance_count_at_least:
        failures.append(
            f"got {count} provenance(s), want at least {options.provenance_count_at_least}"
        )
    if options.provenance_count_at_most is not None and count > options.provenance_count_at_most:
        failures.append(
            f"got {count} provenance(s), want at most {options.provenance_count_at_most}"
        )

    if options.all_same_binary_name:
        names = sorted({p.binary_name for p in provenances})
        if len(names) > 1:
            failures.append(f"provenances name different binaries: {names}")

    if options.all_same_binary_digest:
        digests = {p.binary_digest(SHA2_256) for p in provenances}
        if None in digests:
            failures.append(f"a provenance has no {SHA2_256} binary digest")
        elif len(digests) > 1:
            failures.append(f"provenances have different {SHA2_256} digests: {sorted(digests)}")

    for index, provenance in enumerate(provenances):
        failures.extend(
            f"provenance #{index}: {message}"
            for message in _per_provenance_failures(provenance, options)
        )
    return failures


def _per_provenance_failures(
    provenance: ProvenanceIR, options: VerificationOptions
) -> list[str]:
    failures: list[str] = []

    if options.all_with_binary_name is not None and provenance.binary_name != options.all_with_binary_name:
        failures.append(
            f"binary name {provenance.binary_name!r} does not match "
            f"{options.all_with_binary_name!r}"
        )

    if options.all_with_binary_digests is not None:
        for fmt, want in options.all_with_binary_digests.pairs():
            got = provenance.binary_digest(fmt)
            if got is None:
                failures.append(f"no {fmt} binary digest recorded")
            elif got != want.lower():
                failures.append(f"{fmt} binary digest {got!r} does not match {want!r}")

    if options.all_with_build_command and not provenance.build_cmd:
        failures.append("no build command recorded")

    if options.all_with_repository is not None and provenance.repo_uri != options.all_with_repository:
        failures.append(
            f"repository {provenance.repo_uri!r} does not match "
            f"{options.all_with_repository!r}"
        )

    if (
        options.all_with_builder_names is not None
        and provenance.trusted_builder not in options.all_with_builder_names
    ):
        failures.append(f"builder {provenance.trusted_builder!r} is not trusted")

    return failures
