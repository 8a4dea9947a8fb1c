"""Endorsement gate: two-phase verification, then statement construction.

Phase 1 (identity) is built here and cannot be overridden: every provenance
must name ``binary_name`` and record ``digests["sha2-256"]`` as its subject
digest. Phase 2 evaluates the caller's policy unmodified. Only when both
pass is a ``VerifiedProvenanceSet`` built and turned into an endorsement.

An empty provenance list is rejected in the identity phase; an endorsement
always rests on at least one provenance.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from endorsekit.core.claims.models import ClaimValidity, VerifiedProvenanceSet
from endorsekit.core.claims.statement import generate_endorsement_statement
from endorsekit.core.intoto.statement import Statement
from endorsekit.core.model.ir import SHA2_256, ProvenanceIR
from endorsekit.core.verifier.engine import verify
from endorsekit.core.verifier.options import BinaryDigests, VerificationOptions
from endorsekit.endorser.loader import ParsedProvenance
from endorsekit.exceptions import PolicyCheckError, VerificationError, VerificationPhase

logger = logging.getLogger(__name__)


def identity_options(binary_name: str, sha256_digest: str) -> VerificationOptions:
    """The mandatory identity policy for ``binary_name`` at ``sha256_digest``."""
    return VerificationOptions(
        all_with_binary_name=binary_name,
        all_with_binary_digests=BinaryDigests(
            formats=(SHA2_256,),
            digests=(sha256_digest,),
        ),
    )


def generate_endorsement(
    binary_name: str,
    digests: dict[str, str],
    policy: VerificationOptions,
    validity: ClaimValidity,
    provenances: Sequence[ParsedProvenance],
    *,
    issued_on: datetime | None = None,
) -> Statement:
    """Verify ``provenances`` and issue an endorsement for the binary.

    Args:
        binary_name: Name of the binary to endorse.
        digests: Digest set of the binary; must contain ``"sha2-256"``.
        policy: Caller-supplied policy, evaluated after the identity check.
        validity: Validity window of the endorsement.
        provenances: Loaded provenances used as evidence.
        issued_on: Issuance time; defaults to now.

    Returns:
        The unsigned endorsement statement.

    Raises:
        VerificationError: If the identity or the policy phase fails.
    """
    provenance_irs = [p.provenance for p in provenances]

    if not provenance_irs:
        raise VerificationError(
            VerificationPhase.IDENTITY, binary_name, ["no provenances to verify"]
        )
    expected = digests.get(SHA2_256)
    if not expected:
        raise VerificationError(
            VerificationPhase.IDENTITY,
            binary_name,
            [f"no {SHA2_256} digest given for the binary"],
        )

    _run_phase(
        VerificationPhase.IDENTITY,
        binary_name,
        provenance_irs,
        identity_options(binary_name, expected),
    )
    _run_phase(VerificationPhase.POLICY, binary_name, provenance_irs, policy)

    verified = VerifiedProvenanceSet(
        digests=dict(digests),
        binary_name=binary_name,
        provenances=tuple(p.source_metadata for p in provenances),
    )
    logger.info(
        "Issuing endorsement for %s backed by %d provenance(s)",
        binary_name,
        len(verified.provenances),
    )
    return generate_endorsement_statement(validity, verified, issued_on=issued_on)


def _run_phase(
    phase: VerificationPhase,
    binary_name: str,
    provenances: list[ProvenanceIR],
    options: VerificationOptions,
) -> None:
    try:
        verify(provenances, options)
    except PolicyCheckError as exc:
        logger.warning("%s check failed for %s: %s", phase.value, binary_name, exc)
        raise VerificationError(phase, binary_name, exc.failures) from exc
