"""Endorsement statement construction.

An endorsement is an in-toto statement whose single subject is the endorsed
binary and whose predicate is a claim listing the verified provenances as
evidence::

    {"_type": "https://in-toto.io/Statement/v0.1",
     "predicateType": "https://github.com/project-oak/transparent-release/claim/v1",
     "subject": [{"name": "<binary>", "digest": {"sha2-256": "..."}}],
     "predicate": {
       "claimType": "https://github.com/project-oak/transparent-release/endorsement/v2",
       "issuedOn": "...",
       "validity": {"notBefore": "...", "notAfter": "..."},
       "evidence": [{"role": "Provenance", "uri": "...", "digest": {"sha256": "..."}}]}}

The statement is returned unsigned.
"""

from __future__ import annotations

from datetime import datetime, timezone

from endorsekit.core.claims.models import ClaimValidity, VerifiedProvenanceSet
from endorsekit.core.intoto.statement import STATEMENT_TYPE_V01, Statement, Subject

CLAIM_V1_PREDICATE_TYPE: str = "https://github.com/project-oak/transparent-release/claim/v1"
ENDORSEMENT_V2_CLAIM_TYPE: str = (
    "https://github.com/project-oak/transparent-release/endorsement/v2"
)
PROVENANCE_EVIDENCE_ROLE: str = "Provenance"


def generate_endorsement_statement(
    validity: ClaimValidity,
    verified: VerifiedProvenanceSet,
    issued_on: datetime | None = None,
) -> Statement:
    """Build the (unsigned) endorsement statement for a verified provenance set.

    Args:
        validity: Requested validity window.
        verified: What was verified.
        issued_on: Issuance time; defaults to now (UTC).

    Returns:
        The endorsement as an in-toto ``Statement``.
    """
    issued = issued_on or datetime.now(timezone.utc)
    if issued.tzinfo is None:
        issued = issued.replace(tzinfo=timezone.utc)
    window = validity.resolve(issued)

    evidence = [
        {
            "role": PROVENANCE_EVIDENCE_ROLE,
            "uri": p.uri,
            "digest": {"sha256": p.sha256_digest},
        }
        for p in verified.provenances
    ]
    predicate = {
        "claimType": ENDORSEMENT_V2_CLAIM_TYPE,
        "issuedOn": issued.isoformat(),
        "validity": {
            "notBefore": window.not_before.isoformat(),
            "notAfter": window.not_after.isoformat(),
        },
        "evidence": evidence,
    }
    return Statement(
        type=STATEMENT_TYPE_V01,
        predicate_type=CLAIM_V1_PREDICATE_TYPE,
        subject=(Subject(name=verified.binary_name, digest=dict(verified.digests)),),
        predicate=predicate,
    )
