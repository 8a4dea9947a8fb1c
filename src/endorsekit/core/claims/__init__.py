"""Endorsement claims.

All public names are re-exported here so that imports of the form
``from endorsekit.core.claims import ClaimValidity`` work.
"""

from endorsekit.core.claims.models import (
    DEFAULT_VALIDITY_DAYS,
    ClaimValidity,
    ProvenanceSourceMetadata,
    Validity,
    VerifiedProvenanceSet,
)
from endorsekit.core.claims.statement import (
    CLAIM_V1_PREDICATE_TYPE,
    ENDORSEMENT_V2_CLAIM_TYPE,
    generate_endorsement_statement,
)

__all__ = [
    "CLAIM_V1_PREDICATE_TYPE",
    "DEFAULT_VALIDITY_DAYS",
    "ENDORSEMENT_V2_CLAIM_TYPE",
    "ClaimValidity",
    "ProvenanceSourceMetadata",
    "Validity",
    "VerifiedProvenanceSet",
    "generate_endorsement_statement",
]
