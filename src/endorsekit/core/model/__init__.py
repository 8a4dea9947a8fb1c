"""Canonical provenance model.

Submodules:
    ir       -- ProvenanceIR and digest-name canonicalisation
    mapping  -- predicate/build-type specific mapping into ProvenanceIR
"""

from endorsekit.core.model.ir import (
    SHA1,
    SHA2_256,
    SHA2_384,
    SHA2_512,
    ProvenanceIR,
    canonical_digest_set,
)
from endorsekit.core.model.mapping import (
    CONTAINER_BASED_BUILD_TYPE,
    GENERIC_GITHUB_BUILD_TYPE,
    SLSA_V02_PREDICATE_TYPE,
    SLSA_V1_PREDICATE_TYPE,
    from_statement,
)

__all__ = [
    "CONTAINER_BASED_BUILD_TYPE",
    "GENERIC_GITHUB_BUILD_TYPE",
    "SHA1",
    "SHA2_256",
    "SHA2_384",
    "SHA2_512",
    "SLSA_V02_PREDICATE_TYPE",
    "SLSA_V1_PREDICATE_TYPE",
    "ProvenanceIR",
    "canonical_digest_set",
    "from_statement",
]
