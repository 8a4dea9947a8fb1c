"""Provenance loading and the endorsement gate.

Public API::

    from endorsekit.endorser import (
        ParsedProvenance, load_provenance, load_provenances, generate_endorsement,
    )
"""

from endorsekit.endorser.gate import generate_endorsement, identity_options
from endorsekit.endorser.loader import (
    ParsedProvenance,
    load_provenance,
    load_provenances,
)

__all__ = [
    "ParsedProvenance",
    "generate_endorsement",
    "identity_options",
    "load_provenance",
    "load_provenances",
]
