"""in-toto statement and DSSE envelope wire formats.

All public names are re-exported here so callers can write
``from endorsekit.core.intoto import parse_statement``.
"""

from endorsekit.core.intoto.dsse import (
    PAYLOAD_TYPE_IN_TOTO,
    Envelope,
    Signature,
    parse_envelope,
    parse_enveloped_statement,
)
from endorsekit.core.intoto.statement import (
    STATEMENT_TYPE_V01,
    STATEMENT_TYPE_V1,
    Statement,
    Subject,
    parse_statement,
    statement_from_dict,
)

__all__ = [
    "PAYLOAD_TYPE_IN_TOTO",
    "STATEMENT_TYPE_V01",
    "STATEMENT_TYPE_V1",
    "Envelope",
    "Signature",
    "Statement",
    "Subject",
    "parse_envelope",
    "parse_enveloped_statement",
    "parse_statement",
    "statement_from_dict",
]
