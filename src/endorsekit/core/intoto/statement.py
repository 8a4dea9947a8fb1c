"""in-toto Statement model and validating parser.

Statement = ``_type`` + ``subject`` (named artifacts with digest sets) +
``predicateType`` + ``predicate``. Parsing validates the statement layer
only; what the predicate means is decided later by
``endorsekit.core.model.mapping``.

References
----------
.. [ITS] in-toto Attestation Framework, Statement layer.
   https://github.com/in-toto/attestation/blob/main/spec/v1/statement.md
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from endorsekit.exceptions import FormatError

STATEMENT_TYPE_V01: str = "https://in-toto.io/Statement/v0.1"
STATEMENT_TYPE_V1: str = "https://in-toto.io/Statement/v1"

SUPPORTED_STATEMENT_TYPES: frozenset[str] = frozenset(
    {STATEMENT_TYPE_V01, STATEMENT_TYPE_V1}
)


@dataclass(frozen=True)
class Subject:
    """An artifact named by a statement.

    Attributes:
        name: Artifact name, e.g. the binary file name.
        digest: Algorithm name -> hex digest, exactly as written in the statement.
    """

    name: str
    digest: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "digest": dict(sorted(self.digest.items()))}


@dataclass(frozen=True)
class Statement:
    """A validated in-toto statement.

    Attributes:
        type: The ``_type`` URI.
        predicate_type: The ``predicateType`` URI.
        subject: The statement subjects, in document order.
        predicate: The predicate object (opaque at this layer).
    """

    type: str
    predicate_type: str
    subject: tuple[Subject, ...]
    predicate: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the in-toto JSON object shape."""
        return {
            "_type": self.type,
            "predicateType": self.predicate_type,
            "subject": [s.to_dict() for s in self.subject],
            "predicate": self.predicate,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialise to a deterministic JSON string."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)


def parse_statement(data: bytes) -> Statement:
    """Parse and validate bytes as a bare in-toto statement.

    Args:
        data: Raw document bytes (UTF-8 JSON).

    Returns:
        The validated ``Statement``.

    Raises:
        FormatError: If the bytes are not a well-formed in-toto statement.
    """
    return statement_from_dict(_load_json_object(data, "in-toto statement"))


def statement_from_dict(obj: dict[str, Any]) -> Statement:
    """Validate an already-decoded JSON object as an in-toto statement."""
    stmt_type = obj.get("_type")
    if stmt_type not in SUPPORTED_STATEMENT_TYPES:
        raise FormatError(f"unsupported statement _type {stmt_type!r}")

    predicate_type = obj.get("predicateType")
    if not isinstance(predicate_type, str) or not predicate_type:
        raise FormatError("statement has no predicateType")

    predicate = obj.get("predicate")
    if not isinstance(predicate, dict):
        raise FormatError("statement predicate must be a JSON object")

    raw_subjects = obj.get("subject")
    if not isinstance(raw_subjects, list) or not raw_subjects:
        raise FormatError("statement must have a non-empty subject list")

    return Statement(
        type=stmt_type,
        predicate_type=predicate_type,
        subject=tuple(_parse_subject(i, s) for i, s in enumerate(raw_subjects)),
        predicate=predicate,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_json_object(data: bytes, what: str) -> dict[str, Any]:
    """Decode UTF-8 JSON bytes that must hold a single object."""
    try:
        obj = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise FormatError(f"{what} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise FormatError(f"{what} is not valid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise FormatError(f"{what} must be a JSON object, got {type(obj).__name__}")
    return obj


def _parse_subject(index: int, raw: Any) -> Subject:
    if not isinstance(raw, dict):
        raise FormatError(f"subject[{index}] must be a JSON object")
    name = raw.get("name")
    if not isinstance(name, str):
        raise FormatError(f"subject[{index}] has no name")
    digest = raw.get("digest")
    if not isinstance(digest, dict) or not digest:
        raise FormatError(f"subject[{index}] has no digest set")
    for alg, value in digest.items():
        if not isinstance(value, str) or not value:
            raise FormatError(f"subject[{index}] digest {alg!r} must be a non-empty string")
    return Subject(name=name, digest=dict(digest))
