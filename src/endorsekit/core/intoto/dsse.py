"""DSSE envelope parsing.

A DSSE envelope wraps a base64-encoded payload together with its
signatures::

    {"payloadType": "application/vnd.in-toto+json",
     "payload": "<base64>",
     "signatures": [{"keyid": "...", "sig": "<base64>"}]}

Signatures are carried through untouched; verifying them requires key
material, which is outside this package.

References
----------
.. [DSSE] Dead Simple Signing Envelope.
   https://github.com/secure-systems-lab/dsse/blob/master/envelope.md
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any

from endorsekit.core.intoto.statement import (
    Statement,
    _load_json_object,
    parse_statement,
)
from endorsekit.exceptions import FormatError

PAYLOAD_TYPE_IN_TOTO: str = "application/vnd.in-toto+json"


@dataclass(frozen=True)
class Signature:
    """One DSSE signature. ``keyid`` is optional in the envelope format."""

    sig: str
    keyid: str = ""


@dataclass(frozen=True)
class Envelope:
    """A decoded DSSE envelope.

    Attributes:
        payload_type: The ``payloadType`` media type.
        payload: Decoded payload bytes.
        signatures: Signatures as found in the envelope.
    """

    payload_type: str
    payload: bytes
    signatures: tuple[Signature, ...]


def parse_envelope(data: bytes) -> Envelope:
    """Parse bytes as a DSSE envelope carrying an in-toto payload.

    Raises:
        FormatError: If the bytes are not a well-formed envelope.
    """
    obj = _load_json_object(data, "DSSE envelope")

    payload_type = obj.get("payloadType")
    if payload_type != PAYLOAD_TYPE_IN_TOTO:
        raise FormatError(
            f"unsupported payloadType {payload_type!r}, expected {PAYLOAD_TYPE_IN_TOTO!r}"
        )

    encoded = obj.get("payload")
    if not isinstance(encoded, str) or not encoded:
        raise FormatError("envelope has no payload")

    raw_signatures = obj.get("signatures")
    if not isinstance(raw_signatures, list):
        raise FormatError("envelope signatures must be a list")

    return Envelope(
        payload_type=payload_type,
        payload=_decode_payload(encoded),
        signatures=tuple(_parse_signature(i, s) for i, s in enumerate(raw_signatures)),
    )


def parse_enveloped_statement(data: bytes) -> Statement:
    """Parse a DSSE envelope and validate its payload as an in-toto statement."""
    envelope = parse_envelope(data)
    try:
        return parse_statement(envelope.payload)
    except FormatError as exc:
        raise FormatError(f"envelope payload: {exc}") from exc


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _decode_payload(encoded: str) -> bytes:
    """Decode standard or URL-safe base64, as both are allowed by DSSE."""
    padded = encoded + "=" * (-len(encoded) % 4)
    try:
        if "-" in encoded or "_" in encoded:
            return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        return base64.b64decode(padded.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise FormatError(f"envelope payload is not valid base64: {exc}") from exc


def _parse_signature(index: int, raw: Any) -> Signature:
    if not isinstance(raw, dict) or not isinstance(raw.get("sig"), str):
        raise FormatError(f"signatures[{index}] must be an object with a 'sig' string")
    keyid = raw.get("keyid", "")
    return Signature(sig=raw["sig"], keyid=keyid if isinstance(keyid, str) else "")
