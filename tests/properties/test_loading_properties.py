"""Property-based tests for fetching, loading and the identity gate.

Verifies that:
- Local file fetching returns exactly the bytes on disk.
- Schemes outside file/http/https are always rejected.
- A non-empty file URI host is always rejected.
- The source digest is the SHA-256 of the raw bytes for both encodings.
- The identity check fails for any digest other than the recorded one,
  whatever the caller's policy.
"""
from __future__ import annotations

import base64
import hashlib
import json
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from endorsekit.core.claims import ClaimValidity, ProvenanceSourceMetadata
from endorsekit.core.model import ProvenanceIR
from endorsekit.core.verifier import VerificationOptions
from endorsekit.endorser import ParsedProvenance, generate_endorsement, load_provenance
from endorsekit.exceptions import (
    FetchError,
    UnsupportedSchemeError,
    VerificationError,
    VerificationPhase,
)
from endorsekit.fetch import fetch_bytes


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

hex_digests = st.text(alphabet="0123456789abcdef", min_size=64, max_size=64)

binary_names = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789-_."),
    min_size=1,
    max_size=30,
)

schemes = st.from_regex(r"[a-z][a-z0-9+.-]{0,9}", fullmatch=True).filter(
    lambda s: s not in {"file", "http", "https"}
)

hosts = st.from_regex(r"[a-z][a-z0-9-]{0,20}", fullmatch=True)

permissive_policies = st.builds(
    VerificationOptions,
    provenance_count_at_least=st.one_of(st.none(), st.just(0), st.just(1)),
    all_same_binary_name=st.booleans(),
)


def _statement(name: str, sha256: str) -> dict:
    return {
        "_type": "https://in-toto.io/Statement/v0.1",
        "predicateType": "https://slsa.dev/provenance/v0.2",
        "subject": [{"name": name, "digest": {"sha256": sha256}}],
        "predicate": {
            "buildType": "https://github.com/slsa-framework/slsa-github-generator/generic@v1",
            "builder": {"id": "https://example.com/builder"},
        },
    }


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


@given(content=st.binary(max_size=2048))
def test_file_fetch_returns_exact_bytes(content: bytes) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "provenance.bin"
        path.write_bytes(content)
        assert fetch_bytes(path.as_uri()) == content


@given(scheme=schemes)
def test_unsupported_schemes_rejected(scheme: str) -> None:
    with pytest.raises(UnsupportedSchemeError):
        fetch_bytes(f"{scheme}://example.com/provenance.json")


@given(host=hosts, create=st.booleans())
def test_file_host_always_rejected(host: str, create: bool) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "provenance.json"
        if create:
            path.write_bytes(b"{}")
        with pytest.raises(FetchError):
            fetch_bytes(f"file://{host}{path}")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


@settings(max_examples=50)
@given(name=binary_names, sha256=hex_digests, indent=st.sampled_from([None, 2, 4]),
       enveloped=st.booleans())
def test_source_digest_is_sha256_of_raw_bytes(
    name: str, sha256: str, indent: int | None, enveloped: bool
) -> None:
    document = _statement(name, sha256)
    if enveloped:
        payload = base64.b64encode(json.dumps(document).encode("utf-8")).decode("ascii")
        document = {
            "payloadType": "application/vnd.in-toto+json",
            "payload": payload,
            "signatures": [],
        }
    data = json.dumps(document, indent=indent).encode("utf-8")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "provenance.json"
        path.write_bytes(data)
        parsed = load_provenance(path.as_uri())
    assert parsed.source_metadata.sha256_digest == hashlib.sha256(data).hexdigest()
    assert parsed.provenance.binary_name == name
    assert parsed.provenance.binary_digest("sha2-256") == sha256


# ---------------------------------------------------------------------------
# Identity gate
# ---------------------------------------------------------------------------


@given(recorded=hex_digests, expected=hex_digests, policy=permissive_policies)
def test_identity_cannot_be_bypassed_by_policy(
    recorded: str, expected: str, policy: VerificationOptions
) -> None:
    assume(recorded != expected)
    provenance = ParsedProvenance(
        provenance=ProvenanceIR(binary_name="app", binary_digests={"sha2-256": recorded}),
        source_metadata=ProvenanceSourceMetadata("file:///p.json", recorded),
    )
    with pytest.raises(VerificationError) as excinfo:
        generate_endorsement(
            "app",
            {"sha2-256": expected},
            policy,
            ClaimValidity(duration=timedelta(days=1)),
            [provenance],
        )
    assert excinfo.value.phase is VerificationPhase.IDENTITY
