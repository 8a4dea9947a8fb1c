"""Shared fixtures for endorsekit tests.

Provides builders for SLSA provenance statements and DSSE envelopes, and a
helper that writes provenance documents into ``tmp_path`` and returns their
``file://`` URIs.
"""

from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Any, Callable

import pytest

BINARY_NAME = "app"
BINARY_SHA256 = "d059c38cea82047ad316a1c6c6fbd13ecf7a0abdcc375463920bd25bf5c142cc"
OTHER_SHA256 = "e8e05d1d09af8952919bf6ab38e0cc4a99e2ff9d0d1b0ab6fb4c2d3ae5d2a7c1"
GENERIC_BUILDER = (
    "https://github.com/slsa-framework/slsa-github-generator/"
    ".github/workflows/generator_generic_slsa3.yml@refs/tags/v1.2.0"
)
REPO_URI = "git+https://github.com/example/app@refs/heads/main"


def build_statement(
    name: str = BINARY_NAME,
    sha256: str = BINARY_SHA256,
    *,
    builder: str = GENERIC_BUILDER,
    build_type: str = "https://github.com/slsa-framework/slsa-github-generator/generic@v1",
    predicate_type: str = "https://slsa.dev/provenance/v0.2",
) -> dict[str, Any]:
    """Build a SLSA v0.2 generic-builder provenance statement."""
    return {
        "_type": "https://in-toto.io/Statement/v0.1",
        "predicateType": predicate_type,
        "subject": [{"name": name, "digest": {"sha256": sha256}}],
        "predicate": {
            "builder": {"id": builder},
            "buildType": build_type,
            "invocation": {
                "configSource": {
                    "uri": REPO_URI,
                    "digest": {"sha1": "b0c8c0a1f4e5d6c7b8a9f0e1d2c3b4a5f6e7d8c9"},
                    "entryPoint": ".github/workflows/release.yml",
                },
            },
            "materials": [],
        },
    }


def build_envelope(statement: dict[str, Any]) -> dict[str, Any]:
    """Wrap a statement in an (unsigned-in-spirit) DSSE envelope."""
    payload = base64.b64encode(json.dumps(statement).encode("utf-8")).decode("ascii")
    return {
        "payloadType": "application/vnd.in-toto+json",
        "payload": payload,
        "signatures": [{"keyid": "test-key", "sig": "c2lnbmF0dXJl"}],
    }


def to_bytes(document: dict[str, Any] | bytes) -> bytes:
    if isinstance(document, bytes):
        return document
    return json.dumps(document).encode("utf-8")


@pytest.fixture
def statement_factory() -> Callable[..., dict[str, Any]]:
    """Factory for SLSA v0.2 provenance statements."""
    return build_statement


@pytest.fixture
def envelope_factory() -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Factory for DSSE envelopes around a statement."""
    return build_envelope


@pytest.fixture
def write_provenance(tmp_path: Path) -> Callable[[str, Any], str]:
    """Write a document (dict or raw bytes) under tmp_path; return its file URI."""

    def _write(filename: str, document: dict[str, Any] | bytes) -> str:
        path = tmp_path / filename
        path.write_bytes(to_bytes(document))
        return path.as_uri()

    return _write
