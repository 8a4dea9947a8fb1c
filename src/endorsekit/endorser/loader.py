"""Provenance normalizer: URI -> ParsedProvenance.

Each document is fetched once, then parsed as a bare in-toto statement or,
failing that, as a DSSE envelope wrapping one. The validated statement is
mapped to ``ProvenanceIR`` and paired with the URI and the SHA-256 of the
raw bytes. For an enveloped provenance the digest is therefore that of
the envelope document, not of the payload.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Iterable

from endorsekit.core.claims.models import ProvenanceSourceMetadata
from endorsekit.core.intoto.dsse import parse_enveloped_statement
from endorsekit.core.intoto.statement import Statement, parse_statement
from endorsekit.core.model.ir import ProvenanceIR
from endorsekit.core.model.mapping import from_statement
from endorsekit.exceptions import FormatError, MappingError, ParseError
from endorsekit.fetch.deadline import Deadline
from endorsekit.fetch.fetcher import ProvenanceFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedProvenance:
    """A provenance in canonical form plus where it was loaded from."""

    provenance: ProvenanceIR
    source_metadata: ProvenanceSourceMetadata


def load_provenance(
    uri: str,
    *,
    deadline: Deadline | None = None,
    fetcher: ProvenanceFetcher | None = None,
) -> ParsedProvenance:
    """Load, parse and normalize the provenance at ``uri``.

    Args:
        uri: ``file``, ``http`` or ``https`` URI of the document.
        deadline: Optional deadline/cancellation token for the fetch.
        fetcher: Fetcher to use; a default ``ProvenanceFetcher`` otherwise.

    Returns:
        The parsed provenance.

    Raises:
        UnsupportedSchemeError: For unsupported URI schemes.
        FetchError: If the bytes cannot be retrieved.
        ParseError: If the bytes are neither a statement nor an envelope.
        MappingError: If the statement's predicate/build type is unsupported.
    """
    fetcher = fetcher or ProvenanceFetcher()
    data = fetcher.fetch_bytes(uri, deadline=deadline)

    statement = _parse_any_format(uri, data)
    try:
        provenance = from_statement(statement)
    except MappingError as exc:
        raise MappingError(exc.reason, uri=uri) from exc

    parsed = ParsedProvenance(
        provenance=provenance,
        source_metadata=ProvenanceSourceMetadata(
            uri=uri,
            sha256_digest=hashlib.sha256(data).hexdigest(),
        ),
    )
    logger.info(
        "Loaded provenance for %s from %s (sha256=%s)",
        provenance.binary_name,
        uri,
        parsed.source_metadata.sha256_digest,
    )
    return parsed


def load_provenances(
    uris: Iterable[str],
    *,
    deadline: Deadline | None = None,
    fetcher: ProvenanceFetcher | None = None,
) -> list[ParsedProvenance]:
    """Load every URI in order, stopping at the first failure.

    Returns:
        Parsed provenances, index-for-index with ``uris``.

    Raises:
        The first error raised by ``load_provenance``; no partial result
        is returned and later URIs are not touched.
    """
    fetcher = fetcher or ProvenanceFetcher()
    return [
        load_provenance(uri, deadline=deadline, fetcher=fetcher)
        for uri in uris
    ]


def _parse_any_format(uri: str, data: bytes) -> Statement:
    """Bare statement first, DSSE envelope second; first success wins."""
    try:
        return parse_statement(data)
    except FormatError as statement_error:
        logger.debug(
            "%s is not a bare in-toto statement (%s); trying DSSE envelope",
            uri,
            statement_error,
        )
        try:
            return parse_enveloped_statement(data)
        except FormatError as envelope_error:
            raise ParseError(uri, statement_error, envelope_error) from envelope_error
