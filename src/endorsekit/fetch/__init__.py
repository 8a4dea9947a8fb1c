"""Provenance source fetching over ``file``, ``http`` and ``https`` URIs.

Public API::

    from endorsekit.fetch import Deadline, ProvenanceFetcher, fetch_bytes
"""

from __future__ import annotations

from endorsekit.fetch.deadline import Deadline
from endorsekit.fetch.fetcher import (
    DEFAULT_TIMEOUT,
    SUPPORTED_SCHEMES,
    ProvenanceFetcher,
    fetch_bytes,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "SUPPORTED_SCHEMES",
    "Deadline",
    "ProvenanceFetcher",
    "fetch_bytes",
]
