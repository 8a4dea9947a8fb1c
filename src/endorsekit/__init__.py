"""EndorseKit: Provenance-backed endorsement statements for software artifacts."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "Apache-2.0"
