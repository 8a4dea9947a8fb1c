"""Provenance verification policies and their evaluator.

Submodules:
    options  -- VerificationOptions, BinaryDigests, policy file loading
    engine   -- verify() / collect_failures()
"""

from endorsekit.core.verifier.engine import collect_failures, verify
from endorsekit.core.verifier.options import (
    BinaryDigests,
    VerificationOptions,
    load_options,
)

__all__ = [
    "BinaryDigests",
    "VerificationOptions",
    "collect_failures",
    "load_options",
    "verify",
]
