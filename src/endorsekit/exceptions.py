"""EndorseKit exception hierarchy.

All public exceptions inherit from EndorseKitError, giving callers a single
base class to catch when they want to handle any EndorseKit-specific failure
without swallowing unrelated errors.

Every exception that concerns a particular provenance source carries the
source URI, and every layer re-raises with ``raise ... from exc`` so the
original cause stays available on ``__cause__``.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class EndorseKitError(Exception):
    """Base exception for all EndorseKit errors."""


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


class UnsupportedSchemeError(EndorseKitError):
    """Raised when a provenance URI uses a scheme other than file/http/https."""

    def __init__(self, uri: str, scheme: str) -> None:
        self.uri = uri
        self.scheme = scheme
        super().__init__(f"unsupported URI scheme ({scheme!r}) in {uri!r}")


class FetchError(EndorseKitError):
    """Raised when the bytes behind a provenance URI cannot be retrieved.

    Covers transport failures, unreadable response bodies, HTTP error
    statuses, missing or unreadable local files, and invalid ``file`` URI
    host/path combinations.
    """

    def __init__(self, uri: str, reason: str) -> None:
        self.uri = uri
        self.reason = reason
        super().__init__(f"could not fetch {uri!r}: {reason}")


class DeadlineExceededError(FetchError):
    """Raised when a fetch is attempted after its deadline expired or was cancelled."""


# ---------------------------------------------------------------------------
# Parsing and mapping
# ---------------------------------------------------------------------------


class FormatError(EndorseKitError):
    """Raised when bytes do not match one specific document format.

    Used for a single parse attempt (bare in-toto statement or DSSE
    envelope). When every format has been tried, the individual failures
    are aggregated into a ``ParseError``.
    """


class ParseError(EndorseKitError):
    """Raised when neither a bare statement nor a DSSE envelope could be parsed.

    Attributes:
        uri: The provenance source the bytes came from.
        statement_error: Failure from the bare in-toto statement attempt.
        envelope_error: Failure from the DSSE envelope attempt.
    """

    def __init__(
        self,
        uri: str,
        statement_error: FormatError,
        envelope_error: FormatError,
    ) -> None:
        self.uri = uri
        self.statement_error = statement_error
        self.envelope_error = envelope_error
        super().__init__(
            f"could not parse bytes from {uri!r} into a validated provenance: "
            f"parsing bytes as an in-toto statement: {statement_error}; "
            f"parsing bytes as a DSSE envelope: {envelope_error}"
        )


class MappingError(EndorseKitError):
    """Raised when a parsed statement cannot be mapped to a ProvenanceIR.

    Typically an unknown predicate type or build type, or a predicate that
    lacks the fields its build type requires.
    """

    def __init__(self, reason: str, uri: str | None = None) -> None:
        self.uri = uri
        self.reason = reason
        if uri is None:
            super().__init__(reason)
        else:
            super().__init__(
                f"could not map {uri!r} to the internal representation: {reason}"
            )


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


class PolicyFormatError(EndorseKitError):
    """Raised when a policy document cannot be read into VerificationOptions."""


class PolicyCheckError(EndorseKitError):
    """Raised by the verifier when one or more policy checks fail.

    Attributes:
        failures: Human-readable description of every failed check.
    """

    def __init__(self, failures: Sequence[str]) -> None:
        self.failures = tuple(failures)
        super().__init__("; ".join(self.failures))


class VerificationPhase(Enum):
    """The endorsement gate phase a verification failure belongs to."""

    IDENTITY = "identity"
    POLICY = "policy"


class VerificationError(EndorseKitError):
    """Raised when provenances fail the endorsement gate.

    Attributes:
        phase: Which gate phase failed.
        binary_name: The binary the endorsement was requested for.
        failures: Failed check descriptions.
    """

    def __init__(
        self,
        phase: VerificationPhase,
        binary_name: str,
        failures: Sequence[str],
    ) -> None:
        self.phase = phase
        self.binary_name = binary_name
        self.failures = tuple(failures)
        super().__init__(
            f"failed to verify provenances for {binary_name!r} "
            f"({phase.value} check): {'; '.join(self.failures)}"
        )


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------


class ClaimValidityError(EndorseKitError):
    """Raised when an endorsement validity window is malformed."""
