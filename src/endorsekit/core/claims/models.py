"""Claim data models: validity windows and the verified-evidence record.

These are pure data holders (dataclasses), safe to import anywhere without
circular-dependency concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from endorsekit.exceptions import ClaimValidityError

DEFAULT_VALIDITY_DAYS: int = 90


@dataclass(frozen=True)
class Validity:
    """A resolved validity window, both ends timezone-aware."""

    not_before: datetime
    not_after: datetime


@dataclass(frozen=True)
class ClaimValidity:
    """Requested validity window for an endorsement.

    Attributes:
        not_before: Start of the window. None means "at issuance".
        duration: Length of the window; must be positive.
    """

    not_before: datetime | None = None
    duration: timedelta = field(default_factory=lambda: timedelta(days=DEFAULT_VALIDITY_DAYS))

    def __post_init__(self) -> None:
        if self.duration <= timedelta(0):
            raise ClaimValidityError(
                f"validity duration must be positive, got {self.duration}"
            )

    def resolve(self, issued_on: datetime) -> Validity:
        """Turn the request into a concrete window.

        Naive datetimes are interpreted as UTC.
        """
        start = _as_utc(self.not_before or issued_on)
        return Validity(not_before=start, not_after=start + self.duration)


@dataclass(frozen=True)
class ProvenanceSourceMetadata:
    """Where a provenance came from and the SHA-256 of its raw bytes."""

    uri: str
    sha256_digest: str


@dataclass(frozen=True)
class VerifiedProvenanceSet:
    """The record of what was verified, without provenance content.

    Attributes:
        digests: The endorsed artifact's digest set.
        binary_name: The endorsed artifact's name.
        provenances: Source metadata of every provenance used as evidence.
    """

    digests: dict[str, str]
    binary_name: str
    provenances: tuple[ProvenanceSourceMetadata, ...] = ()


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
