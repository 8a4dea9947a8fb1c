"""ProvenanceIR: the canonical, build-type-agnostic provenance representation.

Every supported predicate/build type is mapped onto this one shape so the
verifier never needs to know where a field came from. Fields a build type
does not record are left as ``None``; checks that need them fail rather
than pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from endorsekit.exceptions import MappingError

# Canonical digest algorithm names used across EndorseKit.
SHA1: str = "sha1"
SHA2_256: str = "sha2-256"
SHA2_384: str = "sha2-384"
SHA2_512: str = "sha2-512"

# in-toto digest keys -> canonical algorithm names.
_INTOTO_DIGEST_ALIASES: dict[str, str] = {
    "sha256": SHA2_256,
    "sha384": SHA2_384,
    "sha512": SHA2_512,
}


def canonical_digest_set(digests: dict[str, str]) -> dict[str, str]:
    """Rename in-toto digest keys to canonical names and lowercase the hex.

    ``{"sha256": "ABC"}`` becomes ``{"sha2-256": "abc"}``. Keys that are
    already canonical or unknown are kept as they are.

    Raises:
        MappingError: If two keys name the same algorithm with different
            values, e.g. ``sha256`` and ``sha2-256``.
    """
    canonical: dict[str, str] = {}
    for alg, value in digests.items():
        name = _INTOTO_DIGEST_ALIASES.get(alg.lower(), alg.lower())
        value = value.lower()
        if canonical.get(name, value) != value:
            raise MappingError(f"conflicting digests for {name}")
        canonical[name] = value
    return canonical


@dataclass(frozen=True)
class ProvenanceIR:
    """Canonical view of one provenance document.

    Attributes:
        binary_name: Name of the single subject the provenance describes.
        binary_digests: Canonical digest set of that subject.
        predicate_type: The statement's predicate type URI.
        build_type: The build type URI recorded in the predicate.
        build_cmd: Build command, if the build type records one.
        builder_image_sha256_digest: Digest of the builder container image.
        repo_uri: Source repository URI.
        commit_sha1_digest: Source commit the build was run from.
        trusted_builder: Identifier of the build platform (builder id).
    """

    binary_name: str
    binary_digests: dict[str, str] = field(default_factory=dict)
    predicate_type: str = ""
    build_type: str = ""
    build_cmd: tuple[str, ...] | None = None
    builder_image_sha256_digest: str | None = None
    repo_uri: str | None = None
    commit_sha1_digest: str | None = None
    trusted_builder: str | None = None

    def binary_digest(self, algorithm: str) -> str | None:
        """Return the subject digest for ``algorithm``, or None if not recorded."""
        return self.binary_digests.get(algorithm)
