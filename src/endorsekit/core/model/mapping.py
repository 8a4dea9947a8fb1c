"""Map validated in-toto statements onto ProvenanceIR.

Dispatch is on ``predicateType`` first and, for SLSA v0.2, on
``buildType``. Supported:

- SLSA v0.2, slsa-github-generator generic builder
- SLSA v0.2, container-based build (draft)
- SLSA v1, any build type

Anything else raises ``MappingError``.

References
----------
.. [SLSA02] https://slsa.dev/spec/v0.2/provenance
.. [SLSA1]  https://slsa.dev/spec/v1.0/provenance
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from endorsekit.core.intoto.statement import Statement, Subject
from endorsekit.core.model.ir import ProvenanceIR, canonical_digest_set
from endorsekit.exceptions import MappingError

logger = logging.getLogger(__name__)

SLSA_V02_PREDICATE_TYPE: str = "https://slsa.dev/provenance/v0.2"
SLSA_V1_PREDICATE_TYPE: str = "https://slsa.dev/provenance/v1"

GENERIC_GITHUB_BUILD_TYPE: str = (
    "https://github.com/slsa-framework/slsa-github-generator/generic@v1"
)
CONTAINER_BASED_BUILD_TYPE: str = "https://slsa.dev/container-based-build/v0.1?draft"


def from_statement(statement: Statement) -> ProvenanceIR:
    """Map a validated statement to its canonical ProvenanceIR.

    Args:
        statement: A statement produced by ``parse_statement`` or
            ``parse_enveloped_statement``.

    Returns:
        The canonical representation.

    Raises:
        MappingError: If the statement does not have exactly one subject,
            or its predicate/build type is not supported, or the predicate
            lacks a field the build type requires.
    """
    if len(statement.subject) != 1:
        raise MappingError(
            f"expected exactly one subject, got {len(statement.subject)}"
        )
    mapper = _PREDICATE_MAPPERS.get(statement.predicate_type)
    if mapper is None:
        raise MappingError(f"unsupported predicateType {statement.predicate_type!r}")
    provenance = mapper(statement.subject[0], statement.predicate)
    logger.debug(
        "Mapped %s provenance for %s (buildType=%s)",
        statement.predicate_type,
        provenance.binary_name,
        provenance.build_type,
    )
    return provenance


# ---------------------------------------------------------------------------
# SLSA v0.2
# ---------------------------------------------------------------------------


def _from_slsa_v02(subject: Subject, predicate: dict[str, Any]) -> ProvenanceIR:
    build_type = predicate.get("buildType")
    if build_type == GENERIC_GITHUB_BUILD_TYPE:
        config_source = _dig(predicate, "invocation", "configSource") or {}
        return _base_ir(
            subject,
            SLSA_V02_PREDICATE_TYPE,
            build_type,
            trusted_builder=_require_str(predicate, "builder", "id"),
            repo_uri=_optional_str(config_source, "uri"),
            commit_sha1_digest=_optional_str(config_source, "digest", "sha1"),
        )
    if build_type == CONTAINER_BASED_BUILD_TYPE:
        command = _dig(predicate, "buildConfig", "command")
        if (
            not isinstance(command, list)
            or not command
            or not all(isinstance(part, str) for part in command)
        ):
            raise MappingError("buildConfig.command must be a non-empty list of strings")
        materials = predicate.get("materials")
        if not isinstance(materials, list) or not materials:
            raise MappingError("container-based provenance has no materials")
        builder_image = _require_str(materials[0], "digest", "sha256")
        repo = materials[1] if len(materials) > 1 else {}
        return _base_ir(
            subject,
            SLSA_V02_PREDICATE_TYPE,
            build_type,
            build_cmd=tuple(command),
            builder_image_sha256_digest=builder_image.lower(),
            repo_uri=_optional_str(repo, "uri"),
            commit_sha1_digest=_optional_str(repo, "digest", "sha1"),
            trusted_builder=_optional_str(predicate, "builder", "id"),
        )
    raise MappingError(f"unsupported buildType {build_type!r} for SLSA v0.2")


# ---------------------------------------------------------------------------
# SLSA v1
# ---------------------------------------------------------------------------


def _from_slsa_v1(subject: Subject, predicate: dict[str, Any]) -> ProvenanceIR:
    build_type = _require_str(predicate, "buildDefinition", "buildType")
    dependencies = _dig(predicate, "buildDefinition", "resolvedDependencies") or []
    source = dependencies[0] if isinstance(dependencies, list) and dependencies else {}
    commit = _optional_str(source, "digest", "gitCommit") or _optional_str(
        source, "digest", "sha1"
    )
    return _base_ir(
        subject,
        SLSA_V1_PREDICATE_TYPE,
        build_type,
        trusted_builder=_require_str(predicate, "runDetails", "builder", "id"),
        repo_uri=_optional_str(source, "uri"),
        commit_sha1_digest=commit,
    )


_PREDICATE_MAPPERS: dict[str, Callable[[Subject, dict[str, Any]], ProvenanceIR]] = {
    SLSA_V02_PREDICATE_TYPE: _from_slsa_v02,
    SLSA_V1_PREDICATE_TYPE: _from_slsa_v1,
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _base_ir(
    subject: Subject,
    predicate_type: str,
    build_type: str,
    **fields: Any,
) -> ProvenanceIR:
    return ProvenanceIR(
        binary_name=subject.name,
        binary_digests=canonical_digest_set(subject.digest),
        predicate_type=predicate_type,
        build_type=build_type,
        **fields,
    )


def _dig(obj: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _optional_str(obj: Any, *keys: str) -> str | None:
    value = _dig(obj, *keys)
    return value if isinstance(value, str) and value else None


def _require_str(obj: Any, *keys: str) -> str:
    value = _optional_str(obj, *keys)
    if value is None:
        raise MappingError(f"predicate has no {'.'.join(keys)}")
    return value
