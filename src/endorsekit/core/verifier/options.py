"""VerificationOptions: the policy evaluated against a set of provenances.

A policy is a flat conjunction of optional checks. A check that is left at
its default (``None`` or ``False``) is not evaluated; an empty
``VerificationOptions()`` therefore accepts any provenance set.

Policies are usually written as YAML (or JSON) documents::

    provenance_count_at_least: 2
    all_same_binary_digest: true
    all_with_repository: https://github.com/org/repo
    all_with_builder_names:
      - https://github.com/slsa-framework/slsa-github-generator/.github/workflows/generator_generic_slsa3.yml@refs/tags/v1.2.0
    all_with_binary_digests:
      formats: [sha2-256]
      digests: [d059c38cea82047ad316a1c6c6fbd13ecf7a0abdcc375463920bd25bf5c142cc]
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from endorsekit.exceptions import PolicyFormatError


@dataclass(frozen=True)
class BinaryDigests:
    """Expected subject digests, as parallel ``formats``/``digests`` tuples."""

    formats: tuple[str, ...]
    digests: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.formats) != len(self.digests):
            raise PolicyFormatError(
                f"all_with_binary_digests has {len(self.formats)} formats "
                f"but {len(self.digests)} digests"
            )

    def pairs(self) -> list[tuple[str, str]]:
        return list(zip(self.formats, self.digests))


@dataclass(frozen=True)
class VerificationOptions:
    """Policy checks applied to every provenance in a set.

    Attributes:
        provenance_count_at_least: Minimum number of provenances.
        provenance_count_at_most: Maximum number of provenances.
        all_same_binary_name: All provenances name the same binary.
        all_same_binary_digest: All provenances share one sha2-256 digest.
        all_with_binary_name: Every provenance names exactly this binary.
        all_with_binary_digests: Every provenance records these digests.
        all_with_build_command: Every provenance records a build command.
        all_with_repository: Every provenance was built from this repository.
        all_with_builder_names: Every provenance's builder is one of these.
    """

    provenance_count_at_least: int | None = None
    provenance_count_at_most: int | None = None
    all_same_binary_name: bool = False
    all_same_binary_digest: bool = False
    all_with_binary_name: str | None = None
    all_with_binary_digests: BinaryDigests | None = None
    all_with_build_command: bool = False
    all_with_repository: str | None = None
    all_with_builder_names: tuple[str, ...] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VerificationOptions:
        """Build options from a decoded policy document.

        Raises:
            PolicyFormatError: On unknown keys or wrongly typed values.
        """
        if not isinstance(data, dict):
            raise PolicyFormatError(
                f"policy must be a mapping, got {type(data).__name__}"
            )
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise PolicyFormatError(f"unknown policy keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key in ("provenance_count_at_least", "provenance_count_at_most"):
            if data.get(key) is not None:
                kwargs[key] = _expect_count(key, data[key])
        for key in ("all_same_binary_name", "all_same_binary_digest", "all_with_build_command"):
            if key in data:
                kwargs[key] = _expect(key, data[key], bool)
        for key in ("all_with_binary_name", "all_with_repository"):
            if data.get(key) is not None:
                kwargs[key] = _expect(key, data[key], str)
        if data.get("all_with_builder_names") is not None:
            kwargs["all_with_builder_names"] = _expect_str_tuple(
                "all_with_builder_names", data["all_with_builder_names"]
            )
        if data.get("all_with_binary_digests") is not None:
            raw = _expect("all_with_binary_digests", data["all_with_binary_digests"], dict)
            kwargs["all_with_binary_digests"] = BinaryDigests(
                formats=_expect_str_tuple("formats", raw.get("formats", [])),
                digests=tuple(
                    d.lower() for d in _expect_str_tuple("digests", raw.get("digests", []))
                ),
            )
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the configured (non-default) checks."""
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None or value is False:
                continue
            if isinstance(value, BinaryDigests):
                value = {"formats": list(value.formats), "digests": list(value.digests)}
            elif isinstance(value, tuple):
                value = list(value)
            out[f.name] = value
        return out


def load_options(path: Path) -> VerificationOptions:
    """Read a YAML or JSON policy file into VerificationOptions.

    An empty file yields an empty (accept-all) policy.

    Raises:
        PolicyFormatError: If the file cannot be read or is not a valid policy.
    """
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise PolicyFormatError(f"could not read policy {str(path)!r}: {exc}") from exc
    return VerificationOptions.from_dict(data or {})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _expect(key: str, value: Any, expected: type) -> Any:
    if not isinstance(value, expected):
        raise PolicyFormatError(
            f"{key} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _expect_count(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise PolicyFormatError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _expect_str_tuple(key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PolicyFormatError(f"{key} must be a list of strings")
    return tuple(value)
