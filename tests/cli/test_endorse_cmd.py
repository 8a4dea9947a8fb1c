"""Tests for ``endorsekit endorse``.

Verifies:
    - Issuing an endorsement to stdout and to a file (exit code 0).
    - Identity and policy failures (exit code 1).
    - Load, fetch, parse and policy-document failures (exit code 2).
    - Option validation for binary digests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

from click.testing import CliRunner

from endorsekit.cli.main import cli

SHA256 = "d059c38cea82047ad316a1c6c6fbd13ecf7a0abdcc375463920bd25bf5c142cc"


def _args(uri: str, *extra: str) -> list[str]:
    return [
        "endorse",
        "--binary-name", "app",
        "--binary-digest", f"sha2-256:{SHA256}",
        "--provenance-uri", uri,
        *extra,
    ]


class TestEndorseSuccess:
    """Tests for issued endorsements."""

    def test_writes_statement_to_stdout(
        self,
        runner: CliRunner,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
    ) -> None:
        uri = write_provenance("p.json", statement_factory())
        result = runner.invoke(cli, _args(uri))
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["subject"] == [{"name": "app", "digest": {"sha2-256": SHA256}}]
        assert data["predicate"]["evidence"][0]["uri"] == uri

    def test_sha256_alias_accepted(
        self,
        runner: CliRunner,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
    ) -> None:
        """--binary-digest sha256:HEX is canonicalised to sha2-256."""
        uri = write_provenance("p.json", statement_factory())
        args = ["endorse", "--binary-name", "app", "--binary-digest", f"sha256:{SHA256.upper()}",
                "-p", uri]
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["subject"][0]["digest"] == {"sha2-256": SHA256}

    def test_writes_output_file(
        self,
        runner: CliRunner,
        tmp_path: Path,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
        envelope_factory: Callable[[dict], dict],
    ) -> None:
        uri_a = write_provenance("a.json", statement_factory())
        uri_b = write_provenance("b.dsse.json", envelope_factory(statement_factory()))
        out = tmp_path / "out" / "endorsement.json"
        result = runner.invoke(cli, _args(
            uri_a, "-p", uri_b,
            "--not-before", "2024-01-01",
            "--validity-days", "10",
            "-o", str(out),
        ))
        assert result.exit_code == 0, result.output
        assert "Endorsement written to" in result.output
        data = json.loads(out.read_text())
        assert len(data["predicate"]["evidence"]) == 2
        assert data["predicate"]["validity"]["notBefore"].startswith("2024-01-01T00:00:00")
        assert data["predicate"]["validity"]["notAfter"].startswith("2024-01-11T00:00:00")

    def test_policy_file_applied(
        self,
        runner: CliRunner,
        tmp_path: Path,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
    ) -> None:
        uri = write_provenance("p.json", statement_factory())
        policy = tmp_path / "policy.yaml"
        policy.write_text("provenance_count_at_least: 1\nall_same_binary_digest: true\n")
        result = runner.invoke(cli, _args(uri, "--policy", str(policy)))
        assert result.exit_code == 0, result.output


class TestEndorseVerificationFailure:
    """Tests for exit code 1."""

    def test_digest_mismatch(
        self,
        runner: CliRunner,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
    ) -> None:
        uri = write_provenance("p.json", statement_factory(sha256="ab" * 32))
        result = runner.invoke(cli, _args(uri))
        assert result.exit_code == 1
        assert "Verification failed" in result.output
        assert "identity" in result.output

    def test_policy_failure(
        self,
        runner: CliRunner,
        tmp_path: Path,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
    ) -> None:
        uri = write_provenance("p.json", statement_factory())
        policy = tmp_path / "policy.yaml"
        policy.write_text("provenance_count_at_least: 2\n")
        result = runner.invoke(cli, _args(uri, "--policy", str(policy)))
        assert result.exit_code == 1
        assert "policy check" in result.output


class TestEndorseLoadFailure:
    """Tests for exit code 2."""

    def test_missing_provenance_file(self, runner: CliRunner, tmp_path: Path) -> None:
        uri = (tmp_path / "absent.json").as_uri()
        result = runner.invoke(cli, _args(uri))
        assert result.exit_code == 2
        assert "Error" in result.output
        assert "does not exist" in result.output

    def test_unsupported_scheme(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, _args("ftp://example.com/p.json"))
        assert result.exit_code == 2
        assert "unsupported URI scheme" in result.output

    def test_unparsable_provenance(
        self, runner: CliRunner, write_provenance: Callable[[str, Any], str]
    ) -> None:
        uri = write_provenance("junk.json", b"[]")
        result = runner.invoke(cli, _args(uri))
        assert result.exit_code == 2
        assert "DSSE envelope" in result.output

    def test_invalid_policy_document(
        self,
        runner: CliRunner,
        tmp_path: Path,
        write_provenance: Callable[[str, Any], str],
        statement_factory: Callable[..., dict],
    ) -> None:
        uri = write_provenance("p.json", statement_factory())
        policy = tmp_path / "policy.yaml"
        policy.write_text("no_such_check: true\n")
        result = runner.invoke(cli, _args(uri, "--policy", str(policy)))
        assert result.exit_code == 2
        assert "unknown policy keys" in result.output


class TestEndorseOptions:
    """Tests for option validation (Click usage errors exit with 2)."""

    def test_malformed_digest(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [
            "endorse", "--binary-name", "app", "--binary-digest", "nocolon",
            "-p", "file:///x",
        ])
        assert result.exit_code == 2
        assert "ALG:HEX" in result.output

    def test_sha256_required(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [
            "endorse", "--binary-name", "app", "--binary-digest", "sha1:abcd",
            "-p", "file:///x",
        ])
        assert result.exit_code == 2
        assert "sha2-256" in result.output

    def test_conflicting_digest_aliases(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [
            "endorse", "--binary-name", "app",
            "--binary-digest", f"sha2-256:{SHA256}",
            "--binary-digest", "sha256:" + "ee" * 32,
            "-p", "file:///x",
        ])
        assert result.exit_code == 2
        assert "conflicting digests for sha2-256" in result.output

    def test_provenance_required(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [
            "endorse", "--binary-name", "app", "--binary-digest", f"sha2-256:{SHA256}",
        ])
        assert result.exit_code == 2
        assert "Missing option" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
