"""Rich output formatting helpers for the EndorseKit CLI."""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from endorsekit.core.intoto.statement import Statement
from endorsekit.endorser.loader import ParsedProvenance

console = Console()


def provenance_to_json(parsed: ParsedProvenance) -> dict[str, Any]:
    """Convert a parsed provenance to a JSON-serializable dict."""
    p = parsed.provenance
    return {
        "uri": parsed.source_metadata.uri,
        "sha256_digest": parsed.source_metadata.sha256_digest,
        "binary_name": p.binary_name,
        "binary_digests": dict(sorted(p.binary_digests.items())),
        "predicate_type": p.predicate_type,
        "build_type": p.build_type,
        "build_cmd": list(p.build_cmd) if p.build_cmd else None,
        "builder_image_sha256_digest": p.builder_image_sha256_digest,
        "repo_uri": p.repo_uri,
        "commit_sha1_digest": p.commit_sha1_digest,
        "trusted_builder": p.trusted_builder,
    }


def print_provenance_table(provenances: Sequence[ParsedProvenance]) -> None:
    """Print one row per loaded provenance."""
    if not provenances:
        console.print("[dim]No provenances loaded.[/dim]")
        return

    table = Table(title="Loaded Provenances", show_header=True, header_style="bold")
    table.add_column("Binary", style="bold")
    table.add_column("sha2-256", style="cyan")
    table.add_column("Build Type", style="dim")
    table.add_column("Builder")
    table.add_column("Source")

    for parsed in provenances:
        p = parsed.provenance
        table.add_row(
            p.binary_name,
            p.binary_digests.get("sha2-256", "-"),
            p.build_type or "-",
            p.trusted_builder or "-",
            parsed.source_metadata.uri,
        )
    console.print(table)


def print_endorsement_summary(statement: Statement) -> None:
    """Print a panel summarising an issued endorsement."""
    subject = statement.subject[0]
    validity = statement.predicate.get("validity", {})
    evidence = statement.predicate.get("evidence", [])
    lines = [
        f"[bold]Binary:[/bold] {subject.name}",
        *(f"[bold]{alg}:[/bold] {value}" for alg, value in sorted(subject.digest.items())),
        f"[bold]Valid:[/bold] {validity.get('notBefore')} -> {validity.get('notAfter')}",
        f"[bold]Evidence:[/bold] {len(evidence)} provenance(s)",
    ]
    lines.extend(f"  - {e['uri']} (sha256 {e['digest']['sha256']})" for e in evidence)
    console.print(Panel("\n".join(lines), title="Endorsement Issued", border_style="green"))
