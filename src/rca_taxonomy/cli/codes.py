"""Code catalog commands for the RCA taxonomy CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.table import Table

from rca_taxonomy.entities.core import MainCategory, Role, Site, TaxonomyEntry
from rca_taxonomy.governance.permissions import AuthorizationError, Principal
from rca_taxonomy.matching import (
    JsonlCodeRepository,
    lookup_similar_codes,
    parse_tag_list,
    write_results,
)
from rca_taxonomy.matching.io import results_payload
from rca_taxonomy.utils.helpers import truncate
from rca_taxonomy.utils.logging import logging_context

from .common import CLIError, console, get_state, resolve_path

app = typer.Typer(
    add_completion=False,
    help="Inspect the RCA code catalog and check drafts for duplicates.",
    no_args_is_help=True,
)


def _build_draft(
    main_category: MainCategory,
    levels: List[Optional[str]],
    definition: Optional[str],
    tags: List[str],
) -> TaxonomyEntry:
    payload = {"main_category": main_category, "definition": definition, "tags": tags}
    for index, value in enumerate(levels, start=1):
        payload[f"level{index}"] = value
    try:
        return TaxonomyEntry.model_validate(payload)
    except ValidationError as exc:
        raise CLIError(f"Invalid draft: {exc}") from exc


def _similar_command(
    ctx: typer.Context,
    *,
    main_category: MainCategory = typer.Option(
        ..., "--main-category", "-m", help="Main RCA category of the draft."
    ),
    level1: Optional[str] = typer.Option(None, "--level1", help="RCA level 1 label."),
    level2: Optional[str] = typer.Option(None, "--level2", help="RCA level 2 label."),
    level3: Optional[str] = typer.Option(None, "--level3", help="RCA level 3 label."),
    level4: Optional[str] = typer.Option(None, "--level4", help="RCA level 4 label."),
    level5: Optional[str] = typer.Option(None, "--level5", help="RCA level 5 label."),
    definition: Optional[str] = typer.Option(None, "--definition", "-d", help="Draft definition."),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma-separated draft tags."),
    tag: List[str] = typer.Option(  # noqa: B008 - Typer option signature
        [], "--tag", "-t", help="Draft tag (repeatable)."
    ),
    catalog: Optional[Path] = typer.Option(
        None,
        "--catalog",
        "-c",
        help="JSONL code catalog; defaults to the configured data directory.",
        show_default=False,
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        min=0.0,
        help="Minimum score to report; defaults to the similarity policy.",
        show_default=False,
    ),
    role: Role = typer.Option(Role.QA_MEMBER, "--role", help="Role of the requesting user."),
    site: Site = typer.Option(Site.UAE, "--site", help="Site of the requesting user."),
    user_id: str = typer.Option("cli", "--user-id", help="Identifier of the requesting user."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Also write results to this JSON file.", show_default=False
    ),
) -> None:
    state = get_state(ctx)
    catalog_path = resolve_path(catalog or state.settings.catalog_file)
    draft = _build_draft(
        main_category,
        [level1, level2, level3, level4, level5],
        definition,
        [*parse_tag_list(tags), *tag],
    )
    principal = Principal(id=user_id, site=site, role=role)

    with logging_context(run_id=state.run_id):
        try:
            results = lookup_similar_codes(
                draft,
                repository=JsonlCodeRepository(catalog_path),
                principal=principal,
                policies=state.settings.policies,
                threshold=threshold,
            )
        except AuthorizationError as exc:
            raise CLIError(str(exc)) from exc
        except ValueError as exc:
            raise CLIError(str(exc)) from exc

    if output is not None:
        written = write_results(results, output)
        if not as_json:
            console.print(f"[green]Wrote {len(results)} result(s) to {written}[/green]")

    if as_json:
        typer.echo(json.dumps(results_payload(results), indent=2, ensure_ascii=False))
        return

    if not results:
        console.print("[green]No similar codes found.[/green]")
        return

    table = Table(title=f"Similar codes for {draft.path}", box=None)
    table.add_column("ID")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Reason")
    for result in results:
        entry = result.entry
        table.add_row(
            entry.id or "-",
            entry.path,
            entry.status.value if entry.status else "-",
            f"{result.score:.2f}",
            truncate(result.reason, 120),
        )
    console.print(table)
    console.print("[yellow]Similar codes are advisory; the proposal can still be submitted.[/yellow]")


app.command("similar")(_similar_command)


__all__ = ["app"]
