"""Configuration inspection commands for the RCA taxonomy CLI."""

from __future__ import annotations

import typer
import yaml

from .common import CLIError, get_state, render_panel

app = typer.Typer(
    add_completion=False,
    help="Inspect resolved settings and duplicate-detection policies.",
    no_args_is_help=True,
)


def _config_command(ctx: typer.Context) -> None:
    state = get_state(ctx)
    render_panel("Resolved Settings", state.settings.model_dump(mode="json"))


def _policy_command(
    ctx: typer.Context,
    *,
    output_format: str = typer.Option(
        "json",
        "--format",
        help="Policy rendering format (json or yaml).",
        case_sensitive=False,
    ),
) -> None:
    state = get_state(ctx)
    policies = state.settings.policies.model_dump(mode="json")
    fmt = output_format.lower()
    if fmt == "json":
        render_panel(f"Policies {state.settings.policy_version}", policies)
    elif fmt == "yaml":
        typer.echo(yaml.safe_dump(policies, sort_keys=False))
    else:
        raise CLIError("--format must be either 'json' or 'yaml'")


app.command("config")(_config_command)
app.command("policy")(_policy_command)


__all__ = ["app"]
