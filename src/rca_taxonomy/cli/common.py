"""State and argument helpers shared by the RCA taxonomy commands."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping
from uuid import uuid4

import typer
from rich.console import Console
from rich.json import JSON as RichJSON
from rich.panel import Panel

from rca_taxonomy.config.policies import Policies
from rca_taxonomy.config.settings import Settings
from rca_taxonomy.utils.logging import get_logger

console = Console()
_LOGGER = get_logger(module=__name__)

_POLICY_SECTIONS = frozenset(Policies.model_fields)


class CLIError(RuntimeError):
    """A failure the user can fix; reported without a traceback."""


@dataclass(slots=True)
class CLIState:
    """Resolved invocation context stored on ``typer.Context.obj``."""

    settings: Settings
    overrides: Dict[str, Any]
    environment: str
    run_id: str
    verbose: bool


def _merge_into(target: MutableMapping[str, Any], update: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in update.items():
        current = target.get(key)
        if isinstance(value, Mapping):
            if not isinstance(current, MutableMapping):
                current = target[key] = {}
            _merge_into(current, value)
        else:
            target[key] = value
    return target


def _decode_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_override(argument: str) -> Dict[str, Any]:
    """Turn ``similarity.weights.tags=0.2`` into ``{"similarity": {"weights": {"tags": 0.2}}}``.

    Values are JSON-decoded when possible and kept as strings otherwise.
    """

    dotted, separator, raw_value = argument.partition("=")
    if not separator:
        raise typer.BadParameter("Overrides must be expressed as dotted.key=value")
    keys = [part.strip() for part in dotted.split(".") if part.strip()]
    if not keys:
        raise typer.BadParameter("Override keys must not be empty")

    nested: Any = _decode_value(raw_value)
    for key in reversed(keys):
        nested = {key: nested}
    return nested


def merge_overrides(overrides: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for override in overrides:
        _merge_into(merged, override)
    return merged


def resolve_settings(environment: str | None, overrides: Mapping[str, Any]) -> Settings:
    """Build :class:`Settings` from the CLI environment and overrides.

    Policy sections (``similarity``, ``lookup``, ``policy_version``) may be
    given at the top level or under ``policies``; both land in the policies.
    """

    payload = {key: value for key, value in overrides.items() if key not in _POLICY_SECTIONS}
    policy_overrides: Dict[str, Any] = {}
    _merge_into(policy_overrides, payload.pop("policies", None) or {})
    _merge_into(
        policy_overrides,
        {key: value for key, value in overrides.items() if key in _POLICY_SECTIONS},
    )
    if policy_overrides:
        payload["policies"] = policy_overrides
    if environment:
        payload["environment"] = environment
    return Settings(**payload)


def configure_state(
    ctx: typer.Context,
    *,
    environment: str | None,
    overrides: Iterable[Mapping[str, Any]],
    run_id: str | None,
    verbose: bool,
) -> None:
    """Resolve settings for this invocation and attach a :class:`CLIState`."""

    merged = merge_overrides(overrides)
    settings = resolve_settings(environment, merged)
    state = CLIState(
        settings=settings,
        overrides=merged,
        environment=settings.environment,
        run_id=run_id or f"cli-{uuid4().hex[:8]}",
        verbose=verbose,
    )
    _LOGGER.debug("Resolved CLI state", run_id=state.run_id, environment=state.environment)
    ctx.obj = state


def get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise CLIError("CLI context is not initialised")
    return state


def render_panel(title: str, content: Mapping[str, Any]) -> None:
    console.print(Panel(RichJSON.from_data(content), title=title, border_style="cyan"))


def resolve_path(path: str | Path, *, must_exist: bool = True) -> Path:
    """Expand and absolutize ``path``; raise :class:`CLIError` if it must exist and does not."""

    target = Path(path).expanduser().resolve()
    if must_exist and not target.exists():
        raise CLIError(f"Path does not exist: {target}")
    return target


__all__ = [
    "CLIError",
    "CLIState",
    "console",
    "parse_override",
    "merge_overrides",
    "resolve_settings",
    "configure_state",
    "get_state",
    "render_panel",
    "resolve_path",
]
