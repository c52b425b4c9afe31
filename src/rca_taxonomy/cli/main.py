"""Typer application exposing the RCA taxonomy commands."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Type

import typer
from rich.table import Table

from rca_taxonomy.governance.permissions import AuthorizationError
from rca_taxonomy.utils.logging import configure_logging

from . import codes, management
from .common import CLIError, configure_state, console, parse_override

ErrorHandler = Callable[[BaseException], Any]


class GovernanceTyper(typer.Typer):
    """Typer application that maps selected exceptions to friendly exits."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._error_handlers: Dict[Type[BaseException], ErrorHandler] = {}

    def exception_handler(self, exception_type: Type[BaseException]) -> Callable[[ErrorHandler], ErrorHandler]:
        def register(handler: ErrorHandler) -> ErrorHandler:
            self._error_handlers[exception_type] = handler
            return handler

        return register

    def handler_for(self, exception: BaseException) -> ErrorHandler | None:
        # Most specific registered base class wins.
        for klass in type(exception).__mro__:
            if klass in self._error_handlers:
                return self._error_handlers[klass]
        return None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        try:
            return super().__call__(*args, **kwargs)
        except BaseException as exc:
            handler = self.handler_for(exc)
            if handler is None:
                raise
            outcome = handler(exc)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome


app = GovernanceTyper(
    add_completion=False,
    help="Check drafted RCA codes for likely duplicates and inspect the governance configuration.",
    no_args_is_help=True,
)


@app.exception_handler(CLIError)
@app.exception_handler(AuthorizationError)
def report_error(exception: BaseException) -> typer.Exit:
    """Print user-facing failures as a single line and exit with status 2."""

    console.print(f"[bold red]Error:[/bold red] {exception}")
    return typer.Exit(code=2)


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        "-e",
        help="Configuration environment to load on top of default.yaml.",
        show_default=False,
    ),
    override: List[str] = typer.Option(  # noqa: B008 - Typer callback signature
        [],
        "--override",
        "-o",
        metavar="KEY=VALUE",
        help="Dotted setting or policy override, e.g. similarity.default_threshold=0.4 (repeatable).",
    ),
    run_id: Optional[str] = typer.Option(
        None,
        "--run-id",
        help="Identifier attached to every log line of this invocation.",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log at DEBUG level and print the resolved context.",
    ),
) -> None:
    """Resolve settings and logging before any subcommand runs."""

    configure_state(
        ctx,
        environment=environment,
        overrides=[parse_override(item) for item in override],
        run_id=run_id,
        verbose=verbose,
    )
    state = ctx.obj
    configure_logging(state.settings, level="DEBUG" if verbose else "WARNING")
    if not verbose:
        return

    summary = Table(title="Invocation", show_header=False, box=None)
    summary.add_row("Environment", state.environment)
    summary.add_row("Run ID", state.run_id)
    summary.add_row("Policy version", state.settings.policy_version)
    summary.add_row("Catalog", str(state.settings.catalog_file))
    console.print(summary)


app.add_typer(codes.app, name="codes", help="Duplicate checks against the code catalog")
app.add_typer(management.app, name="manage", help="Settings and policy inspection")
