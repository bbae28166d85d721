"""The command-line interface for cap-manager."""
# ruff: noqa: TC003  # Path is resolved at runtime by cyclopts

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from cap_manager import __version__
from cap_manager.config import safe_load_config
from cap_manager.utils import create_cli_logger

from ._commands import register_commands
from ._context import CLIContext

HELP = "Track lightweight requirements and progress across coding agent runs."

Tokens = Annotated[str, Parameter(show=False, allow_leading_hyphen=True)]
VerboseFlag = Annotated[
    bool, Parameter(negative="", help="Log at debug level and show more detail")
]
QuietFlag = Annotated[
    bool, Parameter(negative="", help="Print nothing after successful changes")
]
ConfigOption = Annotated[
    Path | None, Parameter(help="Read configuration from this TOML file only")
]
StoreOption = Annotated[
    Path | None, Parameter(help="Progress file to use instead of the configured one")
]


def _cli_overrides(
    *, verbose: bool, quiet: bool, store: Path | None
) -> dict[str, object] | None:
    overrides: dict[str, object] = {}
    if verbose:
        overrides["logging"] = {"level": "debug"}
    elif quiet:
        overrides["logging"] = {"level": "warning"}
    if store is not None:
        overrides["store"] = {"file": str(store)}
    return overrides or None


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the ``cap-manager`` application with every command registered.

    Global options are parsed by the meta app, which publishes a
    ``CLIContext`` before dispatching the remaining tokens.
    """
    app = App(
        name="cap-manager",
        help=HELP,
        version=__version__,
        help_on_error=True,
        console=console or Console(),
        error_console=error_console or Console(stderr=True),
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _launch(  # pyright: ignore[reportUnusedFunction]
        *tokens: Tokens,
        verbose: VerboseFlag = False,
        quiet: QuietFlag = False,
        config: ConfigOption = None,
        store: StoreOption = None,
    ) -> None:
        """Run a cap-manager command.

        Args:
            tokens: Command name and its arguments.
            verbose: Log at debug level.
            quiet: Suppress confirmation messages.
            config: Configuration file replacing discovery.
            store: Progress file override.
        """
        settings, config_error = safe_load_config(
            config_path=config,
            cli_overrides=_cli_overrides(verbose=verbose, quiet=quiet, store=store),
        )
        log_settings = settings.logging

        CLIContext.set_current(
            CLIContext(
                config=settings,
                verbose=verbose,
                quiet=quiet,
                config_error=config_error,
                logger=create_cli_logger(
                    level=log_settings.level.value,
                    log_format=log_settings.format.value,
                    log_file=log_settings.file,
                    command=tokens[0] if tokens else "",
                ),
            )
        )
        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Entry point for the ``cap-manager`` console script."""
    create_app().meta()
