"""cap-manager CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._output import OutputFormat
from ._requirements import (
    add,
    block,
    complete,
    delete,
    init,
    list_requirements,
    prompt,
    show,
    update,
    validate,
)
from ._serve import serve
from ._shared import ExitCode, exit_with_error, exit_with_success, get_error_console

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "ExitCode",
    "OutputFormat",
    "exit_with_error",
    "exit_with_success",
    "get_error_console",
    "register_commands",
]


def register_commands(app: App) -> None:
    app.command(init)
    app.command(add)
    app.command(update)
    app.command(list_requirements, name="list")
    app.command(show)
    app.command(complete)
    app.command(block)
    app.command(delete)
    app.command(prompt)
    app.command(validate)
    app.command(serve)
