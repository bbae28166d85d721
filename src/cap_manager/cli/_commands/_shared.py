"""Helpers shared by the command modules: exits, prompts and store access."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING, Never

from rich.markup import escape

from cap_manager.cli._context import CLIContext
from cap_manager.store import RequirementStore

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ExitCode",
    "confirm_destructive",
    "exit_with_error",
    "exit_with_success",
    "get_error_console",
    "get_store",
]

_YES = frozenset({"y", "yes"})


class ExitCode(IntEnum):
    """Process exit statuses; every failure maps to 1."""

    SUCCESS = 0
    FAILURE = 1


def get_error_console() -> Console:
    """Return a console writing to stderr."""
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.FAILURE,
    *,
    console: Console | None = None,
) -> Never:
    """Report ``message`` as ``Error: ...`` and stop with ``code``."""
    (console or get_error_console()).print(
        f"[red]Error:[/red] {escape(message)}", soft_wrap=True
    )
    raise SystemExit(code)


def exit_with_success(
    message: str | None = None,
    *,
    console: Console | None = None,
) -> Never:
    """Stop with status 0, printing ``message`` first when there is one."""
    if message is not None:
        (console or get_error_console()).print(escape(message), soft_wrap=True)
    raise SystemExit(ExitCode.SUCCESS)


def confirm_destructive(message: str, *, force: bool, console: Console) -> bool:
    """Ask before deleting something.

    ``force`` skips the question. Without a terminal on stdin there is nobody
    to answer, so the answer is no.
    """
    if force:
        return True
    if not sys.stdin.isatty():
        return False

    console.print(escape(message))
    try:
        answer = console.input("Are you sure you want to delete this? (yes/no): ")
    except (EOFError, KeyboardInterrupt):
        return False
    return answer.strip().lower() in _YES


def get_store() -> RequirementStore:
    """Open the progress file named by the current CLI context."""
    ctx = CLIContext.get_current()
    return RequirementStore(ctx.store_path, logger=ctx.logger)
