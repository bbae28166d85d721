"""Per-invocation CLI state.

The meta launcher loads configuration and builds the logger once, then
publishes a ``CLIContext`` through a context variable. Commands read it back
with ``CLIContext.get_current()`` instead of threading options through every
signature.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cap_manager.config import Config

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_active: ContextVar[CLIContext | None] = ContextVar("cap_manager_cli", default=None)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Options and services shared by every command of one invocation.

    Attributes:
        config: Merged configuration for this run.
        verbose: Whether ``--verbose`` was passed.
        quiet: Whether ``--quiet`` was passed; mutations then print nothing.
        config_error: Why configuration fell back to defaults, if it did.
        logger: File logger bound to the running command.
    """

    config: Config = field(repr=False)
    verbose: bool = False
    quiet: bool = False
    config_error: str | None = None
    logger: FilteringBoundLogger | None = field(default=None, repr=False)

    @property
    def store_path(self) -> Path:
        """Progress file location; relative values resolve against cwd."""
        return Path(self.config.store.file)

    @property
    def prompt_path(self) -> Path:
        """Agent prompt file location."""
        return Path(self.config.store.prompt_file)

    @classmethod
    def get_current(cls) -> CLIContext:
        """Return the published context, or one built from default config."""
        current = _active.get()
        return current if current is not None else cls(config=Config.from_dict({}))

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        """Publish ``ctx`` for the commands that run next."""
        _ = _active.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Forget the published context."""
        _ = _active.set(None)
