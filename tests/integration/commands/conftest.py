import io
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from rich.console import Console

from cap_manager.cli import CLIContext, create_app
from cap_manager.config import Config


@pytest.fixture(autouse=True)
def cli_context(project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Install a CLI context with default config and non-interactive stdin."""
    monkeypatch.setattr("sys.stdin", io.StringIO())
    CLIContext.set_current(CLIContext(config=Config.from_dict({})))
    yield
    CLIContext.reset()


@pytest.fixture
def cap_cli(console: Console) -> Callable[..., None]:
    """Create CLI app for testing.

    Returns a callable that runs the CLI and suppresses SystemExit.
    Use cap_cli_with_exit_code when you need to check the exit code.
    """
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> None:
        try:
            app(args)
        except SystemExit:
            pass

    return _run


@pytest.fixture
def cap_cli_with_exit_code(console: Console) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app(args)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run


@pytest.fixture
def store_file(project_dir: Path) -> Path:
    return project_dir / "progress.json"
