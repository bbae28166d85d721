"""Shared test fixtures for cap-manager tests."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from rich.console import Console

from cap_manager.store import Requirement, RequirementStatus, RequirementStore

START: datetime = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)


class SteppingClock:
    """Deterministic clock advancing by a fixed step on every call."""

    def __init__(self, start: datetime = START, step: timedelta | None = None) -> None:
        self.current = start
        self.step = step if step is not None else timedelta(seconds=1)

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "progress.json"


@pytest.fixture
def store(store_path: Path, clock: SteppingClock) -> RequirementStore:
    """An initialized, empty store with a deterministic clock."""
    requirement_store = RequirementStore(store_path, clock=clock)
    _ = requirement_store.init()
    return requirement_store


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep configuration discovery and logging inside ``tmp_path``.

    Removes any ``CAP_MANAGER_*`` variables from the environment, points the
    user config file at ``tmp_path/user/config.toml`` and sends log output to
    ``tmp_path/logs/cli.log``.

    Returns:
        The user config path (not created).
    """
    import os

    for key in list(os.environ):
        if key.startswith("CAP_MANAGER_"):
            monkeypatch.delenv(key)

    user_config = tmp_path / "user" / "config.toml"
    monkeypatch.setattr(
        "cap_manager.config._discovery.get_user_config_path", lambda: user_config
    )
    monkeypatch.setenv("CAP_MANAGER_LOGGING__FILE", str(tmp_path / "logs" / "cli.log"))
    monkeypatch.setattr(
        "cap_manager.utils._paths.get_log_dir", lambda: tmp_path / "default-logs"
    )
    return user_config


MakeRequirement = Callable[..., Requirement]


@pytest.fixture
def make_requirement() -> MakeRequirement:
    """Return a factory building Requirement records with sensible defaults."""

    def _make(requirement_id: int = 1, **overrides: object) -> Requirement:
        defaults: dict[str, object] = {
            "id": requirement_id,
            "title": f"Requirement {requirement_id}",
            "description": f"Description {requirement_id}",
            "status": RequirementStatus.NOT_STARTED,
            "notes": "",
            "created": START,
            "updated": START,
            "external_link": None,
        }
        defaults.update(overrides)
        return Requirement(**defaults)  # pyright: ignore[reportArgumentType]

    return _make
