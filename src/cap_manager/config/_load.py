"""Configuration loading for entry points.

Commands should still run when a config file is broken, so by default a load
failure is reported on stderr and the built-in defaults are used instead.
Setting ``CAP_MANAGER_STRICT_CONFIG=1`` turns that warning into an exit.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from cap_manager.exceptions import ConfigError

from ._loader import deep_merge
from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path

STRICT_ENV_VAR = "CAP_MANAGER_STRICT_CONFIG"


def _stderr(message: str) -> None:
    print(message, file=sys.stderr)  # noqa: T201


def _is_strict() -> bool:
    return os.environ.get(STRICT_ENV_VAR, "0") == "1"


def _load_explicit(path: Path, cli_overrides: dict[str, object] | None) -> Config:
    if not path.exists():
        _stderr(f"Error: Config file not found: {path}")
        sys.exit(1)
    config = Config.from_file(path)
    if not cli_overrides:
        return config
    return Config.from_dict(deep_merge(config.to_dict(), cli_overrides))


def safe_load_config(
    *,
    config_path: Path | None = None,
    project_dir: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration, falling back to defaults on failure.

    ``config_path`` replaces discovery entirely and must exist; a missing
    file exits with status 1 even outside strict mode. ``cli_overrides`` are
    applied on top in either case.

    Returns:
        The configuration and, when the defaults were substituted, the reason.
    """
    try:
        if config_path is not None:
            return _load_explicit(config_path, cli_overrides), None
        config = Config.load(
            project_dir=project_dir,
            include_cli=cli_overrides is not None,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, OSError) as e:
        reason = f"Failed to load config: {e}"
        if _is_strict():
            _stderr(f"Error: {reason}")
            sys.exit(1)
        _stderr(f"Warning: {reason}")
        return Config(), reason
    return config, None
