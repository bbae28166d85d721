"""Where configuration comes from.

Two files are consulted: a per-user ``config.toml`` in the platform config
directory and a ``.cap-manager.toml`` in the project directory. Together with
environment variables, CLI overrides, and the built-in defaults they form the
ordered source list that ``Config.load`` merges.
"""

from pathlib import Path
from typing import Any

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models import ConfigSource, ConfigSourceName

APP_NAME = "cap-manager"
PROJECT_CONFIG_NAME = ".cap-manager.toml"
USER_CONFIG_NAME = "config.toml"


def get_user_config_path() -> Path:
    """Return the per-user config file path, whether or not it exists.

    On Linux this is ``~/.config/cap-manager/config.toml``; macOS and Windows
    use their platform config directories.
    """
    return platformdirs.user_config_path(APP_NAME) / USER_CONFIG_NAME


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """Return the project config file path for ``project_dir`` (default cwd)."""
    return (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME


def _file_source(name: ConfigSourceName, path: Path) -> ConfigSource:
    try:
        present = path.is_file()
    except OSError:
        present = False
    return ConfigSource(name=name, path=path, exists=present, values={})


def discover_sources(
    project_dir: Path | None = None,
    *,
    include_env: bool = True,
    include_cli: bool = False,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """List configuration sources from highest to lowest precedence.

    File sources are listed even when the file is missing, with
    ``exists=False``. Environment values are read at load time, so the env
    source is listed with empty ``values``.

    Args:
        project_dir: Directory searched for ``.cap-manager.toml``.
        include_env: List the environment as a source.
        include_cli: List ``cli_overrides`` as a source.
        cli_overrides: Values from command-line flags.
    """
    sources: list[ConfigSource] = []
    if include_cli:
        overrides = cli_overrides or {}
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(overrides),
                values=overrides,
            )
        )
    if include_env:
        sources.append(
            ConfigSource(name=ConfigSourceName.ENV, path=None, exists=True, values={})
        )
    sources += [
        _file_source(ConfigSourceName.PROJECT, get_project_config_path(project_dir)),
        _file_source(ConfigSourceName.USER, get_user_config_path()),
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        ),
    ]
    return sources
