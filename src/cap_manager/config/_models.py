# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Typed configuration.

The ``[logging]``, ``[store]`` and ``[server]`` tables each map to a frozen
pydantic model; unknown keys are tolerated so newer config files keep working
with older releases. ``Config`` wraps the merged dictionary together with the
parsed sections and the list of sources it was built from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import reduce
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, overload

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cap_manager.config._defaults import DEFAULT_CONFIG
from cap_manager.config._loader import (
    copy_value,
    deep_merge,
    parse_env_vars,
    read_toml_file,
)

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Self

T = TypeVar("T")

_SECTION: ConfigDict = ConfigDict(frozen=True, extra="ignore")


class LogLevel(StrEnum):
    """Accepted ``logging.level`` values, most verbose first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Accepted ``logging.format`` values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Kinds of configuration source, ordered from strongest to weakest."""

    CLI = "cli"
    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One place configuration may come from.

    ``path`` is only set for file sources. ``exists`` is False for a file that
    was looked for and not found, and ``values`` holds whatever the source
    contributed (empty until loaded for file and env sources).
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]


class LoggingConfig(BaseModel):
    """``[logging]``: threshold, line format and target file.

    An empty ``file`` sends CLI logs to ``cli.log`` and server logs to
    ``server.log`` under the platform log directory.
    """

    model_config: ClassVar[ConfigDict] = _SECTION

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


class StoreConfig(BaseModel):
    """``[store]``: the progress file and the agent prompt file.

    Relative paths resolve against the working directory.
    """

    model_config: ClassVar[ConfigDict] = _SECTION

    file: str = Field(default="progress.json", min_length=1)
    prompt_file: str = Field(default="agent_prompt.txt", min_length=1)


class ServerConfig(BaseModel):
    """``[server]``: bind address and inactivity shutdown.

    ``session_timeout`` is how long, in seconds, the server keeps running
    without a ping; ``check_interval`` is how often that is checked.
    """

    model_config: ClassVar[ConfigDict] = _SECTION

    host: str = "127.0.0.1"
    port: int = Field(default=3005, ge=1, le=65535)
    session_timeout: float = Field(default=900, gt=0)
    check_interval: float = Field(default=60, gt=0)
    open_browser: bool = True


class ConfigSchema(BaseModel):
    """All sections together; top-level keys other than these are ignored."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    store: StoreConfig = StoreConfig()
    server: ServerConfig = ServerConfig()


def _validated(data: dict[str, Any], source: str | None = None) -> ConfigSchema:
    from cap_manager.config._validation import (  # noqa: PLC0415
        raise_if_validation_errors,
        validate_config,
    )

    raise_if_validation_errors(validate_config(data), source=source)
    return ConfigSchema.model_validate(data)


def _read_source(source: ConfigSource) -> ConfigSource:
    """Return ``source`` with its values filled in."""
    match source.name:
        case ConfigSourceName.DEFAULT | ConfigSourceName.CLI:
            return source
        case ConfigSourceName.ENV:
            values = parse_env_vars()
        case _ if source.path is not None and source.exists:
            values = read_toml_file(source.path)
        case _:
            values = {}
    return ConfigSource(
        name=source.name, path=source.path, exists=source.exists, values=values
    )


class Config(BaseModel):
    """Merged, validated configuration.

    Build one with ``from_dict``, ``from_file`` or ``load``; a bare
    ``Config()`` holds the built-in defaults. Sections are exposed as typed
    properties and any key can be looked up with ``get``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _schema: ConfigSchema = PrivateAttr(default_factory=ConfigSchema)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
        _schema: ConfigSchema | None = None,
    ) -> None:
        super().__init__()
        self._data = copy_value(DEFAULT_CONFIG) if _data is None else _data
        self._schema = ConfigSchema() if _schema is None else _schema
        self._sources = _sources

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate ``data`` layered over the defaults.

        Raises:
            ConfigValidationError: On the first invalid value.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        return cls(_data=merged, _schema=_validated(merged))

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Read one TOML file and layer it over the defaults.

        No other file or environment variable is consulted.

        Raises:
            FileNotFoundError: ``path`` is missing.
            ConfigLoadError: ``path`` is not valid TOML.
            ConfigValidationError: A value in ``path`` is invalid.
        """
        values = read_toml_file(path)
        merged = deep_merge(DEFAULT_CONFIG, values)
        return cls(
            _data=merged,
            _sources=(
                ConfigSource(
                    name=ConfigSourceName.PROJECT, path=path, exists=True, values=values
                ),
            ),
            _schema=_validated(merged, source=str(path)),
        )

    @classmethod
    def load(
        cls,
        *,
        project_dir: Path | None = None,
        include_env: bool = True,
        include_cli: bool = False,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Discover every source and merge them, weakest first.

        Defaults are overlaid by the user file, then the project file, then
        ``CAP_MANAGER_*`` variables, then ``cli_overrides``.

        Raises:
            ConfigLoadError: A discovered file is not valid TOML.
            ConfigValidationError: The merged result is invalid.
        """
        from cap_manager.config._discovery import discover_sources  # noqa: PLC0415

        loaded = [
            _read_source(source)
            for source in discover_sources(
                project_dir,
                include_env=include_env,
                include_cli=include_cli,
                cli_overrides=cli_overrides,
            )
        ]
        merged = reduce(
            lambda acc, source: deep_merge(acc, source.values),
            reversed(loaded),
            {},
        )
        return cls(_data=merged, _sources=tuple(loaded), _schema=_validated(merged))

    @property
    def sources(self) -> list[ConfigSource]:
        """Sources this configuration was built from, strongest first."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        return self._schema.logging

    @property
    def store(self) -> StoreConfig:
        return self._schema.store

    @property
    def server(self) -> ServerConfig:
        return self._schema.server

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``"server.port"``.

        Returns ``default`` when any segment of the path is missing.
        """
        node: Any = self._data
        for segment in key.split("."):
            if not isinstance(node, dict) or segment not in node:
                return default
            node = node[segment]
        return node

    def to_dict(self) -> dict[str, Any]:
        """Return an independent copy of the merged dictionary."""
        return copy_value(self._data)
