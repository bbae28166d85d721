"""Exception hierarchy for cap-manager.

Every error carries its context as keyword attributes so callers (the CLI and
the HTTP layer) can report or map it without parsing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class CapManagerError(Exception):
    """Root of every error raised by cap-manager."""


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------


class StoreError(CapManagerError):
    """A requirement store operation failed."""


class StoreFileError(StoreError):
    """A store error tied to the progress file at ``path``."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(StoreError, KeyError):
    """The store or a requirement does not exist."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class StoreNotFoundError(NotFoundError, StoreFileError):
    """The progress file is missing; run ``init`` first."""


class RequirementNotFoundError(NotFoundError):
    """No requirement has ``requirement_id``."""

    def __init__(self, message: str, *, requirement_id: int) -> None:
        super().__init__(message)
        self.requirement_id = requirement_id


class AlreadyExistsError(StoreFileError):
    """``init`` found a progress file already in place."""


class StoreIOError(StoreFileError):
    """Reading or writing the progress file failed at the OS level.

    Attributes:
        operation: ``"read"`` or ``"write"``.
        cause: The original ``OSError``.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.operation = operation
        self.cause = cause


class StoreParseError(StoreFileError):
    """The progress file is not well-formed JSON."""

    def __init__(
        self, message: str, *, path: Path, cause: Exception | None = None
    ) -> None:
        super().__init__(message, path=path)
        self.cause = cause


class StoreShapeError(StoreFileError):
    """The progress file parsed, but is not an array of requirement records.

    ``index`` names the offending record; it is None when the top-level value
    itself is wrong.
    """

    def __init__(self, message: str, *, path: Path, index: int | None = None) -> None:
        super().__init__(message, path=path)
        self.index = index


# -----------------------------------------------------------------------------
# Input validation
# -----------------------------------------------------------------------------


class RequirementValidationError(CapManagerError, ValueError):
    """User input for a requirement operation was rejected.

    Attributes:
        field: Name of the rejected field, when one applies.
        value: The rejected input.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,  # pyright: ignore[reportAny,reportExplicitAny]
    ) -> None:
        super().__init__(message)
        self.field = field
        self.value: Any = value  # pyright: ignore[reportExplicitAny]


class InvalidStatusError(RequirementValidationError):
    """Status outside ``Not Started``, ``In Progress``, ``Completed``, ``Blocked``."""


class InvalidUrlError(RequirementValidationError):
    """External link that is not an absolute http(s) URL."""


class InvalidArgumentError(RequirementValidationError):
    """Empty required text, or a filter value that cannot be parsed."""


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


class ConfigError(CapManagerError):
    """Configuration could not be produced."""


class ConfigLoadError(ConfigError):
    """A configuration file could not be read as TOML.

    ``line`` and ``column`` are filled in when the parser reports them.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.line = line
        self.column = column


class ConfigValidationError(ConfigError):
    """A configuration value has the wrong type or is out of range.

    Attributes:
        key: Dotted key of the bad value, e.g. ``server.port``.
        value: The value as found.
        expected: Short description of what would have been accepted.
        source: Where the value came from, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected = expected
        self.source = source
