# pyright: reportAny=false, reportExplicitAny=false, reportUnknownVariableType=false
"""Configuration validation using the pydantic section schemas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from cap_manager.config._models import ConfigSchema
from cap_manager.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class ConfigIssue:
    """A configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "server.port").
        message: Human-readable description of the issue.
        expected: Description of the expected value, if available.
        actual: The value that caused the issue.
    """

    key: str
    message: str
    expected: str | None
    actual: Any


def _pydantic_error_to_issue(error: ErrorDetails) -> ConfigIssue:
    key = ".".join(str(part) for part in error.get("loc", ()))
    ctx = error.get("ctx") or {}
    expected: str | None = None
    if "expected" in ctx:
        expected = str(ctx["expected"])
    elif "ge" in ctx or "le" in ctx or "gt" in ctx:
        expected = ", ".join(f"{k} {v}" for k, v in ctx.items())
    return ConfigIssue(
        key=key,
        message=str(error.get("msg", "Validation error")),
        expected=expected,
        actual=error.get("input"),
    )


def validate_config(config: dict[str, Any]) -> list[ConfigIssue]:
    """Validate a merged configuration dictionary.

    Returns:
        All issues found; an empty list means the config is valid.
    """
    try:
        _ = ConfigSchema.model_validate(config)
    except ValidationError as e:
        return [_pydantic_error_to_issue(err) for err in e.errors()]
    return []


def raise_if_validation_errors(
    issues: list[ConfigIssue], source: str | None = None
) -> None:
    """Raise ConfigValidationError for the first issue, if any.

    Raises:
        ConfigValidationError: If ``issues`` is not empty.
    """
    if not issues:
        return
    issue = issues[0]
    msg = f"Invalid configuration value for '{issue.key}': {issue.message}"
    raise ConfigValidationError(
        msg,
        key=issue.key,
        value=issue.actual,
        expected=issue.expected or issue.message,
        source=source,
    )
