# pyright: reportAny=false
"""Validation helpers shared by every mutating path.

Status and URL checks are pure predicates; callers decide which exception to
raise. Timestamp parsing raises ``InvalidArgumentError`` directly because it is
only ever used on user-supplied filter bounds and persisted values.
"""

from datetime import UTC, date, datetime
from typing import Final

import pendulum
from pydantic import AnyUrl, TypeAdapter, ValidationError

from cap_manager.exceptions import (
    InvalidArgumentError,
    InvalidStatusError,
    InvalidUrlError,
)
from cap_manager.store._models import RequirementStatus, ValidationIssue

__all__ = [
    "REQUIRED_FIELDS",
    "VALID_STATUSES",
    "format_timestamp",
    "is_canonical_timestamp",
    "is_valid_status",
    "is_valid_url",
    "parse_timestamp",
    "require_status",
    "require_text",
    "require_url",
    "validate_records",
]

VALID_STATUSES: Final = tuple(status.value for status in RequirementStatus)

REQUIRED_FIELDS: Final = (
    "id",
    "title",
    "description",
    "status",
    "notes",
    "created",
    "updated",
)

_URL_SCHEMES: Final = frozenset({"http", "https"})
_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def is_valid_status(value: object) -> bool:
    """Check a value against the status enumeration (exact, case-sensitive)."""
    return isinstance(value, str) and value in VALID_STATUSES


def is_valid_url(value: object) -> bool:
    """Check that a value is an absolute URL with an http or https scheme.

    Args:
        value: The candidate URL.

    Returns:
        True for absolute http/https URLs with a host, False otherwise,
        including for the empty string.
    """
    if not isinstance(value, str) or not value:
        return False
    try:
        url = _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return url.scheme in _URL_SCHEMES and bool(url.host)


def require_status(value: str | RequirementStatus) -> RequirementStatus:
    """Convert a status string to the enum, raising on unknown values.

    Raises:
        InvalidStatusError: If the value is not one of the allowed statuses.
    """
    if not is_valid_status(value):
        msg = f'Invalid status "{value}". Valid statuses are: {", ".join(VALID_STATUSES)}'
        raise InvalidStatusError(msg, field="status", value=value)
    return RequirementStatus(value)


def require_url(value: str) -> str:
    """Return the link unchanged if valid.

    Raises:
        InvalidUrlError: If the link is not an absolute HTTP/HTTPS URL.
    """
    if not is_valid_url(value):
        msg = (
            f'Invalid URL format for external link: "{value}". '
            "Must be a valid HTTP or HTTPS URL."
        )
        raise InvalidUrlError(msg, field="externalLink", value=value)
    return value


def require_text(value: str, field: str) -> str:
    """Return the stripped text, raising if nothing is left.

    Raises:
        InvalidArgumentError: If the value is empty or whitespace only.
    """
    stripped = value.strip()
    if not stripped:
        msg = f"{field.capitalize()} is required"
        raise InvalidArgumentError(msg, field=field, value=value)
    return stripped


# -----------------------------------------------------------------------------
# Timestamps
# -----------------------------------------------------------------------------


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: str, *, field: str = "timestamp") -> datetime:
    """Parse a timestamp string into an aware UTC datetime.

    ISO-8601 strings (including our own ``...Z`` format) go through the
    standard library. Anything else falls back to pendulum's lenient parser,
    so bounds such as ``2024/01/15`` are accepted. Naive values are UTC.

    Args:
        value: The string to parse.
        field: Name used in the error message.

    Returns:
        The parsed instant in UTC.

    Raises:
        InvalidArgumentError: If the value cannot be parsed as a date or time.
    """
    try:
        return _to_utc(datetime.fromisoformat(value))
    except ValueError:
        pass

    try:
        parsed = pendulum.parse(value, strict=False)
    except (ValueError, OverflowError) as e:
        msg = f'Invalid {field} "{value}": expected an ISO-8601 date or timestamp'
        raise InvalidArgumentError(msg, field=field, value=value) from e

    # pendulum.parse can return DateTime, Date, Time, or Duration
    if isinstance(parsed, datetime):
        return _to_utc(datetime.fromisoformat(parsed.isoformat()))
    if isinstance(parsed, date):
        return datetime(parsed.year, parsed.month, parsed.day, tzinfo=UTC)

    msg = f'Invalid {field} "{value}": expected an ISO-8601 date or timestamp'
    raise InvalidArgumentError(msg, field=field, value=value)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    text = _to_utc(value).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def is_canonical_timestamp(value: object) -> bool:
    """Return True for strings already in the ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form."""
    if not isinstance(value, str):
        return False
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return False
    return format_timestamp(parsed) == value


# -----------------------------------------------------------------------------
# Whole-file checks
# -----------------------------------------------------------------------------


def _check_record(  # noqa: C901, PLR0912
    index: int, record: object, seen_ids: set[int]
) -> list[ValidationIssue]:
    if not isinstance(record, dict):
        return [ValidationIssue(f"Record {index} is not an object", index=index)]

    req_id = record.get("id")
    label = f"Requirement #{req_id if req_id is not None else '?'}"
    issues: list[ValidationIssue] = []

    def issue(message: str, field: str | None = None) -> None:
        issues.append(
            ValidationIssue(
                f"{label} {message}", index=index, requirement_id=req_id, field=field
            )
        )

    missing = [name for name in REQUIRED_FIELDS if name not in record]
    for name in missing:
        issue(f"missing required field: {name}", name)
    if missing:
        return issues

    if isinstance(req_id, bool) or not isinstance(req_id, int) or req_id < 1:
        issue("id must be a positive integer", "id")
    elif req_id in seen_ids:
        issue("id is duplicated", "id")
    else:
        seen_ids.add(req_id)

    for name in ("title", "description"):
        value = record[name]
        if not isinstance(value, str):
            issue(f"{name} must be a string", name)
        elif not value.strip():
            issue(f"{name} must not be empty", name)

    if not is_valid_status(record["status"]):
        issue(
            f'has invalid status: "{record["status"]}" '
            f"(valid statuses: {', '.join(VALID_STATUSES)})",
            "status",
        )

    if not isinstance(record["notes"], str):
        issue("notes must be a string", "notes")

    for name in ("created", "updated"):
        if not is_canonical_timestamp(record[name]):
            issue(f"{name} must be a valid ISO 8601 timestamp", name)

    if "externalLink" in record:
        link = record["externalLink"]
        if not isinstance(link, str):
            issue("externalLink must be a string", "externalLink")
        elif not is_valid_url(link):
            issue("externalLink must be a valid HTTP/HTTPS URL", "externalLink")

    return issues


def validate_records(data: object) -> list[ValidationIssue]:
    """Check a decoded store file for structural problems.

    Unlike loading, which stops at the first undecodable record, this walks
    the whole collection and reports every issue found.

    Args:
        data: The decoded JSON document.

    Returns:
        All issues found; an empty list means the file is valid.
    """
    if not isinstance(data, list):
        return [ValidationIssue("Store must contain an array of requirements")]

    seen_ids: set[int] = set()
    issues: list[ValidationIssue] = []
    for index, record in enumerate(data):
        issues.extend(_check_record(index, record, seen_ids))
    return issues
