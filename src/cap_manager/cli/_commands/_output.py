"""Output formatting for requirement commands.

Every formatter returns a string; commands decide where it is printed.
"""

from collections.abc import Sequence
from datetime import datetime
from enum import StrEnum
from typing import Final

import orjson
import pendulum

from cap_manager.store import Requirement, record_to_dict, summarize_statuses

__all__ = [
    "OutputFormat",
    "format_date",
    "format_datetime",
    "format_json",
    "format_list",
    "format_requirement_detail",
    "format_summary",
]

NOTES_PREVIEW_LENGTH: Final = 100
WIDTH: Final = 80
_RULE: Final = "=" * WIDTH
_SEPARATOR: Final = "-" * WIDTH


class OutputFormat(StrEnum):
    """Output formats for the ``list`` command."""

    DEFAULT = "default"
    SUMMARY = "summary"
    DETAILED = "detailed"
    JSON = "json"


def format_date(value: datetime) -> str:
    """Format an instant as ``Jan 15, 2024``."""
    return pendulum.instance(value).format("MMM D, YYYY")


def format_datetime(value: datetime) -> str:
    """Format an instant as ``Jan 15, 2024, 09:30 AM UTC``."""
    text = pendulum.instance(value).in_timezone("UTC").format("MMM D, YYYY, hh:mm A")
    return f"{text} UTC"


def _truncate(text: str, limit: int = NOTES_PREVIEW_LENGTH) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def format_summary(requirements: Sequence[Requirement]) -> str:
    """Render the total and per-status counts, omitting zero counts."""
    lines = ["Summary:", f"Total: {len(requirements)} requirements"]
    lines.extend(
        f"{status}: {count}" for status, count in summarize_statuses(requirements).items()
    )
    return "\n".join(lines)


def _format_entry(req: Requirement, *, detailed: bool) -> list[str]:
    lines = [
        f"ID: {req.id}",
        f"Title: {req.title}",
        f"Status: {req.status}",
    ]
    if detailed:
        lines.append(f"Created: {format_datetime(req.created)}")
        lines.append(f"Updated: {format_datetime(req.updated)}")
        lines.append(f"Description: {req.description}")
    else:
        lines.append(f"Updated: {format_date(req.updated)}")
    if req.external_link:
        lines.append(f"Link: {req.external_link}")
    if req.notes:
        lines.append(f"Notes: {req.notes if detailed else _truncate(req.notes)}")
    lines.append(_SEPARATOR)
    return lines


def format_json(requirements: Sequence[Requirement]) -> str:
    """Dump requirements in their persisted form."""
    records = [record_to_dict(req) for req in requirements]
    return orjson.dumps(records, option=orjson.OPT_INDENT_2).decode("utf-8")


def format_list(requirements: Sequence[Requirement], output: OutputFormat) -> str:
    """Render a requirement listing in the requested format.

    The ``default`` format truncates notes; ``detailed`` shows every field.
    Both end with the status summary.
    """
    if output is OutputFormat.JSON:
        return format_json(requirements)

    if not requirements:
        return "No requirements found."

    if output is OutputFormat.SUMMARY:
        return format_summary(requirements)

    lines = [_RULE, "Requirements List", _RULE, ""]
    for req in requirements:
        lines.extend(_format_entry(req, detailed=output is OutputFormat.DETAILED))
    lines.append("")
    lines.append(format_summary(requirements))
    return "\n".join(lines)


def format_requirement_detail(req: Requirement) -> str:
    """Render the full single-requirement view used by ``show``."""
    lines = [
        _RULE,
        f"Requirement #{req.id}",
        _RULE,
        "",
        f"Title:       {req.title}",
        f"Status:      {req.status}",
        f"Created:     {format_datetime(req.created)}",
        f"Updated:     {format_datetime(req.updated)}",
    ]
    if req.external_link:
        lines.append(f"Link:        {req.external_link}")
    lines.extend(["", "Description:", req.description])
    if req.notes:
        lines.extend(["", "Notes:", req.notes])
    lines.extend(["", _RULE])
    return "\n".join(lines)
