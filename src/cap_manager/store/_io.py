# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""File I/O for the requirement store.

The store is a single JSON file holding one top-level array of requirement
records. Writes always replace the whole file atomically; there is no
append log and no partial patching.
"""

from __future__ import annotations

import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

from cap_manager.exceptions import (
    StoreIOError,
    StoreNotFoundError,
    StoreParseError,
    StoreShapeError,
)
from cap_manager.store._models import Requirement, RequirementStatus
from cap_manager.store._validation import format_timestamp, is_canonical_timestamp

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "read_raw",
    "read_requirements",
    "record_to_dict",
    "store_exists",
    "write_requirements",
]


def _atomic_write(path: Path, content: bytes) -> None:
    """Write content to a file atomically.

    Writes to a temporary file in the same directory, then renames it over
    the target so readers see either the old or the new content.

    Raises:
        StoreIOError: If the write operation fails.
    """
    temp_path: Path | None = None
    try:
        _ = path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            delete=False,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as f:
            temp_path = Path(f.name)
            _ = f.write(content)

        # Path.replace() is atomic on both POSIX and Windows
        _ = temp_path.replace(path)

    except OSError as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        msg = f"Failed to write {path.name}: {e}"
        raise StoreIOError(msg, path=path, operation="write", cause=e) from e


def store_exists(path: Path) -> bool:
    """Report whether the store file is present."""
    return path.is_file()


def read_raw(path: Path) -> Any:  # pyright: ignore[reportExplicitAny]
    """Read and decode the store file without interpreting its records.

    Raises:
        StoreNotFoundError: If the file does not exist.
        StoreIOError: If the file exists but cannot be read.
        StoreParseError: If the content is not valid JSON.
    """
    try:
        content = path.read_bytes()
    except FileNotFoundError as e:
        msg = f"{path.name} file not found at {path}. Run 'init' to create it."
        raise StoreNotFoundError(msg, path=path) from e
    except OSError as e:
        msg = f"Failed to read {path.name}: {e}"
        raise StoreIOError(msg, path=path, operation="read", cause=e) from e

    try:
        return orjson.loads(content)
    except orjson.JSONDecodeError as e:
        msg = f"{path.name} contains invalid JSON: {e}"
        raise StoreParseError(msg, path=path, cause=e) from e


def _stored_timestamp(data: dict[str, Any], name: str) -> datetime:  # pyright: ignore[reportExplicitAny]
    value = data[name]
    if not is_canonical_timestamp(value):
        msg = f"{name} must be a YYYY-MM-DDTHH:MM:SS.mmmZ timestamp, got {value!r}"
        raise ValueError(msg)
    return datetime.fromisoformat(value).astimezone(UTC)


def _stored_text(
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    name: str,
    default: str | None = None,
) -> str:
    value = data[name] if default is None else data.get(name, default)
    if not isinstance(value, str):
        msg = f"{name} must be a string, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _dict_to_requirement(path: Path, index: int, data: object) -> Requirement:
    """Convert a decoded JSON object into a Requirement.

    Values are taken as stored: text fields must already be strings and
    timestamps must already be in the canonical form, so writing the
    collection back leaves untouched records byte-identical.

    Raises:
        StoreShapeError: If the record is missing fields or has bad values.
    """
    if not isinstance(data, dict):
        msg = f"Requirement at position {index} is not an object"
        raise StoreShapeError(msg, path=path, index=index)

    try:
        req_id = data["id"]
        if isinstance(req_id, bool) or not isinstance(req_id, int):
            msg = f"id must be an integer, got {type(req_id).__name__}"
            raise TypeError(msg)
        link = data.get("externalLink")
        if link is not None and not isinstance(link, str):
            msg = f"externalLink must be a string, got {type(link).__name__}"
            raise TypeError(msg)
        return Requirement(
            id=req_id,
            title=_stored_text(data, "title"),
            description=_stored_text(data, "description"),
            status=RequirementStatus(data["status"]),
            notes=_stored_text(data, "notes", default=""),
            created=_stored_timestamp(data, "created"),
            updated=_stored_timestamp(data, "updated"),
            external_link=link or None,
        )
    except KeyError as e:
        msg = f"Requirement at position {index} is missing field {e}"
        raise StoreShapeError(msg, path=path, index=index) from e
    except (TypeError, ValueError) as e:
        msg = f"Requirement at position {index} is malformed: {e}"
        raise StoreShapeError(msg, path=path, index=index) from e


def read_requirements(path: Path) -> list[Requirement]:
    """Read the full requirement collection.

    Args:
        path: Path to the store file.

    Returns:
        The requirements in file order.

    Raises:
        StoreNotFoundError: If the file does not exist.
        StoreIOError: If the file cannot be read.
        StoreParseError: If the content is not valid JSON.
        StoreShapeError: If the top-level value is not an array, or a record
            cannot be decoded.
    """
    data = read_raw(path)

    if not isinstance(data, list):
        msg = f"{path.name} must contain an array of requirements"
        raise StoreShapeError(msg, path=path)

    return [_dict_to_requirement(path, i, item) for i, item in enumerate(data)]


def record_to_dict(req: Requirement) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Convert a Requirement to its persisted dictionary form.

    Keys follow a fixed order; ``externalLink`` is omitted when unset.
    """
    data: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
        "id": req.id,
        "title": req.title,
        "description": req.description,
        "status": req.status.value,
        "notes": req.notes,
        "created": format_timestamp(req.created),
        "updated": format_timestamp(req.updated),
    }
    if req.external_link:
        data["externalLink"] = req.external_link
    return data


def write_requirements(path: Path, requirements: Iterable[Requirement]) -> None:
    """Write the full requirement collection, replacing the file.

    Output uses two-space indentation and ends with a newline so the file
    diffs cleanly under version control.

    Raises:
        StoreIOError: If serialization or the write fails.
    """
    records = [record_to_dict(req) for req in requirements]
    try:
        content = orjson.dumps(records, option=orjson.OPT_INDENT_2)
    except TypeError as e:
        msg = f"Failed to serialize requirements: {e}"
        raise StoreIOError(msg, path=path, operation="write", cause=e) from e

    _atomic_write(path, content + b"\n")
