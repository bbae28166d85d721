"""Filtering, sorting, and summarizing requirement collections.

These functions are shared by the CLI ``list`` command and the HTTP listing
endpoint so both produce identical results for the same options. All of
them are pure: they never touch the store file and return new lists.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from cap_manager.exceptions import InvalidArgumentError
from cap_manager.store._models import (
    Requirement,
    RequirementQuery,
    RequirementStatus,
    SortField,
    SortOrder,
)
from cap_manager.store._validation import parse_timestamp, require_status

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

__all__ = [
    "apply_query",
    "build_query",
    "filter_requirements",
    "sort_requirements",
    "summarize_statuses",
]

_SORT_KEYS: dict[SortField, Callable[[Requirement], object]] = {
    SortField.ID: lambda req: req.id,
    SortField.UPDATED: lambda req: req.updated,
    SortField.CREATED: lambda req: req.created,
    # Label text, not enum rank: Blocked < Completed < In Progress < Not Started
    SortField.STATUS: lambda req: req.status.value,
}


def _parse_choice[E: (SortField, SortOrder)](
    enum_type: type[E], value: str | E, field: str
) -> E:
    try:
        return enum_type(value)
    except ValueError as e:
        choices = ", ".join(member.value for member in enum_type)
        msg = f'Invalid {field} "{value}". Valid values are: {choices}'
        raise InvalidArgumentError(msg, field=field, value=value) from e


def build_query(  # noqa: PLR0913
    *,
    status: str | RequirementStatus | None = None,
    since: str | None = None,
    until: str | None = None,
    linked: bool = False,
    unlinked: bool = False,
    sort: str | SortField | None = None,
    order: str | SortOrder | None = None,
) -> RequirementQuery:
    """Build a validated query from raw option values.

    Empty strings are treated the same as omitted options.

    Raises:
        InvalidStatusError: If ``status`` is not an allowed status.
        InvalidArgumentError: If a date bound cannot be parsed or ``sort`` /
            ``order`` is not a recognized value.
    """
    return RequirementQuery(
        status=require_status(status) if status else None,
        since=parse_timestamp(since, field="since") if since else None,
        until=parse_timestamp(until, field="until") if until else None,
        linked=linked,
        unlinked=unlinked,
        sort=_parse_choice(SortField, sort, "sort") if sort else SortField.ID,
        order=_parse_choice(SortOrder, order, "order") if order else SortOrder.ASC,
    )


def _matches(req: Requirement, query: RequirementQuery) -> bool:
    if query.status is not None and req.status != query.status:
        return False
    if query.since is not None and req.updated < query.since:
        return False
    if query.until is not None and req.updated > query.until:
        return False
    if query.linked and not req.is_linked:
        return False
    return not (query.unlinked and req.is_linked)


def filter_requirements(
    requirements: Iterable[Requirement], query: RequirementQuery
) -> list[Requirement]:
    """Keep the requirements matching every supplied criterion."""
    return [req for req in requirements if _matches(req, query)]


def sort_requirements(
    requirements: Iterable[Requirement],
    sort: SortField = SortField.ID,
    order: SortOrder = SortOrder.ASC,
) -> list[Requirement]:
    """Order requirements by a single field.

    The sort is stable in both directions, so records that compare equal
    keep their input order whether ascending or descending is requested.
    """
    return sorted(
        requirements,
        key=_SORT_KEYS[sort],  # pyright: ignore[reportArgumentType]
        reverse=order == SortOrder.DESC,
    )


def apply_query(
    requirements: Iterable[Requirement], query: RequirementQuery
) -> list[Requirement]:
    """Filter then sort a collection according to a query."""
    return sort_requirements(
        filter_requirements(requirements, query), query.sort, query.order
    )


def summarize_statuses(
    requirements: Iterable[Requirement],
) -> dict[RequirementStatus, int]:
    """Count requirements per status, omitting statuses with no records.

    Keys are returned in enumeration order.
    """
    counts = Counter(req.status for req in requirements)
    return {status: counts[status] for status in RequirementStatus if counts[status]}
