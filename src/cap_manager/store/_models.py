"""Data models for the requirement store.

This module defines the requirement record, its status enumeration, and the
filter and sort options consumed by the listing engine. All models are frozen
dataclasses with slots; mutations produce new instances.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

# =============================================================================
# Enums
# =============================================================================


class RequirementStatus(StrEnum):
    """Requirement status values.

    The enumeration is closed: no other value is ever persisted.
    """

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"


class SortField(StrEnum):
    """Fields a requirement listing can be ordered by."""

    ID = "id"
    UPDATED = "updated"
    CREATED = "created"
    STATUS = "status"


class SortOrder(StrEnum):
    """Listing order direction."""

    ASC = "asc"
    DESC = "desc"


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class Requirement:
    """A single tracked unit of work.

    Attributes:
        id: Unique positive identifier assigned by the store.
        title: Short non-empty title.
        description: Non-empty description of the work.
        status: Current status.
        notes: Free-form notes about progress, blockers, or decisions.
        created: Creation timestamp (UTC), never changed after creation.
        updated: Last modification timestamp (UTC).
        external_link: Optional HTTP/HTTPS link to an external tracker.
    """

    id: int
    title: str
    description: str
    status: RequirementStatus
    notes: str
    created: datetime
    updated: datetime
    external_link: str | None = None

    @property
    def is_linked(self) -> bool:
        """Whether the requirement carries an external link."""
        return self.external_link is not None


@dataclass(frozen=True, slots=True)
class RequirementQuery:
    """Filter and sort options for requirement listings.

    All supplied filters are combined with a logical AND. Requesting both
    ``linked`` and ``unlinked`` always yields an empty result.

    Attributes:
        status: Keep only requirements with this status.
        since: Keep only requirements updated at or after this instant.
        until: Keep only requirements updated at or before this instant.
        linked: Keep only requirements with an external link.
        unlinked: Keep only requirements without an external link.
        sort: Field to order by.
        order: Order direction.
    """

    status: RequirementStatus | None = None
    since: datetime | None = None
    until: datetime | None = None
    linked: bool = False
    unlinked: bool = False
    sort: SortField = SortField.ID
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A problem found while checking a decoded store file.

    Attributes:
        message: Human-readable description of the problem.
        index: Position of the offending record, or None for the top level.
        requirement_id: The record's ``id`` value when available.
        field: The offending field, if the issue concerns a single field.
    """

    message: str
    index: int | None = None
    requirement_id: object = None
    field: str | None = None
