# pyright: reportUnknownMemberType=false
"""Requirement store for CRUD operations on the progress file.

This module provides the RequirementStore class, the single entry point the
CLI and the HTTP API use to read and mutate requirements. Every call reloads
the whole collection from disk, applies its change, and writes the whole
collection back; no state is kept between calls.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Final

from cap_manager.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    RequirementNotFoundError,
)
from cap_manager.store._io import read_requirements, store_exists, write_requirements
from cap_manager.store._models import Requirement, RequirementQuery, RequirementStatus
from cap_manager.store._query import apply_query
from cap_manager.store._validation import require_status, require_text, require_url

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

__all__ = ["RequirementStore", "utc_now"]

_TICK: Final = timedelta(milliseconds=1)


def utc_now() -> datetime:
    """Return the current UTC time truncated to millisecond precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class RequirementStore:
    """Manager for requirements persisted in a single JSON file.

    Attributes:
        path: Path to the store file.
    """

    __slots__: Final = ("_clock", "_logger", "path")

    path: Path
    _clock: Callable[[], datetime]
    _logger: FilteringBoundLogger | None

    def __init__(
        self,
        path: Path,
        *,
        logger: FilteringBoundLogger | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the store.

        Args:
            path: Path to the store file. It does not need to exist yet.
            logger: Optional logger; mutations are logged when provided.
            clock: Source of the current time, injectable for tests.
        """
        self.path = path
        self._logger = logger
        self._clock = clock

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def exists(self) -> bool:
        """Report whether the store file is present."""
        return store_exists(self.path)

    def load_all(self) -> list[Requirement]:
        """Load every requirement in file order.

        Raises:
            StoreNotFoundError: If the store has not been initialized.
            StoreParseError: If the file is not valid JSON.
            StoreShapeError: If the file does not hold a requirement array.
        """
        return read_requirements(self.path)

    def save_all(self, requirements: Iterable[Requirement]) -> None:
        """Replace the persisted collection.

        Raises:
            StoreIOError: If the file cannot be written.
        """
        write_requirements(self.path, requirements)

    def _log(self, event: str, **kwargs: object) -> None:
        if self._logger is not None:
            self._logger.info(event, path=str(self.path), **kwargs)

    def _touch(self, previous: datetime) -> datetime:
        # updated strictly increases even for two mutations in the same ms
        return max(self._clock(), previous + _TICK)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, requirement_id: int) -> Requirement:
        """Get a single requirement by ID.

        Raises:
            StoreNotFoundError: If the store has not been initialized.
            RequirementNotFoundError: If no requirement has this ID.
        """
        for req in self.load_all():
            if req.id == requirement_id:
                return req
        raise _not_found(requirement_id)

    def list(self, query: RequirementQuery | None = None) -> list[Requirement]:
        """List requirements, filtered and sorted by ``query``.

        Without a query, every requirement is returned in ID order.
        """
        return apply_query(self.load_all(), query or RequirementQuery())

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def init(
        self, title: str | None = None, description: str | None = None
    ) -> list[Requirement]:
        """Create the store file.

        The store starts empty, or with a single requirement when both
        ``title`` and ``description`` are given.

        Returns:
            The initial collection.

        Raises:
            AlreadyExistsError: If the store file already exists.
            InvalidArgumentError: If only one of title and description is given,
                or either is blank.
        """
        if self.exists():
            msg = f"{self.path.name} already exists at {self.path}"
            raise AlreadyExistsError(msg, path=self.path)

        if (title is None) != (description is None):
            msg = "Title and description must be provided together"
            raise InvalidArgumentError(msg, field="description", value=description)

        requirements: list[Requirement] = []
        if title is not None and description is not None:
            now = self._clock()
            requirements.append(
                Requirement(
                    id=1,
                    title=require_text(title, "title"),
                    description=require_text(description, "description"),
                    status=RequirementStatus.NOT_STARTED,
                    notes="",
                    created=now,
                    updated=now,
                )
            )

        self.save_all(requirements)
        self._log("store_initialized", count=len(requirements))
        return requirements

    def add(
        self, title: str, description: str, *, external_link: str | None = None
    ) -> Requirement:
        """Create a requirement with the next free ID.

        Args:
            title: Requirement title; surrounding whitespace is stripped.
            description: Requirement description; surrounding whitespace is
                stripped.
            external_link: Optional HTTP/HTTPS link. An empty string is the
                same as no link.

        Returns:
            The created requirement.

        Raises:
            InvalidArgumentError: If title or description is blank.
            InvalidUrlError: If the link is not an HTTP/HTTPS URL.
            StoreNotFoundError: If the store has not been initialized.
        """
        clean_title = require_text(title, "title")
        clean_description = require_text(description, "description")
        link = require_url(external_link) if external_link else None

        requirements = self.load_all()
        next_id = max((req.id for req in requirements), default=0) + 1
        now = self._clock()
        created = Requirement(
            id=next_id,
            title=clean_title,
            description=clean_description,
            status=RequirementStatus.NOT_STARTED,
            notes="",
            created=now,
            updated=now,
            external_link=link,
        )

        self.save_all([*requirements, created])
        self._log("requirement_added", requirement_id=next_id)
        return created

    def update(  # noqa: PLR0913
        self,
        requirement_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        status: str | RequirementStatus | None = None,
        notes: str | None = None,
        external_link: str | None = None,
    ) -> Requirement:
        """Partially update a requirement.

        Fields left as None keep their current value. ``external_link=""``
        removes the link. ``updated`` is always advanced; ``created`` never
        changes.

        Returns:
            The updated requirement.

        Raises:
            InvalidStatusError: If ``status`` is not an allowed status.
            InvalidUrlError: If a non-empty link is not an HTTP/HTTPS URL.
            InvalidArgumentError: If a supplied title or description is blank.
            StoreNotFoundError: If the store has not been initialized.
            RequirementNotFoundError: If no requirement has this ID.
        """
        new_status = require_status(status) if status is not None else None
        if external_link:
            _ = require_url(external_link)
        new_title = require_text(title, "title") if title is not None else None
        new_description = (
            require_text(description, "description") if description is not None else None
        )

        requirements = self.load_all()
        for index, existing in enumerate(requirements):
            if existing.id == requirement_id:
                break
        else:
            raise _not_found(requirement_id)

        link = existing.external_link
        if external_link is not None:
            link = external_link or None

        updated = replace(
            existing,
            title=new_title if new_title is not None else existing.title,
            description=(
                new_description if new_description is not None else existing.description
            ),
            status=new_status if new_status is not None else existing.status,
            notes=notes if notes is not None else existing.notes,
            external_link=link,
            updated=self._touch(existing.updated),
        )
        requirements[index] = updated

        self.save_all(requirements)
        self._log(
            "requirement_updated",
            requirement_id=requirement_id,
            status=updated.status.value,
        )
        return updated

    def complete(self, requirement_id: int, notes: str | None = None) -> Requirement:
        """Mark a requirement completed, optionally replacing its notes."""
        return self.update(
            requirement_id, status=RequirementStatus.COMPLETED, notes=notes
        )

    def block(self, requirement_id: int, reason: str) -> Requirement:
        """Mark a requirement blocked, recording the reason as its notes.

        Raises:
            InvalidArgumentError: If the reason is blank.
        """
        clean_reason = require_text(reason, "reason")
        return self.update(
            requirement_id, status=RequirementStatus.BLOCKED, notes=clean_reason
        )

    def delete(self, requirement_id: int) -> Requirement:
        """Permanently remove a requirement.

        Returns:
            The removed requirement.

        Raises:
            StoreNotFoundError: If the store has not been initialized.
            RequirementNotFoundError: If no requirement has this ID.
        """
        requirements = self.load_all()
        removed = next((req for req in requirements if req.id == requirement_id), None)
        if removed is None:
            raise _not_found(requirement_id)

        self.save_all(req for req in requirements if req.id != requirement_id)
        self._log("requirement_deleted", requirement_id=requirement_id)
        return removed


def _not_found(requirement_id: int) -> RequirementNotFoundError:
    msg = f"Requirement #{requirement_id} not found"
    return RequirementNotFoundError(msg, requirement_id=requirement_id)
