# pyright: reportUnusedCallResult=false
# ruff: noqa: D415, PLR0913
"""Requirement commands.

Commands: init, add, update, list, show, complete, block, delete, prompt,
validate.
"""

from typing import Annotated, Never

from cyclopts import Parameter

from cap_manager.cli._context import CLIContext
from cap_manager.exceptions import CapManagerError, StoreNotFoundError
from cap_manager.store import (
    Requirement,
    build_query,
    read_raw,
    validate_records,
)

from ._output import OutputFormat, format_list, format_requirement_detail
from ._shared import (
    confirm_destructive,
    exit_with_error,
    exit_with_success,
    get_error_console,
    get_store,
)

__all__ = [
    "add",
    "block",
    "complete",
    "delete",
    "init",
    "list_requirements",
    "prompt",
    "show",
    "update",
    "validate",
]


def _fail(error: CapManagerError) -> Never:
    ctx = CLIContext.get_current()
    if ctx.logger is not None:
        ctx.logger.warning(
            "command_failed", error=str(error), error_type=type(error).__name__
        )
    exit_with_error(str(error))


def _say(message: str) -> None:
    if not CLIContext.get_current().quiet:
        print(message)


def _print_status_change(req: Requirement) -> None:
    _say(f"Successfully updated requirement #{req.id}")
    _say(f"Status: {req.status}")
    if req.notes:
        _say(f"Notes: {req.notes}")


def init(title: str | None = None, description: str | None = None, /) -> None:
    """Create the progress file, optionally with a first requirement

    Args:
        title: Title of the first requirement.
        description: Description of the first requirement.
    """
    store = get_store()
    try:
        created = store.init(title, description)
    except CapManagerError as e:
        _fail(e)

    _say(f"Successfully initialized {store.path.name}")
    if created:
        _say(f"Created requirement #{created[0].id}: {created[0].title}")
    else:
        _say(
            'Use the "add" command or the web UI (cap-manager serve) '
            "to add requirements."
        )


def add(
    title: str,
    description: str,
    /,
    *,
    link: Annotated[
        str | None,
        Parameter(name=["--link", "-l"], help="External HTTP/HTTPS link"),
    ] = None,
) -> None:
    """Add a new requirement

    Args:
        title: Requirement title.
        description: Requirement description.
        link: Optional link to an external tracker.
    """
    try:
        req = get_store().add(title, description, external_link=link)
    except CapManagerError as e:
        _fail(e)

    _say(f"Successfully added requirement #{req.id}: {req.title}")


def update(
    requirement_id: int,
    status: str,
    notes: str | None = None,
    /,
    *,
    link: Annotated[
        str | None,
        Parameter(
            name=["--link", "-l"],
            help='External HTTP/HTTPS link; pass "" to remove it',
        ),
    ] = None,
) -> None:
    """Update the status, notes, or link of a requirement

    Args:
        requirement_id: Requirement ID.
        status: New status (Not Started, In Progress, Completed, Blocked).
        notes: New notes; existing notes are kept when omitted.
        link: New external link.
    """
    try:
        req = get_store().update(
            requirement_id, status=status, notes=notes, external_link=link
        )
    except CapManagerError as e:
        _fail(e)

    _print_status_change(req)


def list_requirements(
    *,
    status: Annotated[
        str | None, Parameter(name=["--status", "-s"], help="Filter by status")
    ] = None,
    since: Annotated[
        str | None,
        Parameter(help="Only requirements updated at or after this date"),
    ] = None,
    until: Annotated[
        str | None,
        Parameter(help="Only requirements updated at or before this date"),
    ] = None,
    linked: Annotated[
        bool,
        Parameter(negative="", help="Only requirements with an external link"),
    ] = False,
    unlinked: Annotated[
        bool,
        Parameter(negative="", help="Only requirements without an external link"),
    ] = False,
    sort: Annotated[
        str, Parameter(help="Sort field: id, updated, created, status")
    ] = "id",
    order: Annotated[str, Parameter(help="Sort order: asc, desc")] = "asc",
    format_: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format"),
    ] = OutputFormat.DEFAULT,
) -> None:
    """List requirements with optional filtering and sorting

    Args:
        status: Keep only requirements with this status.
        since: Lower bound on the last update time.
        until: Upper bound on the last update time.
        linked: Keep only requirements with an external link.
        unlinked: Keep only requirements without an external link.
        sort: Field to sort by.
        order: Sort direction.
        format_: Output format.
    """
    try:
        query = build_query(
            status=status,
            since=since,
            until=until,
            linked=linked,
            unlinked=unlinked,
            sort=sort,
            order=order,
        )
        requirements = get_store().list(query)
    except CapManagerError as e:
        _fail(e)

    print(format_list(requirements, format_))


def show(requirement_id: int, /) -> None:
    """Show every field of a single requirement

    Args:
        requirement_id: Requirement ID.
    """
    try:
        req = get_store().get(requirement_id)
    except CapManagerError as e:
        _fail(e)

    print(format_requirement_detail(req))


def complete(requirement_id: int, notes: str | None = None, /) -> None:
    """Mark a requirement as completed

    Args:
        requirement_id: Requirement ID.
        notes: Optional completion notes.
    """
    try:
        req = get_store().complete(requirement_id, notes)
    except CapManagerError as e:
        _fail(e)

    _print_status_change(req)


def block(requirement_id: int, reason: str, /) -> None:
    """Mark a requirement as blocked, recording the reason in its notes

    Args:
        requirement_id: Requirement ID.
        reason: Why the requirement is blocked.
    """
    try:
        req = get_store().block(requirement_id, reason)
    except CapManagerError as e:
        _fail(e)

    _print_status_change(req)


def delete(
    requirement_id: int,
    /,
    *,
    force: Annotated[
        bool,
        Parameter(name=["--force", "-f"], negative="", help="Skip confirmation"),
    ] = False,
) -> None:
    """Permanently delete a requirement

    Args:
        requirement_id: Requirement ID.
        force: Delete without asking for confirmation.
    """
    store = get_store()
    try:
        req = store.get(requirement_id)
    except CapManagerError as e:
        _fail(e)

    message = (
        f"You are about to delete requirement #{req.id}:\n"
        f"Title: {req.title}\n"
        f"Status: {req.status}"
    )
    if not confirm_destructive(message, force=force, console=get_error_console()):
        exit_with_success("Deletion cancelled.")

    try:
        store.delete(requirement_id)
    except CapManagerError as e:
        _fail(e)

    _say(f"Successfully deleted requirement #{requirement_id}")


def prompt() -> None:
    """Print the agent prompt file"""
    path = CLIContext.get_current().prompt_path
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        exit_with_error(f"{path.name} not found in the current directory")
    except OSError as e:
        exit_with_error(f"Failed to read {path.name}: {e}")

    print(content, end="" if content.endswith("\n") else "\n")


def validate() -> None:
    """Check the progress file for structural problems

    A missing progress file is skipped with status 0 so the command can run
    as a pre-commit hook in projects that have not called init yet.
    """
    path = CLIContext.get_current().store_path
    try:
        data = read_raw(path)
    except StoreNotFoundError:
        print(f"No {path.name} file found, skipping validation")
        return
    except CapManagerError as e:
        _fail(e)

    issues = validate_records(data)
    if issues:
        for issue in issues:
            print(issue.message)
        exit_with_error(f"{path.name} has {len(issues)} problem(s)")

    count = len(data) if isinstance(data, list) else 0
    print(f"{path.name} is valid ({count} requirements)")
