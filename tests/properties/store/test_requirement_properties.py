"""Property-based tests for the requirement store and query engine."""

import tempfile
from datetime import UTC, datetime
from pathlib import Path

from hypothesis import given, settings, strategies as st

from cap_manager.store import (
    Requirement,
    RequirementQuery,
    RequirementStatus,
    RequirementStore,
    SortField,
    SortOrder,
    apply_query,
    is_valid_url,
    read_raw,
    read_requirements,
    sort_requirements,
    summarize_statuses,
    validate_records,
    write_requirements,
)

# =============================================================================
# Strategies
# =============================================================================

safe_text = st.text(
    alphabet=st.characters(whitelist_categories=["L", "N", "Zs", "P"]),
    min_size=1,
    max_size=40,
).filter(lambda x: x.strip())

statuses = st.sampled_from(list(RequirementStatus))

links = st.sampled_from(
    [None, "https://example.com/issues/1", "http://localhost:8080/ticket?id=7"]
)

instants = st.datetimes(
    min_value=datetime(2000, 1, 1),
    max_value=datetime(2100, 1, 1),
    timezones=st.just(UTC),
).map(lambda dt: dt.replace(microsecond=dt.microsecond // 1000 * 1000))


@st.composite
def requirement_lists(draw: st.DrawFn) -> list[Requirement]:
    """Requirements with unique ids and created <= updated."""
    ids = draw(st.lists(st.integers(min_value=1, max_value=10_000), unique=True))
    result: list[Requirement] = []
    for req_id in ids:
        created, updated = sorted([draw(instants), draw(instants)])
        result.append(
            Requirement(
                id=req_id,
                title=draw(safe_text),
                description=draw(safe_text),
                status=draw(statuses),
                notes=draw(st.text(max_size=40)),
                created=created,
                updated=updated,
                external_link=draw(links),
            )
        )
    return result


def create_store() -> tuple[RequirementStore, tempfile.TemporaryDirectory[str]]:
    """Create a fresh initialized store in a temporary directory."""
    tmpdir = tempfile.TemporaryDirectory()
    store = RequirementStore(Path(tmpdir.name) / "progress.json")
    _ = store.init()
    return store, tmpdir


# =============================================================================
# Store Properties
# =============================================================================


@given(titles=st.lists(safe_text, min_size=1, max_size=8))
@settings(max_examples=25, deadline=None)
def test_sequential_adds_assign_increasing_ids(titles: list[str]) -> None:
    """Property: ids are 1..n for n adds to an empty store."""
    store, tmpdir = create_store()
    try:
        created = [store.add(title, "description") for title in titles]

        assert [req.id for req in created] == list(range(1, len(titles) + 1))
    finally:
        tmpdir.cleanup()


@given(
    count=st.integers(min_value=1, max_value=6),
    data=st.data(),
)
@settings(max_examples=25, deadline=None)
def test_next_id_is_one_past_remaining_maximum(count: int, data: st.DataObject) -> None:
    """Property: after any deletions, add assigns max(remaining ids) + 1."""
    store, tmpdir = create_store()
    try:
        for i in range(count):
            _ = store.add(f"Requirement {i}", "description")
        to_delete = data.draw(
            st.lists(st.integers(min_value=1, max_value=count), unique=True)
        )
        for req_id in to_delete:
            _ = store.delete(req_id)

        remaining = [req.id for req in store.load_all()]
        new = store.add("Next", "description")

        assert new.id == max(remaining, default=0) + 1
        assert len({req.id for req in store.load_all()}) == len(remaining) + 1
    finally:
        tmpdir.cleanup()


@given(status=statuses, notes=st.text(max_size=60))
@settings(max_examples=25, deadline=None)
def test_update_preserves_created_and_advances_updated(
    status: RequirementStatus, notes: str
) -> None:
    """Property: update never changes created and always advances updated."""
    store, tmpdir = create_store()
    try:
        original = store.add("Title", "description")

        first = store.update(original.id, status=status, notes=notes)
        second = store.update(original.id, status=status, notes=notes)

        assert first.created == original.created
        assert original.updated < first.updated < second.updated
        assert second.notes == notes
    finally:
        tmpdir.cleanup()


# =============================================================================
# Serialization Properties
# =============================================================================


@given(requirements=requirement_lists())
@settings(max_examples=30, deadline=None)
def test_written_collection_reads_back_unchanged(
    requirements: list[Requirement],
) -> None:
    """Property: read(write(xs)) == xs, and the file always validates."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "progress.json"

        write_requirements(path, requirements)

        assert read_requirements(path) == requirements
        assert validate_records(read_raw(path)) == []


# =============================================================================
# Query Properties
# =============================================================================


@given(requirements=requirement_lists())
def test_descending_id_sort_reverses_ascending(
    requirements: list[Requirement],
) -> None:
    """Property: with unique keys, desc order is the reverse of asc order."""
    ascending = sort_requirements(requirements, SortField.ID, SortOrder.ASC)
    descending = sort_requirements(requirements, SortField.ID, SortOrder.DESC)

    assert descending == list(reversed(ascending))


@given(requirements=requirement_lists(), sort=st.sampled_from(list(SortField)))
def test_sorting_is_a_permutation(
    requirements: list[Requirement], sort: SortField
) -> None:
    """Property: sorting neither adds nor drops requirements."""
    result = sort_requirements(requirements, sort)

    assert sorted(req.id for req in result) == sorted(req.id for req in requirements)


@given(requirements=requirement_lists())
def test_status_filters_partition_the_collection(
    requirements: list[Requirement],
) -> None:
    """Property: per-status listings are disjoint and cover every requirement."""
    per_status = {
        status: apply_query(requirements, RequirementQuery(status=status))
        for status in RequirementStatus
    }

    assert sum(len(reqs) for reqs in per_status.values()) == len(requirements)
    assert {
        status: len(reqs) for status, reqs in per_status.items() if reqs
    } == summarize_statuses(requirements)


@given(requirements=requirement_lists())
def test_linked_and_unlinked_split_the_collection(
    requirements: list[Requirement],
) -> None:
    """Property: linked + unlinked == all; both together == nothing."""
    linked = apply_query(requirements, RequirementQuery(linked=True))
    unlinked = apply_query(requirements, RequirementQuery(unlinked=True))
    both = apply_query(requirements, RequirementQuery(linked=True, unlinked=True))

    assert len(linked) + len(unlinked) == len(requirements)
    assert both == []


@given(requirements=requirement_lists(), bound=instants)
def test_since_and_until_meet_at_the_bound(
    requirements: list[Requirement], bound: datetime
) -> None:
    """Property: since/until are inclusive, so records at the bound appear in both."""
    since = apply_query(requirements, RequirementQuery(since=bound))
    until = apply_query(requirements, RequirementQuery(until=bound))
    at_bound = [req for req in requirements if req.updated == bound]

    assert len(since) + len(until) == len(requirements) + len(at_bound)


# =============================================================================
# Validation Properties
# =============================================================================


@given(value=st.text(max_size=80))
def test_url_check_never_raises(value: str) -> None:
    """Property: is_valid_url returns a bool for any text."""
    assert isinstance(is_valid_url(value), bool)
