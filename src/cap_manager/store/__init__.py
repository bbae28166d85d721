"""Requirement store.

This package provides the RequirementStore class for reading and mutating the
progress file, along with the record models, validation helpers, and the
query engine shared by the CLI and the HTTP API.
"""

from cap_manager.store._io import (
    read_raw,
    read_requirements,
    record_to_dict,
    store_exists,
    write_requirements,
)
from cap_manager.store._models import (
    Requirement,
    RequirementQuery,
    RequirementStatus,
    SortField,
    SortOrder,
    ValidationIssue,
)
from cap_manager.store._query import (
    apply_query,
    build_query,
    filter_requirements,
    sort_requirements,
    summarize_statuses,
)
from cap_manager.store._store import RequirementStore, utc_now
from cap_manager.store._validation import (
    VALID_STATUSES,
    format_timestamp,
    is_canonical_timestamp,
    is_valid_status,
    is_valid_url,
    parse_timestamp,
    validate_records,
)

__all__ = [
    "VALID_STATUSES",
    "Requirement",
    "RequirementQuery",
    "RequirementStatus",
    "RequirementStore",
    "SortField",
    "SortOrder",
    "ValidationIssue",
    "apply_query",
    "build_query",
    "filter_requirements",
    "format_timestamp",
    "is_canonical_timestamp",
    "is_valid_status",
    "is_valid_url",
    "parse_timestamp",
    "read_raw",
    "read_requirements",
    "record_to_dict",
    "sort_requirements",
    "store_exists",
    "summarize_statuses",
    "utc_now",
    "validate_records",
]
