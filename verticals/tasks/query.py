"""Task list query builder.

Turns raw list parameters (page, limit, sortBy, sortOrder, priority,
completed) into a frozen TaskQuery descriptor. The descriptor is the only
thing the repository sees, and it uses the same predicate for the count and
for the page slice.

Policies:
- page/limit must be integers >= 1; limit above the configured maximum is
  rejected. Nothing is clamped.
- A page whose offset does not fit a signed 64-bit integer is rejected.
- sortBy outside the known columns is rejected, never forwarded.
- sortOrder is case-insensitive ASC/DESC.
- Empty-string filters count as absent.
"""

from dataclasses import dataclass
from typing import Any, Mapping
from uuid import UUID

from core.config import PaginationConfig
from core.errors import ValidationFailed
from patterns.rules_engine import parse_boolean
from verticals.tasks.models.schemas import SortField, SortOrder, TaskPriority

# Largest OFFSET the store can bind.
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class TaskPredicate:
    """Owner scope plus optional filters."""

    owner_id: UUID
    priority: TaskPriority | None = None
    completed: bool | None = None


@dataclass(frozen=True)
class TaskQuery:
    """Normalized, bounded description of one list read."""

    predicate: TaskPredicate
    page: int = 1
    limit: int = 10
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def order(self) -> tuple[SortField, SortOrder]:
        return self.sort_by, self.sort_order

    def total_pages(self, total: int) -> int:
        return (total + self.limit - 1) // self.limit


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().lstrip("+").isdecimal():
        try:
            number = int(value.strip())
        except ValueError:
            # Longer than the interpreter's integer string limit.
            return None
    else:
        return None
    return number if number >= 1 else None


def build_task_query(
    owner_id: UUID,
    params: Mapping[str, Any],
    pagination: PaginationConfig | None = None,
) -> TaskQuery:
    """Validate list parameters and build the descriptor.

    Raises ValidationFailed listing every bad parameter.
    """
    pagination = pagination or PaginationConfig()
    errors: list[tuple[str, str]] = []

    page = pagination.default_page
    raw_page = params.get("page")
    if not _blank(raw_page):
        page = _positive_int(raw_page)
        if page is None:
            errors.append(("page", "Page must be a positive integer"))

    limit = pagination.default_limit
    raw_limit = params.get("limit")
    if not _blank(raw_limit):
        limit = _positive_int(raw_limit)
        if limit is None:
            errors.append(("limit", "Limit must be a positive integer"))
        elif limit > pagination.max_limit:
            errors.append(("limit", f"Limit must not exceed {pagination.max_limit}"))

    if page is not None and limit is not None and (page - 1) * limit > MAX_OFFSET:
        errors.append(("page", "Page is out of range"))

    sort_by = SortField.CREATED_AT
    raw_sort_by = params.get("sortBy")
    if not _blank(raw_sort_by):
        try:
            sort_by = SortField(str(raw_sort_by).strip())
        except ValueError:
            allowed = ", ".join(f.value for f in SortField)
            errors.append(("sortBy", f"sortBy must be one of {allowed}"))

    sort_order = SortOrder.DESC
    raw_sort_order = params.get("sortOrder")
    if not _blank(raw_sort_order):
        try:
            sort_order = SortOrder(str(raw_sort_order).strip().upper())
        except ValueError:
            errors.append(("sortOrder", "sortOrder must be ASC or DESC"))

    priority = None
    raw_priority = params.get("priority")
    if not _blank(raw_priority):
        try:
            priority = TaskPriority(str(raw_priority).strip().lower())
        except ValueError:
            errors.append(("priority", "Priority must be low, medium, or high"))

    completed = None
    raw_completed = params.get("completed")
    if not _blank(raw_completed):
        completed = parse_boolean(raw_completed)
        if completed is None:
            errors.append(("completed", "Completed must be a boolean value"))

    if errors:
        raise ValidationFailed(errors, message="Invalid query parameters")

    return TaskQuery(
        predicate=TaskPredicate(owner_id=owner_id, priority=priority, completed=completed),
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
