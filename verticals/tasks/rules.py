"""Task validation rules: pure functions.

Two constraint sets over a raw field mapping:
- create: title and end_date required, end_date not before the start of today
- update: every field optional, end_date only has to be a valid date

Either a normalized TaskCreate/TaskUpdate comes back, or ValidationFailed is
raised with the violations in field order (title, description, priority,
end_date, completed), at most one message per field. Keys outside those five
are ignored, so client-supplied owner or id fields never reach the store.
"""

from datetime import datetime
from typing import Any, Mapping

from core.errors import ValidationFailed
from core.models.base import ensure_utc
from patterns.rules_engine import (
    MISSING,
    RuleSetResult,
    check_boolean,
    check_choice,
    check_datetime,
    check_text,
    evaluate_rules,
    pick,
)
from verticals.tasks.models.schemas import TaskCreate, TaskPriority, TaskUpdate

TASK_FIELDS = ("title", "description", "priority", "end_date", "completed")

TITLE_MAX = 200
DESCRIPTION_MAX = 1000


def start_of_day(now: datetime) -> datetime:
    """Server-local midnight of the day containing `now`."""
    local = now.astimezone()
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def is_overdue(end_date: datetime | None, completed: bool, now: datetime) -> bool:
    """Overdue = past the due date and not completed. Never stored."""
    if completed or end_date is None:
        return False
    return now > ensure_utc(end_date)


def _evaluate(data: Mapping[str, Any], *, creating: bool, now: datetime | None) -> RuleSetResult:
    raw = pick(data, TASK_FIELDS)
    return evaluate_rules(
        # On update a supplied title must still be non-empty.
        check_text(
            "title",
            raw["title"],
            required=creating or raw["title"] is not MISSING,
            min_length=1,
            max_length=TITLE_MAX,
            required_message="Title is required" if creating else "Title cannot be empty",
            type_message="Title must be a string",
            length_message=f"Title must be between 1 and {TITLE_MAX} characters",
        ),
        check_text(
            "description",
            raw["description"],
            nullable=True,
            max_length=DESCRIPTION_MAX,
            type_message="Description must be a string",
            length_message=f"Description must be less than {DESCRIPTION_MAX} characters",
        ),
        check_choice(
            "priority",
            raw["priority"],
            TaskPriority,
            message="Priority must be low, medium, or high",
        ),
        check_datetime(
            "end_date",
            raw["end_date"],
            required=creating,
            not_before=start_of_day(now) if creating and now is not None else None,
            required_message="End date is required",
            invalid_message="End date must be a valid date",
            too_early_message="End date cannot be in the past",
        ),
        check_boolean(
            "completed",
            raw["completed"],
            message="Completed must be a boolean value",
        ),
    )


def validate_task_create(data: Mapping[str, Any], now: datetime) -> TaskCreate:
    """Apply the create constraint set; `now` fixes the "today" boundary."""
    result = _evaluate(data, creating=True, now=now)
    if not result.all_passed:
        raise ValidationFailed(result.violations)
    return TaskCreate(**result.values)


def validate_task_update(data: Mapping[str, Any]) -> TaskUpdate:
    """Apply the update constraint set; absent fields stay unset."""
    result = _evaluate(data, creating=False, now=None)
    if not result.all_passed:
        raise ValidationFailed(result.violations)
    return TaskUpdate(**result.values)
