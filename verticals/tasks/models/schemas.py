"""Pydantic schemas and enums for the task pipeline."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Severity order: low < medium < high."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {TaskPriority.LOW: 1, TaskPriority.MEDIUM: 2, TaskPriority.HIGH: 3}


class SortField(str, Enum):
    CREATED_AT = "created_at"
    END_DATE = "end_date"
    PRIORITY = "priority"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# ---------------------------------------------------------------------------
# Normalized input models (built by verticals.tasks.rules)
# ---------------------------------------------------------------------------

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: TaskPriority = TaskPriority.MEDIUM
    end_date: datetime
    completed: bool = False


class TaskUpdate(BaseModel):
    """Every field optional; only fields present in model_fields_set are applied."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: Optional[TaskPriority] = None
    end_date: Optional[datetime] = None
    completed: Optional[bool] = None
