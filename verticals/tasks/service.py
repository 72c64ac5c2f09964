"""TaskService: validation, owner scoping and overdue derivation.

Every operation takes the caller's resolved owner id and passes it into
every repository predicate; a task owned by someone else is reported as
NotFound, exactly like a missing one. The service performs no I/O of its
own beyond repository calls, and store failures are translated to the
error taxonomy here, once.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterator, Mapping
from uuid import UUID

from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.config import PaginationConfig, get_settings
from core.errors import ConstraintViolation, NotFound, Unexpected
from core.models.base import utcnow
from verticals.tasks.models.db_models import Task
from verticals.tasks.query import build_task_query
from verticals.tasks.repository import TaskRepository, get_task_repository
from verticals.tasks.rules import is_overdue, validate_task_create, validate_task_update

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

TASK_NOT_FOUND = "Task not found"


@dataclass
class TaskPage:
    """One page of a list read."""

    items: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    current_page: int = 1
    limit: int = 10

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "count": self.count,
            "total": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "tasks": self.items,
        }


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate store exceptions into the error taxonomy."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Constraint violation during %s: %s", operation, exc.orig)
        if "foreign key" in str(exc.orig).lower():
            raise ConstraintViolation("Resource not found", status_code=404) from exc
        raise ConstraintViolation() from exc
    except SQLAlchemyError as exc:
        logger.exception("Store failure during %s", operation)
        raise Unexpected() from exc


def parse_task_id(task_id: str | UUID) -> UUID:
    """Malformed ids cannot match any task, so they are simply not found."""
    if isinstance(task_id, UUID):
        return task_id
    try:
        return UUID(str(task_id))
    except ValueError as exc:
        raise NotFound(TASK_NOT_FOUND) from exc


class TaskService:
    """Owner-scoped task operations.

    Usage::

        service = TaskService(TaskRepository(session))
        task = await service.create_task(user.id, {"title": "Pay rent", "end_date": "..."})
    """

    def __init__(
        self,
        repo: TaskRepository,
        clock: Callable[[], datetime] = utcnow,
        pagination: PaginationConfig | None = None,
    ):
        self.repo = repo
        self.clock = clock
        self.pagination = pagination or PaginationConfig()

    def serialize(self, task: Task, now: datetime | None = None) -> dict[str, Any]:
        """Stored fields plus isOverdue, computed fresh for this read."""
        data = task.to_dict()
        data["isOverdue"] = is_overdue(task.end_date, task.completed, now or self.clock())
        return data

    async def _owned(self, owner_id: UUID, task_id: str | UUID) -> Task:
        task = await self.repo.get(parse_task_id(task_id), owner_id)
        if task is None:
            raise NotFound(TASK_NOT_FOUND)
        return task

    # -- List --

    async def list_tasks(self, owner_id: UUID, params: Mapping[str, Any]) -> TaskPage:
        with tracer.start_as_current_span("tasks.list"):
            query = build_task_query(owner_id, params, self.pagination)
            with store_errors("list"):
                rows, total = await self.repo.search(query)

            now = self.clock()
            return TaskPage(
                items=[self.serialize(task, now) for task in rows],
                total=total,
                total_pages=query.total_pages(total),
                current_page=query.page,
                limit=query.limit,
            )

    # -- Get --

    async def get_task(self, owner_id: UUID, task_id: str | UUID) -> dict[str, Any]:
        with tracer.start_as_current_span("tasks.get"):
            with store_errors("get"):
                task = await self._owned(owner_id, task_id)
            return self.serialize(task)

    # -- Create --

    async def create_task(self, owner_id: UUID, payload: Mapping[str, Any]) -> dict[str, Any]:
        with tracer.start_as_current_span("tasks.create"):
            data = validate_task_create(payload, self.clock())
            with store_errors("create"):
                task = await self.repo.create(owner_id, data.model_dump())
            logger.info("Created task %s for user %s", task.id, owner_id)
            return self.serialize(task)

    # -- Update --

    async def update_task(
        self, owner_id: UUID, task_id: str | UUID, payload: Mapping[str, Any]
    ) -> dict[str, Any]:
        with tracer.start_as_current_span("tasks.update"):
            with store_errors("update"):
                task = await self._owned(owner_id, task_id)

            changes = validate_task_update(payload).model_dump(exclude_unset=True)
            with store_errors("update"):
                updated = await self.repo.update(task.id, owner_id, changes)
            if updated is None:
                raise NotFound(TASK_NOT_FOUND)
            logger.info("Updated task %s fields=%s", task.id, sorted(changes))
            return self.serialize(updated)

    # -- Delete --

    async def delete_task(self, owner_id: UUID, task_id: str | UUID) -> None:
        with tracer.start_as_current_span("tasks.delete"):
            with store_errors("delete"):
                task = await self._owned(owner_id, task_id)
                await self.repo.delete(task.id, owner_id)
            logger.info("Deleted task %s", task.id)


# ---------------------------------------------------------------------------
# FastAPI dependency factory
# ---------------------------------------------------------------------------

def get_task_service(
    repo: TaskRepository = Depends(get_task_repository),
) -> TaskService:
    """FastAPI dependency for TaskService."""
    return TaskService(repo, pagination=get_settings().pagination)
