"""Task repository — async database access with owner isolation.

Extends OwnedRepository with the list read driven by a TaskQuery
descriptor: filters, severity-ordered priority sort and a stable id
tie-breaker.
"""

from fastapi import Depends
from sqlalchemy import ColumnElement, case
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from patterns.repository import OwnedRepository
from verticals.tasks.models.db_models import Task
from verticals.tasks.models.schemas import SortField, SortOrder, TaskPriority
from verticals.tasks.query import TaskPredicate, TaskQuery

_PRIORITY_ORDER = case(
    {priority: priority.rank for priority in TaskPriority},
    value=Task.priority,
)

_SORT_COLUMNS = {
    SortField.CREATED_AT: Task.created_at,
    SortField.END_DATE: Task.end_date,
    SortField.PRIORITY: _PRIORITY_ORDER,
    SortField.TITLE: Task.title,
}


class TaskRepository(OwnedRepository[Task]):
    """Repository for task CRUD and list reads."""

    model = Task

    @staticmethod
    def filters(predicate: TaskPredicate) -> list[ColumnElement[bool]]:
        """Filter clauses beyond the owner scope."""
        clauses = []
        if predicate.priority is not None:
            clauses.append(Task.priority == predicate.priority)
        if predicate.completed is not None:
            clauses.append(Task.completed == predicate.completed)
        return clauses

    @staticmethod
    def ordering(query: TaskQuery) -> list:
        column = _SORT_COLUMNS[query.sort_by]
        if query.sort_order is SortOrder.ASC:
            return [column.asc(), Task.id.asc()]
        return [column.desc(), Task.id.desc()]

    async def search(self, query: TaskQuery) -> tuple[list[Task], int]:
        """Page of tasks plus total count for the same predicate."""
        return await self.page(
            query.predicate.owner_id,
            where=self.filters(query.predicate),
            order_by=self.ordering(query),
            offset=query.offset,
            limit=query.limit,
        )


# ---------------------------------------------------------------------------
# FastAPI dependency factory
# ---------------------------------------------------------------------------

def get_task_repository(
    session: AsyncSession = Depends(get_session),
) -> TaskRepository:
    """FastAPI dependency for TaskRepository."""
    return TaskRepository(session)
