"""Async repository pattern for owner-scoped records.

Provides a generic base repository with CRUD operations, owner isolation and
pagination. Every statement filters on ``owner_id``: a record that belongs
to someone else behaves exactly like one that does not exist.

Example: TaskRepository extending OwnedRepository.
"""

from typing import Any, Generic, Iterable, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import Base

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)

# Columns no update may touch.
IMMUTABLE_FIELDS = ("id", "owner_id", "created_at", "updated_at")


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class OwnedRepository(Generic[ModelT]):
    """Generic async repository with CRUD + pagination + owner isolation.

    Subclass and set `model` to a SQLAlchemy model with an ``owner_id``
    column::

        class NoteRepository(OwnedRepository[Note]):
            model = Note
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _scoped(self, owner_id: UUID) -> Select:
        return select(self.model).where(self.model.owner_id == owner_id)

    # -- Page with count --

    async def page(
        self,
        owner_id: UUID,
        where: Iterable[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ModelT], int]:
        """Fetch one page and the total count for the same predicate.

        Returns (rows, total_count).
        """
        conditions = [self.model.owner_id == owner_id, *where]

        stmt = (
            select(self.model)
            .where(*conditions)
            .order_by(*order_by)
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(self.model).where(*conditions)

        result = await self.session.execute(stmt)
        rows = list(result.scalars().all())

        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        return rows, total

    # -- Get by ID --

    async def get(self, item_id: UUID, owner_id: UUID) -> ModelT | None:
        """Get a single item by ID with owner isolation."""
        stmt = self._scoped(owner_id).where(self.model.id == item_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # -- Create --

    async def create(self, owner_id: UUID, data: dict[str, Any]) -> ModelT:
        """Create a new item; ``owner_id`` always wins over anything in data."""
        values = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
        item = self.model(owner_id=owner_id, **values)
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    # -- Update --

    async def update(
        self, item_id: UUID, owner_id: UUID, data: dict[str, Any]
    ) -> ModelT | None:
        """Merge supplied fields over the stored ones. Returns None if not found."""
        item = await self.get(item_id, owner_id)
        if item is None:
            return None

        for key, value in data.items():
            if hasattr(item, key) and key not in IMMUTABLE_FIELDS:
                setattr(item, key, value)

        await self.session.flush()
        await self.session.refresh(item)
        return item

    # -- Delete --

    async def delete(self, item_id: UUID, owner_id: UUID) -> bool:
        """Delete an item. Returns True if deleted, False if not found."""
        item = await self.get(item_id, owner_id)
        if item is None:
            return False

        await self.session.delete(item)
        await self.session.flush()
        return True
