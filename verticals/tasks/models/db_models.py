"""SQLAlchemy model for tasks.

Each task belongs to exactly one user through owner_id. The to_dict()
method is the stored view; TaskService adds the derived isOverdue flag.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, IdMixin, TimestampMixin, ensure_utc
from verticals.tasks.models.schemas import TaskPriority


class Task(IdMixin, TimestampMixin, Base):
    """One to-do item."""

    __tablename__ = "tasks"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(
            TaskPriority,
            name="task_priority",
            values_callable=lambda enum: [member.value for member in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def to_dict(self) -> dict:
        end_date = ensure_utc(self.end_date)
        created_at = ensure_utc(self.created_at)
        updated_at = ensure_utc(self.updated_at)
        return {
            "id": str(self.id),
            "owner_id": str(self.owner_id),
            "title": self.title,
            "description": self.description,
            "priority": TaskPriority(self.priority).value,
            "end_date": end_date.isoformat() if end_date else None,
            "completed": self.completed,
            "created_at": created_at.isoformat() if created_at else None,
            "updated_at": updated_at.isoformat() if updated_at else None,
        }
