# app/models/task.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.base import Base, new_id, utcnow

TASK_PRIORITIES = ("LOW", "MEDIUM", "HIGH", "URGENT")
DEFAULT_PRIORITY = "MEDIUM"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)

    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # A column with tasks in it can't be dropped out from under them
    column_id = Column(
        String(36),
        ForeignKey("columns.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)

    # LOW | MEDIUM | HIGH | URGENT
    priority = Column(String(16), nullable=False, default=DEFAULT_PRIORITY, server_default=DEFAULT_PRIORITY)
    due_date = Column(DateTime(timezone=True), nullable=True)

    assignee_user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    label_rows = relationship(
        "TaskLabel",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    comments = relationship(
        "Comment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="asc(Comment.created_at)",
    )

    @property
    def label_ids(self) -> list[str]:
        rows = getattr(self, "label_rows", None) or []
        return sorted(r.label_id for r in rows if r and r.label_id)
