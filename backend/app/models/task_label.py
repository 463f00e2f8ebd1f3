# app/models/task_label.py
from sqlalchemy import Column, ForeignKey, String

from app.core.base import Base


class TaskLabel(Base):
    __tablename__ = "task_labels"

    # Composite PK doubles as the (task_id, label_id) uniqueness guarantee
    task_id = Column(
        String(36),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    label_id = Column(
        String(36),
        ForeignKey("labels.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
