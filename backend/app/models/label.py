# app/models/label.py
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.sql import func

from app.core.base import Base, new_id


class Label(Base):
    __tablename__ = "labels"
    __table_args__ = (UniqueConstraint("org_id", "name", name="labels_org_name_unique"),)

    id = Column(String(36), primary_key=True, default=new_id)

    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
