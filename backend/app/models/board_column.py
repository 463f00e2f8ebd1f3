# app/models/board_column.py
from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.base import Base, new_id

# Created with every new project, left to right.
DEFAULT_COLUMNS = ("Backlog", "In Progress", "Done")


class BoardColumn(Base):
    __tablename__ = "columns"
    __table_args__ = (UniqueConstraint("project_id", "position", name="columns_project_position_unique"),)

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

    name = Column(String(100), nullable=False)
    # 0 = Backlog; new tasks land in position 0 unless told otherwise
    position = Column(Integer, nullable=False)

    project = relationship("Project", back_populates="columns")
