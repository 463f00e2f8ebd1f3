# app/models/membership.py
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.base import Base, new_id, utcnow

ROLE_ADMIN = "ADMIN"
ROLE_MEMBER = "MEMBER"
ORG_ROLES = (ROLE_ADMIN, ROLE_MEMBER)


class Membership(Base):
    __tablename__ = "memberships"
    __table_args__ = (UniqueConstraint("org_id", "user_id", name="memberships_org_user_unique"),)

    id = Column(String(36), primary_key=True, default=new_id)

    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # ADMIN | MEMBER
    role = Column(String(20), nullable=False, default=ROLE_MEMBER, server_default=ROLE_MEMBER)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    organization = relationship("Organization", back_populates="memberships")
    user = relationship("User", back_populates="memberships")
