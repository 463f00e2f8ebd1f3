# app/models/invite.py
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func

from app.core.base import Base, new_id


class Invite(Base):
    __tablename__ = "invites"

    id = Column(String(36), primary_key=True, default=new_id)

    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Lower-cased; only a user with this email may accept
    email = Column(String(255), nullable=False, index=True)

    # Same rule as refresh tokens: the raw token is never stored
    token_hash = Column(String(255), unique=True, nullable=False)

    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
