from sqlalchemy import CheckConstraint, Column, DateTime, Index, Text, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base

from polite_proxy.core import MESSAGE_MAX_LENGTH, MESSAGES_TABLE

Base = declarative_base()


class Message(Base):
    """Sanitized chat message. Written only by the submit-message pipeline, never updated."""
    __tablename__ = MESSAGES_TABLE
    __table_args__ = (
        CheckConstraint(
            f"char_length(content) BETWEEN 1 AND {MESSAGE_MAX_LENGTH}",
            name="messages_content_length",
        ),
        Index("ix_messages_created_at", "created_at"),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    content = Column(Text, nullable=False)
    # References auth.users(id); the FK lives in the migration since auth is not in this metadata
    user_id = Column(UUID(as_uuid=False), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
