from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Text

from autoreply.database import Base


class Conversation(Base):
    """One inbound message and the reply the service attempted. Rows are never updated."""

    __tablename__ = "conversations"
    __table_args__ = (
        Index("idx_page_sender", "page_id", "sender_id"),
        Index("idx_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Text, nullable=False)
    page_id = Column(Text, nullable=False)
    sender_id = Column(Text, nullable=False)
    message_text = Column(Text, nullable=False)
    response_text = Column(Text)
    response_type = Column(Text, nullable=False, default="none")  # keyword, ai, none
    delivered = Column(Boolean)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
