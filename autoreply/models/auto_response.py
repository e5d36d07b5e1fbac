from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Text

from autoreply.database import Base


class AutoResponse(Base):
    __tablename__ = "auto_responses"
    __table_args__ = (Index("idx_page_keyword", "page_id", "keyword"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Text)
    page_id = Column(Text, nullable=False)
    keyword = Column(Text, nullable=False)
    response = Column(Text, nullable=False)
    priority = Column(Integer, nullable=False, default=1)  # higher wins
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
