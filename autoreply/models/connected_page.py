from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, Text, UniqueConstraint

from autoreply.database import Base


class ConnectedPage(Base):
    __tablename__ = "connected_pages"
    __table_args__ = (UniqueConstraint("tenant_id", "page_id", name="unique_tenant_page"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Text, nullable=False)
    page_id = Column(Text, nullable=False, index=True)
    page_name = Column(Text)
    page_access_token = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
