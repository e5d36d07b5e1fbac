from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, Text

from autoreply.database import Base


class AIConfig(Base):
    __tablename__ = "ai_configs"
    __table_args__ = (CheckConstraint("temperature >= 0 AND temperature <= 2", name="ck_ai_configs_temperature"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Text)
    page_id = Column(Text, nullable=False, index=True)
    provider = Column(Text, nullable=False)  # openai, mistral, claude
    api_key = Column(Text, nullable=False)
    model = Column(Text, nullable=False)
    temperature = Column(Float, nullable=False, default=0.7)
    system_prompt = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
