from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from autoreply.database import ping
from autoreply.logging_config import get_logger

logger = get_logger("health_service")


async def get_system_health(engine: Optional[AsyncEngine], pending_tasks: int = 0) -> dict:
    """Report database reachability and how many messages are being processed."""
    database = "unavailable"
    if engine is not None:
        try:
            await ping(engine)
            database = "connected"
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")

    return {
        "status": "ok" if database == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
        "pending_messages": pending_tasks,
    }
