from fastapi import FastAPI

from autoreply.config import settings
from autoreply.database import create_engine, create_session_factory, create_tables
from autoreply.logging_config import get_logger, setup_logging
from autoreply.routers import webhook
from autoreply.services.delivery_service import MessengerClient
from autoreply.services.dispatcher import EventDispatcher
from autoreply.services.health_service import get_system_health
from autoreply.services.reply_service import ReplyPipeline
from autoreply.services.repository import SqlAlchemyStore

setup_logging(settings.log_level)

app = FastAPI(
    title="Autoreply API",
    description="Messenger webhook answering page messages from keyword rules or an AI provider",
    version="0.1.0",
)

app.include_router(webhook.router)

logger = get_logger("main")


def build_dispatcher(store, messenger: MessengerClient) -> EventDispatcher:
    pipeline = ReplyPipeline(
        store,
        messenger,
        fallback_text=settings.ai_fallback_text,
        provider_timeout_seconds=settings.provider_timeout_seconds,
        provider_max_tokens=settings.provider_max_tokens,
    )
    return EventDispatcher(pipeline.handle)


@app.on_event("startup")
async def start_pipeline() -> None:
    engine = create_engine(settings.database_url, echo=settings.debug)
    if settings.auto_create_tables:
        try:
            await create_tables(engine)
        except Exception as exc:
            logger.error(
                "Could not create tables, continuing without schema check",
                extra={"context": {"error": str(exc)}},
            )

    messenger = MessengerClient(
        graph_api_url=settings.graph_api_url,
        api_version=settings.graph_api_version,
        timeout_seconds=settings.send_timeout_seconds,
    )
    store = SqlAlchemyStore(create_session_factory(engine))

    app.state.engine = engine
    app.state.dispatcher = build_dispatcher(store, messenger)

    if not settings.webhook_verify_token:
        logger.warning("WEBHOOK_VERIFY_TOKEN is not set, webhook verification will be rejected")
    logger.info("Reply pipeline started")


@app.on_event("shutdown")
async def stop_pipeline() -> None:
    dispatcher = getattr(app.state, "dispatcher", None)
    if dispatcher is not None:
        await dispatcher.drain(settings.shutdown_drain_seconds)
        app.state.dispatcher = None

    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()
        app.state.engine = None
    logger.info("Reply pipeline stopped")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/health")
async def api_health():
    dispatcher = getattr(app.state, "dispatcher", None)
    return await get_system_health(
        getattr(app.state, "engine", None),
        pending_tasks=dispatcher.pending if dispatcher is not None else 0,
    )
