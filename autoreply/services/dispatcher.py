import asyncio
from typing import Any, Awaitable, Callable, Iterable, Set

from autoreply.logging_config import get_logger
from autoreply.services.entities import MessageEvent

logger = get_logger("dispatcher")

EventHandler = Callable[[MessageEvent], Awaitable[Any]]


class EventDispatcher:
    """Runs each message event as its own task so a webhook can be acknowledged at once.

    Failures stay inside the task that raised them. In-flight tasks are kept
    so shutdown can wait for them (``drain``) instead of dropping them.
    """

    def __init__(self, handler: EventHandler):
        self._handler = handler
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, event: MessageEvent) -> asyncio.Task:
        task = asyncio.create_task(self._run(event), name=f"message:{event.page_id}:{event.sender_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def submit_all(self, events: Iterable[MessageEvent]) -> int:
        count = 0
        for event in events:
            self.submit(event)
            count += 1
        return count

    async def _run(self, event: MessageEvent) -> None:
        try:
            await self._handler(event)
        except Exception as e:
            logger.error(
                f"Message processing failed: {e}",
                exc_info=True,
                extra={"context": {"page_id": event.page_id, "sender_id": event.sender_id}},
            )

    async def drain(self, timeout_seconds: float) -> int:
        """Wait for in-flight events, cancel what is still running after the timeout.

        Returns the number of cancelled tasks.
        """
        if not self._tasks:
            return 0

        tasks = list(self._tasks)
        logger.info("Draining message tasks", extra={"context": {"pending": len(tasks)}})
        _, still_running = await asyncio.wait(tasks, timeout=timeout_seconds)

        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            logger.warning("Abandoned message tasks at shutdown", extra={"context": {"cancelled": len(still_running)}})

        return len(still_running)
