import asyncio
from unittest.mock import AsyncMock

from autoreply.services.dispatcher import EventDispatcher
from autoreply.services.entities import KeywordRule
from autoreply.services.reply_service import ReplyPipeline
from autoreply.services.webhook_service import extract_message_events


def payload_for(*texts, page_id="page-1", sender_id="user-1"):
    return {
        "object": "page",
        "entry": [
            {
                "id": page_id,
                "messaging": [{"sender": {"id": sender_id}, "message": {"text": text}} for text in texts],
            }
        ],
    }


class TestEventDispatcher:
    def test_each_event_runs_once(self, make_event):
        handler = AsyncMock()

        async def scenario():
            dispatcher = EventDispatcher(handler)
            submitted = dispatcher.submit_all([make_event("un"), make_event("deux")])
            await dispatcher.drain(1.0)
            return submitted

        assert asyncio.run(scenario()) == 2
        assert sorted(call.args[0].text for call in handler.await_args_list) == ["deux", "un"]

    def test_failure_is_isolated(self, make_event):
        seen = []

        async def handler(event):
            if event.text == "boom":
                raise RuntimeError("handler failed")
            seen.append(event.text)

        async def scenario():
            dispatcher = EventDispatcher(handler)
            dispatcher.submit_all([make_event("boom"), make_event("ok")])
            cancelled = await dispatcher.drain(1.0)
            return cancelled, dispatcher.pending

        assert asyncio.run(scenario()) == (0, 0)
        assert seen == ["ok"]

    def test_drain_cancels_hung_tasks(self, make_event):
        async def handler(event):
            await asyncio.sleep(10)

        async def scenario():
            dispatcher = EventDispatcher(handler)
            dispatcher.submit(make_event())
            await asyncio.sleep(0)
            pending_before = dispatcher.pending
            cancelled = await dispatcher.drain(0.05)
            await asyncio.sleep(0)
            return pending_before, cancelled, dispatcher.pending

        assert asyncio.run(scenario()) == (1, 1, 0)

    def test_drain_without_tasks(self):
        assert asyncio.run(EventDispatcher(AsyncMock()).drain(1.0)) == 0


class TestPipelineThroughDispatcher:
    def test_two_messages_give_two_records(self, store, messenger):
        store.rules.append(KeywordRule(id=1, page_id="page-1", keyword="prix", reply_text="10 euros"))
        pipeline = ReplyPipeline(store, messenger, fallback_text="fallback")

        async def scenario():
            dispatcher = EventDispatcher(pipeline.handle)
            dispatcher.submit_all(extract_message_events(payload_for("le prix ?", "merci")))
            await dispatcher.drain(1.0)

        asyncio.run(scenario())

        assert len(store.history) == 2
        assert sorted(record.inbound_text for record in store.history) == ["le prix ?", "merci"]
        assert messenger.send_text.await_count == 1

    def test_redelivered_payload_is_processed_again(self, store, messenger):
        store.rules.append(KeywordRule(id=1, page_id="page-1", keyword="prix", reply_text="10 euros"))
        pipeline = ReplyPipeline(store, messenger, fallback_text="fallback")
        payload = payload_for("le prix ?")

        async def scenario():
            dispatcher = EventDispatcher(pipeline.handle)
            dispatcher.submit_all(extract_message_events(payload))
            dispatcher.submit_all(extract_message_events(payload))
            await dispatcher.drain(1.0)

        asyncio.run(scenario())

        assert len(store.history) == 2
        assert messenger.send_text.await_count == 2
