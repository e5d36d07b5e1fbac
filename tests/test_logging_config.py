import json
import logging

from autoreply.logging_config import JSONFormatter, LoggerAdapter, get_logger, mask_token


def make_record(msg="Message received", **extra):
    record = logging.LogRecord("autoreply.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "autoreply.test"
        assert data["message"] == "Message received"
        assert "context" not in data

    def test_context_is_included(self):
        data = json.loads(JSONFormatter().format(make_record(context={"page_id": "page-1", "delivered": True})))
        assert data["context"] == {"page_id": "page-1", "delivered": True}


class TestLoggerAdapter:
    def test_context_merges_with_extra(self):
        adapter = LoggerAdapter(get_logger("test"), {"page_id": "page-1"})

        msg, kwargs = adapter.process("handled", {"context": {"resolution": "keyword"}})

        assert msg == "handled"
        assert kwargs["extra"] == {"context": {"page_id": "page-1", "resolution": "keyword"}}

    def test_logger_namespace(self):
        assert get_logger("webhook").name == "autoreply.webhook"


class TestMaskToken:
    def test_keeps_only_the_tail(self):
        assert mask_token("EAAGm0PX4ZCpsBAabcd1234") == "***1234"

    def test_short_or_missing_tokens(self):
        assert mask_token("short") == "***"
        assert mask_token(None) == ""
