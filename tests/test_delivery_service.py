import asyncio
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx

from autoreply.services.delivery_service import MessengerClient


def mock_http(mock_client_class, status_code=200, side_effect=None):
    client = MagicMock()
    response = Mock(status_code=status_code, text="{}")
    client.post = AsyncMock(return_value=response, side_effect=side_effect)
    mock_client_class.return_value.__aenter__.return_value = client
    return client


class TestMessengerClient:
    def test_messages_url(self):
        client = MessengerClient(graph_api_url="https://graph.facebook.com/", api_version="v19.0")
        assert client.messages_url == "https://graph.facebook.com/v19.0/me/messages"

    @patch("autoreply.services.delivery_service.httpx.AsyncClient")
    def test_sends_recipient_and_text(self, mock_client_class):
        http = mock_http(mock_client_class)

        sent = asyncio.run(MessengerClient().send_text("page-token", "user-42", "Bonjour !"))

        assert sent is True
        args, kwargs = http.post.call_args
        assert args[0] == "https://graph.facebook.com/v18.0/me/messages"
        assert kwargs["params"] == {"access_token": "page-token"}
        assert kwargs["json"]["recipient"] == {"id": "user-42"}
        assert kwargs["json"]["message"] == {"text": "Bonjour !"}

    @patch("autoreply.services.delivery_service.httpx.AsyncClient")
    def test_returns_false_on_platform_error(self, mock_client_class):
        mock_http(mock_client_class, status_code=400)

        assert asyncio.run(MessengerClient().send_text("page-token", "user-42", "Bonjour")) is False

    @patch("autoreply.services.delivery_service.httpx.AsyncClient")
    def test_returns_false_on_network_error(self, mock_client_class):
        mock_http(mock_client_class, side_effect=httpx.ConnectError("unreachable"))

        assert asyncio.run(MessengerClient().send_text("page-token", "user-42", "Bonjour")) is False

    @patch("autoreply.services.delivery_service.httpx.AsyncClient")
    def test_skips_send_without_text(self, mock_client_class):
        assert asyncio.run(MessengerClient().send_text("page-token", "user-42", "")) is False
        mock_client_class.assert_not_called()
