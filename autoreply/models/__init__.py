from autoreply.models.ai_config import AIConfig
from autoreply.models.auto_response import AutoResponse
from autoreply.models.connected_page import ConnectedPage
from autoreply.models.conversation import Conversation

__all__ = [
    "ConnectedPage",
    "AutoResponse",
    "AIConfig",
    "Conversation",
]
