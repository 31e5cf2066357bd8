"""Chat-completion request component."""

from askgpt.chat.client import ChatCompletionClient
from askgpt.chat.models import (
    ApiResponse,
    ChatMessage,
    Choice,
    RequestBody,
    ResponseMessage,
    Role,
    Usage,
)

__all__ = [
    "ApiResponse",
    "ChatCompletionClient",
    "ChatMessage",
    "Choice",
    "RequestBody",
    "ResponseMessage",
    "Role",
    "Usage",
]
