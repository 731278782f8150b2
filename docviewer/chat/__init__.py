"""Chat with an extracted document."""
from docviewer.chat.session import ChatSession, EMPTY_REPLY, ERROR_REPLY

__all__ = [
    "ChatSession",
    "EMPTY_REPLY",
    "ERROR_REPLY",
]
