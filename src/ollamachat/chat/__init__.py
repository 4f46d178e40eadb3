"""Chat state for ollamachat.

Module structure:
- models.py: Chat, Message and change-notice records
- naming.py: Conversation titling
- store.py: The store that owns all chat state and talks to the backend
"""

from .models import DEFAULT_CHAT_TITLE, ChangeKind, ChangeNotice, Chat, Message, Role
from .naming import NamingAssistant
from .store import ChatStore

__all__ = [
    "DEFAULT_CHAT_TITLE",
    "ChangeKind",
    "ChangeNotice",
    "Chat",
    "ChatStore",
    "Message",
    "NamingAssistant",
    "Role",
]
