"""
ollamachat: A terminal chat client for models served by a local Ollama server.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .chat import ChangeKind, ChangeNotice, Chat, ChatStore, Message, NamingAssistant, Role
from .llm import (
    GenerationBackend,
    GenerationResult,
    ModelDescriptor,
    OllamaClient,
    OllamaError,
    create_backend,
)

__all__ = [
    "ChangeKind",
    "ChangeNotice",
    "Chat",
    "ChatStore",
    "GenerationBackend",
    "GenerationResult",
    "Message",
    "ModelDescriptor",
    "NamingAssistant",
    "OllamaClient",
    "OllamaError",
    "Role",
    "create_backend",
]
