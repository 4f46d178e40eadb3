"""Chat store: the single owner of chat state.

Hides:
- How chats, selection, model choice and loading flags are kept
- The two-step send (local append, then reconcile on response)
- Per-chat serialization of sends
- Detached title generation and its failure policy

All mutations must run on the event loop that owns the store. Subscribers
are called synchronously after each mutation is fully applied, so they never
observe partial state.

A send moves a chat through two visible states:

1. Pending: the user message is appended and ``is_chat_loading`` is true.
2. Settled: the assistant message is appended (success) or ``Chat.error`` is
   set (failure); loading is cleared either way.
"""

import asyncio
from collections.abc import Callable
from typing import Any
from uuid import UUID

from ..llm import GenerationBackend, OllamaError
from .models import ChangeKind, ChangeNotice, Chat, Message
from .naming import NamingAssistant

Subscriber = Callable[[ChangeNotice], None]


class ChatStore:
    """Chats, their messages, the selected model and request lifecycle flags.

    Example:
        store = ChatStore(backend)
        store.subscribe(lambda notice: print(notice.kind))
        await store.fetch_models()
        reply = await store.send_message(store.selected_chat_id, "hi")
    """

    def __init__(
        self,
        backend: GenerationBackend,
        naming: NamingAssistant | None = None,
        preferred_model: str | None = None,
    ) -> None:
        """Initialize the store with one empty, selected chat.

        Args:
            backend: Backend used for model listing and generation
            naming: Naming assistant (default: one built on ``backend``)
            preferred_model: Model to select after the first refresh, if present
        """
        self._backend = backend
        self._naming = naming or NamingAssistant(backend)
        self._preferred_model = preferred_model

        first = Chat()
        self._chats: list[Chat] = [first]
        self._selected_chat_id: UUID | None = first.id
        self._available_models: list[str] = []
        self._selected_model = ""

        self._in_flight: set[UUID] = set()
        self._send_locks: dict[UUID, asyncio.Lock] = {}
        self._background_tasks: set[asyncio.Task] = set()
        self._subscribers: list[Subscriber] = []
        self._debug_callback: Any | None = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change subscriber.

        Returns:
            Callable that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, kind: ChangeKind, chat_id: UUID | None = None) -> None:
        notice = ChangeNotice(kind=kind, chat_id=chat_id)
        for callback in list(self._subscribers):
            callback(notice)

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for store logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback
        self._naming.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Store", message)

    @property
    def chats(self) -> tuple[Chat, ...]:
        return tuple(self._chats)

    @property
    def selected_chat_id(self) -> UUID | None:
        return self._selected_chat_id

    @property
    def selected_chat(self) -> Chat | None:
        if self._selected_chat_id is None:
            return None
        return self.get_chat(self._selected_chat_id)

    @property
    def available_models(self) -> tuple[str, ...]:
        return tuple(self._available_models)

    @property
    def selected_model(self) -> str:
        return self._selected_model

    @property
    def is_loading(self) -> bool:
        """True while any send has a generate request outstanding."""
        return bool(self._in_flight)

    def is_chat_loading(self, chat_id: UUID) -> bool:
        return chat_id in self._in_flight

    def get_chat(self, chat_id: UUID) -> Chat | None:
        index = self._index_of(chat_id)
        return None if index is None else self._chats[index]

    def _index_of(self, chat_id: UUID) -> int | None:
        for index, chat in enumerate(self._chats):
            if chat.id == chat_id:
                return index
        return None

    def create_chat(self) -> Chat:
        """Append an empty chat and select it."""
        chat = Chat()
        self._chats.append(chat)
        self._notify(ChangeKind.CHAT_CREATED, chat.id)
        self.select_chat(chat.id)
        return chat

    def update_chat(self, chat: Chat) -> bool:
        """Replace the stored chat that has ``chat.id``.

        Returns:
            True if replaced; False (and no notification) if the id is unknown
        """
        index = self._index_of(chat.id)
        if index is None:
            return False
        self._chats[index] = chat
        self._notify(ChangeKind.CHAT_UPDATED, chat.id)
        return True

    def append_message(self, chat_id: UUID, message: Message) -> Chat | None:
        """Append a message to a chat.

        Returns:
            The updated chat, or None if the chat is unknown

        Raises:
            ValueError: If the chat already holds a message with the same id
        """
        chat = self.get_chat(chat_id)
        if chat is None:
            return None
        updated = chat.with_message(message)
        self.update_chat(updated)
        return updated

    def rename_chat(self, chat_id: UUID, title: str) -> bool:
        """Set a user-chosen title. Blank titles are ignored."""
        title = title.strip()
        chat = self.get_chat(chat_id)
        if chat is None or not title:
            return False
        return self.update_chat(chat.model_copy(update={"title": title}))

    def delete_chat(self, chat_id: UUID) -> bool:
        """Remove a chat, moving the selection to a neighbour if needed."""
        index = self._index_of(chat_id)
        if index is None:
            return False

        del self._chats[index]
        self._send_locks.pop(chat_id, None)

        selection_moved = self._selected_chat_id == chat_id
        if selection_moved:
            if self._chats:
                neighbour = self._chats[min(index, len(self._chats) - 1)]
                self._selected_chat_id = neighbour.id
            else:
                self._selected_chat_id = None

        self._notify(ChangeKind.CHAT_DELETED, chat_id)
        if selection_moved:
            self._notify(ChangeKind.SELECTION_CHANGED, self._selected_chat_id)
        return True

    def select_chat(self, chat_id: UUID | None) -> None:
        """Select a chat, or clear the selection with None.

        Raises:
            KeyError: If ``chat_id`` is not in the store
        """
        if chat_id is not None and self._index_of(chat_id) is None:
            raise KeyError(f"Unknown chat: {chat_id}")
        if chat_id == self._selected_chat_id:
            return
        self._selected_chat_id = chat_id
        self._notify(ChangeKind.SELECTION_CHANGED, chat_id)

    def _set_chat_error(self, chat_id: UUID, error: str | None) -> None:
        chat = self.get_chat(chat_id)
        if chat is not None and chat.error != error:
            self.update_chat(chat.model_copy(update={"error": error}))

    def _set_loading(self, chat_id: UUID, loading: bool) -> None:
        if loading:
            self._in_flight.add(chat_id)
        else:
            self._in_flight.discard(chat_id)
        self._notify(ChangeKind.LOADING_CHANGED, chat_id)

    def select_model(self, name: str) -> None:
        """Select a model from ``available_models``.

        Raises:
            ValueError: If the model is not available
        """
        if name not in self._available_models:
            raise ValueError(f"Model not available: {name}")
        if name == self._selected_model:
            return
        self._selected_model = name
        self._notify(ChangeKind.MODEL_SELECTED)

    async def fetch_models(self) -> bool:
        """Refresh ``available_models`` from the backend.

        Keeps the current selection when it is still listed; otherwise picks
        the preferred model or the first one. On failure nothing changes.

        Returns:
            True if the list was refreshed
        """
        try:
            models = await self._backend.list_models()
        except OllamaError as e:
            self._debug("error", f"Could not fetch models: {e}")
            return False

        names = list(dict.fromkeys(model.name for model in models))
        previous = self._selected_model
        self._available_models = names
        if not previous or previous not in names:
            self._selected_model = self._default_model(names)

        self._debug("info", f"Models refreshed: {len(names)} available")
        self._notify(ChangeKind.MODELS_CHANGED)
        if self._selected_model != previous:
            self._debug("info", f"Selected model: {self._selected_model or '(none)'}")
            self._notify(ChangeKind.MODEL_SELECTED)
        return True

    def _default_model(self, names: list[str]) -> str:
        preferred = self._preferred_model
        if preferred:
            for candidate in (preferred, f"{preferred}:latest"):
                if candidate in names:
                    return candidate
        return names[0] if names else ""

    def _send_lock(self, chat_id: UUID) -> asyncio.Lock:
        lock = self._send_locks.get(chat_id)
        if lock is None:
            lock = self._send_locks[chat_id] = asyncio.Lock()
        return lock

    async def send_message(self, chat_id: UUID, prompt: str) -> Message | None:
        """Send a prompt in a chat and append the reply.

        The user message is appended before the request is issued. Sends on
        the same chat are serialized: a second send waits until the first has
        settled before appending its own user message.

        Args:
            chat_id: Chat to send in
            prompt: User prompt (must not be blank)

        Returns:
            The assistant message, or None if a precondition failed or the
            request failed (see ``Chat.error``)
        """
        if not prompt.strip():
            self._debug("warning", "Ignoring empty prompt")
            return None
        if not self._selected_model:
            self._debug("warning", "No model selected, prompt not sent")
            return None
        if self.get_chat(chat_id) is None:
            self._debug("warning", f"Unknown chat {chat_id}, prompt not sent")
            return None

        async with self._send_lock(chat_id):
            chat = self.get_chat(chat_id)
            if chat is None:
                self._debug("warning", f"Chat {chat_id} deleted before send")
                return None
            # A queued send uses the model selected when its turn comes
            model = self._selected_model
            if not model:
                self._debug("warning", "No model selected, prompt not sent")
                return None

            user_message = Message.user(prompt)
            self.update_chat(chat.with_message(user_message).model_copy(update={"error": None}))
            self._set_loading(chat_id, True)
            self._debug("info", f"Sending {len(prompt)} chars to {model}")

            try:
                result = await self._backend.generate(model, prompt)
                reply = Message.assistant(result.response)
                updated = self.append_message(chat_id, reply)
            except OllamaError as e:
                self._debug("error", f"Send failed: {e}")
                self._set_chat_error(chat_id, str(e))
                return None
            finally:
                self._set_loading(chat_id, False)

        if updated is None:
            self._debug("warning", f"Chat {chat_id} deleted while waiting for reply")
            return None

        self.schedule_title_generation(chat_id)
        return reply

    async def generate_title_suggestion(self, chat_id: UUID) -> str | None:
        """Ask the naming assistant for a title and apply it.

        Sets both ``title`` and ``name_suggestion``. No request is made for an
        unknown or empty chat or when no model is selected. Backend failures
        are logged and swallowed.

        Returns:
            The applied title, or None
        """
        chat = self.get_chat(chat_id)
        if chat is None or not chat.messages:
            return None
        model = self._selected_model
        if not model:
            return None

        try:
            title = await self._naming.suggest_title(chat.messages, model)
        except OllamaError as e:
            self._debug("warning", f"Title generation failed: {e}")
            return None
        if title is None:
            return None

        current = self.get_chat(chat_id)
        if current is None:
            return None
        self.update_chat(current.model_copy(update={"title": title, "name_suggestion": title}))
        self._debug("info", f"Chat titled: {title}")
        return title

    def schedule_title_generation(self, chat_id: UUID) -> asyncio.Task:
        """Start title generation as a detached task.

        The store keeps a reference until the task finishes. Unexpected
        exceptions are logged, never re-raised.
        """
        task = asyncio.create_task(
            self.generate_title_suggestion(chat_id),
            name=f"title-{chat_id}",
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._debug("error", f"Background task {task.get_name()} failed: {exc!r}")

    async def drain(self) -> None:
        """Wait for all detached background tasks to finish."""
        while True:
            pending = [task for task in self._background_tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
