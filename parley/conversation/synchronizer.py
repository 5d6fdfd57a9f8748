"""Conversation state synchronizer.

Owns the two ledgers of a conversation:

- the durable message history, replayed to the model on every turn;
- the ephemeral list of UI entries, one per rendered row.

A turn appends the user message and a loading entry synchronously, then
consumes the fragment stream in a background task. Each fragment is
merged and published, replacing the turn's entry in place. At the end the
terminal view and the assistant message are committed together, or the
entry is set to "no display" and history is left as it was.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from parley.engine.accumulator import merge
from parley.engine.finalizer import finalize
from parley.engine.publisher import IncrementalPublisher
from parley.errors import TurnInProgressError
from parley.events import TurnEventEmitter, TurnEventType
from parley.providers.base import FragmentProducer
from parley.schemas.config import AssistantSettings
from parley.schemas.conversation import Message, Role, new_id
from parley.schemas.fragment import ResponseState
from parley.schemas.streaming import Snapshot
from parley.schemas.view import (
    NoDisplayView,
    RenderDescriptor,
    StreamingView,
    UIEntry,
    UserView,
)

logger = logging.getLogger(__name__)


class TurnHandle:
    """Reference to an in-flight turn, returned before streaming starts."""

    def __init__(
        self, entry: UIEntry, user_message: Message, task: asyncio.Task[UIEntry]
    ) -> None:
        self.entry = entry
        self.user_message = user_message
        self._task = task

    @property
    def entry_id(self) -> str:
        return self.entry.id

    @property
    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> UIEntry:
        """Wait for the turn to finish and return its terminal entry."""
        return await self._task


class ConversationSynchronizer:
    """Drives turns and keeps history and UI entries consistent.

    Only one turn may be in flight; submitting another raises
    TurnInProgressError before any state is touched.

    Args:
        producer: Source of the fragment stream for each turn.
        system_prompt: System prompt sent with every model call.
        settings: Presentation settings used by the finalizer.
        emitter: Receives lifecycle events; a private one is created if omitted.
        chat_id: Conversation identifier; generated if omitted.
    """

    def __init__(
        self,
        producer: FragmentProducer,
        *,
        system_prompt: str = "",
        settings: AssistantSettings | None = None,
        emitter: TurnEventEmitter | None = None,
        chat_id: str | None = None,
    ) -> None:
        self._producer = producer
        self._system_prompt = system_prompt
        self._settings = settings or AssistantSettings()
        self._emitter = emitter or TurnEventEmitter()
        self.chat_id = chat_id or new_id()
        self._history: list[Message] = []
        self._entries: list[UIEntry] = []
        self._in_flight: TurnHandle | None = None

    # ── Read-only views ───────────────────────────────────────────

    @property
    def history(self) -> tuple[Message, ...]:
        return tuple(self._history)

    @property
    def entries(self) -> tuple[UIEntry, ...]:
        return tuple(self._entries)

    @property
    def emitter(self) -> TurnEventEmitter:
        return self._emitter

    @property
    def in_flight(self) -> TurnHandle | None:
        """The currently streaming turn, or None when idle."""
        if self._in_flight is not None and self._in_flight.done:
            self._in_flight = None
        return self._in_flight

    def entry(self, entry_id: str) -> UIEntry:
        """Look up a UI entry by id.

        Raises:
            KeyError: If no entry has this id.
        """
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise KeyError(entry_id)

    def model_context(self) -> list[dict[str, str]]:
        """History as the plain {role, content} payload for the model."""
        return [message.to_context() for message in self._history]

    # ── Mutations ─────────────────────────────────────────────────

    def ensure_idle(self) -> None:
        """Raise TurnInProgressError if a turn is still streaming."""
        current = self.in_flight
        if current is not None:
            raise TurnInProgressError(current.entry_id)

    async def add_user_entry(self, text: str) -> UIEntry:
        """Append a rendered user row and notify listeners."""
        entry = UIEntry(view=UserView(content=text))
        self._entries.append(entry)
        await self._emitter.emit(
            TurnEventType.USER_ENTRY_ADDED, entry.id, view=entry.view
        )
        return entry

    def submit_turn(self, user_text: str) -> TurnHandle:
        """Start a turn for ``user_text`` and return without waiting.

        Must be called from inside a running event loop.

        Raises:
            TurnInProgressError: If another turn is still streaming.
            RuntimeError: If no event loop is running. History and entries
                are left untouched.
        """
        self.ensure_idle()
        loop = asyncio.get_running_loop()

        user_message = Message(role=Role.USER, content=user_text)
        self._history.append(user_message)
        entry = UIEntry()
        self._entries.append(entry)

        context = self.model_context()
        task = loop.create_task(
            self._run_turn(entry.id, context),
            name=f"turn-{entry.id}",
        )
        handle = TurnHandle(entry, user_message, task)
        self._in_flight = handle
        logger.debug("Turn %s submitted (%d messages of context)", entry.id, len(context))
        return handle

    async def ask(self, user_text: str) -> UIEntry:
        """Submit a turn and wait for its terminal entry."""
        return await self.submit_turn(user_text).wait()

    # ── Turn lifecycle ────────────────────────────────────────────

    async def _run_turn(self, entry_id: str, context: list[dict[str, str]]) -> UIEntry:
        await self._emitter.emit(
            TurnEventType.TURN_STARTED, entry_id, view=self.entry(entry_id).view
        )

        publisher = IncrementalPublisher(sink=partial(self._on_snapshot, entry_id))
        state = ResponseState()
        try:
            async for fragment in self._producer.stream(context, self._system_prompt):
                state = merge(state, fragment)
                await publisher.publish(state)
            view = finalize(state, self._settings)
        except Exception as e:
            logger.exception(
                "Turn %s failed after %d fragments", entry_id, publisher.count
            )
            entry = self._replace_entry(entry_id, NoDisplayView())
            await self._emitter.emit(
                TurnEventType.TURN_ERROR, entry_id,
                view=entry.view, error=type(e).__name__,
            )
            return entry

        # Commit both ledgers with no suspension point in between
        entry = self._replace_entry(entry_id, view)
        self._history.append(Message(role=Role.ASSISTANT, content=view.content))

        await self._emitter.emit(TurnEventType.TURN_DONE, entry_id, view=view)
        return entry

    async def _on_snapshot(self, entry_id: str, snapshot: Snapshot) -> None:
        entry = self._replace_entry(
            entry_id,
            StreamingView(content=snapshot.content, sequence=snapshot.sequence),
        )
        await self._emitter.emit(TurnEventType.TURN_UPDATED, entry_id, view=entry.view)

    def _replace_entry(self, entry_id: str, view: RenderDescriptor) -> UIEntry:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                updated = UIEntry(id=entry_id, view=view)
                self._entries[index] = updated
                return updated
        raise KeyError(entry_id)
