"""Abstract base class for fragment producers.

A producer turns the conversation so far into an asynchronous sequence
of Fragments. The synchronizer only relies on three things: fragments
arrive in order, the sequence terminates, and failure is raised as an
exception distinct from normal exhaustion.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from parley.schemas.fragment import Fragment


class FragmentProducer(ABC):
    """Source of the structured response stream for one turn."""

    @abstractmethod
    def stream(
        self,
        messages: list[dict[str, str]],
        system: str,
    ) -> AsyncIterator[Fragment]:
        """Stream the fragments of the assistant's reply.

        Args:
            messages: Conversation history as plain {role, content} pairs.
            system: System prompt for this call.

        Returns:
            An async iterator of Fragments in arrival order. Errors are
            raised from the iterator and end the stream.
        """
