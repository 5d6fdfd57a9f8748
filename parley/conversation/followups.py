"""Follow-up dispatch: a chosen follow-up question becomes a new turn."""

from __future__ import annotations

from collections.abc import Sequence

from parley.conversation.synchronizer import ConversationSynchronizer, TurnHandle


class FollowUpDispatcher:
    """Re-enters the pipeline with the literal text of a question.

    The user row is added and announced before the turn is submitted, so
    the question is on screen before any network round-trip starts.
    """

    def __init__(self, synchronizer: ConversationSynchronizer) -> None:
        self._sync = synchronizer

    async def dispatch(self, question: str) -> TurnHandle:
        """Render ``question`` as a user row and submit it as a turn.

        Raises:
            TurnInProgressError: If a turn is still streaming. Nothing is
                rendered in that case.
        """
        self._sync.ensure_idle()
        await self._sync.add_user_entry(question)
        return self._sync.submit_turn(question)

    @staticmethod
    def select(choice: str, questions: Sequence[str]) -> str | None:
        """Resolve a 1-based menu choice like ``"2"`` to its question."""
        choice = choice.strip()
        if not choice.isdigit():
            return None
        index = int(choice) - 1
        if 0 <= index < len(questions):
            return questions[index]
        return None
