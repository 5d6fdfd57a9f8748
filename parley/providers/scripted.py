"""Producer that replays a fixed fragment script.

Used by the ``--demo`` mode of the CLI, which runs without an API key.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence

from parley.errors import ProviderError
from parley.providers.base import FragmentProducer
from parley.schemas.fragment import Fragment, LinksObj

DEMO_SCRIPT: list[Fragment] = [
    Fragment(content="Parley streams"),
    Fragment(content="Parley streams structured answers"),
    Fragment(content="Parley streams structured answers and renders them live."),
    Fragment(
        content="Parley streams structured answers and renders them live.",
        links_obj=LinksObj.model_validate(
            {"links": [{"label": "Docs", "url": "https://example.com/docs"}]}
        ),
    ),
    Fragment(follow_up_questions=["How do I start?", "What's the pricing?"]),
]


class ScriptedProducer(FragmentProducer):
    """Replays the same fragments for every turn.

    Args:
        fragments: The fragments to yield, in order.
        delay: Seconds to sleep before each fragment.
        fail_after: If set, raise ProviderError after this many fragments.
    """

    def __init__(
        self,
        fragments: Sequence[Fragment] | None = None,
        *,
        delay: float = 0.0,
        fail_after: int | None = None,
    ) -> None:
        self._fragments = list(DEMO_SCRIPT if fragments is None else fragments)
        self._delay = delay
        self._fail_after = fail_after
        self.calls: list[list[dict[str, str]]] = []

    async def stream(
        self,
        messages: list[dict[str, str]],
        system: str,
    ) -> AsyncIterator[Fragment]:
        self.calls.append(list(messages))
        for index, fragment in enumerate(self._fragments):
            if self._fail_after is not None and index >= self._fail_after:
                raise ProviderError("Scripted stream failure")
            await asyncio.sleep(self._delay)
            yield fragment
        if self._fail_after is not None and self._fail_after >= len(self._fragments):
            raise ProviderError("Scripted stream failure")
