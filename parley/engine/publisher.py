"""Incremental publisher: one live text snapshot per consumed fragment."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from parley.schemas.fragment import ResponseState
from parley.schemas.streaming import Snapshot

SnapshotSink = Callable[[Snapshot], Any]


class IncrementalPublisher:
    """Emits text-only snapshots of the accumulated state, in order.

    Side-objects are never part of a snapshot; they only matter to the
    final view. The sink may be sync or async; async sinks are awaited
    before the next fragment is consumed, which keeps emission order
    equal to consumption order.
    """

    def __init__(self, sink: SnapshotSink | None = None) -> None:
        self._sink = sink
        self._sequence = 0
        self._last: Snapshot | None = None

    @property
    def last(self) -> Snapshot | None:
        """The most recently published snapshot, if any."""
        return self._last

    @property
    def count(self) -> int:
        """Number of snapshots published so far."""
        return self._sequence

    async def publish(self, state: ResponseState) -> Snapshot:
        """Publish a snapshot of ``state`` and return it."""
        snapshot = Snapshot(sequence=self._sequence, content=state.content)
        self._sequence += 1
        self._last = snapshot

        if self._sink is not None:
            result = self._sink(snapshot)
            if asyncio.iscoroutine(result):
                await result
        return snapshot
