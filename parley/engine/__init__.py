"""Reconciliation engine: accumulator, publisher, finalizer."""

from parley.engine.accumulator import accumulate, merge
from parley.engine.finalizer import finalize
from parley.engine.publisher import IncrementalPublisher

__all__ = ["IncrementalPublisher", "accumulate", "finalize", "merge"]
