"""Exception hierarchy for Parley.

Fragment decode problems never raise: they are absorbed as "no update"
by the schema layer. Only provider failures and overlapping submissions
surface as exceptions.
"""

from __future__ import annotations


class ParleyError(Exception):
    """Base class for all Parley errors."""


class ProviderError(ParleyError):
    """The upstream model call could not be started or failed mid-stream."""


class TurnInProgressError(ParleyError):
    """A turn was submitted while another turn is still streaming."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Turn {entry_id} is still in flight")
        self.entry_id = entry_id
