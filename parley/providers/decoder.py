"""Incremental decoder for a JSON object streamed token by token.

Models emit the response object as raw text deltas. After every delta the
accumulated text is parsed in partial mode, so an unterminated string at
the end still yields its prefix. This is what lets the answer text render
live while the object is incomplete.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic_core import from_json

logger = logging.getLogger(__name__)


class PartialJSONDecoder:
    """Accumulates text deltas and decodes the longest valid prefix."""

    def __init__(self) -> None:
        self._buffer = ""
        self._last: Any = None

    @property
    def text(self) -> str:
        """Raw text accumulated so far."""
        return self._buffer

    def feed(self, delta: str) -> Any | None:
        """Append a delta and return the decoded object if it changed.

        Returns None while nothing decodable has arrived yet, when the
        text cannot be decoded, or when the delta did not change the
        decoded value.
        """
        self._buffer += delta
        start = self._buffer.find("{")
        if start < 0:
            return None

        try:
            value = from_json(self._buffer[start:], allow_partial="trailing-strings")
        except ValueError:
            logger.debug("Undecodable stream prefix (%d chars)", len(self._buffer))
            return None

        if value == self._last:
            return None
        self._last = value
        return value
