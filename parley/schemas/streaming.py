"""Streaming schemas for live text delivery.

Defines the Snapshot model the publisher hands to the rendering sink
once per consumed fragment.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Snapshot(BaseModel):
    """Live view of the accumulated text after one fragment."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=0, description="Strictly increasing tick number")
    content: str = Field(description="Full text accumulated so far")
