"""Render descriptors for the ephemeral UI entry list.

Every UI entry holds exactly one view. A turn's entry moves through
LoadingView -> StreamingView* -> ViewDescriptor on success, or ends in
NoDisplayView when the stream fails.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from parley.schemas.conversation import new_id
from parley.schemas.fragment import Link


class CardKind(StrEnum):
    """Supplemental call-to-action cards a final view may carry."""

    GET_SUPPORT = "get_support"
    SCHEDULE_DEMO = "schedule_demo"


class SupportCard(BaseModel):
    """A call-to-action card attached below the answer."""

    model_config = ConfigDict(frozen=True)

    kind: CardKind
    label: str
    url: str


class LoadingView(BaseModel):
    """In-progress marker shown before the first fragment arrives."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["loading"] = "loading"


class UserView(BaseModel):
    """A user turn rendered in the conversation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    content: str


class StreamingView(BaseModel):
    """Live text snapshot while the response is still streaming."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["streaming"] = "streaming"
    content: str
    sequence: int = Field(ge=0, description="Publisher tick number")


class ViewDescriptor(BaseModel):
    """Terminal presentation of a successful turn."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["final"] = "final"
    content: str
    card: SupportCard | None = None
    links: list[Link] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list)


class NoDisplayView(BaseModel):
    """Terminal state of a failed turn: nothing is shown."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


RenderDescriptor = Annotated[
    LoadingView | UserView | StreamingView | ViewDescriptor | NoDisplayView,
    Field(discriminator="kind"),
]


class UIEntry(BaseModel):
    """One renderable row of the conversation view."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    view: RenderDescriptor = Field(default_factory=LoadingView)

    @property
    def is_terminal(self) -> bool:
        """True once the entry can no longer change."""
        return self.view.kind in ("user", "final", "none")
