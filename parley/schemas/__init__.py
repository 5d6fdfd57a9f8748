"""Parley schema definitions.

All Pydantic v2 models used by the engine, the synchronizer, and the
terminal front end.
"""

from parley.schemas.config import AssistantConfig, AssistantSettings, ModelConfig
from parley.schemas.conversation import Message, Role, new_id
from parley.schemas.fragment import (
    Fragment,
    Link,
    LinksObj,
    ResponseState,
    SideObjects,
)
from parley.schemas.streaming import Snapshot
from parley.schemas.view import (
    CardKind,
    LoadingView,
    NoDisplayView,
    RenderDescriptor,
    StreamingView,
    SupportCard,
    UIEntry,
    UserView,
    ViewDescriptor,
)

__all__ = [
    "AssistantConfig",
    "AssistantSettings",
    "CardKind",
    "Fragment",
    "Link",
    "LinksObj",
    "LoadingView",
    "Message",
    "ModelConfig",
    "NoDisplayView",
    "RenderDescriptor",
    "ResponseState",
    "Role",
    "SideObjects",
    "Snapshot",
    "StreamingView",
    "SupportCard",
    "UIEntry",
    "UserView",
    "ViewDescriptor",
    "new_id",
]
