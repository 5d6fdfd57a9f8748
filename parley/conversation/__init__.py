"""Conversation layer: turn synchronization and follow-up dispatch."""

from parley.conversation.followups import FollowUpDispatcher
from parley.conversation.synchronizer import ConversationSynchronizer, TurnHandle

__all__ = ["ConversationSynchronizer", "FollowUpDispatcher", "TurnHandle"]
