"""Select the single terminal presentation of a finished response.

Rules, first match wins:

1. Empty content: fixed apology plus the support card, no follow-ups.
2. needs-help signal: support card plus follow-ups.
3. is-prospect signal: demo card plus follow-ups.
4. Non-empty links: links plus follow-ups, no card.
5. Otherwise: plain content plus follow-ups.

At most one card is ever attached.
"""

from __future__ import annotations

from parley.schemas.config import AssistantSettings
from parley.schemas.fragment import ResponseState
from parley.schemas.view import CardKind, SupportCard, ViewDescriptor


def support_card(settings: AssistantSettings) -> SupportCard:
    return SupportCard(
        kind=CardKind.GET_SUPPORT,
        label=settings.support_label,
        url=settings.support_url,
    )


def demo_card(settings: AssistantSettings) -> SupportCard:
    return SupportCard(
        kind=CardKind.SCHEDULE_DEMO,
        label=settings.demo_label,
        url=settings.demo_url,
    )


def finalize(
    state: ResponseState, settings: AssistantSettings | None = None
) -> ViewDescriptor:
    """Map a frozen terminal state to its ViewDescriptor."""
    settings = settings or AssistantSettings()
    side = state.side_objects
    follow_ups = list(state.follow_up_questions)

    if state.content == "":
        return ViewDescriptor(
            content=settings.fallback_message,
            card=support_card(settings),
        )

    # An empty object carries no signal
    if side.needs_help:
        return ViewDescriptor(
            content=state.content,
            card=support_card(settings),
            follow_up_questions=follow_ups,
        )

    if side.is_prospect:
        return ViewDescriptor(
            content=state.content,
            card=demo_card(settings),
            follow_up_questions=follow_ups,
        )

    if side.links is not None and side.links.links:
        return ViewDescriptor(
            content=state.content,
            links=list(side.links.links),
            follow_up_questions=follow_ups,
        )

    return ViewDescriptor(content=state.content, follow_up_questions=follow_ups)
