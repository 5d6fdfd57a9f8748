"""Fold partial fragments into a single running ResponseState.

The model re-sends the full text-so-far on every tick, so content is
replaced rather than appended. Side-objects and the follow-up list are
last-write-wins, each key on its own.
"""

from __future__ import annotations

from collections.abc import Iterable

from parley.schemas.fragment import Fragment, ResponseState, SideObjects


def merge(prior: ResponseState, fragment: Fragment) -> ResponseState:
    """Return the state after applying one fragment to ``prior``.

    Pure and total: absent or empty fields leave the prior value in
    place, and ``prior`` itself is never modified.
    """
    content = prior.content
    if isinstance(fragment.content, str) and fragment.content:
        content = fragment.content

    side = prior.side_objects
    side_objects = SideObjects(
        links=fragment.links_obj if fragment.links_obj is not None else side.links,
        needs_help=(
            fragment.needs_help_obj
            if fragment.needs_help_obj is not None else side.needs_help
        ),
        is_prospect=(
            fragment.is_prospect_obj
            if fragment.is_prospect_obj is not None else side.is_prospect
        ),
    )

    follow_ups = prior.follow_up_questions
    if fragment.follow_up_questions:
        follow_ups = [q for q in fragment.follow_up_questions if q is not None]

    return ResponseState(
        content=content,
        side_objects=side_objects,
        follow_up_questions=list(follow_ups),
    )


def accumulate(
    fragments: Iterable[Fragment], initial: ResponseState | None = None
) -> ResponseState:
    """Fold a whole fragment sequence, starting from the empty state."""
    state = initial or ResponseState()
    for fragment in fragments:
        state = merge(state, fragment)
    return state
