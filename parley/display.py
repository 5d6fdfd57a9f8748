"""Terminal rendering sink for the conversation.

Subscribes to turn events and paints each UI entry with Rich. While a
turn streams, its text is shown in a Live region that is replaced on
every update and frozen when the turn reaches a terminal view.
"""

from __future__ import annotations

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

from parley.events import TurnEvent, TurnEventType
from parley.schemas.view import (
    CardKind,
    LoadingView,
    NoDisplayView,
    StreamingView,
    UserView,
    ViewDescriptor,
)

# ── Brand Colors ──────────────────────────────────────────────────

BRAND = {
    "accent": "#5b8def",
    "user": "#00c2a8",
    "dim": "#7a7f8a",
    "card": "#d4a843",
}

_CARD_ICONS: dict[CardKind, str] = {
    CardKind.GET_SUPPORT: "👥",
    CardKind.SCHEDULE_DEMO: "▸",
}


def render_final(view: ViewDescriptor) -> RenderableType:
    """Build the renderable for a committed ViewDescriptor."""
    parts: list[RenderableType] = [Markdown(view.content)]

    if view.links:
        links = Text("\nSources\n", style="bold")
        for link in view.links:
            links.append("  • ")
            links.append(link.label, style=f"underline link {link.url}")
            links.append(f"  {link.url}\n", style=BRAND["dim"])
        parts.append(links)

    if view.card is not None:
        icon = _CARD_ICONS.get(view.card.kind, "•")
        card = Text(f"\n{icon} ")
        card.append(view.card.label, style=f"bold {BRAND['card']} link {view.card.url}")
        card.append(f"  {view.card.url}", style=BRAND["dim"])
        parts.append(card)

    if view.follow_up_questions:
        follow_ups = Text("\nAsk another question\n", style=BRAND["dim"])
        for number, question in enumerate(view.follow_up_questions, start=1):
            follow_ups.append(f"  {number}. ", style=BRAND["accent"])
            follow_ups.append(f"{question}\n")
        parts.append(follow_ups)

    return Group(*parts)


def render_view(view: object) -> RenderableType | None:
    """Build the renderable for any render descriptor.

    Returns None for NoDisplayView: a failed turn shows nothing.
    """
    if isinstance(view, UserView):
        text = Text("You ", style=f"bold {BRAND['user']}")
        text.append(view.content)
        return text
    if isinstance(view, LoadingView):
        return Spinner("dots", text=Text("Thinking...", style=BRAND["dim"]))
    if isinstance(view, StreamingView):
        return Markdown(view.content)
    if isinstance(view, ViewDescriptor):
        return Panel(
            render_final(view),
            border_style=BRAND["accent"],
            title="[bold]Assistant[/bold]",
            title_align="left",
            padding=(0, 1),
        )
    if isinstance(view, NoDisplayView):
        return None
    return Text(str(view))


class ChatDisplay:
    """Rich rendering sink driven by TurnEvents.

    Register ``handle_event`` with the synchronizer's emitter. The most
    recent final view is kept so the REPL can offer its follow-ups.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        self._live: Live | None = None
        self.last_final: ViewDescriptor | None = None

    def handle_event(self, event: TurnEvent) -> None:
        view = event.data.get("view")

        if event.type == TurnEventType.USER_ENTRY_ADDED:
            renderable = render_view(view)
            if renderable is not None:
                self._console.print(renderable)

        elif event.type == TurnEventType.TURN_STARTED:
            self._start_live(render_view(view) or Text(""))

        elif event.type == TurnEventType.TURN_UPDATED:
            if self._live is not None:
                self._live.update(render_view(view) or Text(""))

        elif event.type == TurnEventType.TURN_DONE:
            self.last_final = view if isinstance(view, ViewDescriptor) else None
            self._stop_live(render_view(view))

        elif event.type == TurnEventType.TURN_ERROR:
            self.last_final = None
            self._stop_live(None)

    def _start_live(self, renderable: RenderableType) -> None:
        self._stop_live(None)
        self._live = Live(
            renderable,
            console=self._console,
            refresh_per_second=12,
            transient=True,
        )
        self._live.start()

    def _stop_live(self, final: RenderableType | None) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
        if final is not None:
            self._console.print(final)
