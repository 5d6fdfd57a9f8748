"""Interactive REPL for Parley.

Free text starts a turn. A bare number picks one of the follow-up
questions offered by the last answer and dispatches it as the next turn.
"""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console
from rich.table import Table
from rich.text import Text

from parley.conversation import ConversationSynchronizer, FollowUpDispatcher
from parley.display import BRAND, ChatDisplay
from parley.errors import TurnInProgressError

logger = logging.getLogger(__name__)

console = Console()


class ParleyREPL:
    """Interactive chat loop over one conversation."""

    def __init__(
        self,
        synchronizer: ConversationSynchronizer,
        display: ChatDisplay | None = None,
        out: Console | None = None,
    ) -> None:
        self._console = out or console
        self.synchronizer = synchronizer
        self.display = display or ChatDisplay(self._console)
        self.dispatcher = FollowUpDispatcher(synchronizer)
        synchronizer.emitter.add_listener(self.display.handle_event)

    def run(self) -> None:
        """Main REPL loop."""
        self._print_quick_start()

        while True:
            try:
                prompt_text = Text()
                prompt_text.append("\nparley", style=BRAND["accent"])
                prompt_text.append(" ▸ ", style=BRAND["dim"])

                user_input = self._console.input(prompt_text).strip()
                if not user_input:
                    continue

                self._dispatch(user_input)

            except (KeyboardInterrupt, EOFError):
                self._console.print(f"\n[{BRAND['dim']}]Goodbye.[/{BRAND['dim']}]")
                break

    def _dispatch(self, user_input: str) -> None:
        """Dispatch one input line to a command or a new turn."""
        command = user_input.lower()

        if command in ("exit", "quit"):
            raise EOFError

        if command == "help":
            self._print_quick_start()
            return

        if command == "history":
            self._show_history()
            return

        if command == "clear":
            self._console.clear()
            return

        last = self.display.last_final
        follow_ups = last.follow_up_questions if last else []
        question = FollowUpDispatcher.select(user_input, follow_ups)
        self.ask(question or user_input)

    def ask(self, text: str) -> None:
        """Run one turn to completion."""
        try:
            asyncio.run(self._ask(text))
        except TurnInProgressError as e:
            logger.warning("%s", e)

    async def _ask(self, text: str) -> None:
        handle = await self.dispatcher.dispatch(text)
        await handle.wait()

    def _show_history(self) -> None:
        """Print the messages that will be replayed to the model."""
        history = self.synchronizer.history
        if not history:
            self._console.print(f"  [{BRAND['dim']}]No messages yet.[/{BRAND['dim']}]")
            return

        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("#", width=4, justify="right")
        table.add_column("Role", width=10)
        table.add_column("Content")
        for number, message in enumerate(history, start=1):
            table.add_row(str(number), message.role.value, message.content)
        self._console.print(table)

    def _print_quick_start(self) -> None:
        """Print compact command hints."""
        table = Table.grid(padding=(0, 4))
        table.add_column(style=BRAND["accent"], width=24)
        table.add_column(style="dim")

        table.add_row("Just type your question", "Ask the assistant")
        table.add_row("<number>", "Ask one of the suggested follow-up questions")
        table.add_row("history", "Show the conversation sent to the model")
        table.add_row("clear", "Clear the screen")
        table.add_row("help", "Show this list again")
        table.add_row("exit / quit", "Leave")

        self._console.print()
        self._console.print(Text("  Quick start:", style="bold"))
        self._console.print(table)
