"""Parley CLI, a Typer + Rich terminal interface.

Commands: chat (default), ask, config show.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from parley import __version__
from parley.conversation import ConversationSynchronizer, FollowUpDispatcher
from parley.display import ChatDisplay
from parley.keys import load_keys_env
from parley.prompts import build_system_prompt
from parley.providers import FragmentProducer, LiteLLMProvider, ScriptedProducer
from parley.providers.registry import CONFIG_DIR, load_config
from parley.schemas.config import AssistantConfig

console = Console()

# ── App and sub-apps ─────────────────────────────────────────────

app = typer.Typer(
    name="parley",
    help="Chat with a streaming, structured-answer assistant.",
    no_args_is_help=False,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    name="config",
    help="Show assistant configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")


class _Options:
    """Global options shared by every command."""

    config_path: Path | None = None
    demo: bool = False


_options = _Options()


# ── Version callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"parley {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c",
        help="Path to a TOML config file.",
    ),
    demo: bool = typer.Option(
        False, "--demo",
        help="Replay a scripted answer instead of calling a model.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log debug output to stderr.",
    ),
) -> None:
    """Chat with a streaming, structured-answer assistant."""
    _options.config_path = config
    _options.demo = demo
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    if ctx.invoked_subcommand is None:
        from parley.repl import ParleyREPL

        ParleyREPL(_build_synchronizer(_load_config())).run()


# ── Helpers ──────────────────────────────────────────────────────


def _load_config() -> AssistantConfig:
    """Load the configuration, exit on error."""
    try:
        return load_config(_options.config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1) from None


def _build_producer(config: AssistantConfig) -> FragmentProducer:
    if _options.demo:
        return ScriptedProducer(delay=0.2)
    load_keys_env()
    return LiteLLMProvider(config.model)


def _build_synchronizer(config: AssistantConfig) -> ConversationSynchronizer:
    return ConversationSynchronizer(
        _build_producer(config),
        system_prompt=build_system_prompt(config.assistant),
        settings=config.assistant,
    )


# ── Commands ─────────────────────────────────────────────────────


@app.command()
def ask(
    question: str = typer.Argument(..., help="The question to ask."),
) -> None:
    """Ask a single question and print the answer."""
    synchronizer = _build_synchronizer(_load_config())
    display = ChatDisplay(console)
    synchronizer.emitter.add_listener(display.handle_event)

    async def _run():
        handle = await FollowUpDispatcher(synchronizer).dispatch(question)
        return await handle.wait()

    entry = asyncio.run(_run())
    if entry.view.kind == "none":
        console.print("[red]No answer could be produced.[/red] Run with --verbose for details.")
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Display the active configuration."""
    config = _load_config()

    table = Table(title="Model", show_header=False, title_justify="left")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("model", config.model.model)
    table.add_row("api_key_env", config.model.api_key_env)
    table.add_row("api_base", config.model.api_base or "[dim](provider default)[/dim]")
    table.add_row("timeout", f"{config.model.timeout}s")
    console.print(table)

    table = Table(title="Assistant", show_header=False, title_justify="left")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in config.assistant.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)

    source = _options.config_path or CONFIG_DIR / "defaults.toml"
    console.print(f"[dim]Loaded from {source}[/dim]")
