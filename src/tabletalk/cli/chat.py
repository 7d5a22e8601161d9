"""Interactive chat REPL and one-shot ask command."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from tabletalk.agent.builder import create_trino_client, stream_chat
from tabletalk.agent.events import (
    DoneEvent,
    ErrorEvent,
    StreamEvent,
    TokenEvent,
    ToolCallEvent,
    ToolResultEvent,
    encode_ndjson,
)
from tabletalk.agent.loop import ChatTurn
from tabletalk.config.loader import load_config
from tabletalk.llm.factory import MissingCredentialError, create_llm_client
from tabletalk.logging_setup import configure_logging
from tabletalk.tools.trino import create_trino_registry

if TYPE_CHECKING:
    from tabletalk.config.schema import TabletalkConfig
    from tabletalk.tools.registry import ToolRegistry

console = Console()
logger = logging.getLogger(__name__)

RESULT_PREVIEW_CHARS = 160


def _load(config_path: str | None) -> TabletalkConfig | None:
    path = Path(config_path) if config_path else None
    try:
        return load_config(path)
    except Exception as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        return None


def chat_command(config_path: str | None = None) -> None:
    """Start interactive chat session.

    Args:
        config_path: Optional path to config file
    """
    config = _load(config_path)
    if config is None:
        return
    configure_logging("WARNING")

    console.print(
        Panel.fit(
            f"[bold blue]tabletalk chat[/bold blue]\n"
            f"Model: {config.llm.model}\n"
            f"Trino: {config.trino.endpoint}\n"
            f"Type /help for commands, /exit to quit",
            border_style="blue",
        )
    )

    asyncio.run(_async_chat(config))


async def _async_chat(config: TabletalkConfig) -> None:
    """Async chat loop.

    Args:
        config: tabletalk configuration
    """
    try:
        llm = create_llm_client(config)
    except MissingCredentialError as e:
        console.print(f"[red]{e}[/red]")
        return

    trino_client = create_trino_client(config)
    registry = create_trino_registry(trino_client)
    history: list[ChatTurn] = []

    try:
        while True:
            try:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")

                if not user_input.strip():
                    continue

                if user_input.startswith("/"):
                    if _handle_slash_command(user_input, config, registry, history):
                        break
                    continue

                console.print("\n[bold green]tabletalk[/bold green]")
                answer = await render_events(
                    stream_chat(config, registry, history, user_input=user_input, llm=llm)
                )
                if answer is not None:
                    history.append(ChatTurn(role="user", content=user_input))
                    history.append(ChatTurn(role="assistant", content=answer))

            except KeyboardInterrupt:
                console.print("\n[yellow]Interrupted[/yellow]")
                if Confirm.ask("Exit chat?", default=False):
                    break
            except EOFError:
                break
    finally:
        await llm.close()
        await trino_client.close()

    console.print("\n[cyan]Goodbye![/cyan]")


async def render_events(events: AsyncIterator[StreamEvent]) -> str | None:
    """Print a stream to the console.

    Returns:
        The concatenated answer text, or None if the stream ended in error
    """
    chunks: list[str] = []
    async for event in events:
        if isinstance(event, TokenEvent):
            chunks.append(event.chunk)
            console.print(event.chunk, end="", markup=False, highlight=False)
        elif isinstance(event, ToolCallEvent):
            console.print(f"[dim]→ {event.name} {event.input}[/dim]", highlight=False)
        elif isinstance(event, ToolResultEvent):
            preview = event.output[:RESULT_PREVIEW_CHARS]
            if len(event.output) > RESULT_PREVIEW_CHARS:
                preview += "…"
            style = "red" if event.is_error else "green"
            mark = "✗" if event.is_error else "✓"
            console.print(f"[{style}]{mark}[/{style}] [dim]{event.name}:[/dim] ", end="")
            console.print(preview, markup=False, highlight=False, style="dim")
        elif isinstance(event, ErrorEvent):
            console.print(f"\n[red]Error: {event.message}[/red]")
            return None
        elif isinstance(event, DoneEvent):
            console.print()
    return "".join(chunks)


def ask_command(question: str, config_path: str | None = None, as_json: bool = False) -> int:
    """Answer one question and exit.

    Args:
        question: The user message
        config_path: Optional path to config file
        as_json: Write raw NDJSON event records to stdout instead of rendering

    Returns:
        Process exit code: 0 on ``done``, 1 on ``error``
    """
    config = _load(config_path)
    if config is None:
        return 1
    configure_logging(config.logging.level if as_json else "WARNING")
    return asyncio.run(_async_ask(config, question, as_json))


async def _async_ask(config: TabletalkConfig, question: str, as_json: bool) -> int:
    async with create_trino_client(config) as trino_client:
        registry = create_trino_registry(trino_client)
        events = stream_chat(config, registry, [], user_input=question)
        if not as_json:
            answer = await render_events(events)
            return 0 if answer is not None else 1

        exit_code = 0
        async for event in events:
            if isinstance(event, ErrorEvent):
                exit_code = 1
            sys.stdout.write(encode_ndjson(event))
            sys.stdout.flush()
        return exit_code


def _handle_slash_command(
    command: str,
    config: TabletalkConfig,
    registry: ToolRegistry,
    history: list[ChatTurn],
) -> bool:
    """Handle slash commands.

    Args:
        command: Command string starting with /
        config: Current configuration
        registry: Tools available to the agent
        history: Conversation so far (cleared by /reset)

    Returns:
        True if should exit chat loop
    """
    cmd = command.lower().strip()

    if cmd in ("/exit", "/quit", "/q"):
        return True

    elif cmd == "/help":
        console.print("\n[bold]Available commands:[/bold]")
        console.print("  /help      - Show this help")
        console.print("  /exit      - Exit chat")
        console.print("  /clear     - Clear screen")
        console.print("  /reset     - Forget the conversation so far")
        console.print("  /tools     - List available tools")
        console.print("  /config    - Show configuration")

    elif cmd == "/clear":
        console.clear()

    elif cmd == "/reset":
        history.clear()
        console.print("[cyan]Conversation cleared.[/cyan]")

    elif cmd == "/tools":
        console.print("\n[bold]Available tools:[/bold]")
        for schema in registry.list_definitions():
            console.print(f"  • {schema.name} - {schema.description[:60]}")

    elif cmd == "/config":
        console.print("\n[bold]Configuration:[/bold]")
        console.print(f"  Model: {config.llm.model}")
        console.print(f"  Endpoint: {config.llm.base_url or 'OpenAI'}")
        console.print(f"  Trino: {config.trino.endpoint}")
        console.print(f"  Max rounds: {config.agent.max_rounds}")

    else:
        console.print(f"[red]Unknown command: {command}[/red]")
        console.print("Type /help for available commands")

    return False
