"""Doctor command - configuration and connectivity check."""

import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tabletalk.agent.builder import create_trino_client
from tabletalk.config.loader import DEFAULT_CONFIG_PATH, load_config
from tabletalk.config.schema import TabletalkConfig
from tabletalk.tools.trino import create_trino_registry

console = Console()


def doctor_command(config_path: str | None = None) -> bool:
    """Run configuration and connectivity checks.

    Args:
        config_path: Optional path to config file

    Returns:
        True if no blocking issue was found
    """
    console.print(Panel.fit(
        "[bold blue]tabletalk health check[/bold blue]\n"
        "Checking your setup...",
        border_style="blue",
    ))

    return asyncio.run(_async_doctor(Path(config_path) if config_path else DEFAULT_CONFIG_PATH))


async def _async_doctor(path: Path) -> bool:
    """Async doctor logic."""
    issues: list[str] = []
    warnings: list[str] = []

    table = Table(title="Health Check", show_header=True, header_style="bold cyan")
    table.add_column("Check", style="white", width=24)
    table.add_column("Status", width=8)
    table.add_column("Details", style="dim")

    py_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    if sys.version_info >= (3, 11):
        table.add_row("Python Version", "[green]✓[/green]", py_version)
    else:
        table.add_row("Python Version", "[red]✗[/red]", f"{py_version} (need 3.11+)")
        issues.append("Python version too old. Upgrade to Python 3.11 or higher.")

    config = TabletalkConfig()
    try:
        config = load_config(path)
        if path.exists():
            table.add_row("Configuration", "[green]✓[/green]", str(path))
        else:
            table.add_row("Configuration", "[yellow]⚠[/yellow]", "Not found (using defaults)")
            warnings.append(f"No config file at {path}; defaults and environment are used.")
    except Exception as e:
        table.add_row("Configuration", "[red]✗[/red]", f"Invalid: {e}")
        issues.append(f"Config file is invalid: {e}")

    if config.llm.has_api_key:
        table.add_row("API Key", "[green]✓[/green]", f"model {config.llm.model}")
    else:
        table.add_row("API Key", "[red]✗[/red]", "Not set")
        issues.append("No API key. Export OPENAI_API_KEY or set llm.api_key.")

    async with create_trino_client(config) as client:
        registry = create_trino_registry(client)
        status = await client.connection_status(features=registry.names())
    if status.status == "connected":
        table.add_row("Trino", "[green]✓[/green]", status.endpoint or "")
        table.add_row("Tools", "[green]✓[/green]", ", ".join(status.features))
    else:
        table.add_row("Trino", "[red]✗[/red]", status.message)
        issues.append(f"Cannot query Trino at {config.trino.endpoint}: {status.message}")

    console.print("\n")
    console.print(table)

    console.print("\n")
    if not issues and not warnings:
        console.print(Panel.fit(
            "[bold green]✓ All checks passed![/bold green]",
            border_style="green",
        ))
    else:
        if issues:
            console.print("[bold red]Issues Found:[/bold red]")
            for i, issue in enumerate(issues, 1):
                console.print(f"  {i}. {issue}")
            console.print()

        if warnings:
            console.print("[bold yellow]Warnings:[/bold yellow]")
            for i, warning in enumerate(warnings, 1):
                console.print(f"  {i}. {warning}")
            console.print()

    return not issues
