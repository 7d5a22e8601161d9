"""Server management commands."""

from pathlib import Path

from rich.console import Console

console = Console()


def start_command(config_path: str | None = None) -> None:
    """Start the tabletalk API server in the foreground.

    Args:
        config_path: Optional path to config file
    """
    from tabletalk.config.loader import load_config

    path = Path(config_path) if config_path else None
    try:
        config = load_config(path)
    except Exception as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        return

    import uvicorn

    from tabletalk.logging_setup import configure_logging
    from tabletalk.server.app import create_app

    configure_logging(config.logging.level)
    app = create_app(config)

    console.print(
        f"[green]Starting tabletalk server on "
        f"{config.server.host}:{config.server.port}[/green]"
    )
    console.print(f"Model: {config.llm.model}")
    console.print(f"Trino: {config.trino.endpoint}")
    if not config.llm.has_api_key:
        console.print("[yellow]No API key configured; chat requests will fail.[/yellow]")
    console.print("\nPress Ctrl+C to stop")

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )
