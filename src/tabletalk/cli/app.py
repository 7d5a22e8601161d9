"""Main CLI application using Typer."""

import sys

import typer
from rich.console import Console

from tabletalk import __version__

app = typer.Typer(
    name="tabletalk",
    help="tabletalk - Conversational data exploration for Trino",
    no_args_is_help=True,
)

console = Console()

CONFIG_OPTION_HELP = "Path to config file (default: ~/.tabletalk/tabletalk.yaml)"


@app.command()
def version():
    """Show tabletalk version."""
    console.print(f"tabletalk version {__version__}")


@app.command()
def chat(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Start interactive chat session."""
    from tabletalk.cli.chat import chat_command

    chat_command(config_path=config_path)


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to ask about your data"),
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    as_json: bool = typer.Option(
        False, "--json", help="Write raw event records (one JSON object per line)"
    ),
):
    """Ask a single question and print the answer."""
    from tabletalk.cli.chat import ask_command

    raise typer.Exit(ask_command(question, config_path=config_path, as_json=as_json))


@app.command()
def start(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Start tabletalk API server."""
    from tabletalk.cli.server_cmd import start_command

    start_command(config_path=config_path)


@app.command()
def doctor(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Check configuration, API key and Trino connectivity."""
    from tabletalk.cli.doctor import doctor_command

    if not doctor_command(config_path=config_path):
        raise typer.Exit(1)


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
