"""
SiteKeeper CLI Main Entry Point
"""

import sys
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from sitekeeper import __version__
from sitekeeper.core.config import settings
from sitekeeper.core.logging import get_logger, set_log_level
from sitekeeper.cli.commands import keys

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="sitekeeper",
    help="SiteKeeper - site recovery tooling",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(keys.app, name="keys", help="Manage recovery mode keys")


@app.callback(invoke_without_command=True)
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit"
    ),
    verbose: Optional[bool] = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging"
    ),
) -> None:
    """
    SiteKeeper - regain administrative access with single-use recovery keys.
    """
    if version:
        console.print(f"[bold blue]SiteKeeper[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()

    if verbose:
        settings.LOG_LEVEL = "DEBUG"
        set_log_level(settings.LOG_LEVEL)
        logger.info("Verbose logging enabled")


@app.command()
def info() -> None:
    """
    Show configuration used for recovery keys
    """
    info_text = Text()
    info_text.append("SiteKeeper\n", style="bold blue")
    info_text.append(f"Version: {__version__}\n", style="green")
    info_text.append(f"Environment: {settings.ENVIRONMENT}\n", style="yellow")
    info_text.append(f"Database: {settings.DATABASE_URL}\n", style="cyan")
    info_text.append(f"Option name: {settings.RECOVERY_KEYS_OPTION_NAME}\n", style="cyan")
    info_text.append(f"Default TTL: {settings.RECOVERY_KEY_TTL}s\n", style="cyan")
    info_text.append(f"Python: {sys.version.split()[0]}\n", style="cyan")

    console.print(Panel(
        info_text,
        title="[bold blue]System Information[/bold blue]",
        border_style="blue"
    ))


if __name__ == "__main__":
    app()
