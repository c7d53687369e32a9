"""
SiteKeeper Keys Command
Issue, validate and clean up recovery mode keys.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from sitekeeper.core.config import settings
from sitekeeper.core.logging import get_logger
from sitekeeper.security.key_service import RecoveryKeyService, create_recovery_key_service
from sitekeeper.security.passwords import generate_password

logger = get_logger(__name__)
console = Console()

app = typer.Typer(help="Manage recovery mode keys")


def _service() -> RecoveryKeyService:
    return create_recovery_key_service()


def _ttl(ttl: Optional[int]) -> int:
    return settings.RECOVERY_KEY_TTL if ttl is None else ttl


@app.command()
def token() -> None:
    """
    Print a new recovery mode token
    """
    console.print(generate_password(settings.RECOVERY_KEY_LENGTH, special_chars=False), highlight=False)


@app.command()
def issue(
    token: Optional[str] = typer.Argument(None, help="Token to bind the key to (generated if omitted)"),
) -> None:
    """
    Generate and store a recovery mode key
    """
    service = _service()
    if token is None:
        token = service.generate_recovery_mode_token()
    key = service.generate_and_store_recovery_mode_key(token)
    logger.info("Recovery mode key issued")

    console.print(Panel(
        f"Token: {token}\n"
        f"Key:   {key}\n\n"
        f"[dim]The key is shown once and cannot be recovered.[/dim]",
        title="[bold green]Recovery Key Issued[/bold green]",
        border_style="green",
        highlight=False,
    ))


@app.command()
def validate(
    token: str = typer.Argument(..., help="Recovery mode token"),
    key: str = typer.Argument(..., help="Recovery mode key"),
    ttl: Optional[int] = typer.Option(None, "--ttl", min=0, help="Seconds the key is valid for"),
) -> None:
    """
    Validate and consume a recovery mode key
    """
    status = _service().validate_recovery_mode_key(token, key, _ttl(ttl))

    if status.ok:
        console.print(f"[green]✓[/green] {status.message}")
        return

    console.print(f"[red]✗[/red] {status.message} [dim]({status.code})[/dim]")
    raise typer.Exit(1)


@app.command()
def clean(
    ttl: Optional[int] = typer.Option(None, "--ttl", min=0, help="Seconds keys are valid for"),
) -> None:
    """
    Remove expired recovery mode keys
    """
    _service().clean_expired_keys(_ttl(ttl))
    console.print("[green]✓[/green] Expired recovery keys removed")
