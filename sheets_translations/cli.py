"""Command-line interface for syncing translations with a Google Sheet."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .auth import AuthSession, CredentialStore
from .client import SheetsClient
from .config import load_settings
from .errors import SyncError
from .reporting import Reporter
from .sync import TranslationSync

app = typer.Typer(
    name="sheets-translations",
    help="Pull translations from a Google Sheet into per-language files, or push them back",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


def fail(message: str, error: Exception) -> None:
    err_console.print(f"[red]{message}:[/red] {escape(str(error))}")
    raise typer.Exit(1)


@app.command()
def sync(
    pull: bool = typer.Option(False, "--pull", help="Download translations from the sheet into files"),
    push: bool = typer.Option(False, "--push", help="Upload translation files to the sheet"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Translations directory (overrides translationsDir)"
    ),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", help="Settings file (default: ./.translations-settings.json)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Sync translations in one direction: --pull or --push."""
    if pull == push:
        raise typer.BadParameter("Specify exactly one of --pull or --push")

    setup_logging(verbose)

    try:
        _sync_main("pull" if pull else "push", output_dir, settings_file)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Sync cancelled by user[/yellow]")
        raise typer.Exit(1)
    except SyncError as e:
        fail("Sync failed", e)


@app.command()
def auth(
    reauth: bool = typer.Option(False, "--reauth", help="Force authorization even with a cached token"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Authorize access to Google Sheets and cache the token."""
    setup_logging(verbose)
    store = CredentialStore()

    try:
        session = AuthSession.from_store(store, console)
        try:
            if reauth or not store.has_tokens():
                session.authorize()
            else:
                session.get_valid_tokens()
                console.print("[green]✓ Cached token is valid[/green]")
        finally:
            session.close()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Authorization cancelled by user[/yellow]")
        raise typer.Exit(1)
    except SyncError as e:
        fail("Authorization failed", e)

    console.print("[green]Authorization complete![/green]")


@app.command()
def info():
    """Show the credential store location and cached token."""
    store = CredentialStore()

    try:
        details = store.get_storage_info()
    except SyncError as e:
        fail("Cannot read credential store", e)

    table = Table(title="Credential Store")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Store Path", details["store_path"])
    table.add_row("Client Secret", details["client_secret_path"] if details["has_client_secret"] else "Missing")
    table.add_row("Token Path", details["token_path"])
    table.add_row("Has Token", "Yes" if details["has_tokens"] else "No")

    if details["has_tokens"]:
        table.add_row("Access Token", details["access_token"])
        table.add_row("Refresh Token", details["refresh_token"])
        table.add_row("Expires At", details["expires_at"])
        table.add_row("Is Expired", "Yes" if details["is_expired"] else "No")
        table.add_row("Scope", details["scope"])

    console.print(table)


@app.command()
def clear():
    """Delete the cached token."""
    store = CredentialStore()

    if not store.has_tokens():
        console.print("[yellow]No token to clear.[/yellow]")
        return

    if typer.confirm("Are you sure you want to clear the cached token?"):
        store.clear_tokens()
        console.print("[green]✓ Token cleared successfully![/green]")
    else:
        console.print("Operation cancelled.")


def _sync_main(direction: str, output_dir: Optional[Path], settings_file: Optional[Path]) -> None:
    """Load settings, authorize, then pull or push."""
    console.print("[bold cyan]Sheets Translations[/bold cyan]\n")

    console.print("[bold]Step 1: Loading settings[/bold]")
    settings = load_settings(settings_file)
    if output_dir is not None:
        settings = settings.with_translations_dir(output_dir)
    console.print(f"Translations directory: {escape(str(settings.translations_dir))}")

    console.print("\n[bold]Step 2: Loading credentials[/bold]")
    store = CredentialStore()
    session = AuthSession.from_store(store, console)
    reporter = Reporter(console)

    try:
        session.get_valid_tokens()
        console.print("[green]✓ Credentials loaded[/green]")

        with SheetsClient(session) as client:
            syncer = TranslationSync(settings, client, console)

            if direction == "pull":
                console.print("\n[bold]Step 3: Pulling translations[/bold]")
                result = syncer.pull()
                reporter.print_pull_summary(result)
                if not result.success:
                    for failure in result.failures:
                        err_console.print(f"[red]{escape(failure.error or failure.language)}[/red]")
                    raise typer.Exit(1)
            else:
                console.print("\n[bold]Step 3: Pushing translations[/bold]")
                result = syncer.push()
                reporter.print_push_summary(result)
                console.print("[green]Translations pushed![/green]")
    finally:
        session.close()


if __name__ == "__main__":
    app()
