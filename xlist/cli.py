"""Command-line interface for xlist."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from xlist import Directory, DirectoryConfig, __version__
from xlist.config import LogFormat
from xlist.core.exporter import save_csv, save_json
from xlist.exceptions import XlistError
from xlist.models.category import ALL_CATEGORIES, CATEGORIES, is_valid_category

app = typer.Typer(
    name="xlist",
    help="Directory of X profiles with click analytics",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"xlist version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """xlist - directory of X profiles with click analytics."""
    pass


def _config(quiet: bool = True) -> DirectoryConfig:
    # Keep command output readable, store logs go out as JSON at WARNING
    if quiet:
        return DirectoryConfig(log_level="WARNING", log_format=LogFormat.JSON)
    return DirectoryConfig()


def _run(coro) -> None:
    """Run a command coroutine, turning xlist errors into a clean exit."""
    try:
        asyncio.run(coro)
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid input: {e}")
        raise typer.Exit(1)
    except XlistError as e:
        console.print(f"[red]✗[/red] {type(e).__name__}: {e}")
        raise typer.Exit(1)
    except ImportError as e:
        # CSV export needs the optional pandas extra
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)


def _require_category(category: str) -> None:
    if not is_valid_category(category):
        console.print(f"[red]Unknown category: {category}[/red]")
        console.print("Run 'xlist categories' for the list")
        raise typer.Exit(1)


@app.command()
def categories():
    """List the categories profiles can be filed under."""
    for category in CATEGORIES:
        console.print(category)


@app.command(name="list")
def list_profiles(
    category: str = typer.Option(ALL_CATEGORIES, "--category", "-c", help="Category filter"),
    search: str = typer.Option("", "--search", "-s", help="Free-text search"),
    verbose: bool = typer.Option(False, "--verbose", help="Show store logs"),
):
    """Browse the directory."""
    if category != ALL_CATEGORIES:
        _require_category(category)

    async def run():
        async with Directory(_config(not verbose)) as directory:
            profiles = await directory.browse(category, search)
            _print_profiles(profiles)

    _run(run())


@app.command()
def add(
    x_handle: str = typer.Argument(..., help="X handle, with or without @"),
    username: str = typer.Option(..., "--name", "-n", help="Display name"),
    category: str = typer.Option(..., "--category", "-c", help="Category"),
    user_id: str = typer.Option(..., "--user", "-u", help="Owning account id"),
    bio: Optional[str] = typer.Option(None, "--bio"),
    location: Optional[str] = typer.Option(None, "--location"),
    website: Optional[str] = typer.Option(None, "--website"),
    followers: Optional[int] = typer.Option(None, "--followers", min=0),
):
    """Publish a profile."""
    _require_category(category)

    async def run():
        async with Directory(_config()) as directory:
            profile_id = await directory.profiles.create({
                "xHandle": x_handle,
                "username": username,
                "category": category,
                "userId": user_id,
                "bio": bio,
                "location": location,
                "website": website,
                "followersCount": followers,
            })
            console.print(f"[green]✓[/green] Created profile {profile_id}")

    _run(run())


@app.command()
def update(
    profile_id: str = typer.Argument(..., help="Profile id"),
    x_handle: Optional[str] = typer.Option(None, "--handle"),
    username: Optional[str] = typer.Option(None, "--name", "-n"),
    category: Optional[str] = typer.Option(None, "--category", "-c"),
    bio: Optional[str] = typer.Option(None, "--bio", help="Empty string clears it"),
    location: Optional[str] = typer.Option(None, "--location", help="Empty string clears it"),
    website: Optional[str] = typer.Option(None, "--website", help="Empty string clears it"),
    followers: Optional[int] = typer.Option(None, "--followers", min=0),
):
    """Change fields of a profile."""
    if category is not None:
        _require_category(category)

    supplied = {
        "xHandle": x_handle,
        "username": username,
        "category": category,
        "bio": bio,
        "location": location,
        "website": website,
        "followersCount": followers,
    }
    fields = {k: v for k, v in supplied.items() if v is not None}
    if not fields:
        console.print("[yellow]Nothing to update[/yellow]")
        raise typer.Exit(1)

    async def run():
        async with Directory(_config()) as directory:
            await directory.profiles.update(profile_id, fields)
            console.print(f"[green]✓[/green] Updated profile {profile_id}")

    _run(run())


@app.command()
def delete(profile_id: str = typer.Argument(..., help="Profile id")):
    """Remove a profile."""

    async def run():
        async with Directory(_config()) as directory:
            await directory.profiles.delete(profile_id)
            console.print(f"[green]✓[/green] Deleted profile {profile_id}")

    _run(run())


@app.command(name="open")
def open_profile(profile_id: str = typer.Argument(..., help="Profile id")):
    """Record a click and print the X profile URL."""

    async def run():
        async with Directory(_config()) as directory:
            profile = await directory.profiles.get(profile_id)
            console.print(directory.open_profile(profile, user_agent=f"xlist-cli/{__version__}"))

    _run(run())


@app.command()
def analytics(profile_id: str = typer.Argument(..., help="Profile id")):
    """Show click analytics for a profile."""

    async def run():
        async with Directory(_config()) as directory:
            data = await directory.get_analytics(profile_id)
            _print_analytics(data)

    _run(run())


@app.command()
def export(
    output: Path = typer.Argument(..., help="Output file (.json or .csv)"),
    category: str = typer.Option(ALL_CATEGORIES, "--category", "-c", help="Category filter"),
):
    """Export the directory listing."""
    if category != ALL_CATEGORIES:
        _require_category(category)

    async def run():
        async with Directory(_config()) as directory:
            profiles = await directory.browse(category)
            if output.suffix.lower() == ".csv":
                path = save_csv(profiles, output)
            else:
                path = save_json(profiles, output)
            console.print(f"[dim]Saved {len(profiles)} profiles to {path}[/dim]")

    _run(run())


def _print_profiles(profiles):
    """Print directory listing as table."""
    if not profiles:
        console.print("[dim]No profiles found[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("Name")
    table.add_column("Handle", style="blue")
    table.add_column("Category", style="dim")
    table.add_column("Followers", justify="right")
    table.add_column("Location", style="dim")
    table.add_column("Id", style="dim")

    for p in profiles:
        table.add_row(
            p.username,
            p.x_handle,
            p.category,
            f"{p.followers_count:,}" if p.followers_count else "-",
            p.location or "-",
            p.id,
        )

    console.print(table)
    console.print(f"\n[bold]{len(profiles)} profiles[/bold]")


def _print_analytics(data):
    """Print counters and the daily histogram."""
    table = Table(title="Profile Analytics", show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Clicks", justify="right")

    table.add_row("Total", f"{data.total_clicks:,}")
    table.add_row("Today", f"{data.today_clicks:,}")
    table.add_row("Last 7 days", f"{data.weekly_clicks:,}")
    table.add_row("This month", f"{data.monthly_clicks:,}")
    console.print(table)

    peak = max((d.clicks for d in data.daily_clicks), default=0)
    console.print("\n[bold]Daily Clicks (Last 30 Days)[/bold]")
    for day in data.daily_clicks:
        width = round(day.clicks / peak * 40) if peak else 0
        console.print(f"{day.date.strftime('%b %d')}  [blue]{'█' * width}[/blue] {day.clicks}")


if __name__ == "__main__":
    app()
