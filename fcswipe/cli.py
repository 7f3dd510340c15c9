"""Command-line interface for fcswipe."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from fcswipe import SwipeSession, SwipeConfig, Screen, Swipe, __version__
from fcswipe.core.renderer import LOADING_TEXT, render_screen

app = typer.Typer(
    name="fcswipe",
    help="Swipe through Farcaster profile cards",
    add_completion=False,
)
console = Console()

KEY_ACTIONS = {
    "l": Swipe.LIKE,
    "p": Swipe.PASS,
}


def version_callback(value: bool):
    if value:
        console.print(f"fcswipe version {__version__}")
        raise typer.Exit()


def _build_config(
    fid: Optional[int] = None,
    limit: Optional[int] = None,
    **overrides,
) -> SwipeConfig:
    """Apply only the options given on the command line over env settings."""
    if fid is not None:
        overrides["target_fid"] = fid
    if limit is not None:
        overrides["batch_limit"] = limit
    return SwipeConfig(**overrides)


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
    """fcswipe - swipe through Farcaster profile cards."""
    pass


@app.command()
def swipe(
    fid: Optional[int] = typer.Option(
        None, "--fid", help="Farcaster fid whose reciprocal followers are shown"
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=1, max=100, help="Number of profiles to fetch"
    ),
    avatar_check: bool = typer.Option(
        True, "--avatar-check/--no-avatar-check", help="Probe avatar URLs before showing a card"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show log output"
    ),
):
    """Open the interactive swipe screen."""
    config = _build_config(
        fid,
        limit,
        probe_avatars=avatar_check,
        log_level="INFO" if verbose else "WARNING",
    )

    async def run():
        async with SwipeSession(config) as session:
            with console.status(LOADING_TEXT):
                await session.load()

            while True:
                screen = session.screen
                if screen == Screen.PROFILE:
                    await session.check_avatar()

                console.print()
                console.print(render_screen(session.snapshot()))

                if screen in (Screen.EMPTY, Screen.EXHAUSTED):
                    break

                choices = ["r", "q"] if screen == Screen.ERROR else ["p", "l", "q"]
                key = Prompt.ask(">", choices=choices, show_choices=False, console=console)

                if key == "q":
                    break
                if key == "r":
                    with console.status(LOADING_TEXT):
                        await session.retry()
                else:
                    session.swipe(KEY_ACTIONS[key])

    asyncio.run(run())


@app.command("list")
def list_profiles(
    fid: Optional[int] = typer.Option(None, "--fid", help="Farcaster fid"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, max=100),
):
    """Fetch the deck once and print it as a table."""
    config = _build_config(fid, limit, log_level="WARNING")

    async def run():
        async with SwipeSession(config) as session:
            with console.status(LOADING_TEXT):
                snapshot = await session.load()

            if snapshot.screen == Screen.ERROR:
                console.print(f"[red]{snapshot.error_message}[/red]")
                raise typer.Exit(1)

            _print_profile_table(session)

    asyncio.run(run())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    fid: Optional[int] = typer.Option(None, "--fid", help="Farcaster fid"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, max=100),
):
    """Serve the swipe screen as a web page."""
    import uvicorn

    from fcswipe.api import create_app

    config = _build_config(fid, limit)
    uvicorn.run(create_app(config), host=host, port=port)


def _print_profile_table(session: SwipeSession):
    """Print fetched profiles as a table."""
    profiles = session.deck.profiles

    table = Table(title=f"Reciprocal followers of fid {session.config.target_fid}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name")
    table.add_column("Handle", style="dim", no_wrap=True)
    table.add_column("Followers", justify="right")
    table.add_column("Following", justify="right")
    table.add_column("Bio", overflow="ellipsis", max_width=30)

    for i, p in enumerate(profiles, start=1):
        table.add_row(str(i), p.display_name, p.handle, p.followers, p.following, p.bio)

    console.print(table)
    console.print(f"\n[bold]{len(profiles)} profiles[/bold]")


if __name__ == "__main__":
    app()
