# petbrain/cli.py
"""
CLI interface for petbrain.

Thin presentation layer over the extraction, card and journey modules.
"""

import asyncio
import json
import sys
from datetime import date
from pathlib import Path

import typer

from petbrain.config.loader import load_config
from petbrain.logging_config import configure_logging

app = typer.Typer(
    name="petbrain",
    help="Journey companion for new dog owners: fact extraction, daily cards and stages.",
    no_args_is_help=True,
)

USER_OPTION = typer.Option("local", "--user", "-u", help="User identifier")


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


async def _get_store():
    """Open the configured SQLite store."""
    from petbrain.models.sqlite_store import SQLiteCompanionStore

    config = load_config()
    store = SQLiteCompanionStore(str(config.storage.resolve_db_path()))
    await store.initialize()
    return store


def _stage_color(stage: str) -> str:
    """Return ANSI color for a stage."""
    colors = {
        "explore": typer.colors.CYAN,
        "prep": typer.colors.YELLOW,
        "withDog": typer.colors.GREEN,
    }
    return colors.get(stage, typer.colors.WHITE)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Configure logging from the config file before any command runs."""
    config = load_config()
    configure_logging(
        "verbose" if verbose else config.output.verbosity,
        json_logs=config.output.json_logs,
    )


@app.command()
def extract(text: str = typer.Argument(..., help="One user message")):
    """Print the facts extracted from a message as JSON."""
    from petbrain.extraction import SignalExtractor
    from petbrain.lexicon import load_lexicon

    config = load_config()
    lexicon = load_lexicon(config.lexicon.path) if config.lexicon.path else None
    facts = SignalExtractor(lexicon).extract(text)
    typer.echo(json.dumps(facts.to_dict(), ensure_ascii=False))


@app.command("parse-card")
def parse_card_command(
    file: Path = typer.Argument(None, help="File holding the response (default: stdin)"),
    strict: bool = typer.Option(False, "--strict", help="Reject out-of-order sections"),
):
    """Parse a daily card response and print it as JSON."""
    from petbrain.cards import CardParser
    from petbrain.errors import CardParseError

    text = file.read_text(encoding="utf-8") if file else sys.stdin.read()
    config = load_config()
    parser = CardParser(strict_order=strict or config.card.strict_order)

    try:
        card = parser.parse(text)
    except CardParseError as e:
        typer.echo(typer.style(f"Error: {e}", fg=typer.colors.RED), err=True)
        raise typer.Exit(2)

    typer.echo(json.dumps(card.model_dump(mode="json"), ensure_ascii=False, indent=2))


@app.command()
def status(user: str = USER_OPTION):
    """Show the current stage, the dog profile and today's card."""
    from rich.console import Console
    from rich.table import Table

    from petbrain.journey import DailyCardService, JourneyStateMachine

    async def _status():
        store = await _get_store()
        try:
            start = await JourneyStateMachine(store).start_session(user)
            card = await DailyCardService(store).today_card(user)
            return start, card
        finally:
            await store.close()

    start, card = _run(_status())
    console = Console()

    stage = start.stage.value if start.stage else "none"
    typer.echo(typer.style(f"Stage:    {stage}", fg=_stage_color(stage)))

    if start.profile is None:
        typer.echo("Profile:  none")
        if start.needs_profile:
            typer.echo(typer.style("Run 'petbrain set-profile' to continue.", fg=typer.colors.RED))
        return

    profile = start.profile
    table = Table(title="Dog profile", show_header=False)
    table.add_row("Breed", profile.breed)
    table.add_row("Age (months)", profile.age_bucket.value)
    table.add_row("Companion hours", profile.companion_bucket.value)
    table.add_row("Home since", profile.home_date.isoformat())
    table.add_row("Days home", str(profile.days_home()))
    console.print(table)

    if card is not None:
        console.print(f"[green]✅[/green] {card.focus}")
        console.print(f"[red]❌[/red] {card.forbidden}")
        console.print(f"ℹ️ {card.reason}")


@app.command()
def switch(
    stage: str = typer.Argument(..., help="explore, prep or withDog"),
    user: str = USER_OPTION,
):
    """Switch to another stage."""
    from petbrain.errors import ProfileRequiredError
    from petbrain.journey import JourneyStateMachine
    from petbrain.models.stage import Stage

    try:
        target = Stage.parse(stage)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    async def _switch():
        store = await _get_store()
        try:
            return await JourneyStateMachine(store).transition(user, target)
        finally:
            await store.close()

    try:
        current = _run(_switch())
    except ProfileRequiredError:
        typer.echo(
            typer.style(
                "Cannot enter withDog without a dog profile. Run 'petbrain set-profile' first.",
                fg=typer.colors.RED,
            ),
            err=True,
        )
        raise typer.Exit(1)

    typer.echo(typer.style(f"Stage:    {current.value}", fg=_stage_color(current.value)))


@app.command("set-profile")
def set_profile(
    breed: str = typer.Option(..., "--breed", "-b", help="Breed name"),
    age: str = typer.Option(..., "--age", "-a", help="Age in months: 1-3, 4-6, 6-12, 12+"),
    companion: str = typer.Option(
        ..., "--companion", "-c", help="Daily companion hours: ≤1h, 2-3h, 4-8h, ≥8h"
    ),
    home_date: str = typer.Option(None, "--home-date", help="Date the dog came home (YYYY-MM-DD)"),
    days: int = typer.Option(None, "--days-home", help="Days the dog has been home (today = 1)"),
    user: str = USER_OPTION,
):
    """Save the dog profile, as the profile form does."""
    from pydantic import ValidationError

    from petbrain.journey import ProfileCollector
    from petbrain.models.profile import AgeBucket, CompanionBucket, home_date_for

    if (home_date is None) == (days is None):
        typer.echo("Error: give exactly one of --home-date or --days-home", err=True)
        raise typer.Exit(2)

    try:
        age_bucket = AgeBucket(age)
        companion_bucket = CompanionBucket(companion)
        came_home = date.fromisoformat(home_date) if home_date else home_date_for(days)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    async def _save():
        store = await _get_store()
        try:
            return await ProfileCollector(store).submit_form(
                user, breed, age_bucket, companion_bucket, came_home
            )
        finally:
            await store.close()

    try:
        profile = _run(_save())
    except ValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    typer.echo(f"Saved profile: {profile.breed}, day {profile.days_home()}")


@app.command("reset-profile")
def reset_profile(user: str = USER_OPTION):
    """Delete the dog profile and any partially collected details."""
    from petbrain.journey import ProfileCollector

    async def _reset():
        store = await _get_store()
        try:
            await ProfileCollector(store).reset(user)
        finally:
            await store.close()

    _run(_reset())
    typer.echo("Profile removed.")
