"""
Flask CLI commands for catalog maintainers.

Usage:
    flask seasonal-plants                  # Plants in season this month
    flask seasonal-plants --month 5        # Plants active in May
    flask seasonal-plants --season winter  # Plants active in Dec/Jan/Feb
    flask leaderboard --limit 20           # Top 20 users by points
    flask refresh-catalogs                 # Drop cached catalogs after editing them
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from wildscout.constants import SEASONS
from wildscout.utils.errors import InvalidArgument


@click.command("seasonal-plants")
@click.option("--month", type=int, default=None, help="Month number (1-12). Defaults to the current month.")
@click.option("--season", type=click.Choice(list(SEASONS)), default=None, help="Season bucket instead of a month.")
@with_appcontext
def seasonal_plants_command(month: int | None, season: str | None) -> None:
    """List seasonal plants active in a month or season."""
    from wildscout.services import supabase_client, seasonal
    from wildscout.utils.cache import clear_all_catalog_cache

    if month is not None and season is not None:
        raise click.UsageError("Use either --month or --season, not both.")

    clear_all_catalog_cache()
    plants, error = supabase_client.get_seasonal_plants()
    if error:
        click.echo(f"Error: {error}")
        raise SystemExit(1)

    try:
        if season:
            matches = seasonal.plants_active_in_season(plants, season)
            heading = f"{season.title()} ({', '.join(seasonal.month_name(m) for m in SEASONS[season])})"
        else:
            month = seasonal.current_month() if month is None else month
            matches = seasonal.plants_active_in_month(plants, month)
            heading = seasonal.month_name(month)
    except InvalidArgument as e:
        raise click.BadParameter(str(e))

    click.echo(f"{heading}: {len(matches)} plant(s) in season")
    for plant in matches:
        kind = plant.get("plant_type") or "unspecified"
        months = ", ".join(seasonal.active_month_names(plant))
        click.echo(f"  - {plant.get('common_name')} [{kind}] {months}")


@click.command("leaderboard")
@click.option("--limit", type=int, default=None, help="Number of entries to show. Defaults to LEADERBOARD_LIMIT.")
@with_appcontext
def leaderboard_command(limit: int | None) -> None:
    """Print the current leaderboard."""
    from wildscout.services import supabase_client, challenges

    if limit is None:
        limit = current_app.config["LEADERBOARD_LIMIT"]

    stats, error = supabase_client.get_all_user_stats()
    if error:
        click.echo(f"Error: {error}")
        raise SystemExit(1)

    try:
        entries = challenges.rank_leaderboard(stats, limit)
    except InvalidArgument as e:
        raise click.BadParameter(str(e), param_hint="--limit")

    if not entries:
        click.echo("No rankings yet.")
        return

    for entry in entries:
        click.echo(
            f"{challenges.rank_badge(entry['rank']):>7}  "
            f"{str(entry.get('user_id'))[:8]}  "
            f"level {entry.get('level') or 1}  "
            f"{entry.get('total_points') or 0} pts"
        )


@click.command("refresh-catalogs")
@with_appcontext
def refresh_catalogs_command() -> None:
    """Drop cached seasonal plants, challenges and care guides."""
    from wildscout.services import supabase_client

    supabase_client.refresh_catalogs()
    click.echo("Catalog cache cleared. Next reads come from the database.")
