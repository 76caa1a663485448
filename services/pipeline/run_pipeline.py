#!/usr/bin/env python3
"""
Leaderboard Pipeline Runner - Runs the full pipeline once: fetch → reconcile → rank
Prints the leaderboard and optionally writes the JSON payload to a file.
"""

import asyncio
import json
import sys
from dataclasses import replace

import click
import structlog

from services.pipeline.engine import LeaderboardEngine
from shared.config import EngineConfig
from shared.errors import LeaderboardError

log = structlog.get_logger()


@click.command()
@click.option("--output", "-o", "output_file", default=None, help="Write the JSON payload to this file")
@click.option("--event-id", "event_ids", multiple=True, help="Override configured event ids (repeatable)")
@click.option("--top", default=10, show_default=True, help="Number of leaderboard rows to print")
def main(output_file: str, event_ids: tuple, top: int):
    """Build the referral leaderboard from Eventbrite and Google Sheets."""
    try:
        config = EngineConfig.from_env()
        if event_ids:
            config = replace(config, event_ids=tuple(event_ids))
        engine = LeaderboardEngine(config=config)
        log.info("Pipeline config", events=len(config.event_ids), sheets=config.sheets_configured)
        payload = asyncio.run(engine.get_tickets(bypass_cache=True))
    except LeaderboardError as e:
        log.error("Pipeline failed", error=str(e))
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    data = payload.to_json()
    if output_file:
        with open(output_file, "w") as f:
            json.dump(data, f, indent=2)
        log.info("Wrote leaderboard", output=output_file)

    sources = payload.data_sources
    click.echo(f"\n✅ {payload.total_tickets} tickets "
               f"({sources.from_primary} Eventbrite, {sources.only_in_secondary} sheet-only, "
               f"{sources.referrers_updated} referrers updated)")
    for rank, entry in enumerate(payload.leaderboard[:top], start=1):
        click.echo(f"{rank:>3}. {entry.name:<30} {entry.tickets}")


if __name__ == "__main__":
    main()
