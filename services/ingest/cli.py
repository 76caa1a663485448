#!/usr/bin/env python3
"""
Leaderboard Ingest CLI
Command-line tool for checking source configuration and dumping normalized tickets
"""

import argparse
import asyncio
import json
import sys

from services.ingest.adapters import PrimaryAdapter, SecondaryAdapter
from services.ingest.eventbrite import EventbriteClient
from shared.config import EngineConfig
from shared.errors import LeaderboardError


def check_config(config: EngineConfig) -> bool:
    """Print which sources are configured"""
    print(f"Eventbrite token configured: {'Yes' if config.token_configured else 'No'}")
    print(f"   Events: {', '.join(config.event_ids)}")
    print(f"Google Sheets configured: {'Yes' if config.sheets_configured else 'No'}")
    if config.sheets_configured:
        print(f"   Range: {config.sheets_range}")
    print(f"Cache duration: {config.cache_duration:g} seconds")
    return config.token_configured


async def ping_eventbrite(config: EngineConfig) -> bool:
    """Check the Eventbrite token against the API"""
    print(f"Testing Eventbrite token against {config.api_url}...")
    async with EventbriteClient(
        config.require_token(), api_url=config.api_url, timeout=config.http_timeout
    ) as client:
        ok = await client.check_health()
    print("✅ Token accepted" if ok else "❌ Token rejected or API unreachable")
    return ok


async def fetch_tickets(config: EngineConfig, source: str, output_file: str = None) -> list:
    """Fetch normalized tickets from one source"""
    if source == "eventbrite":
        print(f"Fetching attendees for {len(config.event_ids)} events from Eventbrite...")
        adapter = PrimaryAdapter.from_config(config)
    else:
        print("Fetching rows from Google Sheets...")
        adapter = SecondaryAdapter.from_config(config)
        if not adapter.enabled:
            print("❌ Google Sheets not configured")
            return []

    tickets = await adapter.fetch()
    print(f"✅ Fetched {len(tickets)} attending tickets")

    if output_file:
        with open(output_file, "w") as f:
            json.dump([t.model_dump(mode="json") for t in tickets], f, indent=2)
        print(f"   Saved to {output_file}")

    return tickets


def main():
    parser = argparse.ArgumentParser(description="Leaderboard Ingest CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Check command
    check_parser = subparsers.add_parser("check", help="Show source configuration")
    check_parser.add_argument("--ping", action="store_true", help="Also verify the token against the API")

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Fetch normalized tickets to file")
    fetch_parser.add_argument(
        "--source",
        choices=["eventbrite", "sheets"],
        default="eventbrite",
        help="Source to fetch from",
    )
    fetch_parser.add_argument("--output", "-o", default="tickets.json", help="Output file")

    args = parser.parse_args()

    try:
        config = EngineConfig.from_env()
        if args.command == "check":
            ok = check_config(config)
            if ok and args.ping:
                ok = asyncio.run(ping_eventbrite(config))
            sys.exit(0 if ok else 1)
        elif args.command == "fetch":
            asyncio.run(fetch_tickets(config, args.source, args.output))
    except LeaderboardError as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
