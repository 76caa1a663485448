"""
Leaderboard Ingest Service
Pulls ticket records from Eventbrite and Google Sheets

Components:
- eventbrite.py: Eventbrite attendees client (paginated, concurrent per event)
- sheets.py: Google Sheets values client (service account)
- adapters.py: Source adapters pairing each client with its normalizer
- cli.py: Command-line interface for config checks and raw fetches
"""

from .adapters import PrimaryAdapter, SecondaryAdapter
from .eventbrite import EventbriteClient
from .sheets import SheetsClient

__all__ = ["EventbriteClient", "SheetsClient", "PrimaryAdapter", "SecondaryAdapter"]
