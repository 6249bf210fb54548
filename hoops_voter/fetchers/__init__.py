"""
Fetcher implementations.

Available implementations:
- RosterFetcher: Reads players from a JSON roster file
"""

from .roster_fetcher import RosterFetcher

__all__ = ["RosterFetcher"]
