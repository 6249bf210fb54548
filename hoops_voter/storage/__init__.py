"""
Storage implementations.

Provides implementations of the AggregateStore interface for persisting
players and per-pair win counts.

Available implementations:
- SQLiteAggregateStore: durable store with atomic in-database increments
- InMemoryAggregateStore: process-local store with push notifications,
  optionally backed by a JSONL vote log
- JSONLVoteLog: append-only vote log that can rebuild aggregates
"""

from .jsonl_vote_log import JSONLVoteLog, rebuild_aggregates
from .memory_storage import InMemoryAggregateStore
from .sqlite_storage import SQLiteAggregateStore

__all__ = ["InMemoryAggregateStore", "JSONLVoteLog", "SQLiteAggregateStore", "rebuild_aggregates"]
