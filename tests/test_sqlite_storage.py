"""
Tests for SQLiteAggregateStore implementation.

Focus on atomic increments, failure surfacing and degenerate rows.
"""

import sqlite3
import tempfile
import threading
from pathlib import Path

import pytest

from hoops_voter.exceptions import StoreReadError, StoreWriteError
from hoops_voter.models import PairAggregate, Player, VoteEvent
from hoops_voter.storage.sqlite_storage import SQLiteAggregateStore

PLAYERS = [
    Player(player_id=1, name="Alpha Guard", team="BOS"),
    Player(player_id=2, name="Bravo Wing", team="BOS"),
    Player(player_id=3, name="Charlie Center", team="LAL", active=False),
]


class TestSQLiteAggregateStore:
    """Test SQLiteAggregateStore behavior through public interface."""

    def test_players_round_trip_and_team_filter(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db")

            # Act
            written = store.upsert_players(PLAYERS)

            # Assert
            assert written == 3
            assert [p.player_id for p in store.list_items()] == [1, 2, 3]
            assert [p.player_id for p in store.list_items(team="BOS")] == [1, 2]
            assert store.list_items(team="LAL")[0].active is False

    def test_upsert_updates_existing_player(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db")
            _ = store.upsert_players(PLAYERS)

            # Act
            _ = store.upsert_players([Player(player_id=2, name="Bravo Wing", team="MIA")])

            # Assert
            assert [p.player_id for p in store.list_items(team="MIA")] == [2]
            assert len(store.list_items()) == 3

    def test_record_vote_creates_then_increments_aggregate(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db")
            _ = store.upsert_players(PLAYERS)

            # Act
            # Displayed as (2, 1): orientation must not matter
            store.record_vote(VoteEvent(left_id=2, right_id=1, winner_id=2))
            store.record_vote(VoteEvent(left_id=1, right_id=2, winner_id=2))
            store.record_vote(VoteEvent(left_id=1, right_id=2, winner_id=1))

            # Assert
            assert store.list_pair_aggregates() == [PairAggregate(1, 2, wins_lo=1, wins_hi=2, total=3)]
            assert store.vote_count() == 3

    def test_list_pair_aggregates_filters_by_item_ids(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db")
            _ = store.upsert_players(PLAYERS)
            store.record_vote(VoteEvent(1, 2, 1))
            store.record_vote(VoteEvent(1, 3, 3))

            # Act
            aggregates = store.list_pair_aggregates(item_ids=[1, 2])

            # Assert
            assert [agg.key for agg in aggregates] == [(1, 2)]

    def test_concurrent_votes_on_same_pair_all_land(self) -> None:
        """Two sessions voting at once must increase total by exactly two."""
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "votes.db"
            _ = SQLiteAggregateStore(db_path).upsert_players(PLAYERS)
            first_session_store = SQLiteAggregateStore(db_path)
            second_session_store = SQLiteAggregateStore(db_path)
            start = threading.Barrier(2)
            errors: list[Exception] = []

            def cast(store: SQLiteAggregateStore, winner_id: int) -> None:
                try:
                    _ = start.wait()
                    store.record_vote(VoteEvent(left_id=1, right_id=2, winner_id=winner_id))
                except Exception as e:  # surfaced through the assertion below
                    errors.append(e)

            threads = [
                threading.Thread(target=cast, args=(first_session_store, 1)),
                threading.Thread(target=cast, args=(second_session_store, 2)),
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            assert errors == []
            assert first_session_store.list_pair_aggregates() == [PairAggregate(1, 2, 1, 1, 2)]

    def test_many_concurrent_votes_are_not_lost(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db", timeout=30.0)
            _ = store.upsert_players(PLAYERS)

            def cast(count: int) -> None:
                for _ in range(count):
                    store.record_vote(VoteEvent(left_id=2, right_id=1, winner_id=1))

            threads = [threading.Thread(target=cast, args=(10,)) for _ in range(4)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            (aggregate,) = store.list_pair_aggregates()
            assert aggregate.total == 40
            assert aggregate.wins_lo == 40

    def test_vote_for_unknown_player_fails_without_side_effects(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db")
            _ = store.upsert_players(PLAYERS)

            with pytest.raises(StoreWriteError):
                store.record_vote(VoteEvent(left_id=1, right_id=99, winner_id=99))

            assert store.list_pair_aggregates() == []
            assert store.vote_count() == 0

    def test_degenerate_rows_are_skipped(self) -> None:
        """Rows breaking total = wins_lo + wins_hi or with negative wins are dropped on read."""
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            db_path = Path(temp_dir) / "votes.db"
            store = SQLiteAggregateStore(db_path)
            _ = store.upsert_players(PLAYERS)
            store.record_vote(VoteEvent(1, 2, 1))

            # Act
            with sqlite3.connect(db_path) as conn:
                _ = conn.execute(
                    "INSERT INTO pair_aggregates (lo_id, hi_id, wins_lo, wins_hi, total) VALUES (1, 3, 2, 2, 7)"
                )
                _ = conn.execute(
                    "INSERT INTO pair_aggregates (lo_id, hi_id, wins_lo, wins_hi, total) VALUES (2, 3, -1, 1, 0)"
                )

            # Assert
            assert [agg.key for agg in store.list_pair_aggregates()] == [(1, 2)]

    def test_schema_rejects_unordered_pairs(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            db_path = Path(temp_dir) / "votes.db"
            _ = SQLiteAggregateStore(db_path)

            # Act / Assert
            with sqlite3.connect(db_path) as conn:
                with pytest.raises(sqlite3.IntegrityError):
                    _ = conn.execute(
                        "INSERT INTO pair_aggregates (lo_id, hi_id, wins_lo, wins_hi, total) VALUES (3, 2, 1, 0, 1)"
                    )

    def test_read_failure_raises_store_read_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "votes.db"
            store = SQLiteAggregateStore(db_path)

            with sqlite3.connect(db_path) as conn:
                _ = conn.execute("DROP TABLE pair_aggregates")

            with pytest.raises(StoreReadError):
                _ = store.list_pair_aggregates()

    def test_subscription_not_supported(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SQLiteAggregateStore(Path(temp_dir) / "votes.db")

            assert store.subscribe_new_votes(lambda: None) is None
