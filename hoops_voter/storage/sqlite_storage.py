"""
SQLite aggregate store.

Durable store for players, per-pair win counts and the append-only vote
log. Each vote is a single transaction that upserts the pair aggregate with
in-database increments, so concurrent writers never lose an update.
"""

import sqlite3
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from typing_extensions import override

from ..exceptions import StoreReadError, StoreWriteError, ValidationError
from ..interfaces import AggregateStore
from ..logging_config import get_logger
from ..models import PairAggregate, Player, VoteEvent

# Module-level logger
logger = get_logger("sqlite_storage")

SCHEMA = """
CREATE TABLE IF NOT EXISTS players (
    player_id INTEGER PRIMARY KEY,
    player_name TEXT NOT NULL,
    team TEXT,
    headshot_url TEXT,
    salary_text TEXT,
    active INTEGER
);

CREATE TABLE IF NOT EXISTS pair_aggregates (
    lo_id INTEGER NOT NULL,
    hi_id INTEGER NOT NULL,
    wins_lo INTEGER NOT NULL DEFAULT 0,
    wins_hi INTEGER NOT NULL DEFAULT 0,
    total INTEGER NOT NULL DEFAULT 0,
    UNIQUE (lo_id, hi_id),
    CHECK (lo_id < hi_id)
);

CREATE TABLE IF NOT EXISTS votes (
    id INTEGER PRIMARY KEY,
    left_id INTEGER NOT NULL REFERENCES players (player_id),
    right_id INTEGER NOT NULL REFERENCES players (player_id),
    winner_id INTEGER NOT NULL REFERENCES players (player_id),
    ts REAL NOT NULL
);
"""

UPSERT_AGGREGATE = """
INSERT INTO pair_aggregates (lo_id, hi_id, wins_lo, wins_hi, total)
VALUES (?, ?, ?, ?, 1)
ON CONFLICT (lo_id, hi_id) DO UPDATE SET
    wins_lo = wins_lo + excluded.wins_lo,
    wins_hi = wins_hi + excluded.wins_hi,
    total = total + 1
"""

UPSERT_PLAYER = """
INSERT INTO players (player_id, player_name, team, headshot_url, salary_text, active)
VALUES (?, ?, ?, ?, ?, ?)
ON CONFLICT (player_id) DO UPDATE SET
    player_name = excluded.player_name,
    team = excluded.team,
    headshot_url = excluded.headshot_url,
    salary_text = excluded.salary_text,
    active = excluded.active
"""


class SQLiteAggregateStore(AggregateStore):
    """
    SQLite-backed AggregateStore.

    Opens a fresh connection per operation, so one instance can be shared
    by threads and several processes can point at the same file.
    """

    db_path: Path

    def __init__(self, db_path: Path, timeout: float = 5.0):
        """
        Initialize SQLite store and create tables if they don't exist.

        Args:
            db_path: Path to the database file
            timeout: Seconds to wait for a competing writer's lock
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            _ = conn.execute("PRAGMA journal_mode = WAL")
            _ = conn.executescript(SCHEMA)

        logger.info(f"SQLite store initialized: {self.db_path}")

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        try:
            _ = conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        finally:
            conn.close()

    @override
    def list_items(self, team: str | None = None) -> list[Player]:
        query = "SELECT player_id, player_name, team, headshot_url, salary_text, active FROM players"
        params: tuple[object, ...] = ()
        if team is not None:
            query += " WHERE team = ?"
            params = (team,)
        query += " ORDER BY player_name ASC"

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to list players from {self.db_path}: {e}") from e

        players = list[Player]()
        for player_id, name, team_name, headshot_url, salary_text, active in rows:
            try:
                players.append(Player(
                    player_id=player_id,
                    name=name,
                    team=team_name,
                    headshot_url=headshot_url,
                    salary_text=salary_text,
                    active=None if active is None else bool(active),
                ))
            except ValidationError as e:
                logger.warning(f"Skipping invalid player row {player_id}: {e}")
        return players

    @override
    def list_pair_aggregates(self, item_ids: Iterable[int] | None = None) -> list[PairAggregate]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT lo_id, hi_id, wins_lo, wins_hi, total FROM pair_aggregates ORDER BY lo_id, hi_id"
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to list pair aggregates from {self.db_path}: {e}") from e

        wanted = None if item_ids is None else set(item_ids)
        aggregates = list[PairAggregate]()
        for lo_id, hi_id, wins_lo, wins_hi, total in rows:
            if wanted is not None and (lo_id not in wanted or hi_id not in wanted):
                continue
            try:
                aggregates.append(PairAggregate(lo_id, hi_id, wins_lo, wins_hi, total))
            except ValidationError as e:
                logger.warning(f"Skipping degenerate pair aggregate ({lo_id}, {hi_id}): {e}")
        return aggregates

    @override
    def record_vote(self, vote: VoteEvent) -> None:
        lo_id, hi_id = vote.key
        wins_lo, wins_hi = (1, 0) if vote.winner_is_lo else (0, 1)

        try:
            with self._connect() as conn:
                _ = conn.execute("BEGIN IMMEDIATE")
                try:
                    _ = conn.execute(
                        "INSERT INTO votes (left_id, right_id, winner_id, ts) VALUES (?, ?, ?, ?)",
                        (vote.left_id, vote.right_id, vote.winner_id, vote.timestamp),
                    )
                    _ = conn.execute(UPSERT_AGGREGATE, (lo_id, hi_id, wins_lo, wins_hi))
                except sqlite3.Error:
                    _ = conn.execute("ROLLBACK")
                    raise
                _ = conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed to record vote {vote.key} -> {vote.winner_id}: {e}") from e

        logger.debug(f"Recorded vote {vote.key} -> {vote.winner_id}")

    @override
    def upsert_players(self, players: Iterable[Player]) -> int:
        rows = [
            (
                player.player_id,
                player.name,
                player.team,
                player.headshot_url,
                player.salary_text,
                None if player.active is None else int(player.active),
            )
            for player in players
        ]
        try:
            with self._connect() as conn:
                _ = conn.execute("BEGIN IMMEDIATE")
                _ = conn.executemany(UPSERT_PLAYER, rows)
                _ = conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed to upsert players into {self.db_path}: {e}") from e

        logger.info(f"Upserted {len(rows)} players into {self.db_path}")
        return len(rows)

    @override
    def subscribe_new_votes(self, callback: Callable[[], None]) -> Callable[[], None] | None:
        # No change feed in SQLite; sessions fall back to polling
        return None

    def vote_count(self) -> int:
        """Get number of votes in the append-only log."""
        try:
            with self._connect() as conn:
                (count,) = conn.execute("SELECT COUNT(*) FROM votes").fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed to count votes in {self.db_path}: {e}") from e
        return int(count)
