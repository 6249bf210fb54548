"""
In-memory aggregate store.

Lock-guarded dictionaries with push notifications. Optionally backed by a
JSONL vote log that is replayed on start-up and appended on every vote.
"""

import threading
from collections.abc import Callable, Iterable

from typing_extensions import override

from ..exceptions import StoreReadError, StoreWriteError
from ..interfaces import AggregateStore
from ..logging_config import get_logger
from ..models import PairAggregate, PairKey, Player, VoteEvent
from .jsonl_vote_log import JSONLVoteLog, rebuild_aggregates

# Module-level logger
logger = get_logger("memory_storage")


class InMemoryAggregateStore(AggregateStore):
    """
    Process-local AggregateStore.

    A single lock serialises every increment, so concurrent record_vote
    calls on the same pair all land.
    """

    def __init__(self, players: Iterable[Player] = (), vote_log: JSONLVoteLog | None = None):
        """
        Initialize in-memory store.

        Args:
            players: Initial roster
            vote_log: Optional JSONL log to replay now and append to on each vote
        """
        self._lock = threading.Lock()
        self._players = {player.player_id: player for player in players}
        self._aggregates = dict[PairKey, PairAggregate]()
        self._subscribers = list[Callable[[], None]]()
        self.vote_log = vote_log

        # Switches for exercising failure handling
        self.fail_reads: bool = False
        self.fail_writes: bool = False

        if vote_log is not None:
            for agg in rebuild_aggregates(vote_log.load_votes()):
                self._aggregates[agg.key] = agg
            logger.info(f"Replayed {len(self._aggregates)} pair aggregates from {vote_log.path}")

    @override
    def list_items(self, team: str | None = None) -> list[Player]:
        if self.fail_reads:
            raise StoreReadError("In-memory store is configured to fail reads")
        with self._lock:
            players = list(self._players.values())
        if team is not None:
            players = [player for player in players if player.team == team]
        return sorted(players, key=lambda player: player.name)

    @override
    def list_pair_aggregates(self, item_ids: Iterable[int] | None = None) -> list[PairAggregate]:
        if self.fail_reads:
            raise StoreReadError("In-memory store is configured to fail reads")
        with self._lock:
            aggregates = list(self._aggregates.values())
        if item_ids is not None:
            wanted = set(item_ids)
            aggregates = [agg for agg in aggregates if agg.lo_id in wanted and agg.hi_id in wanted]
        return aggregates

    @override
    def record_vote(self, vote: VoteEvent) -> None:
        if self.fail_writes:
            raise StoreWriteError("In-memory store is configured to fail writes")

        with self._lock:
            missing = [pid for pid in (vote.left_id, vote.right_id) if pid not in self._players]
            if missing:
                raise StoreWriteError(f"Unknown player(s) {missing} in vote {vote.key}")
            if self.vote_log is not None:
                try:
                    self.vote_log.append(vote)
                except OSError as e:
                    raise StoreWriteError(f"Failed to append vote to {self.vote_log.path}: {e}") from e
            current = self._aggregates.get(vote.key) or PairAggregate(*vote.key)
            self._aggregates[vote.key] = current.with_win(vote.winner_id)
            subscribers = list(self._subscribers)

        logger.debug(f"Recorded vote {vote.key} -> {vote.winner_id}")
        for callback in subscribers:
            # The increment already landed; listener failures are only logged
            try:
                callback()
            except Exception as e:
                logger.error(f"Vote subscriber failed after recording {vote.key}: {e}")

    @override
    def upsert_players(self, players: Iterable[Player]) -> int:
        count = 0
        with self._lock:
            for player in players:
                self._players[player.player_id] = player
                count += 1
        logger.info(f"Upserted {count} players")
        return count

    @override
    def subscribe_new_votes(self, callback: Callable[[], None]) -> Callable[[], None] | None:
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe
