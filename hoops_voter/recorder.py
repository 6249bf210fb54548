"""
Vote recorder.

Turns a completed comparison into a store increment. The store is the only
source of truth: nothing local changes unless the write is confirmed.
"""

from collections.abc import Callable

from .exceptions import StoreWriteError
from .interfaces import AggregateStore
from .logging_config import get_logger
from .models import VoteEvent


class VoteRecorder:
    """Writes votes through an AggregateStore and signals confirmed writes."""

    def __init__(self, store: AggregateStore, on_recorded: Callable[[VoteEvent], None] | None = None):
        """
        Initialize vote recorder.

        Args:
            store: Store performing the atomic increment
            on_recorded: Called after each confirmed write, typically to refresh
        """
        self.store: AggregateStore = store
        self.on_recorded = on_recorded
        self.recorded_votes: int = 0
        self.failed_votes: int = 0
        self.logger = get_logger("vote_recorder")

    def record(self, left_id: int, right_id: int, winner_id: int) -> bool:
        """
        Record that winner_id won the displayed pair (left_id, right_id).

        Returns:
            True if the store confirmed the write, False if the vote was not
            counted and may be retried

        Raises:
            ValidationError: If the vote is malformed (nothing is written)
        """
        vote = VoteEvent(left_id=left_id, right_id=right_id, winner_id=winner_id)

        try:
            self.store.record_vote(vote)
        except StoreWriteError as e:
            self.failed_votes += 1
            self.logger.error(f"Vote {vote.key} -> {winner_id} not counted: {e}")
            return False

        self.recorded_votes += 1
        self.logger.info(f"Vote recorded: {winner_id} beat {vote.key[1] if vote.winner_is_lo else vote.key[0]}")
        if self.on_recorded is not None:
            self.on_recorded(vote)
        return True
