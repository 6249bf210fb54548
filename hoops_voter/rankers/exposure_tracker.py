"""
Exposure tracking.

Derives per-player comparison counts and raw win/loss records from a
snapshot of pair aggregates. Recomputed alongside the ranker, never derived
from its output.
"""

from collections.abc import Iterable

from ..logging_config import get_logger
from ..models import PairAggregate, PlayerRecord

# Module-level logger
logger = get_logger("exposure_tracker")


class ExposureTracker:
    """Pure functions over an aggregate snapshot."""

    @staticmethod
    def compute_exposure(pool_ids: Iterable[int], aggregates: Iterable[PairAggregate]) -> dict[int, int]:
        """
        Count recorded comparisons per pool member.

        Every aggregate containing the player counts, including those against
        players outside the pool. Players without aggregates map to 0.
        """
        exposure = {player_id: 0 for player_id in pool_ids}
        for agg in aggregates:
            if agg.lo_id in exposure:
                exposure[agg.lo_id] += agg.total
            if agg.hi_id in exposure:
                exposure[agg.hi_id] += agg.total
        return exposure

    @staticmethod
    def compute_records(pool_ids: Iterable[int], aggregates: Iterable[PairAggregate]) -> dict[int, PlayerRecord]:
        """Tally wins and losses per pool member across all of its aggregates."""
        wins = {player_id: 0 for player_id in pool_ids}
        losses = dict.fromkeys(wins, 0)
        for agg in aggregates:
            for player_id in agg.key:
                if player_id in wins:
                    wins[player_id] += agg.wins_for(player_id)
                    losses[player_id] += agg.wins_for(agg.other(player_id))
        logger.debug(f"Computed records for {len(wins)} players")
        return {player_id: PlayerRecord(wins=wins[player_id], losses=losses[player_id]) for player_id in wins}
