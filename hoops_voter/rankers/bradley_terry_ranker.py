"""
Bradley-Terry ranker implementation.

Fits latent strengths by Minorize-Maximization (Hunter, 2004) on every call
and converts them to "probability of beating a random pool member" scores.
Nothing is carried over between calls.
"""

from collections.abc import Iterable

import numpy as np
from typing_extensions import override

from ..config import RatingConfig
from ..interfaces import Ranker
from ..logging_config import get_logger
from ..models import PairAggregate

NEUTRAL_SCORE = 0.5
_TINY = np.finfo(float).tiny


def _win_probabilities(strengths: np.ndarray) -> np.ndarray:
    """Matrix of P(i beats j) = w_i / (w_i + w_j); 0.5 where both strengths are zero."""
    pair_sums = strengths[:, None] + strengths[None, :]
    n = len(strengths)
    return np.divide(strengths[:, None], pair_sums, out=np.full((n, n), 0.5), where=pair_sums > 0)


class BradleyTerryRanker(Ranker):
    """
    Bradley-Terry ranker with MM fitting.

    P(i beats j) = w_i / (w_i + w_j). Strengths are refit from scratch on
    each call, so the ranker is safe to share between threads.
    """

    def __init__(self, config: RatingConfig | None = None):
        """
        Initialize Bradley-Terry ranker.

        Args:
            config: Fit parameters (prior, iteration budget, tolerance)
        """
        self.config: RatingConfig = config or RatingConfig()
        self.logger = get_logger("bradley_terry_ranker")
        self.logger.debug(
            f"Bradley-Terry ranker initialized: prior={self.config.prior} ({self.config.prior_scope}), "
            f"iter_max={self.config.iter_max}, tolerance={self.config.tolerance}"
        )

    def _win_matrix(self, ids: list[int], aggregates: Iterable[PairAggregate]) -> np.ndarray:
        """Build wins[i, j] = times ids[i] beat ids[j], for pairs inside the pool."""
        index = {player_id: i for i, player_id in enumerate(ids)}
        wins = np.zeros((len(ids), len(ids)))
        for agg in aggregates:
            lo = index.get(agg.lo_id)
            hi = index.get(agg.hi_id)
            if lo is None or hi is None or agg.total <= 0:
                continue
            wins[lo, hi] += agg.wins_lo
            wins[hi, lo] += agg.wins_hi
        return wins

    def _smooth(self, wins: np.ndarray) -> np.ndarray:
        """Add the pseudocount to both directions of the configured pairs."""
        prior = self.config.prior
        if self.config.prior_scope == "all":
            mask = np.ones_like(wins)
        else:
            mask = ((wins + wins.T) > 0).astype(float)
        np.fill_diagonal(mask, 0.0)
        return wins + prior * mask

    def _fit(self, wins: np.ndarray) -> np.ndarray:
        """Run simultaneous MM updates until the budget or tolerance is hit."""
        n = wins.shape[0]
        games = wins + wins.T
        total_wins = wins.sum(axis=1)
        strengths = np.full(n, 1.0 / n)

        for iteration in range(self.config.iter_max):
            # Every term below reads only the previous vector
            win_prob = _win_probabilities(strengths)
            expected_wins = (games * win_prob).sum(axis=1)

            updated = strengths.copy()
            has_games = expected_wins > 0
            updated[has_games] = strengths[has_games] * total_wins[has_games] / expected_wins[has_games]
            updated = updated / updated.sum()

            change = float(np.max(np.abs(updated - strengths) / np.maximum(strengths, _TINY)))
            strengths = updated
            if change < self.config.tolerance:
                self.logger.debug(f"MM converged after {iteration + 1} iterations (max change {change:.2e})")
                break

        return strengths

    def fit_strengths(self, pool_ids: Iterable[int], aggregates: Iterable[PairAggregate]) -> dict[int, float]:
        """
        Fit normalised latent strengths (summing to 1) for the pool.

        Returns uniform strengths when there is no evidence among the pool.
        """
        ids = sorted(set(pool_ids))
        if not ids:
            return {}
        wins = self._win_matrix(ids, aggregates)
        if len(ids) < 2 or not wins.any():
            return {player_id: 1.0 / len(ids) for player_id in ids}

        strengths = self._fit(self._smooth(wins))
        return {player_id: float(strengths[i]) for i, player_id in enumerate(ids)}

    @override
    def compute_scores(self, pool_ids: Iterable[int], aggregates: Iterable[PairAggregate]) -> dict[int, float]:
        """
        Score each pool member as its mean win probability against the others.

        Pools under two players, or without any recorded comparison, score
        0.5 across the board.
        """
        ids = sorted(set(pool_ids))
        wins = self._win_matrix(ids, aggregates)
        if len(ids) < 2 or not wins.any():
            self.logger.debug(f"No pairwise evidence among {len(ids)} players, using neutral scores")
            return {player_id: NEUTRAL_SCORE for player_id in ids}

        strengths = self._fit(self._smooth(wins))
        win_prob = _win_probabilities(strengths)
        np.fill_diagonal(win_prob, 0.0)
        scores = win_prob.sum(axis=1) / (len(ids) - 1)

        self.logger.debug(f"Scored {len(ids)} players from {int(wins.sum())} recorded wins")
        return {player_id: float(scores[i]) for i, player_id in enumerate(ids)}
