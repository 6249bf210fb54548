"""
Exposure-biased selector implementation.

Favours players with the fewest recorded comparisons so the comparison
graph fills in evenly, while a cooldown memory keeps the same pair from
coming back immediately.
"""

import math
import random
from collections.abc import Iterable, Mapping, Sequence

from typing_extensions import override

from ..config import SamplerConfig
from ..interfaces import Selector
from ..logging_config import get_logger
from ..models import PairKey, canonical_pair
from .cooldown import CooldownMemory

# Module-level logger
logger = get_logger("exposure_selector")


class ExposureSelector(Selector):
    """Selector that prioritizes under-exposed players and avoids recent pairs."""

    def __init__(
        self,
        config: SamplerConfig | None = None,
        cooldown: CooldownMemory | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize exposure selector.

        Args:
            config: Sampling parameters
            cooldown: Recent-pair memory (default: new memory sized from config)
            rng: Random source, injectable for reproducible runs
        """
        self.config: SamplerConfig = config or SamplerConfig()
        self.cooldown: CooldownMemory = cooldown if cooldown is not None else CooldownMemory(self.config.cooldown_capacity)
        self.rng: random.Random = rng or random.Random()

    def _under_exposed(self, pool: list[int], exposure: Mapping[int, int]) -> list[int]:
        """Return the least exposed slice of the pool (at least two players)."""
        ordered = sorted(pool, key=lambda player_id: (exposure.get(player_id, 0), player_id))
        size = max(2, math.ceil(self.config.under_fraction * len(pool)))
        return ordered[:size]

    def _draw(self, pool: list[int], under: list[int]) -> tuple[int, int]:
        if self.rng.random() < self.config.explore_probability:
            first = self.rng.choice(under)
        else:
            first = self.rng.choice(pool)
        second = self.rng.choice(pool)
        while second == first:
            second = self.rng.choice(pool)
        return first, second

    @override
    def select_pair(self, pool_ids: Sequence[int], exposure: Mapping[int, int]) -> tuple[int, int] | None:
        """Return a pair biased towards under-exposed players, avoiding recent pairs."""
        pool = list(dict.fromkeys(pool_ids))
        if len(pool) < 2:
            logger.info(f"Pool too small for a comparison ({len(pool)} players)")
            return None

        under = self._under_exposed(pool, exposure)
        pair = self._draw(pool, under)
        attempts = 1
        while canonical_pair(*pair) in self.cooldown and attempts < self.config.max_retries:
            pair = self._draw(pool, under)
            attempts += 1

        key = canonical_pair(*pair)
        if key in self.cooldown:
            # Every draw collided; accept anyway so tiny pools never stall
            logger.debug(f"Cooldown exhausted after {attempts} attempts, reusing pair {key}")

        self.cooldown.push(key)
        logger.debug(f"Selected pair {pair} after {attempts} attempt(s)")
        return pair

    @override
    def reset_cooldown(self, keep_ids: Iterable[int] | None = None) -> None:
        """Clear the cooldown, or prune it down to pairs within keep_ids."""
        if keep_ids is None:
            self.cooldown.clear()
            logger.debug("Cooldown cleared")
            return
        dropped = self.cooldown.prune(keep_ids)
        logger.debug(f"Cooldown pruned: {dropped} stale pair(s) dropped")

    @override
    def recent_pairs(self) -> list[PairKey]:
        return self.cooldown.keys()
