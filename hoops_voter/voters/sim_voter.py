"""
Simulated voter implementation.

Picks winners from latent values with noise, for demos and testing.
"""

import random
from typing import Dict

from typing_extensions import override

from ..interfaces import Voter
from ..models import Player


class SimulatedVoter(Voter):
    """
    Simulated voter for testing purposes.

    Compares ground truth values with added Gaussian noise.
    """

    def __init__(self, ground_truth: Dict[int, float], noise: float = 0.1, rng: random.Random | None = None):
        """
        Initialize simulated voter.

        Args:
            ground_truth: Dict mapping player_id to true trade value
            noise: Amount of noise to add (0-1, where 1 = full noise)
            rng: Random source, injectable for reproducible runs
        """
        self.ground_truth = ground_truth
        self.noise = max(0.0, min(1.0, noise))  # Clamp to [0, 1]
        self.rng = rng or random.Random()

    def _add_noise(self, value: float) -> float:
        """Add Gaussian noise scaled by the value's magnitude."""
        if self.noise == 0:
            return value
        return value + self.rng.gauss(0, abs(value) * self.noise)

    @override
    def choose(self, left: Player, right: Player) -> int | None:
        left_value = self._add_noise(self.ground_truth.get(left.player_id, 0.0))
        right_value = self._add_noise(self.ground_truth.get(right.player_id, 0.0))
        return left.player_id if left_value >= right_value else right.player_id
