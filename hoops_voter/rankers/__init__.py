"""
Ranker implementations.

Provides implementations of the Ranker interface for scoring players from
pairwise aggregates, plus the exposure tracker that runs alongside them.

Available implementations:
- BradleyTerryRanker: Bradley-Terry strengths fit by Minorize-Maximization,
  reported as mean win probability against the rest of the pool
- ExposureTracker: per-player comparison counts and win/loss records
"""

from .bradley_terry_ranker import BradleyTerryRanker
from .exposure_tracker import ExposureTracker

__all__ = ["BradleyTerryRanker", "ExposureTracker"]
