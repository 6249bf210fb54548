"""
Hoops Voter - Pairwise Trade-Value Ranking

Ranks basketball players from head-to-head votes with a Bradley-Terry model
fit by Minorize-Maximization, choosing the next pair so that under-exposed
players get compared first.
"""

from .models import Player, PairAggregate, VoteEvent, RankedPlayer
from .interfaces import AggregateStore, Ranker, Selector, Voter
from .session import VotingSession
from .config import RatingConfig, SamplerConfig, SessionConfig

__version__ = "0.1.0"
__all__ = [
    "Player",
    "PairAggregate",
    "VoteEvent",
    "RankedPlayer",
    "AggregateStore",
    "Ranker",
    "Selector",
    "Voter",
    "VotingSession",
    "RatingConfig",
    "SamplerConfig",
    "SessionConfig",
]
