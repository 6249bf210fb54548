"""
Core dataclasses for the hoops voter system.

Defines Player, PairAggregate, VoteEvent and the snapshot/ranking result
models with validation.
"""

import time
from dataclasses import dataclass, field

from .exceptions import ValidationError

PairKey = tuple[int, int]

ALL_TEAMS = "All Teams"

TEAMS = (
    ALL_TEAMS, "ATL", "BOS", "BKN", "CHA", "CHI", "CLE", "DAL", "DEN", "DET", "GSW", "HOU", "IND",
    "LAC", "LAL", "MEM", "MIA", "MIL", "MIN", "NOP", "NYK", "OKC", "ORL", "PHI", "PHX", "POR", "SAC",
    "SAS", "TOR", "UTA", "WAS",
)


def canonical_pair(a: int, b: int) -> PairKey:
    """Return the unordered pair (a, b) ordered so the smaller id comes first."""
    if a == b:
        raise ValidationError(f"A pair needs two distinct players, got {a} twice")
    return (a, b) if a < b else (b, a)


@dataclass(frozen=True)
class Player:
    """A rateable player. Display attributes are opaque to the ranking core."""

    player_id: int
    name: str
    team: str | None = None
    headshot_url: str | None = None
    salary_text: str | None = None
    active: bool | None = True

    def __post_init__(self) -> None:
        """Validate player data."""
        if self.player_id < 0:
            raise ValidationError(f"player_id must be non-negative, got {self.player_id}")
        if not self.name or not self.name.strip():
            raise ValidationError("name cannot be empty")

    @property
    def initials(self) -> str:
        """Up to two initials, used as an avatar placeholder."""
        parts = self.name.split()[:2]
        return "".join(part[0] for part in parts).upper()


@dataclass(frozen=True)
class PairAggregate:
    """Accumulated win counts for one canonical pair (lo_id < hi_id)."""

    lo_id: int
    hi_id: int
    wins_lo: int = 0
    wins_hi: int = 0
    total: int = 0

    def __post_init__(self) -> None:
        """Validate the pair invariants."""
        if self.lo_id >= self.hi_id:
            raise ValidationError(f"lo_id must be smaller than hi_id, got ({self.lo_id}, {self.hi_id})")
        if self.wins_lo < 0 or self.wins_hi < 0:
            raise ValidationError(f"Win counts must be non-negative, got ({self.wins_lo}, {self.wins_hi})")
        if self.total != self.wins_lo + self.wins_hi:
            raise ValidationError(
                f"total must equal wins_lo + wins_hi for pair ({self.lo_id}, {self.hi_id}): "
                f"{self.total} != {self.wins_lo} + {self.wins_hi}"
            )

    @property
    def key(self) -> PairKey:
        return (self.lo_id, self.hi_id)

    def other(self, player_id: int) -> int:
        """Return the opponent of player_id in this pair."""
        if player_id == self.lo_id:
            return self.hi_id
        if player_id == self.hi_id:
            return self.lo_id
        raise KeyError(f"Player {player_id} is not part of pair {self.key}")

    def wins_for(self, player_id: int) -> int:
        """Return how many times player_id won this pairing."""
        if player_id == self.lo_id:
            return self.wins_lo
        if player_id == self.hi_id:
            return self.wins_hi
        raise KeyError(f"Player {player_id} is not part of pair {self.key}")

    def with_win(self, winner_id: int) -> "PairAggregate":
        """Return a copy with one more win for winner_id."""
        if winner_id == self.lo_id:
            return PairAggregate(self.lo_id, self.hi_id, self.wins_lo + 1, self.wins_hi, self.total + 1)
        if winner_id == self.hi_id:
            return PairAggregate(self.lo_id, self.hi_id, self.wins_lo, self.wins_hi + 1, self.total + 1)
        raise KeyError(f"Player {winner_id} is not part of pair {self.key}")


@dataclass(frozen=True)
class VoteEvent:
    """A single completed comparison as shown on screen."""

    left_id: int
    right_id: int
    winner_id: int
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate vote data."""
        if self.left_id == self.right_id:
            raise ValidationError(f"Cannot vote on a player against itself ({self.left_id})")
        if self.winner_id not in (self.left_id, self.right_id):
            raise ValidationError(
                f"winner_id {self.winner_id} is not one of ({self.left_id}, {self.right_id})"
            )

    @property
    def key(self) -> PairKey:
        return canonical_pair(self.left_id, self.right_id)

    @property
    def winner_is_lo(self) -> bool:
        return self.winner_id == self.key[0]


@dataclass(frozen=True)
class Snapshot:
    """Immutable read of the store: every player and every pair aggregate."""

    players: tuple[Player, ...]
    aggregates: tuple[PairAggregate, ...]


@dataclass(frozen=True)
class PlayerRecord:
    """Raw win/loss tally for a player."""

    wins: int = 0
    losses: int = 0

    @property
    def votes(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        if self.votes == 0:
            return 0.5
        return self.wins / self.votes


@dataclass(frozen=True)
class RankedPlayer:
    """One leaderboard row."""

    player: Player
    rank: int
    score: float
    exposure: int
    wins: int
    losses: int


@dataclass(frozen=True)
class RankingState:
    """Result set published by a refresh. Always replaced wholesale."""

    snapshot: Snapshot
    pool: tuple[int, ...]
    scores: dict[int, float]
    exposure: dict[int, int]
    records: dict[int, PlayerRecord]
    team_filter: str | None = None
    generation: int = 0
