"""
Abstract base classes defining the interfaces for the hoops voter system.

Store access is synchronous; concurrency lives in the session, which runs
refreshes on a thread pool and treats the store as the only shared state.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence

from .models import PairAggregate, PairKey, Player, VoteEvent


class AggregateStore(ABC):
    """Narrow interface to the durable table of per-pair win counts."""

    @abstractmethod
    def list_items(self, team: str | None = None) -> list[Player]:
        """Return all players, optionally only those on `team`.

        Raises:
            StoreReadError: If the store cannot be read
        """
        pass

    @abstractmethod
    def list_pair_aggregates(self, item_ids: Iterable[int] | None = None) -> list[PairAggregate]:
        """Return pair aggregates, optionally only those with both endpoints in item_ids.

        Rows violating the aggregate invariants are skipped and logged.

        Raises:
            StoreReadError: If the store cannot be read
        """
        pass

    @abstractmethod
    def record_vote(self, vote: VoteEvent) -> None:
        """
        Atomically add one win to the aggregate for vote.key.

        Concurrent calls for the same pair must all land.

        Raises:
            StoreWriteError: If the vote could not be counted
        """
        pass

    @abstractmethod
    def upsert_players(self, players: Iterable[Player]) -> int:
        """Insert or update players. Returns the number written."""
        pass

    def subscribe_new_votes(self, callback: Callable[[], None]) -> Callable[[], None] | None:
        """
        Register callback to run after every recorded vote.

        Returns an unsubscribe handle, or None when the store cannot push
        notifications and callers should poll instead.
        """
        return None


class Ranker(ABC):
    """Interface for turning pair aggregates into bounded scores."""

    @abstractmethod
    def compute_scores(self, pool_ids: Iterable[int], aggregates: Iterable[PairAggregate]) -> dict[int, float]:
        """
        Score every pool member in (0, 1).

        Pure function of its inputs: identical pool and aggregates give
        identical output.
        """
        pass


class Selector(ABC):
    """Interface for choosing the next pair to compare."""

    @abstractmethod
    def select_pair(self, pool_ids: Sequence[int], exposure: Mapping[int, int]) -> tuple[int, int] | None:
        """
        Select the next pair to show.

        Args:
            pool_ids: Eligible player ids
            exposure: Comparisons recorded per player

        Returns:
            Two distinct player ids, or None if the pool has fewer than two
        """
        pass

    @abstractmethod
    def reset_cooldown(self, keep_ids: Iterable[int] | None = None) -> None:
        """Forget recently shown pairs, or only those not within keep_ids."""
        pass

    @abstractmethod
    def recent_pairs(self) -> list[PairKey]:
        """Recently shown pair keys, most recent first."""
        pass


class Voter(ABC):
    """Interface for whoever decides a displayed comparison."""

    @abstractmethod
    def choose(self, left: Player, right: Player) -> int | None:
        """
        Return the winner's player_id, or None to skip this pair.

        Raises:
            KeyboardInterrupt: When the voter wants to stop the session
        """
        pass
