"""
Voting session.

Coordinates store, ranker, selector and vote recorder. Every refresh reads a
fresh snapshot, recomputes scores and exposure from scratch and publishes
the result as a whole; the newest snapshot always wins.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from collections.abc import Callable

from .config import SessionConfig
from .exceptions import StoreReadError
from .interfaces import AggregateStore, Ranker, Selector
from .logging_config import get_logger
from .models import ALL_TEAMS, Player, RankedPlayer, RankingState, Snapshot, VoteEvent
from .pair_selectors.exposure_selector import ExposureSelector
from .rankers.bradley_terry_ranker import BradleyTerryRanker
from .rankers.exposure_tracker import ExposureTracker
from .recorder import VoteRecorder


def normalize_team(team: str | None) -> str | None:
    """Map the "All Teams" sentinel and blank values to no filter."""
    if team is None or not team.strip() or team == ALL_TEAMS:
        return None
    return team


class VotingSession:
    """
    One voter's view of the rankings.

    Cooldown and team filter are local to the session; the store is the only
    state shared with other sessions.
    """

    def __init__(
        self,
        store: AggregateStore,
        ranker: Ranker | None = None,
        selector: Selector | None = None,
        config: SessionConfig | None = None,
    ):
        """Initialize session with all components."""
        self.store: AggregateStore = store
        self.ranker: Ranker = ranker or BradleyTerryRanker()
        self.selector: Selector = selector or ExposureSelector()
        self.config: SessionConfig = config or SessionConfig()
        self.config.team_filter = normalize_team(self.config.team_filter)
        self.recorder: VoteRecorder = VoteRecorder(store, on_recorded=self._on_vote_recorded)

        self.current_pair: tuple[Player, Player] | None = None

        # Published state and refresh bookkeeping
        self._state: RankingState | None = None
        self._lock = threading.Lock()
        self._next_generation: int = 0
        self.failed_refreshes: int = 0
        self.discarded_refreshes: int = 0

        # Background refresh machinery
        self._executor: ThreadPoolExecutor | None = None
        self._stop_event = threading.Event()
        self._poll_thread: threading.Thread | None = None
        self._unsubscribe: Callable[[], None] | None = None

        self.logger = get_logger("session")

    # ---------- snapshot and recompute ----------

    def read_snapshot(self) -> Snapshot:
        """
        Read players and aggregates from the store.

        Aggregates naming an unknown player are dropped and logged.

        Raises:
            StoreReadError: If either read fails
        """
        players = self.store.list_items()
        aggregates = self.store.list_pair_aggregates()

        known = {player.player_id for player in players}
        kept = []
        for agg in aggregates:
            if agg.lo_id not in known or agg.hi_id not in known:
                self.logger.warning(f"Skipping pair aggregate {agg.key}: references an unknown player")
                continue
            kept.append(agg)
        return Snapshot(players=tuple(players), aggregates=tuple(kept))

    def _pool_ids(self, players: tuple[Player, ...], team: str | None) -> tuple[int, ...]:
        """Active players (or everyone, if nobody is active) on the filtered team."""
        eligible = [player for player in players if player.active is True]
        if not eligible:
            eligible = list(players)
        if team is not None:
            eligible = [player for player in eligible if player.team == team]
        return tuple(sorted(player.player_id for player in eligible))

    def _compute(self, snapshot: Snapshot, team: str | None, generation: int) -> RankingState:
        pool = self._pool_ids(snapshot.players, team)
        scores = self.ranker.compute_scores(pool, snapshot.aggregates)
        exposure = ExposureTracker.compute_exposure(pool, snapshot.aggregates)
        records = ExposureTracker.compute_records(pool, snapshot.aggregates)
        return RankingState(
            snapshot=snapshot,
            pool=pool,
            team_filter=team,
            scores=scores,
            exposure=exposure,
            records=records,
            generation=generation,
        )

    def _take_generation(self) -> int:
        with self._lock:
            self._next_generation += 1
            return self._next_generation

    def _publish(self, state: RankingState) -> bool:
        """Install state unless a later-started refresh already published."""
        while True:
            with self._lock:
                if self._state is not None and self._state.generation > state.generation:
                    self.discarded_refreshes += 1
                    self.logger.debug(
                        f"Discarding refresh {state.generation}: superseded by {self._state.generation}"
                    )
                    return False
                team = self.config.team_filter
                if state.team_filter == team:
                    self._state = state
                    break
            # Filter changed while computing; rescore this snapshot for the new pool
            state = self._compute(state.snapshot, team, state.generation)
        self.logger.debug(f"Published refresh {state.generation}: {len(state.pool)} players in pool")
        return True

    def refresh(self) -> bool:
        """
        Read a fresh snapshot and publish recomputed rankings.

        Returns:
            False if the store could not be read (the previous rankings stay
            in place), True otherwise
        """
        generation = self._take_generation()
        try:
            snapshot = self.read_snapshot()
        except StoreReadError as e:
            self.failed_refreshes += 1
            self.logger.error(f"Refresh {generation} failed, keeping last-known-good rankings: {e}")
            return False

        state = self._compute(snapshot, self.config.team_filter, generation)
        _ = self._publish(state)
        return True

    def request_refresh(self) -> Future[bool]:
        """Run refresh() on the session's thread pool."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="hoops-refresh"
            )
        future = self._executor.submit(self.refresh)
        future.add_done_callback(self._log_refresh_failure)
        return future

    def _log_refresh_failure(self, future: Future[bool]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.logger.error(f"Background refresh failed: {error!r}")

    @property
    def state(self) -> RankingState | None:
        with self._lock:
            return self._state

    def scores(self) -> dict[int, float]:
        state = self.state
        return dict(state.scores) if state else {}

    def exposure(self) -> dict[int, int]:
        state = self.state
        return dict(state.exposure) if state else {}

    # ---------- pool and pair selection ----------

    def set_team_filter(self, team: str | None) -> tuple[Player, Player] | None:
        """
        Switch the pool to `team` ("All Teams" or None for everyone).

        Rescores the cached snapshot without touching the store, resets the
        cooldown according to config.cooldown_on_pool_change and picks a new
        pair.
        """
        team = normalize_team(team)
        with self._lock:
            self.config.team_filter = team
            current = self._state
        self.logger.info(f"Team filter set to {team or ALL_TEAMS}")

        if current is not None:
            state = self._compute(current.snapshot, team, current.generation)
            _ = self._publish(state)
            if self.config.cooldown_on_pool_change == "prune":
                self.selector.reset_cooldown(state.pool)
            else:
                self.selector.reset_cooldown()
        else:
            self.selector.reset_cooldown()

        self.current_pair = None
        return self.next_pair()

    def next_pair(self) -> tuple[Player, Player] | None:
        """Pick and remember the next pair to show, or None if the pool is too small."""
        state = self.state
        if state is None:
            _ = self.refresh()
            state = self.state
            if state is None:
                return None

        picked = self.selector.select_pair(state.pool, state.exposure)
        if picked is None:
            self.current_pair = None
            return None

        players = {player.player_id: player for player in state.snapshot.players}
        self.current_pair = (players[picked[0]], players[picked[1]])
        return self.current_pair

    # ---------- voting ----------

    def _on_vote_recorded(self, vote: VoteEvent) -> None:
        _ = self.refresh()

    def vote(self, winner_id: int) -> bool:
        """
        Vote for winner_id in the current pair.

        Returns:
            True if the store counted the vote (rankings are refreshed and a
            new pair is picked), False otherwise (the pair stays for a retry)

        Raises:
            ValidationError: If winner_id is not in the current pair
        """
        if self.current_pair is None:
            self.logger.warning("No pair on display, ignoring vote")
            return False

        left, right = self.current_pair
        if not self.recorder.record(left.player_id, right.player_id, winner_id):
            return False

        _ = self.next_pair()
        return True

    def leaderboard(self) -> list[RankedPlayer]:
        """Pool members ordered by score (highest first), ties by name."""
        state = self.state
        if state is None:
            return []

        players = {player.player_id: player for player in state.snapshot.players}
        ordered = sorted(state.pool, key=lambda pid: (-state.scores[pid], players[pid].name))
        return [
            RankedPlayer(
                player=players[pid],
                rank=rank,
                score=state.scores[pid],
                exposure=state.exposure[pid],
                wins=state.records[pid].wins,
                losses=state.records[pid].losses,
            )
            for rank, pid in enumerate(ordered, 1)
        ]

    # ---------- background refresh ----------

    def _poll_loop(self) -> None:
        while not self._stop_event.wait(self.config.poll_interval):
            _ = self.refresh()

    def start(self) -> None:
        """Load rankings, then follow store changes by subscription or polling."""
        self._stop_event.clear()
        _ = self.refresh()

        self._unsubscribe = self.store.subscribe_new_votes(lambda: self.request_refresh())
        if self._unsubscribe is not None:
            self.logger.info("Subscribed to store vote notifications")
            return

        self._poll_thread = threading.Thread(target=self._poll_loop, name="hoops-poll", daemon=True)
        self._poll_thread.start()
        self.logger.info(f"Polling store every {self.config.poll_interval}s")

    def stop(self) -> None:
        """Stop background refreshes and release threads."""
        self._stop_event.set()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._poll_thread is not None:
            self._poll_thread.join()
            self._poll_thread = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "VotingSession":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
