"""
Tests for core models and configuration validation.
"""

import pytest

from hoops_voter.config import RatingConfig, SamplerConfig, SessionConfig
from hoops_voter.exceptions import ConfigurationError, ValidationError
from hoops_voter.models import PairAggregate, Player, VoteEvent, canonical_pair


class TestModels:
    """Test model invariants."""

    def test_canonical_pair_orders_ids(self) -> None:
        assert canonical_pair(9, 3) == (3, 9)
        assert canonical_pair(3, 9) == (3, 9)
        with pytest.raises(ValidationError):
            _ = canonical_pair(4, 4)

    @pytest.mark.parametrize(
        "lo_id, hi_id, wins_lo, wins_hi, total",
        [
            (2, 1, 1, 0, 1),  # lo must be smaller
            (1, 1, 1, 0, 1),  # distinct endpoints
            (1, 2, -1, 1, 0),  # non-negative wins
            (1, 2, 2, 2, 5),  # total mismatch
        ],
    )
    def test_pair_aggregate_invariants(self, lo_id: int, hi_id: int, wins_lo: int, wins_hi: int, total: int) -> None:
        with pytest.raises(ValidationError):
            _ = PairAggregate(lo_id, hi_id, wins_lo, wins_hi, total)

    def test_pair_aggregate_helpers(self) -> None:
        agg = PairAggregate(1, 2, 3, 4, 7)

        assert agg.key == (1, 2)
        assert agg.wins_for(1) == 3
        assert agg.wins_for(2) == 4
        assert agg.other(1) == 2
        assert agg.other(2) == 1
        assert agg.with_win(2) == PairAggregate(1, 2, 3, 5, 8)
        with pytest.raises(KeyError):
            _ = agg.wins_for(3)

    def test_vote_event_validation(self) -> None:
        vote = VoteEvent(left_id=8, right_id=5, winner_id=8)

        assert vote.key == (5, 8)
        assert vote.winner_is_lo is False
        with pytest.raises(ValidationError):
            _ = VoteEvent(left_id=8, right_id=5, winner_id=6)
        with pytest.raises(ValidationError):
            _ = VoteEvent(left_id=5, right_id=5, winner_id=5)

    def test_player_validation_and_initials(self) -> None:
        assert Player(player_id=1, name="shai gilgeous-alexander").initials == "SG"
        with pytest.raises(ValidationError):
            _ = Player(player_id=1, name="  ")
        with pytest.raises(ValidationError):
            _ = Player(player_id=-1, name="Nobody")


class TestConfig:
    """Test configuration validation."""

    def test_defaults_are_valid(self) -> None:
        assert RatingConfig().prior == 0.5
        assert SamplerConfig().cooldown_capacity == 50
        assert SessionConfig().poll_interval == 10.0

    @pytest.mark.parametrize(
        "kwargs",
        [{"prior": -0.1}, {"prior": 0.0}, {"prior_scope": "everywhere"}, {"iter_max": 0}, {"tolerance": -1.0}],
    )
    def test_invalid_rating_config(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError):
            _ = RatingConfig(**kwargs)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "kwargs",
        [{"explore_probability": 1.5}, {"under_fraction": 0.0}, {"max_retries": 0}, {"cooldown_capacity": -1}],
    )
    def test_invalid_sampler_config(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError):
            _ = SamplerConfig(**kwargs)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "kwargs",
        [{"poll_interval": 0}, {"cooldown_on_pool_change": "keep"}, {"max_workers": 0}],
    )
    def test_invalid_session_config(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError):
            _ = SessionConfig(**kwargs)  # type: ignore[arg-type]
