"""
Tests for ExposureTracker.
"""

from hoops_voter.models import PairAggregate, PlayerRecord
from hoops_voter.rankers.exposure_tracker import ExposureTracker


class TestExposureTracker:
    """Test exposure and record tallies."""

    def test_exposure_sums_totals_per_player(self) -> None:
        # Arrange
        aggregates = [PairAggregate(1, 2, 3, 1, 4), PairAggregate(1, 3, 0, 2, 2), PairAggregate(2, 3, 5, 5, 10)]

        # Act
        exposure = ExposureTracker.compute_exposure([1, 2, 3], aggregates)

        # Assert
        assert exposure == {1: 6, 2: 14, 3: 12}

    def test_unseen_players_have_zero_exposure(self) -> None:
        exposure = ExposureTracker.compute_exposure([1, 2, 9], [PairAggregate(1, 2, 1, 0, 1)])

        assert exposure == {1: 1, 2: 1, 9: 0}

    def test_keys_restricted_to_pool(self) -> None:
        """Comparisons against players outside the pool still count for pool members."""
        exposure = ExposureTracker.compute_exposure([1], [PairAggregate(1, 2, 2, 2, 4)])

        assert exposure == {1: 4}

    def test_records_split_wins_and_losses(self) -> None:
        # Arrange
        aggregates = [PairAggregate(1, 2, 3, 1, 4), PairAggregate(1, 3, 0, 2, 2)]

        # Act
        records = ExposureTracker.compute_records([1, 2, 3, 4], aggregates)

        # Assert
        assert records[1] == PlayerRecord(wins=3, losses=3)
        assert records[2] == PlayerRecord(wins=1, losses=3)
        assert records[3] == PlayerRecord(wins=2, losses=0)
        assert records[4].votes == 0
        assert records[4].win_rate == 0.5
        assert records[1].win_rate == 0.5
        assert records[3].win_rate == 1.0
