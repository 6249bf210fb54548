"""
Tests for the simulated and console voters.
"""

import random

import pytest

from hoops_voter.models import Player
from hoops_voter.voters.console_voter import ConsoleVoter, describe
from hoops_voter.voters.sim_voter import SimulatedVoter

STAR = Player(player_id=1, name="Star Player", team="bos", salary_text="$50.0M")
ROLE = Player(player_id=2, name="Role Player")


class TestSimulatedVoter:
    """Test SimulatedVoter choices."""

    def test_no_noise_picks_higher_value(self):
        voter = SimulatedVoter({1: 0.9, 2: 0.1}, noise=0.0)

        assert voter.choose(STAR, ROLE) == 1
        assert voter.choose(ROLE, STAR) == 1

    def test_ties_go_left(self):
        voter = SimulatedVoter({1: 0.5, 2: 0.5}, noise=0.0)

        assert voter.choose(ROLE, STAR) == 2

    def test_unknown_players_default_to_zero(self):
        voter = SimulatedVoter({1: 0.3}, noise=0.0)

        assert voter.choose(ROLE, STAR) == 1

    def test_noise_is_clamped(self):
        assert SimulatedVoter({}, noise=5.0).noise == 1.0
        assert SimulatedVoter({}, noise=-1.0).noise == 0.0

    def test_noisy_voter_mostly_agrees_with_ground_truth(self):
        # Arrange
        voter = SimulatedVoter({1: 0.9, 2: 0.3}, noise=0.2, rng=random.Random(5))

        # Act
        picks = [voter.choose(STAR, ROLE) for _ in range(200)]

        # Assert
        assert picks.count(1) > 180

    def test_seeded_voters_repeat(self):
        truth = {1: 0.5, 2: 0.45}
        first = SimulatedVoter(truth, noise=1.0, rng=random.Random(3))
        second = SimulatedVoter(truth, noise=1.0, rng=random.Random(3))

        assert [first.choose(STAR, ROLE) for _ in range(50)] == [second.choose(STAR, ROLE) for _ in range(50)]


class TestConsoleVoter:
    """Test ConsoleVoter prompt handling with scripted answers."""

    def make_voter(self, answers: list[str]) -> tuple[ConsoleVoter, list[str]]:
        replies = iter(answers)
        printed: list[str] = []
        return ConsoleVoter(input_fn=lambda _prompt: next(replies), output_fn=printed.append), printed

    def test_answers_map_to_players(self):
        voter, printed = self.make_voter(["1", " 2 "])

        assert voter.choose(STAR, ROLE) == 1
        assert voter.choose(STAR, ROLE) == 2
        assert "Star Player (BOS • $50.0M)" in printed[0]

    def test_skip_returns_none(self):
        voter, _ = self.make_voter(["S"])

        assert voter.choose(STAR, ROLE) is None

    def test_invalid_answer_asks_again(self):
        voter, printed = self.make_voter(["x", "", "2"])

        assert voter.choose(STAR, ROLE) == 2
        assert printed.count("Please answer 1, 2, s or q") == 2

    def test_quit_raises_keyboard_interrupt(self):
        voter, _ = self.make_voter(["q"])

        with pytest.raises(KeyboardInterrupt):
            _ = voter.choose(STAR, ROLE)

    def test_describe_without_details(self):
        assert describe(ROLE) == "Role Player"
