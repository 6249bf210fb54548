"""
Console voter implementation.

Asks a person on the terminal which player has the higher trade value.
"""

from collections.abc import Callable

from typing_extensions import override

from ..interfaces import Voter
from ..models import Player


def describe(player: Player) -> str:
    """One-line label: name, team and salary when known."""
    details = " • ".join(part for part in ((player.team or "").upper(), player.salary_text or "") if part)
    return f"{player.name} ({details})" if details else player.name


class ConsoleVoter(Voter):
    """Prompts for 1 (left), 2 (right), s (skip) or q (quit)."""

    def __init__(self, input_fn: Callable[[str], str] = input, output_fn: Callable[[str], None] = print):
        self.input_fn = input_fn
        self.output_fn = output_fn

    @override
    def choose(self, left: Player, right: Player) -> int | None:
        self.output_fn(f"\n  [1] {describe(left)}\n  [2] {describe(right)}")
        while True:
            answer = self.input_fn("Who has more trade value? [1/2/s/q] ").strip().lower()
            if answer == "1":
                return left.player_id
            if answer == "2":
                return right.player_id
            if answer == "s":
                return None
            if answer == "q":
                raise KeyboardInterrupt
            self.output_fn("Please answer 1, 2, s or q")
