"""
JSONL vote log implementation.

Append-only record of every counted vote. Not needed on the read path, but
lets pair aggregates be rebuilt from scratch.
"""

import json
import typing
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from ..exceptions import ValidationError
from ..logging_config import get_logger
from ..models import PairAggregate, PairKey, VoteEvent

# Module-level logger
logger = get_logger("jsonl_vote_log")


class JSONLVoteLog:
    """
    JSONL-based vote log.

    One JSON object per line with left_id, right_id, winner_id and timestamp.
    Corrupted lines are skipped on load.
    """

    path: Path

    def __init__(self, path: Path):
        """
        Initialize JSONL vote log.

        Args:
            path: Path to the JSONL file (created on first append)
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"JSONL vote log initialized: {self.path}")

    def append(self, vote: VoteEvent) -> None:
        """Append one vote to the log."""
        data = {
            "left_id": vote.left_id,
            "right_id": vote.right_id,
            "winner_id": vote.winner_id,
            "timestamp": vote.timestamp,
        }
        with open(self.path, "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.write("\n")
        logger.debug(f"Appended vote {vote.key} -> {vote.winner_id} to {self.path}")

    def load_votes(self) -> Iterator[VoteEvent]:
        """Yield every valid vote in file order."""
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = typing.cast(dict[str, Any], json.loads(line))
                    assert isinstance(data, dict), "vote must be a JSON object"
                    for name in ("left_id", "right_id", "winner_id"):
                        assert isinstance(data.get(name), int), f"{name} must be an integer"

                    timestamp = data.get("timestamp", 0.0)
                    assert isinstance(timestamp, (int, float)), "timestamp must be a number"

                    yield VoteEvent(
                        left_id=data["left_id"],
                        right_id=data["right_id"],
                        winner_id=data["winner_id"],
                        timestamp=float(timestamp),
                    )
                except (json.JSONDecodeError, AssertionError, ValidationError) as e:
                    logger.warning(f"Skipping invalid vote on line {line_no} of {self.path}: {e}")
                    continue

    def count(self) -> int:
        """Get number of stored lines that hold a vote."""
        return sum(1 for _ in self.load_votes())


def rebuild_aggregates(votes: Iterable[VoteEvent]) -> list[PairAggregate]:
    """Fold a vote stream into pair aggregates, ordered by pair key."""
    aggregates = dict[PairKey, PairAggregate]()
    for vote in votes:
        key = vote.key
        current = aggregates.get(key) or PairAggregate(*key)
        aggregates[key] = current.with_win(vote.winner_id)
    return [aggregates[key] for key in sorted(aggregates)]
