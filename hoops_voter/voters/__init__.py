"""
Voter implementations.
"""

from .console_voter import ConsoleVoter
from .sim_voter import SimulatedVoter

__all__ = [
    "ConsoleVoter",
    "SimulatedVoter",
]
