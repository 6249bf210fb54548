"""
Selector implementations.

Provides implementations of the Selector interface for choosing which pair
of players to compare next.

Available implementations:
- ExposureSelector: favours under-exposed players, with a cooldown memory
  of recently shown pairs
"""

from .cooldown import CooldownMemory
from .exposure_selector import ExposureSelector

__all__ = ["CooldownMemory", "ExposureSelector"]
