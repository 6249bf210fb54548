"""
Tunable configuration for rating, pair selection and sessions.
"""

from dataclasses import dataclass

from .exceptions import ConfigurationError

PRIOR_SCOPES = ("observed", "all")
COOLDOWN_POLICIES = ("clear", "prune")


@dataclass
class RatingConfig:
    """Configuration for the Bradley-Terry fit."""

    prior: float = 0.5  # pseudocount added to both win directions
    prior_scope: str = "observed"  # "observed" pairs only, or "all" pool pairs
    iter_max: int = 250
    tolerance: float = 1e-9  # early exit on max relative change; 0 disables

    def __post_init__(self):
        """Validate configuration."""
        if self.prior <= 0:
            raise ConfigurationError(f"prior must be positive to keep strengths finite, got {self.prior}")
        if self.prior_scope not in PRIOR_SCOPES:
            raise ConfigurationError(f"prior_scope must be one of {PRIOR_SCOPES}, got {self.prior_scope!r}")
        if self.iter_max <= 0:
            raise ConfigurationError(f"iter_max must be positive, got {self.iter_max}")
        if self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be non-negative, got {self.tolerance}")


@dataclass
class SamplerConfig:
    """Configuration for exposure-biased pair selection."""

    explore_probability: float = 0.7  # chance the first pick comes from the under-exposed slice
    under_fraction: float = 0.25
    max_retries: int = 50
    cooldown_capacity: int = 50

    def __post_init__(self):
        """Validate configuration."""
        if not (0.0 <= self.explore_probability <= 1.0):
            raise ConfigurationError(f"explore_probability must be in [0, 1], got {self.explore_probability}")
        if not (0.0 < self.under_fraction <= 1.0):
            raise ConfigurationError(f"under_fraction must be in (0, 1], got {self.under_fraction}")
        if self.max_retries <= 0:
            raise ConfigurationError(f"max_retries must be positive, got {self.max_retries}")
        if self.cooldown_capacity < 0:
            raise ConfigurationError(f"cooldown_capacity must be non-negative, got {self.cooldown_capacity}")


@dataclass
class SessionConfig:
    """Configuration for a voting session."""

    team_filter: str | None = None
    poll_interval: float = 10.0  # seconds, used when the store cannot push
    cooldown_on_pool_change: str = "clear"
    max_workers: int = 2  # refresh thread pool size

    def __post_init__(self):
        """Validate configuration."""
        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.cooldown_on_pool_change not in COOLDOWN_POLICIES:
            raise ConfigurationError(
                f"cooldown_on_pool_change must be one of {COOLDOWN_POLICIES}, got {self.cooldown_on_pool_change!r}"
            )
        if self.max_workers <= 0:
            raise ConfigurationError(f"max_workers must be positive, got {self.max_workers}")
