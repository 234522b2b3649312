"""Tuning knobs for the memory hierarchy. One frozen config per MemorySystem."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_RECENT_CAPACITY = 10
DEFAULT_SENTIMENT_BOUNDS = (-1.0, 1.0)
DEFAULT_BOND_BOUNDS = (-1.0, 1.0)
# Bond moves at a fraction of the raw delta: closeness grows slower than mood
DEFAULT_BOND_DAMPENING = 0.25

# Half-life of a relationship memory's retention, in seconds
DEFAULT_HALF_LIFE = 7 * 24 * 3600  # 7 days
DEFAULT_FADE_THRESHOLD = 0.05
DEFAULT_CORE_THRESHOLD = 0.8
DEFAULT_CONSOLIDATION_THRESHOLD = 0.85


@dataclass(frozen=True)
class MemoryConfig:
    """Capacities, clamp bounds and fading parameters.

    relationship_capacity=None keeps every relationship memory; an int turns
    the ledger into a FIFO ring like recent_events.
    core_similarity=1.0 rejects only exact duplicates on promotion; lower it
    to also reject near-duplicates.
    """

    recent_capacity: int = DEFAULT_RECENT_CAPACITY
    relationship_capacity: int | None = None
    sentiment_bounds: tuple[float, float] = DEFAULT_SENTIMENT_BOUNDS
    bond_bounds: tuple[float, float] = DEFAULT_BOND_BOUNDS
    bond_dampening: float = DEFAULT_BOND_DAMPENING
    half_life: float = DEFAULT_HALF_LIFE
    fade_threshold: float = DEFAULT_FADE_THRESHOLD
    core_threshold: float = DEFAULT_CORE_THRESHOLD
    consolidation_threshold: float = DEFAULT_CONSOLIDATION_THRESHOLD
    core_similarity: float = 1.0

    def __post_init__(self) -> None:
        if self.recent_capacity < 1:
            raise ValueError("recent_capacity must be at least 1")
        if self.relationship_capacity is not None and self.relationship_capacity < 1:
            raise ValueError("relationship_capacity must be at least 1 or None")
        for name in ("sentiment_bounds", "bond_bounds"):
            low, high = getattr(self, name)
            if low >= high:
                raise ValueError(f"{name} must be (low, high) with low < high")
        if not 0.0 < self.bond_dampening <= 1.0:
            raise ValueError("bond_dampening must be in (0, 1]")
        if self.half_life <= 0:
            raise ValueError("half_life must be positive")


def clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))
