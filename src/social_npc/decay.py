"""Retention decay. Relationship memories that stop mattering fade out."""

from __future__ import annotations

import math
import time

from social_npc.config import DEFAULT_FADE_THRESHOLD, DEFAULT_HALF_LIFE
from social_npc.models import Memory


def compute_retention(mem: Memory, now: float | None = None,
                      half_life: float = DEFAULT_HALF_LIFE) -> float:
    """How strongly a memory is still held.

    Formula: intensity * 2^(-age / half_life)
    The Memory record itself is never touched.
    """
    if now is None:
        now = time.time()

    elapsed = now - mem.created_at
    if elapsed <= 0:
        return max(0.0, mem.intensity)

    return max(0.0, mem.intensity * math.pow(2, -elapsed / half_life))


def split_faded(memories: list[Memory], now: float | None = None,
                half_life: float = DEFAULT_HALF_LIFE,
                threshold: float = DEFAULT_FADE_THRESHOLD) -> tuple[list[Memory], list[Memory]]:
    """Partition memories by retention, keeping their order.

    Returns:
        (kept, faded)
    """
    if now is None:
        now = time.time()
    kept = []
    faded = []

    for mem in memories:
        if compute_retention(mem, now, half_life) < threshold:
            faded.append(mem)
        else:
            kept.append(mem)

    return kept, faded
