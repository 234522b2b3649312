"""Memory consolidation. Near-identical memories merge into a stronger one."""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Iterable

from social_npc.models import Memory

CONSOLIDATION_BONUS = 0.1


def text_similarity(a: str, b: str) -> float:
    """Case-insensitive similarity ratio in [0, 1] (difflib, no deps)."""
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


def find_duplicate(text: str, existing: Iterable[str],
                   threshold: float = 1.0) -> str | None:
    """First entry of existing that text duplicates, or None.

    threshold=1.0 only matches identical strings.
    """
    for candidate in existing:
        if candidate == text:
            return candidate
        if threshold < 1.0 and text_similarity(candidate, text) >= threshold:
            return candidate
    return None


def merge_memories(a: Memory, b: Memory) -> Memory:
    """Merge two memories into one. The stronger survives, reinforced.

    - Content and tag come from the more intense memory (a wins ties)
    - Intensity gets a small bonus, capped at 1.0 but never lowered
    - Keeps the earlier created_at
    """
    base = a if a.intensity >= b.intensity else b
    strongest = max(a.intensity, b.intensity)

    return Memory(
        content=base.content,
        emotional_tag=base.emotional_tag,
        intensity=max(strongest, min(1.0, strongest + CONSOLIDATION_BONUS)),
        created_at=min(a.created_at, b.created_at),
    )


def consolidate(memories: list[Memory],
                threshold: float = 0.85) -> tuple[list[Memory], int]:
    """Fold similar memories into the earliest one they resemble.

    Chronological order of the survivors is preserved.

    Returns:
        (consolidated_memories, merge_count)
    """
    if len(memories) < 2:
        return list(memories), 0

    result: list[Memory] = []
    merged = 0
    for mem in memories:
        for i, kept in enumerate(result):
            if text_similarity(kept.content, mem.content) >= threshold:
                result[i] = merge_memories(kept, mem)
                merged += 1
                break
        else:
            result.append(mem)

    return result, merged
