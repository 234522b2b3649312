"""RelationshipMemory: everything one NPC remembers and feels about another."""

from __future__ import annotations

import math
import time
from collections import deque
from typing import Any

from loguru import logger

from social_npc.config import MemoryConfig, clamp
from social_npc.consolidate import consolidate, find_duplicate
from social_npc.decay import split_faded
from social_npc.models import FadeDecision, Memory


class RelationshipMemory:
    """Ledger of memories about one character, with sentiment and bond.

    sentiment is the current mood toward the character and swings per
    interaction. bond_strength is depth of the relationship and moves at
    config.bond_dampening times the rate. Both are clamped to their bounds
    and only change through update_sentiment / update_bond.
    """

    def __init__(self, character_id: str, config: MemoryConfig | None = None) -> None:
        self._character_id = character_id
        self._config = config or MemoryConfig()
        self._memories: deque[Memory] = deque(maxlen=self._config.relationship_capacity)
        self._sentiment = 0.0
        self._bond = 0.0
        self._core_memories: list[str] = []
        self.immediate_context = ""
        self.long_term_summary = ""

    # ── queries ────────────────────────────────────────────────────────

    @property
    def character_id(self) -> str:
        return self._character_id

    @property
    def sentiment(self) -> float:
        return self._sentiment

    @property
    def bond_strength(self) -> float:
        return self._bond

    @property
    def memories(self) -> tuple[Memory, ...]:
        """Chronological, oldest first."""
        return tuple(self._memories)

    @property
    def core_memories(self) -> tuple[str, ...]:
        return tuple(self._core_memories)

    def latest(self, n: int = 1) -> list[Memory]:
        if n <= 0:
            return []
        return list(self._memories)[-n:]

    # ── mutation ───────────────────────────────────────────────────────

    def add_memory(self, memory: Memory) -> Memory | None:
        """Append a memory. Returns the one evicted by a configured cap, if any."""
        evicted = None
        if self._memories.maxlen is not None and len(self._memories) == self._memories.maxlen:
            evicted = self._memories[0]
            logger.debug(f"{self._character_id}: evicting oldest memory {evicted.content!r}")
        self._memories.append(memory)
        return evicted

    def update_sentiment(self, delta: float) -> float:
        """Shift sentiment by delta, clamped. Zero or non-finite deltas are ignored."""
        if delta == 0 or not math.isfinite(delta):
            return self._sentiment
        old = self._sentiment
        self._sentiment = clamp(old + delta, self._config.sentiment_bounds)
        logger.debug(f"{self._character_id}: sentiment {old:+.2f} -> {self._sentiment:+.2f} ({delta:+.2f})")
        return self._sentiment

    def update_bond(self, delta: float) -> float:
        if delta == 0 or not math.isfinite(delta):
            return self._bond
        old = self._bond
        self._bond = clamp(old + delta * self._config.bond_dampening, self._config.bond_bounds)
        logger.debug(f"{self._character_id}: bond {old:+.2f} -> {self._bond:+.2f} ({delta:+.2f} raw)")
        return self._bond

    def set_context(self, text: str) -> None:
        self.immediate_context = text

    def set_summary(self, text: str) -> None:
        self.long_term_summary = text

    def promote_to_core(self, text: str) -> bool:
        """Keep a durable fact about this character. Duplicates are skipped."""
        if find_duplicate(text, self._core_memories, self._config.core_similarity) is not None:
            logger.debug(f"{self._character_id}: core memory already held: {text!r}")
            return False
        self._core_memories.append(text)
        return True

    def consolidate(self, threshold: float | None = None) -> int:
        """Merge near-duplicate memories. Returns how many merges happened."""
        if threshold is None:
            threshold = self._config.consolidation_threshold
        merged_list, merged = consolidate(list(self._memories), threshold)
        if merged:
            self._memories = deque(merged_list, maxlen=self._config.relationship_capacity)
            logger.debug(f"{self._character_id}: consolidated {merged} memories")
        return merged

    def fade(self, now: float | None = None) -> list[FadeDecision]:
        """Drop memories whose retention fell under config.fade_threshold.

        A faded memory that was intense enough (config.core_threshold)
        survives as text in core_memories.
        """
        if now is None:
            now = time.time()
        kept, faded = split_faded(
            list(self._memories), now,
            half_life=self._config.half_life,
            threshold=self._config.fade_threshold,
        )
        if not faded:
            return []

        self._memories = deque(kept, maxlen=self._config.relationship_capacity)
        decisions = []
        for mem in faded:
            forms_core = mem.intensity >= self._config.core_threshold
            if forms_core:
                self.promote_to_core(mem.content)
            decisions.append(FadeDecision(self._character_id, mem, forms_core))
        logger.debug(f"{self._character_id}: {len(faded)} memories faded")
        return decisions

    # ── snapshot ───────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self._character_id,
            "memories": [m.to_dict() for m in self._memories],
            "sentiment": self._sentiment,
            "bond_strength": self._bond,
            "immediate_context": self.immediate_context,
            "long_term_summary": self.long_term_summary,
            "core_memories": list(self._core_memories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any],
                  config: MemoryConfig | None = None) -> RelationshipMemory:
        rel = cls(data["character_id"], config)
        for raw in data.get("memories", []):
            rel._memories.append(Memory.from_dict(raw))
        rel._sentiment = clamp(float(data.get("sentiment", 0.0)), rel._config.sentiment_bounds)
        rel._bond = clamp(float(data.get("bond_strength", 0.0)), rel._config.bond_bounds)
        rel.immediate_context = data.get("immediate_context", "")
        rel.long_term_summary = data.get("long_term_summary", "")
        rel._core_memories = list(data.get("core_memories", []))
        return rel

    def __repr__(self) -> str:
        return (f"RelationshipMemory({self._character_id!r}, "
                f"sentiment={self._sentiment:+.2f}, bond={self._bond:+.2f}, "
                f"memories={len(self._memories)})")
