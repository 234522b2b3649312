"""MemorySystem: the per-NPC memory hierarchy.

Tiers:
    immediate_context  : what is going on right now, replaced wholesale
    recent_events      : bounded FIFO of the NPC's own recent events
    core_memories      : unbounded, never evicted, explicitly promoted
    relationships      : one RelationshipMemory per other character
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from loguru import logger

from social_npc.config import MemoryConfig
from social_npc.consolidate import find_duplicate
from social_npc.models import Memory, Reflection
from social_npc.relationship import RelationshipMemory


@dataclass
class RelationshipUpdate:
    """Changes to one relationship, usually parsed from model output."""

    immediate_context: str | None = None
    new_memory: Memory | None = None
    sentiment_delta: float = 0.0
    bond_delta: float = 0.0
    long_term_summary: str | None = None
    core_memory: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelationshipUpdate:
        raw_memory = data.get("new_memory")
        return cls(
            immediate_context=data.get("immediate_context"),
            new_memory=Memory.from_dict(raw_memory) if raw_memory else None,
            sentiment_delta=float(data.get("sentiment_delta") or 0.0),
            bond_delta=float(data.get("bond_delta") or 0.0),
            long_term_summary=data.get("long_term_summary"),
            core_memory=data.get("core_memory"),
        )


@dataclass
class MemoryUpdate:
    """A batch of changes to one NPC's memory after something happened."""

    immediate_context: str | None = None
    new_self_event: str | None = None
    new_core_memory: str | None = None
    relationship_updates: dict[str, RelationshipUpdate] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryUpdate:
        return cls(
            immediate_context=data.get("immediate_context"),
            new_self_event=data.get("new_self_event"),
            new_core_memory=data.get("new_core_memory"),
            relationship_updates={
                name: RelationshipUpdate.from_dict(raw)
                for name, raw in (data.get("relationship_updates") or {}).items()
            },
        )


class MemorySystem:
    """One NPC's memory. Single-threaded; no internal locking.

    API:
        memory.set_context(text)                : what is happening now
        memory.add_self_event(text)             : something I did or saw
        memory.promote_to_core(text)            : keep this forever
        memory.get_or_create_relationship(id)   : my ledger about someone
        memory.reflect()                        : consolidate + fade
    """

    def __init__(self, immediate_context: str = "",
                 config: MemoryConfig | None = None) -> None:
        self._config = config or MemoryConfig()
        self._immediate_context = immediate_context
        self._recent_events: deque[str] = deque(maxlen=self._config.recent_capacity)
        self._core_memories: list[str] = []
        self._relationships: dict[str, RelationshipMemory] = {}

    @classmethod
    def with_context(cls, text: str, config: MemoryConfig | None = None) -> MemorySystem:
        return cls(immediate_context=text, config=config)

    # ── queries ────────────────────────────────────────────────────────

    @property
    def config(self) -> MemoryConfig:
        return self._config

    @property
    def capacity(self) -> int:
        return self._config.recent_capacity

    @property
    def immediate_context(self) -> str:
        return self._immediate_context

    @property
    def recent_events(self) -> tuple[str, ...]:
        """Oldest first."""
        return tuple(self._recent_events)

    @property
    def core_memories(self) -> tuple[str, ...]:
        return tuple(self._core_memories)

    @property
    def relationships(self) -> Mapping[str, RelationshipMemory]:
        return MappingProxyType(self._relationships)

    def relationship(self, character_id: str) -> RelationshipMemory | None:
        """Lookup without creating."""
        return self._relationships.get(character_id)

    # ── self memories ──────────────────────────────────────────────────

    def set_context(self, text: str) -> None:
        self._immediate_context = text

    def add_self_event(self, text: str) -> str | None:
        """Append a recent event. Returns the evicted oldest event, if any.

        Eviction is a plain discard; nothing is promoted automatically.
        """
        evicted = None
        if len(self._recent_events) == self._recent_events.maxlen:
            evicted = self._recent_events[0]
            logger.debug(f"recent event evicted: {evicted!r}")
        self._recent_events.append(text)
        return evicted

    def promote_to_core(self, description: str) -> bool:
        """Keep a memory permanently. False if it is already held."""
        if find_duplicate(description, self._core_memories, self._config.core_similarity) is not None:
            logger.debug(f"core memory already held: {description!r}")
            return False
        self._core_memories.append(description)
        return True

    # ── relationships ──────────────────────────────────────────────────

    def get_or_create_relationship(self, character_id: str) -> RelationshipMemory:
        rel = self._relationships.get(character_id)
        if rel is None:
            rel = RelationshipMemory(character_id, self._config)
            self._relationships[character_id] = rel
            logger.debug(f"new relationship: {character_id}")
        return rel

    def remove_relationship(self, character_id: str) -> bool:
        return self._relationships.pop(character_id, None) is not None

    # ── batch updates ──────────────────────────────────────────────────

    def apply_update(self, update: MemoryUpdate) -> None:
        """Apply a MemoryUpdate through the regular mutation operations."""
        if update.immediate_context is not None:
            self.set_context(update.immediate_context)
        if update.new_self_event:
            self.add_self_event(update.new_self_event)
        if update.new_core_memory:
            self.promote_to_core(update.new_core_memory)

        for character_id, rel_update in update.relationship_updates.items():
            rel = self.get_or_create_relationship(character_id)
            if rel_update.immediate_context is not None:
                rel.set_context(rel_update.immediate_context)
            if rel_update.new_memory is not None:
                rel.add_memory(rel_update.new_memory)
            rel.update_sentiment(rel_update.sentiment_delta)
            rel.update_bond(rel_update.bond_delta)
            if rel_update.long_term_summary is not None:
                rel.set_summary(rel_update.long_term_summary)
            if rel_update.core_memory:
                rel.promote_to_core(rel_update.core_memory)

    def reflect(self, now: float | None = None) -> Reflection:
        """Consolidate, then fade, every relationship ledger."""
        if now is None:
            now = time.time()
        reflection = Reflection()
        for rel in self._relationships.values():
            reflection.merged += rel.consolidate()
            reflection.faded.extend(rel.fade(now))
        return reflection

    # ── snapshot ───────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "immediate_context": self._immediate_context,
            "recent_events": list(self._recent_events),
            "core_memories": list(self._core_memories),
            "relationships": {
                cid: rel.to_dict() for cid, rel in self._relationships.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any],
                  config: MemoryConfig | None = None) -> MemorySystem:
        """Rebuild from to_dict() output. Over-long recent_events keep the newest."""
        system = cls(data.get("immediate_context", ""), config)
        recent = data.get("recent_events", [])
        core = data.get("core_memories", [])
        for name, value in (("recent_events", recent), ("core_memories", core)):
            if not isinstance(value, list):
                raise TypeError(f"{name} must be a list, got {type(value).__name__}")
        system._recent_events.extend(recent)
        system._core_memories = list(core)
        for cid, raw in data.get("relationships", {}).items():
            raw = {**raw, "character_id": cid}
            system._relationships[cid] = RelationshipMemory.from_dict(raw, system._config)
        return system

    def __repr__(self) -> str:
        return (f"MemorySystem(recent={len(self._recent_events)}/{self.capacity}, "
                f"core={len(self._core_memories)}, "
                f"relationships={len(self._relationships)})")
