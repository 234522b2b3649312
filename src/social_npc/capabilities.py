"""Collaborator interfaces. The host implements these; the core only calls them.

Every call goes through NpcMind, which turns a collaborator failure into a
typed CapabilityError at the call site.
"""

from __future__ import annotations

from typing import Any, Protocol

from social_npc.models import Intent, InteractionResult, Npc, PerceptionResult
from social_npc.system import MemorySystem


class Behavior(Protocol):
    """Decision strategy: scripted, utility-scored, learned, ...

    Pre: memory is the NPC's own system and is not mutated while deciding.
    Post: None, or an Intent whose actor is npc.name. The rationale should
    cite the memories that led to it.
    """

    def decide(self, npc: Npc, memory: MemorySystem) -> Intent | None: ...


class Storage(Protocol):
    """Snapshot persistence. The format beyond to_dict() is the storage's business.

    load() returns None when nothing was saved for npc_id.
    """

    def save(self, npc_id: str, snapshot: dict[str, Any]) -> None: ...

    def load(self, npc_id: str) -> dict[str, Any] | None: ...


class WorldContext(Protocol):
    """What the game world exposes about its current state."""

    def visible_npcs(self) -> list[Npc]: ...

    def environment(self) -> str: ...

    def npc_location(self, name: str) -> str | None: ...

    def active_interactions(self, name: str) -> list[str]: ...


class Perception(Protocol):
    """Decides what an NPC notices in the world this cycle."""

    def perceive(self, npc: Npc, world: WorldContext) -> PerceptionResult: ...


class SocialInteraction(Protocol):
    """Plays out an exchange between two NPCs.

    Each side's result is recorded only in that side's own memory.
    """

    def initiate(self, initiator: Npc, target: Npc, kind: str) -> InteractionResult: ...

    def respond(self, responder: Npc, initiator: Npc, interaction: str) -> InteractionResult: ...
