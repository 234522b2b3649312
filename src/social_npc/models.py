"""Core data records. A Memory never changes once written; an Npc is plain state."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from social_npc.system import MemorySystem

DEFAULT_LOCATION = "unknown"
DEFAULT_ACTIVITY = "idle"


@dataclass(frozen=True)
class Memory:
    """Something that happened, how it felt, and how much it mattered.

    emotional_tag is open vocabulary ("grateful", "betrayed", ...).
    intensity is expected in [0.0, 1.0] but not enforced.
    """

    content: str
    emotional_tag: str
    intensity: float
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "emotional_tag": self.emotional_tag,
            "intensity": self.intensity,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Memory:
        kwargs = {}
        if data.get("created_at") is not None:
            kwargs["created_at"] = float(data["created_at"])
        return cls(
            content=data["content"],
            emotional_tag=data.get("emotional_tag", "neutral"),
            intensity=float(data.get("intensity", 0.5)),
            **kwargs,
        )


@dataclass(frozen=True)
class Intent:
    """What an NPC wants to do next, and the memories that made it want to."""

    actor: str
    action: str
    target: str | None = None
    rationale: str = ""

    @property
    def is_targeted(self) -> bool:
        return self.target is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "actor": self.actor,
            "action": self.action,
            "target": self.target,
            "rationale": self.rationale,
        }


@dataclass
class Npc:
    """Identity plus situational state. Owns at most one MemorySystem.

    Other characters are never referenced directly; they live as keyed
    entries in memory.relationships.
    """

    name: str
    location: str = DEFAULT_LOCATION
    activity: str = DEFAULT_ACTIVITY
    memory: MemorySystem | None = None

    @staticmethod
    def builder(name: str) -> NpcBuilder:
        return NpcBuilder(name)


class NpcBuilder:
    """Fluent construction: Npc.builder("Alice").location("tavern").build()."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._location: str | None = None
        self._activity: str | None = None
        self._memory: MemorySystem | None = None

    def location(self, location: str) -> NpcBuilder:
        self._location = location
        return self

    def activity(self, activity: str) -> NpcBuilder:
        self._activity = activity
        return self

    def memory(self, memory: MemorySystem) -> NpcBuilder:
        self._memory = memory
        return self

    def build(self) -> Npc:
        if not self._name:
            raise ValueError("an NPC needs a name")
        return Npc(
            name=self._name,
            location=self._location if self._location is not None else DEFAULT_LOCATION,
            activity=self._activity if self._activity is not None else DEFAULT_ACTIVITY,
            memory=self._memory,
        )


@dataclass(frozen=True)
class NpcAction:
    """An executed intent and what actually happened."""

    action: str
    result: str


@dataclass(frozen=True)
class Observation:
    """One perceived item. With a subject it belongs to that relationship."""

    description: str
    subject: str | None = None
    emotional_tag: str | None = None
    intensity: float = 0.5


@dataclass
class PerceptionResult:
    visible_npcs: list[str] = field(default_factory=list)
    audible_events: list[str] = field(default_factory=list)
    environmental_details: list[str] = field(default_factory=list)
    observations: list[Observation] = field(default_factory=list)


@dataclass
class InteractionResult:
    """Outcome of one side of a social exchange."""

    success: bool
    description: str
    sentiment_change: float = 0.0
    relationship_impact: float = 0.0
    emotional_tag: str = "neutral"
    intensity: float = 0.5

    @classmethod
    def succeeded(cls, description: str) -> InteractionResult:
        return cls(success=True, description=description)

    @classmethod
    def failed(cls, description: str) -> InteractionResult:
        return cls(success=False, description=description)

    def with_sentiment(self, change: float) -> InteractionResult:
        self.sentiment_change = change
        return self

    def with_relationship_impact(self, impact: float) -> InteractionResult:
        self.relationship_impact = impact
        return self

    def with_emotion(self, tag: str, intensity: float | None = None) -> InteractionResult:
        self.emotional_tag = tag
        if intensity is not None:
            self.intensity = intensity
        return self


@dataclass(frozen=True)
class FadeDecision:
    """A relationship memory that faded below the retention threshold."""

    character_id: str
    memory: Memory
    forms_core_memory: bool = False


@dataclass
class Reflection:
    faded: list[FadeDecision] = field(default_factory=list)
    merged: int = 0
