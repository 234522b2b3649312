"""NpcMind: one NPC's decision cycle. The only place collaborators get called."""

from __future__ import annotations

import time

from loguru import logger

from social_npc.capabilities import Behavior, Perception, SocialInteraction, Storage, WorldContext
from social_npc.config import MemoryConfig
from social_npc.errors import BehaviorError, InteractionError, PerceptionError, StorageError
from social_npc.models import Intent, InteractionResult, Memory, Npc, NpcAction, Reflection
from social_npc.relationship import RelationshipMemory
from social_npc.system import MemorySystem


class NpcMind:
    """An NPC plus the collaborators that feed and drive its memory.

    API:
        mind.experience(text)            : something I did or saw
        mind.remember(who, memory)       : something about someone else
        mind.perceive(world)             : let perception feed memory
        mind.decide()                    : ask the behavior for an Intent
        mind.process_outcome(intent, a)  : feed the result back
        mind.interact(other, kind, s)    : two-sided social exchange
        mind.reflect()                   : consolidate + fade
        mind.save() / mind.load()        : snapshot through storage
    """

    def __init__(self, npc: Npc,
                 behavior: Behavior | None = None,
                 storage: Storage | None = None,
                 perception: Perception | None = None,
                 config: MemoryConfig | None = None) -> None:
        if npc.memory is None:
            npc.memory = MemorySystem(config=config)
        self.npc = npc
        self.behavior = behavior
        self.storage = storage
        self.perception = perception

    @property
    def name(self) -> str:
        return self.npc.name

    @property
    def memory(self) -> MemorySystem:
        return self.npc.memory

    # ── memory intake ──────────────────────────────────────────────────

    def experience(self, text: str) -> str | None:
        """Something happened to me. Returns the evicted event, if any."""
        return self.memory.add_self_event(text)

    def remember(self, character_id: str, memory: Memory,
                 sentiment_delta: float = 0.0,
                 bond_delta: float = 0.0) -> RelationshipMemory:
        rel = self.memory.get_or_create_relationship(character_id)
        rel.add_memory(memory)
        rel.update_sentiment(sentiment_delta)
        rel.update_bond(bond_delta)
        return rel

    def perceive(self, world: WorldContext) -> None:
        """Run perception and feed what was noticed into memory."""
        if self.perception is None:
            return
        t0 = time.time()
        try:
            result = self.perception.perceive(self.npc, world)
        except Exception as exc:
            logger.error(f"Perception failed for {self.name}: {exc}")
            raise PerceptionError(self.name, f"perception failed: {exc}") from exc

        if result.environmental_details:
            self.memory.set_context("; ".join(result.environmental_details))
        for event in result.audible_events:
            self.memory.add_self_event(event)
        for obs in result.observations:
            if obs.subject:
                self.remember(obs.subject, Memory(
                    obs.description, obs.emotional_tag or "neutral", obs.intensity,
                ))
            else:
                self.memory.add_self_event(obs.description)

        self._trace("perceive", f"{len(result.observations)} observations", t0)

    # ── decision ───────────────────────────────────────────────────────

    def decide(self) -> Intent | None:
        """Ask the behavior what to do next. None if it has nothing in mind."""
        if self.behavior is None:
            return None
        t0 = time.time()
        try:
            intent = self.behavior.decide(self.npc, self.memory)
        except Exception as exc:
            logger.error(f"Behavior failed for {self.name}: {exc}")
            raise BehaviorError(self.name, f"behavior raised: {exc}") from exc

        if intent is not None:
            if not isinstance(intent, Intent):
                logger.error(f"Behavior for {self.name} returned {type(intent).__name__}, not Intent")
                raise BehaviorError(self.name, f"behavior returned {type(intent).__name__}, not Intent")
            if intent.actor != self.name:
                logger.error(f"Behavior for {self.name} produced an intent for {intent.actor!r}")
                raise BehaviorError(self.name, f"behavior produced an intent for {intent.actor!r}")
            logger.info(f"{self.name} intends to {intent.action}"
                        f"{' ' + intent.target if intent.target else ''}: {intent.rationale}")

        self._trace("decide", intent.action if intent else "nothing", t0)
        return intent

    def process_outcome(self, intent: Intent, action: NpcAction,
                        emotional_tag: str = "neutral",
                        intensity: float = 0.5) -> None:
        """Close the loop: what actually happened becomes memory."""
        self.memory.add_self_event(f"{action.action}: {action.result}")
        if intent.target:
            self.remember(intent.target, Memory(action.result, emotional_tag, intensity))

    # ── social ─────────────────────────────────────────────────────────

    def interact(self, other: NpcMind, kind: str,
                 social: SocialInteraction) -> tuple[InteractionResult, InteractionResult]:
        """Initiate an exchange with another NPC and let it respond.

        Each side records the exchange only in its own relationship ledger.
        """
        t0 = time.time()
        try:
            initiated = social.initiate(self.npc, other.npc, kind)
            response = social.respond(other.npc, self.npc, initiated.description)
        except Exception as exc:
            logger.error(f"Interaction {kind!r} between {self.name} and {other.name} failed: {exc}")
            raise InteractionError(self.name, f"interaction with {other.name} failed: {exc}") from exc

        self._record_interaction(other.name, initiated)
        other._record_interaction(self.name, response)

        self._trace("interact", f"{kind} with {other.name}", t0)
        return initiated, response

    def _record_interaction(self, character_id: str, result: InteractionResult) -> None:
        self.remember(
            character_id,
            Memory(result.description, result.emotional_tag, result.intensity),
            sentiment_delta=result.sentiment_change,
            bond_delta=result.relationship_impact,
        )

    # ── reflect ────────────────────────────────────────────────────────

    def reflect(self, now: float | None = None) -> Reflection:
        t0 = time.time()
        reflection = self.memory.reflect(now)
        self._trace("reflect", f"{reflection.merged} merged, {len(reflection.faded)} faded", t0)
        return reflection

    # ── persistence ────────────────────────────────────────────────────

    def save(self) -> None:
        if self.storage is None:
            return
        t0 = time.time()
        try:
            self.storage.save(self.name, self.memory.to_dict())
        except Exception as exc:
            logger.error(f"Saving memories for {self.name} failed: {exc}")
            raise StorageError(self.name, f"save failed: {exc}") from exc
        logger.info(f"Saved memories for {self.name}")
        self._trace("save", repr(self.memory), t0)

    def load(self) -> bool:
        """Replace memory with the stored snapshot. False if none exists."""
        if self.storage is None:
            return False
        t0 = time.time()
        try:
            snapshot = self.storage.load(self.name)
        except Exception as exc:
            logger.error(f"Loading memories for {self.name} failed: {exc}")
            raise StorageError(self.name, f"load failed: {exc}") from exc
        if snapshot is None:
            return False

        try:
            restored = MemorySystem.from_dict(snapshot, self.memory.config)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.error(f"Malformed snapshot for {self.name}: {exc}")
            raise StorageError(self.name, f"malformed snapshot: {exc}") from exc

        self.npc.memory = restored
        logger.info(f"Loaded memories for {self.name}")
        self._trace("load", repr(restored), t0)
        return True

    # ── traces ─────────────────────────────────────────────────────────

    def _trace(self, operation: str, detail: str, t0: float) -> None:
        duration_ms = (time.time() - t0) * 1000
        logger.debug(f"{self.name} {operation}: {detail[:200]} ({duration_ms:.2f}ms)")

    def __repr__(self) -> str:
        return f"NpcMind({self.name!r}, {self.memory!r})"
