"""Reference behavior strategies. Hosts can mix these with their own."""

from __future__ import annotations

import re

from social_npc.models import Intent, Memory, Npc
from social_npc.system import MemorySystem

GRATEFUL_TAGS = frozenset({"grateful", "thankful", "appreciative", "indebted"})
_HELP_PATTERNS = re.compile(
    r"\b(help(s|ed|ing)?|saved|rescued|gave me|carried)\b", re.IGNORECASE
)
_REFUSAL_PATTERNS = re.compile(
    r"\b(refused|declined|ignored|never|not|no|didn't|did not|wouldn't|would not|"
    r"won't|couldn't|could not|can't|cannot)\b",
    re.IGNORECASE,
)


def _is_helpful(mem: Memory) -> bool:
    if mem.emotional_tag.lower() in GRATEFUL_TAGS:
        return True
    if _REFUSAL_PATTERNS.search(mem.content):
        return False
    return _HELP_PATTERNS.search(mem.content) is not None


class GratitudeBehavior:
    """Thank the best-liked character who has helped us.

    Only relations with sentiment above min_sentiment qualify, so someone
    we resent gets no thanks no matter what they did.
    """

    def __init__(self, min_sentiment: float = 0.3) -> None:
        self.min_sentiment = min_sentiment

    def decide(self, npc: Npc, memory: MemorySystem) -> Intent | None:
        best = None
        for character_id, rel in memory.relationships.items():
            if rel.sentiment <= self.min_sentiment:
                continue
            helpful = [m for m in rel.memories if _is_helpful(m)]
            if not helpful:
                continue
            if best is None or rel.sentiment > best[1].sentiment:
                best = (character_id, rel, helpful[-1])

        if best is None:
            return None

        character_id, rel, mem = best
        return Intent(
            actor=npc.name,
            action="thank",
            target=character_id,
            rationale=(
                f"I remember that {mem.content} (felt {mem.emotional_tag}), "
                f"and I think well of {character_id} (sentiment {rel.sentiment:+.1f})"
            ),
        )


class BehaviorChain:
    """Try strategies in order; the first one that wants something wins."""

    def __init__(self, *behaviors) -> None:
        self.behaviors = list(behaviors)

    def decide(self, npc: Npc, memory: MemorySystem) -> Intent | None:
        for behavior in self.behaviors:
            intent = behavior.decide(npc, memory)
            if intent is not None:
                return intent
        return None
