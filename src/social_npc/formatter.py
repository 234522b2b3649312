"""Render NPC state as prompt text for a language-model behavior."""

from __future__ import annotations

from typing import Iterable

from social_npc.models import Npc
from social_npc.relationship import RelationshipMemory
from social_npc.system import MemorySystem

SECTION_SEPARATOR = "\n\n---\n\n"
DEFAULT_QUESTION = "What do you do next?"


def format_situation(npc: Npc, others: Iterable[Npc] = ()) -> str:
    """
    Current situation section: where the NPC is, what it is doing,
    and who else is at the same location.
    """
    lines = [
        "## Current Situation",
        "",
        f"- You are at: {npc.location}",
        f"- You are: {npc.activity}",
    ]
    here = [o for o in others if o.name != npc.name and o.location == npc.location]
    if here:
        lines.append("")
        lines.append("Also here:")
        for other in here:
            lines.append(f"- {other.name} is {other.activity}")
    return "\n".join(lines)


def _format_relationship(rel: RelationshipMemory, memory_limit: int) -> list[str]:
    lines = [
        f"### {rel.character_id} "
        f"(sentiment {rel.sentiment:+.2f}, bond {rel.bond_strength:+.2f})"
    ]
    if rel.immediate_context:
        lines.append(f"Right now: {rel.immediate_context}")
    if rel.long_term_summary:
        lines.append(f"Overall: {rel.long_term_summary}")
    for fact in rel.core_memories:
        lines.append(f"- (core) {fact}")
    for mem in rel.latest(memory_limit):
        lines.append(f"- {mem.content} [{mem.emotional_tag}, {mem.intensity:.1f}]")
    return lines


def format_memories(memory: MemorySystem, recent_limit: int | None = None,
                    relationship_limit: int = 5) -> str:
    """
    Memory section for a prompt

    Args:
      memory: the NPC's memory system
      recent_limit: how many recent events to show (None = all held)
      relationship_limit: latest memories shown per relationship

    Returns:
      markdown text, empty tiers omitted
    """
    lines = ["## Your Memories"]
    if memory.immediate_context:
        lines += ["", f"Context: {memory.immediate_context}"]

    events = list(memory.recent_events)
    if recent_limit is not None:
        events = events[-recent_limit:] if recent_limit > 0 else []
    if events:
        lines += ["", "Recent events:"]
        lines += [f"- {event}" for event in events]

    if memory.core_memories:
        lines += ["", "Core memories:"]
        lines += [f"- {core}" for core in memory.core_memories]

    for rel in memory.relationships.values():
        lines.append("")
        lines += _format_relationship(rel, relationship_limit)

    return "\n".join(lines)


def build_intent_prompt(npc: Npc, memory: MemorySystem,
                        others: Iterable[Npc] = (),
                        question: str = DEFAULT_QUESTION) -> str:
    sections = [
        format_memories(memory),
        format_situation(npc, others),
        question,
    ]
    return SECTION_SEPARATOR.join(sections)
