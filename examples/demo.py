#!/usr/bin/env python3
"""
social-npc demo: a tavern evening, remembered.

No LLM needed. No API keys. Just run it.
"""

import sys

from loguru import logger

from social_npc import (
    GratitudeBehavior, InteractionResult, Memory, MemoryConfig, Npc, NpcAction, NpcMind,
)
from social_npc.formatter import build_intent_prompt

DAY = 24 * 3600.0


class DictStorage:
    def __init__(self):
        self.snapshots = {}

    def save(self, npc_id, snapshot):
        self.snapshots[npc_id] = snapshot

    def load(self, npc_id):
        return self.snapshots.get(npc_id)


class FriendlyChat:
    def initiate(self, initiator, target, kind):
        return (InteractionResult.succeeded(f"I played {kind} with {target.name}")
                .with_sentiment(0.3).with_relationship_impact(0.5).with_emotion("happy", 0.6))

    def respond(self, responder, initiator, interaction):
        return (InteractionResult.succeeded(f"{initiator.name} joined my game")
                .with_sentiment(0.2).with_relationship_impact(0.3).with_emotion("pleased", 0.5))


def header(text):
    print(f"\n{'='*64}")
    print(f"  {text}")
    print(f"{'='*64}\n")


def show(mind):
    memory = mind.memory
    print(f"  [{mind.name}] context: {memory.immediate_context}")
    for event in memory.recent_events:
        print(f"    recent  {event}")
    for core in memory.core_memories:
        print(f"    core    {core}")
    for rel in memory.relationships.values():
        n = int((rel.sentiment + 1) * 10)
        bar = "█" * n + "░" * (20 - n)
        print(f"    {bar} {rel.sentiment:+.2f} bond {rel.bond_strength:+.2f} | {rel.character_id}")
        for m in rel.memories:
            print(f"      - {m.content} ({m.emotional_tag}, {m.intensity:.1f})")
    print()


def main():
    logger.remove()
    logger.add(sys.stderr, level="INFO")
    logger.enable("social_npc")

    storage = DictStorage()
    config = MemoryConfig(recent_capacity=3)

    alice = NpcMind(
        Npc.builder("Alice").location("tavern").activity("drinking ale").build(),
        behavior=GratitudeBehavior(), storage=storage, config=config,
    )
    bob = NpcMind(
        Npc.builder("Bob").location("tavern").activity("playing cards").build(),
        storage=storage, config=config,
    )

    header("EVENING 1 - Alice settles in")

    alice.memory.set_context("Relaxing at the tavern after a long day")
    for event in ("Ordered my favorite ale", "The bard is playing a familiar tune",
                  "Someone knocked over a stool", "The fire is warm tonight"):
        evicted = alice.experience(event)
        if evicted:
            print(f"  forgot: {evicted}")
    alice.memory.promote_to_core("I always feel at home in this tavern")
    alice.remember("Bob", Memory("Bob helped me carry heavy bags", "grateful", 0.8, created_at=0.0),
                   sentiment_delta=0.7, bond_delta=0.4)
    show(alice)

    header("EVENING 1 - What does Alice want?")

    print(build_intent_prompt(alice.npc, alice.memory, [bob.npc]))
    print()
    intent = alice.decide()
    print(f"  INTENT: {intent.actor} -> {intent.action} {intent.target}")
    print(f"  BECAUSE: {intent.rationale}\n")

    alice.process_outcome(intent, NpcAction("thank", "Bob grinned and raised his mug"), "warm", 0.5)
    alice.interact(bob, "cards", FriendlyChat())
    show(alice)
    show(bob)

    header("A YEAR LATER - Reflect")

    reflection = alice.reflect(now=365 * DAY)
    print(f"  merged {reflection.merged}, faded {len(reflection.faded)}")
    for decision in reflection.faded:
        kept = " → kept as core" if decision.forms_core_memory else ""
        print(f"    {decision.character_id}: {decision.memory.content}{kept}")
    print()
    show(alice)

    alice.save()
    bob.save()
    print(f"  saved snapshots: {sorted(storage.snapshots)}")


if __name__ == "__main__":
    main()
