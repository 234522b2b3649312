"""Tests for the reference behavior strategies."""

import pytest

from social_npc import BehaviorChain, GratitudeBehavior, Intent, Memory, MemorySystem, Npc


@pytest.fixture
def alice():
    return Npc.builder("Alice").location("marketplace").activity("shopping").build()


def _memory_with_bob(sentiment: float) -> MemorySystem:
    memory = MemorySystem.with_context("Shopping for bread")
    bob = memory.get_or_create_relationship("Bob")
    bob.add_memory(Memory("Bob helped me carry heavy bags", "grateful", 0.8))
    bob.update_sentiment(sentiment)
    return memory


class TestGratitude:
    def test_thanks_helpful_friend(self, alice):
        intent = GratitudeBehavior().decide(alice, _memory_with_bob(0.7))
        assert intent.actor == "Alice"
        assert intent.action == "thank"
        assert intent.target == "Bob"
        assert "Bob helped me carry heavy bags" in intent.rationale

    def test_no_thanks_when_resented(self, alice):
        assert GratitudeBehavior().decide(alice, _memory_with_bob(-0.7)) is None

    def test_no_thanks_without_help(self, alice):
        memory = MemorySystem()
        carol = memory.get_or_create_relationship("Carol")
        carol.add_memory(Memory("Carol told a joke", "amused", 0.4))
        carol.update_sentiment(0.9)
        assert GratitudeBehavior().decide(alice, memory) is None

    @pytest.mark.parametrize("content, tag", [
        ("Bob refused to help me", "hurt"),
        ("Bob didn't help with the bags", "annoyed"),
        ("Bob was unhelpful at the stall", "annoyed"),
        ("Bob wouldn't carry my basket", "sad"),
    ])
    def test_no_thanks_for_refused_help(self, alice, content, tag):
        memory = MemorySystem()
        bob = memory.get_or_create_relationship("Bob")
        bob.add_memory(Memory(content, tag, 0.8))
        bob.update_sentiment(0.7)
        assert GratitudeBehavior().decide(alice, memory) is None

    def test_rationale_cites_the_help_not_the_refusal(self, alice):
        memory = _memory_with_bob(0.7)
        memory.relationship("Bob").add_memory(Memory("Bob refused to help me", "hurt", 0.8))
        intent = GratitudeBehavior().decide(alice, memory)
        assert "Bob helped me carry heavy bags" in intent.rationale
        assert "refused" not in intent.rationale

    def test_prefers_best_liked(self, alice):
        memory = _memory_with_bob(0.5)
        dan = memory.get_or_create_relationship("Dan")
        dan.add_memory(Memory("Dan rescued my cat", "relieved", 0.9))
        dan.update_sentiment(0.9)
        assert GratitudeBehavior().decide(alice, memory).target == "Dan"

    def test_does_not_mutate_memory(self, alice):
        memory = _memory_with_bob(0.7)
        before = memory.to_dict()
        GratitudeBehavior().decide(alice, memory)
        assert memory.to_dict() == before


class _Always:
    def __init__(self, action):
        self.action = action

    def decide(self, npc, memory):
        return Intent(npc.name, self.action, rationale="always")


class _Never:
    def decide(self, npc, memory):
        return None


class TestChain:
    def test_first_match_wins(self, alice):
        chain = BehaviorChain(_Never(), _Always("wander"), _Always("sleep"))
        assert chain.decide(alice, MemorySystem()).action == "wander"

    def test_falls_through(self, alice):
        chain = BehaviorChain(GratitudeBehavior(), _Always("wander"))
        assert chain.decide(alice, _memory_with_bob(0.7)).action == "thank"
        assert chain.decide(alice, _memory_with_bob(-0.7)).action == "wander"

    def test_empty_chain(self, alice):
        assert BehaviorChain().decide(alice, MemorySystem()) is None
