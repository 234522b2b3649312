"""Tests for retention decay and consolidation helpers."""

import pytest

from social_npc.consolidate import consolidate, find_duplicate, merge_memories, text_similarity
from social_npc.decay import compute_retention, split_faded
from social_npc.models import Memory

DAY = 24 * 3600.0


class TestRetention:
    def test_halves_each_half_life(self):
        mem = Memory("Bob waved", "warm", 0.8, created_at=0.0)
        assert compute_retention(mem, now=7 * DAY, half_life=7 * DAY) == pytest.approx(0.4)

    def test_zero_elapsed_is_intensity(self):
        mem = Memory("Fresh", "calm", 0.6, created_at=500.0)
        assert compute_retention(mem, now=500.0) == 0.6

    def test_record_untouched(self):
        mem = Memory("Bob waved", "warm", 0.8, created_at=0.0)
        compute_retention(mem, now=30 * DAY)
        assert mem.intensity == 0.8

    def test_split_keeps_order(self):
        mems = [
            Memory("old weak", "calm", 0.1, created_at=0.0),
            Memory("new a", "calm", 0.5, created_at=99 * DAY),
            Memory("new b", "calm", 0.5, created_at=99 * DAY),
        ]
        kept, faded = split_faded(mems, now=100 * DAY)
        assert [m.content for m in kept] == ["new a", "new b"]
        assert [m.content for m in faded] == ["old weak"]


class TestConsolidation:
    def test_text_similarity(self):
        assert text_similarity("Bob helped me", "bob helped me") == 1.0
        assert text_similarity("hello", "completely different") < 0.3

    def test_find_duplicate_exact_only(self):
        assert find_duplicate("a fact", ["other", "a fact"]) == "a fact"
        assert find_duplicate("a fact!", ["a fact"]) is None

    def test_find_duplicate_near(self):
        assert find_duplicate("Bob is kind!", ["Bob is kind"], threshold=0.9) == "Bob is kind"

    def test_merge_keeps_stronger(self):
        a = Memory("Bob helped", "grateful", 0.4, created_at=5.0)
        b = Memory("Bob helped me", "relieved", 0.9, created_at=9.0)
        merged = merge_memories(a, b)
        assert merged.content == "Bob helped me"
        assert merged.emotional_tag == "relieved"
        assert merged.intensity == pytest.approx(1.0)
        assert merged.created_at == 5.0

    def test_merge_never_lowers_intensity(self):
        a = Memory("x", "awe", 2.0, created_at=1.0)
        b = Memory("x", "awe", 0.1, created_at=2.0)
        assert merge_memories(a, b).intensity == 2.0

    def test_consolidate_empty(self):
        assert consolidate([]) == ([], 0)
