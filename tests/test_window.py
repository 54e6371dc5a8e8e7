"""
Tests for per-rule window counters.
"""
import pytest


@pytest.mark.unit
class TestWindowCounter:
    """Test counting and window resets."""

    def test_unseen_rule_peeks_empty(self, window_counter):
        assert window_counter.peek("GET /meetings/*", 1000) == (0, 1000)
        assert len(window_counter) == 0

    def test_increment_counts_within_window(self, window_counter, fake_clock):
        assert window_counter.increment("k", 1000) == 1
        fake_clock.advance(0.25)
        assert window_counter.increment("k", 1000) == 2

        count, remaining = window_counter.peek("k", 1000)
        assert count == 2
        assert remaining == 750

    def test_peek_does_not_mutate(self, window_counter):
        window_counter.increment("k", 1000)
        window_counter.peek("k", 1000)
        window_counter.peek("k", 1000)

        assert window_counter.peek("k", 1000)[0] == 1

    def test_window_resets_after_duration(self, window_counter, fake_clock):
        window_counter.increment("k", 1000)
        window_counter.increment("k", 1000)
        fake_clock.advance(1.0)

        assert window_counter.peek("k", 1000) == (0, 1000)
        assert window_counter.increment("k", 1000) == 1

    def test_rules_are_counted_separately(self, window_counter):
        window_counter.increment("a", 1000)
        window_counter.increment("a", 1000)
        window_counter.increment("b", 1000)

        assert window_counter.peek("a", 1000)[0] == 2
        assert window_counter.peek("b", 1000)[0] == 1
        assert len(window_counter) == 2

    def test_each_rule_has_its_own_lock(self, window_counter):
        assert window_counter.guard("a") is window_counter.guard("a")
        assert window_counter.guard("a") is not window_counter.guard("b")
