"""
Unit tests for session usage tracking.

Tests accumulation, cost derivation and input validation.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from usage_tracker import PRICING_TABLE, UsageTracker, get_pricing


class TestPricing:
    """Test pricing table lookups and cost maths."""

    def test_get_supported_model(self):
        pricing = get_pricing("gemini-2.5-pro")
        assert pricing.input_per_1m == Decimal("1.25")
        assert pricing.output_per_1m == Decimal("10.00")

    def test_unsupported_model_raises_error(self):
        with pytest.raises(ValueError, match="Unsupported model: gpt-2"):
            get_pricing("gpt-2")

    def test_cost_per_million(self):
        pricing = PRICING_TABLE["gemini-2.5-pro"]
        assert pricing.cost(1_000_000, 0) == Decimal("1.25")
        assert pricing.cost(0, 1_000_000) == Decimal("10.00")

    def test_cost_mixed_usage(self):
        # 2000 * 1.25/1M + 1000 * 10/1M = 0.0025 + 0.01
        pricing = PRICING_TABLE["gemini-2.5-pro"]
        assert pricing.cost(2000, 1000) == Decimal("0.0125")


class TestUsageTracker:
    """Test UsageTracker accumulation."""

    def setup_method(self):
        self.tracker = UsageTracker(get_pricing("gemini-2.5-pro"))

    def test_starts_empty(self):
        session = self.tracker.snapshot()["session"]
        assert session["inputTokens"] == 0
        assert session["outputTokens"] == 0
        assert session["totalTokens"] == 0
        assert session["requestCount"] == 0
        assert session["estimatedCost"] == 0.0

    def test_record_accumulates(self):
        self.tracker.record(100, 400)
        self.tracker.record(50, 25)

        assert self.tracker.input_tokens == 150
        assert self.tracker.output_tokens == 425
        assert self.tracker.request_count == 2

    def test_totals_grow_monotonically(self):
        previous = self.tracker.snapshot()["session"]
        for input_tokens, output_tokens in [(10, 0), (0, 0), (300, 1200), (1, 1)]:
            self.tracker.record(input_tokens, output_tokens)
            current = self.tracker.snapshot()["session"]
            assert current["inputTokens"] >= previous["inputTokens"]
            assert current["outputTokens"] >= previous["outputTokens"]
            assert current["requestCount"] == previous["requestCount"] + 1
            assert current["estimatedCost"] >= previous["estimatedCost"]
            previous = current

    def test_missing_counts_are_zero(self):
        self.tracker.record(None, None)
        self.tracker.record()

        assert self.tracker.input_tokens == 0
        assert self.tracker.output_tokens == 0
        assert self.tracker.request_count == 2

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError, match="input_tokens must be >= 0"):
            self.tracker.record(-1, 10)
        assert self.tracker.request_count == 0

    def test_non_integer_count_rejected(self):
        with pytest.raises(ValueError, match="output_tokens must be an integer"):
            self.tracker.record(10, "20")
        with pytest.raises(ValueError, match="input_tokens must be an integer"):
            self.tracker.record(True, 0)

    def test_estimated_cost(self):
        self.tracker.record(2000, 1000)
        assert self.tracker.estimated_cost == pytest.approx(0.0125)

    def test_reset_clears_counters(self):
        self.tracker.record(500, 500)
        before = self.tracker.last_reset

        self.tracker.reset()

        assert self.tracker.input_tokens == 0
        assert self.tracker.output_tokens == 0
        assert self.tracker.request_count == 0
        assert self.tracker.last_reset >= before

    def test_snapshot_shape(self):
        self.tracker.record(1000, 3000)
        snapshot = self.tracker.snapshot()

        assert snapshot["provider"] == "Google"
        assert snapshot["model"] == "Gemini 2.5 Pro"
        assert snapshot["pricing"] == {"inputPer1M": "$1.25", "outputPer1M": "$10.00"}
        assert snapshot["session"]["totalTokens"] == 4000
        assert snapshot["session"]["estimatedCost"] == pytest.approx(0.03125)
        # ISO-8601 round trip
        datetime.fromisoformat(snapshot["session"]["lastReset"])
