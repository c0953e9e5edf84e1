"""
Unit tests for cost projection.

Tests breakdown accuracy, zero-division special cases, presets and ranking.
"""

import pytest

from price_catalog.core.calculator import (
    USAGE_PRESETS,
    UsageParameters,
    calculate_cost,
    get_preset,
    rank_models_by_cost,
)
from price_catalog.core.catalog import Provider, build_model

GPT35 = build_model("gpt-3.5-turbo", "GPT-3.5 Turbo", Provider.OPENAI, 0.50, 1.50)


class TestCalculateCost:
    """Test cost breakdown calculation."""

    def test_reference_scenario(self):
        """Verify every field for a typical chat workload."""
        usage = UsageParameters(
            input_tokens=500,
            output_tokens=300,
            requests_per_day=100,
            days_per_month=30
        )
        cost = calculate_cost(GPT35, usage)

        # 100 requests/day * 30 days = 3000 requests
        assert cost.total_requests == 3000
        assert cost.total_input_tokens == 1_500_000
        assert cost.total_output_tokens == 900_000
        assert cost.total_tokens == 2_400_000
        # 1.5M * $0.50/M = $0.75, 0.9M * $1.50/M = $1.35
        assert cost.input_cost == pytest.approx(0.75)
        assert cost.output_cost == pytest.approx(1.35)
        assert cost.monthly_cost == pytest.approx(2.10)
        assert cost.daily_cost == pytest.approx(0.07)
        assert cost.yearly_cost == pytest.approx(25.20)
        assert cost.input_percentage == pytest.approx(35.714, abs=0.001)
        assert cost.output_percentage == pytest.approx(64.286, abs=0.001)

    def test_percentages_sum_to_100(self):
        model = build_model("o1", "o1", Provider.OPENAI, 15.0, 60.0)
        usage = UsageParameters(input_tokens=1234, output_tokens=567,
                                requests_per_day=89, days_per_month=22)
        cost = calculate_cost(model, usage)
        assert cost.input_percentage + cost.output_percentage == pytest.approx(100.0)

    def test_zero_days_per_month(self):
        """Zero days yields zero daily cost instead of dividing by zero."""
        usage = UsageParameters(input_tokens=500, output_tokens=300,
                                requests_per_day=100, days_per_month=0)
        cost = calculate_cost(GPT35, usage)
        assert cost.daily_cost == 0
        assert cost.monthly_cost == 0

    def test_zero_cost_percentages(self):
        """Zero monthly cost gives zero percentages, not NaN."""
        usage = UsageParameters(input_tokens=0, output_tokens=0,
                                requests_per_day=100, days_per_month=30)
        cost = calculate_cost(GPT35, usage)
        assert cost.monthly_cost == 0
        assert cost.input_percentage == 0
        assert cost.output_percentage == 0

    def test_free_model(self):
        model = build_model("free", "Free", Provider.COHERE, 0.0, 0.0)
        usage = UsageParameters(input_tokens=500, output_tokens=300,
                                requests_per_day=100, days_per_month=30)
        cost = calculate_cost(model, usage)
        assert cost.monthly_cost == 0
        assert cost.input_percentage == 0

    def test_no_rounding_applied(self):
        """Sub-cent costs are kept at full precision."""
        usage = UsageParameters(input_tokens=1, output_tokens=1,
                                requests_per_day=1, days_per_month=1)
        cost = calculate_cost(GPT35, usage)
        assert cost.monthly_cost == pytest.approx(0.000002)


class TestPresets:
    """Test usage presets."""

    def test_preset_lookup(self):
        preset = get_preset("document-summarization")
        assert preset.input_tokens == 10000
        assert preset.output_tokens == 800
        assert preset.requests_per_day == 20

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset: nope"):
            get_preset("nope")

    def test_preset_to_usage(self):
        usage = get_preset("custom").to_usage()
        assert usage == UsageParameters(input_tokens=500, output_tokens=300,
                                        requests_per_day=100, days_per_month=30)

    def test_preset_ids_unique(self):
        ids = [preset.id for preset in USAGE_PRESETS]
        assert len(ids) == len(set(ids))


class TestRanking:
    """Test ranking models by projected cost."""

    def test_cheapest_first(self):
        models = [
            build_model("gpt-4", "GPT-4", Provider.OPENAI, 30.0, 60.0),
            build_model("gpt-4o-mini", "GPT-4o Mini", Provider.OPENAI, 0.15, 0.60),
            GPT35,
        ]
        ranked = rank_models_by_cost(models, get_preset("custom").to_usage())
        assert [model.id for model, _ in ranked] == ["gpt-4o-mini", "gpt-3.5-turbo", "gpt-4"]

    def test_ranking_uses_unrounded_costs(self):
        """Models that differ below display precision are still ordered."""
        a = build_model("a", "A", Provider.OPENAI, 0.101, 0.0)
        b = build_model("b", "B", Provider.OPENAI, 0.100, 0.0)
        usage = UsageParameters(input_tokens=1000, output_tokens=0,
                                requests_per_day=1, days_per_month=1)
        ranked = rank_models_by_cost([a, b], usage)
        assert [model.id for model, _ in ranked] == ["b", "a"]

    def test_empty_catalog(self):
        assert rank_models_by_cost([], get_preset("custom").to_usage()) == []
