"""
Cost projection calculations.

Projects monthly, daily and yearly spend for a model from usage assumptions.
Values are left unrounded; formatting belongs to the presentation layer.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .catalog import CatalogModel

TOKENS_PER_MILLION = 1_000_000
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class UsageParameters:
    """Usage assumptions for a cost projection."""
    input_tokens: int
    output_tokens: int
    requests_per_day: int
    days_per_month: int


@dataclass(frozen=True)
class CostBreakdown:
    """Projected cost for one model under a usage pattern."""
    monthly_cost: float
    daily_cost: float
    yearly_cost: float
    input_cost: float
    output_cost: float
    total_input_tokens: int
    total_output_tokens: int
    total_tokens: int
    total_requests: int
    input_percentage: float
    output_percentage: float


@dataclass(frozen=True)
class UsagePreset:
    """Named usage pattern for common workloads."""
    id: str
    name: str
    description: str
    input_tokens: int
    output_tokens: int
    requests_per_day: int
    days_per_month: int

    def to_usage(self) -> UsageParameters:
        return UsageParameters(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            requests_per_day=self.requests_per_day,
            days_per_month=self.days_per_month,
        )


USAGE_PRESETS: List[UsagePreset] = [
    UsagePreset(
        id="customer-support",
        name="Customer Support Chatbot",
        description="Moderate input/output with high request volume",
        input_tokens=400,
        output_tokens=200,
        requests_per_day=1000,
        days_per_month=30,
    ),
    UsagePreset(
        id="content-generation",
        name="Content Generation",
        description="Low input with high output and moderate request volume",
        input_tokens=300,
        output_tokens=1000,
        requests_per_day=100,
        days_per_month=30,
    ),
    UsagePreset(
        id="data-analysis",
        name="Data Analysis",
        description="High input with moderate output and low request volume",
        input_tokens=3000,
        output_tokens=500,
        requests_per_day=50,
        days_per_month=30,
    ),
    UsagePreset(
        id="document-summarization",
        name="Document Summarization",
        description="Very high input with moderate output and low request volume",
        input_tokens=10000,
        output_tokens=800,
        requests_per_day=20,
        days_per_month=30,
    ),
    UsagePreset(
        id="custom",
        name="Custom Usage",
        description="Define your own usage pattern",
        input_tokens=500,
        output_tokens=300,
        requests_per_day=100,
        days_per_month=30,
    ),
]


def get_preset(preset_id: str) -> UsagePreset:
    """Look up a usage preset by id.

    Raises:
        ValueError: If the preset is unknown
    """
    for preset in USAGE_PRESETS:
        if preset.id == preset_id:
            return preset
    valid = [preset.id for preset in USAGE_PRESETS]
    raise ValueError(f"Unknown preset: {preset_id} (expected one of: {valid})")


def calculate_cost(model: CatalogModel, usage: UsageParameters) -> CostBreakdown:
    """Project the cost of running a model under a usage pattern.

    Args:
        model: Catalog entry with per-million prices
        usage: Usage assumptions

    Returns:
        Unrounded CostBreakdown
    """
    total_requests = usage.requests_per_day * usage.days_per_month
    total_input_tokens = usage.input_tokens * total_requests
    total_output_tokens = usage.output_tokens * total_requests
    total_tokens = total_input_tokens + total_output_tokens

    input_cost = (total_input_tokens / TOKENS_PER_MILLION) * model.input_price
    output_cost = (total_output_tokens / TOKENS_PER_MILLION) * model.output_price
    monthly_cost = input_cost + output_cost

    # days_per_month of 0 yields no daily spend rather than a division error
    daily_cost = monthly_cost / usage.days_per_month if usage.days_per_month else 0.0
    yearly_cost = monthly_cost * MONTHS_PER_YEAR

    if monthly_cost > 0:
        input_percentage = input_cost / monthly_cost * 100
        output_percentage = output_cost / monthly_cost * 100
    else:
        input_percentage = 0.0
        output_percentage = 0.0

    return CostBreakdown(
        monthly_cost=monthly_cost,
        daily_cost=daily_cost,
        yearly_cost=yearly_cost,
        input_cost=input_cost,
        output_cost=output_cost,
        total_input_tokens=total_input_tokens,
        total_output_tokens=total_output_tokens,
        total_tokens=total_tokens,
        total_requests=total_requests,
        input_percentage=input_percentage,
        output_percentage=output_percentage,
    )


def rank_models_by_cost(
    models: Iterable[CatalogModel],
    usage: UsageParameters
) -> List[Tuple[CatalogModel, CostBreakdown]]:
    """Rank models from cheapest to most expensive monthly cost."""
    projections = [(model, calculate_cost(model, usage)) for model in models]
    return sorted(projections, key=lambda pair: pair[1].monthly_cost)
