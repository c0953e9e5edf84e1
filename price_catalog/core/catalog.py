"""
Model catalog entities and static catalog tables.

Defines the priced model record, provider and tier classification, the
allow-list of tracked models and the hardcoded fallback catalog.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, List


class Provider(Enum):
    """Model providers tracked by the catalog."""
    OPENAI = "OpenAI"
    ANTHROPIC = "Anthropic"
    GOOGLE = "Google"
    DEEPSEEK = "DeepSeek"
    XAI = "xAI"
    COHERE = "Cohere"


class Tier(Enum):
    """Coarse cost classification derived from price."""
    HIGH_END = "high-end"
    MID_RANGE = "mid-range"
    BUDGET = "budget"


@dataclass(frozen=True)
class CatalogModel:
    """A priced model in the catalog.

    Prices are USD per one million tokens. The tier is derived from the
    prices, so all three are always replaced together.
    """
    id: str
    name: str
    provider: Provider
    input_price: float
    output_price: float
    tier: Tier

    def __post_init__(self):
        """Validate identifier and prices."""
        if not self.id or not self.id.strip():
            raise ValueError("id is required and cannot be empty")
        if self.input_price < 0:
            raise ValueError("input_price cannot be negative")
        if self.output_price < 0:
            raise ValueError("output_price cannot be negative")


TOKENS_PER_MILLION = Decimal("1000000")
PRICE_PRECISION = Decimal("0.001")

HIGH_END_THRESHOLD = 10.0
MID_RANGE_THRESHOLD = 1.0


def to_price_per_million(cost_per_token: float) -> float:
    """Convert a per-token price into a per-million price.

    Rounds half-up at the third decimal. The float is converted through its
    shortest repr so binary noise in the feed value does not shift rounding.
    """
    per_million = Decimal(repr(cost_per_token)) * TOKENS_PER_MILLION
    return float(per_million.quantize(PRICE_PRECISION, rounding=ROUND_HALF_UP))


def classify_tier(input_price: float, output_price: float) -> Tier:
    """Classify a model by the average of its input and output prices."""
    average = (input_price + output_price) / 2
    if average >= HIGH_END_THRESHOLD:
        return Tier.HIGH_END
    if average >= MID_RANGE_THRESHOLD:
        return Tier.MID_RANGE
    return Tier.BUDGET


# Tracked identifiers per provider, in reconciliation order
TARGET_MODELS: Dict[Provider, List[str]] = {
    Provider.OPENAI: [
        "gpt-4.1", "gpt-4.1-mini", "gpt-4.1-nano",
        "gpt-4.5-preview", "gpt-4o", "gpt-4o-mini",
        "gpt-4", "gpt-4-turbo", "gpt-3.5-turbo",
        "o1", "o1-mini", "o3-mini", "o3", "o4-mini",
    ],
    Provider.ANTHROPIC: [
        "claude-opus-4-0", "claude-sonnet-4-0",
        "claude-3-5-sonnet-20241022", "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229", "claude-3-haiku-20240307",
    ],
    Provider.GOOGLE: [
        "gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.0-flash",
        "gemini-1.5-pro", "gemini-1.5-flash",
    ],
    Provider.DEEPSEEK: ["deepseek-chat", "deepseek-reasoner"],
    Provider.XAI: ["grok-3", "grok-3-mini", "grok-2"],
    Provider.COHERE: ["command-r-plus", "command-r", "command-light"],
}

# Feed key namespaces tried per provider, in priority order
KEY_PREFIXES: Dict[Provider, List[str]] = {
    Provider.OPENAI: ["openai/", ""],
    Provider.ANTHROPIC: ["anthropic/", ""],
    Provider.GOOGLE: ["gemini/", "vertex_ai/", ""],
    Provider.DEEPSEEK: ["deepseek/", ""],
    Provider.XAI: ["xai/", ""],
    Provider.COHERE: ["cohere_chat/", "cohere/", ""],
}

MODEL_NAME_OVERRIDES: Dict[str, str] = {
    "gpt-4.1": "GPT-4.1",
    "gpt-4.1-mini": "GPT-4.1 Mini",
    "gpt-4.1-nano": "GPT-4.1 Nano",
    "gpt-4.5-preview": "GPT-4.5 Preview",
    "gpt-4o": "GPT-4o",
    "gpt-4o-mini": "GPT-4o Mini",
    "gpt-4-turbo": "GPT-4 Turbo",
    "gpt-4": "GPT-4",
    "gpt-3.5-turbo": "GPT-3.5 Turbo",
    "o1": "o1",
    "o1-mini": "o1-mini",
    "o3-mini": "o3-mini",
    "o3": "o3",
    "o4-mini": "o4-mini",
    "claude-opus-4-0": "Claude Opus 4",
    "claude-sonnet-4-0": "Claude Sonnet 4",
    "claude-3-5-sonnet-20241022": "Claude 3.5 Sonnet",
    "claude-3-5-haiku-20241022": "Claude 3.5 Haiku",
    "claude-3-opus-20240229": "Claude 3 Opus",
    "claude-3-haiku-20240307": "Claude 3 Haiku",
    "gemini-2.5-pro": "Gemini 2.5 Pro",
    "gemini-2.5-flash": "Gemini 2.5 Flash",
    "gemini-2.0-flash": "Gemini 2.0 Flash",
    "gemini-1.5-pro": "Gemini 1.5 Pro",
    "gemini-1.5-flash": "Gemini 1.5 Flash",
    "deepseek-chat": "DeepSeek Chat (V3)",
    "deepseek-reasoner": "DeepSeek Reasoner (R1)",
    "grok-3": "Grok 3",
    "grok-3-mini": "Grok 3 Mini",
    "grok-2": "Grok 2",
    "command-r-plus": "Command R+",
    "command-r": "Command R",
    "command-light": "Command Light",
}

# Provider segments stripped from feed keys before naming
KNOWN_KEY_PREFIXES = (
    "openai/", "anthropic/", "gemini/", "vertex_ai/",
    "deepseek/", "xai/", "cohere/", "cohere_chat/",
)


def to_display_name(feed_key: str) -> str:
    """Derive a human-readable name from a matched feed key."""
    base = feed_key
    for prefix in KNOWN_KEY_PREFIXES:
        if base.startswith(prefix):
            base = base[len(prefix):]
            break
    if base in MODEL_NAME_OVERRIDES:
        return MODEL_NAME_OVERRIDES[base]
    return " ".join(part[:1].upper() + part[1:] for part in base.split("-"))


def build_model(model_id: str, name: str, provider: Provider,
                input_price: float, output_price: float) -> CatalogModel:
    """Build a catalog entry with its tier derived from the prices."""
    return CatalogModel(
        id=model_id,
        name=name,
        provider=provider,
        input_price=input_price,
        output_price=output_price,
        tier=classify_tier(input_price, output_price),
    )


FALLBACK_SOURCE = "hardcoded-fallback"

# Static catalog served when the store is empty or unreachable
FALLBACK_MODELS: List[CatalogModel] = [
    build_model("gpt-4.1", "GPT-4.1", Provider.OPENAI, 2.00, 8.00),
    build_model("gpt-4.1-mini", "GPT-4.1 Mini", Provider.OPENAI, 0.40, 1.60),
    build_model("gpt-4.1-nano", "GPT-4.1 Nano", Provider.OPENAI, 0.10, 0.40),
    build_model("gpt-4.5-preview", "GPT-4.5 Preview", Provider.OPENAI, 75.00, 75.00),
    build_model("gpt-4o", "GPT-4o", Provider.OPENAI, 2.50, 10.00),
    build_model("gpt-4o-mini", "GPT-4o Mini", Provider.OPENAI, 0.15, 0.60),
    build_model("gpt-4", "GPT-4", Provider.OPENAI, 30.00, 60.00),
    build_model("gpt-3.5-turbo", "GPT-3.5 Turbo", Provider.OPENAI, 0.50, 1.50),
    build_model("o1", "o1", Provider.OPENAI, 15.00, 60.00),
    build_model("o3-mini", "o3-mini", Provider.OPENAI, 1.10, 4.40),
    build_model("o1-mini", "o1-mini", Provider.OPENAI, 1.10, 4.40),
    build_model("claude-opus-4-0", "Claude Opus 4", Provider.ANTHROPIC, 15.00, 75.00),
    build_model("claude-sonnet-4-0", "Claude Sonnet 4", Provider.ANTHROPIC, 3.00, 15.00),
    build_model("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", Provider.ANTHROPIC, 3.00, 15.00),
    build_model("claude-3-5-haiku-20241022", "Claude 3.5 Haiku", Provider.ANTHROPIC, 0.80, 4.00),
    build_model("claude-3-opus-20240229", "Claude 3 Opus", Provider.ANTHROPIC, 15.00, 75.00),
    build_model("claude-3-haiku-20240307", "Claude 3 Haiku", Provider.ANTHROPIC, 0.25, 1.25),
    build_model("gemini-2.5-pro", "Gemini 2.5 Pro", Provider.GOOGLE, 1.25, 10.00),
    build_model("gemini-2.5-flash", "Gemini 2.5 Flash", Provider.GOOGLE, 0.15, 0.60),
    build_model("gemini-2.0-flash", "Gemini 2.0 Flash", Provider.GOOGLE, 0.10, 0.40),
    build_model("gemini-1.5-pro", "Gemini 1.5 Pro", Provider.GOOGLE, 1.25, 5.00),
    build_model("gemini-1.5-flash", "Gemini 1.5 Flash", Provider.GOOGLE, 0.075, 0.30),
    build_model("deepseek-chat", "DeepSeek Chat (V3)", Provider.DEEPSEEK, 0.27, 1.10),
    build_model("deepseek-reasoner", "DeepSeek Reasoner (R1)", Provider.DEEPSEEK, 0.55, 2.19),
    build_model("grok-3", "Grok 3", Provider.XAI, 3.00, 15.00),
    build_model("grok-3-mini", "Grok 3 Mini", Provider.XAI, 0.30, 0.50),
    build_model("grok-2", "Grok 2", Provider.XAI, 2.00, 10.00),
    build_model("command-r-plus", "Command R+", Provider.COHERE, 2.50, 10.00),
    build_model("command-r", "Command R", Provider.COHERE, 0.15, 0.60),
    build_model("command-light", "Command Light", Provider.COHERE, 0.30, 0.60),
]
