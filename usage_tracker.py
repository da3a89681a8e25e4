"""
Session usage tracking.

Accumulates token counts for the lifetime of the process and derives an
estimated dollar cost from fixed per-million-token rates. Nothing is
persisted; a restart starts a fresh session.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ONE_MILLION = Decimal("1000000")


@dataclass(frozen=True)
class ModelPricing:
    """Per-million-token pricing for a single model."""
    provider: str
    label: str
    input_per_1m: Decimal
    output_per_1m: Decimal

    def cost(self, input_tokens: int, output_tokens: int) -> Decimal:
        input_cost = Decimal(input_tokens) * self.input_per_1m / ONE_MILLION
        output_cost = Decimal(output_tokens) * self.output_per_1m / ONE_MILLION
        return input_cost + output_cost


# Fixed rates, no dynamic fetching
PRICING_TABLE = {
    "gemini-2.5-pro": ModelPricing(
        provider="Google",
        label="Gemini 2.5 Pro",
        input_per_1m=Decimal("1.25"),
        output_per_1m=Decimal("10.00"),
    ),
    "gemini-2.5-flash": ModelPricing(
        provider="Google",
        label="Gemini 2.5 Flash",
        input_per_1m=Decimal("0.30"),
        output_per_1m=Decimal("2.50"),
    ),
    "gemini-2.0-flash": ModelPricing(
        provider="Google",
        label="Gemini 2.0 Flash",
        input_per_1m=Decimal("0.10"),
        output_per_1m=Decimal("0.40"),
    ),
}


def get_pricing(model: str) -> ModelPricing:
    """Get pricing for a specific model.

    Raises:
        ValueError: If model is not in the pricing table
    """
    if model not in PRICING_TABLE:
        raise ValueError(f"Unsupported model: {model}")
    return PRICING_TABLE[model]


def _format_rate(rate: Decimal) -> str:
    return f"${rate.quantize(Decimal('0.01'))}"


def _coerce_count(value: Optional[Any], name: str) -> int:
    # Missing counts are zero; bool is an int subclass but never a token count
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


class UsageTracker:
    """In-memory token and cost accumulator for one process.

    Counters only ever grow between resets. Updates and snapshots hold a
    lock because the development server handles requests on threads.
    """

    def __init__(self, pricing: ModelPricing):
        self.pricing = pricing
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        """Zero every counter and stamp a new reset time."""
        with self._lock:
            self.input_tokens = 0
            self.output_tokens = 0
            self.request_count = 0
            self.last_reset = datetime.now(timezone.utc)

    def record(self, input_tokens: Optional[int] = None, output_tokens: Optional[int] = None) -> None:
        """Add one request's token usage to the session totals.

        Args:
            input_tokens: Prompt tokens billed for the request (None counts as 0)
            output_tokens: Completion tokens billed for the request (None counts as 0)

        Raises:
            ValueError: If a count is negative or not an integer
        """
        input_tokens = _coerce_count(input_tokens, "input_tokens")
        output_tokens = _coerce_count(output_tokens, "output_tokens")

        with self._lock:
            self.input_tokens += input_tokens
            self.output_tokens += output_tokens
            self.request_count += 1
            total_requests = self.request_count

        logger.debug(
            "Recorded usage: %d input, %d output tokens (request #%d)",
            input_tokens, output_tokens, total_requests,
        )

    @property
    def estimated_cost(self) -> float:
        with self._lock:
            return float(self.pricing.cost(self.input_tokens, self.output_tokens))

    def snapshot(self) -> Dict[str, Any]:
        """Return current totals, derived cost and the rates used."""
        with self._lock:
            input_tokens = self.input_tokens
            output_tokens = self.output_tokens
            request_count = self.request_count
            last_reset = self.last_reset

        return {
            "provider": self.pricing.provider,
            "model": self.pricing.label,
            "session": {
                "inputTokens": input_tokens,
                "outputTokens": output_tokens,
                "totalTokens": input_tokens + output_tokens,
                "requestCount": request_count,
                "estimatedCost": float(self.pricing.cost(input_tokens, output_tokens)),
                "lastReset": last_reset.isoformat(),
            },
            "pricing": {
                "inputPer1M": _format_rate(self.pricing.input_per_1m),
                "outputPer1M": _format_rate(self.pricing.output_per_1m),
            },
        }
