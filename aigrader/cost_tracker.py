"""
Cost Tracking for AI visibility runs.
Tallies provider requests and estimates spend. A tracker is handed to the
engine adapters explicitly; scoring never depends on it.
"""

from typing import Any, Dict, Optional


PRICING = {
    "openai": {
        "input_per_1m": 2.50,
        "output_per_1m": 10.00,
    },
    "perplexity": {
        "per_request": 0.005,
    },
    "serpapi": {
        "per_search": 0.0025,
    },
    "dataforseo": {
        "per_request": 0.0125,
    },
}


def _usage_value(usage: Any, key: str) -> int:
    if isinstance(usage, dict):
        return usage.get(key) or 0
    return getattr(usage, key, None) or 0


class CostTracker:
    """Accumulates request counts and estimated cost per provider."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.costs: Dict[str, Dict[str, float]] = {
            "openai": {"requests": 0, "input_tokens": 0, "output_tokens": 0, "cost": 0.0},
            "perplexity": {"requests": 0, "cost": 0.0},
            "serpapi": {"requests": 0, "cost": 0.0},
            "dataforseo": {"requests": 0, "cost": 0.0},
        }

    def track_openai(self, usage: Optional[Any]) -> None:
        """
        Track an OpenAI chat completion.

        Args:
            usage: The ``usage`` block of the response, as an SDK object or dict
        """
        if not usage:
            return

        input_tokens = _usage_value(usage, "prompt_tokens")
        output_tokens = _usage_value(usage, "completion_tokens")

        entry = self.costs["openai"]
        entry["requests"] += 1
        entry["input_tokens"] += input_tokens
        entry["output_tokens"] += output_tokens
        entry["cost"] += (
            (input_tokens / 1_000_000) * PRICING["openai"]["input_per_1m"]
            + (output_tokens / 1_000_000) * PRICING["openai"]["output_per_1m"]
        )

    def track_perplexity(self) -> None:
        self.costs["perplexity"]["requests"] += 1
        self.costs["perplexity"]["cost"] += PRICING["perplexity"]["per_request"]

    def track_serpapi(self) -> None:
        self.costs["serpapi"]["requests"] += 1
        self.costs["serpapi"]["cost"] += PRICING["serpapi"]["per_search"]

    def track_dataforseo(self) -> None:
        self.costs["dataforseo"]["requests"] += 1
        self.costs["dataforseo"]["cost"] += PRICING["dataforseo"]["per_request"]

    def get_total_cost(self) -> float:
        return sum(entry["cost"] for entry in self.costs.values())

    def get_summary(self) -> Dict[str, Any]:
        """Total and per-provider breakdown, costs rounded to 4 decimals."""
        breakdown = {}
        for provider, entry in self.costs.items():
            breakdown[provider] = {
                **entry,
                "cost": round(entry["cost"], 4),
            }
        return {
            "total_cost": round(self.get_total_cost(), 4),
            "breakdown": breakdown,
        }

    @staticmethod
    def format_cost(cost: float) -> str:
        if cost < 0.01:
            return f"${cost * 100:.4f} cents"
        return f"${cost:.4f}"
