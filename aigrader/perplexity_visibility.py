"""
Perplexity Visibility Provider.
Uses Perplexity's real-time web search answer and citation list to check
whether the target URL is surfaced.
"""

import logging
from typing import Dict, List, Optional

import httpx

from aigrader.config import EngineSettings
from aigrader.cost_tracker import CostTracker
from aigrader.errors import describe_error
from aigrader.perplexity_client import call_perplexity_chat_with_citations
from aigrader.url_matching import build_check_result
from aigrader.visibility_models import EngineCheckResult

logger = logging.getLogger(__name__)


def build_perplexity_messages(prompt: str) -> List[Dict[str, str]]:
    """The prompt is sent as-is, the way a user would type it."""
    return [{"role": "user", "content": prompt}]


async def check_perplexity(
    prompt: str,
    target_url: str,
    *,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
) -> EngineCheckResult:
    """Check whether Perplexity cites ``target_url`` when answering ``prompt``."""
    if not settings.is_perplexity_enabled():
        return EngineCheckResult(available=False, reason="No API key")

    try:
        answer = await call_perplexity_chat_with_citations(
            build_perplexity_messages(prompt), settings, http_client
        )

        if cost_tracker is not None:
            cost_tracker.track_perplexity()

        return build_check_result(target_url, answer["citations"], answer["content"])
    except Exception as e:
        logger.warning("Perplexity check error for %r: %s", prompt, describe_error(e))
        return EngineCheckResult(available=True, error=describe_error(e))
