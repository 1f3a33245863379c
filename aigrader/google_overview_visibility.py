"""
Google AI Overview Visibility Provider.
Checks whether the target URL is cited in the AI Overview Google shows for a prompt.
"""

import logging
from typing import Awaitable, Callable, List, Optional

import httpx

from aigrader.config import EngineSettings
from aigrader.cost_tracker import CostTracker
from aigrader.dataforseo_client import fetch_dataforseo_overview
from aigrader.errors import describe_error
from aigrader.serpapi_client import fetch_serpapi_overview
from aigrader.url_matching import build_check_result
from aigrader.visibility_models import AIOverviewSnapshot, EngineCheckResult

logger = logging.getLogger(__name__)

OverviewFetcher = Callable[
    [str, EngineSettings, httpx.AsyncClient, Optional[CostTracker]],
    Awaitable[Optional[AIOverviewSnapshot]],
]

# Tried in order until one returns a snapshot.
OVERVIEW_PROVIDERS: List[OverviewFetcher] = [
    fetch_serpapi_overview,
    fetch_dataforseo_overview,
]


async def fetch_ai_overview(
    prompt: str,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
    providers: Optional[List[OverviewFetcher]] = None,
) -> Optional[AIOverviewSnapshot]:
    """Walk the provider chain and return the first snapshot any provider produces."""
    for fetch in providers if providers is not None else OVERVIEW_PROVIDERS:
        snapshot = await fetch(prompt, settings, http_client, cost_tracker)
        if snapshot is not None:
            return snapshot
    return None


async def check_google_ai_overview(
    prompt: str,
    target_url: str,
    *,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
) -> EngineCheckResult:
    """
    Check the Google AI Overview for one prompt.

    Args:
        prompt: The search text
        target_url: URL whose citation we are looking for
        settings: Provider credentials and timeouts
        http_client: Shared HTTP client for this run
        cost_tracker: Optional sink notified of each billable call

    Returns:
        EngineCheckResult. ``available=False`` means no provider could be
        reached; ``has_ai_overview=False`` means Google showed no overview.
    """
    try:
        snapshot = await fetch_ai_overview(prompt, settings, http_client, cost_tracker)
    except Exception as e:
        logger.warning("Google AI Overview check failed for %r: %s", prompt, describe_error(e))
        return EngineCheckResult(available=True, error=describe_error(e))

    if snapshot is None:
        return EngineCheckResult(available=False, reason="No API available")

    if not snapshot.has_ai_overview:
        return EngineCheckResult(
            available=True,
            has_ai_overview=False,
            reason=snapshot.reason,
            source=snapshot.source,
        )

    try:
        return build_check_result(
            target_url,
            snapshot.references,
            snapshot.overview_text,
            has_ai_overview=True,
            source=snapshot.source,
        )
    except Exception as e:
        logger.warning("Could not process AI Overview for %r: %s", prompt, describe_error(e))
        return EngineCheckResult(available=True, error=describe_error(e))
