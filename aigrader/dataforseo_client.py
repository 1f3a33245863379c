"""
DataForSEO client for Google AI Overviews.
Fallback provider used when SerpAPI is unconfigured or fails.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from aigrader.config import EngineSettings
from aigrader.cost_tracker import CostTracker
from aigrader.errors import ProviderError, describe_error
from aigrader.visibility_models import AIOverviewSnapshot

logger = logging.getLogger(__name__)

DATAFORSEO_URL = "https://api.dataforseo.com/v3/serp/google/organic/live/advanced"
SOURCE_NAME = "DataForSEO"
STATUS_OK = 20000


def extract_overview(ai_overview: Dict[str, Any]) -> Tuple[str, List[str]]:
    """Text and link URLs from the ``ai_overview_element`` entries of an item."""
    parts: List[str] = []
    references: List[str] = []
    for element in ai_overview.get("expanded_element") or []:
        if not isinstance(element, dict) or element.get("type") != "ai_overview_element":
            continue
        if element.get("text"):
            parts.append(element["text"])
        for link in element.get("links") or []:
            if isinstance(link, dict) and link.get("url"):
                references.append(link["url"])
    return " ".join(parts).strip(), references


async def fetch_dataforseo_overview(
    prompt: str,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
) -> Optional[AIOverviewSnapshot]:
    """
    Look up the Google AI Overview for ``prompt`` through DataForSEO.

    Returns:
        An AIOverviewSnapshot, or None when DataForSEO is not configured or
        the call failed
    """
    if not settings.is_dataforseo_enabled():
        return None

    payload = [{
        "keyword": prompt,
        "location_code": 2840,
        "language_code": "en",
        "device": "desktop",
        "os": "windows",
        "depth": 10,
    }]

    try:
        response = await asyncio.wait_for(
            http_client.post(
                DATAFORSEO_URL,
                auth=(settings.dataforseo_login, settings.dataforseo_password),
                json=payload,
            ),
            timeout=settings.provider_timeout,
        )
        if not response.is_success:
            raise ProviderError(SOURCE_NAME, str(response.status_code), response.status_code)

        if cost_tracker is not None:
            cost_tracker.track_dataforseo()

        data = response.json()
        if data.get("status_code") != STATUS_OK:
            raise ProviderError(SOURCE_NAME, str(data.get("status_message")))

        tasks = data.get("tasks") or []
        task = tasks[0] if tasks and isinstance(tasks[0], dict) else {}
        results = task.get("result") or []
        result = results[0] if results and isinstance(results[0], dict) else None
        if not result:
            return AIOverviewSnapshot(
                has_ai_overview=False,
                source=SOURCE_NAME,
                reason="No results returned",
            )

        ai_overview = next(
            (item for item in result.get("items") or []
             if isinstance(item, dict) and item.get("type") == "ai_overview"),
            None,
        )
        if ai_overview is None:
            logger.info("[DATAFORSEO] No AI Overview for %r", prompt[:60])
            return AIOverviewSnapshot(
                has_ai_overview=False,
                source=SOURCE_NAME,
                reason="No AI Overview triggered for this query",
            )

        overview_text, references = extract_overview(ai_overview)
        return AIOverviewSnapshot(
            has_ai_overview=True,
            overview_text=overview_text,
            references=references,
            source=SOURCE_NAME,
        )
    except Exception as e:
        logger.warning("[DATAFORSEO] unavailable: %s", describe_error(e))
        return None
