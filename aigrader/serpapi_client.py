"""
SerpAPI client for Google AI Overviews.
Primary provider in the Google AI Overview fallback chain.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from aigrader.config import EngineSettings
from aigrader.cost_tracker import CostTracker
from aigrader.errors import ProviderError, describe_error
from aigrader.visibility_models import AIOverviewSnapshot

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search"
SOURCE_NAME = "SerpAPI"


def extract_overview_text(ai_overview: Dict[str, Any]) -> str:
    """
    Flatten an ``ai_overview`` node into plain text.

    Newer responses split the overview into ``text_blocks`` whose entries
    carry a ``snippet`` and optionally a nested ``list`` of snippets. Older
    responses have a single ``text`` field.
    """
    parts: List[str] = []
    for block in ai_overview.get("text_blocks") or []:
        if not isinstance(block, dict):
            continue
        if block.get("snippet"):
            parts.append(block["snippet"])
        for item in block.get("list") or []:
            if isinstance(item, dict) and item.get("snippet"):
                parts.append(item["snippet"])

    text = " ".join(parts).strip()
    if not text and ai_overview.get("text"):
        text = ai_overview["text"]
    return text


def extract_references(ai_overview: Dict[str, Any]) -> List[str]:
    """Reference URLs from ``references``, falling back to legacy ``links``."""
    references = [
        ref["link"] for ref in ai_overview.get("references") or []
        if isinstance(ref, dict) and ref.get("link")
    ]
    if not references:
        references = [
            link["link"] for link in ai_overview.get("links") or []
            if isinstance(link, dict) and link.get("link")
        ]
    return references


async def _fetch_expanded_overview(
    page_token: str,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
) -> Optional[Dict[str, Any]]:
    """Follow a ``page_token`` stub to the full AI Overview node."""
    params = {
        "api_key": settings.serpapi_api_key,
        "engine": "google_ai_overview",
        "page_token": page_token,
    }
    try:
        response = await asyncio.wait_for(
            http_client.get(SERPAPI_URL, params=params),
            timeout=settings.serpapi_timeout,
        )
        if response.is_success:
            return response.json().get("ai_overview")
    except Exception as e:
        logger.warning("[SERPAPI] Failed to fetch expanded AI Overview: %s", describe_error(e))
    return None


async def fetch_serpapi_overview(
    prompt: str,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
) -> Optional[AIOverviewSnapshot]:
    """
    Look up the Google AI Overview for ``prompt`` through SerpAPI.

    Returns:
        An AIOverviewSnapshot (possibly with ``has_ai_overview=False``), or
        None when SerpAPI is not configured or the call failed
    """
    if not settings.is_serpapi_enabled():
        return None

    params = {
        "api_key": settings.serpapi_api_key,
        "q": prompt,
        "location": "United States",
        "hl": "en",
        "gl": "us",
        "google_domain": "google.com",
    }

    try:
        response = await asyncio.wait_for(
            http_client.get(SERPAPI_URL, params=params),
            timeout=settings.serpapi_timeout,
        )
        if not response.is_success:
            raise ProviderError(SOURCE_NAME, str(response.status_code), response.status_code)

        if cost_tracker is not None:
            cost_tracker.track_serpapi()

        data = response.json()
        ai_overview = data.get("ai_overview")

        if not ai_overview:
            logger.info("[SERPAPI] No AI Overview for %r", prompt[:60])
            return AIOverviewSnapshot(
                has_ai_overview=False,
                source=SOURCE_NAME,
                reason="No AI Overview triggered for this query",
            )

        if ai_overview.get("page_token") and not ai_overview.get("text_blocks"):
            expanded = await _fetch_expanded_overview(
                ai_overview["page_token"], settings, http_client
            )
            ai_overview = expanded or ai_overview

        return AIOverviewSnapshot(
            has_ai_overview=True,
            overview_text=extract_overview_text(ai_overview),
            references=extract_references(ai_overview),
            source=SOURCE_NAME,
        )
    except Exception as e:
        logger.warning("[SERPAPI] unavailable: %s", describe_error(e))
        return None
