"""
Perplexity API Client Module.
Uses the OpenAI-compatible interface with Perplexity's base URL.
"""

import asyncio
import logging
from typing import List, Dict, Optional, Any

import httpx
from openai import AsyncOpenAI

from aigrader.config import EngineSettings

logger = logging.getLogger(__name__)

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


def get_perplexity_client(
    settings: EngineSettings,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Optional[AsyncOpenAI]:
    """
    Get a Perplexity API client using the OpenAI-compatible interface.
    Returns None if Perplexity is not configured.
    """
    if not settings.is_perplexity_enabled():
        return None
    return AsyncOpenAI(
        api_key=settings.perplexity_api_key,
        base_url=PERPLEXITY_BASE_URL,
        http_client=http_client,
        max_retries=0,
        timeout=settings.provider_timeout,
    )


def _extract_citations(resp: Any) -> List[str]:
    citations = getattr(resp, "citations", None) or []
    if not citations:
        for result in getattr(resp, "search_results", None) or []:
            url = result.get("url") if isinstance(result, dict) else getattr(result, "url", None)
            if url:
                citations.append(url)
    return [c for c in citations if isinstance(c, str)]


async def call_perplexity_chat_with_citations(
    messages: List[Dict[str, str]],
    settings: EngineSettings,
    http_client: Optional[httpx.AsyncClient] = None,
    model: Optional[str] = None,
    **kwargs
) -> Optional[Dict[str, Any]]:
    """
    Call Perplexity and return both content and citations.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        settings: Credentials, model and timeout for this run
        http_client: Optional shared HTTP client
        model: Optional model override (defaults to settings.perplexity_model)
        **kwargs: Additional parameters to pass to the API

    Returns:
        Dict with 'content', 'citations' and 'usage' keys, or None when
        Perplexity is disabled. Provider errors propagate to the caller.
    """
    client = get_perplexity_client(settings, http_client)
    if client is None:
        logger.info("Perplexity is disabled (no API key). Skipping call.")
        return None

    resp = await asyncio.wait_for(
        client.chat.completions.create(
            model=model or settings.perplexity_model,
            messages=messages,
            extra_body={
                "return_citations": True,
                "return_related_questions": True,
            },
            **kwargs
        ),
        timeout=settings.provider_timeout,
    )

    choice = resp.choices[0] if resp.choices else None
    if not choice or not choice.message:
        raise ValueError("Perplexity returned no choices")

    return {
        "content": choice.message.content or "",
        "citations": _extract_citations(resp),
        "usage": resp.usage,
    }
