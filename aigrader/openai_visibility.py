"""
ChatGPT Citation Visibility Provider.
Asks OpenAI for an answer with sources and scans the free text for URLs,
since chat completions carry no structured citation list.
"""

import asyncio
import logging
from typing import List, Dict, Optional

import httpx
from openai import AsyncOpenAI

from aigrader.config import EngineSettings
from aigrader.cost_tracker import CostTracker
from aigrader.errors import describe_error
from aigrader.url_matching import build_check_result, extract_urls
from aigrader.visibility_models import EngineCheckResult

logger = logging.getLogger(__name__)


def get_openai_client(
    settings: EngineSettings,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Optional[AsyncOpenAI]:
    """Get an OpenAI client. Returns None if not configured."""
    if not settings.is_openai_enabled():
        return None
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        http_client=http_client,
        max_retries=0,
        timeout=settings.provider_timeout,
    )


def build_chatgpt_messages(prompt: str) -> List[Dict[str, str]]:
    """Build messages asking for an answer that lists its sources."""
    return [
        {
            "role": "system",
            "content": "You are a helpful assistant that provides accurate information with citations.",
        },
        {
            "role": "user",
            "content": f"{prompt}\n\nPlease provide sources/citations for your answer.",
        },
    ]


async def check_chatgpt(
    prompt: str,
    target_url: str,
    *,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
) -> EngineCheckResult:
    """Check whether a ChatGPT answer to ``prompt`` links to ``target_url``."""
    client = get_openai_client(settings, http_client)
    if client is None:
        return EngineCheckResult(available=False, reason="No API key")

    try:
        response = await asyncio.wait_for(
            client.chat.completions.create(
                model=settings.openai_model,
                messages=build_chatgpt_messages(prompt),
                temperature=0.7,
            ),
            timeout=settings.provider_timeout,
        )

        if cost_tracker is not None:
            cost_tracker.track_openai(response.usage)

        content = response.choices[0].message.content or ""
        return build_check_result(target_url, extract_urls(content), content)
    except Exception as e:
        logger.warning("ChatGPT check error for %r: %s", prompt, describe_error(e))
        return EngineCheckResult(available=True, error=describe_error(e))
