"""
Visibility Hub - Orchestrates the multi-engine AI visibility check.
Runs every configured engine for every prompt, in sequence, and scores the
combined results.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Union

import httpx

from aigrader.config import (
    ENGINE_CHATGPT, ENGINE_GOOGLE, ENGINE_PERPLEXITY,
    EngineSettings, load_engine_settings,
)
from aigrader.cost_tracker import CostTracker
from aigrader.google_overview_visibility import check_google_ai_overview
from aigrader.openai_visibility import check_chatgpt
from aigrader.perplexity_visibility import check_perplexity
from aigrader.visibility_models import (
    EngineCheckResult, Prompt, PromptCheckResult, RunSummary, VisibilityResult,
)
from aigrader.visibility_scorer import calculate_visibility_score

logger = logging.getLogger(__name__)

ENGINE_CHECKS = {
    ENGINE_GOOGLE: check_google_ai_overview,
    ENGINE_PERPLEXITY: check_perplexity,
    ENGINE_CHATGPT: check_chatgpt,
}

ENGINE_LABELS = {
    ENGINE_GOOGLE: "Google",
    ENGINE_PERPLEXITY: "Perplexity",
    ENGINE_CHATGPT: "ChatGPT",
}


def _status_marker(check: Optional[EngineCheckResult]) -> str:
    if check is None:
        return "-"
    if check.cited:
        return "✓"
    if check.has_ai_overview is False:
        return "○"
    return "✗"


def format_prompt_status(result: PromptCheckResult) -> str:
    """One-line cited/not-cited marker per engine for progress logging."""
    return "  ".join(
        f"{label}: {_status_marker(result.checks.get(engine))}"
        for engine, label in ENGINE_LABELS.items()
    )


async def check_prompt(
    prompt: Prompt,
    target_url: str,
    engines: Sequence[str],
    *,
    settings: EngineSettings,
    http_client: httpx.AsyncClient,
    cost_tracker: Optional[CostTracker] = None,
) -> PromptCheckResult:
    """
    Run each engine in ``engines`` for one prompt, one at a time.

    Engines that are not listed are left out of ``checks`` entirely. Each
    call is followed by that engine's rate-limit pause.
    """
    checks: Dict[str, EngineCheckResult] = {}

    for engine in engines:
        check = ENGINE_CHECKS[engine]
        checks[engine] = await check(
            prompt.text,
            target_url,
            settings=settings,
            http_client=http_client,
            cost_tracker=cost_tracker,
        )
        pause = settings.pause_for(engine)
        if pause > 0:
            await asyncio.sleep(pause)

    return PromptCheckResult(prompt=prompt, checks=checks)


@asynccontextmanager
async def _run_http_client(
    http_client: Optional[httpx.AsyncClient],
    settings: EngineSettings,
) -> AsyncIterator[httpx.AsyncClient]:
    if http_client is not None:
        yield http_client
        return
    async with httpx.AsyncClient(timeout=settings.provider_timeout, follow_redirects=True) as client:
        yield client


async def check_ai_visibility(
    url: str,
    prompts: Sequence[Union[Prompt, Dict[str, Any]]],
    *,
    settings: Optional[EngineSettings] = None,
    cost_tracker: Optional[CostTracker] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> VisibilityResult:
    """
    Check URL visibility across AI engines for multiple prompts.

    Args:
        url: Target URL
        prompts: Prompt objects, or dicts with 'text' (or 'prompt'), 'intent', 'type'
        settings: Provider configuration; read from the environment when omitted
        cost_tracker: Optional sink notified of each billable provider call
        http_client: Optional HTTP client shared by every provider call

    Returns:
        VisibilityResult with per-prompt results and the combined score
    """
    settings = settings or load_engine_settings()
    prompt_list: List[Prompt] = [
        p if isinstance(p, Prompt) else Prompt.model_validate(p) for p in prompts
    ]
    engines = settings.enabled_engines()

    missing = settings.missing_recommended_keys()
    if missing:
        logger.warning("[VISIBILITY HUB] Missing recommended API keys: %s", ", ".join(missing))

    logger.info(
        "[VISIBILITY HUB] Checking AI visibility for %s: %d prompts across engines %s",
        url, len(prompt_list), engines,
    )

    results: List[PromptCheckResult] = []
    async with _run_http_client(http_client, settings) as client:
        for prompt in prompt_list:
            logger.info("[VISIBILITY HUB] -> %r", prompt.text[:60])
            result = await check_prompt(
                prompt,
                url,
                engines,
                settings=settings,
                http_client=client,
                cost_tracker=cost_tracker,
            )
            results.append(result)
            logger.info("[VISIBILITY HUB]    %s", format_prompt_status(result))

    all_checks = [check for r in results for check in r.checks.values()]
    visibility = calculate_visibility_score(all_checks)

    logger.info(
        "[VISIBILITY HUB] AI Visibility Score: %d/100 (citation rate %s%%, domain mention rate %s%%, avg position %s)",
        visibility.score, visibility.citation_rate,
        visibility.domain_mention_rate, visibility.average_position,
    )

    # Engine availability is assumed uniform across prompts within a run.
    engines_checked = len(results[0].checks) if results else 0

    return VisibilityResult(
        url=url,
        visibility=visibility,
        prompt_results=results,
        summary=RunSummary(
            total_prompts=len(prompt_list),
            engines_checked=engines_checked,
            **visibility.model_dump(),
        ),
    )
