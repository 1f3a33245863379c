"""Shared fixtures: fake upstream providers routed through httpx.MockTransport."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from aigrader.config import EngineSettings

SERPAPI_HOST = "serpapi.com"
DATAFORSEO_HOST = "api.dataforseo.com"
PERPLEXITY_HOST = "api.perplexity.ai"
OPENAI_HOST = "api.openai.com"

TARGET_URL = "https://college.edu/nursing"


class FakeUpstream:
    """Routes requests by host to a responder and records every request."""

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], Any]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, host: str, responder) -> "FakeUpstream":
        if isinstance(responder, httpx.Response):
            fixed = responder
            responder = lambda request: fixed
        self.routes[host] = responder
        return self

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        responder = self.routes.get(request.url.host)
        if responder is None:
            return httpx.Response(404, json={"error": "no route"})
        return responder(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def hits(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]


def chat_completion(content: str, model: str = "gpt-4o", **extra) -> Dict[str, Any]:
    """An OpenAI-style chat completion body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 100, "completion_tokens": 200, "total_tokens": 300},
        **extra,
    }


def serpapi_overview(snippets: List[str], links: List[str]) -> Dict[str, Any]:
    return {
        "ai_overview": {
            "text_blocks": [{"type": "paragraph", "snippet": s} for s in snippets],
            "references": [{"title": f"Ref {i}", "link": link} for i, link in enumerate(links)],
        }
    }


def dataforseo_overview(text: Optional[str], links: List[str]) -> Dict[str, Any]:
    element = {"type": "ai_overview_element", "text": text, "links": [{"url": u} for u in links]}
    return {
        "status_code": 20000,
        "status_message": "Ok.",
        "tasks": [{"result": [{"items": [
            {"type": "organic", "url": "https://unrelated.com"},
            {"type": "ai_overview", "expanded_element": [element]},
        ]}]}],
    }


def make_settings(**overrides) -> EngineSettings:
    """Settings with no keys and no pauses unless overridden."""
    values = dict(
        openai_api_key=None,
        openai_model="gpt-4o",
        perplexity_api_key=None,
        perplexity_model="sonar-pro",
        serpapi_api_key=None,
        dataforseo_login=None,
        dataforseo_password=None,
        serpapi_timeout=2.0,
        provider_timeout=2.0,
        google_pause=0.0,
        perplexity_pause=0.0,
        chatgpt_pause=0.0,
    )
    values.update(overrides)
    return EngineSettings(**values)


@pytest.fixture()
def upstream():
    return FakeUpstream()


@pytest.fixture(autouse=True)
def clear_provider_env(monkeypatch):
    """Keep real credentials in the environment out of the tests."""
    for key in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "PERPLEXITY_API_KEY",
        "PERPLEXITY_MODEL",
        "SERPAPI_API_KEY",
        "DATAFORSEO_LOGIN",
        "DATAFORSEO_PASSWORD",
    ):
        monkeypatch.delenv(key, raising=False)
