"""
Configuration module for the AI visibility engine.
Centralizes environment variable access and per-engine settings.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
PERPLEXITY_MODEL = os.getenv("PERPLEXITY_MODEL", "sonar-pro")

SERPAPI_TIMEOUT_SECONDS = float(os.getenv("SERPAPI_TIMEOUT_SECONDS", "10"))
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "30"))

GOOGLE_PAUSE_SECONDS = float(os.getenv("GOOGLE_PAUSE_SECONDS", "2"))
PERPLEXITY_PAUSE_SECONDS = float(os.getenv("PERPLEXITY_PAUSE_SECONDS", "1"))
CHATGPT_PAUSE_SECONDS = float(os.getenv("CHATGPT_PAUSE_SECONDS", "1"))

ENGINE_GOOGLE = "google_ai_overview"
ENGINE_PERPLEXITY = "perplexity"
ENGINE_CHATGPT = "chatgpt"


@dataclass(frozen=True)
class EngineSettings:
    """Snapshot of provider credentials and pacing for one visibility run."""
    openai_api_key: Optional[str] = None
    openai_model: str = OPENAI_MODEL
    perplexity_api_key: Optional[str] = None
    perplexity_model: str = PERPLEXITY_MODEL
    serpapi_api_key: Optional[str] = None
    dataforseo_login: Optional[str] = None
    dataforseo_password: Optional[str] = None
    serpapi_timeout: float = SERPAPI_TIMEOUT_SECONDS
    provider_timeout: float = PROVIDER_TIMEOUT_SECONDS
    google_pause: float = GOOGLE_PAUSE_SECONDS
    perplexity_pause: float = PERPLEXITY_PAUSE_SECONDS
    chatgpt_pause: float = CHATGPT_PAUSE_SECONDS

    def is_serpapi_enabled(self) -> bool:
        return bool(self.serpapi_api_key)

    def is_dataforseo_enabled(self) -> bool:
        return bool(self.dataforseo_login and self.dataforseo_password)

    def is_google_enabled(self) -> bool:
        """Google AI Overviews need either SerpAPI or DataForSEO."""
        return self.is_serpapi_enabled() or self.is_dataforseo_enabled()

    def is_perplexity_enabled(self) -> bool:
        return bool(self.perplexity_api_key)

    def is_openai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    def enabled_engines(self) -> List[str]:
        """Configured engines, in the order they are called for each prompt."""
        engines = []
        if self.is_google_enabled():
            engines.append(ENGINE_GOOGLE)
        if self.is_perplexity_enabled():
            engines.append(ENGINE_PERPLEXITY)
        if self.is_openai_enabled():
            engines.append(ENGINE_CHATGPT)
        return engines

    def pause_for(self, engine: str) -> float:
        """Rate-limit pause to observe after calling ``engine``."""
        return {
            ENGINE_GOOGLE: self.google_pause,
            ENGINE_PERPLEXITY: self.perplexity_pause,
            ENGINE_CHATGPT: self.chatgpt_pause,
        }.get(engine, 0.0)

    def missing_recommended_keys(self) -> List[str]:
        missing = []
        if not self.perplexity_api_key:
            missing.append("PERPLEXITY_API_KEY")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing


def load_engine_settings() -> EngineSettings:
    """Read provider credentials, timeouts and pauses from the environment at call time."""
    return EngineSettings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", OPENAI_MODEL),
        perplexity_api_key=os.getenv("PERPLEXITY_API_KEY"),
        perplexity_model=os.getenv("PERPLEXITY_MODEL", PERPLEXITY_MODEL),
        serpapi_api_key=os.getenv("SERPAPI_API_KEY"),
        dataforseo_login=os.getenv("DATAFORSEO_LOGIN"),
        dataforseo_password=os.getenv("DATAFORSEO_PASSWORD"),
        serpapi_timeout=float(os.getenv("SERPAPI_TIMEOUT_SECONDS", SERPAPI_TIMEOUT_SECONDS)),
        provider_timeout=float(os.getenv("PROVIDER_TIMEOUT_SECONDS", PROVIDER_TIMEOUT_SECONDS)),
        google_pause=float(os.getenv("GOOGLE_PAUSE_SECONDS", GOOGLE_PAUSE_SECONDS)),
        perplexity_pause=float(os.getenv("PERPLEXITY_PAUSE_SECONDS", PERPLEXITY_PAUSE_SECONDS)),
        chatgpt_pause=float(os.getenv("CHATGPT_PAUSE_SECONDS", CHATGPT_PAUSE_SECONDS)),
    )
