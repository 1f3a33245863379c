"""
Visibility Models for AI search visibility analysis.
Defines the unified data structures that every engine adapter, the scorer
and the orchestrator exchange.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PromptIntent(str, Enum):
    INFORMATIONAL = "informational"
    NAVIGATIONAL = "navigational"
    COMPARISON = "comparison"
    TRANSACTIONAL = "transactional"


class PromptType(str, Enum):
    WHAT = "what"
    HOW = "how"
    BEST = "best"
    COST = "cost"
    WORTH = "worth"
    COMPARISON = "comparison"


class MatchType(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"
    NONE = "none"


class Prompt(BaseModel):
    """A search prompt produced by keyword expansion."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(validation_alias=AliasChoices("text", "prompt"))
    intent: PromptIntent = PromptIntent.INFORMATIONAL
    type: PromptType = PromptType.WHAT


class Citation(BaseModel):
    """A cited URL classified against the target URL."""
    model_config = ConfigDict(frozen=True)

    url: str
    match: MatchType = MatchType.NONE


class EngineCheckResult(BaseModel):
    """Result from a single engine for a single prompt."""
    available: bool
    cited: bool = False
    cited_exact: bool = False
    cited_partial: bool = False
    match_type: MatchType = MatchType.NONE
    position: Optional[int] = None
    domain_mentioned: bool = False
    total_citations: int = 0
    citations: List[Citation] = Field(default_factory=list)
    error: Optional[str] = None
    reason: Optional[str] = None
    has_ai_overview: Optional[bool] = None
    excerpt: Optional[str] = None
    source: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Whether this result counts toward the visibility score."""
        return self.available and not self.error


class PromptCheckResult(BaseModel):
    """All engine results for one prompt, keyed by engine name."""
    prompt: Prompt
    checks: Dict[str, EngineCheckResult] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class VisibilitySummary(BaseModel):
    """Score and rates computed from a flat list of engine results."""
    score: int = 0
    citation_rate: float = 0.0
    average_position: Optional[float] = None
    domain_mention_rate: float = 0.0
    total_checks: int = 0
    cited_count: int = 0
    insights: Optional[str] = None


class RunSummary(VisibilitySummary):
    """Visibility summary plus prompt and engine counts for a whole run."""
    total_prompts: int = 0
    engines_checked: int = 0


class VisibilityResult(BaseModel):
    """Complete result from one AI visibility run."""
    model_config = ConfigDict(frozen=True)

    url: str
    visibility: VisibilitySummary
    prompt_results: List[PromptCheckResult] = Field(default_factory=list)
    summary: RunSummary


class AIOverviewSnapshot(BaseModel):
    """Provider-neutral view of one Google AI Overview lookup."""
    has_ai_overview: bool
    overview_text: str = ""
    references: List[str] = Field(default_factory=list)
    source: Optional[str] = None
    reason: Optional[str] = None
