"""
URL normalization and citation matching.

Every engine adapter funnels its raw citation URLs through this module so
that "was the target cited, and where" is decided the same way for all
providers. None of these helpers raise on malformed input.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from aigrader.visibility_models import Citation, EngineCheckResult, MatchType

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_URL_RE = re.compile(r"https?://[^\s)\]]+")
_TRAILING_PUNCTUATION = ".,;:!?'\"]>"
EXCERPT_LENGTH = 500


@dataclass(frozen=True)
class MatchResult:
    type: MatchType
    weight: float


@dataclass(frozen=True)
class CitationMatch:
    """Best match of the target within one engine's citation list."""
    cited: bool
    cited_exact: bool
    cited_partial: bool
    match_type: MatchType
    position: Optional[int]


def normalize_url(url) -> str:
    """Strip the scheme and one trailing slash, then lower-case."""
    text = url if isinstance(url, str) else str(url or "")
    text = _SCHEME_RE.sub("", text.strip())
    if text.endswith("/"):
        text = text[:-1]
    return text.lower()


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def get_hostname(url) -> str:
    """Hostname without a leading ``www.``, lower-cased."""
    try:
        host = urlparse(url).hostname if isinstance(url, str) else None
    except ValueError:
        host = None
    if not host:
        host = normalize_url(url).split("/")[0]
    return _strip_www(host.lower())


def classify_match(target_url, cited_url) -> MatchResult:
    """
    Classify a cited URL against the target.

    Same normalized URL is an exact match; a different page on the same
    host is a partial match worth half credit.
    """
    target_norm = normalize_url(target_url)
    cited_norm = normalize_url(cited_url)

    if not target_norm or not cited_norm:
        return MatchResult(MatchType.NONE, 0)

    if target_norm == cited_norm:
        return MatchResult(MatchType.EXACT, 1)

    target_host = get_hostname(target_url)
    cited_host = get_hostname(cited_url)
    if target_host and cited_host and target_host == cited_host:
        return MatchResult(MatchType.PARTIAL, 0.5)

    return MatchResult(MatchType.NONE, 0)


def classify_citations(target_url: str, urls: Iterable) -> List[Citation]:
    """Deduplicate by normalized URL (first occurrence wins) and classify each."""
    seen = set()
    citations: List[Citation] = []
    for url in urls or []:
        key = normalize_url(url)
        if not key or key in seen:
            continue
        seen.add(key)
        citations.append(Citation(url=str(url), match=classify_match(target_url, url).type))
    return citations


def resolve_citation_match(citations: List[Citation]) -> CitationMatch:
    """Pick the first exact citation, else the first partial one."""
    exact_index = next(
        (i for i, c in enumerate(citations) if c.match == MatchType.EXACT), None
    )
    partial_index = next(
        (i for i, c in enumerate(citations) if c.match == MatchType.PARTIAL), None
    )

    if exact_index is not None:
        return CitationMatch(True, True, False, MatchType.EXACT, exact_index + 1)
    if partial_index is not None:
        return CitationMatch(True, False, True, MatchType.PARTIAL, partial_index + 1)
    return CitationMatch(False, False, False, MatchType.NONE, None)


def is_domain_mentioned(target_url: str, text: Optional[str]) -> bool:
    """Case-insensitive check for the target hostname in free text."""
    domain = get_hostname(target_url)
    if not domain or not text:
        return False
    return domain in text.lower()


def extract_urls(text: Optional[str]) -> List[str]:
    """Pull http(s) URLs out of free text, dropping trailing punctuation."""
    if not text:
        return []
    urls = []
    for match in _URL_RE.findall(text):
        url = match.rstrip(_TRAILING_PUNCTUATION)
        if url:
            urls.append(url)
    return urls


def build_check_result(
    target_url: str,
    cited_urls: Iterable,
    text: Optional[str],
    **fields,
) -> EngineCheckResult:
    """
    Turn one engine's answer text and raw citation URLs into a check result.

    The domain mention check runs over the full text; only the first
    ``EXCERPT_LENGTH`` characters are kept on the result.
    """
    citations = classify_citations(target_url, cited_urls)
    match = resolve_citation_match(citations)
    text = text or ""
    return EngineCheckResult(
        available=True,
        cited=match.cited,
        cited_exact=match.cited_exact,
        cited_partial=match.cited_partial,
        match_type=match.match_type,
        position=match.position,
        domain_mentioned=is_domain_mentioned(target_url, text),
        total_citations=len(citations),
        citations=citations,
        excerpt=text[:EXCERPT_LENGTH],
        **fields,
    )
