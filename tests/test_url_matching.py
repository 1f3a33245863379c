"""URL normalization, match classification and citation resolution."""

from __future__ import annotations

import pytest

from aigrader.url_matching import (
    build_check_result,
    classify_citations,
    classify_match,
    extract_urls,
    get_hostname,
    is_domain_mentioned,
    normalize_url,
    resolve_citation_match,
)
from aigrader.visibility_models import Citation, MatchType


def test_normalize_strips_scheme_trailing_slash_and_case():
    assert normalize_url("https://A.com/X/") == "a.com/x"
    assert normalize_url("http://a.com") == "a.com"
    assert normalize_url("HTTPS://A.COM/X") == "a.com/x"


def test_normalize_never_raises_on_odd_input():
    assert normalize_url(None) == ""
    assert normalize_url("") == ""
    assert normalize_url(12345) == "12345"


def test_hostname_strips_www_and_falls_back_without_scheme():
    assert get_hostname("https://www.College.edu/nursing") == "college.edu"
    assert get_hostname("college.edu/nursing") == "college.edu"
    assert get_hostname("http://[broken") == "[broken"
    assert get_hostname("") == ""


@pytest.mark.parametrize("url", [
    "https://a.com/x",
    "http://example.org/",
    "https://www.college.edu/nursing?ref=1",
])
def test_same_url_is_exact(url):
    assert classify_match(url, url).type == MatchType.EXACT
    assert classify_match(url, url).weight == 1


def test_scheme_and_trailing_slash_do_not_matter():
    assert classify_match("https://a.com/x/", "a.com/x").type == MatchType.EXACT


def test_other_page_on_same_host_is_partial():
    result = classify_match("https://a.com/page1", "https://a.com/page2")
    assert result.type == MatchType.PARTIAL
    assert result.weight == 0.5


def test_www_prefix_still_counts_as_same_host():
    assert classify_match("https://www.a.com/page1", "https://a.com/other").type == MatchType.PARTIAL


def test_different_host_is_none():
    result = classify_match("https://a.com", "https://b.com")
    assert result.type == MatchType.NONE
    assert result.weight == 0


@pytest.mark.parametrize("cited", ["https://a.com", "", None, "not a url"])
def test_empty_target_is_none(cited):
    assert classify_match("", cited).type == MatchType.NONE


def test_citations_deduplicate_by_normalized_url():
    citations = classify_citations(
        "https://a.com/x",
        ["https://a.com/x", "https://a.com/x/", "HTTPS://A.COM/X"],
    )
    assert citations == [Citation(url="https://a.com/x", match=MatchType.EXACT)]


def test_citations_keep_order_and_drop_empty_urls():
    citations = classify_citations(
        "https://a.com/x",
        ["https://b.com", "", "https://a.com/y", "https://b.com/"],
    )
    assert [c.url for c in citations] == ["https://b.com", "https://a.com/y"]
    assert [c.match for c in citations] == [MatchType.NONE, MatchType.PARTIAL]


def test_exact_match_wins_over_earlier_partial():
    citations = [
        Citation(url="https://a.com/other", match=MatchType.PARTIAL),
        Citation(url="https://b.com", match=MatchType.NONE),
        Citation(url="https://a.com/x", match=MatchType.EXACT),
    ]
    match = resolve_citation_match(citations)
    assert match.cited and match.cited_exact and not match.cited_partial
    assert match.match_type == MatchType.EXACT
    assert match.position == 3


def test_partial_position_used_without_exact():
    citations = [
        Citation(url="https://b.com", match=MatchType.NONE),
        Citation(url="https://a.com/other", match=MatchType.PARTIAL),
    ]
    match = resolve_citation_match(citations)
    assert match.cited_partial and not match.cited_exact
    assert match.position == 2


def test_no_match_has_no_position():
    match = resolve_citation_match([Citation(url="https://b.com", match=MatchType.NONE)])
    assert not match.cited
    assert match.position is None
    assert match.match_type == MatchType.NONE


def test_domain_mention_is_case_insensitive():
    assert is_domain_mentioned("https://www.college.edu/nursing", "See COLLEGE.EDU for details")
    assert not is_domain_mentioned("https://college.edu/nursing", "See otherschool.edu")
    assert not is_domain_mentioned("", "anything at all")
    assert not is_domain_mentioned("https://college.edu", None)


def test_extract_urls_from_free_text():
    text = (
        "Sources:\n"
        "1. https://college.edu/nursing.\n"
        "2. [Guide](https://otherschool.edu/guide), and https://example.com/a?b=1;"
    )
    assert extract_urls(text) == [
        "https://college.edu/nursing",
        "https://otherschool.edu/guide",
        "https://example.com/a?b=1",
    ]
    assert extract_urls("") == []


def test_extract_urls_from_markdown_link_with_url_text():
    text = "See [https://college.edu/nursing](https://college.edu/nursing) for details."
    urls = extract_urls(text)
    assert urls == ["https://college.edu/nursing", "https://college.edu/nursing"]

    citations = classify_citations("https://college.edu/nursing", urls)
    assert len(citations) == 1
    match = resolve_citation_match(citations)
    assert match.match_type == MatchType.EXACT
    assert match.position == 1


def test_build_check_result_truncates_excerpt_after_mention_check():
    text = "x" * 600 + " college.edu"
    result = build_check_result("https://college.edu/nursing", [], text)
    assert result.available
    assert result.domain_mentioned
    assert len(result.excerpt) == 500
    assert result.total_citations == 0
    assert result.position is None
