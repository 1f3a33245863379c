"""
Visibility Scorer - reduces engine check results to a single 0-100 score.

The score weighs citation rate at 60% and domain mention rate at 20%, and
adds a ranking bonus of 20 when the average citation position is in the top
3 (10 for the top 5), capped at 100.
"""

import math
from typing import Iterable

from aigrader.visibility_models import EngineCheckResult, VisibilitySummary

CITATION_WEIGHT = 0.6
DOMAIN_MENTION_WEIGHT = 0.2
EXACT_CREDIT = 1.0
PARTIAL_CREDIT = 0.5
NO_RESULTS_INSIGHT = "No valid results available"


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def position_bonus(average_position) -> int:
    if average_position is None:
        return 0
    if average_position <= 3:
        return 20
    if average_position <= 5:
        return 10
    return 0


def calculate_visibility_score(results: Iterable[EngineCheckResult]) -> VisibilitySummary:
    """
    Compute citation rate, mention rate, average position and score.

    Results that are unavailable or carry an error are ignored. Exact
    citations earn full credit and partial (same host) citations half; a
    result with only ``cited`` set counts as exact.
    """
    valid = [r for r in results if r.is_valid]

    if not valid:
        return VisibilitySummary(insights=NO_RESULTS_INSIGHT)

    weighted_sum = 0.0
    cited_count = 0
    for r in valid:
        if r.cited_exact:
            weighted_sum += EXACT_CREDIT
        elif r.cited_partial:
            weighted_sum += PARTIAL_CREDIT
        elif r.cited:
            weighted_sum += EXACT_CREDIT
        else:
            continue
        cited_count += 1

    citation_rate = weighted_sum / len(valid) * 100

    positions = [r.position for r in valid if r.position]
    average_position = sum(positions) / len(positions) if positions else None

    mentions = sum(1 for r in valid if r.domain_mentioned)
    domain_mention_rate = mentions / len(valid) * 100

    score = (
        citation_rate * CITATION_WEIGHT
        + domain_mention_rate * DOMAIN_MENTION_WEIGHT
        + position_bonus(average_position)
    )
    score = min(score, 100)

    return VisibilitySummary(
        score=int(_round_half_up(score)),
        citation_rate=_round_half_up(citation_rate),
        average_position=(
            _round_half_up(average_position, 1) if average_position is not None else None
        ),
        domain_mention_rate=_round_half_up(domain_mention_rate),
        total_checks=len(valid),
        cited_count=cited_count,
    )
