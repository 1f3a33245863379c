"""
Run a live AI visibility check for one URL and keyword.
Uses whichever provider keys are set in the environment:
  python scripts/run_visibility_check.py https://example.edu/nursing "nursing degree"
"""

import asyncio
import json
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aigrader.cost_tracker import CostTracker
from aigrader.prompts import fallback_prompts
from aigrader.visibility_hub import check_ai_visibility


async def run_check(url: str, keyword: str):
    """Check ``url`` against the fallback prompts for ``keyword`` and print the summary."""
    cost_tracker = CostTracker()
    result = await check_ai_visibility(url, fallback_prompts(keyword), cost_tracker=cost_tracker)

    print("\n" + "=" * 60)
    print("AI VISIBILITY SUMMARY")
    print("=" * 60)
    print(json.dumps(result.summary.model_dump(), indent=2))
    print(f"\nEstimated API cost: {CostTracker.format_cost(cost_tracker.get_total_cost())}")
    print("=" * 60)

    return result


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/run_visibility_check.py <url> <keyword>")
        sys.exit(1)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(run_check(sys.argv[1], sys.argv[2]))
