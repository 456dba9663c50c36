"""Example: Page popularity from social media counts.

A reference set of pages (likes, shares, mentions) forms the efficient
frontier. A new page is scored against it and its DEA score is reported
as a percentile: 70 means the page is at least as popular as 70% of the
reference pages.

This example shows how to:
- Load a reference population from a tab-separated file
- Query the popularity of new pages
- Inspect the detailed result
"""

import logging
from pathlib import Path

from pydea import EvaluationFailedError, PopularityEvaluator

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

DATASET = Path(__file__).resolve().parent.parent / "tests" / "data" / "socialcounts.txt"

# =============================================================================
# Example 1: Popularity queries
# =============================================================================

print("=" * 60)
print("Example 1: Popularity of New Pages")
print("=" * 60)

evaluator = PopularityEvaluator()
evaluator.load_file(DATASET)

pages = {
    "viral post": (9000, 2100, 91000),
    "typical post": (135, 337, 9079),
    "quiet post": (4, 0, 10),
}
for name, (likes, shares, mentions) in pages.items():
    popularity = evaluator.get_popularity(likes, shares, mentions)
    print(f"  {name:<13} {popularity:6.2f}")
print()

# =============================================================================
# Example 2: Detailed result
# =============================================================================

print("=" * 60)
print("Example 2: Detailed Result")
print("=" * 60)

result = evaluator.evaluate_detailed([135, 337, 9079])
print(result.summary())
print()

# =============================================================================
# Example 3: Invalid input
# =============================================================================

print("=" * 60)
print("Example 3: Error Handling")
print("=" * 60)

try:
    evaluator.get_popularity(-5, 10, 20)
except EvaluationFailedError as e:
    print(f"  Rejected: {e}")
    print(f"  Cause: {type(e.cause).__name__}")
