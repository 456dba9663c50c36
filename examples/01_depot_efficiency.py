"""Example: Depot benchmarking with DEA.

Twenty warehouse depots are compared on three outputs (issues, receipts,
requisitions) and two inputs (stock, wages). Each depot gets a CCR
efficiency score: 1.0 means no other depot, or weighted mix of depots,
does better with the same resources.

This example shows how to:
- Score a multi-input/multi-output population
- Read the efficient frontier
- Turn raw scores into percentiles
"""

import pandas as pd
from pydea import Population, compute_efficiency, estimate_efficiency, estimate_percentiles

# =============================================================================
# Example 1: Raw efficiency scores
# =============================================================================

print("=" * 60)
print("Example 1: Depot Efficiency Scores")
print("=" * 60)

depots = pd.DataFrame(
    [
        # issues, receipts, reqs, stock, wages
        ("Depot1", 40, 55, 30, 3.0, 5.0),
        ("Depot2", 45, 50, 40, 2.5, 4.5),
        ("Depot3", 55, 45, 30, 4.0, 6.0),
        ("Depot4", 48, 20, 60, 6.0, 7.0),
        ("Depot5", 28, 50, 25, 2.3, 3.5),
        ("Depot6", 48, 20, 65, 4.0, 6.5),
        ("Depot7", 80, 65, 57, 7.0, 10.0),
        ("Depot8", 25, 48, 30, 4.4, 6.4),
        ("Depot9", 45, 64, 42, 3.0, 5.0),
        ("Depot10", 70, 65, 48, 5.0, 7.0),
        ("Depot11", 45, 65, 40, 5.0, 7.0),
        ("Depot12", 45, 40, 44, 2.0, 4.0),
        ("Depot13", 65, 25, 35, 5.0, 7.0),
        ("Depot14", 38, 18, 64, 4.0, 4.0),
        ("Depot15", 20, 50, 15, 2.0, 3.0),
        ("Depot16", 38, 20, 60, 3.0, 6.0),
        ("Depot17", 68, 64, 54, 7.0, 11.0),
        ("Depot18", 25, 38, 20, 4.0, 6.0),
        ("Depot19", 45, 67, 32, 3.0, 4.0),
        ("Depot20", 57, 60, 40, 5.0, 6.0),
    ],
    columns=["depot", "issues", "receipts", "reqs", "stock", "wages"],
)

population = Population.from_dataframe(
    depots,
    output_cols=["issues", "receipts", "reqs"],
    input_cols=["stock", "wages"],
    id_col="depot",
)

result = compute_efficiency(population)

for depot in depots["depot"]:
    marker = "*" if depot in result.efficient_ids else " "
    print(f"  {marker} {depot:<8} {result.scores[depot]:.4f}")
print()
print(f"Efficient depots: {result.num_efficient} of {result.num_entities}")
print()

print(result.summary())
print()

# =============================================================================
# Example 2: Percentiles
# =============================================================================

print("=" * 60)
print("Example 2: Efficiency Percentiles")
print("=" * 60)

# All frontier depots share the top percentile
ranking = estimate_percentiles(result.scores)
for depot, percentile in ranking.top(8):
    print(f"  {depot:<8} {percentile:6.2f}")
print()

# =============================================================================
# Example 3: Quick scoring from a dict
# =============================================================================

print("=" * 60)
print("Example 3: Convenience Function")
print("=" * 60)

scores = estimate_efficiency({
    "North": ([120, 80], [10.0]),
    "South": ([90, 95], [9.0]),
    "East": ([60, 40], [8.0]),
})
for name, score in scores.items():
    print(f"  {name:<6} {score:.4f}")
