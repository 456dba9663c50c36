"""Default settings for PyDEA.

Every value here can be overridden per call through keyword arguments.
"""

# Lower bound on every input/output weight (non-Archimedean infinitesimal).
# Applied after column normalization, so it is relative to the largest
# value of each measure.
DEFAULT_EPSILON = 1e-6

# scipy.optimize.linprog backend
DEFAULT_SOLVER_METHOD = "highs"

# Per-entity LPs run serially unless a caller asks for a thread pool
DEFAULT_MAX_WORKERS = 1

# Scores within this distance of 1 are reported as exactly 1.0
FRONTIER_TOLERANCE = 1e-7

# Finalized scores are rounded to this many decimals so that entities with
# mathematically equal efficiency compare equal despite solver noise
SCORE_DECIMALS = 9

# LP objectives further than this outside [0, 1] trigger a warning
SCORE_TOLERANCE = 1e-6

# Popularity percentiles are reported with 2 decimals (half-up)
PERCENTILE_DECIMALS = 2

DEFAULT_TIE_METHOD = "min"
TIE_METHODS = ("min", "average")

# Ids of evaluated candidates; loaders never generate ids with this prefix
CANDIDATE_ID_PREFIX = "__candidate__"

# Social count names used by get_popularity(), in dataset column order
SOCIAL_COUNT_FIELDS = ("likes", "shares", "mentions")
