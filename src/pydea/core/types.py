"""Type aliases for PyDEA."""

from typing import TypeAlias

# Per-entity maps keyed by entity id
ScoreMap: TypeAlias = dict[str, float]
PercentileMap: TypeAlias = dict[str, float]
