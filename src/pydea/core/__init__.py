"""Core data structures for PyDEA."""

from pydea.core.population import EntityRecord, Population
from pydea.core.result import (
    EfficiencyResult,
    PercentileResult,
    PopularityResult,
)
from pydea.core.exceptions import (
    PyDEAError,
    DataValidationError,
    ValueRangeError,
    NaNInfError,
    DegenerateInputError,
    EmptyInputError,
    ParseError,
    SolverError,
    EvaluationFailedError,
    DataQualityWarning,
    NumericalInstabilityWarning,
)

__all__ = [
    "EntityRecord",
    "Population",
    "EfficiencyResult",
    "PercentileResult",
    "PopularityResult",
    # Exceptions
    "PyDEAError",
    "DataValidationError",
    "ValueRangeError",
    "NaNInfError",
    "DegenerateInputError",
    "EmptyInputError",
    "ParseError",
    "SolverError",
    "EvaluationFailedError",
    # Warnings
    "DataQualityWarning",
    "NumericalInstabilityWarning",
]
