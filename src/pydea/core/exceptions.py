"""Custom exceptions and warnings for PyDEA.

This module provides a hierarchy of exceptions for specific error types,
all inheriting from ValueError so that callers catching ValueError keep
working.

Exception Hierarchy:
    PyDEAError (ValueError)
    ├── DataValidationError
    │   ├── ValueRangeError
    │   ├── NaNInfError
    │   ├── DegenerateInputError
    │   └── EmptyInputError
    ├── ParseError
    ├── SolverError
    └── EvaluationFailedError

Warning Classes:
    DataQualityWarning (UserWarning)
    NumericalInstabilityWarning (UserWarning)
"""

from __future__ import annotations


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class PyDEAError(ValueError):
    """Base exception for all PyDEA errors.

    Inherits from ValueError, so existing code that catches ValueError
    will also catch PyDEAError.

    Example:
        >>> try:
        ...     scores = score_population(population)
        ... except PyDEAError as e:
        ...     print(f"PyDEA error: {e}")
    """

    pass


# =============================================================================
# DATA VALIDATION EXCEPTIONS
# =============================================================================


class DataValidationError(PyDEAError):
    """Raised when input data fails validation checks.

    This is the base class for all data-related validation errors.
    Use more specific subclasses when possible.
    """

    pass


class ValueRangeError(DataValidationError):
    """Raised when measurements are outside the allowed range.

    Common causes:
        - Negative input or output measurements
        - Negative social counts passed to get_popularity()

    Example:
        >>> EntityRecord("a", outputs=[1.0, -2.0])
        ValueRangeError: Found 1 negative outputs for entity 'a'...
    """

    pass


class NaNInfError(DataValidationError):
    """Raised when NaN or Inf values are detected in measurement vectors.

    Common causes:
        - Missing data encoded as NaN
        - Division by zero in preprocessing
        - Numeric overflow producing Inf
    """

    pass


class DegenerateInputError(DataValidationError):
    """Raised when a population cannot be scored by DEA.

    Common causes:
        - Fewer than 2 entities (no frontier to compare against)
        - Records with different numbers of inputs or outputs
        - No output measures at all

    No linear program is solved when this error is raised.
    """

    pass


class EmptyInputError(DataValidationError):
    """Raised when an empty score map is passed to the percentile ranker."""

    pass


# =============================================================================
# LOADING EXCEPTIONS
# =============================================================================


class ParseError(PyDEAError):
    """Raised when a measurement dataset cannot be parsed.

    The whole load is aborted: no partial population is returned and an
    evaluator keeps its previously loaded reference population.

    Attributes:
        line: 1-based line number of the offending row, if known
        column: 0-based field index of the offending value, if known

    Example:
        >>> load_population("socialcounts.txt")
        ParseError: Non-numeric value 'abc' at line 17, field 2...
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


# =============================================================================
# COMPUTATION EXCEPTIONS
# =============================================================================


class SolverError(PyDEAError):
    """Raised when the linear program of an entity has no optimum.

    Under the CCR multiplier formulation this should not happen for
    well-formed non-negative data, so it usually points at a data problem
    (an entity with all-zero inputs) or a deadline that was too short.

    Attributes:
        entity_id: Id of the entity whose LP failed (None when raised by a
            bare solver call outside the efficiency engine)
        kind: One of "infeasible", "unbounded", "numerical", "timeout",
            "cancelled"

    Common causes:
        - An entity whose inputs are all zero (normalization impossible)
        - Extreme values causing numerical instability
        - A timeout shorter than the time needed for N solves
    """

    KINDS = ("infeasible", "unbounded", "numerical", "timeout", "cancelled")

    def __init__(
        self,
        message: str,
        entity_id: str | None = None,
        kind: str = "numerical",
    ) -> None:
        super().__init__(message)
        self.entity_id = entity_id
        self.kind = kind

    def with_entity(self, entity_id: str) -> SolverError:
        """Return a copy of this error tagged with the failing entity id."""
        return SolverError(
            f"LP for entity '{entity_id}' failed ({self.kind}): {self}",
            entity_id=entity_id,
            kind=self.kind,
        )


class EvaluationFailedError(PyDEAError):
    """Raised when scoring a single candidate against a reference fails.

    Wraps the underlying DegenerateInputError, SolverError or validation
    error; the original exception is available as ``__cause__`` and as
    the ``cause`` attribute. The reference population is never modified
    by a failed evaluation.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


# =============================================================================
# WARNINGS
# =============================================================================


class DataQualityWarning(UserWarning):
    """Warning for data quality issues that don't prevent computation.

    Emitted when:
        - A measure is zero for every entity (it cannot discriminate)
        - An entity has all-zero outputs (its score is 0)

    Example:
        >>> import warnings
        >>> warnings.filterwarnings('ignore', category=DataQualityWarning)
    """

    pass


class NumericalInstabilityWarning(UserWarning):
    """Warning for potential numerical issues in computations.

    Emitted when an LP objective lands noticeably outside [0, 1] before
    clipping. Consider rescaling the data or relaxing epsilon.
    """

    pass
