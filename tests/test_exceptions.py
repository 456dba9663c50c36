"""Tests for custom exceptions and error handling in PyDEA."""

import numpy as np
import pytest

from pydea import (
    # Data containers
    EntityRecord,
    Population,
    # Exceptions
    PyDEAError,
    DataValidationError,
    ValueRangeError,
    NaNInfError,
    DegenerateInputError,
    EmptyInputError,
    ParseError,
    SolverError,
    EvaluationFailedError,
    # Warnings
    DataQualityWarning,
    NumericalInstabilityWarning,
)


class TestExceptionHierarchy:
    """Test that exception hierarchy is correct."""

    def test_pydea_error_is_value_error(self):
        """PyDEAError should inherit from ValueError."""
        assert issubclass(PyDEAError, ValueError)

    def test_data_validation_error_hierarchy(self):
        """DataValidationError and subclasses should inherit from PyDEAError."""
        assert issubclass(DataValidationError, PyDEAError)
        assert issubclass(ValueRangeError, DataValidationError)
        assert issubclass(NaNInfError, DataValidationError)
        assert issubclass(DegenerateInputError, DataValidationError)
        assert issubclass(EmptyInputError, DataValidationError)

    def test_other_errors_hierarchy(self):
        """Loading, solving and evaluation errors inherit from PyDEAError."""
        assert issubclass(ParseError, PyDEAError)
        assert issubclass(SolverError, PyDEAError)
        assert issubclass(EvaluationFailedError, PyDEAError)
        assert not issubclass(SolverError, DataValidationError)

    def test_warnings_hierarchy(self):
        """Warning classes should inherit from UserWarning."""
        assert issubclass(DataQualityWarning, UserWarning)
        assert issubclass(NumericalInstabilityWarning, UserWarning)

    def test_catch_all_pydea_errors(self):
        """Library errors should be catchable with PyDEAError."""
        with pytest.raises(PyDEAError):
            Population([
                EntityRecord("a", outputs=[1.0, 2.0]),
                EntityRecord("b", outputs=[1.0]),
            ])

    def test_catch_all_value_errors(self):
        """Library errors should be catchable with ValueError."""
        with pytest.raises(ValueError):
            EntityRecord("a", outputs=[1.0, -2.0])


class TestErrorAttributes:
    """Test context carried by errors."""

    def test_parse_error_location(self):
        """ParseError keeps line and column."""
        error = ParseError("bad value", line=4, column=2)
        assert error.line == 4
        assert error.column == 2
        assert str(error) == "bad value"

    def test_parse_error_location_optional(self):
        """Location defaults to None."""
        error = ParseError("empty")
        assert error.line is None
        assert error.column is None

    def test_solver_error_defaults(self):
        """SolverError defaults to a numerical failure without entity."""
        error = SolverError("failed")
        assert error.entity_id is None
        assert error.kind == "numerical"

    def test_solver_error_kinds(self):
        """Every documented failure kind is listed."""
        assert set(SolverError.KINDS) == {
            "infeasible", "unbounded", "numerical", "timeout", "cancelled"
        }

    def test_with_entity(self):
        """with_entity() tags a copy and keeps the kind."""
        error = SolverError("status 2", kind="infeasible")
        tagged = error.with_entity("Depot4")

        assert tagged is not error
        assert tagged.entity_id == "Depot4"
        assert tagged.kind == "infeasible"
        assert "Depot4" in str(tagged)
        assert "infeasible" in str(tagged)
        assert error.entity_id is None

    def test_evaluation_failed_cause(self):
        """EvaluationFailedError exposes the wrapped exception."""
        cause = DegenerateInputError("too few entities")
        error = EvaluationFailedError("failed", cause=cause)
        assert error.cause is cause


class TestEntityRecordValidation:
    """Test measurement validation in EntityRecord."""

    def test_negative_raises(self):
        """Negative measurements raise ValueRangeError."""
        with pytest.raises(ValueRangeError, match="negative"):
            EntityRecord("a", outputs=[1.0, -2.0])

    def test_negative_input_raises(self):
        """Negative inputs are rejected too."""
        with pytest.raises(ValueRangeError):
            EntityRecord("a", outputs=[1.0], inputs=[-0.5])

    def test_nan_raises(self):
        """NaN values raise NaNInfError."""
        with pytest.raises(NaNInfError):
            EntityRecord("a", outputs=[1.0, np.nan])

    def test_inf_raises(self):
        """Inf values raise NaNInfError."""
        with pytest.raises(NaNInfError):
            EntityRecord("a", outputs=[1.0], inputs=[np.inf])

    def test_non_numeric_raises(self):
        """Non-numeric values raise DataValidationError."""
        with pytest.raises(DataValidationError, match="numeric"):
            EntityRecord("a", outputs=["many", "few"])

    def test_2d_raises(self):
        """Matrices are not valid measurement vectors."""
        with pytest.raises(DataValidationError, match="1D"):
            EntityRecord("a", outputs=[[1.0, 2.0], [3.0, 4.0]])

    def test_error_names_entity(self):
        """The entity id appears in the message."""
        with pytest.raises(ValueRangeError, match="'page-7'"):
            EntityRecord("page-7", outputs=[-1.0])
