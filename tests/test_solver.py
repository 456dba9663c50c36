"""Tests for the LP container and the HiGHS backend."""

import numpy as np
import pytest

from pydea import HighsSolver, LinearProgram, LPSolver, SolverError


def make_program(objective, A_ub, b_ub, A_eq=None, b_eq=None, lower=0.0):
    """Build a LinearProgram from plain lists."""
    objective = np.asarray(objective, dtype=float)
    n = len(objective)
    return LinearProgram(
        objective=objective,
        A_ub=np.asarray(A_ub, dtype=float).reshape(-1, n),
        b_ub=np.asarray(b_ub, dtype=float),
        A_eq=np.asarray(A_eq if A_eq is not None else [], dtype=float).reshape(-1, n),
        b_eq=np.asarray(b_eq if b_eq is not None else [], dtype=float),
        bounds=[(lower, None)] * n,
    )


class TestLinearProgram:
    """Test the LP container."""

    def test_counts(self):
        """Variables and constraints are counted from the arrays."""
        program = make_program([1, 1], [[1, 0], [0, 1]], [1, 2], [[1, 1]], [1])
        assert program.num_variables == 2
        assert program.num_constraints == 3


class TestHighsSolver:
    """Test the scipy.optimize.linprog backend."""

    def test_protocol(self):
        """HighsSolver satisfies the LPSolver protocol."""
        assert isinstance(HighsSolver(), LPSolver)

    def test_maximizes(self):
        """The returned value is the maximum, not the minimum."""
        # max x + 2y s.t. x + y <= 4, y <= 3
        program = make_program([1, 2], [[1, 1], [0, 1]], [4, 3])
        assert HighsSolver().solve(program) == pytest.approx(7.0)

    def test_equality_constraint(self):
        """Equality rows are honoured."""
        # max x s.t. x + y = 1, x <= 0.25
        program = make_program([1, 0], [[1, 0]], [0.25], [[1, 1]], [1])
        assert HighsSolver().solve(program) == pytest.approx(0.25)

    def test_infeasible(self):
        """Infeasible programs raise SolverError(kind='infeasible')."""
        # x <= -1 with x >= 0
        program = make_program([1], [[1]], [-1])
        with pytest.raises(SolverError) as exc_info:
            HighsSolver().solve(program)
        assert exc_info.value.kind == "infeasible"
        assert exc_info.value.entity_id is None

    def test_unbounded(self):
        """Unbounded programs raise SolverError(kind='unbounded')."""
        # max x with only -x <= 0
        program = make_program([1], [[-1]], [0])
        with pytest.raises(SolverError) as exc_info:
            HighsSolver(presolve=False).solve(program)
        assert exc_info.value.kind == "unbounded"

    def test_expired_time_limit(self):
        """A non-positive time limit fails without solving."""
        program = make_program([1], [[1]], [1])
        with pytest.raises(SolverError) as exc_info:
            HighsSolver().solve(program, time_limit=0.0)
        assert exc_info.value.kind == "timeout"

    def test_generous_time_limit(self):
        """A positive time limit still solves."""
        program = make_program([1], [[1]], [1])
        assert HighsSolver().solve(program, time_limit=30.0) == pytest.approx(1.0)

    def test_unknown_method(self):
        """linprog errors are reported as numerical failures."""
        program = make_program([1], [[1]], [1])
        with pytest.raises(SolverError) as exc_info:
            HighsSolver(method="no-such-method").solve(program)
        assert exc_info.value.kind == "numerical"
        assert exc_info.value.__cause__ is not None

    def test_repr(self):
        """repr shows the configuration."""
        assert repr(HighsSolver()) == "HighsSolver(method='highs', presolve=True)"
