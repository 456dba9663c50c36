"""Linear program container and solver backends.

The efficiency engine only needs the optimal objective value of a
maximization problem, so the solver interface is a single method:

    solve(program, time_limit=None) -> float

HighsSolver (the default) delegates to scipy.optimize.linprog with the
HiGHS backend. Any object with a compatible solve() method can be passed
to the engine instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import linprog

from pydea.config import DEFAULT_SOLVER_METHOD
from pydea.core.exceptions import SolverError


@dataclass(frozen=True)
class LinearProgram:
    """
    A maximization LP in inequality/equality form.

        maximize    objective @ x
        subject to  A_ub @ x <= b_ub
                    A_eq @ x == b_eq
                    bounds[k][0] <= x[k] <= bounds[k][1]

    Attributes:
        objective: Coefficients of the objective to maximize
        A_ub, b_ub: Inequality constraints
        A_eq, b_eq: Equality constraints
        bounds: (lower, upper) per variable; None means unbounded
    """

    objective: NDArray[np.float64]
    A_ub: NDArray[np.float64]
    b_ub: NDArray[np.float64]
    A_eq: NDArray[np.float64]
    b_eq: NDArray[np.float64]
    bounds: list[tuple[float | None, float | None]]

    @property
    def num_variables(self) -> int:
        """Number of decision variables."""
        return len(self.objective)

    @property
    def num_constraints(self) -> int:
        """Number of inequality plus equality constraints."""
        return len(self.b_ub) + len(self.b_eq)


@runtime_checkable
class LPSolver(Protocol):
    """Anything that can return the optimal value of a LinearProgram."""

    def solve(self, program: LinearProgram, time_limit: float | None = None) -> float:
        """Return the optimal objective value or raise SolverError."""
        ...


class HighsSolver:
    """
    LP solver backed by scipy.optimize.linprog.

    Args:
        method: linprog method (default "highs")
        presolve: Whether HiGHS runs its presolve phase

    Status codes reported by linprog are mapped to SolverError kinds:
        1 -> "timeout" if the time limit was hit, otherwise "numerical"
        2 -> "infeasible"
        3 -> "unbounded"
        4 -> "numerical"
    """

    _STATUS_KINDS = {2: "infeasible", 3: "unbounded", 4: "numerical"}

    def __init__(self, method: str = DEFAULT_SOLVER_METHOD, presolve: bool = True) -> None:
        self.method = method
        self.presolve = presolve

    def solve(self, program: LinearProgram, time_limit: float | None = None) -> float:
        """Solve `program` and return its optimal (maximized) objective."""
        options: dict[str, object] = {"presolve": self.presolve}
        if time_limit is not None:
            if time_limit <= 0:
                raise SolverError("Time limit reached before the LP was solved.", kind="timeout")
            options["time_limit"] = float(time_limit)

        has_ub = len(program.b_ub) > 0
        has_eq = len(program.b_eq) > 0
        try:
            # linprog minimizes, so negate the objective
            result = linprog(
                -program.objective,
                A_ub=program.A_ub if has_ub else None,
                b_ub=program.b_ub if has_ub else None,
                A_eq=program.A_eq if has_eq else None,
                b_eq=program.b_eq if has_eq else None,
                bounds=program.bounds,
                method=self.method,
                options=options,
            )
        except Exception as e:
            raise SolverError(
                f"LP solver raised an error. Original error: {e}", kind="numerical"
            ) from e

        if result.status == 0:
            return float(-result.fun)

        message = str(result.message)
        if result.status == 1 and "time limit" in message.lower():
            kind = "timeout"
        else:
            kind = self._STATUS_KINDS.get(result.status, "numerical")
        raise SolverError(
            f"LP solver failed. Status: {result.status}, Message: {message}",
            kind=kind,
        )

    def __repr__(self) -> str:
        return f"HighsSolver(method={self.method!r}, presolve={self.presolve})"
