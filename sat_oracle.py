# sat_oracle.py
# SAT solving oracle interface and the PySAT backend
#
# The Hamiltonian path reduction only needs add_clause / solve / model;
# any backend implementing SATOracle can be swapped in.

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pysat.solvers import Glucose42, Cadical195

from timeout_utils import ProcessFailedError, interrupt_after, run_in_process

DEFAULT_SOLVER = 'glucose42'
PYSAT_SOLVERS = {
    'glucose42': Glucose42,
    'cadical195': Cadical195,
}
# Backends whose interrupt() stops solve_limited; the others are solved in
# a child process that is killed when the budget runs out
INTERRUPTIBLE_SOLVERS = frozenset({'glucose42'})
SUPPORTED_SOLVERS = tuple(PYSAT_SOLVERS) + ('kissat',)


class InvalidClauseError(ValueError):
    """Empty clause, literal 0, or variable beyond the declared count"""
    pass


class OracleError(RuntimeError):
    """Backend failed without producing SAT, UNSAT or a timeout"""
    pass


class SolveStatus(str, Enum):
    SAT = 'SAT'
    UNSAT = 'UNSAT'
    TIMEOUT = 'TIMEOUT'


@dataclass
class SolveResult:
    """Outcome of one solve call. model is only set for SAT."""
    status: SolveStatus
    model: Optional[List[int]] = None
    solve_time: float = 0.0


class SATOracle(ABC):
    """
    Abstract SAT solving oracle

    Subclasses implement _add_clause and solve. add_clause validates every
    clause against the declared variable count before handing it over.
    """

    name = 'abstract'

    def __init__(self, num_variables):
        if num_variables < 0:
            raise ValueError(f"num_variables must be >= 0, got {num_variables}")
        self.num_variables = num_variables
        self.num_clauses = 0

    def add_clause(self, clause):
        """
        Add a clause to the solver

        Args:
            clause: Sequence of signed literals

        Raises:
            InvalidClauseError: clause is empty, contains 0, or a literal
                whose variable exceeds num_variables
        """
        clause = list(clause)
        if not clause:
            raise InvalidClauseError("Empty clause")
        for lit in clause:
            if not isinstance(lit, int) or isinstance(lit, bool):
                raise InvalidClauseError(f"Literal {lit!r} is not an int")
            if lit == 0 or abs(lit) > self.num_variables:
                raise InvalidClauseError(
                    f"Literal {lit} outside [1, {self.num_variables}] in clause {clause}")
        self._add_clause(clause)
        self.num_clauses += 1

    @abstractmethod
    def _add_clause(self, clause):
        ...

    @abstractmethod
    def solve(self, time_budget=None) -> SolveResult:
        """
        Decide satisfiability of the clauses added so far

        Args:
            time_budget: Seconds before giving up with TIMEOUT, None for no limit
        """
        ...

    def delete(self):
        """Release backend resources"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.delete()
        return False


class PySATOracle(SATOracle):
    """
    Oracle backed by a PySAT solver (Glucose42 or Cadical195)

    Time budgets on interruptible backends use
    solve_limited(expect_interrupt=True) with a timer that calls
    interrupt(). Other backends (Cadical195 ignores interrupt()) get the
    buffered clauses solved in a child process that is killed when the
    budget runs out. Either way an unfinished solve reports TIMEOUT.
    """

    def __init__(self, num_variables, solver_type=DEFAULT_SOLVER):
        super().__init__(num_variables)
        solver_type = solver_type.lower()
        if solver_type not in PYSAT_SOLVERS:
            raise ValueError(
                f"Unknown solver '{solver_type}', expected one of {sorted(PYSAT_SOLVERS)}")
        self.name = solver_type
        self.interruptible = solver_type in INTERRUPTIBLE_SOLVERS
        self.solver = PYSAT_SOLVERS[solver_type]()
        self.clauses = []

    def _add_clause(self, clause):
        self.solver.add_clause(clause)
        if not self.interruptible:
            self.clauses.append(clause)

    def solve(self, time_budget=None):
        start_time = time.time()
        model = None

        if time_budget is None:
            is_sat = self.solver.solve()
        elif self.interruptible:
            with interrupt_after(time_budget, self.solver.interrupt):
                is_sat = self.solver.solve_limited(expect_interrupt=True)
            self.solver.clear_interrupt()
        else:
            try:
                is_sat, model = run_in_process(_solve_clauses, time_budget,
                                               self.name, self.clauses)
            except TimeoutError:
                is_sat = None
            except ProcessFailedError as e:
                raise OracleError(f"{self.name} worker failed: {e}") from e

        solve_time = time.time() - start_time

        if is_sat is None:
            return SolveResult(SolveStatus.TIMEOUT, solve_time=solve_time)
        if is_sat:
            if model is None:
                model = self.solver.get_model()
            return SolveResult(SolveStatus.SAT, model=model, solve_time=solve_time)
        return SolveResult(SolveStatus.UNSAT, solve_time=solve_time)

    def delete(self):
        if self.solver is not None:
            self.solver.delete()
            self.solver = None
        self.clauses = []


def _solve_clauses(solver_type, clauses):
    """Child-process worker: fresh solver, all clauses, plain solve"""
    with PYSAT_SOLVERS[solver_type](bootstrap_with=clauses) as solver:
        is_sat = solver.solve()
        return is_sat, solver.get_model() if is_sat else None


def create_oracle(num_variables, solver_type=DEFAULT_SOLVER, kissat_path=None):
    """Create a SAT oracle by solver name: glucose42, cadical195 or kissat"""
    solver_type = solver_type.lower()
    if solver_type == 'kissat':
        from kissat_solver import KissatOracle
        if kissat_path is None:
            return KissatOracle(num_variables)
        return KissatOracle(num_variables, kissat_path=kissat_path)
    return PySATOracle(num_variables, solver_type)
