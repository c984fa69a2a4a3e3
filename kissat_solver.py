# kissat_solver.py
# SAT oracle backed by the external Kissat binary (DIMACS in, "s"/"v" lines out)

import os
import shutil
import subprocess
import tempfile
import time

from sat_oracle import SATOracle, SolveResult, SolveStatus, OracleError

KISSAT_SAT_EXIT_CODE = 10
KISSAT_UNSAT_EXIT_CODE = 20


class KissatOracle(SATOracle):
    """
    Wrapper class for Kissat SAT solver
    Clauses are buffered and written to a temporary DIMACS file on solve
    """

    name = 'kissat'

    def __init__(self, num_variables, kissat_path='kissat'):
        """
        Args:
            num_variables: Declared variable count (DIMACS header)
            kissat_path: Path to kissat executable, or a name looked up on PATH
        """
        super().__init__(num_variables)
        resolved = shutil.which(kissat_path)
        if resolved is None:
            raise FileNotFoundError(f"Kissat executable not found at: {kissat_path}")
        self.kissat_path = resolved
        self.clauses = []
        self.temp_dir = None

    def _add_clause(self, clause):
        self.clauses.append(clause)

    def solve(self, time_budget=None):
        """
        Solve the buffered CNF with kissat

        Returns:
            SolveResult; TIMEOUT if the process outlives time_budget

        Raises:
            OracleError: kissat exited with a code other than 10 or 20
        """
        self.temp_dir = tempfile.mkdtemp(prefix='kissat_')
        cnf_file = os.path.join(self.temp_dir, 'formula.cnf')

        try:
            self._write_cnf_file(cnf_file)

            start_time = time.time()
            try:
                result = subprocess.run([self.kissat_path, cnf_file],
                                        capture_output=True,
                                        text=True,
                                        timeout=time_budget)
            except subprocess.TimeoutExpired:
                return SolveResult(SolveStatus.TIMEOUT, solve_time=time.time() - start_time)
            solve_time = time.time() - start_time

            if result.returncode == KISSAT_SAT_EXIT_CODE:
                return SolveResult(SolveStatus.SAT,
                                   model=parse_model(result.stdout),
                                   solve_time=solve_time)
            if result.returncode == KISSAT_UNSAT_EXIT_CODE:
                return SolveResult(SolveStatus.UNSAT, solve_time=solve_time)

            raise OracleError(
                f"Kissat unexpected return code {result.returncode}: {result.stderr.strip()}")

        finally:
            self._cleanup()

    def delete(self):
        self._cleanup()
        self.clauses = []

    def _write_cnf_file(self, cnf_file):
        """Write the CNF formula to file in DIMACS format"""
        with open(cnf_file, 'w') as f:
            f.write(f"p cnf {self.num_variables} {len(self.clauses)}\n")
            for clause in self.clauses:
                f.write(' '.join(map(str, clause)) + ' 0\n')

    def _cleanup(self):
        if self.temp_dir and os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir, ignore_errors=True)
        self.temp_dir = None


def parse_model(output):
    """
    Collect literals from "v ..." lines of a solver's output

    The terminating 0 is dropped; variables the solver omits are absent.
    """
    model = []
    for line in output.splitlines():
        line = line.strip()
        if line.startswith('v '):
            for lit in line[2:].split():
                if lit != '0':
                    model.append(int(lit))
    return model
