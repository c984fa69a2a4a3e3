# hamiltonian_path_solver.py
# Hamiltonian path s -> t in a directed graph via SAT
# Works with Glucose42, Cadical195 (PySAT) and the Kissat binary

import argparse
import sys
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from graph_model import complete_graph, cycle_graph, random_graph
from hamiltonian_encoder import InvalidInputError, encode_hamiltonian_path, validate_query
from sat_oracle import DEFAULT_SOLVER, SUPPORTED_SOLVERS, SolveStatus, create_oracle
from solution_decoder import DecodingError, decode_path
from timeout_utils import TimeoutConfig

EXIT_PATH_FOUND = 0
EXIT_NO_PATH = 1
EXIT_UNKNOWN = 2


@dataclass
class EncodingStats:
    """Diagnostics for one query; never used for control flow"""
    num_vertices: int = 0
    num_variables: int = 0
    num_clauses: int = 0
    family_counts: Dict[str, int] = field(default_factory=dict)
    encode_time: float = 0.0
    solve_time: float = 0.0
    solver: str = ''


@dataclass
class PathFound:
    path: List[int]
    stats: Optional[EncodingStats] = None
    status = 'SAT'


@dataclass
class NoPath:
    stats: Optional[EncodingStats] = None
    status = 'UNSAT'


@dataclass
class Unknown:
    reason: str
    stats: Optional[EncodingStats] = None
    status = 'UNKNOWN'


def verify_hamiltonian_path(graph, path, s, t):
    """
    Check that path is a Hamiltonian path s -> t in graph

    Returns:
        (bool, str): validity and a short explanation
    """
    n = graph.vertex_number()
    if len(path) != n:
        return False, f"Path has {len(path)} vertices, expected {n}"
    if sorted(path) != list(range(n)):
        return False, "Path is not a permutation of the vertices"
    if path[0] != s:
        return False, f"Path starts at {path[0]}, expected {s}"
    if path[-1] != t:
        return False, f"Path ends at {path[-1]}, expected {t}"
    for u, v in zip(path, path[1:]):
        if not graph.has_edge(u, v):
            return False, f"Missing edge {u} -> {v}"
    return True, "OK"


class HamiltonianPathSolver:
    """
    Hamiltonian path decision via SAT

    Pipeline per query: encode -> solve -> decode, run exactly once.
    The oracle is created per query and deleted afterwards, so separate
    queries share no state.
    """

    def __init__(self, graph, solver_type=DEFAULT_SOLVER, oracle_factory=None,
                 verbose=True, kissat_path=None):
        """
        Args:
            graph: Graph to search
            solver_type: glucose42, cadical195 or kissat
            oracle_factory: Callable num_variables -> SATOracle; overrides solver_type
            verbose: Print encoding counts and outcome
            kissat_path: Kissat executable for solver_type='kissat'
        """
        self.graph = graph
        self.solver_type = solver_type
        self.verbose = verbose
        if oracle_factory is None:
            def oracle_factory(num_variables):
                return create_oracle(num_variables, solver_type, kissat_path=kissat_path)
        self.oracle_factory = oracle_factory

    def solve(self, s, t, time_budget=None):
        """
        Decide whether a Hamiltonian path from s to t exists

        Args:
            s: Source vertex
            t: Target vertex
            time_budget: Seconds for the SAT call, None for no limit

        Returns:
            PathFound, NoPath or Unknown

        Raises:
            InvalidInputError: empty graph or endpoints out of range
            DecodingError: the oracle returned a model inconsistent with the encoding
        """
        s, t = validate_query(self.graph, s, t)
        start_time = time.time()
        cnf = encode_hamiltonian_path(self.graph, s, t, verbose=self.verbose)
        stats = EncodingStats(
            num_vertices=cnf.num_vertices,
            num_variables=cnf.num_variables,
            num_clauses=cnf.num_clauses,
            family_counts=dict(cnf.family_counts),
            encode_time=time.time() - start_time,
        )

        oracle = self.oracle_factory(cnf.num_variables)
        try:
            stats.solver = oracle.name
            for clause in cnf.clauses:
                oracle.add_clause(clause)
            result = oracle.solve(time_budget)
        finally:
            oracle.delete()
        stats.solve_time = result.solve_time

        if result.status == SolveStatus.TIMEOUT:
            if self.verbose:
                print(f"Timeout after {result.solve_time:.2f}s, sorry!")
            if time_budget is None:
                return Unknown("oracle reported a timeout without a time budget", stats)
            return Unknown(f"timeout after {time_budget}s", stats)

        if result.status == SolveStatus.UNSAT:
            if self.verbose:
                print("Unsatisfiable problem!")
            return NoPath(stats)

        path = decode_path(result.model, cnf.num_vertices)
        is_valid, message = verify_hamiltonian_path(self.graph, path, s, t)
        if not is_valid:
            raise DecodingError(f"Decoded path {path} is not a Hamiltonian path: {message}")

        if self.verbose:
            print("Satisfiable problem!")
            print(path)
        return PathFound(path, stats)


def hamiltonian_path(graph, s, t, time_budget=None, solver_type=DEFAULT_SOLVER,
                     oracle_factory=None, verbose=False, kissat_path=None):
    """Run one Hamiltonian path query; see HamiltonianPathSolver.solve"""
    solver = HamiltonianPathSolver(graph, solver_type=solver_type,
                                   oracle_factory=oracle_factory, verbose=verbose,
                                   kissat_path=kissat_path)
    return solver.solve(s, t, time_budget=time_budget)


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description='Decide Hamiltonian path existence between two vertices via SAT',
        epilog='Examples:\n'
               '  hamiltonian-path --cycle 100 --source 7 --target 6\n'
               '  hamiltonian-path --complete 20 --source 5 --target 8 --solver cadical195\n'
               '  hamiltonian-path --mtx graph.mtx --timeout 60',
        formatter_class=argparse.RawDescriptionHelpFormatter)

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--mtx', metavar='FILE', help='Matrix Market graph file')
    source.add_argument('--complete', type=int, metavar='N', help='Complete graph K_N')
    source.add_argument('--cycle', type=int, metavar='N', help='Directed cycle C_N')
    source.add_argument('--random', type=int, metavar='N', help='Random directed graph on N vertices')

    parser.add_argument('--edge-probability', type=float, default=0.5,
                        help='Edge probability for --random (default: 0.5)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for --random')
    parser.add_argument('--source', '-s', type=int, default=0, help='Source vertex (default: 0)')
    parser.add_argument('--target', '-t', type=int, default=None,
                        help='Target vertex (default: n-1)')
    parser.add_argument('--solver', choices=SUPPORTED_SOLVERS, default=DEFAULT_SOLVER,
                        help=f'SAT solver to use (default: {DEFAULT_SOLVER})')
    parser.add_argument('--kissat-path', default=None, help='Kissat executable')
    parser.add_argument('--timeout', type=float, default=None,
                        help='SAT solve timeout in seconds (default: none)')
    parser.add_argument('--dimacs', metavar='FILE',
                        help='Write the CNF in DIMACS format and exit without solving')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only print the result')
    return parser


def load_graph(args):
    if args.mtx:
        from mtx_parser import MTXParser
        parser = MTXParser(args.mtx, verbose=not args.quiet)
        parser.parse_mtx_file()
        return parser.to_graph()
    if args.complete is not None:
        return complete_graph(args.complete)
    if args.cycle is not None:
        return cycle_graph(args.cycle)
    return random_graph(args.random, args.edge_probability, seed=args.seed)


def main(argv=None):
    """Command line entry point; returns the process exit code"""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    timeout_config = TimeoutConfig(sat_solve_timeout=args.timeout)

    try:
        graph = load_graph(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    s = args.source
    t = graph.vertex_number() - 1 if args.target is None else args.target
    verbose = not args.quiet

    if args.dimacs:
        try:
            cnf = encode_hamiltonian_path(graph, s, t, verbose=verbose)
        except InvalidInputError as e:
            parser.error(str(e))
        with open(args.dimacs, 'w') as f:
            f.write(cnf.to_dimacs())
        print(f"DIMACS written to {args.dimacs}: "
              f"{cnf.num_variables} variables, {cnf.num_clauses} clauses")
        return EXIT_PATH_FOUND

    if verbose:
        print("=" * 60)
        print("HAMILTONIAN PATH VIA SAT")
        print("=" * 60)
        print(f"Graph: {graph.vertex_number()} vertices, {graph.num_edges()} edges")
        print(f"Query: {s} -> {t}")
        print(f"Solver: {args.solver.upper()}")
        print(timeout_config.get_timeout_summary())

    solver = HamiltonianPathSolver(graph, solver_type=args.solver, verbose=verbose,
                                   kissat_path=args.kissat_path)
    try:
        result = solver.solve(s, t, time_budget=timeout_config.sat_solve_timeout)
    except (InvalidInputError, FileNotFoundError) as e:
        parser.error(str(e))

    if isinstance(result, PathFound):
        print(f"PATH {' '.join(map(str, result.path))}")
        return EXIT_PATH_FOUND
    if isinstance(result, NoPath):
        print("NO PATH")
        return EXIT_NO_PATH
    print(f"UNKNOWN ({result.reason})")
    return EXIT_UNKNOWN


if __name__ == '__main__':
    sys.exit(main())
