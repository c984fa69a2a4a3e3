# benchmark_runner.py
# Automated benchmark runner for Hamiltonian path via SAT
# Runs MTX files and generated graph families with a timeout and exports results to CSV

import csv
import os
import time
from datetime import datetime

from graph_model import complete_graph, cycle_graph, random_graph
from hamiltonian_path_solver import HamiltonianPathSolver, PathFound
from mtx_parser import load_mtx_graph
from sat_oracle import DEFAULT_SOLVER, SUPPORTED_SOLVERS
from timeout_utils import DEFAULT_BENCHMARK_PROBLEM_TIMEOUT, TimeoutConfig

GRAPH_FAMILIES = ('complete', 'cycle', 'random')

CSV_FIELDNAMES = [
    'name', 'nodes', 'edges', 'source', 'target', 'status', 'path_length',
    'variables', 'clauses', 'time_seconds', 'solver', 'timeout_limit'
]


class BenchmarkRunner:
    """Main benchmark runner class"""

    # CONFIGURATION SETTINGS
    MAX_PROBLEM_SIZE = 60              # Skip problems with n > this value
    RESULTS_FOLDER = 'results'         # Output directory name

    def __init__(self, timeout_seconds=None, solver_type=None, max_vertices=None,
                 results_dir=None, seed=42):
        self.timeout_config = TimeoutConfig()
        if timeout_seconds is not None:
            self.timeout_config.update_timeouts(benchmark_problem_timeout=timeout_seconds)
        self.timeout_seconds = self.timeout_config.benchmark_problem_timeout
        self.solver_type = solver_type or DEFAULT_SOLVER
        self.max_vertices = self.MAX_PROBLEM_SIZE if max_vertices is None else max_vertices
        self.results_dir = results_dir or os.path.join(os.getcwd(), self.RESULTS_FOLDER)
        self.seed = seed
        self.results = []

    def _record(self, name, graph, s, t, status, elapsed=0.0, result=None):
        stats = result.stats if result is not None else None
        return {
            'name': name,
            'nodes': graph.vertex_number() if graph is not None else 0,
            'edges': graph.num_edges() if graph is not None else 0,
            'source': s,
            'target': t,
            'status': status,
            'path_length': len(result.path) if isinstance(result, PathFound) else 0,
            'variables': stats.num_variables if stats else 0,
            'clauses': stats.num_clauses if stats else 0,
            'time_seconds': round(elapsed, 3),
            'solver': self.solver_type,
            'timeout_limit': self.timeout_seconds
        }

    def solve_single_problem(self, name, graph, s=None, t=None):
        """Run one query, defaulting to endpoints 0 -> n-1"""
        n = graph.vertex_number()
        s = 0 if s is None else s
        t = n - 1 if t is None else t
        print(f"\nProcessing: {name} ({n} vertices, {graph.num_edges()} edges), {s} -> {t}")

        if n > self.max_vertices:
            print(f"  Skipping large problem (n={n} > {self.max_vertices})")
            return self._record(name, graph, s, t, 'SKIPPED_LARGE')

        solver = HamiltonianPathSolver(graph, solver_type=self.solver_type, verbose=False)
        start_time = time.time()
        try:
            result = solver.solve(s, t, time_budget=self.timeout_seconds)
        except Exception as e:
            elapsed = time.time() - start_time
            print(f"  Exception: {e}")
            return self._record(name, graph, s, t, 'ERROR', elapsed)
        elapsed = time.time() - start_time

        print(f"  Result: {result.status} in {elapsed:.2f}s "
              f"({result.stats.num_variables} vars, {result.stats.num_clauses} clauses)")
        return self._record(name, graph, s, t, result.status, elapsed, result)

    def run_mtx_folder(self, mtx_dir):
        """Run every .mtx file in mtx_dir"""
        mtx_files = sorted(os.path.join(mtx_dir, f) for f in os.listdir(mtx_dir)
                           if f.endswith('.mtx'))
        if not mtx_files:
            print(f"No MTX files found in {mtx_dir}")

        for i, filepath in enumerate(mtx_files, 1):
            filename = os.path.basename(filepath)
            print(f"\n[{i}/{len(mtx_files)}] " + "=" * 50)
            try:
                graph = load_mtx_graph(filepath)
            except (OSError, ValueError) as e:
                print(f"  Error reading {filename}: {e}")
                self.results.append(self._record(filename, None, None, None, 'READ_ERROR'))
                continue
            if graph.vertex_number() == 0:
                print(f"  Empty graph in {filename}")
                self.results.append(self._record(filename, graph, None, None, 'READ_ERROR'))
                continue
            self.results.append(self.solve_single_problem(filename, graph))

    def run_family(self, family, sizes, edge_probability=0.5):
        """Run a generated graph family over the given sizes"""
        for n in sizes:
            if family == 'complete':
                graph = complete_graph(n)
            elif family == 'cycle':
                graph = cycle_graph(n)
            elif family == 'random':
                graph = random_graph(n, edge_probability, seed=self.seed)
            else:
                raise ValueError(f"Unknown graph family '{family}', expected one of {GRAPH_FAMILIES}")
            self.results.append(self.solve_single_problem(f"{family}_{n}", graph))

    def export_to_csv(self):
        """Export results to a timestamped CSV file"""
        os.makedirs(self.results_dir, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        csv_path = os.path.join(self.results_dir, f"hamiltonian_results_{timestamp}.csv")

        print(f"\nExporting results to: {csv_path}")

        with open(csv_path, 'w', newline='', encoding='utf-8') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=CSV_FIELDNAMES)
            writer.writeheader()
            writer.writerows(self.results)

        print(f"CSV export completed: {len(self.results)} records")
        return csv_path

    def print_summary(self):
        """Print benchmark summary"""
        print("\n" + "=" * 60)
        print("BENCHMARK SUMMARY")
        print("=" * 60)

        total = len(self.results)
        if total == 0:
            print("No problems run")
            return

        counts = {}
        for record in self.results:
            counts[record['status']] = counts.get(record['status'], 0) + 1

        print(f"Total problems: {total}")
        for status in sorted(counts):
            print(f"  {status}: {counts[status]} ({counts[status] / total * 100:.1f}%)")

        print("\nDetailed results:")
        print("-" * 80)
        print(f"{'Name':<20} {'Nodes':<6} {'Edges':<7} {'Query':<10} {'Clauses':<9} {'Time':<8} {'Status':<14}")
        print("-" * 80)
        for r in self.results:
            query = f"{r['source']}->{r['target']}"
            print(f"{r['name']:<20} {r['nodes']:<6} {r['edges']:<7} {query:<10} "
                  f"{r['clauses']:<9} {r['time_seconds']:<8.2f} {r['status']:<14}")
        print("=" * 60)


def main(argv=None):
    """Main function with command line argument handling"""
    import argparse

    parser = argparse.ArgumentParser(description='Hamiltonian Path via SAT Benchmark Runner')
    parser.add_argument('--mtx-dir', default=None, help='Folder with .mtx graph files')
    parser.add_argument('--family', choices=GRAPH_FAMILIES, action='append', default=[],
                        help='Generated graph family (repeatable)')
    parser.add_argument('--sizes', type=int, nargs='+', default=[5, 10, 15, 20],
                        help='Vertex counts for generated families (default: 5 10 15 20)')
    parser.add_argument('--edge-probability', type=float, default=0.5,
                        help='Edge probability for the random family (default: 0.5)')
    parser.add_argument('--seed', type=int, default=42, help='Seed for the random family')
    parser.add_argument('--timeout', type=float, default=DEFAULT_BENCHMARK_PROBLEM_TIMEOUT,
                        help='Timeout in seconds per problem (default: 300)')
    parser.add_argument('--solver', choices=SUPPORTED_SOLVERS, default=DEFAULT_SOLVER,
                        help=f'SAT solver to use (default: {DEFAULT_SOLVER})')
    parser.add_argument('--max-vertices', type=int, default=BenchmarkRunner.MAX_PROBLEM_SIZE,
                        help='Skip graphs with more vertices')
    parser.add_argument('--results-dir', default=None, help='CSV output folder (default: ./results)')

    args = parser.parse_args(argv)
    if not args.mtx_dir and not args.family:
        parser.error('give --mtx-dir and/or at least one --family')

    runner = BenchmarkRunner(
        timeout_seconds=args.timeout,
        solver_type=args.solver,
        max_vertices=args.max_vertices,
        results_dir=args.results_dir,
        seed=args.seed
    )

    print("=" * 60)
    print("HAMILTONIAN PATH BENCHMARK")
    print("=" * 60)
    print(f"Solver: {runner.solver_type.upper()}")
    print(f"Timeout: {runner.timeout_seconds} seconds")
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    try:
        if args.mtx_dir:
            runner.run_mtx_folder(args.mtx_dir)
        for family in args.family:
            runner.run_family(family, args.sizes, args.edge_probability)
    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user")

    runner.export_to_csv()
    runner.print_summary()
    return 0


if __name__ == '__main__':
    main()
