#!/usr/bin/env python3
# test_benchmark_runner.py
# Smoke tests for the benchmark runner

import sys
import os
import csv

import pytest

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from benchmark_runner import BenchmarkRunner, CSV_FIELDNAMES, main
from timeout_utils import DEFAULT_BENCHMARK_PROBLEM_TIMEOUT


def test_families_and_csv(tmp_path):
    runner = BenchmarkRunner(timeout_seconds=30, results_dir=str(tmp_path))
    runner.run_family('complete', [3, 4])
    runner.run_family('cycle', [4])

    statuses = [r['status'] for r in runner.results]
    # cycle 0 -> 3 goes forward round the whole cycle
    assert statuses == ['SAT', 'SAT', 'SAT']
    assert runner.results[0]['variables'] == 9
    assert runner.results[1]['path_length'] == 4

    csv_path = runner.export_to_csv()
    with open(csv_path, newline='', encoding='utf-8') as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 3
    assert list(rows[0]) == CSV_FIELDNAMES
    runner.print_summary()


def test_skips_large_and_rejects_unknown_family(tmp_path):
    runner = BenchmarkRunner(timeout_seconds=30, max_vertices=3, results_dir=str(tmp_path))
    runner.run_family('cycle', [5])
    assert runner.results[0]['status'] == 'SKIPPED_LARGE'
    with pytest.raises(ValueError):
        runner.run_family('petersen', [10])


def test_timeout_and_size_settings(tmp_path):
    runner = BenchmarkRunner(results_dir=str(tmp_path))
    assert runner.timeout_seconds == DEFAULT_BENCHMARK_PROBLEM_TIMEOUT
    assert runner.timeout_config.benchmark_problem_timeout == runner.timeout_seconds

    runner = BenchmarkRunner(timeout_seconds=0, max_vertices=0, results_dir=str(tmp_path))
    assert runner.timeout_seconds == 0
    assert runner.max_vertices == 0
    runner.run_family('complete', [1, 3])
    assert [r['status'] for r in runner.results] == ['SKIPPED_LARGE', 'SKIPPED_LARGE']
    assert runner.results[0]['timeout_limit'] == 0


def test_mtx_folder(tmp_path):
    mtx_dir = tmp_path / 'mtx'
    mtx_dir.mkdir()
    (mtx_dir / 'directed.mtx').write_text(
        "%%MatrixMarket matrix coordinate pattern general\n3 3 2\n2 1\n3 2\n")
    (mtx_dir / 'broken.mtx').write_text("not a matrix\n")

    runner = BenchmarkRunner(timeout_seconds=30, results_dir=str(tmp_path / 'out'))
    runner.run_mtx_folder(str(mtx_dir))
    by_name = {r['name']: r for r in runner.results}
    assert by_name['broken.mtx']['status'] == 'READ_ERROR'
    # edges 1->0, 2->1 only: no path from 0 to 2
    assert by_name['directed.mtx']['status'] == 'UNSAT'


def test_main(tmp_path):
    assert main(['--family', 'random', '--sizes', '4', '--timeout', '30',
                 '--results-dir', str(tmp_path)]) == 0
    assert len(list(tmp_path.glob('hamiltonian_results_*.csv'))) == 1


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
