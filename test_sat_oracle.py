#!/usr/bin/env python3
# test_sat_oracle.py
# Tests for the SAT oracle interface, the PySAT backend and the Kissat wrapper

import sys
import os
import stat
import time

import pytest
from pysat.examples.genhard import PHP

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from kissat_solver import KissatOracle, parse_model
from sat_oracle import (
    InvalidClauseError,
    OracleError,
    PySATOracle,
    SolveStatus,
    create_oracle,
)
import sat_oracle
from timeout_utils import ProcessFailedError, TimeoutConfig, interrupt_after, run_in_process

posix_only = pytest.mark.skipif(sys.platform.startswith('win'), reason='needs /bin/sh')


@pytest.mark.parametrize('solver_type', ['glucose42', 'cadical195'])
def test_pysat_sat_and_unsat(solver_type):
    # (1 v 2) & (-1 v 3) & (-2 v -3)
    with PySATOracle(3, solver_type) as oracle:
        for clause in ([1, 2], [-1, 3], [-2, -3]):
            oracle.add_clause(clause)
        result = oracle.solve()
        assert result.status == SolveStatus.SAT
        model = set(result.model)
        assert (1 in model or 2 in model)
        assert (-1 in model or 3 in model)
        assert (-2 in model or -3 in model)

    with PySATOracle(1, solver_type) as oracle:
        oracle.add_clause([1])
        oracle.add_clause([-1])
        assert oracle.solve().status == SolveStatus.UNSAT


@pytest.mark.parametrize('solver_type', ['glucose42', 'cadical195'])
def test_budgeted_solve_completes(solver_type):
    with PySATOracle(2, solver_type) as oracle:
        oracle.add_clause([1, 2])
        oracle.add_clause([-1])
        result = oracle.solve(time_budget=10)
    assert result.status == SolveStatus.SAT
    assert 2 in result.model and -1 in result.model


def test_budgeted_unsat_in_child_process():
    with PySATOracle(1, 'cadical195') as oracle:
        oracle.add_clause([1])
        oracle.add_clause([-1])
        assert not oracle.interruptible
        assert oracle.solve(time_budget=10).status == SolveStatus.UNSAT


def test_child_process_failure_is_oracle_error(monkeypatch):
    def failing_run(func, timeout, *args):
        raise ProcessFailedError("Process exited with code -9 without a result")

    monkeypatch.setattr(sat_oracle, 'run_in_process', failing_run)
    with PySATOracle(1, 'cadical195') as oracle:
        oracle.add_clause([1])
        with pytest.raises(OracleError):
            oracle.solve(time_budget=10)


def test_invalid_clauses():
    with PySATOracle(3) as oracle:
        with pytest.raises(InvalidClauseError):
            oracle.add_clause([])
        with pytest.raises(InvalidClauseError):
            oracle.add_clause([1, 0])
        with pytest.raises(InvalidClauseError):
            oracle.add_clause([4])
        with pytest.raises(InvalidClauseError):
            oracle.add_clause([-4, 1])
        oracle.add_clause([-3, 1])
        assert oracle.num_clauses == 1


def test_unknown_solver_name():
    with pytest.raises(ValueError):
        PySATOracle(1, 'minisat99')


@pytest.mark.parametrize('solver_type', ['glucose42', 'cadical195'])
def test_timeout_on_hard_formula(solver_type):
    # Pigeonhole 13 -> 12 is far beyond a fraction of a second for CDCL
    php = PHP(12)
    start_time = time.time()
    with PySATOracle(php.nv, solver_type) as oracle:
        for clause in php.clauses:
            oracle.add_clause(clause)
        result = oracle.solve(time_budget=0.5)
    assert result.status == SolveStatus.TIMEOUT
    assert result.model is None
    assert time.time() - start_time < 15


def test_run_in_process():
    assert run_in_process(divmod, 10, 7, 2) == (3, 1)
    with pytest.raises(ZeroDivisionError):
        run_in_process(divmod, 10, 1, 0)
    with pytest.raises(TimeoutError):
        run_in_process(time.sleep, 0.2, 10)
    with pytest.raises(ValueError):
        run_in_process(divmod, -1, 1, 1)


def test_create_oracle():
    oracle = create_oracle(2, 'Cadical195')
    assert isinstance(oracle, PySATOracle)
    assert oracle.name == 'cadical195'
    oracle.delete()
    oracle.delete()


def test_interrupt_after():
    calls = []
    with interrupt_after(0.0, lambda: calls.append(1)) as fired:
        assert fired.wait(timeout=5)
    assert calls == [1]

    with interrupt_after(None, lambda: calls.append(2)) as fired:
        pass
    assert not fired.is_set()
    assert calls == [1]


def test_timeout_config():
    config = TimeoutConfig()
    config.update_timeouts(sat_solve_timeout=12, unknown_setting=3)
    assert config.sat_solve_timeout == 12.0
    assert not hasattr(config, 'unknown_setting')
    assert 'SAT solve timeout: 12.0s' in config.get_timeout_summary()
    config.update_timeouts(sat_solve_timeout=None)
    assert 'unlimited' in config.get_timeout_summary()


def test_parse_model():
    output = "c comment\ns SATISFIABLE\nv 1 -2 3\nv -4 0\n"
    assert parse_model(output) == [1, -2, 3, -4]


def fake_kissat(tmp_path, body):
    script = tmp_path / 'kissat'
    script.write_text('#!/bin/sh\n' + body + '\n')
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@posix_only
def test_kissat_sat(tmp_path):
    path = fake_kissat(tmp_path, 'head -n 1 "$1" >&2\necho "s SATISFIABLE"\necho "v 1 -2 0"\nexit 10')
    oracle = KissatOracle(2, kissat_path=path)
    oracle.add_clause([1])
    oracle.add_clause([-2])
    result = oracle.solve(time_budget=10)
    assert result.status == SolveStatus.SAT
    assert result.model == [1, -2]
    assert oracle.temp_dir is None
    oracle.delete()


@posix_only
def test_kissat_unsat_error_and_timeout(tmp_path):
    unsat = KissatOracle(1, kissat_path=fake_kissat(tmp_path, 'exit 20'))
    unsat.add_clause([1])
    assert unsat.solve().status == SolveStatus.UNSAT

    broken_dir = tmp_path / 'broken'
    broken_dir.mkdir()
    broken = KissatOracle(1, kissat_path=fake_kissat(broken_dir, 'exit 1'))
    broken.add_clause([1])
    with pytest.raises(OracleError):
        broken.solve()

    slow_dir = tmp_path / 'slow'
    slow_dir.mkdir()
    slow = KissatOracle(1, kissat_path=fake_kissat(slow_dir, 'exec sleep 10'))
    slow.add_clause([1])
    assert slow.solve(time_budget=0.3).status == SolveStatus.TIMEOUT


def test_kissat_missing_binary(tmp_path):
    with pytest.raises(FileNotFoundError):
        KissatOracle(1, kissat_path=str(tmp_path / 'no-such-kissat'))


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
