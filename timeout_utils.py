# timeout_utils.py
# Time budget handling for SAT solver calls

import multiprocessing
import threading
from contextlib import contextmanager

DEFAULT_SAT_SOLVE_TIMEOUT = 300.0
DEFAULT_BENCHMARK_PROBLEM_TIMEOUT = 300.0


class ProcessFailedError(RuntimeError):
    """Child process exited without sending a result"""
    pass


class TimeoutConfig:
    """Configuration class for timeout settings"""

    def __init__(self, sat_solve_timeout=DEFAULT_SAT_SOLVE_TIMEOUT,
                 benchmark_problem_timeout=DEFAULT_BENCHMARK_PROBLEM_TIMEOUT):
        # Timeout values in seconds; None disables the budget
        self.sat_solve_timeout = sat_solve_timeout
        self.benchmark_problem_timeout = benchmark_problem_timeout

    def update_timeouts(self, **kwargs):
        """Update timeout values"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, None if value is None else float(value))
                print(f"Updated {key} = {value}s")
            else:
                print(f"Warning: Unknown timeout setting '{key}'")

    def get_timeout_summary(self) -> str:
        """Get formatted timeout configuration summary"""
        summary = []
        summary.append(f"SAT solve timeout: {_format_budget(self.sat_solve_timeout)}")
        summary.append(f"Benchmark problem timeout: {_format_budget(self.benchmark_problem_timeout)}")
        return '\n'.join(summary)


def _format_budget(seconds):
    return 'unlimited' if seconds is None else f"{seconds}s"


def _check_budget(seconds):
    if seconds < 0:
        raise ValueError(f"Time budget must be non-negative, got {seconds}")


@contextmanager
def interrupt_after(seconds, interrupt):
    """
    Call interrupt() from a timer thread once seconds have elapsed

    Yields an Event that is set if the timer fired. The timer is cancelled
    when the block exits. seconds=None disables the timer.

    Args:
        seconds: Time budget in seconds, or None
        interrupt: Zero-argument callable, e.g. a pysat solver's interrupt
    """
    fired = threading.Event()
    if seconds is None:
        yield fired
        return

    _check_budget(seconds)

    def on_timeout():
        fired.set()
        interrupt()

    timer = threading.Timer(seconds, on_timeout)
    timer.daemon = True
    timer.start()
    try:
        yield fired
    finally:
        timer.cancel()


# Global function so the target pickles under spawn/forkserver start methods
def _global_target_wrapper(func, args, conn):
    try:
        conn.send(('success', func(*args)))
    except Exception as e:
        conn.send(('error', e))
    finally:
        conn.close()


def run_in_process(func, timeout, *args):
    """
    Execute func(*args) in a child process with strict timeout enforcement

    For backends that cannot be interrupted from another thread: the child
    is terminated (then killed) once the budget runs out. func and args
    must be picklable.

    Returns:
        func's return value

    Raises:
        TimeoutError: execution exceeded timeout seconds
        ProcessFailedError: the child died without returning a result
        Exception: whatever func raised in the child
    """
    _check_budget(timeout)

    parent_conn, child_conn = multiprocessing.Pipe(duplex=False)
    process = multiprocessing.Process(target=_global_target_wrapper,
                                      args=(func, args, child_conn))
    process.daemon = True
    process.start()
    child_conn.close()

    try:
        if not parent_conn.poll(timeout):
            raise TimeoutError(f"Function execution exceeded {timeout} seconds")
        try:
            status, value = parent_conn.recv()
        except EOFError:
            raise ProcessFailedError(
                f"Process exited with code {process.exitcode} without a result") from None
        process.join(timeout=1.0)
    finally:
        parent_conn.close()
        if process.is_alive():
            process.terminate()
            process.join(timeout=1.0)
            if process.is_alive():
                process.kill()
        process.join()

    if status == 'success':
        return value
    raise value
