"""Execution engine and run controller."""

from .engine import CancelToken, ExecutionEngine, RunOutcome, RunState, pause, trace
from .controller import RunController

__all__ = ['CancelToken', 'ExecutionEngine', 'RunOutcome', 'RunState', 'pause', 'trace', 'RunController']
