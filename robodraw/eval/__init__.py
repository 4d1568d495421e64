"""Evaluation module for program and path metrics."""

from .metrics import (
    step_count,
    tree_edit_distance,
    path_length,
    path_bounds,
    trace_frame,
)

__all__ = [
    'step_count',
    'tree_edit_distance',
    'path_length',
    'path_bounds',
    'trace_frame',
]
