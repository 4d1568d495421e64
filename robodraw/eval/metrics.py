from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from robodraw.config import CELL_SIZE
from robodraw.dsl.ast import Command, Program, Repeat
from robodraw.dsl.tree import iter_leaves
from robodraw.geometry.pose import Point, RobotPose, apply_command


def step_count(program: Program) -> int:
    """Number of moves and turns a full run executes, without unrolling loops."""
    total = 0
    for cmd in program:
        if isinstance(cmd, Repeat):
            total += cmd.value * step_count(cmd.children)
        else:
            total += 1
    return total


def _same_node(a: Command, b: Command) -> bool:
    return a.kind == b.kind and a.value == b.value


def tree_edit_distance(prog1: Program, prog2: Program) -> int:
    """
    Positional edit cost between two programs.

    Differing nodes cost 1; children are compared position by position and
    unmatched subtrees cost their size.
    """
    cost = 0
    for i in range(max(len(prog1), len(prog2))):
        if i >= len(prog1) or i >= len(prog2):
            extra = prog1[i] if i < len(prog1) else prog2[i]
            cost += extra.num_nodes()
            continue
        a, b = prog1[i], prog2[i]
        if not _same_node(a, b):
            cost += 1
        children_a = a.children if isinstance(a, Repeat) else ()
        children_b = b.children if isinstance(b, Repeat) else ()
        cost += tree_edit_distance(children_a, children_b)
    return cost


def path_length(path: Sequence[Point]) -> float:
    if len(path) < 2:
        return 0.0
    pts = np.asarray(path, dtype=float)
    return float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))


def path_bounds(path: Sequence[Point]) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of the path."""
    pts = np.asarray(path, dtype=float)
    if pts.size == 0:
        return (0.0, 0.0, 0.0, 0.0)
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def trace_frame(program: Program, pose: RobotPose, cell_size: float = CELL_SIZE) -> pd.DataFrame:
    """One row per executed step of an uninterrupted run."""
    rows = []
    for i, cmd in enumerate(iter_leaves(program), start=1):
        pose, sample = apply_command(pose, cmd, cell_size)
        rows.append({
            "step": i,
            "command_id": cmd.id,
            "kind": cmd.kind.value,
            "value": cmd.value,
            "x": pose.x,
            "y": pose.y,
            "angle": pose.angle,
            "moved": sample is not None,
        })
    columns = ["step", "command_id", "kind", "value", "x", "y", "angle", "moved"]
    return pd.DataFrame(rows, columns=columns)
