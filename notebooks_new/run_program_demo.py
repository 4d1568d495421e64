#!/usr/bin/env python
"""
Run sample drawing programs headlessly.
Saves per-step traces to CSV and plots the drawn paths.
"""

import asyncio
import os
import sys
from typing import Dict, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

# Configuration
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

OUT_DIR = os.path.join(ROOT_DIR, "results", "demo")

# Sample programs, as (kind, value, children) triples
SAMPLE_PROGRAMS: Dict[str, list] = {
    "square": [("REPEAT", 4, [("FORWARD", 3, None), ("TURN_RIGHT", 90, None)])],
    "star": [("REPEAT", 5, [("FORWARD", 5, None), ("TURN_RIGHT", 144, None)])],
    "stairs": [("REPEAT", 3, [
        ("FORWARD", 1, None), ("TURN_RIGHT", 90, None),
        ("FORWARD", 1, None), ("TURN_LEFT", 90, None),
    ])],
    "flower": [("REPEAT", 6, [
        ("REPEAT", 4, [("FORWARD", 2, None), ("TURN_RIGHT", 90, None)]),
        ("TURN_RIGHT", 60, None),
    ])],
}


def build_workspace(layout: list):
    """Author a program through the editing API, opening each Repeat in turn."""
    from robodraw.dsl import Workspace

    workspace = Workspace()

    def _add(items: list):
        for kind, value, children in items:
            parent = workspace.active_container_id
            cmd = workspace.add(kind, value)
            if children:
                workspace.set_active_container(cmd.id)
                _add(children)
                workspace.set_active_container(parent)

    _add(layout)
    return workspace


async def run_program(name: str, layout: list) -> Tuple[pd.DataFrame, tuple]:
    from robodraw.config import RunConfig
    from robodraw.eval import path_length, step_count, trace_frame
    from robodraw.execution import RunController
    from robodraw.geometry import origin_pose
    from robodraw.utils import get_logger

    logger = get_logger("demo")
    config = RunConfig.headless()
    workspace = build_workspace(layout)
    controller = RunController(config=config, workspace=workspace)

    final_pose = await controller.start()
    logger.info("%s: %d steps, path length %.1f, final pose %s",
                name, step_count(workspace.program), path_length(controller.path), final_pose)

    df = trace_frame(workspace.program, origin_pose(config), config.cell_size)
    df.insert(0, "program", name)
    return df, controller.path


def plot_paths(paths: Dict[str, List], out_path: str):
    fig, axes = plt.subplots(1, len(paths), figsize=(4 * len(paths), 4))
    if len(paths) == 1:
        axes = [axes]
    for ax, (name, path) in zip(axes, paths.items()):
        xs = [p.x for p in path]
        ys = [p.y for p in path]
        ax.plot(xs, ys, color="#0ea5e9", linewidth=2)
        ax.scatter(xs[:1], ys[:1], color="#10b981", zorder=3)
        ax.set_title(name)
        ax.set_aspect("equal")
        # Canvas coordinates grow downwards
        ax.invert_yaxis()
    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)


def main():
    from robodraw.utils import setup_logging
    import logging

    os.makedirs(OUT_DIR, exist_ok=True)
    setup_logging(terminal_level=logging.INFO, log_file=os.path.join(OUT_DIR, "demo.log"))

    frames = []
    paths = {}
    for name, layout in SAMPLE_PROGRAMS.items():
        df, path = asyncio.run(run_program(name, layout))
        frames.append(df)
        paths[name] = path

    all_df = pd.concat(frames, ignore_index=True)
    csv_path = os.path.join(OUT_DIR, "traces.csv")
    all_df.to_csv(csv_path, index=False)
    print(f"Saved {len(all_df)} steps to {csv_path}")

    plot_path = os.path.join(OUT_DIR, "paths.png")
    plot_paths(paths, plot_path)
    print(f"Saved plot to {plot_path}")


if __name__ == "__main__":
    main()
