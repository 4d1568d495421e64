"""Robot pose and the geometric effect of a single command."""

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple

import numpy as np

from robodraw.config import CELL_SIZE, RunConfig
from robodraw.dsl.ast import Command, CommandType, Move, Turn


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class RobotPose:
    """
    Position and heading of the robot.

    x, y: canvas coordinates (y grows downwards)
    angle: heading in degrees, 0 points East; never normalised
    pen_down: carried along, the path is recorded regardless
    """
    x: float
    y: float
    angle: float
    pen_down: bool = True

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


def origin_pose(config: Optional[RunConfig] = None) -> RobotPose:
    config = config or RunConfig()
    return RobotPose(config.start_x, config.start_y, config.start_angle, True)


def apply_command(
    pose: RobotPose,
    command: Command,
    cell_size: float = CELL_SIZE,
) -> Tuple[RobotPose, Optional[Point]]:
    """
    Compute the pose after running one command.

    Moves return the new position as a path sample; turns and Repeat blocks
    return None. A Repeat has no effect of its own.
    """
    if isinstance(command, Move):
        direction = 1 if command.kind is CommandType.FORWARD else -1
        distance = command.value * cell_size * direction
        rad = np.deg2rad(pose.angle)
        x = pose.x + float(np.cos(rad)) * distance
        y = pose.y + float(np.sin(rad)) * distance
        new_pose = replace(pose, x=x, y=y)
        return new_pose, new_pose.position

    if isinstance(command, Turn):
        turn = 1 if command.kind is CommandType.TURN_RIGHT else -1
        return replace(pose, angle=pose.angle + command.value * turn), None

    return pose, None


def display_heading(angle: float) -> int:
    """Heading shown to the user: 0 is up, clockwise, always in [0, 360)."""
    return int(round(angle + 90)) % 360


def grid_readout(pose: RobotPose, config: Optional[RunConfig] = None) -> Tuple[int, int, int]:
    """
    Grid coordinates relative to the canvas centre, y pointing up, plus heading.
    """
    config = config or RunConfig()
    gx = int(round((pose.x - config.canvas_width / 2) / config.cell_size))
    gy = int(round(-(pose.y - config.canvas_height / 2) / config.cell_size))
    return gx, gy, display_heading(pose.angle)
