"""
Sequential interpreter for robot drawing programs.

The engine walks the program depth-first in declaration order and applies
each move or turn to the pose, pausing before every step so a renderer can
animate it. Cancellation is a polled flag: once set, no further command runs
at any nesting level and the pose reached so far is returned.
"""

import asyncio
import logging
import threading
from enum import Enum
from typing import Callable, List, NamedTuple, Optional

from robodraw.config import CELL_SIZE, POLL_INTERVAL_S, STEP_DELAY_S
from robodraw.dsl.ast import Program
from robodraw.dsl.tree import iter_leaves
from robodraw.geometry.pose import Point, RobotPose, apply_command

logger = logging.getLogger(__name__)

StepCallback = Callable[[RobotPose, Optional[Point]], None]


class RunState(str, Enum):
    IDLE = 'IDLE'
    RUNNING = 'RUNNING'
    STOPPED = 'STOPPED'
    COMPLETED = 'COMPLETED'


class CancelToken:
    """Stop request shared between the controller and a running program."""
    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    def reset(self):
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


async def pause(duration: float, token: CancelToken, poll_interval: float = POLL_INTERVAL_S):
    """
    Sleep for duration seconds, waking early if the token is cancelled.

    Always yields to the event loop at least once, even for a zero duration.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + max(duration, 0.0)
    while True:
        remaining = deadline - loop.time()
        await asyncio.sleep(min(max(remaining, 0.0), poll_interval))
        if token.cancelled or remaining <= poll_interval:
            return


class RunOutcome(NamedTuple):
    pose: RobotPose
    completed: bool
    steps: int


class ExecutionEngine:
    def __init__(
        self,
        cell_size: float = CELL_SIZE,
        step_delay: float = STEP_DELAY_S,
        poll_interval: float = POLL_INTERVAL_S,
    ):
        self.cell_size = cell_size
        self.step_delay = step_delay
        self.poll_interval = poll_interval

    def __repr__(self):
        return f"ExecutionEngine(cell_size={self.cell_size}, step_delay={self.step_delay})"

    async def execute(
        self,
        program: Program,
        pose: RobotPose,
        token: CancelToken,
        on_step: Optional[StepCallback] = None,
    ) -> RunOutcome:
        """
        Execute program starting from pose.

        on_step is called exactly once per executed move or turn, with the new
        pose and the path sample (None for turns), before the next step starts.
        The outcome is completed only when every leaf ran; a stop request
        arriving after the last step does not change that.
        """
        steps = 0
        completed = False
        for command in iter_leaves(program):
            if token.cancelled:
                break
            await pause(self.step_delay, token, self.poll_interval)
            if token.cancelled:
                break
            pose, sample = apply_command(pose, command, self.cell_size)
            steps += 1
            logger.debug("Step %d: %s %d -> (%.1f, %.1f) @ %.1f",
                         steps, command.kind.value, command.value, pose.x, pose.y, pose.angle)
            if on_step is not None:
                on_step(pose, sample)
        else:
            completed = True

        if completed:
            logger.info("Run finished after %d steps", steps)
        else:
            logger.info("Run cancelled after %d steps", steps)
        return RunOutcome(pose, completed, steps)

    async def run(
        self,
        program: Program,
        pose: RobotPose,
        token: CancelToken,
        on_step: Optional[StepCallback] = None,
    ) -> RobotPose:
        """Execute program starting from pose and return the final pose."""
        outcome = await self.execute(program, pose, token, on_step)
        return outcome.pose


def trace(program: Program, pose: RobotPose, cell_size: float = CELL_SIZE) -> List[RobotPose]:
    """
    Poses visited by an uninterrupted run, starting pose excluded.

    Runs without delays or cancellation; the program must terminate.
    """
    poses = []
    for command in iter_leaves(program):
        pose, _ = apply_command(pose, command, cell_size)
        poses.append(pose)
    return poses
