"""Run controller: one execution session at a time, observable by a renderer."""

import logging
from typing import Callable, List, Optional, Tuple

from robodraw.config import RunConfig
from robodraw.dsl.ast import Program
from robodraw.dsl.workspace import Workspace
from robodraw.geometry.pose import Point, RobotPose, origin_pose
from .engine import CancelToken, ExecutionEngine, RunState, pause

logger = logging.getLogger(__name__)

Path = Tuple[Point, ...]


class RunController:
    """
    Drives the execution engine and publishes pose, path and run state.

    Listeners are plain callables invoked synchronously: pose listeners get
    the latest RobotPose, path listeners the full path tuple, and state
    listeners the new RunState.
    """
    def __init__(
        self,
        config: Optional[RunConfig] = None,
        engine: Optional[ExecutionEngine] = None,
        workspace: Optional[Workspace] = None,
    ):
        self.config = config or RunConfig()
        self.engine = engine or ExecutionEngine(
            cell_size=self.config.cell_size,
            step_delay=self.config.step_delay,
            poll_interval=self.config.poll_interval,
        )
        self.workspace = workspace
        self.token = CancelToken()

        self._state = RunState.IDLE
        self._pose = origin_pose(self.config)
        self._path: Path = (self._pose.position,)
        self._run_id = 0

        self._pose_listeners: List[Callable[[RobotPose], None]] = []
        self._path_listeners: List[Callable[[Path], None]] = []
        self._state_listeners: List[Callable[[RunState], None]] = []

    def __repr__(self):
        return f"RunController(state={self._state.value}, path={len(self._path)} points)"

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def pose(self) -> RobotPose:
        return self._pose

    @property
    def path(self) -> Path:
        return self._path

    def add_pose_listener(self, listener: Callable[[RobotPose], None]):
        self._pose_listeners.append(listener)

    def add_path_listener(self, listener: Callable[[Path], None]):
        self._path_listeners.append(listener)

    def add_state_listener(self, listener: Callable[[RunState], None]):
        self._state_listeners.append(listener)

    def _set_state(self, state: RunState):
        self._state = state
        for listener in self._state_listeners:
            listener(state)

    def _publish_pose(self, pose: RobotPose):
        self._pose = pose
        for listener in self._pose_listeners:
            listener(pose)

    def _publish_path(self, path: Path):
        self._path = path
        for listener in self._path_listeners:
            listener(path)

    def reset(self):
        """Put the robot back at the origin and clear the path."""
        pose = origin_pose(self.config)
        self._publish_pose(pose)
        self._publish_path((pose.position,))

    async def start(self, program: Optional[Program] = None) -> Optional[RobotPose]:
        """
        Run program (the workspace's program by default) from the origin.

        Returns the final pose, or None when the request was ignored because
        the program is empty or a run is already in progress.
        """
        if program is None:
            program = self.workspace.program if self.workspace is not None else ()
        if not program:
            logger.warning("Ignoring run request: the program is empty")
            return None
        if self.is_running:
            logger.warning("Ignoring run request: a run is already in progress")
            return None

        self._run_id += 1
        run_id = self._run_id
        # One token per run; a run detached by clear_all keeps its cancelled token
        token = self.token = CancelToken()
        completed = False
        try:
            self._set_state(RunState.RUNNING)
            self.reset()
            logger.info("Starting run %d with %d top-level commands", run_id, len(program))

            await pause(self.config.start_delay, token, self.config.poll_interval)

            def on_step(pose: RobotPose, sample: Optional[Point]):
                # A run superseded by clear_all must not touch the reset state
                if run_id != self._run_id:
                    return
                self._publish_pose(pose)
                if sample is not None and run_id == self._run_id:
                    self._publish_path(self._path + (sample,))

            final_pose = self._pose
            if not token.cancelled:
                outcome = await self.engine.execute(program, self._pose, token, on_step=on_step)
                final_pose, completed = outcome.pose, outcome.completed
        finally:
            # Listener errors and task cancellation end the run as STOPPED
            if not completed:
                token.cancel()
            if run_id == self._run_id:
                self._set_state(RunState.COMPLETED if completed else RunState.STOPPED)
                logger.info("Run %d %s", run_id, self._state.value.lower())
        return final_pose

    def stop(self):
        """Ask the current run to halt; the robot stays where it is."""
        if not self.is_running:
            return
        logger.info("Stop requested")
        self.token.cancel()

    def clear_all(self):
        """Discard the program and return the robot to the origin. Safe at any time."""
        if self.is_running:
            self.token.cancel()
        # Detach any in-flight run from the published state
        self._run_id += 1
        if self.workspace is not None:
            self.workspace.clear()
        self.reset()
        self._set_state(RunState.IDLE)
