"""
Configuration for the robot drawing core.

Values are plain module constants; the run timings can be overridden from the
environment. RunConfig bundles them for the controller and engine.
"""

import logging
import os
from dataclasses import dataclass

# Size of one grid cell in canvas units
CELL_SIZE = 40
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600

# Starting pose (centre of the canvas, pointing up)
START_X = CANVAS_WIDTH / 2
START_Y = CANVAS_HEIGHT / 2
START_ANGLE = -90.0

# Seconds between steps, and before the first step of a run
STEP_DELAY_S = float(os.getenv("ROBODRAW_STEP_DELAY", "0.5"))
START_DELAY_S = float(os.getenv("ROBODRAW_START_DELAY", "0.5"))

# Granularity of cancellation checks while suspended
POLL_INTERVAL_S = 0.05

# Values given to freshly created commands
DEFAULT_MOVE_VALUE = 1
DEFAULT_TURN_VALUE = 90
DEFAULT_REPEAT_VALUE = 2

GLOBAL_LOGGING_LEVEL_THRESHOLD = logging.DEBUG
LOGGING_LEVEL_TERMINAL = logging.WARNING
LOGGING_LEVEL_FILE = logging.INFO


@dataclass(frozen=True)
class RunConfig:
    cell_size: float = CELL_SIZE
    canvas_width: float = CANVAS_WIDTH
    canvas_height: float = CANVAS_HEIGHT
    start_x: float = START_X
    start_y: float = START_Y
    start_angle: float = START_ANGLE
    step_delay: float = STEP_DELAY_S
    start_delay: float = START_DELAY_S
    poll_interval: float = POLL_INTERVAL_S

    @classmethod
    def headless(cls, **overrides) -> 'RunConfig':
        """Zero-delay configuration for batch runs and tests."""
        params = {'step_delay': 0.0, 'start_delay': 0.0}
        params.update(overrides)
        return cls(**params)
