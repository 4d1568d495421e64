import itertools

import pytest

from robodraw.config import RunConfig
from robodraw.dsl.ast import CommandType, Move, Repeat, Turn
from robodraw.geometry.pose import RobotPose

_ids = itertools.count(1)


def fwd(value, cid=None):
    return Move(cid or f"fwd-{value}-{next(_ids)}", CommandType.FORWARD, value)


def back(value, cid=None):
    return Move(cid or f"back-{value}-{next(_ids)}", CommandType.BACKWARD, value)


def right(value, cid=None):
    return Turn(cid or f"right-{value}-{next(_ids)}", CommandType.TURN_RIGHT, value)


def left(value, cid=None):
    return Turn(cid or f"left-{value}-{next(_ids)}", CommandType.TURN_LEFT, value)


def rep(value, children, cid=None):
    return Repeat(cid or f"rep-{value}-{next(_ids)}", value, tuple(children))


@pytest.fixture
def headless_config():
    # Origin at (0, 0) facing East keeps expected coordinates readable
    return RunConfig.headless(start_x=0.0, start_y=0.0, start_angle=0.0, poll_interval=0.01)


@pytest.fixture
def east_pose():
    return RobotPose(0.0, 0.0, 0.0)


@pytest.fixture
def nested_program():
    """
    a: Forward 1
    b: Repeat 2
       c: Turn right 90
       d: Repeat 3
          e: Repeat 4
             f: Forward 2
    g: Turn left 45
    """
    f = fwd(2, "f")
    e = rep(4, [f], "e")
    d = rep(3, [e], "d")
    b = rep(2, [right(90, "c"), d], "b")
    return (fwd(1, "a"), b, left(45, "g"))
