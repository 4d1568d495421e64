"""Command tree representation for robot drawing programs."""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple, Union

from robodraw.config import DEFAULT_MOVE_VALUE, DEFAULT_REPEAT_VALUE, DEFAULT_TURN_VALUE
from robodraw.errors import InvalidCommandError


class CommandType(str, Enum):
    FORWARD = 'FORWARD'
    BACKWARD = 'BACKWARD'
    TURN_RIGHT = 'TURN_RIGHT'
    TURN_LEFT = 'TURN_LEFT'
    REPEAT = 'REPEAT'


MOVE_KINDS = (CommandType.FORWARD, CommandType.BACKWARD)
TURN_KINDS = (CommandType.TURN_LEFT, CommandType.TURN_RIGHT)


def _check_kind(command, allowed) -> None:
    try:
        kind = CommandType(command.kind)
    except ValueError:
        raise InvalidCommandError(f"Unknown command kind {command.kind!r}") from None
    if kind not in allowed:
        raise InvalidCommandError(f"{type(command).__name__} cannot have kind {kind.value}")
    object.__setattr__(command, 'kind', kind)


def _check_value(value: Any) -> None:
    # bool is an int subclass but never a valid parameter
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCommandError(f"Command value must be an int, got {value!r}")


@dataclass(frozen=True)
class Move:
    """
    Straight-line movement.

    id: stable identifier assigned at creation
    kind: FORWARD or BACKWARD
    value: distance in grid cells (any integer, including zero and negatives)
    """
    id: str
    kind: CommandType
    value: int

    def __post_init__(self):
        _check_kind(self, MOVE_KINDS)
        _check_value(self.value)

    def num_nodes(self) -> int:
        return 1


@dataclass(frozen=True)
class Turn:
    """
    In-place rotation.

    id: stable identifier assigned at creation
    kind: TURN_LEFT or TURN_RIGHT
    value: degrees to rotate (1-360 in the editor, not enforced here)
    """
    id: str
    kind: CommandType
    value: int

    def __post_init__(self):
        _check_kind(self, TURN_KINDS)
        _check_value(self.value)

    def num_nodes(self) -> int:
        return 1


@dataclass(frozen=True)
class Repeat:
    """
    Block that runs its children `value` times.

    id: stable identifier assigned at creation
    value: non-negative repetition count
    children: ordered child commands, exclusively owned by this block
    """
    id: str
    value: int
    children: Tuple['Command', ...] = field(default_factory=tuple)

    def __post_init__(self):
        _check_value(self.value)
        if self.value < 0:
            raise InvalidCommandError(f"Repeat count must be >= 0, got {self.value}")
        if not isinstance(self.children, tuple):
            # Lists are accepted for convenience but stored immutably
            object.__setattr__(self, 'children', tuple(self.children))

    @property
    def kind(self) -> CommandType:
        return CommandType.REPEAT

    def num_nodes(self) -> int:
        """Count total nodes in this subtree."""
        return 1 + sum(c.num_nodes() for c in self.children)


Command = Union[Move, Turn, Repeat]
Program = Tuple[Command, ...]


def coerce_value(raw: Any) -> int:
    """
    Convert editor input to an integer parameter.

    Unparsable input becomes 0, the same as an empty number field.
    """
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(raw))
        except (TypeError, ValueError, OverflowError):
            return 0


def default_value(kind: CommandType) -> int:
    if kind is CommandType.REPEAT:
        return DEFAULT_REPEAT_VALUE
    if kind in TURN_KINDS:
        return DEFAULT_TURN_VALUE
    return DEFAULT_MOVE_VALUE


def new_command(kind: Union[CommandType, str], value: Optional[Any] = None,
                command_id: Optional[str] = None) -> Command:
    """
    Create a command with a fresh id.

    When value is omitted the editor defaults apply: 2 repetitions,
    90 degrees for turns, 1 cell for moves.
    """
    kind = CommandType(kind)
    value = default_value(kind) if value is None else coerce_value(value)
    command_id = command_id if command_id is not None else uuid.uuid4().hex

    if kind is CommandType.REPEAT:
        return Repeat(command_id, max(value, 0), ())
    if kind in TURN_KINDS:
        return Turn(command_id, kind, value)
    return Move(command_id, kind, value)


def with_value(command: Command, value: int) -> Command:
    """Return a copy of command carrying a new value; kind and children are kept."""
    if isinstance(command, Repeat):
        value = max(value, 0)
    return replace(command, value=value)
