"""Editing session: the current program snapshot and the open Repeat block."""

import logging
from typing import Callable, List, Optional, Union

from . import tree
from .ast import Command, CommandType, Program, Repeat, new_command
from robodraw.errors import DuplicateCommandError, InvalidContainerError

logger = logging.getLogger(__name__)

# Sentinel meaning "whatever container is currently open"
ACTIVE = object()

ProgramListener = Callable[[Program], None]


class Workspace:
    """
    Holds the program being edited.

    The program is never changed in place: each edit replaces it with a new
    snapshot, and every snapshot is kept in `snapshots` in order.
    The active container is either None (top level) or the id of a Repeat
    that exists in the current program.
    """
    def __init__(self, program: Program = ()):
        self._program: Program = tuple(program)
        self._active: Optional[str] = None
        self.snapshots: List[Program] = [self._program]
        self._listeners: List[ProgramListener] = []

    def __repr__(self):
        return f"Workspace({tree.num_nodes(self._program)} commands, active={self._active})"

    @property
    def program(self) -> Program:
        return self._program

    @property
    def active_container_id(self) -> Optional[str]:
        return self._active

    def add_listener(self, listener: ProgramListener):
        self._listeners.append(listener)

    def _commit(self, program: Program) -> bool:
        if program is self._program:
            return False
        self._program = program
        self.snapshots.append(program)
        if self._active is not None and not isinstance(tree.find(program, self._active), Repeat):
            logger.info("Active container %s no longer exists, returning to top level", self._active)
            self._active = None
        for listener in self._listeners:
            listener(program)
        return True

    def add(self, kind: Union[CommandType, str], value=None) -> Optional[Command]:
        """Create a command with editor defaults and append it to the active container."""
        command = new_command(kind, value)
        if self.insert(command):
            return command
        return None

    def insert(self, command: Command, container_id=ACTIVE) -> bool:
        target = self._active if container_id is ACTIVE else container_id
        try:
            program = tree.insert(self._program, target, command)
        except (InvalidContainerError, DuplicateCommandError) as e:
            logger.warning("Insert rejected: %s", e)
            return False
        return self._commit(program)

    def remove(self, command_id: str) -> bool:
        return self._commit(tree.remove(self._program, command_id))

    def update(self, command_id: str, value) -> bool:
        return self._commit(tree.update(self._program, command_id, value))

    def find(self, command_id: str) -> Optional[Command]:
        return tree.find(self._program, command_id)

    def set_active_container(self, container_id: Optional[str]) -> bool:
        """Open a Repeat block for editing, or go back to the top level with None."""
        if container_id is not None and not isinstance(tree.find(self._program, container_id), Repeat):
            logger.warning("Cannot open %s: not a Repeat block in the program", container_id)
            return False
        self._active = container_id
        return True

    def visible_commands(self) -> Program:
        return tree.children_of(self._program, self._active)

    def clear(self):
        self._active = None
        self._commit(())
