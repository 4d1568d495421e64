"""DSL module for robot drawing programs."""

from .ast import Command, CommandType, Move, Program, Repeat, Turn, coerce_value, new_command
from .tree import children_of, find, insert, iter_commands, iter_leaves, remove, update
from .workspace import Workspace

__all__ = [
    'Command', 'CommandType', 'Move', 'Program', 'Repeat', 'Turn', 'coerce_value', 'new_command',
    'children_of', 'find', 'insert', 'iter_commands', 'iter_leaves', 'remove', 'update',
    'Workspace',
]
