"""
Copy-on-write edits over a program tree.

Every edit rebuilds only the path from the root to the touched node; all
other nodes are shared with the input program. An edit that changes nothing
returns the input tuple itself.
"""

from typing import Callable, Iterator, List, Optional, Set, Tuple

from .ast import Command, Program, Repeat, coerce_value, with_value
from robodraw.errors import DuplicateCommandError, InvalidContainerError


def _rewrite(
    commands: Tuple[Command, ...],
    command_id: str,
    fn: Callable[[Command], Tuple[Command, ...]],
) -> Tuple[Command, ...]:
    """
    Replace the node with command_id by fn(node), searching recursively.

    Returns the same tuple object when the id is not found below commands.
    """
    for i, cmd in enumerate(commands):
        if cmd.id == command_id:
            return commands[:i] + tuple(fn(cmd)) + commands[i + 1:]
        if isinstance(cmd, Repeat) and cmd.children:
            children = _rewrite(cmd.children, command_id, fn)
            if children is not cmd.children:
                new_cmd = Repeat(cmd.id, cmd.value, children)
                return commands[:i] + (new_cmd,) + commands[i + 1:]
    return commands


def iter_commands(program: Program) -> Iterator[Command]:
    """Depth-first, pre-order walk over every node of the program."""
    for cmd in program:
        yield cmd
        if isinstance(cmd, Repeat):
            yield from iter_commands(cmd.children)


def find(program: Program, command_id: str) -> Optional[Command]:
    for cmd in program:
        if cmd.id == command_id:
            return cmd
        if isinstance(cmd, Repeat):
            found = find(cmd.children, command_id)
            if found is not None:
                return found
    return None


def children_of(program: Program, container_id: Optional[str]) -> Program:
    """
    Commands addressed by a container id.

    None addresses the top level. An id that does not resolve to a Repeat
    addresses nothing and yields an empty tuple.
    """
    if container_id is None:
        return program
    container = find(program, container_id)
    if isinstance(container, Repeat):
        return container.children
    return ()


def insert(program: Program, container_id: Optional[str], command: Command) -> Program:
    """
    Append command to the end of the list addressed by container_id.

    Raises InvalidContainerError if container_id is not None and does not name
    an existing Repeat, and DuplicateCommandError if any id of command's
    subtree is already used in the program.
    """
    existing = {c.id for c in iter_commands(program)}
    for cmd in iter_commands((command,)):
        if cmd.id in existing:
            raise DuplicateCommandError(cmd.id)

    if container_id is None:
        return program + (command,)

    def _append(container: Command) -> Tuple[Command, ...]:
        if not isinstance(container, Repeat):
            raise InvalidContainerError(container_id, f"{container.kind.value} cannot hold commands")
        return (Repeat(container.id, container.value, container.children + (command,)),)

    updated = _rewrite(program, container_id, _append)
    if updated is program:
        raise InvalidContainerError(container_id)
    return updated


def remove(program: Program, command_id: str) -> Program:
    """Delete the node (and its subtree) wherever it occurs. Unknown ids are a no-op."""
    return _rewrite(program, command_id, lambda cmd: ())


def update(program: Program, command_id: str, value) -> Program:
    """
    Set the value of a node, leaving its kind and children alone.

    Unknown ids are a no-op. Repeat counts below zero are clamped to 0.
    """
    value = coerce_value(value)
    return _rewrite(program, command_id, lambda cmd: (with_value(cmd, value),))


# (command, body) pairs; body is None for moves and turns
_Pruned = List[Tuple[Command, Optional[list]]]


def _prune(commands: Tuple[Command, ...]) -> _Pruned:
    """Drop Repeat blocks that would execute no move or turn, in one pass."""
    pruned = []
    for cmd in commands:
        if not isinstance(cmd, Repeat):
            pruned.append((cmd, None))
        elif cmd.value > 0:
            body = _prune(cmd.children)
            if body:
                pruned.append((cmd, body))
    return pruned


def _expand(pruned: _Pruned) -> Iterator[Command]:
    for cmd, body in pruned:
        if body is None:
            yield cmd
        else:
            for _ in range(cmd.value):
                yield from _expand(body)


def iter_leaves(program: Program) -> Iterator[Command]:
    """
    Expand the program into the leaf commands a run executes, in order.

    Repeat blocks are unrolled lazily, so a huge count costs nothing until
    iterated. Blocks without any leaf below them are dropped once, before
    the first leaf is produced.
    """
    yield from _expand(_prune(program))


def num_nodes(program: Program) -> int:
    return sum(c.num_nodes() for c in program)


def changed_nodes(old: Program, new: Program) -> Set[str]:
    """
    Ids of nodes in new that are not the very same objects found in old.

    Relies on copy-on-write sharing: untouched nodes keep their identity.
    """
    old_ids = {id(c) for c in iter_commands(old)}
    return {c.id for c in iter_commands(new) if id(c) not in old_ids}
