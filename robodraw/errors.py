"""Errors raised by the command-tree layer."""


class ProgramError(Exception):
    """Base class for program editing errors."""


class InvalidCommandError(ProgramError):
    """A command was built with a kind or value that breaks its invariants."""


class InvalidContainerError(ProgramError):
    """
    A container id does not resolve to an existing Repeat node.

    container_id: the id that failed to resolve
    """
    def __init__(self, container_id: str, reason: str = "not found"):
        self.container_id = container_id
        self.reason = reason
        super().__init__(f"Invalid container '{container_id}': {reason}")


class DuplicateCommandError(ProgramError):
    """A command id being inserted is already present in the program."""
    def __init__(self, command_id: str):
        self.command_id = command_id
        super().__init__(f"Command id '{command_id}' already exists in the program")
