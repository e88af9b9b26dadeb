"""Exception and warning types for go.mod directive comments."""

from __future__ import annotations

from gomoddirectivecomments.syntax import Position


class DirectiveError(Exception):
    """Base class for errors raised while reading directive comments."""


class PositionError(DirectiveError):
    """A directive comment was attached to a statement that may not carry one.

    Policies belong on the ``module`` line (global default), on ``require``
    blocks, or on individual requirements. A directive on the ``go`` line is
    rejected rather than silently ignored.
    """

    def __init__(self, policy: str, *, position: Position, name: str = "") -> None:
        where = f"{name}:{position}" if name else str(position)
        super().__init__(f"policy {policy!r} is specified in an invalid position ({where})")
        self.policy = policy
        self.position = position
        self.name = name


class ModfileSyntaxError(DirectiveError):
    def __init__(self, message: str, *, name: str, position: Position) -> None:
        super().__init__(f"{name}:{position}: {message}")
        self.message = message
        self.name = name
        self.position = position


class PolicyOverwriteWarning(UserWarning):
    """A later requirement line replaced the policy of an earlier one."""
