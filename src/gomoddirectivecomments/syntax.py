"""Syntax tree for go.mod manifests with attached comments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, order=True)
class Position:
    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Comment:
    start: Position
    token: str


@dataclass(frozen=True)
class Comments:
    """Comments attached to a node.

    ``before`` holds whole-line comments preceding the node; ``suffix`` holds
    the end-of-line comment on the node's own line.
    """

    before: tuple[Comment, ...] = ()
    suffix: tuple[Comment, ...] = ()

    def all(self) -> tuple[Comment, ...]:
        return (*self.before, *self.suffix)


@dataclass(frozen=True)
class Line:
    start: Position
    end: Position
    token: tuple[str, ...]
    comments: Comments = field(default_factory=Comments)
    in_block: bool = False

    def span(self) -> tuple[Position, Position]:
        return self.start, self.end


@dataclass(frozen=True)
class LineBlock:
    start: Position
    end: Position
    token: tuple[str, ...]
    line: tuple[Line, ...]
    comments: Comments = field(default_factory=Comments)
    # comments on the closing parenthesis line, and whole-line comments before it
    rparen: Comments = field(default_factory=Comments)

    def span(self) -> tuple[Position, Position]:
        return self.start, self.end


@dataclass(frozen=True)
class CommentBlock:
    start: Position
    end: Position
    comments: Comments = field(default_factory=Comments)

    def span(self) -> tuple[Position, Position]:
        return self.start, self.end


Stmt: TypeAlias = Line | LineBlock | CommentBlock


@dataclass(frozen=True)
class Module:
    path: str
    syntax: Line


@dataclass(frozen=True)
class Go:
    version: str
    syntax: Line


@dataclass(frozen=True)
class Require:
    path: str
    version: str
    syntax: Line
    indirect: bool = False


@dataclass(frozen=True)
class ModFile:
    name: str
    stmt: tuple[Stmt, ...] = ()
    module: Module | None = None
    go: Go | None = None
    require: tuple[Require, ...] = ()
