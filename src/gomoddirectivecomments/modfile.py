"""Reader for go.mod manifests.

The reader is line oriented and keeps every comment, attaching it to the
statement it annotates:

* whole-line comments directly above a statement become its ``before``
  comments; a run of them followed by a blank line (or the end of the file)
  stays a standalone :class:`CommentBlock`;
* an end-of-line comment becomes the ``suffix`` comment of that line;
* inside a ``verb (`` ... ``)`` block, whole-line comments attach to the next
  line of the block even across blank lines, and the comment on the opening
  line is the block's own suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path

from gomoddirectivecomments.exceptions import ModfileSyntaxError
from gomoddirectivecomments.syntax import (
    Comment,
    CommentBlock,
    Comments,
    Go,
    Line,
    LineBlock,
    ModFile,
    Module,
    Position,
    Require,
    Stmt,
)

COMMENT_MARKER = "//"
_PARENS = "()"
_QUOTES = "\"`"


@dataclass(frozen=True)
class _Token:
    text: str
    start: Position
    end: Position


@dataclass(frozen=True)
class _PhysicalLine:
    number: int
    tokens: tuple[_Token, ...]
    comment: Comment | None

    @property
    def blank(self) -> bool:
        return not self.tokens and self.comment is None

    def suffix(self) -> tuple[Comment, ...]:
        if self.tokens and self.comment is not None:
            return (self.comment,)
        return ()


def read_modfile(path: Path) -> ModFile:
    return parse_modfile(str(path), path.read_text(encoding="utf-8"))


def parse_modfile(name: str, data: str | bytes) -> ModFile:
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    lines = [
        _scan_line(name, number, text)
        for number, text in enumerate(data.splitlines(), start=1)
    ]
    return _build_modfile(name, _parse_statements(name, lines))


def _scan_line(name: str, number: int, text: str) -> _PhysicalLine:
    tokens: list[_Token] = []
    comment: Comment | None = None
    idx = 0
    size = len(text)
    while idx < size:
        char = text[idx]
        if char.isspace():
            idx += 1
            continue
        start = Position(number, idx + 1)
        if text.startswith(COMMENT_MARKER, idx):
            comment = Comment(start=start, token=text[idx:].rstrip())
            break
        if char in _PARENS:
            idx += 1
        elif char in _QUOTES:
            close = _closing_quote(text, idx)
            if close < 0:
                raise ModfileSyntaxError("unterminated quoted string", name=name, position=start)
            idx = close + 1
        else:
            while (
                idx < size
                and not text[idx].isspace()
                and text[idx] not in _PARENS
                and text[idx] not in _QUOTES
                and not text.startswith(COMMENT_MARKER, idx)
            ):
                idx += 1
        tokens.append(_Token(text[start.column - 1 : idx], start, Position(number, idx + 1)))
    return _PhysicalLine(number=number, tokens=tuple(tokens), comment=comment)


def _closing_quote(text: str, idx: int) -> int:
    quote = text[idx]
    pos = idx + 1
    while pos < len(text):
        if quote == '"' and text[pos] == "\\":
            pos += 2
            continue
        if text[pos] == quote:
            return pos
        pos += 1
    return -1


def _parse_statements(name: str, lines: list[_PhysicalLine]) -> list[Stmt]:
    stmts: list[Stmt] = []
    pending: list[Comment] = []
    idx = 0
    while idx < len(lines):
        current = lines[idx]
        idx += 1
        if current.blank:
            if pending:
                stmts.append(_comment_block(pending))
                pending = []
            continue
        if current.comment is not None and not current.tokens:
            pending.append(current.comment)
            continue
        before = tuple(pending)
        pending = []
        texts = [token.text for token in current.tokens]
        if texts[-1] == "(":
            block, idx = _parse_block(name, lines, idx, current, before)
            stmts.append(block)
        elif texts[-2:] == ["(", ")"]:
            stmts.append(_empty_block(name, current, before))
        else:
            stmts.append(_line(name, current, before=before, in_block=False))
    if pending:
        stmts.append(_comment_block(pending))
    return stmts


def _comment_block(comments: list[Comment]) -> CommentBlock:
    return CommentBlock(
        start=comments[0].start,
        end=Position(comments[-1].start.line, comments[-1].start.column + len(comments[-1].token)),
        comments=Comments(before=tuple(comments)),
    )


def _block_verb(name: str, header: _PhysicalLine, paren_count: int) -> tuple[str, ...]:
    verb = header.tokens[:-paren_count]
    if len(verb) != 1:
        raise ModfileSyntaxError(
            "expected a single directive before '('",
            name=name,
            position=header.tokens[0].start,
        )
    _reject_parens(name, verb)
    return (verb[0].text,)


def _parse_block(
    name: str,
    lines: list[_PhysicalLine],
    idx: int,
    header: _PhysicalLine,
    before: tuple[Comment, ...],
) -> tuple[LineBlock, int]:
    verb = _block_verb(name, header, 1)
    children: list[Line] = []
    pending: list[Comment] = []
    while idx < len(lines):
        current = lines[idx]
        idx += 1
        if current.blank:
            continue
        if current.comment is not None and not current.tokens:
            pending.append(current.comment)
            continue
        if current.tokens[0].text == ")":
            if len(current.tokens) > 1:
                raise ModfileSyntaxError(
                    "unexpected token after ')'",
                    name=name,
                    position=current.tokens[1].start,
                )
            block = LineBlock(
                start=header.tokens[0].start,
                end=current.tokens[0].end,
                token=verb,
                line=tuple(children),
                comments=Comments(before=before, suffix=header.suffix()),
                rparen=Comments(before=tuple(pending), suffix=current.suffix()),
            )
            return block, idx
        children.append(_line(name, current, before=tuple(pending), in_block=True))
        pending = []
    raise ModfileSyntaxError("unterminated block", name=name, position=header.tokens[-1].start)


def _empty_block(name: str, header: _PhysicalLine, before: tuple[Comment, ...]) -> LineBlock:
    return LineBlock(
        start=header.tokens[0].start,
        end=header.tokens[-1].end,
        token=_block_verb(name, header, 2),
        line=(),
        comments=Comments(before=before, suffix=header.suffix()),
    )


def _reject_parens(name: str, tokens: tuple[_Token, ...]) -> None:
    for token in tokens:
        if token.text in _PARENS:
            raise ModfileSyntaxError(f"unexpected {token.text!r}", name=name, position=token.start)


def _line(
    name: str,
    physical: _PhysicalLine,
    *,
    before: tuple[Comment, ...],
    in_block: bool,
) -> Line:
    _reject_parens(name, physical.tokens)
    return Line(
        start=physical.tokens[0].start,
        end=physical.tokens[-1].end,
        token=tuple(token.text for token in physical.tokens),
        comments=Comments(before=before, suffix=physical.suffix()),
        in_block=in_block,
    )


def _unquote(name: str, text: str, position: Position) -> str:
    if text.startswith("`"):
        return text[1:-1]
    if text.startswith('"'):
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            raise ModfileSyntaxError(f"invalid quoted string {text}", name=name, position=position) from None
        return str(value)
    return text


def is_indirect(line: Line) -> bool:
    """Report whether the line is marked ``// indirect``."""
    if not line.comments.suffix:
        return False
    fields = line.comments.suffix[0].token.removeprefix(COMMENT_MARKER).split()
    return bool(fields) and (fields[0] == "indirect" or fields[0].startswith("indirect;"))


def _build_modfile(name: str, stmts: list[Stmt]) -> ModFile:
    module: Module | None = None
    go: Go | None = None
    require: list[Require] = []
    for stmt in stmts:
        if isinstance(stmt, Line):
            entries = [(stmt.token[0], stmt.token[1:], stmt)]
        elif isinstance(stmt, LineBlock):
            entries = [(stmt.token[0], line.token, line) for line in stmt.line]
        else:
            continue
        for verb, args, line in entries:
            if verb == "module":
                if module is not None:
                    raise ModfileSyntaxError("repeated module statement", name=name, position=line.start)
                if len(args) != 1:
                    raise ModfileSyntaxError("usage: module module/path", name=name, position=line.start)
                module = Module(path=_unquote(name, args[0], line.start), syntax=line)
            elif verb == "go":
                if go is not None:
                    raise ModfileSyntaxError("repeated go statement", name=name, position=line.start)
                if len(args) != 1:
                    raise ModfileSyntaxError("usage: go 1.23", name=name, position=line.start)
                go = Go(version=args[0], syntax=line)
            elif verb == "require":
                if len(args) != 2:
                    raise ModfileSyntaxError(
                        "usage: require module/path v1.2.3",
                        name=name,
                        position=line.start,
                    )
                require.append(
                    Require(
                        path=_unquote(name, args[0], line.start),
                        version=_unquote(name, args[1], line.start),
                        syntax=line,
                        indirect=is_indirect(line),
                    )
                )
    return ModFile(name=name, stmt=tuple(stmts), module=module, go=go, require=tuple(require))
