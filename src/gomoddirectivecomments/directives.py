"""Resolve per-module policies from go.mod directive comments.

Directives are written as ``// <namespace>:<policy>``. With namespace
``gomodjail`` the comment ``// gomodjail:confined`` selects the ``confined``
policy. A directive may be placed

* above or after the ``module`` line, setting the default for every
  requirement;
* above or on the opening line of a ``require (`` block, overriding the
  default for the requirements in that block;
* above or after a single requirement, overriding everything else for it.

Directives on the ``go`` line are rejected with :class:`PositionError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence
import warnings

from gomoddirectivecomments.exceptions import PolicyOverwriteWarning, PositionError
from gomoddirectivecomments.syntax import Comment, Line, LineBlock, ModFile, Stmt

COMMENT_MARKER = "//"


@dataclass(frozen=True)
class PolicyOverwrite:
    module: str
    old: str
    new: str
    line: int

    def render(self) -> str:
        return (
            f"overwriting an existing policy for {self.module}: "
            f"{self.old!r} -> {self.new!r} (line {self.line})"
        )


@dataclass
class PolicyResolution:
    policies: dict[str, str] = field(default_factory=dict)
    overwrites: list[PolicyOverwrite] = field(default_factory=list)


def policy_from_comment(token: str, namespace: str) -> str:
    """Return the policy named by a ``namespace:policy`` field of the comment.

    The comment may carry other annotations around the directive, e.g.
    ``// indirect; gomodjail:confined`` or ``// indirect // gomodjail:confined``.
    An empty string means the comment holds no directive; ``namespace:``
    with nothing after the colon reads the same way.
    """
    prefix = f"{namespace}:"
    for item in token.removeprefix(COMMENT_MARKER).split():
        item = item.removeprefix(COMMENT_MARKER)
        if item.startswith(prefix):
            return item[len(prefix):]
    return ""


def find_line_block(line: Line, stmts: Sequence[Stmt]) -> LineBlock | None:
    start, end = line.span()
    for stmt in stmts:
        if not isinstance(stmt, LineBlock):
            continue
        block_start, block_end = stmt.span()
        if block_start.line <= start.line and end.line <= block_end.line:
            return stmt
    return None


def policy_from_line_block(block: LineBlock, namespace: str) -> str:
    for comment in block.comments.all():
        if not comment.token:
            continue
        policy = policy_from_comment(comment.token, namespace)
        if policy:
            return policy
    return ""


def _last_policy(comments: Iterable[Comment], namespace: str) -> str:
    found = ""
    for comment in comments:
        if not comment.token:
            continue
        policy = policy_from_comment(comment.token, namespace)
        if policy:
            found = policy
    return found


def resolve(mod: ModFile, namespace: str, nil_policy: str) -> PolicyResolution:
    """Compute the policy of every required module.

    Precedence, highest first: a directive on the requirement itself, a
    directive on its enclosing ``require`` block, the last directive on the
    ``module`` line, and finally ``nil_policy``. Modules resolving to
    ``nil_policy`` are left out of the result. When a module is required more
    than once the last requirement wins, and a :class:`PolicyOverwriteWarning`
    is emitted if that changes its policy.
    """
    current_default = nil_policy
    if mod.module is not None:
        module_policy = _last_policy(mod.module.syntax.comments.all(), namespace)
        if module_policy:
            current_default = module_policy

    if mod.go is not None:
        for comment in mod.go.syntax.comments.all():
            if not comment.token:
                continue
            policy = policy_from_comment(comment.token, namespace)
            if policy:
                raise PositionError(policy, position=comment.start, name=mod.name)

    resolution = PolicyResolution()
    policies = resolution.policies
    for require in mod.require:
        syntax = require.syntax
        policy = current_default
        if syntax.in_block:
            block = find_line_block(syntax, mod.stmt)
            if block is not None:
                block_policy = policy_from_line_block(block, namespace)
                if block_policy:
                    policy = block_policy
        entry_policy = _last_policy(syntax.comments.all(), namespace)
        if entry_policy:
            policy = entry_policy

        previous = policies.get(require.path)
        if previous is not None and previous != policy:
            overwrite = PolicyOverwrite(
                module=require.path,
                old=previous,
                new=policy,
                line=syntax.start.line,
            )
            resolution.overwrites.append(overwrite)
            warnings.warn(overwrite.render(), PolicyOverwriteWarning, stacklevel=2)
        if policy == nil_policy:
            policies.pop(require.path, None)
        else:
            policies[require.path] = policy
    return resolution


def parse(mod: ModFile, namespace: str, nil_policy: str) -> dict[str, str]:
    """Return the mapping from module path to policy for ``mod``.

    >>> from gomoddirectivecomments.modfile import parse_modfile
    >>> mod = parse_modfile(
    ...     "go.mod",
    ...     "module example.com/main\\n\\ngo 1.23\\n\\n"
    ...     "require example.com/dependency v1.2.3 // gomodjail:confined\\n",
    ... )
    >>> parse(mod, "gomodjail", "unconfined")
    {'example.com/dependency': 'confined'}
    """
    return resolve(mod, namespace, nil_policy).policies
