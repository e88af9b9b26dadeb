"""Per-module policies from go.mod directive comments."""

from gomoddirectivecomments.directives import (
    PolicyOverwrite,
    PolicyResolution,
    find_line_block,
    parse,
    policy_from_comment,
    resolve,
)
from gomoddirectivecomments.exceptions import (
    DirectiveError,
    ModfileSyntaxError,
    PolicyOverwriteWarning,
    PositionError,
)
from gomoddirectivecomments.modfile import parse_modfile, read_modfile

__all__ = [
    "__version__",
    "DirectiveError",
    "ModfileSyntaxError",
    "PolicyOverwrite",
    "PolicyOverwriteWarning",
    "PolicyResolution",
    "PositionError",
    "find_line_block",
    "parse",
    "parse_modfile",
    "policy_from_comment",
    "read_modfile",
    "resolve",
]

__version__ = "0.1.0"
