from __future__ import annotations

from pathlib import Path
from typing import Optional
import json
import warnings

import typer

from gomoddirectivecomments.config import resolve_directive_settings
from gomoddirectivecomments.directives import resolve
from gomoddirectivecomments.exceptions import DirectiveError, PolicyOverwriteWarning
from gomoddirectivecomments.modfile import parse_modfile, read_modfile
from gomoddirectivecomments.syntax import ModFile

app = typer.Typer(add_completion=False)

_STDIN_ALIAS = "-"
_FORMATS = ("json", "text")


@app.callback()
def main() -> None:
    """Read policy directives from go.mod comments."""


def _read(gomod: Path) -> ModFile:
    if str(gomod) == _STDIN_ALIAS:
        return parse_modfile("<stdin>", typer.get_text_stream("stdin").read())
    if not gomod.is_file():
        raise FileNotFoundError(f"{gomod}: no such file")
    return read_modfile(gomod)


def render_policies(policies: dict[str, str], output_format: str) -> str:
    if output_format == "json":
        return json.dumps(dict(sorted(policies.items())), indent=2)
    return "\n".join(
        f"module {json.dumps(module)} has policy {json.dumps(policy)}"
        for module, policy in sorted(policies.items())
    )


@app.command()
def policies(
    gomod: Path = typer.Argument(Path("go.mod"), help="Path to go.mod, or - for stdin."),
    namespace: Optional[str] = typer.Option(None, "--namespace", help="Directive namespace."),
    nil_policy: Optional[str] = typer.Option(
        None, "--nil-policy", help="Policy treated as unset and omitted from the output."
    ),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    output_format: str = typer.Option("json", "--format", help="Output format: json or text."),
) -> None:
    """Print the policy of every module named by a directive comment."""
    if output_format not in _FORMATS:
        raise typer.BadParameter(
            f"expected one of {', '.join(_FORMATS)}", param_hint="--format"
        )
    settings = resolve_directive_settings(
        namespace=namespace,
        nil_policy=nil_policy,
        root=root,
        config_path=config,
    )
    try:
        mod = _read(gomod)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", PolicyOverwriteWarning)
            resolution = resolve(mod, settings.namespace, settings.nil_policy)
    except (DirectiveError, FileNotFoundError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)
    for item in caught:
        if issubclass(item.category, PolicyOverwriteWarning):
            typer.echo(f"warning: {item.message}", err=True)
    rendered = render_policies(resolution.policies, output_format)
    if rendered:
        typer.echo(rendered)
