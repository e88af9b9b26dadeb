from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "gomoddirectivecomments.toml"
DEFAULT_NAMESPACE = "gomodjail"
DEFAULT_NIL_POLICY = "unconfined"

TomlValue: TypeAlias = str | int | float | bool | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class DirectiveSettings:
    namespace: str = DEFAULT_NAMESPACE
    nil_policy: str = DEFAULT_NIL_POLICY


def _read_table(path: Path) -> TomlTable:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        config_path = (root or Path.cwd()) / DEFAULT_CONFIG_NAME
    return _read_table(config_path)


def directive_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("directives", {})
    return section if isinstance(section, dict) else {}


def _as_text(value: TomlValue) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve_directive_settings(
    *,
    namespace: str | None = None,
    nil_policy: str | None = None,
    root: Path | None = None,
    config_path: Path | None = None,
) -> DirectiveSettings:
    """Explicit values win over the config file, which wins over the defaults."""
    section = directive_defaults(root=root, config_path=config_path)
    return DirectiveSettings(
        namespace=namespace or _as_text(section.get("namespace")) or DEFAULT_NAMESPACE,
        nil_policy=nil_policy or _as_text(section.get("nil_policy")) or DEFAULT_NIL_POLICY,
    )
