"""Configuration loading for srcdocs (.simple-src-docs.config.toml)."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .syntax import DEFAULT_COMMENT_SYNTAXES, CommentSyntax, SyntaxTable, compile_syntax
from .templates import AllTemplate, EachTemplate, TemplateEngine, order_spec_from_value

DEFAULT_CONFIG_NAME = ".simple-src-docs.config.toml"
CONFIG_VERSION = "0.2.1"

_YAML_SUFFIXES = {".yml", ".yaml"}
_VERSION_RE = re.compile(r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:\+[0-9A-Za-z.-]+)?$")


@dataclass
class SrcDocsConfig:
    """Comment syntaxes and template rules for one run."""

    version: str = CONFIG_VERSION
    syntaxes: SyntaxTable = field(default_factory=lambda: SyntaxTable(DEFAULT_COMMENT_SYNTAXES))
    each_templates: List[EachTemplate] = field(default_factory=list)
    all_templates: List[AllTemplate] = field(default_factory=list)
    path: Optional[Path] = None

    @classmethod
    def default(cls) -> "SrcDocsConfig":
        """Built-in comment syntaxes and no templates."""
        return cls()

    def find_syntax(self, path: Path) -> Optional[CommentSyntax]:
        return self.syntaxes.find(path)

    def engine(self) -> TemplateEngine:
        return TemplateEngine(self.each_templates, self.all_templates)


def resolve_config_path(dest: Path, config_path: Path | None = None) -> Optional[Path]:
    """Return the explicit config path, or ``<dest>/.simple-src-docs.config.toml`` when present."""
    if config_path is not None:
        return Path(config_path).expanduser()
    candidate = Path(dest) / DEFAULT_CONFIG_NAME
    if candidate.is_file():
        return candidate
    return None


def load_config(config_path: Path | None) -> SrcDocsConfig:
    """Load configuration from disk, or return the defaults when no path is given.

    User comment syntaxes are consulted before the built-in ones.
    """
    if config_path is None:
        return SrcDocsConfig.default()

    data = _read_config(config_path)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a mapping at the root")

    header = data.get("header")
    if not isinstance(header, dict):
        raise ConfigError("missing [header] table with a `version` entry")
    version = _check_version(header.get("version"))

    syntaxes: List[CommentSyntax] = []
    for index, entry in enumerate(_as_list(data.get("comment"), "comment")):
        syntaxes.append(_parse_comment(entry, f"comment[{index}]"))
    syntaxes.extend(DEFAULT_COMMENT_SYNTAXES)

    each_templates: List[EachTemplate] = []
    all_templates: List[AllTemplate] = []
    template_data = data.get("template")
    if template_data is not None:
        if not isinstance(template_data, dict):
            raise ConfigError("`template` must be a table")
        for index, entry in enumerate(_as_list(template_data.get("foreach"), "template.foreach")):
            each_templates.append(_parse_each_template(entry, f"template.foreach[{index}]"))
        for index, entry in enumerate(_as_list(template_data.get("all"), "template.all")):
            all_templates.append(_parse_all_template(entry, f"template.all[{index}]"))

    return SrcDocsConfig(
        version=version,
        syntaxes=SyntaxTable(syntaxes),
        each_templates=each_templates,
        all_templates=all_templates,
        path=config_path,
    )


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
        return loaded or {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _check_version(value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError("header.version must be a version string such as \"0.2.1\"")
    match = _VERSION_RE.match(value.strip())
    if match is None:
        raise ConfigError(f"header.version `{value}` is not a valid semantic version")
    # 0.2.x files are readable by this release.
    if int(match.group("major")) != 0 or int(match.group("minor")) != 2:
        raise ConfigError(f"File version {value} incompatible with semver 0.2")
    return value.strip()


def _parse_comment(entry: Any, where: str) -> CommentSyntax:
    data = _as_table(entry, where)
    return compile_syntax(
        _require_str(data, "extension", where),
        start=_optional_str(data, "start", where),
        each_line=_optional_str(data, "each_line", where),
        stop=_optional_str(data, "stop", where),
        order=_as_float(data.get("order"), where),
    )


def _parse_each_template(entry: Any, where: str) -> EachTemplate:
    data = _as_table(entry, where)
    return EachTemplate(
        tags=_as_str_list(data.get("tags"), f"{where}.tags"),
        file=_require_str(data, "file", where),
        output=_require_str(data, "output", where),
        order=order_spec_from_value(data.get("order"), rule=where),
    )


def _parse_all_template(entry: Any, where: str) -> AllTemplate:
    data = _as_table(entry, where)
    return AllTemplate(
        tags=_as_str_list(data.get("tags"), f"{where}.tags"),
        file=_require_str(data, "file", where),
        output=_require_str(data, "output", where),
        order=_as_float(data.get("order"), where),
    )


def _as_table(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a table")
    return value


def _as_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"`{where}` must be a list of tables")
    return value


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ConfigError(f"{where} requires a string `{key}`")
    return value


def _optional_str(data: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{where}: `{key}` must be a string")
    return value


def _as_float(value: Any, where: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}: `order` must be a number")
    return float(value)


def _as_str_list(value: Any, where: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"`{where}` must be a list of strings")
    return list(value)


__all__ = [
    "CONFIG_VERSION",
    "DEFAULT_CONFIG_NAME",
    "SrcDocsConfig",
    "load_config",
    "resolve_config_path",
]
