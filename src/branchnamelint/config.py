"""Configuration management for branch-name-lint."""

import importlib.util
import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import toml
import typer

# Explicit "off" value for fields that can be turned off. Not providing a
# field at all falls back to its default instead.
DISABLED = False

CONFIG_KEY = "branchNameLinter"
PYPROJECT_TABLE = "branch-name-lint"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read."""


class ConfigFileNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file is missing."""


@dataclass(frozen=True)
class LintConfig:
    """Complete branch-name-lint configuration."""

    prefixes: Union[Tuple[str, ...], bool] = ("feature", "hotfix", "release")
    suggestions: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(
            {"features": "feature", "feat": "feature", "fix": "hotfix", "releases": "release"}
        )
    )
    banned: Tuple[str, ...] = ("wip",)
    skip: Tuple[str, ...] = ()
    disallowed: Tuple[str, ...] = ("master", "develop", "staging")
    separator: Union[str, bool] = "/"
    regex: Optional[str] = None
    regex_options: str = ""
    msg_branch_banned: str = 'Branches with the name "%s" are not allowed.'
    msg_branch_disallowed: str = 'Pushing to "%s" is not allowed, use git-flow.'
    msg_prefix_not_allowed: str = 'Branch prefix "%s" is not allowed.'
    msg_prefix_suggestion: str = 'Instead of "%s" try "%s".'
    msg_separator_required: str = 'Branch "%s" must contain a separator "%s".'
    msg_does_not_match_regex: str = 'Branch "%s" does not match the allowed pattern: "%s"'
    branch: Union[str, bool] = DISABLED
    branch_name_env_variable: Union[str, bool] = DISABLED
    branch_env_variable: Union[str, bool] = "GITHUB_REF"

    @property
    def separator_enabled(self) -> bool:
        return is_enabled(self.separator)

    @property
    def prefixes_enabled(self) -> bool:
        return self.prefixes is not DISABLED and self.prefixes is not None


# File keys (camelCase, as written in JSON / package.json) to field names.
KEY_ALIASES = {
    "regexOptions": "regex_options",
    "msgBranchBanned": "msg_branch_banned",
    "msgBranchDisallowed": "msg_branch_disallowed",
    "msgPrefixNotAllowed": "msg_prefix_not_allowed",
    "msgPrefixSuggestion": "msg_prefix_suggestion",
    "msgSeparatorRequired": "msg_separator_required",
    "msgDoesNotMatchRegex": "msg_does_not_match_regex",
    "branchNameEnvVariable": "branch_name_env_variable",
    "branchEnvVariable": "branch_env_variable",
    # legacy spellings
    "seperator": "separator",
    "msgSeperatorRequired": "msg_separator_required",
}

_LIST_FIELDS = ("banned", "skip", "disallowed")

DEFAULT_CONFIG: Dict[str, Any] = {
    "prefixes": ["feature", "hotfix", "release"],
    "suggestions": {"features": "feature", "feat": "feature", "fix": "hotfix", "releases": "release"},
    "banned": ["wip"],
    "skip": [],
    "disallowed": ["master", "develop", "staging"],
    "separator": "/",
    "regex": None,
    "regexOptions": "",
    "msgBranchBanned": LintConfig.msg_branch_banned,
    "msgBranchDisallowed": LintConfig.msg_branch_disallowed,
    "msgPrefixNotAllowed": LintConfig.msg_prefix_not_allowed,
    "msgPrefixSuggestion": LintConfig.msg_prefix_suggestion,
    "msgSeparatorRequired": LintConfig.msg_separator_required,
    "msgDoesNotMatchRegex": LintConfig.msg_does_not_match_regex,
    "branch": DISABLED,
    "branchNameEnvVariable": DISABLED,
    "branchEnvVariable": "GITHUB_REF",
}


def is_enabled(value: Any) -> bool:
    """Return True for a non-empty string value, False for the off sentinel."""
    return isinstance(value, str) and value != ""


_STRING_OR_OFF_FIELDS = (
    "separator",
    "regex",
    "branch",
    "branch_name_env_variable",
    "branch_env_variable",
)


def _invalid(key: str, value: Any, expected: str) -> ConfigError:
    return ConfigError(f"Invalid value for '{key}': expected {expected}, got {value!r}")


def _string_tuple(key: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise _invalid(key, value, "a list of strings")
    return tuple(value)


def _normalize(name: str, key: str, value: Any) -> Any:
    if name == "prefixes":
        if value is None or value is DISABLED:
            return DISABLED
        return _string_tuple(key, value)
    if name in _LIST_FIELDS:
        return _string_tuple(key, [] if value is None else value)
    if name == "suggestions":
        value = {} if value is None else value
        if not isinstance(value, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise _invalid(key, value, "a mapping of strings")
        return MappingProxyType(dict(value))
    if name in _STRING_OR_OFF_FIELDS:
        if value is None and name == "regex":
            return None
        if not isinstance(value, str) and value is not DISABLED:
            raise _invalid(key, value, "a string or false")
        if name == "regex":
            return value or None
        return value
    # regex_options and message templates
    if name == "regex_options" and not value:
        return ""
    if not isinstance(value, str):
        raise _invalid(key, value, "a string")
    return value


def apply_defaults(options: Optional[Mapping[str, Any]] = None) -> LintConfig:
    """Overlay user supplied options on top of the built-in defaults.

    The overlay is shallow: a supplied list replaces the default list as a
    whole. Keys may be given in camelCase (as in config files) or as field
    names. The input mapping is left untouched.
    """
    known = set(LintConfig.__dataclass_fields__)
    overrides: Dict[str, Any] = {}

    for key, value in (options or {}).items():
        name = KEY_ALIASES.get(key, key)
        if name not in known:
            typer.secho(f"Warning: Unknown configuration key '{key}' ignored", fg=typer.colors.YELLOW, err=True)
            continue
        overrides[name] = _normalize(name, key, value)

    return LintConfig(**overrides)


def _has_pyproject_table(path: Path) -> bool:
    try:
        data = toml.load(path)
    except (toml.TomlDecodeError, OSError):
        return False
    return PYPROJECT_TABLE in data.get("tool", {})


def _has_package_json_key(path: Path) -> bool:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (ValueError, OSError):
        return False
    if not isinstance(data, dict):
        return False
    if CONFIG_KEY in data:
        return True
    nested = data.get("config")
    return isinstance(nested, dict) and CONFIG_KEY in nested


CONFIG_NAMES = [
    ".branchnamelintrc",
    ".branchnamelintrc.json",
    "branchnamelint.config.py",
    ".branchnamelint.toml",
]


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Search for config file in the start directory and its parents."""
    current = Path(start) if start is not None else Path.cwd()

    for parent in [current] + list(current.parents):
        for name in CONFIG_NAMES:
            config_path = parent / name
            if config_path.is_file():
                return config_path

        pyproject = parent / "pyproject.toml"
        if pyproject.is_file() and _has_pyproject_table(pyproject):
            return pyproject

        package_json = parent / "package.json"
        if package_json.is_file() and _has_package_json_key(package_json):
            return package_json

    return None


def _load_python_file(path: Path) -> Dict[str, Any]:
    """Execute a python config file and return its exported mapping."""
    module_name = f"branchnamelint_config_{path.stem.replace('.', '_')}"

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot import configuration file: {path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for attr in ("config", CONFIG_KEY):
        value = getattr(module, attr, None)
        if isinstance(value, Mapping):
            return dict(value)

    raise ConfigError(f"{path} must define a 'config' or '{CONFIG_KEY}' mapping")


def _load_toml_file(path: Path) -> Dict[str, Any]:
    data = toml.load(path)
    if path.name == "pyproject.toml":
        return dict(data.get("tool", {}).get(PYPROJECT_TABLE, {}))
    return dict(data.get(CONFIG_KEY, data))


def _load_json_file(path: Path) -> Dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    if path.name == "package.json":
        if CONFIG_KEY in data:
            return dict(data[CONFIG_KEY])
        return dict(data.get("config", {}).get(CONFIG_KEY, {}))

    return dict(data.get(CONFIG_KEY, data))


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read the raw options mapping stored in a configuration file."""
    path = Path(path)

    try:
        if path.suffix == ".py":
            return _load_python_file(path)
        if path.suffix == ".toml":
            return _load_toml_file(path)
        return _load_json_file(path)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Error loading config file {path}: {e}") from e


def load_config(config_path: Optional[Union[str, Path]] = None) -> LintConfig:
    """Load configuration from a file or use defaults."""

    path: Optional[Path]
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigFileNotFoundError(f"Configuration file not found: {path}")
    else:
        path = find_config_file()

    if path is None:
        return apply_defaults()

    return apply_defaults(load_config_file(path))
