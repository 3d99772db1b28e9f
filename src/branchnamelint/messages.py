"""Failure messages and their printf-style rendering."""

import json
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Tuple

from branchnamelint.config import LintConfig

BANNER = "Branch name lint fail!"

_PLACEHOLDER = re.compile(r"%[sdifjoO%]")


class MessageKind(Enum):
    """Kinds of failure, each backed by one configurable template."""

    BRANCH_BANNED = "msg_branch_banned"
    BRANCH_DISALLOWED = "msg_branch_disallowed"
    SEPARATOR_REQUIRED = "msg_separator_required"
    REGEX_MISMATCH = "msg_does_not_match_regex"
    PREFIX_NOT_ALLOWED = "msg_prefix_not_allowed"
    PREFIX_SUGGESTION = "msg_prefix_suggestion"

    def template(self, config: LintConfig) -> str:
        return getattr(config, self.value)


def _convert(placeholder: str, arg: Any) -> str:
    if placeholder in ("%d", "%i"):
        try:
            return str(int(float(arg)))
        except (TypeError, ValueError):
            return "NaN"
    if placeholder == "%f":
        try:
            return str(float(arg))
        except (TypeError, ValueError):
            return "NaN"
    if placeholder == "%j":
        return json.dumps(arg)
    if placeholder in ("%o", "%O"):
        return repr(arg)
    return str(arg)


def format_message(template: str, *args: Any) -> str:
    """Interpolate ``args`` into ``template`` left to right.

    Supports %s, %d, %i, %f, %j, %o, %O and %%. Placeholders without a
    matching argument are left as-is; extra arguments are appended,
    separated by spaces.
    """
    remaining = list(args)

    def substitute(match: "re.Match[str]") -> str:
        placeholder = match.group(0)
        if placeholder == "%%":
            return "%"
        if not remaining:
            return placeholder
        return _convert(placeholder, remaining.pop(0))

    text = _PLACEHOLDER.sub(substitute, template)
    return " ".join([text] + [str(arg) for arg in remaining])


def format_diagnostic(text: str) -> str:
    return f"{BANNER} {text}"


class Diagnostic:
    """Base class for all failure diagnostics.

    Subclasses set ``kind``; their fields, in order, are the template arguments.
    """

    kind: ClassVar[MessageKind]

    @property
    def args(self) -> Tuple[Any, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    def render(self, config: LintConfig) -> str:
        return format_message(self.kind.template(config), *self.args)


@dataclass(frozen=True)
class BranchBanned(Diagnostic):
    branch: str
    kind: ClassVar[MessageKind] = MessageKind.BRANCH_BANNED


@dataclass(frozen=True)
class BranchDisallowed(Diagnostic):
    branch: str
    kind: ClassVar[MessageKind] = MessageKind.BRANCH_DISALLOWED


@dataclass(frozen=True)
class SeparatorRequired(Diagnostic):
    branch: str
    separator: str
    kind: ClassVar[MessageKind] = MessageKind.SEPARATOR_REQUIRED


@dataclass(frozen=True)
class RegexMismatch(Diagnostic):
    branch: str
    pattern: str
    kind: ClassVar[MessageKind] = MessageKind.REGEX_MISMATCH


@dataclass(frozen=True)
class PrefixNotAllowed(Diagnostic):
    prefix: str
    kind: ClassVar[MessageKind] = MessageKind.PREFIX_NOT_ALLOWED


@dataclass(frozen=True)
class PrefixSuggestion(Diagnostic):
    """The prefix is not allowed but a replacement is known."""

    current: str
    suggested: str
    kind: ClassVar[MessageKind] = MessageKind.PREFIX_SUGGESTION
