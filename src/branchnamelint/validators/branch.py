"""Branch name validation."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import typer

from branchnamelint.config import LintConfig
from branchnamelint.messages import (
    BranchBanned,
    BranchDisallowed,
    Diagnostic,
    PrefixNotAllowed,
    PrefixSuggestion,
    RegexMismatch,
    SeparatorRequired,
    format_diagnostic,
)

DEFAULT_SEPARATOR = "/"

REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    # accepted for compatibility, no effect on a single test
    "u": 0,
    "g": 0,
}


class InvalidRegexOptionsError(ValueError):
    """Raised when ``regexOptions`` holds an unsupported flag letter."""


class Outcome(Enum):
    SUCCESS = 0
    FAILURE = 1

    @property
    def exit_code(self) -> int:
        return self.value


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation run and the diagnostics explaining it."""

    outcome: Outcome
    branch: str
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    def messages(self, config: LintConfig) -> Tuple[str, ...]:
        return tuple(d.render(config) for d in self.diagnostics)


def _success(branch: str) -> ValidationResult:
    return ValidationResult(Outcome.SUCCESS, branch)


def _failure(branch: str, diagnostic: Diagnostic) -> ValidationResult:
    return ValidationResult(Outcome.FAILURE, branch, (diagnostic,))


def compile_regex(pattern: str, options: str = "") -> "re.Pattern[str]":
    """Compile ``pattern`` with JavaScript-style flag letters.

    Raises ``re.error`` for a malformed pattern and
    ``InvalidRegexOptionsError`` for unknown flags.
    """
    flags = 0
    for letter in options or "":
        if letter not in REGEX_FLAGS:
            raise InvalidRegexOptionsError(f"Invalid regex option '{letter}' in '{options}'")
        flags |= REGEX_FLAGS[letter]
    return re.compile(pattern, flags)


def validate_prefix(branch: str, config: LintConfig) -> ValidationResult:
    """Check the part before the first separator against allowed prefixes."""
    separator = config.separator if config.separator_enabled else DEFAULT_SEPARATOR
    prefix, _, rest = branch.partition(separator)
    prefix = prefix.lower()

    if prefix in config.prefixes:
        return _success(branch)

    suggested = config.suggestions.get(prefix)
    if suggested:
        return _failure(
            branch,
            PrefixSuggestion(
                current=separator.join([prefix, rest]),
                suggested=separator.join([suggested, rest]),
            ),
        )

    return _failure(branch, PrefixNotAllowed(prefix=prefix))


def validate(branch: str, config: LintConfig) -> ValidationResult:
    """Validate branch name against configuration rules.

    Checks run in a fixed order and stop at the first failure: skip list,
    banned names, disallowed names, separator, regex, prefix.
    """
    if config.skip and branch in config.skip:
        return _success(branch)

    if branch in config.banned:
        return _failure(branch, BranchBanned(branch=branch))

    if branch in config.disallowed:
        return _failure(branch, BranchDisallowed(branch=branch))

    if config.separator_enabled and config.separator not in branch:
        return _failure(branch, SeparatorRequired(branch=branch, separator=config.separator))

    if config.regex:
        pattern = compile_regex(config.regex, config.regex_options)
        if not pattern.search(branch):
            return _failure(branch, RegexMismatch(branch=branch, pattern=config.regex))

    # no prefix without a separator
    if config.separator_enabled and config.prefixes_enabled:
        return validate_prefix(branch, config)

    return _success(branch)


def report(result: ValidationResult, config: LintConfig) -> None:
    """Print the diagnostics of a failed validation to stderr."""
    for message in result.messages(config):
        typer.secho(format_diagnostic(message), fg=typer.colors.RED, err=True)
