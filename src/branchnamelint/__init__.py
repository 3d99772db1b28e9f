"""Lint git branch names against a configurable naming policy."""

from branchnamelint.config import DISABLED, LintConfig, apply_defaults, load_config
from branchnamelint.messages import BANNER, format_message
from branchnamelint.resolver import resolve_branch
from branchnamelint.validators.branch import Outcome, ValidationResult, validate

__all__ = [
    "BANNER",
    "DISABLED",
    "LintConfig",
    "Outcome",
    "ValidationResult",
    "apply_defaults",
    "format_message",
    "load_config",
    "resolve_branch",
    "validate",
]

__version__ = "0.1.0"
