"""Determine which branch name should be linted."""

import os
import sys
from enum import Enum
from typing import Callable, Mapping, Optional, Sequence, Tuple

from branchnamelint.config import LintConfig, is_enabled
from branchnamelint.core.git_service import get_current_branch

GITHUB_REF = "GITHUB_REF"
HEADS_PREFIX = "refs/heads/"
BRANCH_FLAG = "--branch"


class BranchSource(Enum):
    OPTION = "branch option"
    CLI = "--branch flag"
    ENVIRONMENT = "environment variable"
    GIT = "git"


def branch_from_argv(argv: Sequence[str]) -> Optional[str]:
    """Return the value passed as ``--branch NAME`` or ``--branch=NAME``."""
    for pos, arg in enumerate(argv):
        if arg == BRANCH_FLAG and pos + 1 < len(argv):
            return argv[pos + 1]
        if arg.startswith(BRANCH_FLAG + "="):
            return arg[len(BRANCH_FLAG) + 1 :]
    return None


def env_variable_name(config: LintConfig) -> Optional[str]:
    """Name of the environment variable holding the branch, if any."""
    if is_enabled(config.branch_name_env_variable):
        return config.branch_name_env_variable
    if is_enabled(config.branch_env_variable):
        return config.branch_env_variable
    return None


def branch_from_env(config: LintConfig, env: Mapping[str, str]) -> Optional[str]:
    name = env_variable_name(config)
    if name is None:
        return None

    value = env.get(name)
    if not value:
        return None

    # Only GitHub's own ref variable is known to carry the full ref
    if name == GITHUB_REF and value.startswith(HEADS_PREFIX):
        return value[len(HEADS_PREFIX) :]
    return value


def resolve_branch_source(
    config: LintConfig,
    env: Optional[Mapping[str, str]] = None,
    argv: Optional[Sequence[str]] = None,
    git_query: Optional[Callable[[], str]] = None,
) -> Tuple[str, BranchSource]:
    """Resolve the branch name and report where it came from.

    Sources are tried in order: the ``branch`` option, the ``--branch``
    flag, the configured environment variable, then git. The first one
    that yields a value wins and the rest are never consulted.
    """
    if is_enabled(config.branch):
        return config.branch, BranchSource.OPTION

    cli_branch = branch_from_argv(sys.argv[1:] if argv is None else argv)
    if cli_branch:
        return cli_branch.strip(), BranchSource.CLI

    env_branch = branch_from_env(config, os.environ if env is None else env)
    if env_branch:
        return env_branch.strip(), BranchSource.ENVIRONMENT

    query = git_query or get_current_branch
    return query().strip(), BranchSource.GIT


def resolve_branch(
    config: LintConfig,
    env: Optional[Mapping[str, str]] = None,
    argv: Optional[Sequence[str]] = None,
    git_query: Optional[Callable[[], str]] = None,
) -> str:
    """Return the branch name to lint."""
    branch, _ = resolve_branch_source(config, env=env, argv=argv, git_query=git_query)
    return branch
