"""Queries against the local git repository."""

import subprocess


def get_current_branch() -> str:
    """Return the branch checked out in the current working directory.

    Raises ``subprocess.CalledProcessError`` outside a repository and
    ``FileNotFoundError`` when git is not installed.
    """
    result = subprocess.run(
        ["git", "rev-parse", "--abbrev-ref", "HEAD"],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.rstrip()
