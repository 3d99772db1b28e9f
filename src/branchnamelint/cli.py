"""Command-line interface for branch-name-lint."""

import os
import re
import subprocess
from pathlib import Path
from typing import NoReturn, Optional

import typer

from branchnamelint.config import ConfigError, find_config_file, load_config
from branchnamelint.resolver import BRANCH_FLAG, resolve_branch_source
from branchnamelint.validators.branch import InvalidRegexOptionsError, report, validate

app = typer.Typer(help="branch-name-lint: validate git branch names against a naming policy.")


def _fail(message: str) -> NoReturn:
    typer.secho(f"✘ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def lint(
    config_file: Optional[Path] = typer.Argument(None, help="Path to a JSON, TOML or Python config file"),
    branch: Optional[str] = typer.Option(None, BRANCH_FLAG, "-b", help="Branch name to validate"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show where settings came from"),
):
    """Validate the current branch name."""
    source_path = config_file or find_config_file()

    try:
        config = load_config(source_path)
    except ConfigError as e:
        _fail(str(e))

    if verbose:
        typer.echo(f"Config: {source_path or 'built-in defaults'}", err=True)

    try:
        branch_name, branch_source = resolve_branch_source(
            config,
            env=os.environ,
            argv=[BRANCH_FLAG, branch] if branch else [],
        )
    except FileNotFoundError:
        _fail("git executable not found")
    except subprocess.CalledProcessError as e:
        _fail(f"Could not determine the current branch: {(e.stderr or '').strip() or e}")

    if verbose:
        typer.echo(f"Branch: {branch_name} (from {branch_source.value})", err=True)

    try:
        result = validate(branch_name, config)
    except (re.error, InvalidRegexOptionsError) as e:
        _fail(f"Invalid regex in configuration: {e}")

    if result.is_valid:
        if verbose:
            typer.secho(f"✔ Branch name valid: {branch_name}", fg=typer.colors.GREEN)
    else:
        report(result, config)

    raise typer.Exit(code=result.outcome.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
