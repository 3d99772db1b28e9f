import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from git import Repo

from branchnamelint.config import LintConfig, apply_defaults


@pytest.fixture
def git_repo() -> Generator[Repo, None, None]:
    """Create a temporary git repository for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo = Repo.init(tmpdir)

        # Configure git user for commits
        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        # Create initial commit
        readme = Path(tmpdir) / "README.md"
        readme.write_text("# Test Repository")
        repo.index.add([str(readme)])
        repo.index.commit("Initial commit")

        original_cwd = os.getcwd()
        os.chdir(tmpdir)
        try:
            yield repo
        finally:
            os.chdir(original_cwd)


@pytest.fixture
def config() -> LintConfig:
    """Default configuration."""
    return apply_defaults()
