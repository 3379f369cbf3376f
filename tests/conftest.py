import shutil
from pathlib import Path

import pytest

from helpers import run


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """An initialised repository with one committed file, ``tracked.txt``."""
    if shutil.which("git") is None:
        pytest.skip("git is required")
    repo = tmp_path / "repo"
    repo.mkdir()
    run(["git", "init"], cwd=repo)
    run(["git", "config", "user.email", "test@example.com"], cwd=repo)
    run(["git", "config", "user.name", "Tester"], cwd=repo)
    (repo / "tracked.txt").write_text("initial\n", encoding="utf-8")
    run(["git", "add", "tracked.txt"], cwd=repo)
    run(["git", "commit", "-m", "init"], cwd=repo)
    return repo.resolve()
