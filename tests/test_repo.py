from pathlib import Path

from gitoverlay.repo import find_repo_root


def test_find_repo_root_from_nested_directory(tmp_path: Path):
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    nested = repo / "a" / "b"
    nested.mkdir(parents=True)

    assert find_repo_root(nested) == repo.resolve()
    assert find_repo_root(repo) == repo.resolve()


def test_root_is_parent_of_marker_not_marker(tmp_path: Path):
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    assert find_repo_root(repo).name == "repo"


def test_gitdir_file_marks_worktree(tmp_path: Path):
    worktree = tmp_path / "wt"
    worktree.mkdir()
    (worktree / ".git").write_text("gitdir: /elsewhere/.git/worktrees/wt\n", encoding="utf-8")
    assert find_repo_root(worktree) == worktree.resolve()


def test_unrelated_git_file_is_ignored(tmp_path: Path):
    outer = tmp_path / "outer"
    (outer / ".git").mkdir(parents=True)
    inner = outer / "inner"
    inner.mkdir()
    (inner / ".git").write_text("not a pointer", encoding="utf-8")
    assert find_repo_root(inner) == outer.resolve()


def test_nearest_repository_wins(tmp_path: Path):
    outer = tmp_path / "outer"
    inner = outer / "vendor" / "inner"
    (outer / ".git").mkdir(parents=True)
    (inner / ".git").mkdir(parents=True)
    assert find_repo_root(inner) == inner.resolve()


def test_custom_marker(tmp_path: Path):
    repo = tmp_path / "hgrepo"
    (repo / ".hg").mkdir(parents=True)
    assert find_repo_root(repo, marker=".hg") == repo.resolve()
