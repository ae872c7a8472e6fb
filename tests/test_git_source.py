import os
import subprocess

import pytest

from commitlog.core.errors import HistoryExhausted, SourceUnavailable
from commitlog.core.git_source import GitCommitSource
from commitlog.history.parser import parse_commit_object


def _run(cmd: list[str], cwd: str, env: dict | None = None) -> str:
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(
        cmd, cwd=cwd, env=full_env, check=True, capture_output=True, text=True,
    )
    return result.stdout.strip()


def _init_repo(path: str) -> None:
    _run(["git", "init"], cwd=path)
    _run(["git", "config", "user.email", "test@example.com"], cwd=path)
    _run(["git", "config", "user.name", "Test"], cwd=path)
    _run(["git", "config", "commit.gpgsign", "false"], cwd=path)


def _commit_empty(path: str, msg: str) -> str:
    _run(["git", "commit", "--allow-empty", "-m", msg], cwd=path)
    return _run(["git", "rev-parse", "HEAD"], cwd=path)


class TestGitCommitSource:

    def test_object_text_and_resolved_id(self, tmp_path):
        repo = str(tmp_path)
        _init_repo(repo)
        first = _commit_empty(repo, "first")
        second = _commit_empty(repo, "second")

        source = GitCommitSource(repo)

        assert source.resolved_id(0) == second
        assert source.resolved_id(1) == first

        text = source.object_text(0)
        assert text.startswith("tree ")
        assert f"parent {first}" in text
        assert parse_commit_object(text).message == "second"

    def test_runs_against_repo_path_not_cwd(self, tmp_path, monkeypatch):
        repo = tmp_path / "repo"
        repo.mkdir()
        _init_repo(str(repo))
        sha = _commit_empty(str(repo), "only")

        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        assert GitCommitSource(repo).resolved_id(0) == sha

    def test_past_root_is_exhausted(self, tmp_path):
        repo = str(tmp_path)
        _init_repo(repo)
        _commit_empty(repo, "only")

        with pytest.raises(HistoryExhausted) as exc_info:
            GitCommitSource(repo).object_text(1)
        assert exc_info.value.generation == 1

    def test_empty_repo_is_exhausted(self, tmp_path):
        repo = str(tmp_path)
        _init_repo(repo)

        with pytest.raises(HistoryExhausted):
            GitCommitSource(repo).object_text(0)

    def test_missing_binary_is_unavailable(self, tmp_path):
        source = GitCommitSource(str(tmp_path), git_binary="definitely-not-git-xyz")
        with pytest.raises(SourceUnavailable, match="Could not run"):
            source.object_text(0)

    def test_non_repo_is_unavailable(self, tmp_path):
        # outside any repository git fails with a different message
        source = GitCommitSource(str(tmp_path / "missing"))
        with pytest.raises(SourceUnavailable):
            source.object_text(0)

    def test_resolved_id_failure(self, tmp_path):
        repo = str(tmp_path)
        _init_repo(repo)
        _commit_empty(repo, "only")

        with pytest.raises(SourceUnavailable, match="rev-parse"):
            GitCommitSource(repo).resolved_id(3)

    def test_negative_generation(self, tmp_path):
        with pytest.raises(ValueError):
            GitCommitSource(str(tmp_path)).object_text(-1)

    def test_timeout_is_unavailable(self, tmp_path, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))

        monkeypatch.setattr("commitlog.core.git_source.subprocess.run", fake_run)
        with pytest.raises(SourceUnavailable, match="timed out"):
            GitCommitSource(str(tmp_path), timeout=1).object_text(0)

    def test_unrecognized_failure_is_not_exhaustion(self, tmp_path, monkeypatch):
        def fake_run(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 128, stdout="", stderr="fatal: bad object\n")

        monkeypatch.setattr("commitlog.core.git_source.subprocess.run", fake_run)
        with pytest.raises(SourceUnavailable, match="bad object"):
            GitCommitSource(str(tmp_path)).object_text(0)
