"""Shared test fixtures for Commit Insight tests."""

import os
import shutil
import subprocess
from datetime import datetime, timedelta

import pytest


def _git(repo, *args, env=None):
    subprocess.run(
        ["git", "-C", str(repo), *args],
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )


def _commit(repo, message, author, email, when, files):
    for name, content in files.items():
        target = repo / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        _git(repo, "add", name)
    stamp = when.strftime("%Y-%m-%dT%H:%M:%S")
    env = dict(
        os.environ,
        GIT_AUTHOR_NAME=author,
        GIT_AUTHOR_EMAIL=email,
        GIT_AUTHOR_DATE=stamp,
        GIT_COMMITTER_NAME=author,
        GIT_COMMITTER_EMAIL=email,
        GIT_COMMITTER_DATE=stamp,
    )
    _git(repo, "commit", "-q", "-m", message, env=env)


@pytest.fixture
def git_repo(tmp_path):
    """
    Create a throwaway Git repository with known recent history.

    Contains 4 commits over 3 consecutive days (2 days ago .. today at noon):
    - alice: 3 commits (app.py touched 3 times, README.md once)
    - bob:   1 commit  (app.py | pipe in subject)
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    repo = tmp_path / "sample_repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.name", "Fixture")
    _git(repo, "config", "user.email", "fixture@example.com")
    _git(repo, "config", "commit.gpgsign", "false")

    today = datetime.now().replace(hour=12, minute=0, second=0, microsecond=0)
    day0 = today - timedelta(days=2)

    _commit(
        repo,
        "Initial commit",
        "Alice",
        "alice@example.com",
        day0,
        {"app.py": "print('a')\n", "README.md": "# Sample\n"},
    )
    _commit(
        repo,
        "Add feature | with pipe",
        "Bob",
        "bob@example.com",
        day0 + timedelta(days=1),
        {"app.py": "print('a')\nprint('b')\n"},
    )
    _commit(
        repo,
        "Tweak app",
        "Alice",
        "alice@example.com",
        day0 + timedelta(days=2, hours=-2),
        {"app.py": "print('c')\n"},
    )
    _commit(
        repo,
        "Add notes",
        "Alice",
        "alice@example.com",
        day0 + timedelta(days=2),
        {"docs/notes.txt": "one\ntwo\nthree\n"},
    )
    return repo


@pytest.fixture
def empty_git_repo(tmp_path):
    """Initialized repository with no commits."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    repo = tmp_path / "empty_repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    return repo
