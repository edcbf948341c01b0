"""Tests for git log parsing and extraction."""

import os
import sys
import time
from datetime import datetime, timedelta, timezone

import pytest

from commit_insight.exceptions import GitCommandError, NotAGitRepositoryError
from commit_insight.history.git_extractor import (
    PROGRESS_EVERY,
    GitExtractor,
    parse_commit_line,
    parse_numstat_line,
)
from commit_insight.history.models import Commit, FileChange
from commit_insight.stats import compute_statistics

SHA = "0123456789abcdef0123456789abcdef01234567"


class TestParseCommitLine:
    def test_valid_line(self):
        line = f"0123456|{SHA}|Jane Doe|jane@example.com|2024-01-15T10:30:00+02:00|{'f' * 40}|Fix bug"
        commit = parse_commit_line(line)

        assert commit is not None
        assert commit.hash == "0123456"
        assert commit.full_hash == SHA
        assert commit.author == "Jane Doe"
        assert commit.author_email == "jane@example.com"
        assert commit.message == "Fix bug"
        assert commit.is_merge is False
        assert commit.file_changes == ()

    def test_date_keeps_offset(self):
        line = f"0123456|{SHA}|Jane|jane@example.com|2024-01-15T10:30:00+02:00|p|msg"
        commit = parse_commit_line(line)
        assert commit.timestamp == datetime(
            2024, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=2))
        )
        assert commit.timestamp.hour == 10

    def test_utc_z_suffix(self):
        line = f"0123456|{SHA}|Jane|jane@example.com|2024-01-15T10:30:00Z|p|msg"
        commit = parse_commit_line(line)
        assert commit.timestamp.utcoffset() == timedelta(0)

    def test_merge_commit(self):
        parents = f"{'a' * 40} {'b' * 40}"
        line = f"0123456|{SHA}|Jane|jane@example.com|2024-01-15T10:30:00+00:00|{parents}|Merge"
        assert parse_commit_line(line).is_merge is True

    def test_root_commit_has_no_parents(self):
        line = f"0123456|{SHA}|Jane|jane@example.com|2024-01-15T10:30:00+00:00||Initial"
        assert parse_commit_line(line).is_merge is False

    def test_message_with_pipes(self):
        line = f"0123456|{SHA}|Jane|jane@example.com|2024-01-15T10:30:00+00:00|p|fix auth | update deps"
        assert parse_commit_line(line).message == "fix auth | update deps"

    @pytest.mark.parametrize("line", ["", "abc|def|ghi", "a|b|c|d|e|f"])
    def test_incomplete_line(self, line):
        assert parse_commit_line(line) is None

    def test_bad_date(self):
        line = f"0123456|{SHA}|Jane|jane@example.com|not-a-date|p|msg"
        assert parse_commit_line(line) is None


class TestParseNumstatLine:
    def test_valid_line(self):
        change = parse_numstat_line("10\t5\tsrc/app.py")
        assert change == FileChange("src/app.py", 10, 5, False)

    def test_binary_file(self):
        change = parse_numstat_line("-\t-\tassets/logo.png")
        assert change.is_binary is True
        assert change.insertions == 0
        assert change.deletions == 0
        assert change.file_path == "assets/logo.png"

    def test_zero_changes(self):
        change = parse_numstat_line("0\t0\tempty.txt")
        assert (change.insertions, change.deletions) == (0, 0)

    def test_large_numbers(self):
        change = parse_numstat_line("123456\t654321\tbig.sql")
        assert (change.insertions, change.deletions) == (123456, 654321)

    def test_path_with_spaces(self):
        change = parse_numstat_line("3\t1\tdocs/my notes file.md")
        assert change.file_path == "docs/my notes file.md"

    @pytest.mark.parametrize("line", ["", "not a numstat line", "abc\tdef\tfile"])
    def test_invalid(self, line):
        assert parse_numstat_line(line) is None


class TestParseLog:
    def test_headers_and_numstat_blocks(self):
        raw = "\n".join(
            [
                f"1111111|{'1' * 40}|Jane|jane@example.com|2024-01-16T09:00:00+00:00|{'2' * 40}|Second",
                "",
                "4\t1\ta.py",
                "-\t-\timg.png",
                f"2222222|{'2' * 40}|Joe|joe@example.com|2024-01-15T09:00:00+00:00|{'a' * 40} {'b' * 40}|Merge",
                f"3333333|{'3' * 40}|Jane|jane@example.com|2024-01-14T09:00:00+00:00||Initial",
                "",
                "7\t0\ta.py",
                "garbage line",
                "",
            ]
        )
        commits = GitExtractor(".").parse_log(raw)

        assert [c.hash for c in commits] == ["1111111", "2222222", "3333333"]
        first, merge, initial = commits
        assert [fc.file_path for fc in first.file_changes] == ["a.py", "img.png"]
        assert first.total_insertions == 4
        assert merge.is_merge is True
        assert merge.file_changes == ()
        assert initial.file_changes == (FileChange("a.py", 7, 0),)

    def test_empty_output(self):
        assert GitExtractor(".").parse_log("") == []

    def test_lines_before_first_header_ignored(self):
        raw = f"5\t5\tstray.py\n1111111|{'1' * 40}|J|j@x|2024-01-16T09:00:00+00:00||Msg\n"
        (commit,) = GitExtractor(".").parse_log(raw)
        assert commit.file_changes == ()


class TestRepositoryName:
    def test_directory_name(self, tmp_path):
        repo = tmp_path / "my-project"
        repo.mkdir()
        assert GitExtractor(str(repo)).repository_name == "my-project"

    def test_trailing_slash(self, tmp_path):
        repo = tmp_path / "my-project"
        repo.mkdir()
        assert GitExtractor(f"{repo}/").repository_name == "my-project"


class TestGitExtractor:
    def test_not_a_repo(self, tmp_path):
        extractor = GitExtractor(str(tmp_path))
        assert extractor.is_git_repo() is False
        with pytest.raises(NotAGitRepositoryError):
            extractor.extract(30)

    def test_extracts_fixture_history(self, git_repo):
        extractor = GitExtractor(str(git_repo))
        assert extractor.is_git_repo() is True

        commits = extractor.extract(30)

        assert len(commits) == 4
        assert all(isinstance(c, Commit) for c in commits)
        assert commits[0].message == "Add notes"
        assert any(c.message == "Add feature | with pipe" for c in commits)
        assert all(c.timestamp.tzinfo is not None for c in commits)
        assert not any(c.is_merge for c in commits)
        initial = next(c for c in commits if c.message == "Initial commit")
        assert sorted(fc.file_path for fc in initial.file_changes) == ["README.md", "app.py"]

    def test_fixture_statistics(self, git_repo):
        extractor = GitExtractor(str(git_repo))
        result = compute_statistics(
            extractor.extract(30), extractor.repo_path, extractor.repository_name, 30
        )

        assert result.repository_name == "sample_repo"
        assert result.total_commits == 4
        assert result.total_insertions == 7
        assert result.total_deletions == 2
        assert result.active_days == 3
        assert result.longest_streak == 3
        assert [(a.name, a.commit_count) for a in result.author_contributions] == [
            ("Alice", 3),
            ("Bob", 1),
        ]
        assert result.most_edited_files[0].file_path == "app.py"
        assert result.most_edited_files[0].edit_count == 3

    def test_window_excludes_old_commits(self, git_repo):
        commits = GitExtractor(str(git_repo)).extract(1, now=datetime.now() + timedelta(days=30))
        assert commits == []

    def test_reports_progress(self, git_repo):
        messages = []
        GitExtractor(str(git_repo)).extract(30, progress=messages.append)
        assert messages == ["Fetching commit log...", "Found 4 commits. Parsing..."]


class TestParseLogProgress:
    def test_periodic_messages(self):
        header = "{0:07x}|{0:040x}|Jane|jane@example.com|2024-01-15T09:00:00+00:00||Msg {0}"
        raw = "\n".join(header.format(i + 1) for i in range(PROGRESS_EVERY + 5))
        messages = []

        commits = GitExtractor(".").parse_log(raw, progress=messages.append)

        assert len(commits) == PROGRESS_EVERY + 5
        total = PROGRESS_EVERY + 5
        assert messages == [
            f"Found {total} commits. Parsing...",
            f"Processed {PROGRESS_EVERY}/{total} commits...",
        ]

    def test_no_messages_for_empty_output(self):
        messages = []
        GitExtractor(".").parse_log("", progress=messages.append)
        assert messages == []


HEADER = f"abcdef1|{'a' * 40}|Jane|jane@example.com|2024-01-15T09:00:00+00:00||Slow commit"


@pytest.fixture
def fake_git(tmp_path, monkeypatch):
    """Put a shell-script ``git`` first on PATH; ``log_body`` runs for ``git log``."""
    if sys.platform == "win32":
        pytest.skip("shell script git stand-in needs a POSIX shell")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def install(log_body):
        script = bin_dir / "git"
        script.write_text(
            "#!/bin/sh\n"
            'case "$*" in\n'
            "  *--is-inside-work-tree*) echo true ;;\n"
            "  *rev-parse*) exit 0 ;;\n"
            f"  *) {log_body} ;;\n"
            "esac\n"
        )
        script.chmod(0o755)
        return tmp_path

    return install


class TestGitSubprocessLimits:
    def test_stalled_git_log_times_out(self, fake_git):
        repo = fake_git(f"echo '{HEADER}'; sleep 5")
        extractor = GitExtractor(str(repo), timeout_seconds=1)

        started = time.monotonic()
        with pytest.raises(GitCommandError) as excinfo:
            extractor.extract(30)

        assert time.monotonic() - started < 3
        assert excinfo.value.returncode == -1
        assert "timed out after 1s" in excinfo.value.details["stderr"]

    def test_noisy_stderr_does_not_block(self, fake_git):
        repo = fake_git(f"yes warning | head -c 1048576 >&2; echo '{HEADER}'")
        commits = GitExtractor(str(repo), timeout_seconds=10).extract(30)
        assert [c.message for c in commits] == ["Slow commit"]

    def test_failing_git_log_raises_with_stderr(self, fake_git):
        repo = fake_git("echo 'fatal: broken' >&2; exit 128")
        with pytest.raises(GitCommandError) as excinfo:
            GitExtractor(str(repo)).extract(30)
        assert excinfo.value.returncode == 128
        assert excinfo.value.details["stderr"] == "fatal: broken"

    def test_output_cap_truncates_without_error(self, fake_git):
        repo = fake_git(f"echo '{HEADER}'; exec yes not-a-numstat-line")
        commits = GitExtractor(str(repo), max_output_mb=1).extract(30)
        assert [c.message for c in commits] == ["Slow commit"]
        assert commits[0].file_changes == ()
