"""Extract commit history via git subprocess."""

import re
import subprocess
import threading
import time
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional

from ..exceptions import GitCommandError, GitNotFoundError, NotAGitRepositoryError
from ..logging_config import get_logger
from .models import Commit, FileChange

logger = get_logger(__name__)

# hash | full hash | author | email | strict ISO author date | parents | subject
LOG_FORMAT = "%h|%H|%an|%ae|%aI|%P|%s"

# Header lines start with "<abbrev>|<full hash>|"; numstat lines start with a count and a tab
_HEADER_RE = re.compile(r"^[0-9a-f]{4,64}\|[0-9a-f]{40,64}\|")

_NUMSTAT_RE = re.compile(r"^(?P<ins>[\d-]+)\s+(?P<del>[\d-]+)\s+(?P<file>.+)$")

_READ_CHUNK = 1024 * 1024

PROGRESS_EVERY = 100

ProgressCallback = Callable[[str], None]


def parse_commit_line(line: str) -> Optional[Commit]:
    """Parse one pipe-delimited header line into a Commit without file changes.

    Returns None for lines with fewer than seven fields or an unparseable date.
    The subject is the last field and may itself contain pipes.
    """
    parts = line.split("|", 6)
    if len(parts) < 7:
        return None

    short_hash, full_hash, author, email, raw_date, parents, message = parts

    try:
        timestamp = _parse_iso_date(raw_date)
    except ValueError:
        logger.debug("Skipping commit %s: bad date %r", short_hash, raw_date)
        return None

    return Commit(
        hash=short_hash,
        full_hash=full_hash,
        author=author,
        author_email=email,
        timestamp=timestamp,
        message=message,
        is_merge=" " in parents.strip(),
    )


def parse_numstat_line(line: str) -> Optional[FileChange]:
    """Parse ``insertions<TAB>deletions<TAB>path`` into a FileChange.

    Binary files report ``-`` for both counts; they are flagged and counted as zero.
    """
    match = _NUMSTAT_RE.match(line)
    if not match:
        return None

    insertions = match.group("ins")
    deletions = match.group("del")
    file_path = match.group("file")

    if insertions == "-" or deletions == "-":
        return FileChange(file_path=file_path, is_binary=True)

    return FileChange(
        file_path=file_path,
        insertions=_to_count(insertions),
        deletions=_to_count(deletions),
    )


def _to_count(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0


def _parse_iso_date(raw: str) -> datetime:
    raw = raw.strip()
    # fromisoformat() before 3.11 rejects a trailing "Z"
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


class GitExtractor:
    """Read ``git log --numstat`` into a list of Commit records."""

    def __init__(self, repo_path: str, timeout_seconds: int = 30, max_output_mb: int = 50):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout_seconds = timeout_seconds
        self._max_output_bytes = max_output_mb * 1024 * 1024

    @property
    def repository_name(self) -> str:
        return Path(self.repo_path).name or "Unknown Repository"

    def is_git_repo(self) -> bool:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--is-inside-work-tree"],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False
        return result.returncode == 0 and result.stdout.strip().lower() == "true"

    def extract(
        self,
        days: int,
        now: Optional[datetime] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> List[Commit]:
        """Return commits authored in the last ``days`` days, newest first.

        ``progress`` is called with short status messages while git runs and
        while its output is parsed.

        Raises:
            NotAGitRepositoryError: If repo_path is not inside a work tree
            GitNotFoundError: If the git executable is missing
            GitCommandError: If git log fails or times out
        """
        if not self.is_git_repo():
            raise NotAGitRepositoryError(self.repo_path)

        if not self._has_commits():
            logger.debug("Repository %s has no commits yet", self.repo_path)
            return []

        since = ((now or datetime.now()) - timedelta(days=days)).strftime("%Y-%m-%d")
        if progress is not None:
            progress("Fetching commit log...")
        raw = self._run_git_log(since)
        commits = self.parse_log(raw, progress)
        logger.debug("Parsed %d commits from %s since %s", len(commits), self.repo_path, since)
        return commits

    def _has_commits(self) -> bool:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--verify", "--quiet", "HEAD"],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError:
            raise GitNotFoundError()
        except subprocess.TimeoutExpired:
            raise GitCommandError(["git", "rev-parse", "HEAD"], -1, "timed out")
        return result.returncode == 0

    def _run_git_log(self, since: str) -> str:
        cmd = [
            "git",
            "-C",
            self.repo_path,
            "log",
            f"--since={since}",
            f"--format={LOG_FORMAT}",
            "--numstat",
        ]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            raise GitNotFoundError()

        chunks: List[str] = []
        stderr_chunks: List[str] = []
        truncated = threading.Event()

        def read_stdout() -> None:
            total_size = 0
            for chunk in iter(lambda: proc.stdout.read(_READ_CHUNK), ""):
                total_size += len(chunk)
                if total_size > self._max_output_bytes:
                    truncated.set()
                    proc.kill()
                    return
                chunks.append(chunk)

        def read_stderr() -> None:
            stderr_chunks.append(proc.stderr.read())

        # Pipes are read off this thread; the deadline below bounds the whole call
        readers = [
            threading.Thread(target=read_stdout, name="git-log-stdout", daemon=True),
            threading.Thread(target=read_stderr, name="git-log-stderr", daemon=True),
        ]
        for reader in readers:
            reader.start()

        deadline = time.monotonic() + self.timeout_seconds
        try:
            proc.wait(timeout=self.timeout_seconds)
            for reader in readers:
                reader.join(timeout=max(0.0, deadline - time.monotonic()))
        except subprocess.TimeoutExpired:
            pass

        if proc.poll() is None or any(reader.is_alive() for reader in readers):
            proc.kill()
            proc.wait()
            # Pipes stay open: a reader may still be blocked on them
            raise GitCommandError(cmd, -1, f"timed out after {self.timeout_seconds}s")

        proc.stdout.close()
        proc.stderr.close()

        if truncated.is_set():
            logger.warning(
                "git log output exceeded %dMB limit, truncating",
                self._max_output_bytes // (1024 * 1024),
            )
        elif proc.returncode != 0:
            raise GitCommandError(cmd, proc.returncode, "".join(stderr_chunks))
        return "".join(chunks)

    def parse_log(self, raw: str, progress: Optional[ProgressCallback] = None) -> List[Commit]:
        """Parse combined header + numstat output into Commit objects.

        Header lines are detected by regex rather than blank-line separation,
        so merge commits (no numstat block) and consecutive headers are handled.
        Lines that parse as neither are skipped.

        ``progress`` receives a status message once the commit count is known
        and again every ``PROGRESS_EVERY`` commits.
        """
        lines = raw.split("\n")
        total = sum(1 for line in lines if _HEADER_RE.match(line))
        if progress is not None and total:
            progress(f"Found {total} commits. Parsing...")

        commits: List[Commit] = []
        current: Optional[Commit] = None
        current_changes: List[FileChange] = []

        def finish(commit: Commit) -> None:
            commits.append(replace(commit, file_changes=tuple(current_changes)))
            if progress is not None and len(commits) % PROGRESS_EVERY == 0:
                progress(f"Processed {len(commits)}/{total} commits...")

        for line in lines:
            line = line.rstrip("\r")
            if not line.strip():
                continue

            if _HEADER_RE.match(line):
                if current is not None:
                    finish(current)
                current = parse_commit_line(line)
                current_changes = []
                continue

            if current is None:
                continue

            change = parse_numstat_line(line)
            if change is None:
                logger.debug("Skipping unparseable numstat line: %r", line)
                continue
            current_changes.append(change)

        if current is not None:
            finish(current)

        return commits
