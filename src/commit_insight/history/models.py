"""Data models for commit history read from git."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class FileChange:
    file_path: str  # relative to the repository root
    insertions: int = 0
    deletions: int = 0
    is_binary: bool = False  # git prints "-" counts; insertions/deletions stay 0


@dataclass(frozen=True)
class Commit:
    hash: str  # abbreviated
    full_hash: str
    author: str
    author_email: str
    timestamp: datetime  # author date, offset kept as git reported it
    message: str = ""  # subject line only
    is_merge: bool = False  # more than one parent
    file_changes: Tuple[FileChange, ...] = field(default_factory=tuple)

    @property
    def total_insertions(self) -> int:
        return sum(fc.insertions for fc in self.file_changes)

    @property
    def total_deletions(self) -> int:
        return sum(fc.deletions for fc in self.file_changes)
