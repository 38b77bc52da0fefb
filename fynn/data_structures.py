"""
Data structures for commit and change representation.

Records supplied by the version-control collaborator are immutable.
AuthorStat is the one accumulator; it is finalized before it leaves
the aggregator.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set


class RiskLevel(Enum):
    LOW    = "Low"
    MEDIUM = "Medium"
    HIGH   = "High"


@dataclass(frozen=True)
class ChangeRecord:
    """Changes to a single file in a commit."""

    path: str
    insertions: int
    deletions: int
    diff_text: str  # Full unified diff for this file

    def __post_init__(self):
        if self.insertions < 0 or self.deletions < 0:
            raise ValueError(
                f"Negative line counts for {self.path}: "
                f"+{self.insertions}/-{self.deletions}"
            )

    @property
    def total_changes(self) -> int:
        return self.insertions + self.deletions


FileLoader = Callable[["CommitRecord"], Sequence[str]]


@dataclass(frozen=True)
class CommitRecord:
    """
    Identity and metadata of one commit.

    The changed-file list is not part of the record; it is fetched on
    demand through `file_loader`, which may fail independently per commit.
    """

    hash: str
    author: str
    message: str = ""
    date: str = ""
    file_loader: Optional[FileLoader] = field(default=None, compare=False, repr=False)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def changed_files(self) -> List[str]:
        """Fetch the changed-file list. Exceptions from the loader propagate."""
        if self.file_loader is None:
            return []
        return list(self.file_loader(self))


@dataclass(frozen=True)
class ImpactAssessment:
    risk_level:       RiskLevel
    files_touched:    int
    complexity_score: int
    details:          str


@dataclass
class AuthorStat:
    author:         str
    commit_count:   int = 0
    files_changed:  Set[str] = field(default_factory=set)
    file_frequency: Dict[str, int] = field(default_factory=dict)
    hotspots:       List[str] = field(default_factory=list)

    @property
    def files_changed_count(self) -> int:
        return len(self.files_changed)
