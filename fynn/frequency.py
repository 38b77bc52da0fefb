"""
Frequency Model

Per-author file modification counts, accumulated in one linear pass
keyed by (author, file).
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable


@dataclass
class FileFrequencyTable:
    _counts: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def record(self, author: str, path: str):
        if author not in self._counts:
            self._counts[author] = {}
        if path not in self._counts[author]:
            self._counts[author][path] = 0
        self._counts[author][path] += 1

    def record_all(self, author: str, paths: Iterable[str]):
        for path in paths:
            self.record(author, path)

    def count(self, author: str, path: str) -> int:
        if author not in self._counts:
            return 0
        return self._counts[author].get(path, 0)

    def files_for(self, author: str) -> Dict[str, int]:
        """Path → count for `author`, in first-seen order. A copy."""
        return dict(self._counts.get(author, {}))

    def distinct_files(self, author: str) -> int:
        return len(self._counts.get(author, {}))
