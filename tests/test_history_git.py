"""
End-to-end test for fynn.history against a real repository.

The repository is built with GitPython; commit records and their file
loaders are read back through GitPython, standing in for the
version-control collaborator.
"""
import shutil
import tempfile
import time
from pathlib import Path

import git

from fynn.data_structures import ChangeRecord, CommitRecord, RiskLevel
from fynn.history import aggregate_history
from fynn.impact import assess_impact


def _cleanup(path):
    try:
        shutil.rmtree(path)
    except PermissionError:
        time.sleep(0.1)
        shutil.rmtree(path, ignore_errors=True)


class TestHistoryFromRepository:
    @staticmethod
    def create_test_repo():
        temp_dir = tempfile.mkdtemp()
        repo = git.Repo.init(temp_dir)

        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        return temp_dir, repo

    @staticmethod
    def add_commit(repo, files, message, author="Test User"):
        for filename, content in files.items():
            path = Path(repo.working_dir) / filename
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

        repo.index.add(list(files))
        repo.index.commit(
            message, author=git.Actor(author, f"{author.lower()}@example.com")
        )

    @staticmethod
    def commit_records(repo):
        def load_files(record):
            return list(repo.commit(record.hash).stats.files)

        return [
            CommitRecord(
                hash=c.hexsha,
                author=c.author.name,
                message=c.message.strip(),
                date=c.committed_datetime.isoformat(),
                file_loader=load_files,
            )
            for c in repo.iter_commits()
        ]

    def test_authors_and_hotspots(self):
        temp_dir, repo = self.create_test_repo()
        try:
            self.add_commit(repo, {"src/x.ts": "1", "package-lock.json": "{}"}, "init", "Alice")
            self.add_commit(repo, {"src/x.ts": "2", "package-lock.json": "{ }"}, "tweak", "Alice")
            self.add_commit(repo, {"src/y.ts": "1"}, "add y", "Bob")

            stats = aggregate_history(self.commit_records(repo))

            assert [s.author for s in stats] == ["Alice", "Bob"]
            alice, bob = stats
            assert alice.commit_count == 2
            assert alice.files_changed == {"src/x.ts", "package-lock.json"}
            assert alice.hotspots == ["x.ts"]
            assert bob.hotspots == ["y.ts"]
        finally:
            _cleanup(temp_dir)

    def test_broken_loader_for_one_commit(self):
        temp_dir, repo = self.create_test_repo()
        try:
            self.add_commit(repo, {"lib/a.py": "a"}, "first", "Alice")
            self.add_commit(repo, {"lib/b.py": "b"}, "second", "Alice")

            records = self.commit_records(repo)
            broken = CommitRecord(
                hash="0" * 40,
                author="Alice",
                file_loader=lambda r: list(repo.commit(r.hash).stats.files),
            )
            stats = aggregate_history(records + [broken])

            assert stats[0].commit_count == 3
            assert stats[0].files_changed == {"lib/a.py", "lib/b.py"}
        finally:
            _cleanup(temp_dir)

    def test_impact_of_latest_commit(self):
        temp_dir, repo = self.create_test_repo()
        try:
            self.add_commit(repo, {"README.md": "hello\n"}, "init")
            self.add_commit(repo, {"config/settings.yml": "debug: true\n"}, "add settings")

            head = repo.head.commit
            changes = [
                ChangeRecord(
                    path=path,
                    insertions=stat["insertions"],
                    deletions=stat["deletions"],
                    diff_text=repo.git.diff(head.parents[0].hexsha, head.hexsha, "--", path),
                )
                for path, stat in head.stats.files.items()
            ]
            result = assess_impact(changes)

            assert result.files_touched == 1
            assert result.risk_level is RiskLevel.HIGH
            assert result.complexity_score == 3  # critical + new file
        finally:
            _cleanup(temp_dir)
