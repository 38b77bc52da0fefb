"""
Unit tests for fynn.frequency (per-author file counts).

Structure mirrors the risk surface:
    1. FileFrequencyTable - record + query correctness
    2. Independence       - authors never share counts
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fynn.frequency import FileFrequencyTable

# ---------------------------------------------------------------------------
# 1. FileFrequencyTable - record and query
# ---------------------------------------------------------------------------

class TestFileFrequencyTable:

    def test_empty_table_returns_zero(self):
        t = FileFrequencyTable()
        assert t.count("alice", "src/x.ts") == 0
        assert t.files_for("alice") == {}
        assert t.distinct_files("alice") == 0

    def test_record_increments_counts(self):
        t = FileFrequencyTable()
        t.record("alice", "src/x.ts")
        t.record("alice", "src/x.ts")
        t.record("alice", "src/y.ts")
        assert t.count("alice", "src/x.ts") == 2
        assert t.count("alice", "src/y.ts") == 1
        assert t.distinct_files("alice") == 2

    def test_record_all(self):
        t = FileFrequencyTable()
        t.record_all("alice", ["a", "b", "a"])
        assert t.files_for("alice") == {"a": 2, "b": 1}

    def test_files_for_keeps_first_seen_order(self):
        t = FileFrequencyTable()
        t.record_all("alice", ["c", "a", "b", "a"])
        assert list(t.files_for("alice")) == ["c", "a", "b"]

    def test_files_for_returns_copy(self):
        t = FileFrequencyTable()
        t.record("alice", "a")
        t.files_for("alice")["a"] = 99
        assert t.count("alice", "a") == 1


# ---------------------------------------------------------------------------
# 2. Independence
# ---------------------------------------------------------------------------

class TestIndependence:

    def test_different_authors_are_independent(self):
        t = FileFrequencyTable()
        t.record("alice", "src/x.ts")
        t.record("bob", "src/x.ts")
        t.record("bob", "src/x.ts")
        assert t.count("alice", "src/x.ts") == 1
        assert t.count("bob", "src/x.ts") == 2
