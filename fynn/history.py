"""
History Aggregator

Summarizes authorship and per-file hotspot activity across commits.

Each commit's changed-file list comes from a collaborator call that may
fail on its own. A failing fetch is logged and skipped for file
statistics; the commit still counts toward its author's commit count.
Fetches may run on a thread pool, but results are always consumed in
input order, so the output never depends on scheduling. With a fetch
timeout, each fetch runs on its own daemon thread and the clock starts
when that thread starts. A fetch that overruns is abandoned: its thread
keeps running in the background until the loader returns, but it holds
no pool worker and does not keep the interpreter alive at exit.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FetchTimeoutError
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .data_structures import AuthorStat, CommitRecord
from .frequency import FileFrequencyTable
from .hotspots import derive_hotspots
from .policy import DEFAULT_POLICY, Policy

LOGGER = logging.getLogger(__name__)

PROGRESS_EVERY = 50

FetchResult = Tuple[CommitRecord, Optional[List[str]]]


def _clean_paths(paths: Sequence[str]) -> List[str]:
    return [p.strip() for p in paths if isinstance(p, str) and p.strip()]


def _fetch_sequential(
    commits: Sequence[CommitRecord],
    log: logging.Logger,
) -> Iterator[FetchResult]:
    for commit in commits:
        try:
            files = commit.changed_files()
        except Exception as e:
            log.warning("Could not list files for commit %s: %s", commit.short_hash, e)
            files = None
        yield commit, files


def _fetch_with_deadline(commit: CommitRecord, timeout: float) -> List[str]:
    outcome: Dict[str, object] = {}

    def run():
        try:
            outcome["files"] = commit.changed_files()
        except Exception as e:
            outcome["error"] = e

    worker = threading.Thread(target=run, name=f"fynn-fetch-{commit.short_hash}", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise FetchTimeoutError(f"fetch still running after {timeout}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["files"]


def _fetch_pooled(
    commits: Sequence[CommitRecord],
    log: logging.Logger,
    max_workers: int,
    fetch_timeout: Optional[float],
) -> Iterator[FetchResult]:
    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        if fetch_timeout is None:
            futures = [executor.submit(commit.changed_files) for commit in commits]
        else:
            futures = [
                executor.submit(_fetch_with_deadline, commit, fetch_timeout)
                for commit in commits
            ]
        for commit, future in zip(commits, futures):
            try:
                files = future.result()
            except FetchTimeoutError:
                log.warning(
                    "Timed out listing files for commit %s after %ss",
                    commit.short_hash, fetch_timeout,
                )
                files = None
            except Exception as e:
                log.warning("Could not list files for commit %s: %s", commit.short_hash, e)
                files = None
            yield commit, files
    finally:
        # Pool workers return within the timeout; abandoned loaders run on daemon threads
        executor.shutdown(wait=True, cancel_futures=True)


def aggregate_history(
    commits: Sequence[CommitRecord],
    *,
    policy: Optional[Policy] = None,
    logger: Optional[logging.Logger] = None,
    max_workers: int = 1,
    fetch_timeout: Optional[float] = None,
) -> List[AuthorStat]:
    """
    Build one AuthorStat per author.

    Authors are sorted by descending commit count; ties keep the order
    in which the authors first appear in `commits`.
    """
    policy = policy or DEFAULT_POLICY
    log = logger or LOGGER

    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    if not commits:
        return []

    total = len(commits)
    log.info("Processing %d commits...", total)

    if max_workers > 1 or fetch_timeout is not None:
        fetched = _fetch_pooled(commits, log, max_workers, fetch_timeout)
    else:
        fetched = _fetch_sequential(commits, log)

    stats: Dict[str, AuthorStat] = {}
    table = FileFrequencyTable()

    for processed, (commit, files) in enumerate(fetched, 1):
        if commit.author not in stats:
            stats[commit.author] = AuthorStat(author=commit.author)
        stat = stats[commit.author]
        stat.commit_count += 1

        if files is not None:
            paths = _clean_paths(files)
            stat.files_changed.update(paths)
            table.record_all(commit.author, paths)

        if processed % PROGRESS_EVERY == 0:
            log.info("Processed %d/%d commits...", processed, total)

    log.info("Identifying developer hotspots...")
    for stat in stats.values():
        stat.file_frequency = table.files_for(stat.author)
        stat.hotspots = derive_hotspots(stat.file_frequency, policy)

    return sorted(stats.values(), key=lambda s: -s.commit_count)
