"""
Hotspot Derivation

Filter, rank, cap, display.
Pipeline: filter → rank → cap → display
"""
from typing import List, Mapping, Optional, Tuple

from .policy import DEFAULT_POLICY, Policy


def _filter(frequency: Mapping[str, int], policy: Policy) -> List[Tuple[str, int]]:
    return [
        (path, count)
        for path, count in frequency.items()
        if not policy.is_excluded_from_hotspots(path)
    ]


def _rank(entries: List[Tuple[str, int]]) -> List[Tuple[str, int]]:
    # sorted() is stable: equal counts keep first-seen order
    return sorted(entries, key=lambda entry: -entry[1])


def _cap(entries: List[Tuple[str, int]], policy: Policy) -> List[Tuple[str, int]]:
    return entries[:policy.hotspot_limit]


def display_name(path: str, policy: Optional[Policy] = None) -> str:
    """Strip one leading source-directory prefix."""
    policy = policy or DEFAULT_POLICY
    for prefix in policy.source_prefixes:
        if path.startswith(prefix):
            return path[len(prefix):]
    return path


def derive_hotspots(frequency: Mapping[str, int], policy: Optional[Policy] = None) -> List[str]:
    policy = policy or DEFAULT_POLICY
    filtered = _filter(frequency, policy)
    ranked   = _rank(filtered)
    capped   = _cap(ranked, policy)
    hotspots = [display_name(path, policy) for path, _ in capped]
    return hotspots or [policy.no_hotspots_label]
