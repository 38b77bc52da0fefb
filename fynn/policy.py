"""
Policy - keyword lists and display limits.

Which paths count as critical, which paths never become hotspots and
which commit types are accepted are product decisions, not part of the
algorithms. They live here as data: embedded defaults, optionally
deep-merged with a YAML document.
"""
from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

LOGGER = logging.getLogger(__name__)

POLICY_PATH_ENV = "FYNN_POLICY_PATH"

DEFAULT_POLICY_DATA: Dict[str, Any] = {
    "impact": {
        "critical_keywords": [
            "config",
            "package.json",
            "dockerfile",
            ".env",
            "migration",
            "schema",
        ],
    },
    "hotspots": {
        "exclude": [
            "package-lock.json",
            "pnpm-lock.yaml",
            "yarn.lock",
            ".env",
            ".gitignore",
            "dockerfile",
            "docker-compose",
            "tsconfig.json",
            "next.config",
            "tailwind.config",
            "/api/",
            "/route.ts",
            "/route.js",
            "node_modules/",
            ".git/",
            "dist/",
            "build/",
            ".map",
            ".min.js",
            ".min.css",
        ],
        "source_prefixes": ["src/", "app/", "components/", "pages/", "lib/", "utils/"],
        "limit": 3,
        "empty_label": "No relevant files tracked",
    },
    "commits": {
        "types": [
            "feat", "fix", "docs", "style", "refactor", "perf",
            "test", "build", "ci", "chore", "revert",
        ],
        "fallback_type": "chore",
        "description_limit": 50,
    },
}


@dataclass(frozen=True)
class Policy:
    critical_keywords:      Tuple[str, ...]
    hotspot_exclusions:     Tuple[str, ...]
    source_prefixes:        Tuple[str, ...]
    hotspot_limit:          int
    no_hotspots_label:      str
    commit_types:           Tuple[str, ...]
    fallback_commit_type:   str
    description_limit:      int

    def is_critical(self, path: str) -> bool:
        lowered = path.lower()
        return any(keyword in lowered for keyword in self.critical_keywords)

    def is_excluded_from_hotspots(self, path: str) -> bool:
        lowered = path.lower()
        return any(pattern in lowered for pattern in self.hotspot_exclusions)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "Policy":
        impact = data.get("impact") or {}
        hotspots = data.get("hotspots") or {}
        commits = data.get("commits") or {}
        return cls(
            critical_keywords=_str_tuple(impact, "critical_keywords", lower=True),
            hotspot_exclusions=_str_tuple(hotspots, "exclude", lower=True),
            source_prefixes=_str_tuple(hotspots, "source_prefixes"),
            hotspot_limit=_positive_int(hotspots, "limit"),
            no_hotspots_label=str(hotspots.get("empty_label", "")),
            commit_types=_str_tuple(commits, "types"),
            fallback_commit_type=str(commits.get("fallback_type", "")),
            description_limit=_positive_int(commits, "description_limit"),
        )


def _str_tuple(section: Dict[str, Any], key: str, lower: bool = False) -> Tuple[str, ...]:
    raw = section.get(key) or []
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"Policy key '{key}' must be a list, got {type(raw).__name__}")
    values = [str(item) for item in raw]
    return tuple(v.lower() for v in values) if lower else tuple(values)


def _positive_int(section: Dict[str, Any], key: str) -> int:
    raw = section.get(key)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 1:
        raise ValueError(f"Policy key '{key}' must be a positive integer, got {raw!r}")
    return raw


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


DEFAULT_POLICY = Policy.from_mapping(DEFAULT_POLICY_DATA)


def load_policy(
    path: Optional[Path | str] = None,
    logger: Optional[logging.Logger] = None,
) -> Policy:
    """
    Load a policy from YAML, falling back to the embedded defaults.

    A missing file, unparsable YAML or a document that is not a mapping
    all yield the defaults (the last two with a warning). Keys present
    with the wrong type raise ValueError.
    """
    log = logger or LOGGER

    if path is None:
        env_path = os.environ.get(POLICY_PATH_ENV)
        if not env_path:
            return DEFAULT_POLICY
        path = env_path

    policy_path = Path(path).expanduser()
    if not policy_path.exists():
        log.debug("No policy file at %s; using defaults", policy_path)
        return DEFAULT_POLICY

    try:
        raw = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        log.warning("Failed to parse policy at %s: %s; using defaults", policy_path, e)
        return DEFAULT_POLICY

    if raw is None:
        return DEFAULT_POLICY
    if not isinstance(raw, dict):
        log.warning("Policy at %s is not a YAML mapping; using defaults", policy_path)
        return DEFAULT_POLICY

    return Policy.from_mapping(_deep_merge(DEFAULT_POLICY_DATA, raw))
