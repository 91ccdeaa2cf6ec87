"""Current-release computation for a project's documentation list.

Releases are handled in their stored (wire) shape, plain mappings with at
least ``version`` and ``status`` keys, so fields this service does not model
survive a rewrite untouched.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from src.modules.projects.domain.entities import ReleaseStatus

VERSION_KEY = "version"
STATUS_KEY = "status"
CURRENT_KEY = "current"


def compute_current_release(
    releases: Iterable[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """Return copies of ``releases`` with exactly the ``current`` flag rederived.

    Every release is reset to ``current = False``; then the releases are
    ranked by version descending and the first generally-available one is
    flagged current. Versions are compared as plain strings, so "2.0" ranks
    above "10.0". Storage order of the returned list matches the input.
    """
    recomputed = [{**release, CURRENT_KEY: False} for release in releases]
    # sorted() is stable: equal versions keep their storage order
    ranked = sorted(recomputed, key=lambda release: release[VERSION_KEY], reverse=True)
    for release in ranked:
        if release.get(STATUS_KEY) == ReleaseStatus.GENERAL_AVAILABILITY.value:
            release[CURRENT_KEY] = True
            break
    return recomputed


def add_release(
    releases: Iterable[Mapping[str, Any]],
    release: Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Append ``release`` and recompute the current flag over the new list."""
    return compute_current_release([*releases, release])


def remove_release(
    releases: Iterable[Mapping[str, Any]],
    version: str,
) -> list[dict[str, Any]] | None:
    """Drop every release matching ``version`` and recompute the current flag.

    Returns None when no release has that version; callers treat that as
    not-found rather than a no-op.
    """
    releases = list(releases)
    remaining = [r for r in releases if r.get(VERSION_KEY) != version]
    if len(remaining) == len(releases):
        return None
    return compute_current_release(remaining)


def find_current_release(
    releases: Sequence[Mapping[str, Any]],
) -> Mapping[str, Any] | None:
    for release in releases:
        if release.get(CURRENT_KEY):
            return release
    return None
