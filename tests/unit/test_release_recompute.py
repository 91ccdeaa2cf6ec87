"""Tests for current-release recomputation."""

from typing import Any

from src.modules.projects.domain.releases import (
    add_release,
    compute_current_release,
    find_current_release,
    remove_release,
)


def _release(version: str, status: str = "GENERAL_AVAILABILITY", **extra: Any) -> dict:
    return {"version": version, "status": status, "current": False, **extra}


def _current_versions(releases: list[dict]) -> list[str]:
    return [r["version"] for r in releases if r["current"]]


def test_marks_highest_general_availability_release() -> None:
    releases = [
        _release("3.1.0"),
        _release("3.3.0-M1", "PRERELEASE"),
        _release("3.2.0"),
        _release("3.4.0-SNAPSHOT", "SNAPSHOT"),
    ]

    result = compute_current_release(releases)

    assert _current_versions(result) == ["3.2.0"]


def test_exactly_one_current_even_if_input_had_several() -> None:
    releases = [
        {**_release("1.0.0"), "current": True},
        {**_release("2.0.0"), "current": True},
    ]

    result = compute_current_release(releases)

    assert _current_versions(result) == ["2.0.0"]


def test_no_general_availability_release_means_no_current() -> None:
    releases = [
        {**_release("1.0.0-M1", "PRERELEASE"), "current": True},
        _release("1.1.0-SNAPSHOT", "SNAPSHOT"),
    ]

    result = compute_current_release(releases)

    assert _current_versions(result) == []
    assert find_current_release(result) is None


def test_versions_compare_as_plain_strings() -> None:
    result = compute_current_release([_release("2.0"), _release("10.0")])

    assert _current_versions(result) == ["2.0"]


def test_is_idempotent() -> None:
    releases = [_release("1.0.0"), _release("1.1.0"), _release("2.0.0-RC1", "PRERELEASE")]

    once = compute_current_release(releases)
    twice = compute_current_release(once)

    assert twice == once


def test_keeps_storage_order_and_unknown_fields() -> None:
    releases = [
        _release("1.0.0", api="https://docs/1.0.0/api"),
        _release("3.0.0"),
        _release("2.0.0"),
    ]

    result = compute_current_release(releases)

    assert [r["version"] for r in result] == ["1.0.0", "3.0.0", "2.0.0"]
    assert result[0]["api"] == "https://docs/1.0.0/api"


def test_does_not_mutate_input() -> None:
    releases = [{**_release("1.0.0"), "current": True}, _release("2.0.0")]

    compute_current_release(releases)

    assert releases[0]["current"] is True
    assert releases[1]["current"] is False


def test_empty_list() -> None:
    assert compute_current_release([]) == []


def test_add_release_recomputes_over_new_list() -> None:
    releases = [{**_release("3.1.0"), "current": True}]

    result = add_release(releases, {**_release("3.2.0"), "current": False})

    assert [r["version"] for r in result] == ["3.1.0", "3.2.0"]
    assert _current_versions(result) == ["3.2.0"]


def test_add_release_ignores_caller_current_flag() -> None:
    releases = [_release("3.2.0")]

    result = add_release(releases, {**_release("3.3.0-M1", "PRERELEASE"), "current": True})

    assert _current_versions(result) == ["3.2.0"]


def test_remove_release_recomputes_current() -> None:
    releases = compute_current_release([_release("3.1.0"), _release("3.2.0")])

    result = remove_release(releases, "3.2.0")

    assert result is not None
    assert [r["version"] for r in result] == ["3.1.0"]
    assert _current_versions(result) == ["3.1.0"]


def test_remove_missing_version_returns_none() -> None:
    assert remove_release([_release("3.1.0")], "9.9.9") is None
