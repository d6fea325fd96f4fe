"""Evaluate compiled rules against a changed-file set."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

Matcher = Callable[[str], bool]


def find_match(files: Iterable[str], matcher: Matcher) -> bool:
    """True if any file satisfies the matcher."""
    return any(matcher(f) for f in files)


def matching_files(files: Iterable[str], matcher: Matcher) -> list[str]:
    """All files the matcher accepts, in input order."""
    return [f for f in files if matcher(f)]


def evaluate(files: list[str], rules: Mapping[str, Matcher]) -> dict[str, bool]:
    """One boolean per rule: did any changed file match it?"""
    return {rule_id: find_match(files, matcher) for rule_id, matcher in rules.items()}
