"""Compile a YAML rule document into named path matchers."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from pathgate.config import GlobOptions
from pathgate.exceptions import ConfigError, ParseError
from pathgate.rules.glob import GlobMatcher, compile_glob


@dataclass
class Rule:
    """A named set of glob alternatives."""
    rule_id: str
    patterns: list[str]
    matchers: list[GlobMatcher] = field(default_factory=list, repr=False)

    def __call__(self, path: str) -> bool:
        return any(matcher(path) for matcher in self.matchers)


class RuleSet(Mapping[str, Rule]):
    """Rules keyed by identifier, in document order."""

    def __init__(self, rules: list[Rule] | None = None) -> None:
        self._rules: dict[str, Rule] = {}
        for rule in rules or []:
            self._rules[rule.rule_id] = rule

    def __getitem__(self, rule_id: str) -> Rule:
        return self._rules[rule_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({list(self._rules)})"


_MERGE_TAG = "tag:yaml.org,2002:merge"


class _RuleLoader(yaml.SafeLoader):
    """SafeLoader that keeps mapping keys exactly as written.

    Plain YAML 1.1 resolution would turn keys such as ``on``, ``no`` or
    ``010`` into booleans and integers, and ``1`` and ``true`` would then
    collide in the resulting dict.
    """

    def construct_mapping(self, node, deep=False):
        # Merged (<<) entries may be overridden; explicit keys may not repeat.
        seen: set[str] = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG or not isinstance(key_node, yaml.ScalarNode):
                continue
            if key_node.value in seen:
                raise ConfigError(f"Duplicate rule identifier '{key_node.value}'")
            seen.add(key_node.value)

        self.flatten_mapping(node)
        mapping: dict[str, Any] = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise ConfigError(
                    f"Invalid rule identifier at line {key_node.start_mark.line + 1}: "
                    f"keys must be scalars"
                )
            mapping[key_node.value] = self.construct_object(value_node, deep=deep)
        return mapping


def _pattern_list(rule_id: str, spec: Any) -> list[str]:
    if isinstance(spec, str):
        return [spec]
    if isinstance(spec, list) and all(isinstance(p, str) for p in spec):
        return list(spec)
    raise ConfigError(
        f"Invalid patterns for '{rule_id}': expected a glob string "
        f"or a list of glob strings"
    )


def compile_rule(rule_id: str, spec: Any, options: GlobOptions | None = None) -> Rule:
    """Compile one rule from a string or list-of-strings pattern spec."""
    patterns = _pattern_list(rule_id, spec)
    return Rule(
        rule_id=rule_id,
        patterns=patterns,
        matchers=[compile_glob(p, options) for p in patterns],
    )


def compile_rules(document: str, options: GlobOptions | None = None) -> RuleSet:
    """Parse a YAML rule document and compile every rule.

    The document maps rule identifiers to a glob or a list of globs::

        code: src/**
        docs:
          - "*.md"
          - docs/**

    Identifiers are kept as written (``on`` stays ``on``). An empty list
    compiles to a rule that never matches.

    Raises:
        ParseError: If the document is not valid YAML.
        ConfigError: If the root is not a mapping, an identifier repeats,
            or a rule is malformed.
    """
    try:
        doc = yaml.load(document, Loader=_RuleLoader)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid path YAML: {e}") from e

    if not isinstance(doc, dict):
        raise ConfigError("Invalid path YAML format: root element is not an object")

    return RuleSet([
        compile_rule(rule_id, spec, options) for rule_id, spec in doc.items()
    ])
