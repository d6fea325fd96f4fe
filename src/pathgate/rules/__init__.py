"""Path rules: glob compilation and evaluation."""

from pathgate.rules.compiler import Rule, RuleSet, compile_rule, compile_rules
from pathgate.rules.engine import evaluate, find_match, matching_files
from pathgate.rules.glob import GlobMatcher, compile_glob

__all__ = [
    "GlobMatcher",
    "Rule",
    "RuleSet",
    "compile_glob",
    "compile_rule",
    "compile_rules",
    "evaluate",
    "find_match",
    "matching_files",
]
