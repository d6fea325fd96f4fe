"""Path filter action — which path rules does this change touch?

This is the main entry point for the GitHub Action. It:
1. Compiles the path rules from the YAML input
2. Resolves base and head from the triggering event
3. Lists the files changed between them
4. Evaluates every rule against the changed files

Usage:
    # In a GitHub Action
    pathgate check --paths "$PATHS"

    # Against a local clone
    pathgate check --source local --base-ref main --head-ref HEAD --paths-file paths.yml
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pathgate.config import EventContext, RunConfig
from pathgate.github.changes import ChangeSetProvider, create_provider
from pathgate.github.event import RefPair, resolve_refs
from pathgate.rules.compiler import compile_rules
from pathgate.rules.engine import evaluate, matching_files

logger = logging.getLogger("pathgate.action")


@dataclass
class FilterReport:
    """Everything one run produced."""
    refs: RefPair
    changed_files: list[str]
    result: dict[str, bool]
    matched_files: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "base": self.refs.base,
            "head": self.refs.head,
            "changed_files": self.changed_files,
            "matches": self.result,
            "matched_files": self.matched_files,
        }


def run_path_filter(
    config: RunConfig,
    context: EventContext,
    provider: ChangeSetProvider | None = None,
) -> FilterReport:
    """Run the full path filter pipeline.

    Rules are compiled before anything touches the network or the working
    copy, so a bad rule document fails without side effects. Any error
    propagates; nothing is reported for a partial run.
    """
    rules = compile_rules(config.paths, config.glob)
    logger.info("Compiled %d path rule(s)", len(rules))

    refs = resolve_refs(
        context,
        base=config.base_ref,
        head=config.head_ref,
        policy=config.ref_policy,
    )

    if provider is None:
        provider = create_provider(config, context)
    changed = provider.changed_files(refs.base, refs.head)

    result = evaluate(changed, rules)
    matched = {
        rule_id: matching_files(changed, rule) for rule_id, rule in rules.items()
    }
    return FilterReport(refs=refs, changed_files=changed, result=result, matched_files=matched)
