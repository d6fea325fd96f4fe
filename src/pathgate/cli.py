"""Command-line interface for pathgate."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import click

from pathgate import __version__
from pathgate.config import (
    ChangeSource,
    GlobOptions,
    RefPolicy,
    RunConfig,
    load_event_context,
)
from pathgate.exceptions import ConfigError, PathGateError
from pathgate.github.outputs import ActionOutputs, set_failed
from pathgate.ui.console import Console

console = Console()
logger = logging.getLogger("pathgate.cli")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger("pathgate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(console.log_handler(level))
    logger.setLevel(level)
    logger.propagate = False


def _read_paths(paths: str | None, paths_file: str | None) -> str:
    """The rule document, inline or from a file."""
    if paths_file:
        try:
            return Path(paths_file).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read paths file {paths_file}: {e}") from e
    if not paths:
        raise ConfigError("Input required and not supplied: paths")
    return paths


def _glob_options(func):
    func = click.option("--nocase", is_flag=True, help="Case-insensitive matching.")(func)
    func = click.option(
        "--no-match-base", is_flag=True,
        help="Anchor slash-less patterns to the full path instead of the basename.",
    )(func)
    func = click.option("--dot", is_flag=True, help="Let wildcards match dotfiles.")(func)
    return func


def _rule_options(func):
    func = click.option(
        "--paths-file", type=click.Path(dir_okay=False), default=None,
        help="Read the YAML rule document from a file.",
    )(func)
    func = click.option(
        "--paths", envvar="INPUT_PATHS", default=None,
        help="YAML mapping of rule id to glob(s).",
    )(func)
    return func


def _format_option(func):
    return click.option(
        "--format", "output_format",
        type=click.Choice(["text", "json"]),
        default="text",
        help="Output format.",
    )(func)


@click.group()
@click.version_option(version=__version__, prog_name="pathgate")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging and matched files.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """pathgate - decide which path rules a code change touches."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@main.command()
@_rule_options
@click.option("--base-ref", envvar="INPUT_BASEREF", default=None, help="Base revision override.")
@click.option("--head-ref", envvar="INPUT_HEADREF", default=None, help="Head revision override.")
@click.option(
    "--source", envvar="INPUT_SOURCE",
    type=click.Choice([s.value for s in ChangeSource]),
    default=ChangeSource.HOSTED.value,
    help="Where to get the changed files from (default: hosted).",
)
@click.option(
    "--ref-policy", envvar="INPUT_REFPOLICY",
    type=click.Choice([p.value for p in RefPolicy]),
    default=RefPolicy.EVENT_FIRST.value,
    help="Whether the event or the overrides decide base/head (default: event-first).",
)
@click.option("--token", envvar=["INPUT_TOKEN", "GITHUB_TOKEN"], default=None, help="GitHub token (hosted source).")
@click.option("--repo-path", default=".", help="Working copy for the local source.")
@click.option("--timeout", type=float, default=None, help="Seconds allowed per git command.")
@click.option("--event-name", envvar="GITHUB_EVENT_NAME", default=None, help="Triggering event type.")
@click.option("--event-path", envvar="GITHUB_EVENT_PATH", default=None, help="Event payload JSON file.")
@click.option("--repository", envvar="GITHUB_REPOSITORY", default=None, help="owner/repo.")
@click.option(
    "--set-outputs/--no-set-outputs", default=None,
    help="Set step outputs (default: only inside GitHub Actions).",
)
@_glob_options
@_format_option
@click.pass_context
def check(
    ctx: click.Context,
    paths: str | None, paths_file: str | None,
    base_ref: str | None, head_ref: str | None,
    source: str, ref_policy: str, token: str | None,
    repo_path: str, timeout: float | None,
    event_name: str | None, event_path: str | None, repository: str | None,
    set_outputs: bool | None,
    dot: bool, no_match_base: bool, nocase: bool,
    output_format: str,
):
    """Evaluate path rules against the files changed by this event.

    Prints one "<rule>: true|false" line per rule and sets a step output
    of the same name.

    Examples:

        pathgate check --paths 'code: src/**'

        pathgate check --source local --base-ref main --head-ref HEAD --paths-file paths.yml
    """
    from pathgate.github.action import run_path_filter

    if set_outputs is None:
        set_outputs = bool(os.environ.get("GITHUB_OUTPUT")) or os.environ.get("GITHUB_ACTIONS") == "true"

    try:
        config = RunConfig(
            paths=_read_paths(paths, paths_file),
            base_ref=base_ref,
            head_ref=head_ref,
            source=ChangeSource(source),
            ref_policy=RefPolicy(ref_policy),
            token=token,
            repo_path=repo_path,
            timeout=timeout,
            glob=GlobOptions(dot=dot, match_base=not no_match_base, nocase=nocase),
        )
        context = load_event_context(event_name, event_path, repository)
        report = run_path_filter(config, context)
    except PathGateError as e:
        set_failed(str(e))
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        console.show_matches(report.result)
        if ctx.obj.get("verbose"):
            console.show_matched_files(report.matched_files)

    if set_outputs:
        outputs = ActionOutputs()
        if outputs.output_path is None and output_format == "json":
            # ::set-output lines would land in the JSON document on stdout
            logger.warning("GITHUB_OUTPUT is not set; step outputs skipped with --format json")
        else:
            outputs.set_outputs(report.result)


@main.command()
@_rule_options
@click.argument("files", nargs=-1)
@_glob_options
@_format_option
@click.pass_context
def match(
    ctx: click.Context,
    paths: str | None, paths_file: str | None,
    files: tuple[str, ...],
    dot: bool, no_match_base: bool, nocase: bool,
    output_format: str,
):
    """Evaluate path rules against an explicit list of files.

    Files come from the arguments, or one per line on stdin when none are
    given. No git or GitHub access is involved.

    Examples:

        pathgate match --paths 'docs: docs/**' docs/readme.md src/a.py

        git diff --name-only main | pathgate match --paths-file paths.yml
    """
    from pathgate.github.changes import normalize_path
    from pathgate.rules.compiler import compile_rules
    from pathgate.rules.engine import evaluate, matching_files

    changed = list(files)
    if not changed:
        stdin = click.get_text_stream("stdin")
        changed = [line.strip() for line in stdin if line.strip()]
    changed = [normalize_path(f) for f in changed]

    try:
        rules = compile_rules(
            _read_paths(paths, paths_file),
            GlobOptions(dot=dot, match_base=not no_match_base, nocase=nocase),
        )
    except PathGateError as e:
        console.error(str(e))
        sys.exit(1)

    result = evaluate(changed, rules)
    matched = {rule_id: matching_files(changed, rule) for rule_id, rule in rules.items()}

    if output_format == "json":
        click.echo(json.dumps({"matches": result, "matched_files": matched}, indent=2))
    else:
        console.show_matches(result)
        if ctx.obj.get("verbose"):
            console.show_matched_files(matched)
