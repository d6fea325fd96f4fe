"""GitHub Actions outputs and workflow commands."""

from __future__ import annotations

import os
import uuid
from pathlib import Path

import click


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def format_output(name: str, value: str) -> str:
    """Render one entry of the GITHUB_OUTPUT file."""
    if "\n" in value or "\r" in value or "\n" in name:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    return f"{name}={value}\n"


class ActionOutputs:
    """Sets step outputs for the running workflow.

    Outputs are appended to the file named by ``GITHUB_OUTPUT``; outside of
    a runner that exports it, the legacy ``::set-output`` command is echoed.
    """

    def __init__(self, output_path: str | None = None) -> None:
        if output_path is None:
            output_path = os.environ.get("GITHUB_OUTPUT") or None
        self.output_path = Path(output_path) if output_path else None

    def set_output(self, name: str, value: str) -> None:
        if self.output_path is not None:
            with open(self.output_path, "a", encoding="utf-8") as f:
                f.write(format_output(name, value))
        else:
            click.echo(f"::set-output name={name}::{escape_data(value)}")

    def set_outputs(self, result: dict[str, bool]) -> None:
        """Write every rule result as a "true"/"false" output."""
        for rule_id, is_match in result.items():
            self.set_output(rule_id, "true" if is_match else "false")


def set_failed(message: str) -> None:
    """Report a failure as a workflow error annotation."""
    click.echo(f"::error::{escape_data(message)}")
