"""Git diff parser — extract changed paths from name-status output.

Parses the output of `git diff --name-status -z` into the list of paths the
diff touches. This is the input layer for the local change-set strategy.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pathgate.exceptions import ParseError

# Status letters documented for `git diff --name-status`, optionally
# followed by a similarity score (R100, C075).
_STATUS_RE = re.compile(r"([ACDMRTUXB])(\d{0,3})")

STATUS_NAMES = {
    "A": "added",
    "C": "copied",
    "D": "deleted",
    "M": "modified",
    "R": "renamed",
    "T": "type-changed",
    "U": "unmerged",
    "X": "unknown",
    "B": "broken",
}


@dataclass
class FileChange:
    """One record of name-status output."""
    status: str  # 'added', 'modified', 'deleted', ...
    path: str
    old_path: str | None = None  # For renames and copies


def parse_name_status_records(output: str) -> list[FileChange]:
    """Parse NUL-delimited name-status output into FileChange records.

    Tokens alternate status/path. Rename and copy records carry a source
    and a destination path; the destination becomes ``path``.

    Raises:
        ParseError: On an unknown status token or a status with no path.
    """
    tokens = [t for t in output.split("\0") if t]
    records: list[FileChange] = []
    i = 0
    while i < len(tokens):
        status_token = tokens[i]
        match = _STATUS_RE.fullmatch(status_token)
        if match is None:
            raise ParseError(
                f"Unexpected diff status {status_token!r} at token {i}"
            )
        letter = match.group(1)
        two_paths = letter in ("R", "C")
        needed = 2 if two_paths else 1
        if i + needed >= len(tokens):
            raise ParseError(f"Diff status {status_token!r} has no path")

        if two_paths:
            records.append(FileChange(
                status=STATUS_NAMES[letter],
                path=tokens[i + 2],
                old_path=tokens[i + 1],
            ))
        else:
            records.append(FileChange(status=STATUS_NAMES[letter], path=tokens[i + 1]))
        i += needed + 1

    return records


def parse_name_status(output: str) -> list[str]:
    """Return the changed paths from NUL-delimited name-status output."""
    return [record.path for record in parse_name_status_records(output)]
