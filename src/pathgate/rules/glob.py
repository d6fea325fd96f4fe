"""Glob patterns compiled to anchored regular expressions.

Dialect:
  - ``*`` matches within one path segment, ``?`` one character of a segment.
  - ``**`` as a whole segment matches zero or more segments.
  - ``[a-z]``, ``[!a]`` / ``[^a]`` and POSIX ``[[:alpha:]]`` classes.
  - ``{a,b}`` alternation (nestable) and ``{1..3}`` / ``{a..c}`` ranges.
  - Extglobs ``@(a|b)``, ``?(a|b)``, ``+(a|b)``, ``*(a|b)``, ``!(a|b)``.
  - A leading ``!`` negates the pattern, ``\\`` escapes one character.
  - Wildcards skip dotfiles unless ``GlobOptions.dot`` is set.
  - Patterns without ``/`` match the basename when ``match_base`` is on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pathgate.config import GlobOptions
from pathgate.exceptions import ConfigError

MAX_BRACE_RANGE = 1000

_RANGE_RE = re.compile(r"^(-?\d+)\.\.(-?\d+)(?:\.\.(-?\d+))?$")
_ALPHA_RANGE_RE = re.compile(r"^([a-zA-Z])\.\.([a-zA-Z])(?:\.\.(-?\d+))?$")

_POSIX_CLASSES = {
    "alnum": "a-zA-Z0-9",
    "alpha": "a-zA-Z",
    "ascii": "\\x00-\\x7F",
    "blank": " \\t",
    "digit": "0-9",
    "lower": "a-z",
    "space": " \\t\\r\\n\\v\\f",
    "upper": "A-Z",
    "word": "A-Za-z0-9_",
    "xdigit": "A-Fa-f0-9",
}

_EXTGLOB_OPS = {
    "@": "(?:{})",
    "?": "(?:{})?",
    "+": "(?:{})+",
    "*": "(?:{})*",
}


@dataclass(frozen=True)
class GlobMatcher:
    """A compiled glob: call it with a path to test it."""
    pattern: str
    regex: re.Pattern[str]
    negated: bool = False

    def __call__(self, path: str) -> bool:
        return (self.regex.fullmatch(path) is not None) != self.negated


# -------------------------------------------------------------------------
# Scanning helpers
# -------------------------------------------------------------------------

def _class_end(text: str, start: int) -> int:
    """Index of the ']' closing the class opened at ``start``, or -1."""
    j = start + 1
    if j < len(text) and text[j] in "!^":
        j += 1
    if j < len(text) and text[j] == "]":
        j += 1
    while j < len(text):
        if text[j] == "\\":
            j += 2
            continue
        if text[j] == "[" and text.startswith("[:", j):
            close = text.find(":]", j + 2)
            if close != -1:
                j = close + 2
                continue
        if text[j] == "]":
            return j
        j += 1
    return -1


def _matching(text: str, start: int, open_ch: str, close_ch: str) -> int:
    """Index of the bracket matching ``text[start]``, or -1."""
    depth = 0
    i = start
    while i < len(text):
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == "[":
            end = _class_end(text, i)
            if end != -1:
                i = end + 1
                continue
        if c == open_ch:
            depth += 1
        elif c == close_ch:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_top_level(text: str, sep: str) -> list[str]:
    """Split on ``sep`` outside braces, parens, classes and escapes."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == "\\" and i + 1 < len(text):
            current.append(text[i:i + 2])
            i += 2
            continue
        if c == "[":
            end = _class_end(text, i)
            if end != -1:
                current.append(text[i:end + 1])
                i = end + 1
                continue
        if c in "{(":
            depth += 1
        elif c in "})":
            depth = max(0, depth - 1)
        if c == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1
    parts.append("".join(current))
    return parts


# -------------------------------------------------------------------------
# Brace expansion
# -------------------------------------------------------------------------

def _expand_range(body: str) -> list[str] | None:
    match = _RANGE_RE.match(body)
    if match:
        start, end = int(match.group(1)), int(match.group(2))
        step = abs(int(match.group(3) or 1)) or 1
        width = 0
        for side in (match.group(1), match.group(2)):
            digits = side.lstrip("-")
            if len(digits) > 1 and digits.startswith("0"):
                width = max(width, len(side))
        values = range(start, end + 1, step) if start <= end else range(start, end - 1, -step)
        if len(values) > MAX_BRACE_RANGE:
            raise ConfigError(f"Brace range {{{body}}} expands to too many values")
        return [str(v).zfill(width) if width else str(v) for v in values]

    match = _ALPHA_RANGE_RE.match(body)
    if match:
        start, end = ord(match.group(1)), ord(match.group(2))
        step = abs(int(match.group(3) or 1)) or 1
        values = range(start, end + 1, step) if start <= end else range(start, end - 1, -step)
        return [chr(v) for v in values]
    return None


def _next_brace(pattern: str, start: int) -> int:
    i = start
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "[":
            end = _class_end(pattern, i)
            if end != -1:
                i = end + 1
                continue
        if c == "{":
            return i
        i += 1
    return -1


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` groups and ``{1..3}`` ranges into plain patterns.

    A group with neither a comma nor a range, or with no closing brace,
    stays literal.
    """
    start = _next_brace(pattern, 0)
    while start != -1:
        end = _matching(pattern, start, "{", "}")
        if end == -1:
            return [pattern]
        body = pattern[start + 1:end]
        options = _split_top_level(body, ",")
        if len(options) == 1:
            options = _expand_range(body)
        if options is None:
            start = _next_brace(pattern, end + 1)
            continue

        prefix, suffix = pattern[:start], pattern[end + 1:]
        results: list[str] = []
        for option in options:
            for expanded in expand_braces(prefix + option + suffix):
                if expanded not in results:
                    results.append(expanded)
        return results
    return [pattern]


# -------------------------------------------------------------------------
# Translation
# -------------------------------------------------------------------------

def _translate_class(body: str, negate: bool) -> str:
    out: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "[" and body.startswith("[:", i):
            close = body.find(":]", i + 2)
            if close != -1:
                name = body[i + 2:close]
                if name not in _POSIX_CLASSES:
                    raise ConfigError(f"Unknown character class [:{name}:]")
                out.append(_POSIX_CLASSES[name])
                i = close + 2
                continue
        if c == "\\" and i + 1 < len(body):
            out.append(re.escape(body[i + 1]))
            i += 2
            continue
        if c == "-" and 0 < i < len(body) - 1:
            out.append("-")
        else:
            out.append(re.escape(c))
        i += 1
    if negate:
        return "[^/" + "".join(out) + "]"
    return "[" + "".join(out) + "]"


def _translate_segment(seg: str) -> str:
    """Regex for one path segment (no separators, no dot guard)."""
    out: list[str] = []
    i = 0
    while i < len(seg):
        c = seg[i]

        if c == "\\":
            if i + 1 < len(seg):
                out.append(re.escape(seg[i + 1]))
                i += 2
            else:
                out.append(re.escape(c))
                i += 1
            continue

        if c in "@?+*!" and i + 1 < len(seg) and seg[i + 1] == "(":
            close = _matching(seg, i + 1, "(", ")")
            if close != -1:
                alternatives = _split_top_level(seg[i + 2:close], "|")
                inner = "|".join(_translate_segment(a) for a in alternatives)
                if c == "!":
                    rest = _translate_segment(seg[close + 1:])
                    out.append(f"(?:(?!(?:{inner}){rest}(?:/|$))[^/]*?)")
                    out.append(rest)
                    return "".join(out)
                out.append(_EXTGLOB_OPS[c].format(inner))
                i = close + 1
                continue

        if c == "*":
            while i < len(seg) and seg[i] == "*":
                i += 1
            out.append("[^/]*")
            continue

        if c == "?":
            out.append("[^/]")
            i += 1
            continue

        if c == "[":
            end = _class_end(seg, i)
            if end != -1:
                negate = i + 1 < len(seg) and seg[i + 1] in "!^"
                body = seg[i + 2 if negate else i + 1:end]
                out.append(_translate_class(body, negate))
                i = end + 1
                continue

        out.append(re.escape(c))
        i += 1
    return "".join(out)


def _starts_with_wildcard(seg: str) -> bool:
    if not seg:
        return False
    if seg[0] in "*?[":
        return True
    return seg[0] in "@+!" and seg[1:2] == "("


def translate(pattern: str, options: GlobOptions | None = None) -> str:
    """Translate one brace-free glob into a regex for ``re.fullmatch``."""
    options = options or GlobOptions()
    while pattern.startswith("./"):
        pattern = pattern[2:]

    any_segment = r"[^/]+" if options.dot else r"(?!\.)[^/]+"
    dot_guard = "" if options.dot else r"(?!\.)"

    segments = _split_top_level(pattern, "/")
    collapsed: list[str] = []
    for seg in segments:
        if seg == "**" and collapsed and collapsed[-1] == "**":
            continue
        collapsed.append(seg)
    segments = collapsed

    parts: list[str] = []
    separator_emitted = False
    count = len(segments)
    for idx, seg in enumerate(segments):
        last = idx == count - 1
        if seg == "**":
            if count == 1:
                parts.append(f"{any_segment}(?:/{any_segment})*")
            elif idx == 0:
                parts.append(f"(?:{any_segment}/)*")
            elif last:
                parts.append(f"(?:/{any_segment})*")
            else:
                parts.append(f"(?:/{any_segment})*/")
            separator_emitted = not last
            continue

        if idx > 0 and not separator_emitted:
            parts.append("/")
        if _starts_with_wildcard(seg):
            parts.append(dot_guard)
        parts.append(_translate_segment(seg))
        separator_emitted = False

    regex = "".join(parts)
    if options.match_base and len(segments) == 1:
        regex = f"(?:.*/)?{regex}"
    return regex


def compile_glob(pattern: str, options: GlobOptions | None = None) -> GlobMatcher:
    """Compile a glob pattern into a GlobMatcher.

    Raises:
        ConfigError: If the pattern is empty or cannot be compiled.
    """
    options = options or GlobOptions()
    if not isinstance(pattern, str) or not pattern:
        raise ConfigError("Glob pattern must be a non-empty string")

    body = pattern
    negated = False
    while body.startswith("!") and not body.startswith("!("):
        negated = not negated
        body = body[1:]

    alternatives = [translate(p, options) for p in expand_braces(body)]
    flags = re.DOTALL | (re.IGNORECASE if options.nocase else 0)
    try:
        regex = re.compile("|".join(f"(?:{a})" for a in alternatives), flags)
    except re.error as e:
        raise ConfigError(f"Invalid glob pattern '{pattern}': {e}") from e
    return GlobMatcher(pattern=pattern, regex=regex, negated=negated)
