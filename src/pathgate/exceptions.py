"""Custom exceptions for pathgate."""


class PathGateError(Exception):
    """Base exception for all pathgate errors."""


class ConfigError(PathGateError):
    """Configuration-related errors."""


class TransportError(PathGateError):
    """Hosting API or external process failures."""


class ParseError(PathGateError):
    """Malformed rule documents or diff output."""
