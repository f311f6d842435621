from __future__ import annotations


class CodecontextorError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(CodecontextorError, ValueError):
    """Malformed option value; raised before any scanning starts."""


class TargetError(CodecontextorError):
    """A target path is missing or is neither a file nor a directory."""
