"""Error taxonomy for project generation.

Every failure is fatal: nothing is retried, and the error carries enough
context (template, destination, offending path) to diagnose it.
"""

from __future__ import annotations

from typing import Any


class TemplaterError(Exception):
    """Base error. Keyword context is rendered into the message."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = {key: value for key, value in context.items() if value is not None}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        ctx = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({ctx})"

    def add_context(self, **context: Any) -> "TemplaterError":
        for key, value in context.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            **{key: str(value) for key, value in self.context.items()},
        }


class InvalidArgumentError(TemplaterError, ValueError):
    """Missing or malformed required input (main class, destination, CLI flag)."""


class TemplateNotFoundError(TemplaterError, LookupError):
    """No template archive matches the requested name."""


class ArchiveCorruptError(TemplaterError):
    """The gzip stream or tar structure of a template cannot be parsed."""


class ProjectIOError(TemplaterError, OSError):
    """Filesystem failure while materialising a project."""


__all__ = [
    "ArchiveCorruptError",
    "InvalidArgumentError",
    "ProjectIOError",
    "TemplateNotFoundError",
    "TemplaterError",
]
