"""
Errors — Failures that stop a validation run before any rule executes.

A rule's own Fail is NOT an exception; it is a Verdict. Only problems
with the inputs (or the ruleset) are raised.
"""

from enum import Enum
from typing import Optional


class InputErrorKind(str, Enum):
    """Why the documentation corpus could not be loaded."""
    MISSING_DIRECTORY = "missing_directory"
    UNTERMINATED_REGION = "unterminated_region"
    NESTED_REGION = "nested_region"
    UNMATCHED_END = "unmatched_end"


class AgentCheckError(Exception):
    """Base class for errors raised by agentcheck."""


class InputError(AgentCheckError):
    """The documentation corpus is malformed or missing."""

    def __init__(
        self,
        kind: InputErrorKind,
        message: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.path = path
        self.line = line
        super().__init__(str(self))

    @property
    def location(self) -> Optional[str]:
        if self.path is None:
            return None
        if self.line is None:
            return self.path
        return f"{self.path}:{self.line}"

    def with_path(self, path: str) -> "InputError":
        """Return a copy of this error attributed to a file."""
        return InputError(self.kind, self.message, path=path, line=self.line)

    def __str__(self) -> str:
        location = self.location
        if location:
            return f"{location}: {self.message}"
        return self.message


class ConfigError(AgentCheckError):
    """The ruleset could not be found, parsed, or validated."""
