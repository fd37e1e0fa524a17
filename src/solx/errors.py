"""Exception types raised by the SOL-X compiler and its project tooling."""

from dataclasses import dataclass
from typing import List, Optional


class SolxError(Exception):
    """Base class for all SOL-X errors."""
    pass


@dataclass
class SyntaxIssue:
    """A single problem found while lexing or parsing."""
    message: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line}, col {self.column}: {self.message}"


class ParseError(SolxError):
    """Raised when source text does not match the grammar.

    Every underlying cause is kept in ``issues``; the message lists them
    all, one per line.
    """

    def __init__(self, issues: List[SyntaxIssue]):
        self.issues = list(issues)
        lines = "\n".join(str(issue) for issue in self.issues)
        super().__init__(f"Parse errors:\n{lines}")


class ValidationError(SolxError):
    """Raised when a parsed program fails the referential-integrity pass."""

    def __init__(
        self,
        message: str,
        reference: Optional[str] = None,
        instruction: Optional[str] = None,
        param: Optional[str] = None,
    ):
        super().__init__(message)
        self.reference = reference
        self.instruction = instruction
        self.param = param


class ConfigError(SolxError):
    """Raised when a configuration value is invalid."""
    pass


class ProjectError(SolxError):
    """Raised for project layout problems (missing source, existing directory)."""
    pass


class ToolchainError(SolxError):
    """Raised when the external Anchor toolchain is missing or cannot start."""
    pass
