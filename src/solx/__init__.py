"""SOL-X: a contract DSL that compiles to Anchor."""

from .analysis import CheckedProgram, validate
from .codegen import generate
from .config import SolxConfig
from .core import compile_program, compile_source
from .errors import ParseError, SolxError, ValidationError
from .lang import Program, parse

__version__ = "0.1.0"

__all__ = [
    "CheckedProgram",
    "ParseError",
    "Program",
    "SolxConfig",
    "SolxError",
    "ValidationError",
    "compile_program",
    "compile_source",
    "generate",
    "parse",
    "validate",
]
