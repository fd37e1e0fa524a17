"""Referential-integrity checks over parsed programs."""

from .validator import CheckedProgram, SymbolKind, SymbolTable, validate

__all__ = [
    "CheckedProgram",
    "SymbolKind",
    "SymbolTable",
    "validate",
]
