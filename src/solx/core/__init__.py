"""Compilation pipeline."""

from .pipeline import CompileResult, compile_program, compile_source

__all__ = ["CompileResult", "compile_program", "compile_source"]
