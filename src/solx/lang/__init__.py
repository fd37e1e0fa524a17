"""
Language front end: AST models, lexer, parser and printer.
"""

from .models import (
    Program,
    AccountDef,
    Field,
    Type,
    TypeKind,
    Instruction,
    Param,
    ParamType,
    ParamKind,
    InitAccount,
    Require,
    Assign,
    ExprStmt,
    Ident,
    FieldAccess,
    Literal,
    LiteralKind,
    BinaryOp,
    BinOp,
    UnaryOp,
    UnOp,
)
from .lexer import Lexer, Token, tokenize
from .parser import Parser, parse
from .printer import format_program

__all__ = [
    "Program",
    "AccountDef",
    "Field",
    "Type",
    "TypeKind",
    "Instruction",
    "Param",
    "ParamType",
    "ParamKind",
    "InitAccount",
    "Require",
    "Assign",
    "ExprStmt",
    "Ident",
    "FieldAccess",
    "Literal",
    "LiteralKind",
    "BinaryOp",
    "BinOp",
    "UnaryOp",
    "UnOp",
    "Lexer",
    "Token",
    "tokenize",
    "Parser",
    "parse",
    "format_program",
]
