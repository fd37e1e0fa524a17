"""Render a Program back into canonical SOL-X source."""

from typing import List, Optional

from .models import (
    AccountDef,
    Assign,
    BinaryOp,
    Expr,
    ExprStmt,
    FieldAccess,
    Ident,
    InitAccount,
    Instruction,
    Literal,
    LiteralKind,
    Program,
    Require,
    Statement,
    UnaryOp,
)

INDENT = "  "


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
    return f'"{escaped}"'


def format_expr(expr: Expr) -> str:
    """Binary operations are always parenthesized, so any tree re-parses to itself."""
    if isinstance(expr, Ident):
        return expr.name
    if isinstance(expr, Literal):
        if expr.kind is LiteralKind.BOOL:
            return "true" if expr.value else "false"
        if expr.kind is LiteralKind.STRING:
            return _quote(expr.value)
        return str(expr.value)
    if isinstance(expr, FieldAccess):
        obj = format_expr(expr.object)
        if isinstance(expr.object, UnaryOp):
            obj = f"({obj})"
        return f"{obj}.{expr.field}"
    if isinstance(expr, BinaryOp):
        return f"({format_expr(expr.left)} {expr.op.value} {format_expr(expr.right)})"
    if isinstance(expr, UnaryOp):
        return f"{expr.op.value}{format_expr(expr.operand)}"
    raise TypeError(f"Unknown expression node: {expr!r}")


def _leading_name(expr: Expr) -> Optional[str]:
    while isinstance(expr, FieldAccess):
        expr = expr.object
    if isinstance(expr, Ident):
        return expr.name
    return None


def _statement_head(expr: Expr) -> str:
    # a leading '-' would continue the previous statement as a subtraction,
    # and a leading 'require' or a bare 'init' would be read as a keyword
    text = format_expr(expr)
    if text.startswith("-") or _leading_name(expr) == "require" or expr == Ident("init"):
        return f"({text})"
    return text


def format_statement(stmt: Statement) -> str:
    if isinstance(stmt, InitAccount):
        text = f"init account {stmt.var_name}: {stmt.account_name} payer {stmt.payer}"
        if stmt.signer is not None:
            text += f" signer {stmt.signer}"
        return text
    if isinstance(stmt, Require):
        text = f"require {format_expr(stmt.condition)}"
        if stmt.message is not None:
            text += f", {_quote(stmt.message)}"
        return text
    if isinstance(stmt, Assign):
        return f"{_statement_head(stmt.target)} = {format_expr(stmt.value)}"
    if isinstance(stmt, ExprStmt):
        return _statement_head(stmt.expr)
    raise TypeError(f"Unknown statement node: {stmt!r}")


def _format_account(account: AccountDef) -> List[str]:
    lines = [f"account {account.name} {{"]
    for field in account.fields:
        lines.append(f"{INDENT}{field.name}: {field.ty.to_rust()}")
    lines.append("}")
    return lines


def _format_instruction(ix: Instruction) -> List[str]:
    params = ", ".join(f"{p.name}: {p.ty.to_source()}" for p in ix.params)
    lines = [f"instruction {ix.name}({params}) {{"]
    for stmt in ix.body:
        lines.append(INDENT + format_statement(stmt))
    lines.append("}")
    return lines


def format_program(program: Program) -> str:
    """Canonical source text for ``program``; ``parse`` reads it back unchanged."""
    blocks = [[f"program {program.name}"]]
    blocks.extend(_format_account(acc) for acc in program.accounts)
    blocks.extend(_format_instruction(ix) for ix in program.instructions)
    return "\n\n".join("\n".join(block) for block in blocks) + "\n"
