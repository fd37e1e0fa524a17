"""
Anchor code generator.

Lowers a CheckedProgram into the source of an Anchor program crate:
account structs, the ``#[program]`` module with one handler per
instruction, and one ``#[derive(Accounts)]`` context struct per
instruction.
"""

import logging
from typing import Dict, List, Optional

from ..analysis.validator import CheckedProgram, SymbolTable
from ..lang.models import (
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
    ParamKind,
    Program,
    Require,
    Statement,
    UnaryOp,
)
from .space import FixedWidthSpace, SpaceStrategy

logger = logging.getLogger(__name__)

PRELUDE = "use anchor_lang::prelude::*;"

# Name of the handler's Context argument
CTX = "ctx"


def rust_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
    return f'"{escaped}"'


class AnchorGenerator:
    """
    Emits Anchor source for one checked program.

    Identifiers are resolved through each instruction's symbol table:
    signers and accounts become ``ctx.accounts.<name>``, scalar
    parameters stay bare handler arguments.
    """

    def __init__(self, checked: CheckedProgram, space_strategy: Optional[SpaceStrategy] = None):
        self.checked = checked
        self.program: Program = checked.program
        self.space = space_strategy or FixedWidthSpace()

    def generate(self) -> str:
        out: List[str] = [PRELUDE, ""]

        for account in self.program.accounts:
            out.extend(self.account_struct(account))

        out.extend(self.program_module())

        for ix in self.program.instructions:
            out.extend(self.context_struct(ix))

        logger.debug(
            "Generated %d account structs and %d handlers for %s",
            len(self.program.accounts), len(self.program.instructions), self.program.name,
        )
        return "\n".join(out)

    # ---------- declarations ----------

    def account_struct(self, account: AccountDef) -> List[str]:
        lines = ["#[account]", f"pub struct {account.name} {{"]
        for f in account.fields:
            lines.append(f"    pub {f.name}: {f.ty.to_rust()},")
        lines.extend(["}", ""])
        return lines

    def program_module(self) -> List[str]:
        lines = ["#[program]", f"pub mod {self.program.name.lower()} {{", "    use super::*;", ""]
        for ix in self.program.instructions:
            lines.extend(self.handler(ix))
        lines.extend(["}", ""])
        return lines

    def handler(self, ix: Instruction) -> List[str]:
        scope = self.checked.scope(ix)
        lines = [f"    pub fn {ix.name}(", f"        {CTX}: Context<{ix.context_name}>,"]
        for param in ix.argument_params():
            lines.append(f"        {param.name}: {param.ty.to_rust()},")
        lines.append("    ) -> Result<()> {")
        for stmt in ix.body:
            lowered = self.statement(stmt, scope)
            if lowered is not None:
                lines.append(f"        {lowered}")
        lines.extend(["        Ok(())", "    }", ""])
        return lines

    def context_struct(self, ix: Instruction) -> List[str]:
        inits: Dict[str, InitAccount] = {}
        param_names = {p.name for p in ix.params}
        for init in ix.init_statements():
            if init.var_name in param_names and init.var_name not in inits:
                inits[init.var_name] = init

        lines = ["#[derive(Accounts)]", f"pub struct {ix.context_name}<'info> {{"]
        for param in ix.context_params():
            init = inits.get(param.name)
            if param.ty.kind is ParamKind.ACCOUNT and init is not None:
                lines.extend([
                    "    #[account(",
                    "        init,",
                    f"        payer = {init.payer},",
                    f"        space = {self.account_space(param.ty.account)}",
                    "    )]",
                ])
            else:
                lines.append("    #[account(mut)]")
            lines.append(f"    pub {param.name}: {param.ty.to_rust()},")
        lines.extend(["}", ""])
        return lines

    def account_space(self, account_name: str) -> int:
        account = self.program.get_account(account_name)
        if account is None:
            # validation guarantees the account exists
            raise KeyError(account_name)
        return self.space.account_size(account)

    # ---------- statements and expressions ----------

    def statement(self, stmt: Statement, scope: SymbolTable) -> Optional[str]:
        if isinstance(stmt, InitAccount):
            # handled by the context struct's init constraint
            return None
        if isinstance(stmt, Require):
            cond = self.expr(stmt.condition, scope)
            if stmt.message is not None:
                return f"require!({cond}, {stmt.message});"
            return f"require!({cond});"
        if isinstance(stmt, Assign):
            return f"{self.expr(stmt.target, scope)} = {self.expr(stmt.value, scope)};"
        if isinstance(stmt, ExprStmt):
            return f"{self.expr(stmt.expr, scope)};"
        raise TypeError(f"Unknown statement node: {stmt!r}")

    def expr(self, expr: Expr, scope: SymbolTable) -> str:
        if isinstance(expr, Ident):
            return self.ident(expr.name, scope)
        if isinstance(expr, FieldAccess):
            return f"{self.expr(expr.object, scope)}.{expr.field}"
        if isinstance(expr, Literal):
            return self.literal(expr)
        if isinstance(expr, BinaryOp):
            return f"({self.expr(expr.left, scope)} {expr.op.value} {self.expr(expr.right, scope)})"
        if isinstance(expr, UnaryOp):
            return f"{expr.op.value}{self.expr(expr.operand, scope)}"
        raise TypeError(f"Unknown expression node: {expr!r}")

    def ident(self, name: str, scope: SymbolTable) -> str:
        kind = scope.lookup(name)
        if kind is None:
            logger.debug("'%s' is not a parameter of %s; treating it as a context account", name, scope.instruction)
            return f"{CTX}.accounts.{name}"
        if scope.is_context_field(name):
            return f"{CTX}.accounts.{name}"
        return name

    @staticmethod
    def literal(lit: Literal) -> str:
        if lit.kind is LiteralKind.BOOL:
            return "true" if lit.value else "false"
        if lit.kind is LiteralKind.STRING:
            return rust_string(lit.value)
        return str(lit.value)


def generate(checked: CheckedProgram, space_strategy: Optional[SpaceStrategy] = None) -> str:
    """Generate Anchor source for a validated program."""
    return AnchorGenerator(checked, space_strategy).generate()
