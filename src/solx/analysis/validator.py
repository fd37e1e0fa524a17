"""
Referential-integrity pass over a parsed program.

Checks that every account-typed instruction parameter names a declared
account, and builds the per-instruction symbol tables the code generator
uses to resolve identifiers. Nothing else is checked unless ``strict`` is
set; expression typing and field existence are out of scope.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..errors import ValidationError
from ..lang.models import Instruction, ParamKind, Program

logger = logging.getLogger(__name__)


class SymbolKind(Enum):
    """What an identifier inside an instruction body refers to."""
    SCALAR = "scalar"    # handler argument
    ACCOUNT = "account"  # ctx.accounts.<name>
    SIGNER = "signer"    # ctx.accounts.<name>


@dataclass
class SymbolTable:
    """Names in scope inside one instruction."""
    instruction: str
    symbols: Dict[str, SymbolKind] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[SymbolKind]:
        return self.symbols.get(name)

    def is_context_field(self, name: str) -> bool:
        return self.symbols.get(name) in (SymbolKind.ACCOUNT, SymbolKind.SIGNER)

    @classmethod
    def for_instruction(cls, ix: Instruction) -> "SymbolTable":
        table = cls(instruction=ix.name)
        for param in ix.params:
            if param.ty.kind is ParamKind.SIGNER:
                table.symbols[param.name] = SymbolKind.SIGNER
            elif param.ty.kind is ParamKind.ACCOUNT:
                table.symbols[param.name] = SymbolKind.ACCOUNT
            else:
                table.symbols[param.name] = SymbolKind.SCALAR
        return table


@dataclass
class CheckedProgram:
    """A program that passed validation, plus its symbol tables."""
    program: Program
    symbols: Dict[str, SymbolTable] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def scope(self, instruction: Instruction) -> SymbolTable:
        table = self.symbols.get(instruction.name)
        if table is None or self.program.get_instruction(instruction.name) is not instruction:
            # a later instruction reusing an earlier name gets its own table
            table = SymbolTable.for_instruction(instruction)
        return table


def _lenient_findings(program: Program) -> List[str]:
    """Problems that are only fatal in strict mode."""
    findings = []

    for kind, names in (
        ("account", [acc.name for acc in program.accounts]),
        ("instruction", [ix.name for ix in program.instructions]),
    ):
        for name, count in Counter(names).items():
            if count > 1:
                findings.append(f"Duplicate {kind} name: {name}")

    for ix in program.instructions:
        param_names = {p.name for p in ix.params}
        for init in ix.init_statements():
            if init.var_name not in param_names:
                findings.append(
                    f"init account '{init.var_name}' in instruction '{ix.name}' "
                    f"does not match any parameter"
                )

    return findings


def validate(program: Program, strict: bool = False) -> CheckedProgram:
    """
    Validate a parsed program.

    Args:
        program: Program produced by the parser
        strict: Also reject duplicate names and unmatched ``init account``
            variables instead of only warning about them

    Returns:
        CheckedProgram carrying the program and its symbol tables

    Raises:
        ValidationError: for the first unknown account type referenced
            (or, in strict mode, the first lenient finding)
    """
    declared = {acc.name for acc in program.accounts}

    for ix in program.instructions:
        for param in ix.params:
            if param.ty.kind is ParamKind.ACCOUNT and param.ty.account not in declared:
                raise ValidationError(
                    f"Unknown account type: {param.ty.account}",
                    reference=param.ty.account,
                    instruction=ix.name,
                    param=param.name,
                )

    findings = _lenient_findings(program)
    if findings and strict:
        raise ValidationError(findings[0])
    for finding in findings:
        logger.warning(finding)

    symbols: Dict[str, SymbolTable] = {}
    for ix in program.instructions:
        symbols.setdefault(ix.name, SymbolTable.for_instruction(ix))
    logger.debug("Validated %s (%d symbol tables)", program.name, len(symbols))
    return CheckedProgram(program=program, symbols=symbols, warnings=findings)
