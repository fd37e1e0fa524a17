"""
Data models for SOL-X programs.

These models are the abstract syntax tree shared by the parser, the
validator and the Anchor code generator. Every node is a frozen dataclass
and every sequence is a tuple, so a tree is never changed once the parser
has built it.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union
from enum import Enum


class TypeKind(Enum):
    """Field types an account can declare."""
    PUBKEY = "Pubkey"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    BOOL = "bool"
    STRING = "String"
    VEC = "Vec"
    OPTION = "Option"


# Types spelled with a single identifier in source
SCALAR_TYPES = {kind.value: kind for kind in TypeKind if kind not in (TypeKind.VEC, TypeKind.OPTION)}

# Types that wrap another type: Vec<T>, Option<T>
GENERIC_TYPES = {"Vec": TypeKind.VEC, "Option": TypeKind.OPTION}


@dataclass(frozen=True)
class Type:
    """An account field type. ``inner`` is only set for Vec and Option."""
    kind: TypeKind
    inner: Optional["Type"] = None

    @classmethod
    def vec(cls, inner: "Type") -> "Type":
        return cls(TypeKind.VEC, inner)

    @classmethod
    def option(cls, inner: "Type") -> "Type":
        return cls(TypeKind.OPTION, inner)

    def to_rust(self) -> str:
        """Rust spelling of this type (``Vec<Option<u64>>``)."""
        if self.inner is not None:
            return f"{self.kind.value}<{self.inner.to_rust()}>"
        return self.kind.value

    def __str__(self) -> str:
        return self.to_rust()


@dataclass(frozen=True)
class Field:
    name: str
    ty: Type


@dataclass(frozen=True)
class AccountDef:
    """An on-chain account layout declared with ``account Name { ... }``."""
    name: str
    fields: Tuple[Field, ...] = ()


class ParamKind(Enum):
    """Kinds of instruction parameters."""
    SIGNER = "Signer"
    ACCOUNT = "Account"
    PUBKEY = "Pubkey"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    BOOL = "bool"
    STRING = "String"


# Parameter kinds spelled by a reserved type name; anything else is an account reference
PARAM_KEYWORDS = {kind.value: kind for kind in ParamKind if kind is not ParamKind.ACCOUNT}


@dataclass(frozen=True)
class ParamType:
    """Parameter type. ``account`` names the AccountDef for ACCOUNT params."""
    kind: ParamKind
    account: Optional[str] = None

    @classmethod
    def account_ref(cls, name: str) -> "ParamType":
        return cls(ParamKind.ACCOUNT, name)

    @property
    def is_context(self) -> bool:
        """Signers and accounts travel in the generated context struct."""
        return self.kind in (ParamKind.SIGNER, ParamKind.ACCOUNT)

    def to_rust(self) -> str:
        if self.kind is ParamKind.SIGNER:
            return "Signer<'info>"
        if self.kind is ParamKind.ACCOUNT:
            return f"Account<'info, {self.account}>"
        return self.kind.value

    def to_source(self) -> str:
        if self.kind is ParamKind.ACCOUNT:
            return self.account
        return self.kind.value


@dataclass(frozen=True)
class Param:
    name: str
    ty: ParamType


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

class BinOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    AND = "&&"
    OR = "||"


class UnOp(Enum):
    NOT = "!"
    NEG = "-"


class LiteralKind(Enum):
    INT = "int"      # signed; never produced by the parser
    UINT = "uint"
    BOOL = "bool"
    STRING = "string"


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class FieldAccess:
    object: "Expr"
    field: str


@dataclass(frozen=True)
class Literal:
    kind: LiteralKind
    value: Union[int, bool, str]

    @classmethod
    def uint(cls, value: int) -> "Literal":
        return cls(LiteralKind.UINT, value)

    @classmethod
    def boolean(cls, value: bool) -> "Literal":
        return cls(LiteralKind.BOOL, value)

    @classmethod
    def string(cls, value: str) -> "Literal":
        return cls(LiteralKind.STRING, value)


@dataclass(frozen=True)
class BinaryOp:
    op: BinOp
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class UnaryOp:
    op: UnOp
    operand: "Expr"


Expr = Union[Ident, FieldAccess, Literal, BinaryOp, UnaryOp]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InitAccount:
    """``init account <var>: <Account> payer <payer> [signer <signer>]``"""
    var_name: str
    account_name: str
    payer: str
    signer: Optional[str] = None


@dataclass(frozen=True)
class Require:
    condition: Expr
    message: Optional[str] = None


@dataclass(frozen=True)
class Assign:
    target: Expr
    value: Expr


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr


Statement = Union[InitAccount, Require, Assign, ExprStmt]


@dataclass(frozen=True)
class Instruction:
    """A program entry point; also names its ``<name>Context`` struct."""
    name: str
    params: Tuple[Param, ...] = ()
    body: Tuple[Statement, ...] = ()

    @property
    def context_name(self) -> str:
        return f"{self.name}Context"

    def context_params(self) -> Tuple[Param, ...]:
        """Signer and account params, in declared order."""
        return tuple(p for p in self.params if p.ty.is_context)

    def argument_params(self) -> Tuple[Param, ...]:
        """Params passed as handler arguments, in declared order."""
        return tuple(p for p in self.params if not p.ty.is_context)

    def init_statements(self) -> Tuple[InitAccount, ...]:
        return tuple(s for s in self.body if isinstance(s, InitAccount))


@dataclass(frozen=True)
class Program:
    """A complete SOL-X compilation unit."""
    name: str
    accounts: Tuple[AccountDef, ...] = ()
    instructions: Tuple[Instruction, ...] = ()

    def get_account(self, name: str) -> Optional[AccountDef]:
        """Get account definition by name."""
        for acc in self.accounts:
            if acc.name == name:
                return acc
        return None

    def get_instruction(self, name: str) -> Optional[Instruction]:
        """Get instruction by name."""
        for ix in self.instructions:
            if ix.name == name:
                return ix
        return None
