"""
Parser for SOL-X source.

A hand-written recursive-descent parser over the token list produced by
the lexer. There is no error recovery: the first structural mismatch
aborts with a ParseError that lists every cause known at that point
(what was found, every alternative that would have been accepted there,
and any blocks left open when input ran out).
"""

import logging
from typing import List, Optional, Tuple

from ..errors import ParseError, SyntaxIssue
from .lexer import SYMBOL_TEXT, Token, tokenize
from .models import (
    GENERIC_TYPES,
    PARAM_KEYWORDS,
    SCALAR_TYPES,
    AccountDef,
    Assign,
    BinaryOp,
    BinOp,
    Expr,
    ExprStmt,
    Field,
    FieldAccess,
    Ident,
    InitAccount,
    Instruction,
    Literal,
    Param,
    ParamType,
    Program,
    Require,
    Statement,
    Type,
    UnaryOp,
    UnOp,
)

logger = logging.getLogger(__name__)


# Assignment operators; compound forms carry the operator they desugar to
ASSIGN_OPS = {
    "ASSIGN": None,
    "PLUS_ASSIGN": BinOp.ADD,
    "MINUS_ASSIGN": BinOp.SUB,
    "STAR_ASSIGN": BinOp.MUL,
    "SLASH_ASSIGN": BinOp.DIV,
    "PERCENT_ASSIGN": BinOp.MOD,
}

COMPARISON_OPS = {
    "EQ": BinOp.EQ,
    "NE": BinOp.NE,
    "LT": BinOp.LT,
    "LE": BinOp.LE,
    "GT": BinOp.GT,
    "GE": BinOp.GE,
}

ADDITIVE_OPS = {"PLUS": BinOp.ADD, "MINUS": BinOp.SUB}

MULTIPLICATIVE_OPS = {"STAR": BinOp.MUL, "SLASH": BinOp.DIV, "PERCENT": BinOp.MOD}

UNARY_OPS = {"BANG": UnOp.NOT, "MINUS": UnOp.NEG}

TOKEN_NAMES = {
    "IDENT": "identifier",
    "INT": "integer",
    "STRING": "string",
    "EOF": "end of input",
}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        # Alternatives tried at the current position; reset on every advance
        self.expected: List[str] = []
        # (description, opening token) for every block still open
        self.open_blocks: List[Tuple[str, Token]] = []

    # ---------- token helpers ----------

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Token:
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.expected = []
        return tok

    def check(self, token_type: str, value=None, expected: Optional[str] = None) -> bool:
        tok = self.current
        if tok.type == token_type and (value is None or tok.value == value):
            return True
        if expected is None:
            if value is not None:
                expected = f"'{value}'"
            elif token_type in TOKEN_NAMES:
                expected = TOKEN_NAMES[token_type]
            else:
                expected = f"'{SYMBOL_TEXT.get(token_type, token_type)}'"
        if expected not in self.expected:
            self.expected.append(expected)
        return False

    def match(self, token_type: str, value=None, expected: Optional[str] = None) -> Optional[Token]:
        if self.check(token_type, value, expected):
            return self.advance()
        return None

    def eat(self, token_type: str, value=None, expected: Optional[str] = None) -> Token:
        tok = self.match(token_type, value, expected)
        if tok is None:
            self.fail()
        return tok

    def eat_ident(self, expected: str) -> str:
        return self.eat("IDENT", expected=expected).value

    def check_keyword(self, word: str) -> bool:
        return self.check("IDENT", word)

    def fail(self, message: Optional[str] = None, at: Optional[Token] = None):
        """Abort parsing, reporting everything known about the failure."""
        tok = at or self.current
        issues = []
        if message is not None:
            issues.append(SyntaxIssue(message, tok.line, tok.column))
        found = f"unexpected {tok.describe()}"
        if self.expected:
            found += f", expected {' or '.join(self.expected)}"
        if message is None or self.expected:
            issues.append(SyntaxIssue(found, self.current.line, self.current.column))
        if self.current.type == "EOF":
            for description, opener in reversed(self.open_blocks):
                issues.append(SyntaxIssue(
                    f"{description} is never closed",
                    opener.line,
                    opener.column,
                ))
        raise ParseError(issues)

    # ---------- top level ----------

    def parse_program(self) -> Program:
        self.eat("IDENT", "program")
        name = self.eat_ident("program name")

        accounts = []
        while self.check_keyword("account"):
            accounts.append(self.parse_account_def())

        instructions = []
        while self.check_keyword("instruction"):
            instructions.append(self.parse_instruction())

        self.eat("EOF")
        return Program(name=name, accounts=tuple(accounts), instructions=tuple(instructions))

    def parse_account_def(self) -> AccountDef:
        self.advance()  # 'account'
        name = self.eat_ident("account name")
        opener = self.eat("LBRACE")
        self.open_blocks.append((f"account block '{name}'", opener))

        fields = []
        while self.check("IDENT", expected="field name"):
            fields.append(self.parse_field())

        self.eat("RBRACE")
        self.open_blocks.pop()
        return AccountDef(name=name, fields=tuple(fields))

    def parse_field(self) -> Field:
        name = self.eat_ident("field name")
        self.eat("COLON")
        return Field(name=name, ty=self.parse_type())

    def parse_type(self) -> Type:
        tok = self.eat("IDENT", expected="type")
        if tok.value in GENERIC_TYPES:
            self.eat("LT")
            inner = self.parse_type()
            self.eat("GT")
            return Type(GENERIC_TYPES[tok.value], inner)
        if tok.value in SCALAR_TYPES:
            return Type(SCALAR_TYPES[tok.value])
        known = ", ".join(list(SCALAR_TYPES) + [f"{name}<T>" for name in GENERIC_TYPES])
        self.fail(f"unknown type '{tok.value}' (expected one of {known})", at=tok)

    def parse_instruction(self) -> Instruction:
        self.advance()  # 'instruction'
        name = self.eat_ident("instruction name")

        self.eat("LPAREN")
        params = []
        if not self.check("RPAREN"):
            params.append(self.parse_param())
            while self.match("COMMA"):
                params.append(self.parse_param())
        self.eat("RPAREN")

        opener = self.eat("LBRACE")
        self.open_blocks.append((f"instruction body '{name}'", opener))

        body = []
        while not self.check("RBRACE"):
            if self.current.type == "EOF":
                self.expected.append("statement")
                self.fail()
            body.append(self.parse_statement())

        self.advance()  # '}'
        self.open_blocks.pop()
        return Instruction(name=name, params=tuple(params), body=tuple(body))

    def parse_param(self) -> Param:
        name = self.eat_ident("parameter name")
        self.eat("COLON")
        type_name = self.eat_ident("parameter type")
        if type_name in PARAM_KEYWORDS:
            return Param(name=name, ty=ParamType(PARAM_KEYWORDS[type_name]))
        return Param(name=name, ty=ParamType.account_ref(type_name))

    # ---------- statements ----------

    def parse_statement(self) -> Statement:
        if self.check_keyword("init") and self.peek().type == "IDENT" and self.peek().value == "account":
            return self.parse_init_account()
        if self.check_keyword("require"):
            return self.parse_require()

        target = self.parse_expr()
        if self.current.type in ASSIGN_OPS:
            op = ASSIGN_OPS[self.advance().type]
            value = self.parse_expr()
            if op is not None:
                # x op= y  ->  x = x op y
                value = BinaryOp(op, target, value)
            return Assign(target=target, value=value)
        return ExprStmt(target)

    def parse_init_account(self) -> InitAccount:
        self.advance()  # 'init'
        self.advance()  # 'account'
        var_name = self.eat_ident("account variable")
        self.eat("COLON")
        account_name = self.eat_ident("account type")
        self.eat("IDENT", "payer")
        payer = self.eat_ident("payer name")
        signer = None
        if self.match("IDENT", "signer"):
            signer = self.eat_ident("signer name")
        return InitAccount(var_name=var_name, account_name=account_name, payer=payer, signer=signer)

    def parse_require(self) -> Require:
        self.advance()  # 'require'
        condition = self.parse_expr()
        message = None
        if self.match("COMMA"):
            message = self.eat("STRING").value
        return Require(condition=condition, message=message)

    # ---------- expressions (lowest to highest precedence) ----------

    def parse_expr(self) -> Expr:
        return self.parse_or()

    def parse_or(self) -> Expr:
        left = self.parse_and()
        while self.current.type == "OR":
            self.advance()
            left = BinaryOp(BinOp.OR, left, self.parse_and())
        return left

    def parse_and(self) -> Expr:
        left = self.parse_comparison()
        while self.current.type == "AND":
            self.advance()
            left = BinaryOp(BinOp.AND, left, self.parse_comparison())
        return left

    def parse_comparison(self) -> Expr:
        # a single comparison per level: a < b < c does not parse
        left = self.parse_additive()
        if self.current.type in COMPARISON_OPS:
            op = COMPARISON_OPS[self.advance().type]
            left = BinaryOp(op, left, self.parse_additive())
        return left

    def parse_additive(self) -> Expr:
        left = self.parse_multiplicative()
        while self.current.type in ADDITIVE_OPS:
            op = ADDITIVE_OPS[self.advance().type]
            left = BinaryOp(op, left, self.parse_multiplicative())
        return left

    def parse_multiplicative(self) -> Expr:
        left = self.parse_unary()
        while self.current.type in MULTIPLICATIVE_OPS:
            op = MULTIPLICATIVE_OPS[self.advance().type]
            left = BinaryOp(op, left, self.parse_unary())
        return left

    def parse_unary(self) -> Expr:
        if self.current.type in UNARY_OPS:
            op = UNARY_OPS[self.advance().type]
            return UnaryOp(op, self.parse_unary())
        return self.parse_field_access()

    def parse_field_access(self) -> Expr:
        expr = self.parse_atom()
        while self.match("DOT"):
            expr = FieldAccess(expr, self.eat_ident("field name"))
        return expr

    def parse_atom(self) -> Expr:
        tok = self.current
        if tok.type == "INT":
            self.advance()
            return Literal.uint(tok.value)
        if tok.type == "BOOL":
            self.advance()
            return Literal.boolean(tok.value)
        if tok.type == "STRING":
            self.advance()
            return Literal.string(tok.value)
        if tok.type == "IDENT":
            self.advance()
            return Ident(tok.value)
        if tok.type == "LPAREN":
            self.advance()
            self.open_blocks.append(("parenthesized expression", tok))
            expr = self.parse_expr()
            self.eat("RPAREN")
            self.open_blocks.pop()
            return expr
        self.expected.append("expression")
        self.fail()


def parse(source: str) -> Program:
    """
    Parse SOL-X source text into a Program.

    Raises:
        ParseError: if the source does not match the grammar
    """
    tokens = tokenize(source)
    logger.debug("Lexed %d tokens", len(tokens))
    program = Parser(tokens).parse_program()
    logger.debug(
        "Parsed program %s: %d accounts, %d instructions",
        program.name, len(program.accounts), len(program.instructions),
    )
    return program
