"""Unit tests for the SOL-X parser."""

import pytest

from solx.errors import ParseError
from solx.lang import (
    AccountDef,
    Assign,
    BinaryOp,
    BinOp,
    ExprStmt,
    Field,
    FieldAccess,
    Ident,
    InitAccount,
    Literal,
    ParamKind,
    ParamType,
    Require,
    Type,
    TypeKind,
    UnaryOp,
    UnOp,
    parse,
)


def body_of(statements, params=""):
    """Parse a one-instruction program and return its body."""
    program = parse(f"program P\ninstruction run({params}) {{\n{statements}\n}}\n")
    return program.instructions[0].body


def expr_of(text):
    (stmt,) = body_of(f"require {text}")
    return stmt.condition


def field(obj, name):
    return FieldAccess(Ident(obj), name)


class TestProgramStructure:
    """Top-level declarations."""

    def test_counter_program(self, counter_program):
        assert counter_program.name == "Counter"
        assert counter_program.accounts == (
            AccountDef("CounterState", (
                Field("authority", Type(TypeKind.PUBKEY)),
                Field("count", Type(TypeKind.U64)),
            )),
        )
        assert [ix.name for ix in counter_program.instructions] == ["initialize", "increment"]

    def test_empty_program(self):
        program = parse("program Empty")
        assert program.name == "Empty"
        assert program.accounts == ()
        assert program.instructions == ()

    def test_order_is_preserved(self):
        program = parse("""
            program P
            account B { }
            account A { z: u8 a: u8 }
            instruction second() { }
            instruction first() { }
        """)
        assert [a.name for a in program.accounts] == ["B", "A"]
        assert [f.name for f in program.accounts[1].fields] == ["z", "a"]
        assert [ix.name for ix in program.instructions] == ["second", "first"]

    def test_all_field_types(self):
        program = parse("""
            program P
            account Everything {
              a: Pubkey b: u8 c: u16 d: u32 e: u64
              f: i8 g: i16 h: i32 i: i64 j: bool k: String
              l: Vec<u8>
              m: Option<Vec<Pubkey>>
            }
        """)
        fields = {f.name: f.ty for f in program.accounts[0].fields}
        assert fields["a"] == Type(TypeKind.PUBKEY)
        assert fields["i"] == Type(TypeKind.I64)
        assert fields["k"] == Type(TypeKind.STRING)
        assert fields["l"] == Type.vec(Type(TypeKind.U8))
        assert fields["m"] == Type.option(Type.vec(Type(TypeKind.PUBKEY)))
        assert fields["m"].to_rust() == "Option<Vec<Pubkey>>"

    def test_params(self):
        program = parse("""
            program P
            account Vault { x: u8 }
            instruction go(payer: Signer, vault: Vault, key: Pubkey, amount: u64, note: String, flag: bool) { }
        """)
        kinds = [(p.name, p.ty) for p in program.instructions[0].params]
        assert kinds == [
            ("payer", ParamType(ParamKind.SIGNER)),
            ("vault", ParamType.account_ref("Vault")),
            ("key", ParamType(ParamKind.PUBKEY)),
            ("amount", ParamType(ParamKind.U64)),
            ("note", ParamType(ParamKind.STRING)),
            ("flag", ParamType(ParamKind.BOOL)),
        ]
        ix = program.instructions[0]
        assert [p.name for p in ix.context_params()] == ["payer", "vault"]
        assert [p.name for p in ix.argument_params()] == ["key", "amount", "note", "flag"]


class TestStatements:
    """Statement forms inside instruction bodies."""

    def test_init_account(self):
        (stmt,) = body_of("init account state: CounterState payer authority")
        assert stmt == InitAccount("state", "CounterState", "authority", None)

    def test_init_account_with_signer(self):
        (stmt,) = body_of("init account state: CounterState payer authority signer admin")
        assert stmt.signer == "admin"

    def test_require_with_message(self):
        (stmt,) = body_of('require amount > 0, "ZeroAmount"')
        assert stmt == Require(
            BinaryOp(BinOp.GT, Ident("amount"), Literal.uint(0)),
            "ZeroAmount",
        )

    def test_require_without_message(self):
        (stmt,) = body_of("require ok")
        assert stmt == Require(Ident("ok"), None)

    def test_assignment(self):
        (stmt,) = body_of("state.authority = authority.key")
        assert stmt == Assign(field("state", "authority"), field("authority", "key"))

    def test_compound_assignment_desugars(self):
        (stmt,) = body_of("state.count += 1")
        target = field("state", "count")
        assert stmt == Assign(target, BinaryOp(BinOp.ADD, target, Literal.uint(1)))

    @pytest.mark.parametrize("op,binop", [
        ("-=", BinOp.SUB),
        ("*=", BinOp.MUL),
        ("/=", BinOp.DIV),
        ("%=", BinOp.MOD),
    ])
    def test_other_compound_operators(self, op, binop):
        (stmt,) = body_of(f"x {op} y")
        assert stmt == Assign(Ident("x"), BinaryOp(binop, Ident("x"), Ident("y")))

    def test_expression_statement(self):
        (stmt,) = body_of("state.count")
        assert stmt == ExprStmt(field("state", "count"))

    def test_statements_need_no_separators(self):
        body = body_of("a = 1 b = 2 require a == b")
        assert [type(s) for s in body] == [Assign, Assign, Require]

    def test_init_prefix_identifier_is_an_expression(self):
        (stmt,) = body_of("initial = 3")
        assert stmt == Assign(Ident("initial"), Literal.uint(3))


class TestExpressions:
    """Precedence and associativity."""

    def test_precedence_ladder(self):
        expr = expr_of("a || b && c == d + e * -f.g")
        assert expr == BinaryOp(BinOp.OR, Ident("a"), BinaryOp(
            BinOp.AND, Ident("b"), BinaryOp(
                BinOp.EQ, Ident("c"), BinaryOp(
                    BinOp.ADD, Ident("d"), BinaryOp(
                        BinOp.MUL, Ident("e"), UnaryOp(UnOp.NEG, field("f", "g")),
                    ),
                ),
            ),
        ))

    def test_left_associative(self):
        assert expr_of("a - b - c") == BinaryOp(
            BinOp.SUB, BinaryOp(BinOp.SUB, Ident("a"), Ident("b")), Ident("c"),
        )
        assert expr_of("a && b && c") == BinaryOp(
            BinOp.AND, BinaryOp(BinOp.AND, Ident("a"), Ident("b")), Ident("c"),
        )

    def test_parentheses_override_precedence(self):
        assert expr_of("(a + b) * c") == BinaryOp(
            BinOp.MUL, BinaryOp(BinOp.ADD, Ident("a"), Ident("b")), Ident("c"),
        )

    def test_field_access_chains(self):
        assert expr_of("a.b.c") == FieldAccess(FieldAccess(Ident("a"), "b"), "c")

    def test_negative_literal_is_unary(self):
        assert expr_of("-5") == UnaryOp(UnOp.NEG, Literal.uint(5))

    def test_nested_unary(self):
        assert expr_of("!!ok") == UnaryOp(UnOp.NOT, UnaryOp(UnOp.NOT, Ident("ok")))

    def test_literals(self):
        assert expr_of("true") == Literal.boolean(True)
        assert expr_of('"text"') == Literal.string("text")
        assert expr_of("18446744073709551615") == Literal.uint(2 ** 64 - 1)

    def test_comparisons_do_not_chain(self):
        with pytest.raises(ParseError):
            body_of("require a < b < c")


class TestParseErrors:
    """Failures produce one aggregated error and no program."""

    def test_missing_closing_brace_on_account(self):
        with pytest.raises(ParseError) as exc_info:
            parse("program P\naccount A {\n  x: u64\n")
        err = exc_info.value
        assert err.issues
        messages = [issue.message for issue in err.issues]
        assert any("expected field name or '}'" in m for m in messages)
        assert any("account block 'A' is never closed" in m for m in messages)

    def test_missing_closing_brace_before_next_declaration(self):
        with pytest.raises(ParseError) as exc_info:
            parse("program P\naccount A {\n  x: u64\ninstruction go() { }\n")
        assert str(exc_info.value)

    def test_unterminated_instruction_body(self):
        with pytest.raises(ParseError) as exc_info:
            parse("program P\ninstruction go() {\n  a = 1\n")
        message = str(exc_info.value)
        assert "'}' or statement" in message
        assert "instruction body 'go' is never closed" in message

    def test_unknown_type(self):
        with pytest.raises(ParseError) as exc_info:
            parse("program P\naccount A { x: u128 }")
        issue = exc_info.value.issues[0]
        assert "unknown type 'u128'" in issue.message
        assert (issue.line, issue.column) == (2, 16)

    def test_missing_program_header(self):
        with pytest.raises(ParseError) as exc_info:
            parse("account A { }")
        assert "expected 'program'" in str(exc_info.value)

    def test_lists_every_alternative(self):
        with pytest.raises(ParseError) as exc_info:
            parse("program P\nfoo")
        message = str(exc_info.value)
        assert "'account'" in message
        assert "'instruction'" in message
        assert "end of input" in message

    def test_bad_statement_start(self):
        with pytest.raises(ParseError) as exc_info:
            body_of(": x")
        message = str(exc_info.value)
        assert "unexpected ':'" in message
        assert "expression" in message

    def test_require_message_must_be_string(self):
        with pytest.raises(ParseError) as exc_info:
            body_of("require ok, Unauthorized")
        assert "expected string" in str(exc_info.value)

    def test_unicode_digit_is_a_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            parse("program P\ninstruction go() {\n  a = 1²\n}\n")
        assert "unexpected character '²'" in str(exc_info.value)

    def test_empty_source(self):
        with pytest.raises(ParseError):
            parse("")
