"""Tests for the referential-integrity pass."""

import logging

import pytest

from solx.analysis import CheckedProgram, SymbolKind, validate
from solx.errors import ValidationError
from solx.lang import parse


class TestAccountReferences:

    def test_valid_program_passes(self, counter_program):
        checked = validate(counter_program)
        assert isinstance(checked, CheckedProgram)
        assert checked.program is counter_program
        assert checked.warnings == []

    def test_unknown_account_is_named(self):
        program = parse("""
            program P
            account Known { x: u8 }
            instruction go(a: Known, b: Missing) { }
        """)
        with pytest.raises(ValidationError) as exc_info:
            validate(program)
        err = exc_info.value
        assert str(err) == "Unknown account type: Missing"
        assert err.reference == "Missing"
        assert err.instruction == "go"
        assert err.param == "b"

    def test_first_mismatch_aborts(self):
        program = parse("""
            program P
            instruction one(a: First) { }
            instruction two(b: Second) { }
        """)
        with pytest.raises(ValidationError) as exc_info:
            validate(program)
        assert exc_info.value.reference == "First"

    def test_nothing_else_is_checked(self):
        # unknown fields, payers and expression types are accepted
        program = parse("""
            program P
            account A { x: u8 }
            instruction go(a: A) {
              init account a: A payer nobody
              a.nope = "string" + true
            }
        """)
        validate(program)


class TestSymbolTables:

    def test_kinds(self, vault_program):
        checked = validate(vault_program)
        scope = checked.symbols["deposit"]
        assert scope.lookup("owner") is SymbolKind.SIGNER
        assert scope.lookup("vault") is SymbolKind.ACCOUNT
        assert scope.lookup("amount") is SymbolKind.SCALAR
        assert scope.lookup("memo") is SymbolKind.SCALAR
        assert scope.lookup("unknown") is None
        assert scope.is_context_field("receipt")
        assert not scope.is_context_field("amount")

    def test_one_table_per_instruction(self, vault_program):
        checked = validate(vault_program)
        assert set(checked.symbols) == {"deposit", "lock"}
        assert checked.symbols["lock"].lookup("flag") is SymbolKind.SCALAR


DUPLICATES = """
program P
account A { x: u8 }
account A { y: u8 }
instruction go(a: A) {
  init account b: A payer a
}
instruction go() { }
"""


class TestStrictMode:

    def test_lenient_mode_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="solx"):
            checked = validate(parse(DUPLICATES))
        assert "Duplicate account name: A" in checked.warnings
        assert "Duplicate instruction name: go" in checked.warnings
        assert any("init account 'b'" in w for w in checked.warnings)
        assert "Duplicate account name: A" in caplog.text

    def test_duplicate_instructions_keep_their_own_scope(self):
        checked = validate(parse(DUPLICATES))
        first, second = checked.program.instructions
        assert checked.symbols["go"].lookup("a") is SymbolKind.ACCOUNT
        assert checked.scope(first).lookup("a") is SymbolKind.ACCOUNT
        assert checked.scope(second).lookup("a") is None

    def test_strict_mode_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate(parse(DUPLICATES), strict=True)
        assert "Duplicate account name: A" in str(exc_info.value)

    def test_strict_mode_accepts_clean_program(self, counter_program):
        validate(counter_program, strict=True)
