"""Tests for account space strategies."""

import pytest

from solx.codegen.space import (
    DISCRIMINATOR_SIZE,
    BoundedSpace,
    FixedWidthSpace,
    get_strategy,
)
from solx.errors import ConfigError
from solx.lang import AccountDef, Field, Type, TypeKind


def scalar(kind):
    return Type(kind)


def account(*types):
    return AccountDef("A", tuple(Field(f"f{i}", ty) for i, ty in enumerate(types)))


class TestFixedWidthSpace:

    @pytest.fixture
    def space(self):
        return FixedWidthSpace()

    @pytest.mark.parametrize("kind,size", [
        (TypeKind.PUBKEY, 32),
        (TypeKind.U8, 1),
        (TypeKind.I8, 1),
        (TypeKind.BOOL, 1),
        (TypeKind.U16, 2),
        (TypeKind.I16, 2),
        (TypeKind.U32, 4),
        (TypeKind.I32, 4),
        (TypeKind.U64, 8),
        (TypeKind.I64, 8),
        (TypeKind.STRING, 8),
    ])
    def test_scalar_sizes(self, space, kind, size):
        assert space.type_size(scalar(kind)) == size

    def test_wrappers_add_one_element(self, space):
        assert space.type_size(Type.vec(scalar(TypeKind.U64))) == 16
        assert space.type_size(Type.option(scalar(TypeKind.PUBKEY))) == 33
        assert space.type_size(Type.vec(Type.option(scalar(TypeKind.U8)))) == 10

    def test_counter_state_is_48(self, space, counter_program):
        assert space.account_size(counter_program.accounts[0]) == 8 + 32 + 8

    def test_empty_account_is_discriminator_only(self, space):
        assert space.account_size(account()) == DISCRIMINATOR_SIZE

    def test_increasing_in_field_count(self, space):
        types = [scalar(TypeKind.U8), scalar(TypeKind.PUBKEY), Type.vec(scalar(TypeKind.I16))]
        sizes = [space.account_size(account(*types[:n])) for n in range(len(types) + 1)]
        assert sizes == sorted(sizes)
        assert len(set(sizes)) == len(sizes)

    def test_increasing_in_width(self, space):
        widths = [TypeKind.U8, TypeKind.U16, TypeKind.U32, TypeKind.U64, TypeKind.PUBKEY]
        sizes = [space.account_size(account(scalar(kind))) for kind in widths]
        assert sizes == sorted(set(sizes))

    def test_order_invariant(self, space):
        types = [scalar(TypeKind.BOOL), Type.option(scalar(TypeKind.I32)), scalar(TypeKind.STRING)]
        assert space.account_size(account(*types)) == space.account_size(account(*reversed(types)))


class TestBoundedSpace:

    def test_uses_explicit_bounds(self):
        space = BoundedSpace(max_string_len=50, max_vec_len=10)
        assert space.type_size(scalar(TypeKind.STRING)) == 54
        assert space.type_size(Type.vec(scalar(TypeKind.U64))) == 84
        assert space.type_size(Type.option(scalar(TypeKind.U16))) == 3

    def test_scalars_match_fixed(self):
        assert BoundedSpace().type_size(scalar(TypeKind.PUBKEY)) == 32

    def test_negative_bounds_rejected(self):
        with pytest.raises(ConfigError):
            BoundedSpace(max_string_len=-1)


class TestRegistry:

    def test_lookup(self):
        assert isinstance(get_strategy("fixed"), FixedWidthSpace)
        bounded = get_strategy("Bounded", max_string_len=10, max_vec_len=2)
        assert isinstance(bounded, BoundedSpace)
        assert bounded.max_string_len == 10
        assert bounded.max_vec_len == 2

    def test_unknown_strategy(self):
        with pytest.raises(ConfigError):
            get_strategy("exact")
