"""
Account space strategies.

Anchor needs ``space = N`` on every ``init`` account. How N is computed is
pluggable: the default keeps fixed placeholder widths for variable-length
types, ``BoundedSpace`` uses explicit Borsh bounds.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Type as PyType

from ..errors import ConfigError
from ..lang.models import AccountDef, Type, TypeKind

# Leading 8-byte tag Anchor prepends to every account
DISCRIMINATOR_SIZE = 8

SCALAR_SIZES = {
    TypeKind.PUBKEY: 32,
    TypeKind.U8: 1,
    TypeKind.I8: 1,
    TypeKind.BOOL: 1,
    TypeKind.U16: 2,
    TypeKind.I16: 2,
    TypeKind.U32: 4,
    TypeKind.I32: 4,
    TypeKind.U64: 8,
    TypeKind.I64: 8,
}


class SpaceStrategy(ABC):
    """Base class for all space strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def type_size(self, ty: Type) -> int:
        pass

    def account_size(self, account: AccountDef) -> int:
        """Discriminator plus the size of every field."""
        return DISCRIMINATOR_SIZE + sum(self.type_size(f.ty) for f in account.fields)


class FixedWidthSpace(SpaceStrategy):
    """
    Approximate sizes: String is 8, Vec<T> is an 8 byte header plus one T,
    Option<T> is a 1 byte tag plus T. Not a bound on string length or
    element count.
    """

    name = "fixed"

    STRING_SIZE = 8
    VEC_HEADER = 8
    OPTION_TAG = 1

    def type_size(self, ty: Type) -> int:
        if ty.kind in SCALAR_SIZES:
            return SCALAR_SIZES[ty.kind]
        if ty.kind is TypeKind.STRING:
            return self.STRING_SIZE
        if ty.kind is TypeKind.VEC:
            return self.VEC_HEADER + self.type_size(ty.inner)
        if ty.kind is TypeKind.OPTION:
            return self.OPTION_TAG + self.type_size(ty.inner)
        raise ValueError(f"Unsupported type: {ty}")


class BoundedSpace(SpaceStrategy):
    """Borsh layout with a 4 byte length prefix and explicit maximum lengths."""

    name = "bounded"

    LENGTH_PREFIX = 4
    OPTION_TAG = 1

    def __init__(self, max_string_len: int = 32, max_vec_len: int = 8):
        if max_string_len < 0 or max_vec_len < 0:
            raise ConfigError("Maximum lengths must be non-negative")
        self.max_string_len = max_string_len
        self.max_vec_len = max_vec_len

    def type_size(self, ty: Type) -> int:
        if ty.kind in SCALAR_SIZES:
            return SCALAR_SIZES[ty.kind]
        if ty.kind is TypeKind.STRING:
            return self.LENGTH_PREFIX + self.max_string_len
        if ty.kind is TypeKind.VEC:
            return self.LENGTH_PREFIX + self.max_vec_len * self.type_size(ty.inner)
        if ty.kind is TypeKind.OPTION:
            return self.OPTION_TAG + self.type_size(ty.inner)
        raise ValueError(f"Unsupported type: {ty}")


STRATEGIES: Dict[str, PyType[SpaceStrategy]] = {
    FixedWidthSpace.name: FixedWidthSpace,
    BoundedSpace.name: BoundedSpace,
}


def get_strategy(name: str, max_string_len: Optional[int] = None, max_vec_len: Optional[int] = None) -> SpaceStrategy:
    """Build a strategy by name (``fixed`` or ``bounded``)."""
    cls = STRATEGIES.get(name.lower())
    if cls is None:
        raise ConfigError(f"Unknown space strategy: {name} (choose from {', '.join(STRATEGIES)})")
    if cls is BoundedSpace:
        kwargs = {}
        if max_string_len is not None:
            kwargs["max_string_len"] = max_string_len
        if max_vec_len is not None:
            kwargs["max_vec_len"] = max_vec_len
        return BoundedSpace(**kwargs)
    return cls()
