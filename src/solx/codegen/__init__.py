"""Anchor code generation."""

from .anchor import AnchorGenerator, generate
from .space import BoundedSpace, FixedWidthSpace, SpaceStrategy, get_strategy

__all__ = [
    "AnchorGenerator",
    "generate",
    "SpaceStrategy",
    "FixedWidthSpace",
    "BoundedSpace",
    "get_strategy",
]
