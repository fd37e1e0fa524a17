"""
Configuration for the SOL-X compiler and project tooling.

Values come from ``SolxConfig`` defaults, overridden by ``SOLX_*``
environment variables (optionally loaded from a ``.env`` file).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from solders.pubkey import Pubkey

from .errors import ConfigError
from .codegen.space import STRATEGIES, SpaceStrategy, get_strategy

# Placeholder program id written by `solx new` and `solx build`
DEFAULT_PROGRAM_ID = "11111111111111111111111111111111"

TRUE_VALUES = {"1", "true", "yes", "on"}


def load_env(start: Optional[Path] = None):
    """Load .env file from the working directory or its parents."""
    current = start or Path.cwd()
    for _ in range(5):  # Check up to 5 parent dirs
        env_file = current / ".env"
        if env_file.exists():
            with open(env_file) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip())
            break
        current = current.parent


def validate_program_id(program_id: str) -> str:
    """Check that ``program_id`` is a base58 Solana public key."""
    try:
        Pubkey.from_string(program_id)
    except Exception as e:
        raise ConfigError(f"Invalid program id {program_id!r}: {e}") from e
    return program_id


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass
class SolxConfig:
    """Settings shared by the compiler pipeline and the project commands."""
    program_id: str = DEFAULT_PROGRAM_ID
    # External toolchain
    anchor_command: str = "anchor"
    # Project layout
    source_name: str = "program.solx"
    output_path: str = "src/lib.rs"
    # Validation
    strict: bool = False
    # Account space computation
    space_strategy: str = "fixed"
    max_string_len: int = 32
    max_vec_len: int = 8

    def __post_init__(self):
        validate_program_id(self.program_id)
        if self.space_strategy.lower() not in STRATEGIES:
            raise ConfigError(
                f"Unknown space strategy: {self.space_strategy} "
                f"(choose from {', '.join(STRATEGIES)})"
            )

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> "SolxConfig":
        """Build a config from ``SOLX_*`` environment variables."""
        if load_dotenv:
            load_env()
        defaults = cls()
        return cls(
            program_id=os.environ.get("SOLX_PROGRAM_ID") or defaults.program_id,
            anchor_command=os.environ.get("SOLX_ANCHOR_BIN") or defaults.anchor_command,
            strict=os.environ.get("SOLX_STRICT", "").strip().lower() in TRUE_VALUES,
            space_strategy=os.environ.get("SOLX_SPACE") or defaults.space_strategy,
            max_string_len=_int_env("SOLX_MAX_STRING_LEN", defaults.max_string_len),
            max_vec_len=_int_env("SOLX_MAX_VEC_LEN", defaults.max_vec_len),
        )

    def build_space_strategy(self) -> SpaceStrategy:
        return get_strategy(self.space_strategy, self.max_string_len, self.max_vec_len)
