"""Project scaffolding for ``solx new``."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from ..config import SolxConfig
from ..errors import ProjectError

logger = logging.getLogger(__name__)

ANCHOR_TOML = """[features]
resolution = true
skip-lint = false

[programs.localnet]
{name} = "{program_id}"

[registry]
url = "https://api.apr.dev"

[provider]
cluster = "Localnet"
wallet = "~/.config/solana/id.json"

[scripts]
test = "yarn run ts-mocha -p ./tsconfig.json -t 1000000 tests/**/*.ts"
"""

CARGO_TOML = """[package]
name = "{name}"
version = "0.1.0"
description = "Generated Anchor program from SOL-X"
edition = "2021"

[lib]
crate-type = ["cdylib", "lib"]
name = "{name}"

[features]
no-entrypoint = []
no-idl = []
no-log-ix-name = []
cpi = ["no-entrypoint"]
default = []

[dependencies]
anchor-lang = "0.30.0"

[profile.release]
overflow-checks = true
"""

LIB_RS = """use anchor_lang::prelude::*;

declare_id!("{program_id}");
"""

PROGRAM_SOLX = """program {name}

account CounterState {{
  authority: Pubkey
  count: u64
}}

instruction initialize(authority: Signer, state: CounterState) {{
  init account state: CounterState payer authority
  state.authority = authority.key
  state.count = 0
}}

instruction increment(authority: Signer, state: CounterState) {{
  require state.authority == authority.key
  state.count += 1
}}
"""

PROJECT_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def create_project(name: str, parent: Union[str, Path] = ".", config: Optional[SolxConfig] = None) -> List[Path]:
    """
    Create a new SOL-X project directory.

    Args:
        name: Project name; also the crate and program name
        parent: Directory to create the project in
        config: Supplies the program id written to Anchor.toml and lib.rs

    Returns:
        Paths of the files written

    Raises:
        ProjectError: If the name is invalid or the directory already exists
    """
    config = config or SolxConfig()

    if not PROJECT_NAME_RE.match(name):
        raise ProjectError(f"Invalid project name {name!r}: use letters, digits and underscores")

    root = Path(parent) / name
    if root.exists():
        raise ProjectError(f"Directory {root} already exists")

    src = root / "src"
    src.mkdir(parents=True)

    files = {
        root / "Anchor.toml": ANCHOR_TOML.format(name=name, program_id=config.program_id),
        root / "Cargo.toml": CARGO_TOML.format(name=name),
        src / "lib.rs": LIB_RS.format(program_id=config.program_id),
        src / config.source_name: PROGRAM_SOLX.format(name=name),
    }

    for path, content in files.items():
        path.write_text(content)
        logger.debug("Wrote %s", path)

    logger.info("Created project %s at %s", name, root)
    return list(files)
