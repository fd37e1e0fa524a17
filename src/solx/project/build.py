"""
Build and test drivers for SOL-X projects.

``build_project`` compiles the project's ``program.solx`` into
``src/lib.rs`` and, inside an Anchor workspace, runs ``anchor build``.
``run_tests`` runs ``anchor test``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..config import SolxConfig
from ..core.pipeline import compile_program
from ..errors import ProjectError
from .toolchain import AnchorToolchain

logger = logging.getLogger(__name__)

LIB_HEADER = 'use anchor_lang::prelude::*;\n\ndeclare_id!("{program_id}");\n\n'


@dataclass
class BuildResult:
    """Outcome of ``solx build``."""
    source_path: Path
    output_path: Path
    program_name: str
    # None when no Anchor.toml was found and anchor build was skipped
    anchor_status: Optional[int] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def anchor_ran(self) -> bool:
        return self.anchor_status is not None

    @property
    def exit_code(self) -> int:
        return self.anchor_status or 0


def find_source(project: Union[str, Path], config: Optional[SolxConfig] = None) -> Path:
    """
    Locate the project's DSL file: ``src/<source_name>`` first, then the
    project root.

    Raises:
        ProjectError: If neither exists
    """
    config = config or SolxConfig()
    project = Path(project)
    candidates = [project / "src" / config.source_name, project / config.source_name]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    raise ProjectError(
        f"No {config.source_name} found in {project / 'src'} or {project}"
    )


def build_project(
    project: Union[str, Path] = ".",
    config: Optional[SolxConfig] = None,
    toolchain: Optional[AnchorToolchain] = None,
) -> BuildResult:
    """
    Compile a project and, if it is an Anchor workspace, build it.

    The generated file is only written after the whole pipeline has
    succeeded.

    Raises:
        ProjectError: If no source file exists
        ParseError, ValidationError: If the source does not compile
        ToolchainError: If anchor is needed but cannot be run
    """
    config = config or SolxConfig()
    project = Path(project)

    source_path = find_source(project, config)
    try:
        source = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectError(f"Failed to read {source_path}: {e}") from e

    result = compile_program(source, config)

    output_path = project / config.output_path
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            LIB_HEADER.format(program_id=config.program_id) + result.code,
            encoding="utf-8",
        )
    except OSError as e:
        raise ProjectError(f"Failed to write {output_path}: {e}") from e
    logger.info("Generated Anchor code: %s", output_path)

    build = BuildResult(
        source_path=source_path,
        output_path=output_path,
        program_name=result.program.name,
        warnings=result.warnings,
    )

    if (project / "Anchor.toml").exists():
        toolchain = toolchain or AnchorToolchain(config.anchor_command)
        build.anchor_status = toolchain.build(project)
    else:
        logger.info("Skipping anchor build (no Anchor.toml in %s)", project)

    return build


def run_tests(
    project: Union[str, Path] = ".",
    config: Optional[SolxConfig] = None,
    toolchain: Optional[AnchorToolchain] = None,
) -> int:
    """Run ``anchor test`` in the project and return its exit status."""
    config = config or SolxConfig()
    toolchain = toolchain or AnchorToolchain(config.anchor_command)
    return toolchain.test(Path(project))
