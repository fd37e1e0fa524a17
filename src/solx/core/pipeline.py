"""
Compilation pipeline: source text -> Anchor source text.

parse -> validate -> generate, as one pure function. Nothing here touches
the filesystem; a failing stage raises and no output is produced.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..analysis.validator import CheckedProgram, validate
from ..codegen.anchor import generate
from ..config import SolxConfig
from ..lang.models import Program
from ..lang.parser import parse

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Everything a successful compilation produced."""
    program: Program
    checked: CheckedProgram
    code: str
    warnings: List[str] = field(default_factory=list)


def compile_program(source: str, config: Optional[SolxConfig] = None) -> CompileResult:
    """
    Run the full pipeline on one source text.

    Raises:
        ParseError: if the source does not parse
        ValidationError: if the program references unknown accounts
    """
    config = config or SolxConfig()

    logger.info("Parsing SOL-X source")
    program = parse(source)

    logger.info("Validating %s", program.name)
    checked = validate(program, strict=config.strict)

    logger.info("Generating Anchor code")
    code = generate(checked, config.build_space_strategy())

    return CompileResult(program=program, checked=checked, code=code, warnings=list(checked.warnings))


def compile_source(source: str, config: Optional[SolxConfig] = None) -> str:
    """Compile SOL-X source to Anchor source text."""
    return compile_program(source, config).code
