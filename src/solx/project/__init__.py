"""Project commands: scaffolding, build and test drivers, formatter."""

from .build import BuildResult, build_project, find_source, run_tests
from .formatter import format_project
from .scaffold import create_project
from .toolchain import AnchorToolchain

__all__ = [
    "AnchorToolchain",
    "BuildResult",
    "build_project",
    "create_project",
    "find_source",
    "format_project",
    "run_tests",
]
