"""
Anchor toolchain wrapper.

Finds the ``anchor`` CLI and runs its subcommands (``build``, ``test``)
inside a project directory. Output streams straight to the terminal; the
caller gets the exit status.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from ..errors import ToolchainError

logger = logging.getLogger(__name__)


class AnchorToolchain:
    """
    Runs the Anchor CLI as a subprocess.

    The binary is looked up lazily so that commands which never shell out
    work without Anchor installed.
    """

    def __init__(self, command: str = "anchor"):
        """
        Args:
            command: Binary name or path of the Anchor CLI
        """
        self.command = command
        self._binary: Optional[str] = None

    def find_binary(self) -> str:
        """Find the anchor binary in PATH or common locations."""
        if self._binary:
            return self._binary

        # Explicit path or PATH lookup
        binary = shutil.which(self.command)
        if binary:
            self._binary = binary
            return binary

        # Check common install locations (cargo install / avm)
        common_paths = [
            Path.home() / ".cargo" / "bin" / self.command,
            Path.home() / ".avm" / "bin" / self.command,
            Path("/usr/local/bin") / self.command,
        ]

        for path in common_paths:
            if path.exists():
                self._binary = str(path)
                return self._binary

        raise ToolchainError(
            f"Anchor binary '{self.command}' not found. "
            "Install with: cargo install --git https://github.com/coral-xyz/anchor avm && avm install latest"
        )

    def build_command(self, subcommand: str, extra_args: Optional[List[str]] = None) -> List[str]:
        cmd = [self.find_binary(), subcommand]
        cmd.extend(extra_args or [])
        return cmd

    def run(self, subcommand: str, cwd: Union[str, Path], extra_args: Optional[List[str]] = None) -> int:
        """
        Run ``anchor <subcommand>`` in ``cwd``.

        Returns:
            The process exit status

        Raises:
            ToolchainError: If the binary is missing or cannot be started
        """
        cmd = self.build_command(subcommand, extra_args)
        logger.info("Running %s in %s", " ".join(cmd), cwd)
        try:
            completed = subprocess.run(cmd, cwd=str(cwd))
        except OSError as e:
            raise ToolchainError(f"Failed to run anchor {subcommand}: {e}. Make sure Anchor is installed.") from e
        logger.debug("anchor %s exited with %d", subcommand, completed.returncode)
        return completed.returncode

    def build(self, cwd: Union[str, Path]) -> int:
        return self.run("build", cwd)

    def test(self, cwd: Union[str, Path]) -> int:
        return self.run("test", cwd)
