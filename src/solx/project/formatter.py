"""Source formatter for ``solx fmt``. Not implemented yet: files are left untouched."""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def format_project(project: Union[str, Path] = ".") -> bool:
    """
    Format the project's SOL-X sources.

    Returns:
        True if any file was changed (currently always False)
    """
    logger.info("Formatting is not implemented; %s left unchanged", project)
    return False
