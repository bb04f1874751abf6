"""
Output path resolution: where generated resources go when no output
directory is given, per host platform.
"""

import logging
import os
import sys
from typing import Mapping, Optional

from .exceptions import DefinitionPathError

logger = logging.getLogger(__name__)

# platform -> environment variable holding the base directory + subdirectory
DEFAULT_OUTPUT = {
    "windows": {"environment_variable": "USERPROFILE", "output_directory": "Desktop/dto"},
    "darwin": {"environment_variable": "HOME", "output_directory": "Desktop/dto"},
    "linux": {"environment_variable": "HOME", "output_directory": "dto"},
}


def get_platform(platform_string: Optional[str] = None) -> Optional[str]:
    """Map ``sys.platform`` to ``windows``/``darwin``/``linux``; None if unsupported."""
    p = platform_string if platform_string is not None else sys.platform
    if p.startswith("win") or p == "cygwin":
        return "windows"
    if p == "darwin":
        return "darwin"
    if p.startswith("linux"):
        return "linux"
    return None


def default_output_path(
    default_output: Optional[Mapping[str, Mapping[str, str]]] = None,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Return the default output directory for the running platform.

    Returns ``""`` (and logs an error) when the platform is not supported or
    has no configured entry.
    """
    default_output = default_output or DEFAULT_OUTPUT
    environ = os.environ if environ is None else environ
    platform = platform or get_platform()
    logger.info(f"Platform: {platform}")

    entry = default_output.get(platform) if platform else None
    if not entry:
        logger.error(f"Unsupported platform for a default output path: {platform}")
        return ""

    base = environ.get(entry["environment_variable"], "")
    return os.path.join(base, *entry["output_directory"].split("/"))


class DefinitionPath:
    """The definition workbook to read and the directory to write into."""

    def __init__(self, file_path: str, output_path: str = "",
                 default_output: Optional[Mapping] = None):
        if file_path is None or not str(file_path).strip():
            logger.error("A definition file path is required")
            raise DefinitionPathError("File path is required.")
        self.file_path = file_path
        if output_path:
            self._output_path = output_path
        else:
            self._output_path = default_output_path(default_output)

    @property
    def output_path(self) -> str:
        logger.info(f"Output path: {self._output_path}")
        return self._output_path

    def package_directory(self, package_name: str) -> str:
        """Directory for a dotted *package_name* below the output path."""
        parts = [p for p in (package_name or "").split(".") if p]
        return os.path.join(self._output_path, *parts)

    def __repr__(self):
        return f"DefinitionPath(file_path={self.file_path!r}, output_path={self._output_path!r})"
