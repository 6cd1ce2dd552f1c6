"""
Discovery of existing generated artifacts.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# Any of the generator markers
MARKER_PATTERN = re.compile(r"# <<OPENAPI-TO-MODELS(:[^>]*)?>>")

# Directories never worth scanning
SKIPPED_DIRS = {".git", ".hg", ".venv", "venv", "__pycache__", "node_modules", ".tox", ".mypy_cache", ".pytest_cache"}


def read_text(path: Path) -> str:
    """Read a file without translating its line endings."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


class ArtifactScanner:
    """Finds modules carrying the generator marker."""

    def scan(self, output_dir: str | Path, project_dir: str | Path | None = None) -> dict[str, Path]:
        """
        Map module names (file stems) to existing artifact paths.

        The output directory is scanned first, so its artifacts win over
        same-named ones found elsewhere in the project.

        Args:
            output_dir: Directory receiving generated modules
            project_dir: Project root, scanned recursively

        Returns:
            Module name -> path
        """
        found: dict[str, Path] = {}
        self._scan_dir(Path(output_dir), found, recursive=False)
        if project_dir is not None:
            self._scan_dir(Path(project_dir), found, recursive=True)
        logger.debug("Found %d existing artifact(s)", len(found))
        return found

    def _scan_dir(self, directory: Path, found: dict[str, Path], recursive: bool) -> None:
        if not directory.is_dir():
            return
        candidates = directory.rglob("*.py") if recursive else directory.glob("*.py")
        for path in sorted(candidates):
            if path.stem in found or any(part in SKIPPED_DIRS for part in path.relative_to(directory).parts):
                continue
            try:
                content = read_text(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Skipping unreadable file %s: %s", path, e)
                continue
            if MARKER_PATTERN.search(content):
                found[path.stem] = path
