"""
Marker-based merge of generated code into existing modules.

Only the text strictly between the region markers belongs to the
generator. Every byte outside the region (user imports, helper functions,
extra methods after the region) is copied through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .base import FILE_MARKER, REGION_START_MARKER, REGION_STOP_MARKER

logger = logging.getLogger(__name__)


class MarkerMerger:
    """Builds the content of an artifact from its generated region."""

    def write(
        self,
        generated_region: str,
        existing_content: str | None = None,
        preamble: Sequence[str] = (),
        label: str | None = None,
    ) -> str:
        """
        Produce the new content of an artifact.

        Args:
            generated_region: Text of the generated region
            existing_content: Current content of the file, if it exists
            preamble: Lines written between the file marker and the region of a new file
            label: Name of the file, for log messages

        Returns:
            The full file content
        """
        block = self._region_block(generated_region)
        if existing_content is None:
            return self.new_file(block, preamble)

        bounds = self._region_bounds(existing_content)
        if bounds is None:
            logger.warning(
                "%s has missing, duplicated or misordered generation markers; rewriting it as a new file",
                label or "Artifact",
            )
            return self.new_file(block, preamble)

        start, stop = bounds
        return existing_content[: start + len(REGION_START_MARKER)] + block + existing_content[stop:]

    def new_file(self, block: str, preamble: Sequence[str] = ()) -> str:
        """Layout of a fresh artifact around an already wrapped region block."""
        parts = [FILE_MARKER, ""]
        if preamble:
            parts.extend(preamble)
            parts.append("")
        head = "\n".join(parts) + "\n"
        return head + REGION_START_MARKER + block + REGION_STOP_MARKER + "\n"

    @staticmethod
    def _region_block(generated_region: str) -> str:
        # One blank line on each side, however the backend ended its text
        return "\n\n" + generated_region.strip("\n") + "\n\n"

    @staticmethod
    def _region_bounds(content: str) -> tuple[int, int] | None:
        """Offsets of the start and stop markers, if each occurs exactly once and in order."""
        if content.count(REGION_START_MARKER) != 1 or content.count(REGION_STOP_MARKER) != 1:
            return None
        start = content.index(REGION_START_MARKER)
        stop = content.index(REGION_STOP_MARKER)
        if start >= stop:
            return None
        return start, stop

    @staticmethod
    def has_markers(content: str) -> bool:
        return FILE_MARKER in content
