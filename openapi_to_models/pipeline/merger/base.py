"""
Markers and errors shared by the merger components.
"""

from __future__ import annotations

# Identifies a module as managed by the generator
FILE_MARKER = "# <<OPENAPI-TO-MODELS>>"

# Delimit the region rewritten on every run; everything else is kept byte for byte
REGION_START_MARKER = "# <<OPENAPI-TO-MODELS: generated start>>"
REGION_STOP_MARKER = "# <<OPENAPI-TO-MODELS: generated stop>>"


class CodeMergeError(Exception):
    """Raised when writing a generated artifact fails.

    This can happen when:
    - The merged module is not valid Python
    - The target file cannot be replaced
    """

    pass
