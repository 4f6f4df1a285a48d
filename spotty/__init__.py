"""Top-level package for spotty.

Extracts the IronPython and JavaScript scripts embedded in Spotfire DXP files.
Front-ends should only depend on the public API exposed here rather than
importing internal modules directly.
"""

from .core.exceptions import ExtractionError
from .core.models import ExtractionOptions, ExtractionReport, ScriptRecord
from .core.services import ExtractionService

__all__: list[str] = [
    "ExtractionError",
    "ExtractionOptions",
    "ExtractionReport",
    "ExtractionService",
    "ScriptRecord",
]
