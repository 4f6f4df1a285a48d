from __future__ import annotations

"""High-level extraction service.

Entry-point for any front-end (CLI, library caller) that needs the scripts of a
DXP file.  Runs the pipeline::

    EmbeddedResources.xml -> scripts resource path -> EmbeddedScripts.xml
        -> script records -> files on disk

Reading and parsing stop at the first failure; writing attempts every script.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from spotty.core.archive import DxpArchive
from spotty.core.constants import MANIFEST_ENTRY
from spotty.core.models import ExtractionOptions, ExtractionReport, ScriptRecord
from spotty.core.parser import parse_scripts, resolve_script_manifest_path
from spotty.core.writer import write_scripts

logger = logging.getLogger(__name__)

__all__ = ["ExtractionService"]


class ExtractionService:
    """Business-logic façade over the archive, parser and writer modules."""

    def __init__(self, options: Optional[ExtractionOptions] = None) -> None:
        self.options = options or ExtractionOptions()
        self.logger = logger

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def load_scripts(self, container_path: str | Path) -> List[ScriptRecord]:
        """Return the raw script records of *container_path* without writing anything.

        Raises:
            ArchiveIOError, EntryNotFoundError, MarkupParseError,
            ResourceNotFoundError, ScriptsNotFoundError
        """
        _, scripts = self._read_catalog(Path(container_path))
        return scripts

    def extract(self, container_path: str | Path, output_dir: str | Path) -> ExtractionReport:
        """Extract every embedded script of *container_path* into *output_dir*.

        Args:
            container_path: DXP file to read
            output_dir: Root of the ``js/``, ``python/`` … output folders

        Returns:
            ExtractionReport listing the written files

        Raises:
            ExtractionError: Any subclass; nothing is written when reading or
                parsing fails
        """
        container_path = Path(container_path)
        output_dir = Path(output_dir)
        self.logger.debug("Extracting scripts: %s -> %s", container_path, output_dir)

        manifest_path, scripts = self._read_catalog(container_path)
        written = write_scripts(output_dir, scripts, self.options)

        report = ExtractionReport(
            container=container_path,
            output_dir=output_dir,
            script_manifest_path=manifest_path,
            written=written,
        )
        self.logger.info("Wrote %d script files to %s", report.count, output_dir)
        return report

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    def _read_catalog(self, container_path: Path) -> Tuple[str, List[ScriptRecord]]:
        with DxpArchive(container_path, self.options) as archive:
            manifest_bytes = archive.read_entry(MANIFEST_ENTRY)
            scripts_path = resolve_script_manifest_path(manifest_bytes, self.options)
            catalog_bytes = archive.read_entry(scripts_path)
        return scripts_path, parse_scripts(catalog_bytes, self.options)
