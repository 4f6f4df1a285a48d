from __future__ import annotations

"""Entry lookup inside DXP containers.

A DXP file is a zip archive.  The extractor walks the stored entries in order
and returns the content of the first one whose path matches exactly; entries
that do not match are never decompressed.
"""

import logging
import zipfile
import zlib
from pathlib import Path
from typing import Iterator, Optional

from .exceptions import ArchiveIOError, EntryNotFoundError
from .models import ExtractionOptions

logger = logging.getLogger(__name__)

__all__ = ["DxpArchive", "extract_entry"]

# Failures zipfile can surface while inflating a member
_READ_ERRORS = (OSError, EOFError, zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError)


class DxpArchive:
    """Read-only handle on a DXP container.

    The container is opened once and shared by every lookup of an extraction
    run.  Use it as a context manager so the handle is closed whether the run
    completes or fails::

        with DxpArchive("analysis.dxp") as archive:
            manifest = archive.read_entry("EmbeddedResources.xml")
    """

    def __init__(self, container_path: str | Path,
                 options: Optional[ExtractionOptions] = None) -> None:
        self.container_path = Path(container_path)
        self.options = options or ExtractionOptions()
        self._zip: Optional[zipfile.ZipFile] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> "DxpArchive":
        """Open the container.

        Raises:
            ArchiveIOError: If the file is missing, unreadable or not a zip archive
        """
        if self._zip is not None:
            return self
        try:
            self._zip = zipfile.ZipFile(self.container_path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveIOError(
                f"Cannot open container {self.container_path}: {e}", self.container_path, e
            ) from e
        logger.debug("Opened container %s", self.container_path)
        return self

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def __enter__(self) -> "DxpArchive":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def iter_entries(self) -> Iterator[zipfile.ZipInfo]:
        """Yield the container's entries lazily, in stored order."""
        if self._zip is None:
            self.open()
        yield from self._zip.infolist()

    def read_entry(self, entry_path: str) -> bytes:
        """Return the decompressed content of the first entry named *entry_path*.

        Args:
            entry_path: Archive path compared with exact string equality

        Returns:
            The full content of the matching entry

        Raises:
            EntryNotFoundError: If no entry has that path
            ArchiveIOError: If the container or the entry cannot be read
        """
        if self.options.debug:
            logger.info("Searching %s for %s", self.container_path, entry_path)

        for info in self.iter_entries():
            if info.filename != entry_path:
                continue
            if self.options.debug:
                logger.info("Found file: %s", info.filename)
            data = self._drain(info)
            if self.options.verbose:
                logger.debug("Read %d bytes from %s", len(data), info.filename)
            return data

        raise EntryNotFoundError(entry_path, self.container_path)

    def _drain(self, info: zipfile.ZipInfo) -> bytes:
        try:
            with self._zip.open(info, "r") as fh:
                return fh.read()
        except _READ_ERRORS as e:
            raise ArchiveIOError(
                f"Failed to read {info.filename} from {self.container_path}: {e}",
                self.container_path,
                e,
            ) from e


def extract_entry(container_path: str | Path, entry_path: str,
                  options: Optional[ExtractionOptions] = None) -> bytes:
    """Open *container_path*, return the content of *entry_path* and close it again."""
    with DxpArchive(container_path, options) as archive:
        return archive.read_entry(entry_path)
