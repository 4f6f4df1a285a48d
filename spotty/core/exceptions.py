from __future__ import annotations

"""Extraction exception classes.

Every failure of the pipeline is raised as a subclass of
:class:`ExtractionError`.  The ``stage`` attribute names the pipeline step that
failed (``archive``, ``manifest``, ``catalog``, ``write``) and prefixes the
message so front-ends can print a single descriptive line.
"""

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .models import ScriptRecord

__all__ = [
    "ExtractionError",
    "ExtractionIOError",
    "ArchiveIOError",
    "OutputWriteError",
    "ScriptWriteError",
    "MarkupParseError",
    "NotFoundError",
    "EntryNotFoundError",
    "ResourceNotFoundError",
    "ScriptsNotFoundError",
]


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {super().__str__()}"
        return super().__str__()


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

class ExtractionIOError(ExtractionError):
    """Raised when reading the container or writing the output fails."""


class ArchiveIOError(ExtractionIOError):
    """Raised when the container cannot be opened or an entry cannot be read."""

    def __init__(self, message: str, container_path: str | Path,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message, stage="archive", cause=cause)
        self.container_path = str(container_path)


class OutputWriteError(ExtractionIOError):
    """Raised when the output directory cannot be prepared."""

    def __init__(self, message: str, path: str | Path,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message, stage="write", cause=cause)
        self.path = str(path)


class ScriptWriteError(OutputWriteError):
    """Raised after all records were attempted and at least one write failed.

    ``failures`` pairs each failed record with its cause; ``written`` lists the
    files that were produced before and after the failures.
    """

    def __init__(self, output_root: str | Path,
                 failures: List[Tuple["ScriptRecord", BaseException]],
                 written: Optional[List[Path]] = None) -> None:
        self.failures = failures
        self.written = written or []
        details = "; ".join(f"{record.name}: {exc}" for record, exc in failures)
        message = (
            f"Failed to write {len(failures)} of {len(failures) + len(self.written)} "
            f"scripts to {output_root} ({details})"
        )
        cause = failures[0][1] if failures else None
        super().__init__(message, output_root, cause)


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------

class MarkupParseError(ExtractionError):
    """Raised when a document is not well-formed or lacks a required attribute."""

    def __init__(self, message: str, document: str, stage: Optional[str] = None,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message, stage=stage, cause=cause)
        self.document = document


# ---------------------------------------------------------------------------
# Missing content
# ---------------------------------------------------------------------------

class NotFoundError(ExtractionError):
    """Base class for an expected entry, resource or script that is absent."""


class EntryNotFoundError(NotFoundError):
    """Raised when the container has no entry with the requested path."""

    def __init__(self, entry_path: str, container_path: str | Path) -> None:
        self.entry_path = entry_path
        self.container_path = str(container_path)
        super().__init__(
            f"Could not find file {entry_path} in file {self.container_path}",
            stage="archive",
        )


class ResourceNotFoundError(NotFoundError):
    """Raised when the manifest lists no resources or not the scripts resource."""

    def __init__(self, message: str, resource_name: Optional[str] = None) -> None:
        self.resource_name = resource_name
        super().__init__(message, stage="manifest")


class ScriptsNotFoundError(NotFoundError):
    """Raised when the script catalog yields no usable script entries."""

    def __init__(self, message: str) -> None:
        super().__init__(message, stage="catalog")
