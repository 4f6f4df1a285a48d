from __future__ import annotations

"""Placement of decoded scripts on disk.

Each script lands at ``<output_root>/<subdirectory>/<name>.<extension>``, where
subdirectory and extension come from the language classification table.
Scripts are written one after the other in catalog order; a failing script
does not stop the remaining ones, and all failures are reported together once
every script has been attempted.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple

from .constants import DEFAULT_LANGUAGES, UNKNOWN_LANGUAGE
from .exceptions import OutputWriteError, ScriptWriteError
from .models import ExtractionOptions, OutputLocation, ScriptRecord

logger = logging.getLogger(__name__)

__all__ = [
    "classify",
    "output_location",
    "ensure_directory",
    "write_script",
    "write_scripts",
]


def classify(language_name: str,
             languages: Optional[Mapping[str, Tuple[str, str]]] = None) -> Tuple[str, str]:
    """Return ``(subdirectory, extension)`` for *language_name*.

    Known languages use the table; any other name is used verbatim for both
    parts, and a blank name maps to ``("unknown", "txt")``.

    Examples:
        >>> classify("IronPython")
        ('python', 'py')
        >>> classify("TERR")
        ('TERR', 'TERR')
    """
    table = DEFAULT_LANGUAGES if languages is None else languages
    if language_name in table:
        return table[language_name]
    if not language_name.strip():
        return UNKNOWN_LANGUAGE
    return language_name, language_name


def output_location(output_root: str | Path, record: ScriptRecord,
                    languages: Optional[Mapping[str, Tuple[str, str]]] = None) -> OutputLocation:
    subdirectory, extension = classify(record.language_name, languages)
    path = Path(output_root) / subdirectory / f"{record.name}.{extension}"
    return OutputLocation(subdirectory=subdirectory, extension=extension, path=path)


def ensure_directory(path: Path) -> None:
    """Create *path* (and parents) unless it already exists as a directory.

    Raises:
        OutputWriteError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(f"Cannot create directory {path}: {e}", path, e) from e


_SEPARATORS = tuple(sep for sep in ("/", "\\", os.sep, os.altsep) if sep)


def _is_plain_name(part: str) -> bool:
    return bool(part) and part not in (".", "..") and not any(sep in part for sep in _SEPARATORS)


def _check_inside(record: ScriptRecord, location: OutputLocation) -> None:
    """Reject script names or language folders that leave their output folder.

    Names are checked lexically, so output folders that are symlinks still work.
    """
    filename = f"{record.name}.{location.extension}"
    for part in (location.subdirectory, filename):
        if not _is_plain_name(part):
            raise ValueError(f"Unsafe output path {location.path}: '{part}' is not a plain name")


def write_script(output_root: Path, record: ScriptRecord,
                 options: Optional[ExtractionOptions] = None) -> Path:
    """Decode *record* and write it below *output_root*; return the file path.

    Raises:
        OutputWriteError: If the script's subdirectory cannot be created
        OSError: If the file cannot be written
        ValueError: If the script name or language would escape *output_root*
    """
    options = options or ExtractionOptions()
    location = output_location(output_root, record, options.languages)
    _check_inside(record, location)
    ensure_directory(location.path.parent)

    text = record.decoded().code
    # newline="" keeps the script's own line endings
    with open(location.path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    if options.verbose:
        logger.debug("Wrote file: %s (%d chars)", location.path, len(text))
    return location.path


def write_scripts(output_root: str | Path, records: Iterable[ScriptRecord],
                  options: Optional[ExtractionOptions] = None) -> List[Path]:
    """Write every record and return the written paths, in record order.

    Raises:
        OutputWriteError: If *output_root* cannot be created
        ScriptWriteError: If one or more scripts could not be written; raised
            only after all records were attempted
    """
    options = options or ExtractionOptions()
    output_root = Path(output_root)
    ensure_directory(output_root)

    written: List[Path] = []
    failures: List[Tuple[ScriptRecord, BaseException]] = []
    for record in records:
        try:
            written.append(write_script(output_root, record, options))
        except (OSError, ValueError, OutputWriteError) as e:
            logger.error("Failed to write script '%s': %s", record.name, e)
            failures.append((record, e))

    if failures:
        raise ScriptWriteError(output_root, failures, written)

    if options.debug:
        logger.info("Wrote %d script files to %s", len(written), output_root)
    return written
