from __future__ import annotations

"""Shared data structures used across the spotty core.

This module is intentionally free of I/O code so that the contained objects
can be reused in any context (unit-tests, CLI, library callers).
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_LANGUAGES
from .decoder import decode

__all__ = [
    "ExtractionOptions",
    "ResourceEntry",
    "ScriptRecord",
    "OutputLocation",
    "ExtractionReport",
]


def _normalise_languages(raw: Optional[Mapping[str, Any]]) -> Dict[str, Tuple[str, str]]:
    """Turn a ``{name: [subdir, ext]}`` mapping from YAML into tuples."""
    languages = dict(DEFAULT_LANGUAGES)
    for name, value in (raw or {}).items():
        if isinstance(value, str):
            languages[str(name)] = (value, value)
        elif isinstance(value, (list, tuple)) and len(value) == 2:
            languages[str(name)] = (str(value[0]), str(value[1]))
        else:
            raise ValueError(f"Invalid language mapping for {name!r}: {value!r}")
    return languages


@dataclass(frozen=True)
class ExtractionOptions:
    """Run-scoped toggles passed explicitly to every pipeline component.

    Attributes
    ----------
    debug
        Emit progress logs (entry searched, resource matched, files written).
    verbose
        Emit payload-level logs (attributes, raw document sizes).
    languages
        Classification table mapping a ``LanguageName`` to
        ``(subdirectory, extension)``.
    """

    debug: bool = False
    verbose: bool = False
    languages: Mapping[str, Tuple[str, str]] = field(
        default_factory=lambda: dict(DEFAULT_LANGUAGES)
    )

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "ExtractionOptions":
        """Build options from the ``extraction`` config section.

        When *config* is omitted the section is read from :class:`ConfigManager`.
        """
        if config is None:
            from spotty.config import ConfigManager

            config = ConfigManager().get_extraction_config()
        return cls(
            debug=bool(config.get("debug", False)),
            verbose=bool(config.get("verbose", False)),
            languages=_normalise_languages(config.get("languages")),
        )


@dataclass(frozen=True)
class ResourceEntry:
    """One ``EmbeddedResource`` of the manifest."""

    name: str
    archive_element_path: str


@dataclass(frozen=True)
class ScriptRecord:
    """One script of the catalog.

    ``code`` holds the payload exactly as stored in the catalog, still carrying
    markup escapes and ``_x09`` tab tokens.  Use :meth:`decoded` for the
    literal script text.
    """

    name: str
    language_name: str
    language_version: str
    wrap_script: Union[bool, str]
    code: str

    def decoded(self) -> "ScriptRecord":
        """Return a copy whose ``code`` is the literal script text."""
        return replace(self, code=decode(self.code))


@dataclass(frozen=True)
class OutputLocation:
    """Where a script lands on disk: ``<root>/<subdirectory>/<name>.<extension>``."""

    subdirectory: str
    extension: str
    path: Path


@dataclass
class ExtractionReport:
    """Summary of a completed extraction run."""

    container: Path
    output_dir: Path
    script_manifest_path: str = ""
    written: List[Path] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.written)
