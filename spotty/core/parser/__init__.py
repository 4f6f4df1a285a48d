from __future__ import annotations

"""Structured-markup parsers for the two documents of a DXP file.

Provides the manifest resolver (``EmbeddedResources.xml``) and the script
catalog parser (``EmbeddedScripts.xml``).
"""

from .manifest import iter_resources, resolve_script_manifest_path  # noqa: F401
from .catalog import parse_scripts  # noqa: F401

__all__: list[str] = [
    "iter_resources",
    "resolve_script_manifest_path",
    "parse_scripts",
]
