from __future__ import annotations

"""Parsing of the embedded script catalog.

Layout as written by Spotfire::

    <EmbeddedScripts>
      <EmbeddedScript>
        <ScriptDefinition Name="calc" LanguageName="JavaScript"
                          LanguageVersion="1.0" WrapScript="true">
          <ScriptCode>var x _x09= 1;</ScriptCode>
        </ScriptDefinition>
      </EmbeddedScript>
    </EmbeddedScripts>

``ScriptCode`` is also accepted as a direct child of ``EmbeddedScript``.
"""

import logging
from typing import List, Optional, Union

from lxml import etree as ET

from spotty.core.constants import (
    CODE_TAG,
    DEFINITION_ATTRS,
    DEFINITION_TAG,
    SCRIPT_LIST_TAG,
    SCRIPT_TAG,
    SCRIPTS_RESOURCE_NAME,
)
from spotty.core.exceptions import ScriptsNotFoundError
from spotty.core.models import ExtractionOptions, ScriptRecord

from .markup import find_list, first_child, iter_children, parse_document, raw_text, required_attributes

logger = logging.getLogger(__name__)

__all__ = ["parse_scripts", "parse_wrap_script"]

_STAGE = "catalog"


def parse_wrap_script(value: str) -> Union[bool, str]:
    """``true``/``false`` (any case) become booleans; anything else is kept as text."""
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def _parse_script(script: ET._Element, options: ExtractionOptions) -> Optional[ScriptRecord]:
    definition = first_child(script, DEFINITION_TAG)
    if definition is None:
        logger.warning("Skipping <%s> at line %s: no <%s>", SCRIPT_TAG, script.sourceline, DEFINITION_TAG)
        return None

    attrs = required_attributes(definition, DEFINITION_ATTRS, SCRIPTS_RESOURCE_NAME, _STAGE)
    if options.verbose:
        logger.debug("Script definition: %s", attrs)

    code = first_child(definition, CODE_TAG)
    if code is None:
        code = first_child(script, CODE_TAG)
    if code is None:
        logger.warning("Skipping script '%s': no <%s>", attrs["Name"], CODE_TAG)
        return None

    return ScriptRecord(
        name=attrs["Name"],
        language_name=attrs["LanguageName"],
        language_version=attrs["LanguageVersion"],
        wrap_script=parse_wrap_script(attrs["WrapScript"]),
        code=raw_text(code),
    )


def parse_scripts(catalog_bytes: bytes,
                  options: Optional[ExtractionOptions] = None) -> List[ScriptRecord]:
    """Return one :class:`ScriptRecord` per usable script entry, in document order.

    ``code`` is captured verbatim, CR characters and references included;
    decoding happens when the script is written.

    Raises:
        MarkupParseError: If the catalog is not well-formed or a definition
            lacks one of its four attributes
        ScriptsNotFoundError: If the catalog holds no usable script entry
    """
    options = options or ExtractionOptions()
    if options.debug:
        logger.info("Parsing %s", SCRIPTS_RESOURCE_NAME)

    root = parse_document(catalog_bytes, SCRIPTS_RESOURCE_NAME, _STAGE, preserve_text=True)
    script_list = find_list(root, SCRIPT_LIST_TAG)
    if script_list is None or first_child(script_list, SCRIPT_TAG) is None:
        raise ScriptsNotFoundError(f"No embedded scripts listed in {SCRIPTS_RESOURCE_NAME}")

    scripts: List[ScriptRecord] = []
    for script in iter_children(script_list, SCRIPT_TAG):
        record = _parse_script(script, options)
        if record is not None:
            scripts.append(record)

    # Entries may all have been skipped above
    if not scripts:
        raise ScriptsNotFoundError("No scripts found embedded in DXP file.")

    if options.debug:
        logger.info("Found %d scripts", len(scripts))
    return scripts
