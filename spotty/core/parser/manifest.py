from __future__ import annotations

"""Resolution of the script catalog path from ``EmbeddedResources.xml``.

The manifest lists every embedded resource of a DXP file together with its
path inside the archive::

    <EmbeddedResources>
      <EmbeddedResource Name="EmbeddedScripts.xml" ArchiveElementPath="Resources/1.xml" />
    </EmbeddedResources>
"""

import logging
from typing import Iterator, Optional

from lxml import etree as ET

from spotty.core.constants import (
    MANIFEST_ENTRY,
    RESOURCE_LIST_TAG,
    RESOURCE_NAME_ATTR,
    RESOURCE_PATH_ATTR,
    RESOURCE_TAG,
    SCRIPTS_RESOURCE_NAME,
)
from spotty.core.exceptions import ResourceNotFoundError
from spotty.core.models import ExtractionOptions, ResourceEntry

from .markup import find_list, first_child, iter_children, parse_document, required_attributes

logger = logging.getLogger(__name__)

__all__ = ["iter_resources", "resolve_script_manifest_path"]

_STAGE = "manifest"


def iter_resources(resource_list: ET._Element) -> Iterator[ResourceEntry]:
    """Yield a validated :class:`ResourceEntry` per resource element, lazily."""
    for element in iter_children(resource_list, RESOURCE_TAG):
        attrs = required_attributes(
            element, (RESOURCE_NAME_ATTR, RESOURCE_PATH_ATTR), MANIFEST_ENTRY, _STAGE
        )
        yield ResourceEntry(
            name=attrs[RESOURCE_NAME_ATTR],
            archive_element_path=attrs[RESOURCE_PATH_ATTR],
        )


def resolve_script_manifest_path(manifest_bytes: bytes,
                                 options: Optional[ExtractionOptions] = None) -> str:
    """Return the archive path of the ``EmbeddedScripts.xml`` resource.

    The first resource named ``EmbeddedScripts.xml`` wins; resources after it
    are neither read nor validated.

    Raises:
        MarkupParseError: If the manifest is not well-formed or a resource
            element lacks ``Name`` / ``ArchiveElementPath``
        ResourceNotFoundError: If no resource is listed, or none is the
            scripts resource
    """
    options = options or ExtractionOptions()
    if options.debug:
        logger.info("Parsing %s to find %s", MANIFEST_ENTRY, SCRIPTS_RESOURCE_NAME)

    root = parse_document(manifest_bytes, MANIFEST_ENTRY, _STAGE)
    resource_list = find_list(root, RESOURCE_LIST_TAG)
    if resource_list is None or first_child(resource_list, RESOURCE_TAG) is None:
        raise ResourceNotFoundError(f"No embedded resources in {MANIFEST_ENTRY} (no resources)")

    for resource in iter_resources(resource_list):
        if options.verbose:
            logger.debug("Resource %s -> %s", resource.name, resource.archive_element_path)
        if resource.name == SCRIPTS_RESOURCE_NAME:
            if options.debug:
                logger.info("Found %s in file %s", SCRIPTS_RESOURCE_NAME, resource.archive_element_path)
            return resource.archive_element_path

    raise ResourceNotFoundError(
        f"No scripts found embedded in DXP file (no embedded scripts resource "
        f"named {SCRIPTS_RESOURCE_NAME})",
        resource_name=SCRIPTS_RESOURCE_NAME,
    )
