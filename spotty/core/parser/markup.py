from __future__ import annotations

"""Low-level lxml helpers shared by the manifest and catalog parsers."""

import re
from typing import Dict, Iterator, Optional, Sequence, Union

from lxml import etree as ET

from spotty.core.exceptions import MarkupParseError

__all__ = [
    "parse_document",
    "protect_character_data",
    "local_name",
    "find_list",
    "iter_children",
    "first_child",
    "required_attributes",
    "raw_text",
]

_XML_DECLARATION_RE = re.compile(r"\A<\?xml\b.*?\?>", re.S)

# Anything that is not character data: comments, CDATA sections, processing
# instructions, the doctype and tags (attribute values may contain ">")
_MARKUP_RE = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<\?.*?\?>"
    r"|<!DOCTYPE(?:[^\[>]|\[.*?\])*>"
    r"|<(?:[^<>\"']|\"[^\"]*\"|'[^']*')*>",
    re.S,
)


def _parse(source: Union[bytes, str], document: str, stage: str) -> ET._Element:
    parser = ET.XMLParser(resolve_entities=False, no_network=True)  # Security: no entity expansion
    try:
        root = ET.fromstring(source, parser)
    except (ET.XMLSyntaxError, ValueError) as e:
        raise MarkupParseError(
            f"Invalid or nonexistent XML in {document}: {e}", document, stage=stage, cause=e
        ) from e
    if root is None:
        raise MarkupParseError(f"Invalid or nonexistent XML in {document}", document, stage=stage)
    return root


def _source_text(data: bytes, root: ET._Element, document: str, stage: str) -> str:
    """Decode *data* with its declared encoding and drop the XML declaration."""
    encoding = root.getroottree().docinfo.encoding or "utf-8"
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        text = data.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise MarkupParseError(
            f"Cannot decode {document} as {encoding}: {e}", document, stage=stage, cause=e
        ) from e
    # lxml refuses str input that still declares an encoding
    return _XML_DECLARATION_RE.sub("", text, count=1)


def _protect(text: str, depth: int) -> str:
    if not text or depth <= 0:
        return text
    return text.replace("&", "&amp;").replace("\r", "&#13;")


def protect_character_data(source: str) -> str:
    """Escape the character data of *source* so parsing it yields the text as stored.

    Inside the root element every ``&`` becomes ``&amp;`` and every CR becomes
    ``&#13;``. Parsing the result therefore leaves entity and character
    references unresolved and keeps CRLF line endings. Tags, attribute values,
    comments, CDATA sections and the prolog are left untouched.

    Examples:
        >>> protect_character_data("<a x='&amp;'>1 &lt; 2\\r\\n</a>")
        "<a x='&amp;'>1 &amp;lt; 2&#13;\\n</a>"
    """
    parts = []
    depth = 0
    position = 0
    for match in _MARKUP_RE.finditer(source):
        parts.append(_protect(source[position:match.start()], depth))
        markup = match.group(0)
        if markup.startswith("</"):
            depth -= 1
        elif not markup.startswith(("<!", "<?")) and not markup.endswith("/>"):
            depth += 1
        parts.append(markup)
        position = match.end()
    parts.append(_protect(source[position:], depth))
    return "".join(parts)


def parse_document(data: bytes, document: str, stage: str,
                   preserve_text: bool = False) -> ET._Element:
    """Parse *data* and return the root element.

    With *preserve_text* the returned tree holds character data exactly as
    stored in *data* (see :func:`protect_character_data`); attribute values are
    resolved as usual. The document is checked for well-formedness first, so
    malformed markup fails the same way in both modes.

    Raises:
        MarkupParseError: If *data* is empty or not well-formed
    """
    root = _parse(data, document, stage)
    if not preserve_text:
        return root
    source = _source_text(data, root, document, stage)
    return _parse(protect_character_data(source), document, stage)


def local_name(element: ET._Element) -> Optional[str]:
    """Tag name without namespace; ``None`` for comments and processing instructions."""
    if not isinstance(element.tag, str):
        return None
    return ET.QName(element).localname


def find_list(root: ET._Element, tag: str) -> Optional[ET._Element]:
    """Return *root* if it is the *tag* list node, else its first descendant named *tag*."""
    if local_name(root) == tag:
        return root
    for element in root.iterdescendants():
        if local_name(element) == tag:
            return element
    return None


def iter_children(parent: ET._Element, tag: str) -> Iterator[ET._Element]:
    """Yield direct children of *parent* named *tag*, in document order."""
    for child in parent.iterchildren():
        if local_name(child) == tag:
            yield child


def first_child(parent: ET._Element, tag: str) -> Optional[ET._Element]:
    return next(iter_children(parent, tag), None)


def required_attributes(element: ET._Element, names: Sequence[str],
                        document: str, stage: str) -> Dict[str, str]:
    """Read *names* from *element*, failing on the first one that is absent.

    Raises:
        MarkupParseError: Naming the missing attribute and element
    """
    values: Dict[str, str] = {}
    for name in names:
        value = element.get(name)
        if value is None:
            raise MarkupParseError(
                f"Expected attribute '{name}' on <{local_name(element)}> "
                f"(line {element.sourceline}) in {document}",
                document,
                stage=stage,
            )
        values[name] = value
    return values


def raw_text(element: ET._Element) -> str:
    """Return the character data of *element*, comments and nested tags excluded.

    On a tree from ``parse_document(..., preserve_text=True)`` this is the
    content as stored, still carrying its ``&amp;``, ``&lt;`` and ``&gt;``
    escapes, numeric references and CR characters.
    """
    return ET.tostring(element, method="text", encoding="unicode", with_tail=False)
