from __future__ import annotations

"""Script payload decoding.

Catalog payloads are stored with ``&``, ``<`` and ``>`` escaped as markup
entities and with tab characters replaced by the ``_x09`` token.  This is a
deliberate approximation of XML unescaping: numeric character references and
CDATA sections are not handled.
"""

import re

__all__ = ["decode", "encode"]

# Alternation order is the substitution precedence.
_DECODE_TABLE = {
    "_x09": "\t",
    "&amp;": "&",
    "&gt;": ">",
    "&lt;": "<",
}
_DECODE_RE = re.compile("|".join(re.escape(token) for token in _DECODE_TABLE))

_ENCODE_TABLE = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\t": "_x09",
}
_ENCODE_RE = re.compile("|".join(re.escape(char) for char in _ENCODE_TABLE))


def decode(raw_code: str) -> str:
    """Return the literal script text for a raw catalog payload.

    All four substitutions happen in a single left-to-right pass, so the
    result of one replacement is never rescanned: ``&amp;gt;`` decodes to
    ``&gt;``, not ``>``.

    Examples:
        >>> decode("var x _x09= 1;")
        'var x \\t= 1;'
        >>> decode("a &gt; b")
        'a > b'
    """
    return _DECODE_RE.sub(lambda match: _DECODE_TABLE[match.group(0)], raw_code)


def encode(literal: str) -> str:
    """Escape *literal* the way catalogs store it.

    Inverse of :func:`decode` for any text that does not itself contain the
    ``_x09`` token.
    """
    return _ENCODE_RE.sub(lambda match: _ENCODE_TABLE[match.group(0)], literal)
