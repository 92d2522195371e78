"""Percent-encoding for purl components.

Unlike general URL encoding, ``/`` is structural in a purl: it separates
namespace and subpath segments and is never part of a segment's data, so
segments are always encoded one at a time.
"""

from __future__ import annotations

import re
from enum import Enum
from urllib.parse import quote, unquote_to_bytes

from .exceptions import MalformedEncodingError

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class EncodingContext(str, Enum):
    """Positions in a purl whose reserved character sets differ."""

    NAMESPACE = "namespace"
    NAME = "name"
    VERSION = "version"
    SUBPATH = "subpath"
    QUALIFIER_KEY = "qualifier_key"
    QUALIFIER_VALUE = "qualifier_value"


# Characters left literal on top of the unreserved set (A-Z a-z 0-9 - . _ ~),
# which `quote` never escapes.
_SAFE_CHARACTERS = {
    EncodingContext.NAMESPACE: ":",
    EncodingContext.NAME: ":",
    EncodingContext.VERSION: ":",
    EncodingContext.SUBPATH: "",
    EncodingContext.QUALIFIER_KEY: "",
    EncodingContext.QUALIFIER_VALUE: "",
}


def encode(text: str, context: EncodingContext) -> str:
    """Percent-encodes a single segment for the given position.

    Args:
        text: The decoded segment. Must not be a ``/``-joined path.
        context: Where in the purl the segment is written.

    Returns:
        The UTF-8 percent-encoded segment.
    """
    return quote(text, safe=_SAFE_CHARACTERS[EncodingContext(context)])


def decode(segment: str, component: str = "component") -> str:
    """Decodes ``%XX`` escapes in a segment and interprets the bytes as UTF-8.

    A ``+`` is kept as a literal plus sign.

    Args:
        segment: The raw, possibly encoded, segment.
        component: Name of the purl component, used in error messages.

    Returns:
        The decoded text.

    Raises:
        MalformedEncodingError: If a ``%`` is not followed by two hex digits
            or the decoded bytes are not valid UTF-8.
    """
    if "%" not in segment:
        return segment
    if _MALFORMED_ESCAPE.search(segment):
        raise MalformedEncodingError(f'unable to decode "{component}" component', component=component)
    try:
        return unquote_to_bytes(segment).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedEncodingError(f'unable to decode "{component}" component', component=component) from e
