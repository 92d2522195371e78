"""Renders a PackageURL in canonical form."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from .codec import EncodingContext, encode
from .parser import SCHEME

if TYPE_CHECKING:
    from .purl import PackageURL


def _encode_path(path: str, context: EncodingContext) -> str:
    return "/".join(encode(segment, context) for segment in path.split("/"))


def to_string(purl: PackageURL) -> str:
    """Serializes a PackageURL to its canonical string.

    The order is fixed: scheme, type, namespace, name, version, qualifiers
    sorted by key, subpath. Equal purls always give identical strings.

    Args:
        purl: A validated PackageURL.

    Returns:
        The canonical purl string, e.g. ``pkg:maven/org.apache.logging.log4j/log4j-core@2.17.1``.
    """
    purl_str = f"{SCHEME}:{purl.type}/"
    if purl.namespace:
        purl_str = f"{purl_str}{_encode_path(purl.namespace, EncodingContext.NAMESPACE)}/"
    purl_str = f"{purl_str}{encode(purl.name, EncodingContext.NAME)}"
    if purl.version:
        purl_str = f"{purl_str}@{encode(purl.version, EncodingContext.VERSION)}"
    if purl.qualifiers:
        purl_str = f"{purl_str}?{purl.qualifiers.to_string()}"
    if purl.subpath:
        purl_str = f"{purl_str}#{_encode_path(purl.subpath, EncodingContext.SUBPATH)}"
    return purl_str


def to_url_component(purl: PackageURL) -> str:
    """Encodes the canonical string as a single URL path component.

    For use in REST API paths such as ``/packages/{purl}/issues``.

    Returns:
        The percent-encoded canonical purl, e.g. ``pkg%3Anpm%2Fbase64url%403.0.0``.
    """
    return quote(to_string(purl), safe="")
