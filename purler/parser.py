"""Splits a purl string into its raw, decoded components.

See https://github.com/package-url/purl-spec/blob/master/PURL-SPECIFICATION.rst#how-to-parse-a-purl-string-in-its-components
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .codec import decode
from .exceptions import (
    InvalidCharacterError,
    MissingNameError,
    MissingSchemeError,
    MissingTypeError,
)
from .purl_types import TypeRegistry, default_registry
from .qualifiers import QualifierMap

SCHEME = "pkg"


class RawComponents(BaseModel):
    """Components of a purl string, decoded but not yet normalized."""

    model_config = ConfigDict(frozen=True)

    type: str
    namespace: Optional[str] = None
    name: str
    version: Optional[str] = None
    qualifiers: Optional[QualifierMap] = None
    subpath: Optional[str] = None


def split_version(segment: str, separator: str = "last") -> Tuple[str, Optional[str]]:
    """Splits the last path segment into name and version.

    ``separator`` is ``"last"`` to split on the last ``@`` or ``"first"`` to
    split on the first one. An ``@`` at the very start of the segment is part
    of the name.
    """
    if separator == "first":
        index = segment.find("@", 1)
    else:
        index = segment.rfind("@")
        if index == 0:
            index = -1
    if index == -1:
        return segment, None
    return segment[:index], segment[index + 1:]


def _parse_subpath(raw_subpath: str) -> str:
    if "#" in raw_subpath:
        raise InvalidCharacterError('subpath cannot contain an unencoded "#"', component="subpath")
    return "/".join(decode(segment, "subpath") for segment in raw_subpath.split("/"))


def parse_components(purl_str: str, registry: Optional[TypeRegistry] = None) -> RawComponents:
    """Parses a purl string into `RawComponents`.

    Args:
        purl_str: The purl string, e.g. ``pkg:npm/%40angular/core@16.0.0``.
        registry: Type rules used to pick the version separator. Defaults to
            the built-in registry.

    Returns:
        The decoded components. The type is already lowercase.

    Raises:
        TypeError: If ``purl_str`` is not a string.
        MissingSchemeError: If the string does not start with ``pkg:``.
        MissingTypeError: If the type is empty.
        MissingNameError: If the name segment is absent or empty.
        InvalidCharacterError: If a raw character appears where it is not allowed.
        MalformedEncodingError: If a component cannot be percent-decoded.
        DuplicateQualifierKeyError: If a qualifier key repeats.
    """
    if not isinstance(purl_str, str):
        raise TypeError("A purl string argument is required.")
    if registry is None:
        registry = default_registry()

    scheme, colon, remainder = purl_str.strip().partition(":")
    if not colon or scheme.lower() != SCHEME:
        raise MissingSchemeError('missing required "pkg" scheme component', component="scheme")
    # "pkg://" is tolerated; a purl has no URL authority.
    remainder = remainder.lstrip("/")

    remainder, hash_sign, raw_subpath = remainder.partition("#")
    subpath = _parse_subpath(raw_subpath) if hash_sign else None

    remainder, question_mark, raw_qualifiers = remainder.partition("?")
    qualifiers = QualifierMap.from_string(raw_qualifiers) if question_mark else None

    raw_type, slash, path = remainder.partition("/")
    if "@" in raw_type:
        raise InvalidCharacterError('cannot contain a "user:pass@host:port"', component="type")
    purl_type = decode(raw_type, "type").strip().lower()
    if not purl_type:
        raise MissingTypeError()
    if not slash:
        raise MissingNameError()

    *namespace_segments, name_and_version = path.split("/")
    namespace = "/".join(decode(segment, "namespace") for segment in namespace_segments if segment)

    rule = registry.rule_for(purl_type)
    raw_name, raw_version = split_version(name_and_version, rule.version_separator)
    if not raw_name:
        raise MissingNameError()
    if "@" in raw_name[1:]:
        raise InvalidCharacterError('"name" component cannot contain an unencoded "@"', component="name")

    return RawComponents(
        type=purl_type,
        namespace=namespace or None,
        name=decode(raw_name, "name"),
        version=decode(raw_version, "version") if raw_version else None,
        qualifiers=qualifiers,
        subpath=subpath,
    )
