"""Qualifier map: the ``key=value&key=value`` part of a purl."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Optional, Tuple

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .codec import EncodingContext, decode, encode
from .exceptions import (
    DuplicateQualifierKeyError,
    EmptyComponentError,
    InvalidCharacterError,
    PurlError,
)

_QUALIFIER_KEY = re.compile(r"[a-z0-9._-]+")


class KnownQualifierNames:
    """Qualifier keys with a meaning defined for every package type."""

    REPOSITORY_URL = "repository_url"
    DOWNLOAD_URL = "download_url"
    VCS_URL = "vcs_url"
    FILE_NAME = "file_name"
    CHECKSUM = "checksum"


def normalize_qualifier_key(raw_key: Any) -> str:
    """Trims and ASCII-lowercases a qualifier key, then checks its grammar.

    Raises:
        EmptyComponentError: If the key is empty.
        InvalidCharacterError: If the key has characters outside
            ``[a-z0-9._-]`` or starts with a digit or an underscore.
    """
    key = str(raw_key).strip()
    if not key:
        raise EmptyComponentError("qualifier key must not be empty", component="qualifiers")
    if not key.isascii():
        raise InvalidCharacterError(f'qualifier "{key}" contains an illegal character', component="qualifiers")
    key = key.lower()
    if not _QUALIFIER_KEY.fullmatch(key):
        raise InvalidCharacterError(f'qualifier "{key}" contains an illegal character', component="qualifiers")
    if key[0].isdigit():
        raise InvalidCharacterError(f'qualifier "{key}" cannot start with a number', component="qualifiers")
    if key[0] == "_":
        raise InvalidCharacterError(f'qualifier "{key}" cannot start with an underscore', component="qualifiers")
    return key


class QualifierMap(Mapping):
    """An immutable, key-sorted mapping of qualifier keys to values.

    Keys are case-insensitive and stored lowercase. A key may be given only
    once; a repeat raises `DuplicateQualifierKeyError` instead of overwriting.
    Values are trimmed, and a key whose value is empty is treated as absent.
    """

    __slots__ = ("_entries",)

    def __init__(self, pairs: Iterable[Tuple[Any, Any]] = ()):
        seen = set()
        entries = {}
        for raw_key, raw_value in pairs:
            key = normalize_qualifier_key(raw_key)
            if key in seen:
                raise DuplicateQualifierKeyError(key)
            seen.add(key)
            value = "" if raw_value is None else str(raw_value).strip()
            if value:
                entries[key] = value
        self._entries = MappingProxyType(dict(sorted(entries.items())))

    @classmethod
    def from_string(cls, query: str) -> QualifierMap:
        """Parses a ``key=value&key=value`` string.

        Pairs are split on the first ``=``. Keys are taken as written;
        values are percent-decoded. Empty pairs are skipped.

        Raises:
            InvalidCharacterError: If the string holds a raw ``?`` or ``#``.
            MalformedEncodingError: If a value has a bad percent-escape.
            DuplicateQualifierKeyError: If a key repeats.
        """
        for reserved in ("?", "#"):
            if reserved in query:
                raise InvalidCharacterError(
                    f'qualifiers cannot contain an unencoded "{reserved}"', component="qualifiers"
                )
        pairs = []
        for item in query.split("&"):
            if not item:
                continue
            key, _, value = item.partition("=")
            pairs.append((key, decode(value, "qualifiers")))
        return cls(pairs)

    @classmethod
    def coerce(cls, value: Any) -> QualifierMap:
        """Builds a map from a mapping, an iterable of pairs, a query string or None."""
        if value is None:
            return cls()
        if isinstance(value, QualifierMap):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls(value.items())
        if isinstance(value, (list, tuple)):
            return cls(value)
        raise PurlError('"qualifiers" must be a mapping', component="qualifiers")

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(dict),
        )

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return dict(self._entries) == dict(other.items())

    def __hash__(self) -> int:
        return hash(tuple(self._entries.items()))

    def __repr__(self) -> str:
        return f"QualifierMap({dict(self._entries)!r})"

    def with_entry(self, key: str, value: Optional[str]) -> QualifierMap:
        """Returns a new map with ``key`` set to ``value``; an empty value removes it."""
        normalized = normalize_qualifier_key(key)
        pairs = [(k, v) for k, v in self._entries.items() if k != normalized]
        pairs.append((normalized, value))
        return QualifierMap(pairs)

    def without(self, key: str) -> QualifierMap:
        """Returns a new map without ``key``."""
        normalized = normalize_qualifier_key(key)
        return QualifierMap((k, v) for k, v in self._entries.items() if k != normalized)

    def to_string(self) -> str:
        """Encodes the map as a canonical ``key=value&key=value`` string."""
        return "&".join(
            f"{encode(key, EncodingContext.QUALIFIER_KEY)}={encode(value, EncodingContext.QUALIFIER_VALUE)}"
            for key, value in self._entries.items()
        )
