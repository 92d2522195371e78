"""Purler: Package URL parsing, normalization and validation."""

from .builder import PackageURLBuilder
from .codec import EncodingContext, decode, encode
from .config import configure_logging
from .exceptions import (
    DuplicateQualifierKeyError,
    EmptyComponentError,
    EncodingError,
    InvalidCharacterError,
    MalformedEncodingError,
    MissingNameError,
    MissingSchemeError,
    MissingTypeError,
    ParseError,
    PurlError,
    TypeConstraintViolation,
)
from .normalize import SubpathParentPolicy
from .purl import PackageURL, build, is_valid, parse, to_string, try_parse
from .purl_types import TypeRegistry, TypeRule, default_registry
from .qualifiers import KnownQualifierNames, QualifierMap

__all__ = [
    "build",
    "configure_logging",
    "decode",
    "default_registry",
    "DuplicateQualifierKeyError",
    "EmptyComponentError",
    "encode",
    "EncodingContext",
    "EncodingError",
    "InvalidCharacterError",
    "is_valid",
    "KnownQualifierNames",
    "MalformedEncodingError",
    "MissingNameError",
    "MissingSchemeError",
    "MissingTypeError",
    "PackageURL",
    "PackageURLBuilder",
    "parse",
    "ParseError",
    "PurlError",
    "QualifierMap",
    "SubpathParentPolicy",
    "to_string",
    "try_parse",
    "TypeConstraintViolation",
    "TypeRegistry",
    "TypeRule",
]
