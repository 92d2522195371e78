"""PURL model and the parse/build entry points."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationInfo, model_validator

from . import serializer
from .exceptions import PurlError
from .normalize import SubpathParentPolicy, normalize_components
from .parser import parse_components
from .purl_types import TypeRegistry, default_registry
from .qualifiers import QualifierMap
from .validate import validate_components


class PackageURL(BaseModel):
    """Represents a Package URL (purl).

    A purl is a URI that represents a software package in a mostly
    unambiguous way.
    See: https://github.com/package-url/purl-spec

    Instances are immutable. Every way of creating one, including plain
    ``PackageURL(type=..., name=...)``, runs normalization and validation;
    an invalid purl raises a `PurlError` and is never constructed.

    Attributes:
        type: The package "type" or package management system.
        namespace: Some name prefix such as a Maven groupid, a Docker image owner, etc.
            Segments are joined with "/".
        name: The name of the package.
        version: The version of the package.
        qualifiers: Extra qualifying data for a package such as an OS, architecture, etc.
        subpath: Extra subpath within a package, relative to the package root.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    namespace: Optional[str] = None
    name: str
    version: Optional[str] = None
    qualifiers: Optional[QualifierMap] = None
    subpath: Optional[str] = None

    _registry: Optional[TypeRegistry] = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def normalize_and_validate(cls, data: Any, info: ValidationInfo) -> Any:
        """Normalizes the raw components and validates them against their type's rule.

        The validation context may carry a ``registry`` (`TypeRegistry`) and a
        ``subpath_parent_policy``.
        """
        if isinstance(data, BaseModel):
            data = dict(data)
        if not isinstance(data, Mapping):
            raise TypeError(f"Cannot build a PackageURL from {type(data).__name__}")
        context = info.context or {}
        registry = context.get("registry")
        if registry is None:
            registry = default_registry()
        components = normalize_components(data, registry, context.get("subpath_parent_policy"))
        validate_components(components, registry.rule_for(components["type"]))
        return components

    @classmethod
    def from_string(cls, purl_str: str, registry: Optional[TypeRegistry] = None) -> PackageURL:
        """Creates a PackageURL by parsing a purl string. See `parse`."""
        return parse(purl_str, registry=registry)

    @property
    def registry(self) -> TypeRegistry:
        """The type rules this PackageURL was validated with."""
        return self._registry if self._registry is not None else default_registry()

    @property
    def namespace_segments(self) -> Tuple[str, ...]:
        return tuple(self.namespace.split("/")) if self.namespace else ()

    @property
    def subpath_segments(self) -> Tuple[str, ...]:
        return tuple(self.subpath.split("/")) if self.subpath else ()

    def components(self) -> Dict[str, Any]:
        """The six purl components as a dict."""
        return dict(self)

    def replace(self, registry: Optional[TypeRegistry] = None, **changes: Any) -> PackageURL:
        """Returns a new PackageURL with some components changed.

        The result goes through normalization and validation again.

        Args:
            registry: Type rules to apply. Defaults to the rules this PackageURL
                was validated with.
            **changes: Components to change, e.g. ``version="2.0.0"``.
        """
        return _finalize({**self.components(), **changes}, registry if registry is not None else self._registry)

    def with_qualifier(self, key: str, value: Optional[str], registry: Optional[TypeRegistry] = None) -> PackageURL:
        """Returns a new PackageURL with qualifier ``key`` set; an empty value removes it."""
        return self.replace(registry=registry, qualifiers=(self.qualifiers or QualifierMap()).with_entry(key, value))

    def without_qualifier(self, key: str, registry: Optional[TypeRegistry] = None) -> PackageURL:
        return self.replace(registry=registry, qualifiers=(self.qualifiers or QualifierMap()).without(key))

    def to_string(self) -> str:
        """Encodes the PackageURL into its canonical string.

        Returns:
            The canonical purl string.
        """
        return serializer.to_string(self)

    def to_url_component(self) -> str:
        """Encodes the PackageURL into a string for use in a URL path, e.g. an API route.

        Returns:
            A URI-encoded string representation of the PackageURL.
        """
        return serializer.to_url_component(self)

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageURL):
            return NotImplemented
        return self.components() == other.components()

    def __hash__(self) -> int:
        return hash(tuple(self.components().items()))


def _finalize(
    data: Mapping[str, Any],
    registry: Optional[TypeRegistry] = None,
    subpath_parent_policy: Union[SubpathParentPolicy, str, None] = None,
) -> PackageURL:
    context = {"registry": registry, "subpath_parent_policy": subpath_parent_policy}
    purl = PackageURL.model_validate(dict(data), context=context)
    purl._registry = registry
    return purl


def parse(
    purl_str: str,
    registry: Optional[TypeRegistry] = None,
    subpath_parent_policy: Union[SubpathParentPolicy, str, None] = None,
) -> PackageURL:
    """Parses, normalizes and validates a purl string.

    Args:
        purl_str: The purl string, e.g. ``pkg:pypi/Django_REST@3.0``.
        registry: Type rules to apply. Defaults to the built-in registry.
        subpath_parent_policy: How ``..`` subpath segments are handled.
            Defaults to `SubpathParentPolicy.DROP`.

    Returns:
        The normalized PackageURL.

    Raises:
        TypeError: If ``purl_str`` is not a string.
        PurlError: If the string is not a valid purl.
    """
    components = parse_components(purl_str, registry=registry)
    return _finalize(dict(components), registry, subpath_parent_policy)


def try_parse(purl_str: str, registry: Optional[TypeRegistry] = None) -> Optional[PackageURL]:
    """Like `parse`, but returns None instead of raising a `PurlError`."""
    try:
        return parse(purl_str, registry=registry)
    except PurlError:
        return None


def is_valid(purl_str: str, registry: Optional[TypeRegistry] = None) -> bool:
    return try_parse(purl_str, registry=registry) is not None


def build(
    type: str,
    namespace: Union[str, Sequence[str], None] = None,
    name: Optional[str] = None,
    version: Optional[str] = None,
    qualifiers: Union[Mapping[str, Any], str, None] = None,
    subpath: Optional[str] = None,
    registry: Optional[TypeRegistry] = None,
    subpath_parent_policy: Union[SubpathParentPolicy, str, None] = None,
) -> PackageURL:
    """Creates a PackageURL from components given field by field.

    Values are taken as decoded text; they are never percent-decoded.

    Raises:
        PurlError: If the components do not form a valid purl.
    """
    return _finalize(
        {
            "type": type,
            "namespace": namespace,
            "name": name,
            "version": version,
            "qualifiers": qualifiers,
            "subpath": subpath,
        },
        registry,
        subpath_parent_policy,
    )


to_string = serializer.to_string
