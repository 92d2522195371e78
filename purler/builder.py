"""Fluent construction of PackageURL objects."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .purl import PackageURL, build
from .purl_types import TypeRegistry


class PackageURLBuilder:
    """Collects components step by step and creates a `PackageURL` on `build`.

    Setters return the builder so calls can be chained::

        PackageURLBuilder.npm().namespace("@babel").name("core").version("7.24.0").build()

    Nothing is checked until `build`, which normalizes and validates like
    every other way of creating a PackageURL.
    """

    def __init__(self):
        self._type: Optional[str] = None
        self._namespace: Union[str, Sequence[str], None] = None
        self._name: Optional[str] = None
        self._version: Optional[str] = None
        self._qualifiers: List[Tuple[str, Any]] = []
        self._subpath: Optional[str] = None
        self._registry: Optional[TypeRegistry] = None

    def type(self, purl_type: str) -> PackageURLBuilder:
        self._type = purl_type
        return self

    def namespace(self, namespace: Union[str, Sequence[str], None]) -> PackageURLBuilder:
        self._namespace = namespace
        return self

    def name(self, name: str) -> PackageURLBuilder:
        self._name = name
        return self

    def version(self, version: Optional[str]) -> PackageURLBuilder:
        self._version = version
        return self

    def qualifiers(self, qualifiers: Optional[Mapping[str, Any]]) -> PackageURLBuilder:
        """Replaces all qualifiers collected so far."""
        self._qualifiers = list((qualifiers or {}).items())
        return self

    def qualifier(self, key: str, value: Any) -> PackageURLBuilder:
        """Adds one qualifier. Adding the same key twice fails at `build`."""
        self._qualifiers.append((key, value))
        return self

    def subpath(self, subpath: Optional[str]) -> PackageURLBuilder:
        self._subpath = subpath
        return self

    def build(self, registry: Optional[TypeRegistry] = None) -> PackageURL:
        """Creates the PackageURL.

        Args:
            registry: Type rules to apply. Defaults to the rules of the purl the
                builder started from, or the built-in registry.

        Raises:
            PurlError: If the collected components do not form a valid purl.
        """
        return build(
            type=self._type,
            namespace=self._namespace,
            name=self._name,
            version=self._version,
            qualifiers=list(self._qualifiers),
            subpath=self._subpath,
            registry=registry if registry is not None else self._registry,
        )

    @classmethod
    def create(cls) -> PackageURLBuilder:
        return cls()

    @classmethod
    def from_purl(cls, purl: PackageURL) -> PackageURLBuilder:
        """Starts a builder pre-filled with the components of ``purl``."""
        builder = (
            cls()
            .type(purl.type)
            .namespace(purl.namespace)
            .name(purl.name)
            .version(purl.version)
            .qualifiers(purl.qualifiers)
            .subpath(purl.subpath)
        )
        builder._registry = purl.registry
        return builder

    @classmethod
    def for_type(cls, purl_type: str) -> PackageURLBuilder:
        return cls().type(purl_type)

    @classmethod
    def npm(cls) -> PackageURLBuilder:
        return cls.for_type("npm")

    @classmethod
    def pypi(cls) -> PackageURLBuilder:
        return cls.for_type("pypi")

    @classmethod
    def maven(cls) -> PackageURLBuilder:
        return cls.for_type("maven")

    @classmethod
    def gem(cls) -> PackageURLBuilder:
        return cls.for_type("gem")

    @classmethod
    def golang(cls) -> PackageURLBuilder:
        return cls.for_type("golang")

    @classmethod
    def cargo(cls) -> PackageURLBuilder:
        return cls.for_type("cargo")

    @classmethod
    def nuget(cls) -> PackageURLBuilder:
        return cls.for_type("nuget")

    @classmethod
    def composer(cls) -> PackageURLBuilder:
        return cls.for_type("composer")
