"""Validation of normalized purl components.

Checks run in a fixed order: generic invariants, then the type's rule, then
a structural re-check of the normalized result. The first violation is
raised; nothing is returned on failure.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .exceptions import (
    EmptyComponentError,
    InvalidCharacterError,
    MissingNameError,
    MissingTypeError,
    TypeConstraintViolation,
)
from .purl_types import TYPE_PATTERN, TypeRule
from .qualifiers import normalize_qualifier_key


def validate_type(purl_type: Optional[str]) -> None:
    """The type is required, is made of ``[a-z0-9.+-]`` and does not start with a digit."""
    if not purl_type:
        raise MissingTypeError()
    if purl_type[0].isdigit():
        raise InvalidCharacterError(f'type "{purl_type}" cannot start with a number', component="type")
    if not TYPE_PATTERN.fullmatch(purl_type):
        raise InvalidCharacterError(f'type "{purl_type}" contains an illegal character', component="type")


def validate_name(name: Optional[str]) -> None:
    if name is None:
        raise MissingNameError()
    if not name:
        raise EmptyComponentError('"name" component is empty after normalization', component="name")


def _npm_style_id(components: Mapping[str, Any]) -> str:
    namespace = components.get("namespace")
    name = components.get("name") or ""
    return f"{namespace}/{name}" if namespace else name


def validate_by_type(components: Mapping[str, Any], rule: TypeRule) -> None:
    """Checks the constraints of a type's `TypeRule`.

    Raises:
        TypeConstraintViolation: On the first broken constraint.
    """
    purl_type = components.get("type")
    namespace = components.get("namespace")
    version = components.get("version")
    qualifiers = components.get("qualifiers") or {}

    def violation(message: str) -> TypeConstraintViolation:
        return TypeConstraintViolation(message, purl_type=purl_type)

    if rule.namespace_requirement == "required" and not namespace:
        raise violation(f'{purl_type} requires a "namespace" component')
    if rule.namespace_requirement == "prohibited" and namespace:
        raise violation(f'{purl_type} "namespace" component must be empty')
    if rule.version_required and not version:
        raise violation(f'{purl_type} requires a "version" component')

    checks = (
        (namespace, rule.namespace_patterns),
        (components.get("name"), rule.name_patterns),
        (version, rule.version_patterns),
    )
    for value, patterns in checks:
        if value is None:
            continue
        for pattern in patterns:
            if not pattern.matches(value):
                raise violation(pattern.message)

    purl_id = _npm_style_id(components)
    if purl_id.lower() in rule.reserved_names:
        raise violation(f'{purl_type} "name" component of "{purl_id.lower()}" is not allowed')
    if rule.max_id_length is not None and len(purl_id) > rule.max_id_length:
        raise violation(
            f'{purl_type} "namespace" and "name" components can not collectively be more '
            f"than {rule.max_id_length} characters"
        )

    if not namespace:
        for key in sorted(rule.qualifiers_requiring_namespace):
            if key in qualifiers:
                raise violation(f'{purl_type} requires a "namespace" component when a "{key}" qualifier is present')
    elif rule.namespace_requires_qualifiers and not qualifiers:
        raise violation(f'{purl_type} requires a "qualifiers" component when a namespace is present')


def _check_structure(components: Mapping[str, Any]) -> None:
    validate_name(components.get("name"))
    namespace = components.get("namespace")
    if namespace is not None and "" in namespace.split("/"):
        raise EmptyComponentError('"namespace" component has an empty segment', component="namespace")
    subpath = components.get("subpath")
    if subpath is not None and any(segment in ("", ".", "..") for segment in subpath.split("/")):
        raise EmptyComponentError('"subpath" component has an empty or relative segment', component="subpath")
    for key in components.get("qualifiers") or {}:
        normalize_qualifier_key(key)


def validate_components(components: Mapping[str, Any], rule: TypeRule) -> None:
    """Validates normalized components against the generic grammar and ``rule``.

    Raises:
        PurlError: The first violation found.
    """
    validate_type(components.get("type"))
    validate_name(components.get("name"))
    validate_by_type(components, rule)
    _check_structure(components)
