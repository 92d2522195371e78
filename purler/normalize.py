"""Normalization of purl components.

`normalize_components` turns raw components (parsed from a string or given
field by field) into their canonical values: first the rules shared by all
types, then the row of the type's `TypeRule`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .exceptions import PurlError
from .purl_types import TypeRegistry, TypeRule
from .qualifiers import QualifierMap

logger = logging.getLogger(__name__)


class SubpathParentPolicy(str, Enum):
    """What a ``..`` subpath segment does.

    DROP discards the segment, as the purl parsing rules say for ``.`` and
    ``..``. POP also removes the segment before it, like a filesystem path.
    """

    DROP = "drop"
    POP = "pop"


SUBPATH_PARENT_POLICY = SubpathParentPolicy.DROP


def _require_string(component: str, value: Any) -> None:
    if not isinstance(value, str):
        raise PurlError(f'"{component}" must be a string', component=component)


def _split_path(path: str) -> list:
    return [segment for segment in path.split("/") if segment]


def normalize_type(raw_type: Any) -> Optional[str]:
    """The type is case-insensitive; its canonical form is lowercase."""
    if raw_type is None:
        return None
    _require_string("type", raw_type)
    return raw_type.strip().lower() or None


def normalize_namespace(raw_namespace: Union[str, Sequence[str], None]) -> Optional[str]:
    """Joins namespace segments with ``/``, dropping empty ones.

    Accepts either a ``/``-separated string or a sequence of segments.
    """
    if raw_namespace is None:
        return None
    if not isinstance(raw_namespace, str):
        if not isinstance(raw_namespace, (list, tuple)):
            raise PurlError('"namespace" must be a string', component="namespace")
        for segment in raw_namespace:
            _require_string("namespace", segment)
        raw_namespace = "/".join(raw_namespace)
    return "/".join(_split_path(raw_namespace)) or None


def normalize_name(raw_name: Any) -> Optional[str]:
    """Trims the name.

    Returns None when no name was given and ``""`` when the name was only
    whitespace, so validation can tell the two apart.
    """
    if raw_name is None or raw_name == "":
        return None
    _require_string("name", raw_name)
    return raw_name.strip()


def normalize_version(raw_version: Any) -> Optional[str]:
    if raw_version is None:
        return None
    _require_string("version", raw_version)
    return raw_version.strip() or None


def normalize_subpath(
    raw_subpath: Any,
    policy: Union[SubpathParentPolicy, str, None] = None,
) -> Optional[str]:
    """Drops empty, blank and ``.`` segments and resolves ``..`` per ``policy``.

    Args:
        raw_subpath: A decoded ``/``-separated path.
        policy: How ``..`` is handled. Defaults to `SUBPATH_PARENT_POLICY`.

    Returns:
        The normalized path, or None if no segment is left.
    """
    if raw_subpath is None:
        return None
    _require_string("subpath", raw_subpath)
    policy = SubpathParentPolicy(policy or SUBPATH_PARENT_POLICY)
    segments = []
    for segment in raw_subpath.split("/"):
        if not segment.strip() or segment == ".":
            continue
        if segment == "..":
            if policy is SubpathParentPolicy.POP and segments:
                segments.pop()
            continue
        segments.append(segment)
    return "/".join(segments) or None


def normalize_qualifiers(raw_qualifiers: Any) -> Optional[QualifierMap]:
    """Coerces qualifiers into a `QualifierMap`; an empty map becomes None."""
    qualifiers = QualifierMap.coerce(raw_qualifiers)
    return qualifiers or None


def _fold(value: Optional[str], case: str) -> Optional[str]:
    if value is None or case == "preserve":
        return value
    return value.lower()


def apply_type_rule(components: Dict[str, Any], rule: TypeRule) -> Dict[str, Any]:
    """Applies a type's case folding, name rewriting and default qualifiers.

    Args:
        components: Components already through the generic normalization.
        rule: The row for the components' type.

    Returns:
        A new components dict.
    """
    result = dict(components)
    purl_type = result.get("type")

    result["namespace"] = _fold(result.get("namespace"), rule.namespace_case)
    result["version"] = _fold(result.get("version"), rule.version_case)

    name = _fold(result.get("name"), rule.name_case)
    qualifiers = result.get("qualifiers") or QualifierMap()
    if name and rule.lower_name_if_qualifier:
        key, needle = rule.lower_name_if_qualifier
        if needle in qualifiers.get(key, ""):
            name = name.lower()
    if name and rule.name_separator_rewrite:
        name = rule.name_separator_rewrite.apply(name)
    if name != result.get("name"):
        logger.debug(f"[{purl_type}] Normalized name '{result.get('name')}' -> '{name}'")
    result["name"] = name

    for key, value in rule.default_qualifiers:
        if key not in qualifiers:
            logger.debug(f"[{purl_type}] Injecting default qualifier {key}={value}")
            qualifiers = qualifiers.with_entry(key, value)
    result["qualifiers"] = qualifiers or None

    return result


def normalize_components(
    data: Mapping[str, Any],
    registry: TypeRegistry,
    subpath_parent_policy: Union[SubpathParentPolicy, str, None] = None,
) -> Dict[str, Any]:
    """Runs the generic normalization, then the type's rule.

    Keys of ``data`` that are not purl components are passed through untouched.

    Returns:
        A new dict with normalized components.
    """
    components = dict(data)
    purl_type = normalize_type(components.get("type"))
    components["type"] = purl_type
    components["namespace"] = normalize_namespace(components.get("namespace"))
    components["name"] = normalize_name(components.get("name"))
    components["version"] = normalize_version(components.get("version"))
    components["qualifiers"] = normalize_qualifiers(components.get("qualifiers"))
    components["subpath"] = normalize_subpath(components.get("subpath"), subpath_parent_policy)
    return apply_type_rule(components, registry.rule_for(purl_type))
