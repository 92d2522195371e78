"""Per-type normalization and validation rules.

Every package type is one `TypeRule` row in a read-only `TypeRegistry`.
The generic routines in `purler.normalize` and `purler.validate` read the
row; no type gets code of its own. Types without a row are legal and get
`GENERIC_RULE`.

See https://github.com/package-url/purl-spec/blob/master/PURL-TYPES.rst
"""

from __future__ import annotations

import functools
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import FrozenSet, Iterable, Iterator, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

Case = Literal["preserve", "lower"]

TYPE_PATTERN = re.compile(r"[a-z0-9.+-]+")

# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
SEMVER_PATTERN = (
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?"
)

# Node.js core modules that are not grandfathered in as legacy npm package names.
NPM_BUILTIN_NAMES = frozenset({
    "async_hooks", "child_process", "cluster", "console", "constants", "dgram",
    "diagnostics_channel", "dns", "domain", "http2", "https", "inspector", "module",
    "net", "perf_hooks", "process", "punycode", "querystring", "readline", "repl",
    "stream", "string_decoder", "sys", "timers", "tls", "trace_events", "tty", "v8",
    "vm", "wasi", "worker_threads", "zlib",
})


class SeparatorRewrite(BaseModel):
    """Replaces separator characters in a name.

    Attributes:
        chars: Every character in this string is a separator.
        replacement: What each separator (or run of separators) becomes.
        collapse_runs: Whether a run of separators becomes a single replacement.
    """

    model_config = ConfigDict(frozen=True)

    chars: str
    replacement: str
    collapse_runs: bool = False

    def apply(self, value: str) -> str:
        pattern = f"[{re.escape(self.chars)}]" + ("+" if self.collapse_runs else "")
        return re.sub(pattern, self.replacement, value)


class ComponentPattern(BaseModel):
    """A full-match regex a normalized component must satisfy, with its error message."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    message: str

    def matches(self, value: str) -> bool:
        return re.fullmatch(self.pattern, value, flags=re.DOTALL) is not None


class TypeRule(BaseModel):
    """Normalization and validation rules for one package type.

    Attributes:
        type: The package type this row governs.
        namespace_requirement: Whether a namespace is optional, required or prohibited.
        namespace_case: Case folding applied to the namespace.
        name_case: Case folding applied to the name.
        version_case: Case folding applied to the version.
        name_separator_rewrite: Separator rewriting applied to the name after case folding.
        default_qualifiers: Qualifiers injected when absent.
        version_required: Whether a version is mandatory.
        version_separator: Which ``@`` of the last path segment starts the version.
        name_patterns: Checks on the normalized name.
        namespace_patterns: Checks on the normalized namespace.
        version_patterns: Checks on the normalized version.
        reserved_names: ``namespace/name`` ids (lowercase) that may not be used.
        max_id_length: Maximum length of the ``namespace/name`` id.
        lower_name_if_qualifier: ``(key, substring)``; lowercase the name when
            the qualifier value contains the substring.
        qualifiers_requiring_namespace: Qualifier keys only allowed with a namespace.
        namespace_requires_qualifiers: Whether a namespace needs at least one qualifier.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    namespace_requirement: Literal["optional", "required", "prohibited"] = "optional"
    namespace_case: Case = "preserve"
    name_case: Case = "preserve"
    version_case: Case = "preserve"
    name_separator_rewrite: Optional[SeparatorRewrite] = None
    default_qualifiers: Tuple[Tuple[str, str], ...] = ()
    version_required: bool = False
    version_separator: Literal["last", "first"] = "last"
    name_patterns: Tuple[ComponentPattern, ...] = ()
    namespace_patterns: Tuple[ComponentPattern, ...] = ()
    version_patterns: Tuple[ComponentPattern, ...] = ()
    reserved_names: FrozenSet[str] = frozenset()
    max_id_length: Optional[int] = None
    lower_name_if_qualifier: Optional[Tuple[str, str]] = None
    qualifiers_requiring_namespace: FrozenSet[str] = frozenset()
    namespace_requires_qualifiers: bool = False

    @field_validator("type")
    @classmethod
    def check_type(cls, value: str) -> str:
        if not TYPE_PATTERN.fullmatch(value) or value[0].isdigit():
            raise ValueError(f"'{value}' is not a valid lowercase purl type")
        return value


GENERIC_RULE = TypeRule(type="generic")


def _lowercased(purl_type: str, **rules) -> TypeRule:
    return TypeRule(type=purl_type, namespace_case="lower", name_case="lower", **rules)


_NPM_URL_FRIENDLY = "[A-Za-z0-9._~'!()*-]+"

BUILTIN_RULES: Tuple[TypeRule, ...] = (
    _lowercased("alpm"),
    _lowercased("apk"),
    _lowercased("bitbucket"),
    TypeRule(type="bitnami", name_case="lower"),
    TypeRule(type="cargo"),
    TypeRule(type="cocoapods"),
    _lowercased("composer"),
    TypeRule(
        type="conan",
        qualifiers_requiring_namespace=frozenset({"channel"}),
        namespace_requires_qualifiers=True,
    ),
    TypeRule(type="conda"),
    TypeRule(type="cpan"),
    TypeRule(type="cran", version_required=True),
    _lowercased("deb"),
    # Tag-then-digest references such as "nginx@1.25@sha256:..." keep the
    # digest inside the version.
    _lowercased("docker", version_separator="first"),
    TypeRule(type="gem"),
    TypeRule(type="generic"),
    _lowercased("github"),
    _lowercased("gitlab"),
    # Go module paths are case-sensitive.
    TypeRule(
        type="golang",
        version_patterns=(
            ComponentPattern(
                pattern=f"(?!v).*|v{SEMVER_PATTERN}",
                message='golang "version" component starting with a "v" must be followed by a valid semver version',
            ),
        ),
    ),
    TypeRule(type="hackage"),
    _lowercased("hex"),
    TypeRule(type="huggingface", version_case="lower"),
    TypeRule(type="luarocks", version_case="lower"),
    TypeRule(
        type="maven",
        namespace_requirement="required",
        name_patterns=(ComponentPattern(pattern="[^:]+", message='maven "name" component cannot contain ":"'),),
    ),
    TypeRule(
        type="mlflow",
        namespace_requirement="prohibited",
        lower_name_if_qualifier=("repository_url", "databricks"),
    ),
    # pnpm ids put peer versions after the first "@", e.g.
    # "next@14.2.10(react-dom@18.3.1(react@18.3.1))".
    _lowercased(
        "npm",
        version_separator="first",
        name_patterns=(
            ComponentPattern(pattern="[^._].*", message='npm "name" component cannot start with a period or an underscore'),
            ComponentPattern(pattern=_NPM_URL_FRIENDLY, message='npm "name" component can only contain URL-friendly characters'),
            ComponentPattern(pattern="[^~'!()*]+", message='npm "name" component can not contain special characters ("~\'!()*")'),
        ),
        namespace_patterns=(
            ComponentPattern(pattern="[^._].*", message='npm "namespace" component cannot start with a period or an underscore'),
            ComponentPattern(pattern=r"\S(.*\S)?", message='npm "namespace" component cannot contain leading or trailing spaces'),
            ComponentPattern(pattern=f"@?{_NPM_URL_FRIENDLY}", message='npm "namespace" component can only contain URL-friendly characters'),
        ),
        reserved_names=frozenset({"node_modules", "favicon.ico"}) | NPM_BUILTIN_NAMES,
        max_id_length=214,
    ),
    TypeRule(type="nuget"),
    TypeRule(type="oci", namespace_requirement="prohibited", name_case="lower"),
    TypeRule(
        type="pub",
        name_case="lower",
        name_separator_rewrite=SeparatorRewrite(chars="-", replacement="_"),
        name_patterns=(ComponentPattern(pattern="[a-z0-9_]+", message='pub "name" component may only contain [a-z0-9_] characters'),),
    ),
    # PEP 503 name normalization.
    _lowercased("pypi", name_separator_rewrite=SeparatorRewrite(chars="._-", replacement="-", collapse_runs=True)),
    TypeRule(type="qpkg", namespace_case="lower"),
    TypeRule(type="rpm", namespace_case="lower"),
    TypeRule(type="swid"),
    TypeRule(type="swift", namespace_requirement="required", version_required=True),
)


class TypeRegistry(Mapping):
    """A read-only mapping of package type to `TypeRule`."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[TypeRule] = ()):
        self._rules = MappingProxyType({rule.type: rule for rule in rules})

    def __getitem__(self, purl_type: str) -> TypeRule:
        return self._rules[purl_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def rule_for(self, purl_type: Optional[str]) -> TypeRule:
        """Returns the rule for ``purl_type``, or `GENERIC_RULE` for unknown types."""
        return self._rules.get(purl_type, GENERIC_RULE)

    def extend(self, *rules: TypeRule) -> TypeRegistry:
        """Returns a new registry with ``rules`` added, replacing rows for the same type."""
        return TypeRegistry((*self._rules.values(), *rules))


@functools.lru_cache(maxsize=None)
def default_registry() -> TypeRegistry:
    """The process-wide registry of built-in rules, built on first use."""
    return TypeRegistry(BUILTIN_RULES)
