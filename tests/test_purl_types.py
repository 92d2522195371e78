"""Tests for the type rule registry and the built-in type rules."""
import pytest
from pydantic import ValidationError

from purler import PackageURLBuilder, build, parse
from purler.exceptions import InvalidCharacterError, TypeConstraintViolation
from purler.parser import parse_components
from purler.purl_types import (
    BUILTIN_RULES,
    GENERIC_RULE,
    ComponentPattern,
    SeparatorRewrite,
    TypeRegistry,
    TypeRule,
    default_registry,
)


def test_default_registry_is_shared() -> None:
    """Test that the default registry is built once and holds every built-in row."""
    registry = default_registry()
    assert registry is default_registry()
    assert len(registry) == len(BUILTIN_RULES)
    assert {"npm", "pypi", "maven", "golang", "docker", "swift"} <= set(registry)


def test_registry_is_read_only() -> None:
    """Test that the registry cannot be mutated."""
    registry = default_registry()
    with pytest.raises(TypeError):
        registry["custom"] = GENERIC_RULE


def test_unknown_type_uses_generic_rule() -> None:
    """Test that types without a row are legal and left untouched."""
    assert default_registry().rule_for("unknown-type") is GENERIC_RULE
    purl = parse("pkg:unknown-type/Some/Name@V1")
    assert purl.to_string() == "pkg:unknown-type/Some/Name@V1"


def test_type_rule_is_frozen() -> None:
    """Test that rows cannot be changed after creation."""
    with pytest.raises(ValidationError):
        GENERIC_RULE.name_case = "lower"


@pytest.mark.parametrize("purl_type", ["NPM", "9p", "a_b", ""])
def test_type_rule_rejects_bad_type(purl_type) -> None:
    """Test that a rule's type must be a lowercase purl type."""
    with pytest.raises(ValidationError):
        TypeRule(type=purl_type)


def test_separator_rewrite() -> None:
    """Test replacing single separators and collapsing runs."""
    assert SeparatorRewrite(chars="-", replacement="_").apply("a--b") == "a__b"
    assert SeparatorRewrite(chars="._-", replacement="-", collapse_runs=True).apply("a._-b.c") == "a-b-c"


def test_component_pattern_full_match() -> None:
    """Test that patterns must match the whole value."""
    pattern = ComponentPattern(pattern="[a-z]+", message="lowercase only")
    assert pattern.matches("abc")
    assert not pattern.matches("abc1")


def test_extend_registry_with_default_qualifiers() -> None:
    """Test that an extended registry adds rows and injects default qualifiers."""
    registry = default_registry().extend(
        TypeRule(type="acme", name_case="lower", default_qualifiers=(("repository_url", "https://repo.acme.test"),)),
    )
    assert "acme" in registry
    assert "acme" not in default_registry()

    purl = parse("pkg:acme/Widget@1.0", registry=registry)
    assert purl.name == "widget"
    assert purl.qualifiers == {"repository_url": "https://repo.acme.test"}

    explicit = build("acme", name="widget", qualifiers={"repository_url": "https://mirror.test"}, registry=registry)
    assert explicit.qualifiers["repository_url"] == "https://mirror.test"


def test_extend_registry_replaces_row() -> None:
    """Test that extending with an existing type replaces its row."""
    registry = default_registry().extend(TypeRule(type="npm"))
    assert parse("pkg:npm/Foo", registry=registry).name == "Foo"
    assert parse("pkg:npm/Foo").name == "foo"


@pytest.mark.parametrize(
    "purl_str, canonical",
    [
        ("pkg:alpm/Arch/Pacman@6.0.1-1", "pkg:alpm/arch/pacman@6.0.1-1"),
        ("pkg:apk/Alpine/Curl@7.83.0-r0", "pkg:apk/alpine/curl@7.83.0-r0"),
        ("pkg:bitbucket/Birkenfeld/Pygments-Main@244fd47e07d1", "pkg:bitbucket/birkenfeld/pygments-main@244fd47e07d1"),
        ("pkg:bitnami/WordPress@6.2.0", "pkg:bitnami/wordpress@6.2.0"),
        ("pkg:cargo/Rand@0.7.2", "pkg:cargo/Rand@0.7.2"),
        ("pkg:composer/Laravel/Laravel@5.5.0", "pkg:composer/laravel/laravel@5.5.0"),
        ("pkg:deb/Debian/Curl@7.50.3-1", "pkg:deb/debian/curl@7.50.3-1"),
        ("pkg:docker/Customer/DockerImage@sha256:244fd47e07d10", "pkg:docker/customer/dockerimage@sha256:244fd47e07d10"),
        ("pkg:gem/Jruby-Launcher@1.1.2", "pkg:gem/Jruby-Launcher@1.1.2"),
        ("pkg:github/Package-URL/Purl-Spec@244fd47e07d1", "pkg:github/package-url/purl-spec@244fd47e07d1"),
        ("pkg:gitlab/Gitlab-Org/Gitlab@v16", "pkg:gitlab/gitlab-org/gitlab@v16"),
        ("pkg:hex/Phoenix@1.7.0", "pkg:hex/phoenix@1.7.0"),
        ("pkg:huggingface/distilbert-base-uncased@043235D6088ECD3DD5FB5CA3592B6913FD516027", "pkg:huggingface/distilbert-base-uncased@043235d6088ecd3dd5fb5ca3592b6913fd516027"),
        ("pkg:luarocks/Hisham/LuaFileSystem@1.8.0-1RC", "pkg:luarocks/Hisham/LuaFileSystem@1.8.0-1rc"),
        ("pkg:mlflow/CreditFraud@3?repository_url=https://adb-5245.12.azuredatabricks.net/api/2.0/mlflow", "pkg:mlflow/creditfraud@3?repository_url=https%3A%2F%2Fadb-5245.12.azuredatabricks.net%2Fapi%2F2.0%2Fmlflow"),
        ("pkg:mlflow/CreditFraud@3", "pkg:mlflow/CreditFraud@3"),
        ("pkg:nuget/EnterpriseLibrary.Common@6.0.1304", "pkg:nuget/EnterpriseLibrary.Common@6.0.1304"),
        ("pkg:oci/Debian@sha256:244fd47e07d10", "pkg:oci/debian@sha256:244fd47e07d10"),
        ("pkg:pub/Flutter-Bloc@8.1.3", "pkg:pub/flutter_bloc@8.1.3"),
        ("pkg:pypi/Zope.Interface@5.0", "pkg:pypi/zope-interface@5.0"),
        ("pkg:qpkg/BlackBerry/Libcurl@7.82.0", "pkg:qpkg/blackberry/Libcurl@7.82.0"),
        ("pkg:rpm/Fedora/Curl@7.50.3-1.fc25", "pkg:rpm/fedora/Curl@7.50.3-1.fc25"),
        ("pkg:swift/github.com/Alamofire/Alamofire@5.4.3", "pkg:swift/github.com/Alamofire/Alamofire@5.4.3"),
        ("pkg:cran/A3@0.9.1", "pkg:cran/A3@0.9.1"),
        ("pkg:conan/openssl@3.0.3", "pkg:conan/openssl@3.0.3"),
        ("pkg:conan/openssl.org/openssl@3.0.3?channel=stable&user=bincrafters", "pkg:conan/openssl.org/openssl@3.0.3?channel=stable&user=bincrafters"),
    ],
)
def test_builtin_type_normalization(purl_str, canonical) -> None:
    """Test the canonical form produced by each built-in row."""
    assert parse(purl_str).to_string() == canonical


@pytest.mark.parametrize(
    "purl_str",
    [
        "pkg:maven/log4j-core@2.17.1",
        "pkg:maven/org.apache/a:b@1",
        "pkg:swift/Alamofire@5.4.3",
        "pkg:swift/github.com/Alamofire/Alamofire",
        "pkg:cran/A3",
        "pkg:mlflow/ns/model@1",
        "pkg:oci/ns/debian@1",
        "pkg:conan/openssl@3.0.3?channel=stable",
        "pkg:conan/openssl.org/openssl@3.0.3",
        "pkg:golang/github.com/gorilla/context@v1.1",
        "pkg:pub/flutter.bloc@1.0",
        "pkg:npm/.hidden",
        "pkg:npm/_private",
        "pkg:npm/%40scope%20x/name",
        "pkg:npm/na~me",
        "pkg:npm/node_modules",
        "pkg:npm/Favicon.ico",
        "pkg:npm/http2",
        "pkg:npm/na%20me",
    ],
)
def test_builtin_type_constraints(purl_str) -> None:
    """Test that each built-in row rejects what its ecosystem forbids."""
    with pytest.raises(TypeConstraintViolation) as excinfo:
        parse(purl_str)
    assert excinfo.value.purl_type == purl_str[4:].split("/")[0]


def test_npm_legacy_core_module_names_allowed() -> None:
    """Test that npm names published before Node took them stay valid."""
    assert parse("pkg:npm/fs@0.0.2").name == "fs"
    assert parse("pkg:npm/crypto@1.0.1").name == "crypto"


def test_npm_id_length_limit() -> None:
    """Test the npm 214 character limit on namespace/name."""
    assert build("npm", name="a" * 214).name == "a" * 214
    with pytest.raises(TypeConstraintViolation):
        build("npm", name="a" * 215)
    with pytest.raises(TypeConstraintViolation):
        build("npm", namespace="@" + "s" * 100, name="n" * 113)


def test_golang_versions() -> None:
    """Test that only "v"-prefixed golang versions must be semver."""
    assert parse("pkg:golang/golang.org/x/net@v0.17.0").version == "v0.17.0"
    assert parse("pkg:golang/golang.org/x/net@v0.0.0-20231010-abc").version == "v0.0.0-20231010-abc"
    assert parse("pkg:golang/golang.org/x/net@abc123").version == "abc123"


def test_pub_name_rewrite_to_empty_fails() -> None:
    """Test that pub rejects names outside [a-z0-9_] after rewriting."""
    assert build("pub", name="Flutter-Bloc").name == "flutter_bloc"
    with pytest.raises(TypeConstraintViolation):
        build("pub", name="bloc!")


def test_custom_registry_kept_across_changes() -> None:
    """Test that replace and the qualifier helpers reuse the purl's own registry."""
    registry = default_registry().extend(TypeRule(type="maven"))
    purl = parse("pkg:maven/log4j-core@2.17.1", registry=registry)
    assert purl.registry is registry

    with_classifier = purl.with_qualifier("classifier", "sources")
    assert with_classifier.to_string() == "pkg:maven/log4j-core@2.17.1?classifier=sources"
    assert with_classifier.registry is registry
    assert with_classifier.without_qualifier("classifier") == purl
    assert purl.replace(version="2.20.0").version == "2.20.0"
    assert PackageURLBuilder.from_purl(purl).version("2.21.0").build().registry is registry

    with pytest.raises(TypeConstraintViolation):
        purl.with_qualifier("classifier", "sources", registry=default_registry())


def test_equality_ignores_registry() -> None:
    """Test that purls compare by their components only."""
    registry = default_registry().extend(TypeRule(type="acme"))
    assert parse("pkg:npm/lodash", registry=registry) == parse("pkg:npm/lodash")
    assert hash(parse("pkg:npm/lodash", registry=registry)) == hash(parse("pkg:npm/lodash"))


def test_empty_registry_is_not_default() -> None:
    """Test that an empty registry applies only the generic rule."""
    empty = TypeRegistry()
    assert len(empty) == 0
    assert parse("pkg:npm/Foo", registry=empty).name == "Foo"
    assert build("maven", name="log4j-core", registry=empty).namespace is None
    with pytest.raises(InvalidCharacterError):
        parse_components("pkg:docker/nginx@1.25@sha256:abc", registry=empty)
