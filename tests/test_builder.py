"""Tests for the fluent PackageURL builder."""
import pytest

from purler import PackageURLBuilder, parse
from purler.exceptions import DuplicateQualifierKeyError, MissingNameError, TypeConstraintViolation


def test_builder_chain() -> None:
    """Test building a purl step by step."""
    purl = (
        PackageURLBuilder.create()
        .type("npm")
        .namespace("@Babel")
        .name("Core")
        .version("7.24.0")
        .qualifier("repository_url", "https://registry.npmjs.org")
        .subpath("lib/index.js")
        .build()
    )
    assert purl.to_string() == (
        "pkg:npm/%40babel/core@7.24.0?repository_url=https%3A%2F%2Fregistry.npmjs.org#lib/index.js"
    )


@pytest.mark.parametrize(
    "preset, purl_type",
    [
        (PackageURLBuilder.npm, "npm"),
        (PackageURLBuilder.pypi, "pypi"),
        (PackageURLBuilder.gem, "gem"),
        (PackageURLBuilder.golang, "golang"),
        (PackageURLBuilder.cargo, "cargo"),
        (PackageURLBuilder.nuget, "nuget"),
        (PackageURLBuilder.composer, "composer"),
    ],
)
def test_builder_presets(preset, purl_type) -> None:
    """Test that each preset fixes the type."""
    purl = preset().namespace("acme" if purl_type == "composer" else None).name("widget").build()
    assert purl.type == purl_type


def test_builder_maven_preset_requires_namespace() -> None:
    """Test that the maven preset still enforces the maven rules."""
    builder = PackageURLBuilder.maven().name("log4j-core").version("2.17.1")
    with pytest.raises(TypeConstraintViolation):
        builder.build()
    purl = builder.namespace("org.apache.logging.log4j").build()
    assert purl.to_string() == "pkg:maven/org.apache.logging.log4j/log4j-core@2.17.1"


def test_builder_duplicate_qualifier() -> None:
    """Test that adding the same qualifier twice fails at build time."""
    builder = PackageURLBuilder.for_type("generic").name("x").qualifier("arch", "x86").qualifier("Arch", "arm")
    with pytest.raises(DuplicateQualifierKeyError):
        builder.build()


def test_builder_qualifiers_replace() -> None:
    """Test that qualifiers() replaces earlier qualifier() calls."""
    purl = (
        PackageURLBuilder.for_type("generic")
        .name("x")
        .qualifier("a", "1")
        .qualifiers({"b": "2"})
        .qualifier("c", "3")
        .build()
    )
    assert purl.qualifiers == {"b": "2", "c": "3"}


def test_builder_missing_name() -> None:
    """Test that nothing is checked until build."""
    builder = PackageURLBuilder.pypi()
    with pytest.raises(MissingNameError):
        builder.build()


def test_builder_from_purl() -> None:
    """Test starting from an existing purl."""
    original = parse("pkg:deb/debian/curl@7.50.3-1?arch=i386#usr/bin")
    copy = PackageURLBuilder.from_purl(original).build()
    assert copy == original
    bumped = PackageURLBuilder.from_purl(original).version("7.88.1-10").build()
    assert bumped.to_string() == "pkg:deb/debian/curl@7.88.1-10?arch=i386#usr/bin"
    assert original.version == "7.50.3-1"
