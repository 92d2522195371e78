"""
examples/basic_usage.py

Shows the ways of creating, comparing and rendering Package URLs with purler.

Usage:
python examples/basic_usage.py
"""
import json

from purler import PackageURLBuilder, TypeRule, build, default_registry, parse, try_parse


def main():
    # Parsing normalizes per package type: npm lowercases, pypi collapses separators.
    npm = parse("pkg:npm/%40Angular/Core@16.0.0")
    pypi = parse("pkg:pypi/Django_REST.framework@3.14.0")
    print(npm)
    print(pypi)

    # Field-by-field construction goes through the same rules.
    assert pypi == build("pypi", name="django-rest-framework", version="3.14.0")

    # The builder for code that collects components step by step.
    maven = (
        PackageURLBuilder.maven()
        .namespace("org.apache.logging.log4j")
        .name("log4j-core")
        .version("2.17.1")
        .qualifier("classifier", "sources")
        .build()
    )
    print(maven)
    print(maven.to_url_component())
    print(json.dumps(maven.model_dump(), indent=4))

    # Instances are immutable; changes give new, re-validated instances.
    print(maven.replace(version="2.20.0").without_qualifier("classifier"))

    # Invalid purls raise PurlError; try_parse returns None instead.
    print(try_parse("pkg:maven/log4j-core@2.17.1"))

    # Rules for in-house package types are added by extending the registry.
    registry = default_registry().extend(
        TypeRule(type="acme", name_case="lower", default_qualifiers=(("repository_url", "https://repo.acme.test"),)),
    )
    print(parse("pkg:acme/Widget@1.0", registry=registry))


if __name__ == "__main__":
    main()
