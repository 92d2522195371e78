"""Exceptions raised while parsing, building or validating a purl."""

from typing import Optional


def format_purl_error_message(message: str = "") -> str:
    """Formats a message as ``Invalid purl: <message>``.

    The first letter is lowercased and a single trailing period is removed,
    so messages compose cleanly after the prefix.
    """
    formatted = message
    if formatted:
        if formatted[0].isupper():
            formatted = formatted[0].lower() + formatted[1:]
        if len(formatted) > 1 and formatted.endswith(".") and not formatted.endswith(".."):
            formatted = formatted[:-1]
    return f"Invalid purl: {formatted}"


class PurlError(Exception):
    """Base purl error.

    Not a ``ValueError``, so it propagates out of pydantic validators as is
    instead of being wrapped in a ``ValidationError``.
    """

    def __init__(self, message: str = "", component: Optional[str] = None):
        super().__init__(format_purl_error_message(message))
        self.component = component


class MissingSchemeError(PurlError):
    """The string does not start with the ``pkg:`` scheme."""


class MissingTypeError(PurlError):
    """The type component is absent or empty."""

    def __init__(self, message: str = '"type" is a required component', **kwargs):
        kwargs.setdefault("component", "type")
        super().__init__(message, **kwargs)


class MissingNameError(PurlError):
    """The name component is absent or empty."""

    def __init__(self, message: str = '"name" is a required component', **kwargs):
        kwargs.setdefault("component", "name")
        super().__init__(message, **kwargs)


class MalformedEncodingError(PurlError):
    """A percent-escape is malformed or decodes to invalid UTF-8."""


class InvalidCharacterError(PurlError):
    """A raw character is not allowed where it appears."""


class DuplicateQualifierKeyError(PurlError):
    """A qualifier key occurs more than once."""

    def __init__(self, key: str):
        super().__init__(f'qualifier "{key}" is duplicated', component="qualifiers")
        self.key = key


class TypeConstraintViolation(PurlError):
    """A component breaks a rule of its package type."""

    def __init__(self, message: str, purl_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.purl_type = purl_type


class EmptyComponentError(PurlError):
    """A component normalizes to an empty value where one is required."""


EncodingError = MalformedEncodingError
ParseError = PurlError
