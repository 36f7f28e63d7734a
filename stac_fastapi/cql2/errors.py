"""CQL2 exceptions module.

This module contains the exception classes raised while parsing, building and
translating CQL2 filter expressions. Every error names the operator or field
that caused it, so callers can report the offending part of a filter.
"""

from typing import Optional


class Cql2Error(ValueError):
    """Base class for all CQL2 filter errors.

    Attributes:
        op (Optional[str]): The operator, field or node variant the error refers to.
        detail (str): Description of the violated constraint.
    """

    def __init__(self, detail: str, op: Optional[str] = None):
        """Initialize a CQL2 error.

        Args:
            detail (str): Human-readable description of the problem.
            op (Optional[str]): The offending operator, field or variant name.
        """
        super().__init__(detail)
        self.op = op
        self.detail = detail

    def __str__(self) -> str:
        """Return the message prefixed with the offending operator when known."""
        if self.op is None:
            return self.detail
        return f"'{self.op}': {self.detail}"


class ParseError(Cql2Error):
    """Base class for errors raised while decoding a CQL2-JSON document."""


class MalformedInput(ParseError):
    """The document is not valid JSON."""


class MissingOperator(ParseError):
    """An expression object has no string 'op' member."""


class InvalidArity(ParseError):
    """An operator received the wrong number of arguments."""

    def __init__(self, op: str, expected, got: int):
        """Initialize with the expected and received argument counts."""
        super().__init__(f"expected {expected} argument(s), got {got}", op=op)
        self.expected = expected
        self.got = got


class InvalidArgumentShape(ParseError):
    """An argument is not the expected object, array or scalar type."""


class InvalidGeometry(ParseError):
    """A geometry argument is missing its 'type' or 'coordinates'."""


class InvalidTimeFormat(ParseError):
    """A timestamp, date or interval bound could not be parsed."""


class UnsupportedOperator(ParseError):
    """The operator is neither core grammar nor a whitelisted function."""

    def __init__(self, op: str):
        """Initialize with the unrecognized operator name."""
        super().__init__("unsupported or unknown operator", op=op)


class TranslateError(Cql2Error):
    """Base class for errors raised while translating a tree to a dialect."""


class UnsupportedNodeType(TranslateError):
    """A translator has no rendering for a node variant."""

    def __init__(self, variant: str, dialect: Optional[str] = None):
        """Initialize with the variant name and, optionally, the dialect.

        Args:
            variant (str): Name of the node variant, e.g. ``Between``.
            dialect (Optional[str]): Name of the translator that rejected it.
        """
        if dialect:
            detail = f"unsupported node type for {dialect}"
        else:
            detail = "unsupported node type"
        super().__init__(detail, op=variant)
        self.variant = variant
        self.dialect = dialect
