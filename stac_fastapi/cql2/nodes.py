"""CQL2 abstract syntax tree.

Basic CQL2 (AND, OR, NOT), comparison operators (=, <>, <, <=, >, >=), and IS NULL.
Advanced comparison operators define the LIKE, IN, and BETWEEN operators.
Spatial, temporal and array operators compare two operands with a named relation.
Functions (CASEI, ACCENTI and any extension function) wrap a list of operands.

Every node is an immutable attrs class. A finished tree can be shared freely
between readers; builders produce new nodes instead of mutating existing ones.
"""

from datetime import date as date_type
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple

import attr

from .errors import InvalidArgumentShape, InvalidArity, InvalidGeometry


class LogicalOp(str, Enum):
    """Enumeration for logical operators used in combining filter expressions."""

    AND = "and"
    OR = "or"
    NOT = "not"


class ComparisonOp(str, Enum):
    """Enumeration for comparison operators according to CQL2 standards."""

    EQ = "="
    NEQ = "<>"
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="


class AdvancedComparisonOp(str, Enum):
    """Enumeration for advanced comparison operators like 'like', 'in', and 'isnull'."""

    LIKE = "like"
    BETWEEN = "between"
    IN = "in"
    IS_NULL = "isnull"


class SpatialOp(str, Enum):
    """Enumeration for spatial operators as per CQL2 standards."""

    S_INTERSECTS = "s_intersects"
    S_EQUALS = "s_equals"
    S_DISJOINT = "s_disjoint"
    S_TOUCHES = "s_touches"
    S_WITHIN = "s_within"
    S_OVERLAPS = "s_overlaps"
    S_CROSSES = "s_crosses"
    S_CONTAINS = "s_contains"


class TemporalOp(str, Enum):
    """Enumeration for temporal operators as per CQL2 standards."""

    T_AFTER = "t_after"
    T_BEFORE = "t_before"
    T_CONTAINS = "t_contains"
    T_DISJOINT = "t_disjoint"
    T_DURING = "t_during"
    T_EQUALS = "t_equals"
    T_INTERSECTS = "t_intersects"


class ArrayOp(str, Enum):
    """Enumeration for array operators as per CQL2 standards."""

    A_EQUALS = "a_equals"
    A_CONTAINS = "a_contains"
    A_CONTAINEDBY = "a_containedby"
    A_OVERLAPS = "a_overlaps"


class LiteralKind(str, Enum):
    """Kinds of scalar literal values."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"

    @classmethod
    def of(cls, value: Any) -> "LiteralKind":
        """Return the literal kind of a plain Python scalar.

        Raises:
            InvalidArgumentShape: If the value is not a string, number or boolean.
        """
        # bool is a subclass of int, so it has to be checked first
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        raise InvalidArgumentShape(
            f"literal must be a string, number or boolean, got {type(value).__name__}",
            op="literal",
        )


SUPPORTED_FUNCTIONS: Tuple[str, ...] = ("casei", "accenti")
"""Functions recognized by the parser without extra configuration."""

CORE_OPERATORS = frozenset(
    op.value
    for enum in (
        LogicalOp,
        ComparisonOp,
        AdvancedComparisonOp,
        SpatialOp,
        TemporalOp,
        ArrayOp,
    )
    for op in enum
)
"""Operator names a function call may not shadow."""


def _freeze(value: Any) -> Any:
    """Recursively convert lists into tuples."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Recursively convert tuples back into lists for JSON output."""
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _non_empty_name(instance, attribute, value):
    if not isinstance(value, str) or not value:
        raise InvalidArgumentShape(
            f"{attribute.name} must be a non-empty string", op=instance.visit_name
        )


def _node(instance, attribute, value):
    if not isinstance(value, CqlNode):
        raise InvalidArgumentShape(
            f"{attribute.name} must be a filter node, got {type(value).__name__}",
            op=instance.visit_name,
        )


def _nodes(instance, attribute, value):
    for item in value:
        _node(instance, attribute, item)


def _op_name(instance) -> str:
    op = getattr(instance, "op", None)
    return op.value if isinstance(op, Enum) else instance.visit_name


def _require(types, what: str, error=InvalidArgumentShape):
    """Validate that a node attribute holds one of the named variants.

    ``types`` names module attributes so variants declared further down can be
    referenced.
    """

    def check(instance, attribute, value):
        _node(instance, attribute, value)
        if not isinstance(value, tuple(globals()[name] for name in types)):
            raise error(
                f"{attribute.name} must be {what}, got {value.variant}",
                op=_op_name(instance),
            )

    return check


def _each(validator):
    def check(instance, attribute, value):
        for item in value:
            validator(instance, attribute, item)

    return check


_subject = _require(("Property",), "a property")
_shape = _require(("Geometry", "BoundingBox"), "a geometry or bbox", InvalidGeometry)
_instant = _require(
    ("Timestamp", "Date", "Interval"), "a timestamp, date or interval"
)
_array_side = _require(
    ("Property", "ArrayLiteral", "FunctionCall"), "an array, property or function"
)


def _expression(instance, attribute, value):
    _node(instance, attribute, value)
    if not isinstance(value, EXPRESSION_TYPES):
        raise InvalidArgumentShape(
            f"{attribute.name} must be an expression, got {value.variant}",
            op=_op_name(instance),
        )


_expressions = _each(_expression)


@attr.s(frozen=True)
class CqlNode:
    """Base class of every CQL2 expression node."""

    visit_name = "node"

    @property
    def variant(self) -> str:
        """Name of the node variant, e.g. ``Between``."""
        return type(self).__name__


# Leaves


@attr.s(frozen=True)
class Property(CqlNode):
    """Reference to a queryable field of the filtered record."""

    visit_name = "property"

    name: str = attr.ib(validator=_non_empty_name)


@attr.s(frozen=True)
class Literal(CqlNode):
    """Scalar string, number or boolean value."""

    visit_name = "literal"

    value: Any = attr.ib()
    kind: LiteralKind = attr.ib(converter=LiteralKind)

    @kind.default
    def _kind_default(self) -> LiteralKind:
        return LiteralKind.of(self.value)

    @kind.validator
    def _check_kind(self, attribute, value):
        if LiteralKind.of(self.value) is not value:
            raise InvalidArgumentShape(
                f"value {self.value!r} is not a {value.value} literal", op="literal"
            )


@attr.s(frozen=True)
class Timestamp(CqlNode):
    """An instant; naive datetimes are taken to be UTC."""

    visit_name = "timestamp"

    value: datetime = attr.ib(
        converter=_as_utc, validator=attr.validators.instance_of(datetime)
    )


def _not_an_operator(instance, attribute, value):
    if value.lower() in CORE_OPERATORS:
        raise InvalidArgumentShape(
            f"function name '{value}' is a core operator", op=instance.visit_name
        )


def _calendar_date(instance, attribute, value):
    if not isinstance(value, date_type) or isinstance(value, datetime):
        raise InvalidArgumentShape("date must be a calendar date", op="date")


@attr.s(frozen=True)
class Date(CqlNode):
    """A calendar date."""

    visit_name = "date"

    value: date_type = attr.ib(validator=_calendar_date)


@attr.s(frozen=True)
class Interval(CqlNode):
    """Time range where either bound may be None (unbounded)."""

    visit_name = "interval"

    start: Optional[datetime] = attr.ib(
        default=None,
        converter=_as_utc,
        validator=attr.validators.optional(attr.validators.instance_of(datetime)),
    )
    end: Optional[datetime] = attr.ib(
        default=None,
        converter=_as_utc,
        validator=attr.validators.optional(attr.validators.instance_of(datetime)),
    )


@attr.s(frozen=True)
class Geometry(CqlNode):
    """GeoJSON geometry; coordinates are stored as nested tuples."""

    visit_name = "geometry"

    type: str = attr.ib()
    coordinates: Any = attr.ib(converter=_freeze)
    bbox: Optional[Tuple[float, ...]] = attr.ib(
        default=None, converter=attr.converters.optional(tuple)
    )

    @type.validator
    def _check_type(self, attribute, value):
        if not isinstance(value, str) or not value:
            raise InvalidGeometry("geometry must have a 'type' field", op="geometry")

    @coordinates.validator
    def _check_coordinates(self, attribute, value):
        if value is None:
            raise InvalidGeometry("geometry must have 'coordinates'", op="geometry")

    @bbox.validator
    def _check_bbox(self, attribute, value):
        if value is None:
            return
        if len(value) < 4 or len(value) % 2:
            raise InvalidGeometry(
                f"geometry bbox must hold 2n numbers, got {len(value)}", op="geometry"
            )
        if not all(LiteralKind.of(v) is LiteralKind.NUMBER for v in value):
            raise InvalidGeometry("geometry bbox values must be numbers", op="geometry")

    def to_geojson(self, with_bbox: bool = True) -> dict:
        """Return the geometry as a GeoJSON dictionary."""
        geojson = {"type": self.type, "coordinates": thaw(self.coordinates)}
        if with_bbox and self.bbox is not None:
            geojson["bbox"] = list(self.bbox)
        return geojson


@attr.s(frozen=True)
class BoundingBox(CqlNode):
    """2D (4 numbers) or 3D (6 numbers) bounding box."""

    visit_name = "bbox"

    extent: Tuple[float, ...] = attr.ib(converter=tuple)

    @extent.validator
    def _check_extent(self, attribute, value):
        if len(value) not in (4, 6):
            raise InvalidArity("bbox", "4 or 6", len(value))
        if not all(LiteralKind.of(v) is LiteralKind.NUMBER for v in value):
            raise InvalidArgumentShape("bbox values must be numbers", op="bbox")


@attr.s(frozen=True)
class ArrayLiteral(CqlNode):
    """Ordered sequence of operands."""

    visit_name = "array"

    elements: Tuple[CqlNode, ...] = attr.ib(converter=tuple, validator=_nodes)


# Logical combinators


@attr.s(frozen=True)
class And(CqlNode):
    """Conjunction of zero or more predicates."""

    visit_name = "and"

    children: Tuple[CqlNode, ...] = attr.ib(converter=tuple, validator=_expressions)


@attr.s(frozen=True)
class Or(CqlNode):
    """Disjunction of zero or more predicates."""

    visit_name = "or"

    children: Tuple[CqlNode, ...] = attr.ib(converter=tuple, validator=_expressions)


@attr.s(frozen=True)
class Not(CqlNode):
    """Negation of a single predicate."""

    visit_name = "not"

    child: CqlNode = attr.ib(validator=_expression)


# Predicates


@attr.s(frozen=True)
class Comparison(CqlNode):
    """Binary comparison between two operands."""

    visit_name = "comparison"

    op: ComparisonOp = attr.ib(converter=ComparisonOp)
    left: CqlNode = attr.ib(validator=_subject)
    right: CqlNode = attr.ib(validator=_node)

    @property
    def is_property_comparison(self) -> bool:
        """True when both operands are property references."""
        return isinstance(self.left, Property) and isinstance(self.right, Property)


@attr.s(frozen=True)
class Between(CqlNode):
    """Inclusive range test: subject between lower and upper."""

    visit_name = "between"

    subject: CqlNode = attr.ib(validator=_subject)
    lower: CqlNode = attr.ib(validator=_node)
    upper: CqlNode = attr.ib(validator=_node)


@attr.s(frozen=True)
class Like(CqlNode):
    """Pattern match using the CQL2 '%' and '_' wildcards."""

    visit_name = "like"

    subject: CqlNode = attr.ib(validator=_subject)
    pattern: str = attr.ib(validator=attr.validators.instance_of(str))


@attr.s(frozen=True)
class In(CqlNode):
    """Membership test against a list of operands."""

    visit_name = "in"

    subject: CqlNode = attr.ib(validator=_subject)
    values: Tuple[CqlNode, ...] = attr.ib(converter=tuple, validator=_nodes)


@attr.s(frozen=True)
class IsNull(CqlNode):
    """True when the subject has no value."""

    visit_name = "isnull"

    subject: CqlNode = attr.ib(validator=_subject)


@attr.s(frozen=True)
class SpatialComparison(CqlNode):
    """Spatial relation between two operands."""

    visit_name = "spatial"

    op: SpatialOp = attr.ib(converter=SpatialOp)
    left: CqlNode = attr.ib(validator=_subject)
    right: CqlNode = attr.ib(validator=_shape)


@attr.s(frozen=True)
class TemporalComparison(CqlNode):
    """Temporal relation between two operands."""

    visit_name = "temporal"

    op: TemporalOp = attr.ib(converter=TemporalOp)
    left: CqlNode = attr.ib(validator=_subject)
    right: CqlNode = attr.ib(validator=_instant)


@attr.s(frozen=True)
class ArrayComparison(CqlNode):
    """Array relation between two operands."""

    visit_name = "array_comparison"

    op: ArrayOp = attr.ib(converter=ArrayOp)
    left: CqlNode = attr.ib(validator=_array_side)
    right: CqlNode = attr.ib(validator=_array_side)


@attr.s(frozen=True)
class FunctionCall(CqlNode):
    """Call of a named function; unknown names are kept as generic calls."""

    visit_name = "function"

    name: str = attr.ib(validator=[_non_empty_name, _not_an_operator])
    args: Tuple[CqlNode, ...] = attr.ib(converter=tuple, validator=_nodes)

    @property
    def is_supported(self) -> bool:
        """True for the functions every CQL2 implementation knows."""
        return self.name.lower() in SUPPORTED_FUNCTIONS


NODE_TYPES = (
    Property,
    Literal,
    Timestamp,
    Date,
    Interval,
    Geometry,
    BoundingBox,
    ArrayLiteral,
    And,
    Or,
    Not,
    Comparison,
    Between,
    Like,
    In,
    IsNull,
    SpatialComparison,
    TemporalComparison,
    ArrayComparison,
    FunctionCall,
)
"""Every node variant, in declaration order."""

PREDICATE_TYPES = (
    Comparison,
    Between,
    Like,
    In,
    IsNull,
    SpatialComparison,
    TemporalComparison,
    ArrayComparison,
    FunctionCall,
)
"""Variants that test a single condition (no logical combinators)."""

EXPRESSION_TYPES = (And, Or, Not) + PREDICATE_TYPES
"""Variants encoded as an ``{"op": ..., "args": [...]}`` object."""
