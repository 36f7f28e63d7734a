"""Factory functions for CQL2 nodes.

These build single nodes from plain Python values:

    >>> and_(eq("collection", "landsat"), lt("eo:cloud_cover", 10))

A ``str`` in subject position names a property; everywhere else it is a
string literal. Use :func:`prop` for a property on the right-hand side.
"""

from datetime import date as date_type
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from geojson_pydantic import (
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

from . import nodes
from .datetime_utils import parse_date, parse_interval_bound, parse_timestamp
from .errors import InvalidArgumentShape
from .validation import json_type, parse_geometry

GEOJSON_GEOMETRIES = (
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
)

Subject = Union[str, nodes.Property]


def prop(name: str) -> nodes.Property:
    """Reference a property by name."""
    return nodes.Property(name)


def subject(value: Subject) -> nodes.Property:
    """Coerce a subject operand; strings are property names."""
    if isinstance(value, str):
        return nodes.Property(value)
    if isinstance(value, nodes.Property):
        return value
    raise InvalidArgumentShape(
        f"subject must be a property name or Property, got {type(value).__name__}",
        op="subject",
    )


def operand(value: Any) -> nodes.CqlNode:
    """Coerce a plain Python value into a literal-or-property operand."""
    if isinstance(value, nodes.CqlNode):
        return value
    if isinstance(value, datetime):
        return nodes.Timestamp(value)
    if isinstance(value, date_type):
        return nodes.Date(value)
    if isinstance(value, (bool, int, float, str)):
        return nodes.Literal(value)
    if isinstance(value, (list, tuple)):
        return nodes.ArrayLiteral([operand(v) for v in value])
    if isinstance(value, (dict,) + GEOJSON_GEOMETRIES):
        return geometry(value)
    raise InvalidArgumentShape(
        f"cannot use {type(value).__name__} as an operand", op="operand"
    )


def shape(value: Any) -> nodes.CqlNode:
    """Coerce a spatial operand: a geometry or bbox extent."""
    if isinstance(value, nodes.CqlNode):
        return value
    if isinstance(value, (list, tuple)):
        return nodes.BoundingBox(value)
    return geometry(value)


def instant(value: Any) -> nodes.CqlNode:
    """Coerce a temporal operand.

    ``datetime`` becomes a Timestamp, ``date`` a Date, a ``(start, end)``
    pair an Interval. Strings of the form ``YYYY-MM-DD`` are dates, other
    strings must be RFC 3339 timestamps.
    """
    if isinstance(value, nodes.CqlNode):
        return value
    if isinstance(value, (datetime, date_type, str)):
        return timestamp(value) if not _is_date(value) else date(value)
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return interval(*value)
    raise InvalidArgumentShape(
        f"cannot use {type(value).__name__} as a temporal operand", op="instant"
    )


def _is_date(value: Any) -> bool:
    if isinstance(value, str):
        return len(value) == 10
    return isinstance(value, date_type) and not isinstance(value, datetime)


# Temporal and spatial literals


def timestamp(value: Union[str, datetime]) -> nodes.Timestamp:
    """Build a timestamp from a datetime or an RFC 3339 string."""
    if isinstance(value, str):
        value = parse_timestamp(value)
    return nodes.Timestamp(value)


def date(value: Union[str, date_type]) -> nodes.Date:
    """Build a date from a ``date`` or a ``YYYY-MM-DD`` string."""
    if isinstance(value, str):
        value = parse_date(value)
    return nodes.Date(value)


def interval(
    start: Optional[Union[str, datetime]] = None,
    end: Optional[Union[str, datetime]] = None,
) -> nodes.Interval:
    """Build an interval; ``None`` or ``".."`` leaves that end open."""
    if isinstance(start, str) or start is None:
        start = parse_interval_bound(start)
    if isinstance(end, str) or end is None:
        end = parse_interval_bound(end)
    return nodes.Interval(start=start, end=end)


def bbox(*extent: float) -> nodes.BoundingBox:
    """Build a 2D or 3D bounding box."""
    return nodes.BoundingBox(extent)


def geometry(value: Any, coordinates: Any = None) -> nodes.Geometry:
    """Build a geometry.

    Accepts a GeoJSON dictionary, a geojson-pydantic geometry, any object
    exposing ``__geo_interface__``, or a type name plus coordinates.
    """
    if isinstance(value, str):
        value = {"type": value, "coordinates": coordinates}
    elif isinstance(value, GEOJSON_GEOMETRIES):
        value = value.model_dump(mode="json", exclude_none=True)
    elif hasattr(value, "__geo_interface__"):
        value = value.__geo_interface__
    if not isinstance(value, dict):
        raise InvalidArgumentShape(
            f"geometry must be GeoJSON, got {json_type(value)}", op="geometry"
        )
    return parse_geometry("geometry", value)


# Logical combinators


def and_(*exprs: nodes.CqlNode) -> nodes.And:
    """Combine predicates with AND."""
    return nodes.And(exprs)


def or_(*exprs: nodes.CqlNode) -> nodes.Or:
    """Combine predicates with OR."""
    return nodes.Or(exprs)


def not_(expr: nodes.CqlNode) -> nodes.Not:
    """Negate a predicate."""
    return nodes.Not(expr)


# Comparison predicates


def compare(
    op: Union[str, nodes.ComparisonOp], left: Subject, right: Any
) -> nodes.Comparison:
    """Build a comparison with an explicit operator."""
    return nodes.Comparison(op=op, left=subject(left), right=operand(right))


def eq(left: Subject, right: Any) -> nodes.Comparison:
    return compare(nodes.ComparisonOp.EQ, left, right)


def neq(left: Subject, right: Any) -> nodes.Comparison:
    return compare(nodes.ComparisonOp.NEQ, left, right)


def lt(left: Subject, right: Any) -> nodes.Comparison:
    return compare(nodes.ComparisonOp.LT, left, right)


def lte(left: Subject, right: Any) -> nodes.Comparison:
    return compare(nodes.ComparisonOp.LTE, left, right)


def gt(left: Subject, right: Any) -> nodes.Comparison:
    return compare(nodes.ComparisonOp.GT, left, right)


def gte(left: Subject, right: Any) -> nodes.Comparison:
    return compare(nodes.ComparisonOp.GTE, left, right)


def between(value: Subject, lower: Any, upper: Any) -> nodes.Between:
    """Inclusive range test."""
    return nodes.Between(
        subject=subject(value), lower=operand(lower), upper=operand(upper)
    )


def like(value: Subject, pattern: str) -> nodes.Like:
    """Pattern match; ``%`` matches any run of characters, ``_`` a single one."""
    return nodes.Like(subject=subject(value), pattern=pattern)


def in_(value: Subject, values: Iterable[Any]) -> nodes.In:
    """Membership test."""
    return nodes.In(subject=subject(value), values=[operand(v) for v in values])


def is_null(value: Subject) -> nodes.IsNull:
    return nodes.IsNull(subject(value))


# Spatial, temporal and array predicates


def spatial(
    op: Union[str, nodes.SpatialOp], left: Subject, right: Any
) -> nodes.SpatialComparison:
    """Build a spatial comparison with an explicit operator."""
    return nodes.SpatialComparison(op=op, left=subject(left), right=shape(right))


def temporal(
    op: Union[str, nodes.TemporalOp], left: Subject, right: Any
) -> nodes.TemporalComparison:
    """Build a temporal comparison with an explicit operator."""
    return nodes.TemporalComparison(op=op, left=subject(left), right=instant(right))


def array(
    op: Union[str, nodes.ArrayOp], left: Any, right: Any
) -> nodes.ArrayComparison:
    """Build an array comparison; a ``str`` on either side names a property."""
    if isinstance(left, str):
        left = nodes.Property(left)
    if isinstance(right, str):
        right = nodes.Property(right)
    return nodes.ArrayComparison(op=op, left=operand(left), right=operand(right))


def s_intersects(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_INTERSECTS, left, right)


def s_equals(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_EQUALS, left, right)


def s_disjoint(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_DISJOINT, left, right)


def s_touches(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_TOUCHES, left, right)


def s_within(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_WITHIN, left, right)


def s_overlaps(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_OVERLAPS, left, right)


def s_crosses(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_CROSSES, left, right)


def s_contains(left: Subject, right: Any) -> nodes.SpatialComparison:
    return spatial(nodes.SpatialOp.S_CONTAINS, left, right)


def t_after(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_AFTER, left, right)


def t_before(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_BEFORE, left, right)


def t_contains(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_CONTAINS, left, right)


def t_disjoint(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_DISJOINT, left, right)


def t_during(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_DURING, left, right)


def t_equals(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_EQUALS, left, right)


def t_intersects(left: Subject, right: Any) -> nodes.TemporalComparison:
    return temporal(nodes.TemporalOp.T_INTERSECTS, left, right)


def a_equals(left: Any, right: Any) -> nodes.ArrayComparison:
    return array(nodes.ArrayOp.A_EQUALS, left, right)


def a_contains(left: Any, right: Any) -> nodes.ArrayComparison:
    return array(nodes.ArrayOp.A_CONTAINS, left, right)


def a_containedby(left: Any, right: Any) -> nodes.ArrayComparison:
    return array(nodes.ArrayOp.A_CONTAINEDBY, left, right)


def a_overlaps(left: Any, right: Any) -> nodes.ArrayComparison:
    return array(nodes.ArrayOp.A_OVERLAPS, left, right)


# Functions


def function(name: str, *args: Any) -> nodes.FunctionCall:
    """Call a function by name; unknown names are kept as generic calls."""
    return nodes.FunctionCall(name=name.lower(), args=[operand(a) for a in args])


def casei(value: Any) -> nodes.FunctionCall:
    """Case-insensitive wrapper, e.g. ``eq("title", casei("Landsat"))``."""
    return function("casei", value)


def accenti(value: Any) -> nodes.FunctionCall:
    """Accent-insensitive wrapper."""
    return function("accenti", value)
