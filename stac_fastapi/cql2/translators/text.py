"""CQL2-text rendering."""

from typing import Any, Sequence

from .. import nodes
from ..datetime_utils import datetime_to_str, interval_bound_to_str
from ..errors import UnsupportedNodeType
from .base import Translator


def _position(coords: Sequence[Any]) -> str:
    return " ".join(str(c) for c in coords)


def _ring(coords: Sequence[Sequence[Any]]) -> str:
    return "(" + ", ".join(_position(p) for p in coords) + ")"


def _rings(coords: Sequence[Sequence[Sequence[Any]]]) -> str:
    return "(" + ", ".join(_ring(r) for r in coords) + ")"


WKT_WRITERS = {
    "Point": lambda c: f"POINT({_position(c)})",
    "MultiPoint": lambda c: "MULTIPOINT" + _ring(c),
    "LineString": lambda c: "LINESTRING" + _ring(c),
    "MultiLineString": lambda c: "MULTILINESTRING" + _rings(c),
    "Polygon": lambda c: "POLYGON" + _rings(c),
    "MultiPolygon": lambda c: "MULTIPOLYGON(" + ", ".join(_rings(p) for p in c) + ")",
}


def to_wkt(node: nodes.Geometry) -> str:
    """Render a geometry as WKT.

    Raises:
        UnsupportedNodeType: For geometry types without a WKT writer.
    """
    try:
        writer = WKT_WRITERS[node.type]
    except KeyError:
        raise UnsupportedNodeType(f"Geometry({node.type})", dialect="cql2-text")
    return writer(node.coordinates)


class Cql2TextTranslator(Translator[str]):
    """Render a CQL2 tree as a CQL2-text expression.

    Keywords are upper case, strings are single quoted with embedded quotes
    doubled, and nested logical groups are parenthesized:

        status = 'published' AND (eo:cloud_cover < 10 OR NOT platform IS NULL)
    """

    dialect = "cql2-text"

    def _group(self, node: nodes.CqlNode) -> str:
        text = self.visit(node)
        if isinstance(node, (nodes.And, nodes.Or)):
            return f"({text})"
        return text

    def visit_property(self, node: nodes.Property) -> str:
        return node.name

    def visit_literal(self, node: nodes.Literal) -> str:
        if node.kind is nodes.LiteralKind.BOOLEAN:
            return "TRUE" if node.value else "FALSE"
        if node.kind is nodes.LiteralKind.NUMBER:
            return str(node.value)
        escaped = node.value.replace("'", "''")
        return f"'{escaped}'"

    def visit_timestamp(self, node: nodes.Timestamp) -> str:
        return f"TIMESTAMP('{datetime_to_str(node.value)}')"

    def visit_date(self, node: nodes.Date) -> str:
        return f"DATE('{node.value.isoformat()}')"

    def visit_interval(self, node: nodes.Interval) -> str:
        start = interval_bound_to_str(node.start)
        end = interval_bound_to_str(node.end)
        return f"INTERVAL('{start}','{end}')"

    def visit_geometry(self, node: nodes.Geometry) -> str:
        return to_wkt(node)

    def visit_bbox(self, node: nodes.BoundingBox) -> str:
        return "BBOX(" + ",".join(str(v) for v in node.extent) + ")"

    def visit_array(self, node: nodes.ArrayLiteral) -> str:
        return "(" + ", ".join(self.visit(e) for e in node.elements) + ")"

    def visit_and(self, node: nodes.And) -> str:
        return " AND ".join(self._group(c) for c in node.children)

    def visit_or(self, node: nodes.Or) -> str:
        return " OR ".join(self._group(c) for c in node.children)

    def visit_not(self, node: nodes.Not) -> str:
        return f"NOT {self._group(node.child)}"

    def visit_comparison(self, node: nodes.Comparison) -> str:
        return f"{self.visit(node.left)} {node.op.value} {self.visit(node.right)}"

    def visit_between(self, node: nodes.Between) -> str:
        subject = self.visit(node.subject)
        lower, upper = self.visit(node.lower), self.visit(node.upper)
        return f"{subject} BETWEEN {lower} AND {upper}"

    def visit_like(self, node: nodes.Like) -> str:
        pattern = node.pattern.replace("'", "''")
        return f"{self.visit(node.subject)} LIKE '{pattern}'"

    def visit_in(self, node: nodes.In) -> str:
        values = ", ".join(self.visit(v) for v in node.values)
        return f"{self.visit(node.subject)} IN ({values})"

    def visit_isnull(self, node: nodes.IsNull) -> str:
        return f"{self.visit(node.subject)} IS NULL"

    def _relation(self, op: str, left: nodes.CqlNode, right: nodes.CqlNode) -> str:
        return f"{op.upper()}({self.visit(left)}, {self.visit(right)})"

    def visit_spatial(self, node: nodes.SpatialComparison) -> str:
        return self._relation(node.op.value, node.left, node.right)

    def visit_temporal(self, node: nodes.TemporalComparison) -> str:
        return self._relation(node.op.value, node.left, node.right)

    def visit_array_comparison(self, node: nodes.ArrayComparison) -> str:
        return self._relation(node.op.value, node.left, node.right)

    def visit_function(self, node: nodes.FunctionCall) -> str:
        name = node.name.upper() if node.is_supported else node.name
        return f"{name}(" + ", ".join(self.visit(a) for a in node.args) + ")"
