"""CQL2-JSON serializer."""

import logging
from typing import Any, Dict, Optional

import orjson

from . import nodes
from .config import get_settings
from .datetime_utils import datetime_to_str, interval_bound_to_str
from .visitor import NodeVisitor

logger = logging.getLogger(__name__)


class Cql2JsonSerializer(NodeVisitor[Any]):
    """Render a CQL2 tree as a CQL2-JSON value.

    Composite nodes become ``{"op": <name>, "args": [...]}`` with lower-case
    operator names, properties become ``{"property": <name>}`` and literals
    keep their native JSON form. The output parses back into an equal tree.
    """

    def serialize(self, node: nodes.CqlNode) -> Dict[str, Any]:
        return self.visit(node)

    def _op(self, op: str, *args: Any) -> Dict[str, Any]:
        return {"op": str(op).lower(), "args": list(args)}

    def visit_property(self, node: nodes.Property) -> Dict[str, Any]:
        return {"property": node.name}

    def visit_literal(self, node: nodes.Literal) -> Any:
        return node.value

    def visit_timestamp(self, node: nodes.Timestamp) -> Dict[str, Any]:
        return {"timestamp": datetime_to_str(node.value)}

    def visit_date(self, node: nodes.Date) -> Dict[str, Any]:
        return {"date": node.value.isoformat()}

    def visit_interval(self, node: nodes.Interval) -> Dict[str, Any]:
        return {
            "interval": [
                interval_bound_to_str(node.start),
                interval_bound_to_str(node.end),
            ]
        }

    def visit_geometry(self, node: nodes.Geometry) -> Dict[str, Any]:
        return node.to_geojson()

    def visit_bbox(self, node: nodes.BoundingBox) -> Dict[str, Any]:
        return {"bbox": list(node.extent)}

    def visit_array(self, node: nodes.ArrayLiteral) -> Any:
        return [self.visit(e) for e in node.elements]

    def visit_and(self, node: nodes.And) -> Dict[str, Any]:
        return self._op("and", *(self.visit(c) for c in node.children))

    def visit_or(self, node: nodes.Or) -> Dict[str, Any]:
        return self._op("or", *(self.visit(c) for c in node.children))

    def visit_not(self, node: nodes.Not) -> Dict[str, Any]:
        return self._op("not", self.visit(node.child))

    def visit_comparison(self, node: nodes.Comparison) -> Dict[str, Any]:
        return self._op(node.op.value, self.visit(node.left), self.visit(node.right))

    def visit_between(self, node: nodes.Between) -> Dict[str, Any]:
        return self._op(
            "between",
            self.visit(node.subject),
            self.visit(node.lower),
            self.visit(node.upper),
        )

    def visit_like(self, node: nodes.Like) -> Dict[str, Any]:
        return self._op("like", self.visit(node.subject), node.pattern)

    def visit_in(self, node: nodes.In) -> Dict[str, Any]:
        return self._op(
            "in", self.visit(node.subject), [self.visit(v) for v in node.values]
        )

    def visit_isnull(self, node: nodes.IsNull) -> Dict[str, Any]:
        return self._op("isnull", self.visit(node.subject))

    def visit_spatial(self, node: nodes.SpatialComparison) -> Dict[str, Any]:
        return self._op(node.op.value, self.visit(node.left), self.visit(node.right))

    def visit_temporal(self, node: nodes.TemporalComparison) -> Dict[str, Any]:
        return self._op(node.op.value, self.visit(node.left), self.visit(node.right))

    def visit_array_comparison(self, node: nodes.ArrayComparison) -> Dict[str, Any]:
        return self._op(node.op.value, self.visit(node.left), self.visit(node.right))

    def visit_function(self, node: nodes.FunctionCall) -> Dict[str, Any]:
        return self._op(node.name, *(self.visit(a) for a in node.args))


def to_cql2_json(node: nodes.CqlNode) -> Dict[str, Any]:
    """Serialize a tree to a CQL2-JSON dictionary."""
    return Cql2JsonSerializer().serialize(node)


def dumps(node: nodes.CqlNode, indent: Optional[bool] = None) -> bytes:
    """Serialize a tree to CQL2-JSON bytes.

    Args:
        node: Root of the tree.
        indent: Pretty-print with two-space indentation. Defaults to the
            ``CQL2_JSON_INDENT`` setting.

    Returns:
        bytes: UTF-8 encoded JSON.
    """
    if indent is None:
        indent = get_settings().CQL2_JSON_INDENT
    option = orjson.OPT_INDENT_2 if indent else 0
    data = orjson.dumps(to_cql2_json(node), option=option)
    logger.debug(f"Serialized '{node.variant}' filter to {len(data)} bytes")
    return data
