"""CQL2 to Elasticsearch/OpenSearch query DSL translation."""

from typing import Any, Dict, Optional

from .. import nodes
from ..datetime_utils import datetime_to_str
from ..errors import UnsupportedNodeType
from .base import Translator
from .like import cql2_like_to_es

RANGE_OPERATORS = {
    nodes.ComparisonOp.LT: "lt",
    nodes.ComparisonOp.LTE: "lte",
    nodes.ComparisonOp.GT: "gt",
    nodes.ComparisonOp.GTE: "gte",
}

GEO_SHAPE_RELATIONS = {
    nodes.SpatialOp.S_INTERSECTS: "intersects",
    nodes.SpatialOp.S_CONTAINS: "contains",
    nodes.SpatialOp.S_WITHIN: "within",
    nodes.SpatialOp.S_DISJOINT: "disjoint",
}


class ElasticsearchTranslator(Translator[Dict[str, Any]]):
    """Translate a CQL2 tree into an Elasticsearch/OpenSearch query.

    Property names are mapped through ``queryables_mapping`` (queryable name
    to index field), falling back to the name itself.
    """

    dialect = "elasticsearch"

    def __init__(self, queryables_mapping: Optional[Dict[str, str]] = None):
        self.queryables_mapping = queryables_mapping or {}

    def to_es_field(self, node: nodes.CqlNode) -> str:
        """Map a property node to its Elasticsearch field."""
        if not isinstance(node, nodes.Property):
            raise UnsupportedNodeType(node.variant, dialect=self.dialect)
        return self.queryables_mapping.get(node.name, node.name)

    def to_es_value(self, node: nodes.CqlNode) -> Any:
        """Unwrap a literal operand into a plain JSON value."""
        if isinstance(node, nodes.Literal):
            return node.value
        if isinstance(node, nodes.Timestamp):
            return datetime_to_str(node.value)
        if isinstance(node, nodes.Date):
            return node.value.isoformat()
        if isinstance(node, nodes.ArrayLiteral):
            return [self.to_es_value(e) for e in node.elements]
        raise UnsupportedNodeType(node.variant, dialect=self.dialect)

    def visit_and(self, node: nodes.And) -> Dict[str, Any]:
        return {"bool": {"must": [self.visit(c) for c in node.children]}}

    def visit_or(self, node: nodes.Or) -> Dict[str, Any]:
        return {"bool": {"should": [self.visit(c) for c in node.children]}}

    def visit_not(self, node: nodes.Not) -> Dict[str, Any]:
        return {"bool": {"must_not": self.visit(node.child)}}

    def visit_comparison(self, node: nodes.Comparison) -> Dict[str, Any]:
        field = self.to_es_field(node.left)
        value = self.to_es_value(node.right)

        # Timestamps are matched on the instant, not on the stored string
        if isinstance(node.right, nodes.Timestamp):
            if node.op == nodes.ComparisonOp.EQ:
                return {"range": {field: {"gte": value, "lte": value}}}
            if node.op == nodes.ComparisonOp.NEQ:
                return {
                    "bool": {
                        "must_not": [{"range": {field: {"gte": value, "lte": value}}}]
                    }
                }

        if node.op == nodes.ComparisonOp.EQ:
            return {"term": {field: value}}
        if node.op == nodes.ComparisonOp.NEQ:
            return {"bool": {"must_not": [{"term": {field: value}}]}}
        return {"range": {field: {RANGE_OPERATORS[node.op]: value}}}

    def visit_isnull(self, node: nodes.IsNull) -> Dict[str, Any]:
        field = self.to_es_field(node.subject)
        return {"bool": {"must_not": {"exists": {"field": field}}}}

    def visit_between(self, node: nodes.Between) -> Dict[str, Any]:
        field = self.to_es_field(node.subject)
        gte, lte = self.to_es_value(node.lower), self.to_es_value(node.upper)
        return {"range": {field: {"gte": gte, "lte": lte}}}

    def visit_in(self, node: nodes.In) -> Dict[str, Any]:
        field = self.to_es_field(node.subject)
        return {"terms": {field: [self.to_es_value(v) for v in node.values]}}

    def visit_like(self, node: nodes.Like) -> Dict[str, Any]:
        field = self.to_es_field(node.subject)
        pattern = cql2_like_to_es(node.pattern)
        return {"wildcard": {field: {"value": pattern, "case_insensitive": True}}}

    def visit_spatial(self, node: nodes.SpatialComparison) -> Dict[str, Any]:
        relation = GEO_SHAPE_RELATIONS.get(node.op)
        if relation is None:
            raise UnsupportedNodeType(node.variant, dialect=self.dialect)

        field = self.to_es_field(node.left)
        if isinstance(node.right, nodes.Geometry):
            shape = node.right.to_geojson(with_bbox=False)
        elif isinstance(node.right, nodes.BoundingBox):
            extent = node.right.extent
            # 3D boxes carry elevation at indices 2 and 5
            if len(extent) == 6:
                extent = (extent[0], extent[1], extent[3], extent[4])
            minx, miny, maxx, maxy = extent
            shape = {"type": "envelope", "coordinates": [[minx, maxy], [maxx, miny]]}
        else:
            raise UnsupportedNodeType(node.right.variant, dialect=self.dialect)

        return {"geo_shape": {field: {"shape": shape, "relation": relation}}}

    def visit_temporal(self, node: nodes.TemporalComparison) -> Dict[str, Any]:
        field = self.to_es_field(node.left)
        right = node.right

        if isinstance(right, nodes.Interval):
            start = datetime_to_str(right.start) if right.start else None
            end = datetime_to_str(right.end) if right.end else None
            if node.op == nodes.TemporalOp.T_INTERSECTS:
                bounds = {"gte": start, "lte": end}
            elif node.op == nodes.TemporalOp.T_DURING:
                bounds = {"gt": start, "lt": end}
            elif node.op == nodes.TemporalOp.T_AFTER:
                bounds = {"gt": end}
            elif node.op == nodes.TemporalOp.T_BEFORE:
                bounds = {"lt": start}
            else:
                raise UnsupportedNodeType(node.variant, dialect=self.dialect)
            bounds = {k: v for k, v in bounds.items() if v is not None}
            if not bounds:
                return {"exists": {"field": field}}
            return {"range": {field: bounds}}

        value = self.to_es_value(right)
        if node.op in (nodes.TemporalOp.T_EQUALS, nodes.TemporalOp.T_INTERSECTS):
            return {"range": {field: {"gte": value, "lte": value}}}
        if node.op == nodes.TemporalOp.T_AFTER:
            return {"range": {field: {"gt": value}}}
        if node.op == nodes.TemporalOp.T_BEFORE:
            return {"range": {field: {"lt": value}}}
        raise UnsupportedNodeType(node.variant, dialect=self.dialect)

    def visit_array_comparison(self, node: nodes.ArrayComparison) -> Dict[str, Any]:
        field = self.to_es_field(node.left)
        values = self.to_es_value(node.right)
        if not isinstance(values, list):
            raise UnsupportedNodeType(node.right.variant, dialect=self.dialect)

        if node.op == nodes.ArrayOp.A_OVERLAPS:
            return {"terms": {field: values}}
        if node.op == nodes.ArrayOp.A_CONTAINS:
            return {"bool": {"must": [{"term": {field: v}} for v in values]}}
        raise UnsupportedNodeType(node.variant, dialect=self.dialect)


def to_es(queryables_mapping: Dict[str, str], node: nodes.CqlNode) -> Dict[str, Any]:
    """Translate a CQL2 tree into an Elasticsearch/OpenSearch query."""
    return ElasticsearchTranslator(queryables_mapping).translate(node)
