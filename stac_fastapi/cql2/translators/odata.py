"""OData-style filter translation."""

from typing import Dict

from .. import nodes
from ..datetime_utils import datetime_to_str
from .base import Translator, geometry_json

ODATA_OPERATORS: Dict[nodes.ComparisonOp, str] = {
    nodes.ComparisonOp.EQ: "eq",
    nodes.ComparisonOp.NEQ: "ne",
    nodes.ComparisonOp.LT: "lt",
    nodes.ComparisonOp.LTE: "le",
    nodes.ComparisonOp.GT: "gt",
    nodes.ComparisonOp.GTE: "ge",
}


class ODataTranslator(Translator[str]):
    """Translate a CQL2 tree into an OData ``$filter`` expression.

    Values are written in their plain textual form and strings are not
    quoted, so ``eq("status", "published")`` becomes ``status eq published``.
    """

    dialect = "odata"

    def visit_property(self, node: nodes.Property) -> str:
        return node.name

    def visit_literal(self, node: nodes.Literal) -> str:
        if node.kind is nodes.LiteralKind.BOOLEAN:
            return "true" if node.value else "false"
        return str(node.value)

    def visit_timestamp(self, node: nodes.Timestamp) -> str:
        return datetime_to_str(node.value)

    def visit_date(self, node: nodes.Date) -> str:
        return node.value.isoformat()

    def visit_and(self, node: nodes.And) -> str:
        return "(" + " and ".join(self.visit(c) for c in node.children) + ")"

    def visit_or(self, node: nodes.Or) -> str:
        return "(" + " or ".join(self.visit(c) for c in node.children) + ")"

    def visit_not(self, node: nodes.Not) -> str:
        return f"not ({self.visit(node.child)})"

    def visit_comparison(self, node: nodes.Comparison) -> str:
        left = self.visit(node.left)
        right = self.visit(node.right)
        return f"{left} {ODATA_OPERATORS[node.op]} {right}"

    def visit_isnull(self, node: nodes.IsNull) -> str:
        return f"{self.visit(node.subject)} eq null"

    def visit_spatial(self, node: nodes.SpatialComparison) -> str:
        return f"{node.op.value}({geometry_json(node.right)})"
