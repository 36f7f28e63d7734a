"""SQL-style WHERE clause translation."""

from typing import Dict

from .. import nodes
from ..datetime_utils import datetime_to_str
from .base import Translator, geometry_json

SQL_OPERATORS: Dict[nodes.ComparisonOp, str] = {
    nodes.ComparisonOp.EQ: "=",
    nodes.ComparisonOp.NEQ: "<>",
    nodes.ComparisonOp.LT: "<",
    nodes.ComparisonOp.LTE: "<=",
    nodes.ComparisonOp.GT: ">",
    nodes.ComparisonOp.GTE: ">=",
}


class SQLTranslator(Translator[str]):
    """Translate a CQL2 tree into the body of a SQL ``WHERE`` clause.

    Every value is wrapped in single quotes whatever its kind, so
    ``lt("cloud_cover", 10)`` becomes ``cloud_cover < '10'``. Property
    references are left bare.
    """

    dialect = "sql"

    def visit_property(self, node: nodes.Property) -> str:
        return node.name

    def visit_literal(self, node: nodes.Literal) -> str:
        if node.kind is nodes.LiteralKind.BOOLEAN:
            return "'true'" if node.value else "'false'"
        return f"'{node.value}'"

    def visit_timestamp(self, node: nodes.Timestamp) -> str:
        return f"'{datetime_to_str(node.value)}'"

    def visit_date(self, node: nodes.Date) -> str:
        return f"'{node.value.isoformat()}'"

    def visit_and(self, node: nodes.And) -> str:
        return "(" + " AND ".join(self.visit(c) for c in node.children) + ")"

    def visit_or(self, node: nodes.Or) -> str:
        return "(" + " OR ".join(self.visit(c) for c in node.children) + ")"

    def visit_not(self, node: nodes.Not) -> str:
        return f"NOT ({self.visit(node.child)})"

    def visit_comparison(self, node: nodes.Comparison) -> str:
        left = self.visit(node.left)
        right = self.visit(node.right)
        return f"{left} {SQL_OPERATORS[node.op]} {right}"

    def visit_between(self, node: nodes.Between) -> str:
        subject = self.visit(node.subject)
        lower, upper = self.visit(node.lower), self.visit(node.upper)
        return f"{subject} BETWEEN {lower} AND {upper}"

    def visit_like(self, node: nodes.Like) -> str:
        return f"{self.visit(node.subject)} LIKE '{node.pattern}'"

    def visit_in(self, node: nodes.In) -> str:
        values = ", ".join(self.visit(v) for v in node.values)
        return f"{self.visit(node.subject)} IN ({values})"

    def visit_isnull(self, node: nodes.IsNull) -> str:
        return f"{self.visit(node.subject)} IS NULL"

    def visit_spatial(self, node: nodes.SpatialComparison) -> str:
        return f"{node.op.value}({geometry_json(node.right)})"
