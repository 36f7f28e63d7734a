"""Double dispatch over CQL2 nodes."""

from typing import Generic, TypeVar

from . import nodes

T = TypeVar("T")


class NodeVisitor(Generic[T]):
    """Walk a CQL2 tree by dispatching on the node variant.

    ``visit(node)`` calls ``visit_<node.visit_name>(node)``. There is one
    method per variant; each falls back to ``generic_visit`` which raises
    ``NotImplementedError``. Subclasses override the variants they handle and
    may override ``generic_visit`` to change the fallback.
    """

    def visit(self, node: nodes.CqlNode) -> T:
        """Dispatch ``node`` to its ``visit_*`` method."""
        method = getattr(self, f"visit_{node.visit_name}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: nodes.CqlNode) -> T:
        """Handle a variant that has no dedicated method."""
        raise NotImplementedError(
            f"{type(self).__name__} does not handle {node.variant}"
        )

    def visit_property(self, node: nodes.Property) -> T:
        return self.generic_visit(node)

    def visit_literal(self, node: nodes.Literal) -> T:
        return self.generic_visit(node)

    def visit_timestamp(self, node: nodes.Timestamp) -> T:
        return self.generic_visit(node)

    def visit_date(self, node: nodes.Date) -> T:
        return self.generic_visit(node)

    def visit_interval(self, node: nodes.Interval) -> T:
        return self.generic_visit(node)

    def visit_geometry(self, node: nodes.Geometry) -> T:
        return self.generic_visit(node)

    def visit_bbox(self, node: nodes.BoundingBox) -> T:
        return self.generic_visit(node)

    def visit_array(self, node: nodes.ArrayLiteral) -> T:
        return self.generic_visit(node)

    def visit_and(self, node: nodes.And) -> T:
        return self.generic_visit(node)

    def visit_or(self, node: nodes.Or) -> T:
        return self.generic_visit(node)

    def visit_not(self, node: nodes.Not) -> T:
        return self.generic_visit(node)

    def visit_comparison(self, node: nodes.Comparison) -> T:
        return self.generic_visit(node)

    def visit_between(self, node: nodes.Between) -> T:
        return self.generic_visit(node)

    def visit_like(self, node: nodes.Like) -> T:
        return self.generic_visit(node)

    def visit_in(self, node: nodes.In) -> T:
        return self.generic_visit(node)

    def visit_isnull(self, node: nodes.IsNull) -> T:
        return self.generic_visit(node)

    def visit_spatial(self, node: nodes.SpatialComparison) -> T:
        return self.generic_visit(node)

    def visit_temporal(self, node: nodes.TemporalComparison) -> T:
        return self.generic_visit(node)

    def visit_array_comparison(self, node: nodes.ArrayComparison) -> T:
        return self.generic_visit(node)

    def visit_function(self, node: nodes.FunctionCall) -> T:
        return self.generic_visit(node)
