"""Fluent construction of CQL2 filters.

A builder holds a single root node. Chained calls fold new predicates into
that root:

    >>> Cql2Builder().eq("collection", "landsat").lt("eo:cloud_cover", 10).build()
    And(children=(Comparison(...), Comparison(...)))

- the first call on an empty builder makes its node the root;
- ``and_``/``or_`` extend a root of the same kind, or wrap any other root
  as the first child of a new And/Or;
- every other predicate call conjoins, as if ``and_(node)`` were called;
- ``not_`` replaces the root.
"""

import logging
from typing import Any, Iterable, Optional, Type, Union

import attr

from . import expressions as ex
from . import nodes
from .errors import InvalidArgumentShape
from .expressions import Subject
from .serializer import to_cql2_json

logger = logging.getLogger(__name__)


@attr.s
class Cql2Builder:
    """Assemble a CQL2 tree one predicate at a time.

    A builder is single-writer state; use one instance per filter.
    """

    root: Optional[nodes.CqlNode] = attr.ib(default=None)

    def _combine(
        self,
        kind: Type[Union[nodes.And, nodes.Or]],
        exprs: Iterable[nodes.CqlNode],
    ) -> "Cql2Builder":
        exprs = tuple(exprs)
        if self.root is None:
            self.root = kind(exprs)
        elif isinstance(self.root, kind):
            self.root = kind(self.root.children + exprs)
        else:
            self.root = kind((self.root,) + exprs)
        logger.debug(f"Builder root is now '{self.root.variant}'")
        return self

    def add(self, node: nodes.CqlNode) -> "Cql2Builder":
        """Add a predicate, conjoining it with the current root if there is one."""
        if not isinstance(node, nodes.EXPRESSION_TYPES):
            name = getattr(node, "variant", type(node).__name__)
            raise InvalidArgumentShape(f"cannot add {name} as a filter", op="and")
        if self.root is None:
            self.root = node
            return self
        return self._combine(nodes.And, (node,))

    def and_(self, *exprs: nodes.CqlNode) -> "Cql2Builder":
        return self._combine(nodes.And, exprs)

    def or_(self, *exprs: nodes.CqlNode) -> "Cql2Builder":
        return self._combine(nodes.Or, exprs)

    def not_(self, expr: nodes.CqlNode) -> "Cql2Builder":
        """Replace the root with the negation of ``expr``."""
        self.root = ex.not_(expr)
        return self

    def eq(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.eq(left, right))

    def neq(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.neq(left, right))

    def lt(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.lt(left, right))

    def lte(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.lte(left, right))

    def gt(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.gt(left, right))

    def gte(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.gte(left, right))

    def between(self, value: Subject, lower: Any, upper: Any) -> "Cql2Builder":
        return self.add(ex.between(value, lower, upper))

    def like(self, value: Subject, pattern: str) -> "Cql2Builder":
        return self.add(ex.like(value, pattern))

    def in_(self, value: Subject, values: Iterable[Any]) -> "Cql2Builder":
        return self.add(ex.in_(value, values))

    def is_null(self, value: Subject) -> "Cql2Builder":
        return self.add(ex.is_null(value))

    def s_intersects(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_intersects(left, right))

    def s_equals(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_equals(left, right))

    def s_disjoint(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_disjoint(left, right))

    def s_touches(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_touches(left, right))

    def s_within(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_within(left, right))

    def s_overlaps(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_overlaps(left, right))

    def s_crosses(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_crosses(left, right))

    def s_contains(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.s_contains(left, right))

    def t_after(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_after(left, right))

    def t_before(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_before(left, right))

    def t_contains(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_contains(left, right))

    def t_disjoint(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_disjoint(left, right))

    def t_during(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_during(left, right))

    def t_equals(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_equals(left, right))

    def t_intersects(self, left: Subject, right: Any) -> "Cql2Builder":
        return self.add(ex.t_intersects(left, right))

    def a_equals(self, left: Any, right: Any) -> "Cql2Builder":
        return self.add(ex.a_equals(left, right))

    def a_contains(self, left: Any, right: Any) -> "Cql2Builder":
        return self.add(ex.a_contains(left, right))

    def a_containedby(self, left: Any, right: Any) -> "Cql2Builder":
        return self.add(ex.a_containedby(left, right))

    def a_overlaps(self, left: Any, right: Any) -> "Cql2Builder":
        return self.add(ex.a_overlaps(left, right))

    def function(self, name: str, *args: Any) -> "Cql2Builder":
        """Add a function call used as a predicate."""
        return self.add(ex.function(name, *args))

    def build(self) -> Optional[nodes.CqlNode]:
        """Return the assembled tree, or None when nothing was added."""
        return self.root

    def to_json(self) -> Optional[dict]:
        """Serialize the assembled tree to a CQL2-JSON dictionary."""
        if self.root is None:
            return None
        return to_cql2_json(self.root)
