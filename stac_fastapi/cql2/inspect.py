"""Helpers for inspecting CQL2 trees."""

from collections import defaultdict
from typing import Dict, Iterator, List, Optional, Set

from . import nodes
from .errors import UnsupportedNodeType

PROPERTIES_PREFIX = "properties."


def children(node: nodes.CqlNode) -> List[nodes.CqlNode]:
    """Return the direct child nodes of ``node`` in order."""
    if isinstance(node, (nodes.And, nodes.Or)):
        return list(node.children)
    if isinstance(node, nodes.Not):
        return [node.child]
    if isinstance(node, nodes.ArrayLiteral):
        return list(node.elements)
    if isinstance(node, nodes.Between):
        return [node.subject, node.lower, node.upper]
    if isinstance(node, nodes.In):
        return [node.subject, *node.values]
    if isinstance(node, (nodes.Like, nodes.IsNull)):
        return [node.subject]
    if isinstance(
        node,
        (
            nodes.Comparison,
            nodes.SpatialComparison,
            nodes.TemporalComparison,
            nodes.ArrayComparison,
        ),
    ):
        return [node.left, node.right]
    if isinstance(node, nodes.FunctionCall):
        return list(node.args)
    return []


def iter_nodes(node: nodes.CqlNode) -> Iterator[nodes.CqlNode]:
    """Walk a tree in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def get_properties(node: nodes.CqlNode) -> Set[str]:
    """Collect every property name referenced by a tree.

    Property names are normalized by stripping the 'properties.' prefix
    if present, to match queryables stored without the prefix.
    """
    props: Set[str] = set()
    for current in iter_nodes(node):
        if isinstance(current, nodes.Property):
            name = current.name
            if name.startswith(PROPERTIES_PREFIX):
                name = name[len(PROPERTIES_PREFIX) :]
            props.add(name)
    return props


def extract_terminal_ops(node: nodes.CqlNode) -> List[nodes.CqlNode]:
    """Flatten a conjunction into its terminal predicates.

    Nested And nodes are unwrapped in order; an Or or Not anywhere in the
    tree cannot be flattened and raises ``UnsupportedNodeType``.
    """
    if isinstance(node, (nodes.Or, nodes.Not)):
        raise UnsupportedNodeType(node.variant, dialect="terminal operations")
    if isinstance(node, nodes.And):
        ops: List[nodes.CqlNode] = []
        for child in node.children:
            ops.extend(extract_terminal_ops(child))
        return ops
    return [node]


def subject_property(node: nodes.CqlNode) -> Optional[str]:
    """Return the name of the first property a predicate refers to."""
    for current in iter_nodes(node):
        if isinstance(current, nodes.Property):
            return current.name
    return None


def operator_name(node: nodes.CqlNode) -> str:
    """Return the CQL2-JSON operator name of a predicate."""
    op = getattr(node, "op", None)
    if op is not None:
        return op.value
    if isinstance(node, nodes.FunctionCall):
        return node.name
    return node.visit_name


def group_by_property(
    ops: List[nodes.CqlNode],
) -> Dict[Optional[str], List[nodes.CqlNode]]:
    """Group predicates by the property they test."""
    groups: Dict[Optional[str], List[nodes.CqlNode]] = defaultdict(list)
    for op in ops:
        groups[subject_property(op)].append(op)
    return dict(groups)


def group_by_operator(ops: List[nodes.CqlNode]) -> Dict[str, List[nodes.CqlNode]]:
    """Group predicates by operator name."""
    groups: Dict[str, List[nodes.CqlNode]] = defaultdict(list)
    for op in ops:
        groups[operator_name(op)].append(op)
    return dict(groups)
