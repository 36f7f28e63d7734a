"""Shared contract for CQL2 dialect translators."""

import logging
from typing import Any, TypeVar

import orjson

from .. import nodes
from ..errors import UnsupportedNodeType
from ..visitor import NodeVisitor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Translator(NodeVisitor[T]):
    """Base class for translating a CQL2 tree into a target dialect.

    Every variant a dialect does not override is rejected with
    :class:`UnsupportedNodeType`; a translator never drops a subtree.
    """

    dialect = "translator"

    def translate(self, node: nodes.CqlNode) -> T:
        """Translate a whole tree.

        Raises:
            UnsupportedNodeType: If the tree holds a variant this dialect
                cannot render.
        """
        result = self.visit(node)
        logger.debug(f"Translated '{node.variant}' filter to {self.dialect}")
        return result

    def generic_visit(self, node: nodes.CqlNode) -> T:
        raise UnsupportedNodeType(node.variant, dialect=self.dialect)


def geometry_json(node: nodes.CqlNode) -> str:
    """Render a geometry or bbox as compact JSON with sorted keys."""
    if isinstance(node, nodes.Geometry):
        value: Any = node.to_geojson()
    elif isinstance(node, nodes.BoundingBox):
        value = {"bbox": list(node.extent)}
    else:
        raise UnsupportedNodeType(node.variant, dialect="geometry")
    return orjson.dumps(value, option=orjson.OPT_SORT_KEYS).decode("utf-8")
