"""CQL2-JSON parser."""

import logging
from typing import Any, Callable, Dict, Iterable, Optional, Union

import orjson

from . import nodes
from .config import get_settings
from .datetime_utils import parse_date, parse_interval_bound, parse_timestamp
from .errors import (
    InvalidArgumentShape,
    InvalidArity,
    MalformedInput,
    MissingOperator,
    UnsupportedOperator,
)
from .validation import (
    get_args,
    is_property_ref,
    json_type,
    parse_geometry,
    parse_property_ref,
    require_arity,
    require_object,
)

logger = logging.getLogger(__name__)

Document = Union[str, bytes, bytearray, memoryview, Dict[str, Any]]


class Cql2JsonParser:
    """Parse CQL2-JSON into an AST tree."""

    def __init__(self, functions: Optional[Iterable[str]] = None):
        """Initialize the CQL2-JSON parser.

        Args:
            functions: Function names accepted as operators. Defaults to the
                built-in functions plus ``CQL2_EXTRA_FUNCTIONS``.
        """
        if functions is None:
            functions = get_settings().get_functions()
        self.functions = frozenset(name.lower() for name in functions)

        self._handlers: Dict[str, Callable[[str, Dict[str, Any]], nodes.CqlNode]] = {
            nodes.LogicalOp.AND.value: self._parse_logical,
            nodes.LogicalOp.OR.value: self._parse_logical,
            nodes.LogicalOp.NOT.value: self._parse_not,
            nodes.AdvancedComparisonOp.BETWEEN.value: self._parse_between,
            nodes.AdvancedComparisonOp.LIKE.value: self._parse_like,
            nodes.AdvancedComparisonOp.IN.value: self._parse_in,
            nodes.AdvancedComparisonOp.IS_NULL.value: self._parse_isnull,
        }
        for op in nodes.ComparisonOp:
            self._handlers[op.value] = self._parse_comparison
        for op in nodes.SpatialOp:
            self._handlers[op.value] = self._parse_spatial
        for op in nodes.TemporalOp:
            self._handlers[op.value] = self._parse_temporal
        for op in nodes.ArrayOp:
            self._handlers[op.value] = self._parse_array

    def parse(self, cql: Document) -> nodes.CqlNode:
        """Parse CQL2-JSON into AST tree.

        Args:
            cql: CQL2 expression as JSON text/bytes or an already decoded dictionary

        Returns:
            Root node of the AST tree

        Raises:
            ParseError: If the document is not valid JSON or violates the grammar.
                No partial tree is ever returned.
        """
        if isinstance(cql, (str, bytes, bytearray, memoryview)):
            try:
                data = orjson.loads(cql)
            except orjson.JSONDecodeError as e:
                raise MalformedInput(f"failed to decode JSON: {e}") from e
        else:
            data = cql

        node = self._parse_node(require_object("filter", data, "filter"))
        logger.debug(f"Parsed CQL2-JSON filter with root '{node.variant}'")
        return node

    def _parse_node(self, form: Dict[str, Any]) -> nodes.CqlNode:
        """Parse a single CQL2 expression object into AST."""
        op = form.get("op")
        if not isinstance(op, str):
            raise MissingOperator("missing or invalid 'op' field")
        op = op.lower()

        handler = self._handlers.get(op)
        if handler is not None:
            return handler(op, form)
        if op in self.functions:
            return self._parse_function(op, form)
        raise UnsupportedOperator(op)

    def _parse_logical(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        children = [
            self._parse_node(require_object(op, arg, "child expression"))
            for arg in get_args(op, form)
        ]
        if op == nodes.LogicalOp.AND:
            return nodes.And(children)
        return nodes.Or(children)

    def _parse_not(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 1)
        child = require_object(op, args[0], "child expression")
        return nodes.Not(self._parse_node(child))

    def _parse_comparison(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 2)

        left = parse_property_ref(op, args[0], "first argument")
        # A second property object makes this a property-to-property comparison
        if is_property_ref(args[1]):
            right = parse_property_ref(op, args[1], "second argument")
        else:
            right = self._parse_operand(op, args[1])

        return nodes.Comparison(op=op, left=left, right=right)

    def _parse_between(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 3)

        return nodes.Between(
            subject=parse_property_ref(op, args[0], "first argument"),
            lower=self._parse_operand(op, args[1]),
            upper=self._parse_operand(op, args[2]),
        )

    def _parse_like(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 2)

        subject = parse_property_ref(op, args[0], "first argument")
        pattern = args[1]
        if not isinstance(pattern, str):
            raise InvalidArgumentShape("'pattern' must be a string", op=op)

        return nodes.Like(subject=subject, pattern=pattern)

    def _parse_in(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 2)

        subject = parse_property_ref(op, args[0], "first argument")
        values = args[1]
        if not isinstance(values, list):
            raise InvalidArgumentShape(
                f"'values' must be an array, got {json_type(values)}", op=op
            )

        return nodes.In(
            subject=subject, values=[self._parse_operand(op, v) for v in values]
        )

    def _parse_isnull(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 1)
        return nodes.IsNull(parse_property_ref(op, args[0], "argument"))

    def _parse_spatial(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 2)

        subject = parse_property_ref(op, args[0], "first argument")
        if _is_bbox_wrapper(args[1]):
            shape: nodes.CqlNode = self._parse_bbox(op, args[1])
        else:
            shape = parse_geometry(op, args[1])

        return nodes.SpatialComparison(op=op, left=subject, right=shape)

    def _parse_temporal(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 2)

        subject = parse_property_ref(op, args[0], "first argument")
        value = args[1]
        if isinstance(value, dict) and "interval" in value:
            instant: nodes.CqlNode = self._parse_interval(op, value)
        elif isinstance(value, dict) and "timestamp" in value:
            instant = nodes.Timestamp(parse_timestamp(value["timestamp"], op=op))
        elif isinstance(value, dict) and "date" in value:
            instant = nodes.Date(parse_date(value["date"], op=op))
        else:
            raise InvalidArgumentShape(
                "second argument must be an interval, timestamp or date object",
                op=op,
            )

        return nodes.TemporalComparison(op=op, left=subject, right=instant)

    def _parse_array(self, op: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(op, form)
        require_arity(op, args, 2)

        left, right = (self._parse_operand(op, arg) for arg in args)
        for side in (left, right):
            if not isinstance(
                side, (nodes.Property, nodes.ArrayLiteral, nodes.FunctionCall)
            ):
                raise InvalidArgumentShape(
                    f"arguments must be arrays or properties, got {side.variant}",
                    op=op,
                )

        return nodes.ArrayComparison(op=op, left=left, right=right)

    def _parse_function(self, name: str, form: Dict[str, Any]) -> nodes.CqlNode:
        args = get_args(name, form)
        return nodes.FunctionCall(
            name=name, args=[self._parse_operand(name, arg) for arg in args]
        )

    def _parse_operand(self, op: str, value: Any) -> nodes.CqlNode:
        """Parse a literal-or-property argument."""
        if isinstance(value, (bool, int, float, str)):
            return nodes.Literal(value)
        if isinstance(value, list):
            return nodes.ArrayLiteral([self._parse_operand(op, v) for v in value])
        if not isinstance(value, dict):
            raise InvalidArgumentShape(
                f"{json_type(value)} is not a valid operand", op=op
            )

        if "property" in value:
            return parse_property_ref(op, value)
        if "op" in value:
            return self._parse_node(value)
        if "timestamp" in value:
            return nodes.Timestamp(parse_timestamp(value["timestamp"], op=op))
        if "date" in value:
            return nodes.Date(parse_date(value["date"], op=op))
        if "interval" in value:
            return self._parse_interval(op, value)
        if "type" in value:
            return parse_geometry(op, value)
        if "bbox" in value:
            return self._parse_bbox(op, value)

        raise InvalidArgumentShape(
            f"unrecognized operand object with keys {sorted(value)}", op=op
        )

    def _parse_interval(self, op: str, value: Dict[str, Any]) -> nodes.Interval:
        bounds = value["interval"]
        if not isinstance(bounds, list):
            raise InvalidArgumentShape("'interval' must be an array", op=op)
        if len(bounds) != 2:
            raise InvalidArity(op, 2, len(bounds))

        return nodes.Interval(
            start=parse_interval_bound(bounds[0], op=op),
            end=parse_interval_bound(bounds[1], op=op),
        )

    def _parse_bbox(self, op: str, value: Dict[str, Any]) -> nodes.BoundingBox:
        extent = value["bbox"]
        if not isinstance(extent, list):
            raise InvalidArgumentShape("'bbox' must be an array of numbers", op=op)
        return nodes.BoundingBox(extent)


def _is_bbox_wrapper(value: Any) -> bool:
    """A ``{"bbox": [...]}`` wrapper; GeoJSON geometries may carry their own bbox."""
    return isinstance(value, dict) and "bbox" in value and "type" not in value


def parse_cql2_json(
    document: Document, functions: Optional[Iterable[str]] = None
) -> nodes.CqlNode:
    """Parse a CQL2-JSON document into an AST tree.

    Args:
        document: JSON text, bytes or a decoded dictionary.
        functions: Function names to accept; see :class:`Cql2JsonParser`.

    Returns:
        The root node.
    """
    return Cql2JsonParser(functions=functions).parse(document)
