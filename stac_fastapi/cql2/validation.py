"""Argument checks shared by the CQL2 parser and builder."""

from typing import Any, Dict, List, Union

from .errors import InvalidArgumentShape, InvalidArity, InvalidGeometry
from .nodes import Geometry, Property


def get_args(op: str, form: Dict[str, Any]) -> List[Any]:
    """Return the 'args' array of an expression object.

    Raises:
        InvalidArgumentShape: If 'args' is missing or is not an array.
    """
    args = form.get("args")
    if not isinstance(args, list):
        raise InvalidArgumentShape("'args' must be an array", op=op)
    return args


def require_arity(op: str, args: List[Any], expected: Union[int, str]) -> None:
    """Ensure ``args`` holds exactly ``expected`` items."""
    if len(args) != expected:
        raise InvalidArity(op, expected, len(args))


def require_object(op: str, value: Any, what: str) -> Dict[str, Any]:
    """Ensure ``value`` is a JSON object and return it."""
    if not isinstance(value, dict):
        raise InvalidArgumentShape(
            f"{what} must be an object, got {json_type(value)}", op=op
        )
    return value


def is_property_ref(value: Any) -> bool:
    """Return True for any object carrying a 'property' member.

    The check is structural: a literal object that happens to contain a
    'property' key is treated as a property reference.
    """
    return isinstance(value, dict) and "property" in value


def parse_property_ref(op: str, value: Any, what: str = "argument") -> Property:
    """Decode a ``{"property": <name>}`` object into a Property node."""
    if not is_property_ref(value):
        raise InvalidArgumentShape(f"{what} must be a property object", op=op)
    name = value["property"]
    if not isinstance(name, str) or not name:
        raise InvalidArgumentShape("'property' field must be a non-empty string", op=op)
    return Property(name)


def parse_geometry(op: str, value: Any) -> Geometry:
    """Decode a GeoJSON geometry object; both 'type' and 'coordinates' are required."""
    if not isinstance(value, dict):
        raise InvalidGeometry(
            f"geometry must be an object, got {json_type(value)}", op=op
        )
    geo_type = value.get("type")
    if not isinstance(geo_type, str) or not geo_type:
        raise InvalidGeometry("geometry must have a 'type' field", op=op)
    if value.get("coordinates") is None:
        raise InvalidGeometry("geometry must have 'coordinates'", op=op)
    bbox = value.get("bbox")
    if bbox is not None and not isinstance(bbox, (list, tuple)):
        raise InvalidGeometry("geometry bbox must be an array of numbers", op=op)
    return Geometry(type=geo_type, coordinates=value["coordinates"], bbox=bbox)


def json_type(value: Any) -> str:
    """Name the JSON type of a decoded value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
