"""A module for queryables documents and filter property validation."""

import logging
from typing import Any, Dict, Optional, Set, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field

from . import nodes
from .config import Cql2Settings, get_settings
from .errors import InvalidArgumentShape
from .inspect import get_properties

logger = logging.getLogger(__name__)


class QueryableProperty(BaseModel):
    """JSON Schema of a single queryable property."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    enum: Optional[list] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None


class Queryables(BaseModel):
    """Queryables JSON Schema document of a collection or catalog.

    Unknown top-level members are kept and written back on serialization.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    schema_: Optional[str] = Field(default=None, alias="$schema")
    id: Optional[str] = Field(default=None, alias="$id")
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[Dict[str, QueryableProperty]] = None
    additionalProperties: Optional[Union[bool, Dict[str, Any]]] = None


def parse_queryables(data: Union[str, bytes, Dict[str, Any]]) -> Queryables:
    """Parse a queryables document from JSON text, bytes or a dictionary."""
    if isinstance(data, (str, bytes)):
        data = orjson.loads(data)
    return Queryables.model_validate(data)


def serialize_queryables(queryables: Queryables) -> bytes:
    """Serialize a queryables document to indented JSON."""
    data = queryables.model_dump(mode="json", by_alias=True, exclude_none=True)
    return orjson.dumps(data, option=orjson.OPT_INDENT_2)


def validate_queryables(queryables: Queryables) -> None:
    """Check the basic shape of a queryables document.

    Raises:
        ValueError: If the document is not an object schema with properties.
    """
    if queryables.type != "object":
        raise ValueError("queryables must be of type 'object'")
    if queryables.properties is None:
        raise ValueError("queryables must have 'properties'")


def undefined_properties(node: nodes.CqlNode, queryables: Queryables) -> Set[str]:
    """Return the properties used by a filter that the queryables do not define.

    A document whose ``additionalProperties`` is ``true`` or a schema object
    accepts any property; only an absent or ``false`` value restricts the
    filter to the declared properties.
    """
    extra = queryables.additionalProperties
    if extra is not None and extra is not False:
        return set()
    allowed = set(queryables.properties or {})
    return get_properties(node) - allowed


def validate_filter_properties(
    node: nodes.CqlNode,
    queryables: Queryables,
    settings: Optional[Cql2Settings] = None,
) -> None:
    """Validate that a filter only uses queryable properties.

    Does nothing unless ``CQL2_VALIDATE_QUERYABLES`` is enabled.

    Raises:
        InvalidArgumentShape: If the filter references undefined properties.
    """
    settings = settings or get_settings()
    if not settings.CQL2_VALIDATE_QUERYABLES:
        return

    invalid_fields = undefined_properties(node, queryables)
    if invalid_fields:
        logger.debug(f"Rejecting filter with fields {sorted(invalid_fields)}")
        raise InvalidArgumentShape(
            f"Invalid query fields: {', '.join(sorted(invalid_fields))}. "
            "These fields are not defined in the queryables.",
            op="filter",
        )
