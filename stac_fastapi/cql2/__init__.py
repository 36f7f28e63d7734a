"""CQL2-JSON filter expressions for stac-fastapi.

This package parses, builds, serializes and translates CQL2 filters. It includes:

1. An immutable node model for CQL2 expressions
2. A CQL2-JSON parser and serializer
3. Node factories and a fluent builder
4. Translators to OData, SQL, CQL2-text and Elasticsearch/OpenSearch

The package is organized as follows:
- nodes.py: Node model and operator enumerations
- parser.py: CQL2-JSON parser
- expressions.py: Node factory functions
- builder.py: Fluent builder
- serializer.py: CQL2-JSON serializer
- translators/: Dialect translators
- inspect.py: Tree inspection helpers
- queryables.py: Queryables documents and property validation
- search.py: Search request filter parameters
- config.py: Settings
"""

from .builder import Cql2Builder
from .config import Cql2Settings, get_settings
from .errors import (
    Cql2Error,
    InvalidArgumentShape,
    InvalidArity,
    InvalidGeometry,
    InvalidTimeFormat,
    MalformedInput,
    MissingOperator,
    ParseError,
    TranslateError,
    UnsupportedNodeType,
    UnsupportedOperator,
)
from .nodes import (
    And,
    ArrayComparison,
    ArrayLiteral,
    Between,
    BoundingBox,
    Comparison,
    CqlNode,
    Date,
    FunctionCall,
    Geometry,
    In,
    Interval,
    IsNull,
    Like,
    Literal,
    Not,
    Or,
    Property,
    SpatialComparison,
    TemporalComparison,
    Timestamp,
)
from .parser import Cql2JsonParser, parse_cql2_json
from .search import FilterLang, FilterParams, filter_params
from .serializer import Cql2JsonSerializer, dumps, to_cql2_json
from .translators import (
    Cql2TextTranslator,
    ElasticsearchTranslator,
    ODataTranslator,
    SQLTranslator,
    Translator,
)
from .visitor import NodeVisitor

__all__ = [
    "Cql2Builder",
    "Cql2Settings",
    "get_settings",
    "Cql2Error",
    "ParseError",
    "TranslateError",
    "MalformedInput",
    "MissingOperator",
    "InvalidArity",
    "InvalidArgumentShape",
    "InvalidGeometry",
    "InvalidTimeFormat",
    "UnsupportedOperator",
    "UnsupportedNodeType",
    "CqlNode",
    "Property",
    "Literal",
    "Timestamp",
    "Date",
    "Interval",
    "Geometry",
    "BoundingBox",
    "ArrayLiteral",
    "And",
    "Or",
    "Not",
    "Comparison",
    "Between",
    "Like",
    "In",
    "IsNull",
    "SpatialComparison",
    "TemporalComparison",
    "ArrayComparison",
    "FunctionCall",
    "Cql2JsonParser",
    "parse_cql2_json",
    "Cql2JsonSerializer",
    "to_cql2_json",
    "dumps",
    "NodeVisitor",
    "Translator",
    "ODataTranslator",
    "SQLTranslator",
    "Cql2TextTranslator",
    "ElasticsearchTranslator",
    "FilterLang",
    "FilterParams",
    "filter_params",
]
