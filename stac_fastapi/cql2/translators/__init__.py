"""CQL2 dialect translators.

- base.py: Translator contract shared by every dialect
- odata.py: OData ``$filter`` expressions
- sql.py: SQL ``WHERE`` clauses
- text.py: CQL2-text
- elasticsearch.py: Elasticsearch/OpenSearch query DSL
- like.py: CQL2 LIKE pattern conversion
"""

from .base import Translator
from .elasticsearch import ElasticsearchTranslator, to_es
from .like import cql2_like_to_es
from .odata import ODataTranslator
from .sql import SQLTranslator
from .text import Cql2TextTranslator, to_wkt

__all__ = [
    "Translator",
    "ODataTranslator",
    "SQLTranslator",
    "Cql2TextTranslator",
    "ElasticsearchTranslator",
    "to_es",
    "to_wkt",
    "cql2_like_to_es",
]
