"""Search request boundary for CQL2 filters."""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from . import nodes
from .serializer import to_cql2_json


class FilterLang(str, Enum):
    """Encodings of the ``filter`` member of a search request."""

    CQL2_JSON = "cql2-json"
    CQL2_TEXT = "cql2-text"


class FilterParams(BaseModel):
    """The ``filter`` and ``filter-lang`` members of a search request body."""

    model_config = ConfigDict(populate_by_name=True)

    filter: Optional[Union[Dict[str, Any], str]] = None
    filter_lang: Optional[FilterLang] = Field(default=None, alias="filter-lang")

    def to_body(self) -> Dict[str, Any]:
        """Return the members to merge into a search request body.

        An absent filter produces no members at all.
        """
        if self.filter is None:
            return {}
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def filter_params(value: Union[nodes.CqlNode, str, None]) -> FilterParams:
    """Build search filter parameters.

    Args:
        value: A filter tree (sent as cql2-json), a pre-rendered cql2-text
            string, or None for no filter.
    """
    if value is None:
        return FilterParams()
    if isinstance(value, str):
        return FilterParams(filter=value, filter_lang=FilterLang.CQL2_TEXT)
    return FilterParams(filter=to_cql2_json(value), filter_lang=FilterLang.CQL2_JSON)
