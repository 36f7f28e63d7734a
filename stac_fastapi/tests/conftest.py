import pytest

from stac_fastapi.cql2 import Cql2JsonParser

CQL2_ENV_VARS = (
    "CQL2_EXTRA_FUNCTIONS",
    "CQL2_JSON_INDENT",
    "CQL2_VALIDATE_QUERYABLES",
)


@pytest.fixture(autouse=True)
def clean_cql2_env(monkeypatch):
    """Run every test without CQL2 settings leaking in from the environment."""
    for name in CQL2_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def parser():
    return Cql2JsonParser()


@pytest.fixture
def polygon():
    return {
        "type": "Polygon",
        "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]],
    }


@pytest.fixture
def queryables_document():
    return {
        "$schema": "https://json-schema.org/draft/2019-09/schema",
        "$id": "https://stac-api.example.com/queryables",
        "type": "object",
        "title": "Queryables for Example STAC API",
        "properties": {
            "id": {
                "description": "ID",
                "$ref": "https://schemas.stacspec.org/v1.0.0/item-spec/json-schema/item.json#/id",
            },
            "collection": {"description": "Collection", "type": "string"},
            "eo:cloud_cover": {
                "description": "Cloud cover",
                "type": "number",
                "minimum": 0,
                "maximum": 100,
            },
            "datetime": {
                "description": "Datetime",
                "type": "string",
                "format": "date-time",
            },
        },
        "additionalProperties": False,
        "x-custom": {"source": "example"},
    }
