"""CQL2 configuration."""

import json
import logging
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .nodes import SUPPORTED_FUNCTIONS

logger = logging.getLogger(__name__)


class Cql2Settings(BaseSettings):
    """Settings for parsing and serializing CQL2 filters, read from the environment."""

    CQL2_EXTRA_FUNCTIONS: str = ""
    CQL2_JSON_INDENT: bool = False
    CQL2_VALIDATE_QUERYABLES: bool = False

    @field_validator("CQL2_EXTRA_FUNCTIONS", mode="before")
    @classmethod
    def validate_extra_functions(cls, v):
        """Handle empty/None values for CQL2_EXTRA_FUNCTIONS."""
        if v in ["null", "Null", "NULL", "none", "None", "NONE", None]:
            return ""
        return v

    def get_extra_functions(self) -> List[str]:
        """Parse extra function names from a comma separated string or JSON list.

        Raises:
            ValueError: If the value starts like a JSON list but does not decode.
        """
        if not self.CQL2_EXTRA_FUNCTIONS:
            return []

        raw = self.CQL2_EXTRA_FUNCTIONS.strip()
        if raw.startswith("["):
            try:
                names = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ValueError(
                    f"CQL2_EXTRA_FUNCTIONS is not a valid JSON list: {e}"
                ) from e
        else:
            names = raw.split(",")

        functions = []
        for name in names:
            name = str(name).strip().lower()
            if not name:
                continue
            if name in SUPPORTED_FUNCTIONS:
                logger.warning(
                    f"CQL2_EXTRA_FUNCTIONS: '{name}' is already supported, ignoring."
                )
                continue
            functions.append(name)
        return functions

    def get_functions(self) -> List[str]:
        """Return every function name the parser accepts."""
        return list(SUPPORTED_FUNCTIONS) + self.get_extra_functions()


def get_settings() -> Cql2Settings:
    """Return settings loaded from the current environment."""
    return Cql2Settings()
