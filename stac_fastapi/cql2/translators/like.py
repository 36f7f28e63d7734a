"""CQL2 LIKE pattern conversion."""

from ..errors import InvalidArgumentShape

LIKE_ESCAPE = "\\"

# Unescaped CQL2 wildcard -> Elasticsearch/OpenSearch wildcard
ES_WILDCARDS = {"%": "*", "_": "?"}


def cql2_like_to_es(pattern: str) -> str:
    """Convert a CQL2 LIKE pattern to an Elasticsearch wildcard pattern.

    ``%`` becomes ``*`` and ``_`` becomes ``?``. A backslash makes the next
    ``%``, ``_`` or backslash literal.

    Raises:
        InvalidArgumentShape: A ``ValueError`` raised for a backslash before
            any other character, or at the end of the pattern.
    """
    converted = []
    chars = iter(pattern)
    for char in chars:
        if char != LIKE_ESCAPE:
            converted.append(ES_WILDCARDS.get(char, char))
            continue

        escaped = next(chars, None)
        if escaped is None:
            raise InvalidArgumentShape("pattern ends with an escape", op="like")
        if escaped != LIKE_ESCAPE and escaped not in ES_WILDCARDS:
            raise InvalidArgumentShape(
                f"'{LIKE_ESCAPE}{escaped}' is not a valid escape sequence", op="like"
            )
        converted.append(escaped)

    return "".join(converted)
