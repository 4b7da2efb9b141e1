"""
JSON Utilities
==============

Uses orjson when available, falling back to the built-in json library.
Used for signer configuration files and key info reports.
"""

import logging
from typing import Any, Union

logger = logging.getLogger(__name__)

try:
    import orjson

    def dumps(obj: Any, sort_keys: bool = False, indent: bool = False) -> str:
        """
        Serialize object to JSON string using orjson.

        Args:
            obj: Object to serialize
            sort_keys: Whether to sort dictionary keys
            indent: Pretty-print with two-space indentation

        Returns:
            JSON string
        """
        option = 0
        if sort_keys:
            option |= orjson.OPT_SORT_KEYS
        if indent:
            option |= orjson.OPT_INDENT_2

        return orjson.dumps(obj, option=option).decode("utf-8")

    def loads(s: Union[str, bytes]) -> Any:
        """Deserialize JSON string or bytes using orjson."""
        return orjson.loads(s)

    JSON_BACKEND = "orjson"
    logger.debug("Using orjson for JSON operations")

except ImportError:
    import json

    def dumps(obj: Any, sort_keys: bool = False, indent: bool = False) -> str:
        """
        Serialize object to JSON string using built-in json.

        Args:
            obj: Object to serialize
            sort_keys: Whether to sort dictionary keys
            indent: Pretty-print with two-space indentation

        Returns:
            JSON string
        """
        return json.dumps(obj, sort_keys=sort_keys, indent=2 if indent else None)

    def loads(s: Union[str, bytes]) -> Any:
        """Deserialize JSON string or bytes using built-in json."""
        return json.loads(s)

    JSON_BACKEND = "builtin"
    logger.debug("Using built-in json library")


def get_json_backend() -> str:
    """Get the currently active JSON backend name."""
    return JSON_BACKEND
