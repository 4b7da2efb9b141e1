"""
Tests for the JSON utilities module.
"""

import importlib
import json
import sys
from unittest.mock import patch

import pytest

from sporesign import json_utils


class TestJSONUtils:
    """Test serialization and deserialization with the active backend."""

    def test_dumps_basic_serialization(self):
        """Test basic object serialization."""
        data = {"key": "value", "number": 42, "boolean": True, "missing": None}
        result = json_utils.dumps(data)

        assert isinstance(result, str)
        assert json.loads(result) == data

    def test_dumps_with_sort_keys(self):
        """Test serialization with key sorting."""
        result = json_utils.dumps({"z": 1, "a": 2, "m": 3}, sort_keys=True)

        assert result.index('"a"') < result.index('"m"') < result.index('"z"')

    def test_dumps_with_indent(self):
        result = json_utils.dumps({"a": 1}, indent=True)

        assert "\n" in result
        assert json.loads(result) == {"a": 1}

    def test_loads_str_and_bytes(self):
        assert json_utils.loads('{"key": "value"}') == {"key": "value"}
        assert json_utils.loads(b'{"key": "value"}') == {"key": "value"}

    def test_backend_name(self):
        assert json_utils.get_json_backend() in ("orjson", "builtin")


class TestBuiltinFallback:
    """Test the built-in json backend used when orjson is not installed."""

    @pytest.fixture
    def builtin_json_utils(self):
        with patch.dict(sys.modules, {"orjson": None}):
            module = importlib.reload(json_utils)
            yield module
        importlib.reload(json_utils)

    def test_backend_is_builtin(self, builtin_json_utils):
        assert builtin_json_utils.get_json_backend() == "builtin"

    def test_round_trip(self, builtin_json_utils):
        text = builtin_json_utils.dumps({"z": 1, "a": "é"}, sort_keys=True, indent=True)

        assert text.index('"a"') < text.index('"z"')
        assert builtin_json_utils.loads(text) == {"z": 1, "a": "é"}
        assert builtin_json_utils.loads(text.encode("utf-8")) == {"z": 1, "a": "é"}
