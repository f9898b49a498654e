"""Tests for shape validation and copy helpers."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from fastapi_incoming_request.exceptions import ShapeViolation
from fastapi_incoming_request.shapes import (
    copy_tree,
    freeze,
    validate_file_tree,
    validate_keys,
    validate_params,
    validate_server_params,
)
from fastapi_incoming_request.uploads import UploadedFile


class TestValidateParams:
    def test_accepts_nested_strings(self) -> None:
        value = {"a": "1", "b": {"c": "2", "d": {"e": "3"}}}
        assert validate_params(value, max_depth=64, label="query params") == value

    def test_returns_detached_copy(self) -> None:
        value = {"b": {"c": "2"}}
        result = validate_params(value, max_depth=64, label="query params")
        value["b"]["c"] = "changed"
        assert result == {"b": {"c": "2"}}

    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(ShapeViolation, match="query params must be a mapping"):
            validate_params(["a"], max_depth=64, label="query params")

    def test_rejects_non_string_key(self) -> None:
        with pytest.raises(ShapeViolation) as exc_info:
            validate_params({"a": {1: "x"}}, max_depth=64, label="cookie params")
        assert exc_info.value.path == "a"

    def test_rejects_non_string_value(self) -> None:
        with pytest.raises(ShapeViolation) as exc_info:
            validate_params({"a": {"b": 1}}, max_depth=64, label="cookie params")
        assert exc_info.value.path == "a[b]"

    def test_rejects_list_value(self) -> None:
        with pytest.raises(ShapeViolation):
            validate_params({"a": ["1", "2"]}, max_depth=64, label="query params")

    def test_rejects_excess_depth(self) -> None:
        with pytest.raises(ShapeViolation) as exc_info:
            validate_params({"a": {"b": {"c": "1"}}}, max_depth=1, label="q")
        assert exc_info.value.path == "a[b]"

    def test_shape_violation_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            validate_params(None, max_depth=64, label="query params")


class TestValidateKeys:
    def test_accepts_arbitrary_values(self) -> None:
        value = {"a": [1, 2], "b": None, "c": object}
        assert validate_keys(value, label="body params") == value

    def test_rejects_non_string_key(self) -> None:
        with pytest.raises(ShapeViolation, match="body params key 1"):
            validate_keys({1: "x"}, label="body params")


class TestValidateServerParams:
    def test_accepts_scalars(self) -> None:
        value = {"A": "x", "B": 1, "C": 1.5}
        assert validate_server_params(value) == value

    def test_rejects_nested_value(self) -> None:
        with pytest.raises(ShapeViolation):
            validate_server_params({"A": {"b": "c"}})


class TestValidateFileTree:
    def test_accepts_nested_uploads(self) -> None:
        upload = UploadedFile(field_name="docs[]")
        tree = {"docs": {"0": upload}}
        assert validate_file_tree(tree, UploadedFile) == tree

    def test_rejects_other_leaves(self) -> None:
        with pytest.raises(ShapeViolation) as exc_info:
            validate_file_tree({"docs": {"0": "a.txt"}}, UploadedFile)
        assert exc_info.value.path == "docs[0]"


class TestCopyAndFreeze:
    def test_copy_tree_is_deep_for_mappings(self) -> None:
        original = {"a": {"b": "1"}}
        copied = copy_tree(original)
        copied["a"]["b"] = "2"
        assert original == {"a": {"b": "1"}}

    def test_freeze_is_read_only_at_every_level(self) -> None:
        frozen = freeze({"a": {"b": "1"}})
        assert isinstance(frozen, MappingProxyType)
        assert isinstance(frozen["a"], MappingProxyType)
        with pytest.raises(TypeError):
            frozen["a"]["b"] = "2"  # type: ignore[index]

    def test_freeze_detaches_from_source(self) -> None:
        source = {"a": "1"}
        frozen = freeze(source)
        source["a"] = "2"
        assert frozen["a"] == "1"
