"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union

# Cookie and query values: strings, or nested mappings built from bracket notation
ParamValue = Union[str, Mapping[str, "ParamValue"]]
ServerValue = Union[str, int, float]

# Callback types used by authentication stages
DecodeCallback = Callable[[str], Awaitable[Any]]
LookupCallback = Callable[[str], Awaitable[Any]]
