"""Bracket-notation parser shared by query strings, cookies and form fields.

Names such as ``a[]``, ``a[b]`` and ``a[b][c]`` are expanded into nested
mappings keyed by strings. Sequential ``[]`` entries are stored under the
keys ``"0"``, ``"1"``, ... so every level of the result is a plain ``dict``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from functools import partial
from typing import Any
from urllib.parse import unquote, unquote_plus

from fastapi_incoming_request.config import DEFAULT_OPTIONS, ParserOptions

logger = logging.getLogger(__name__)

_CANONICAL_INT = re.compile(r"0|-?[1-9][0-9]*")
_BASE_NAME_TABLE = str.maketrans({".": "_", " ": "_"})


def split_name(name: str) -> tuple[str, list[str | None]] | None:
    """Split ``a[b][]`` into ``("a", ["b", None])``.

    ``None`` marks an append slot. Returns ``None`` when the base name is
    empty, in which case the pair is dropped.
    """
    name = name.lstrip(" ")
    open_at = name.find("[")
    if open_at == -1:
        base = name.translate(_BASE_NAME_TABLE)
        return (base, []) if base else None

    base = name[:open_at].translate(_BASE_NAME_TABLE)
    if not base:
        return None

    indices: list[str | None] = []
    pos = open_at
    while True:
        close_at = name.find("]", pos + 1)
        if close_at == -1:
            if not indices:
                # unterminated first bracket: flat name, "[" becomes "_"
                return base + "_" + name[open_at + 1 :], []
            break
        index = name[pos + 1 : close_at]
        indices.append(index or None)
        pos = close_at + 1
        if pos >= len(name) or name[pos] != "[":
            break
    return base, indices


def next_index(node: dict[str, Any]) -> str:
    """Return the key ``[]`` appends at: one past the largest integer key."""
    highest = -1
    for key in node:
        if _CANONICAL_INT.fullmatch(key):
            highest = max(highest, int(key))
    return str(highest + 1)


def insert(
    tree: dict[str, Any],
    name: str,
    value: Any,
    *,
    max_depth: int = DEFAULT_OPTIONS.max_nesting_depth,
    first_wins: bool = False,
) -> bool:
    """Store ``value`` in ``tree`` under the bracket-notation ``name``.

    Flat duplicates overwrite unless ``first_wins`` is set. Returns whether
    the value was stored.
    """
    parts = split_name(name)
    if parts is None:
        return False
    base, indices = parts

    if len(indices) > max_depth:
        logger.warning(
            "Dropping variable %r: nested deeper than %d levels", base, max_depth
        )
        tree.pop(base, None)
        return False

    if not indices:
        if first_wins and base in tree:
            return False
        tree[base] = value
        return True

    node = tree
    key: str | None = base
    for index in indices:
        if key is None:
            child: dict[str, Any] = {}
            node[next_index(node)] = child
        else:
            existing = node.get(key)
            if isinstance(existing, dict):
                child = existing
            else:
                child = {}
                node[key] = child
        node = child
        key = index

    node[next_index(node) if key is None else key] = value
    return True


def build_tree(
    pairs: Iterable[tuple[str, Any]],
    options: ParserOptions = DEFAULT_OPTIONS,
    *,
    first_wins: bool = False,
) -> dict[str, Any]:
    """Fold already-decoded ``(name, value)`` pairs into a nested mapping."""
    tree: dict[str, Any] = {}
    for count, (name, value) in enumerate(pairs):
        if count >= options.max_input_vars:
            logger.warning(
                "Input variables exceed %d; remaining pairs dropped",
                options.max_input_vars,
            )
            break
        insert(
            tree,
            name,
            value,
            max_depth=options.max_nesting_depth,
            first_wins=first_wins,
        )
    return tree


def _split_pairs(
    raw: str, separator: str, decode: Callable[[str], str]
) -> Iterator[tuple[str, str]]:
    for segment in raw.split(separator):
        if not segment:
            continue
        name, _, value = segment.partition("=")
        yield decode(name), decode(value)


def parse_query(
    query_string: str | bytes, options: ParserOptions = DEFAULT_OPTIONS
) -> dict[str, Any]:
    """Parse a raw query string (without the leading ``?``)."""
    if isinstance(query_string, bytes):
        query_string = query_string.decode(options.encoding, errors="replace")
    decode = partial(unquote_plus, encoding=options.encoding, errors="replace")
    return build_tree(
        _split_pairs(query_string, options.query_separator, decode), options
    )


def parse_cookie_header(
    header: str, options: ParserOptions = DEFAULT_OPTIONS
) -> dict[str, Any]:
    """Parse a ``Cookie`` header value.

    Percent-escapes are decoded but ``+`` is kept literally, and the first
    occurrence of a repeated flat name wins.
    """
    decode = partial(unquote, encoding=options.encoding, errors="replace")
    return build_tree(_split_pairs(header, ";", decode), options, first_wins=True)
