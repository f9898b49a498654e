"""ParserOptions — limits and encodings applied while building a request."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_ENV_PREFIX = "INCOMING_REQUEST_"


@dataclass(frozen=True)
class ParserOptions:
    """Immutable parser configuration shared by the query, cookie and form parsers.

    ``max_input_vars`` caps the number of name/value pairs read from one
    source; ``max_nesting_depth`` caps the number of bracket levels in one
    name. ``max_form_parts`` is the hard cap on parts in one form body; above
    it the body is rejected, below it extra pairs are dropped like any other
    source. ``max_upload_size`` of ``None`` disables the upload size check.
    """

    max_input_vars: int = 1000
    max_nesting_depth: int = 64
    encoding: str = "utf-8"
    query_separator: str = "&"
    max_upload_size: int | None = None
    max_form_parts: int = 10000

    def __post_init__(self) -> None:
        if self.max_input_vars < 1:
            raise ValueError("max_input_vars must be positive")
        if self.max_nesting_depth < 0:
            raise ValueError("max_nesting_depth must not be negative")
        if not self.query_separator:
            raise ValueError("query_separator must not be empty")
        if self.max_upload_size is not None and self.max_upload_size < 0:
            raise ValueError("max_upload_size must not be negative")
        if self.max_form_parts < 1:
            raise ValueError("max_form_parts must be positive")

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> ParserOptions:
        """Build options from ``INCOMING_REQUEST_*`` environment variables."""
        if environ is None:
            environ = os.environ

        kwargs: dict[str, object] = {}
        for name in (
            "max_input_vars",
            "max_nesting_depth",
            "max_upload_size",
            "max_form_parts",
        ):
            raw = environ.get(_ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                continue
            try:
                kwargs[name] = int(raw)
            except ValueError:
                raise ValueError(
                    f"{_ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}"
                ) from None

        encoding = environ.get(_ENV_PREFIX + "ENCODING")
        if encoding:
            kwargs["encoding"] = encoding

        return cls(**kwargs)  # type: ignore[arg-type]


DEFAULT_OPTIONS = ParserOptions()
