"""Origin-form derivation of the request target."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_ABSOLUTE_FORM = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://")


def origin_form(target: str) -> str:
    """Reduce a request target to its path and, if non-empty, ``?query``.

    Origin-form targets keep their path verbatim (percent-encoding and a
    leading ``//`` included). Absolute-form targets lose scheme, authority
    and fragment. Asterisk-form ``*`` is returned as is; authority-form
    (``host:port``) carries no path and yields ``/``.
    """
    if target == "*":
        return target

    if target.startswith("/"):
        path, _, query = target.partition("#")[0].partition("?")
    elif _ABSOLUTE_FORM.match(target):
        parts = urlsplit(target)
        path, query = parts.path or "/", parts.query
    else:
        return "/"

    return f"{path}?{query}" if query else path


def query_component(target: str) -> str:
    """Return the raw query string of ``target`` without the ``?``."""
    return origin_form(target).partition("?")[2]
