"""Shared URL utilities: split scheme URLs and serialize query strings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qsl, quote


@dataclass
class ParsedURL:
    scheme: str
    path: list[str]
    query: list[tuple[str, str]] = field(default_factory=list)
    fragment: Optional[str] = None

    def get(self, key: str) -> Optional[str]:
        """First value of a query key, or None when the key is absent."""
        for k, v in self.query:
            if k == key:
                return v
        return None

    def has(self, key: str) -> bool:
        return any(k == key for k, _ in self.query)

    def segment(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.path):
            return self.path[index]
        return None


def parse_custom_url(url: Optional[str]) -> Optional[ParsedURL]:
    """Split a ``scheme://path?query#fragment`` string without interpreting it.

    Returns None when there is no ``://`` delimiter or nothing follows it.
    Empty path segments are kept so callers can index by position.
    """
    if not url:
        return None
    scheme, sep, rest = url.partition("://")
    if not sep or not rest:
        return None
    path_and_query, hash_sep, fragment = rest.partition("#")
    path, _, query_string = path_and_query.partition("?")
    return ParsedURL(
        scheme=scheme,
        path=path.split("/"),
        query=parse_qsl(query_string, keep_blank_values=True),
        fragment=fragment if hash_sep else None,
    )


def quote_query_value(value: str) -> str:
    """Percent-escape a query value so ``parse_custom_url`` reads it back unchanged.

    ``/``, ``:`` and ``.`` stay literal to keep variant tokens readable.
    """
    return quote(value, safe="/:.")


def serialize_query_string(query: dict[str, Optional[str]]) -> str:
    """Render ``{"v": "x", "l": None}`` as ``?v=x&l``; empty dict gives ``""``.

    Keys are emitted in insertion order; a None value is a bare flag.
    """
    query_string = "&".join(
        key if value is None else f"{key}={quote_query_value(value)}"
        for key, value in query.items()
    )
    if not query_string:
        return ""
    return f"?{query_string}"
