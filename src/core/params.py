from __future__ import annotations

import urllib.parse
from typing import Any, Iterable, Mapping


class QueryParams:
    """
    Ordered, read-only multi-map of decoded query parameters.

    Accepts whatever the callers have at hand:
      - a raw query string ("equity=AAPL,MSFT&equity=GOOG"), with or without a leading "?"
      - a Starlette/FastAPI QueryParams (anything exposing multi_items())
      - a sequence of (name, value) pairs
      - a mapping of name -> value or list of values

    Percent-decoding and "+"-as-space happen here for raw strings only; every other
    input is assumed to be decoded already.
    """

    def __init__(self, items: Iterable[tuple[str, str]] = ()):
        self._items: tuple[tuple[str, str], ...] = tuple((str(k), str(v)) for k, v in items)

    @classmethod
    def from_query_string(cls, query: str) -> "QueryParams":
        q = (query or "").lstrip("?")
        return cls(urllib.parse.parse_qsl(q, keep_blank_values=True))

    @classmethod
    def coerce(cls, value: Any) -> "QueryParams":
        if isinstance(value, QueryParams):
            return value
        if value is None:
            return cls()
        if isinstance(value, (str, bytes)):
            raw = value.decode("utf-8") if isinstance(value, bytes) else value
            return cls.from_query_string(raw)
        if hasattr(value, "multi_items"):
            return cls(value.multi_items())
        if isinstance(value, Mapping):
            pairs: list[tuple[str, str]] = []
            for k, v in value.items():
                if isinstance(v, (list, tuple)):
                    pairs.extend((k, x) for x in v)
                else:
                    pairs.append((k, v))
            return cls(pairs)
        return cls(value)

    def get_all(self, name: str) -> list[str]:
        return [v for k, v in self._items if k == name]

    def get(self, name: str) -> str | None:
        # First occurrence wins.
        for k, v in self._items:
            if k == name:
                return v
        return None

    def __repr__(self) -> str:
        return f"QueryParams({list(self._items)!r})"
