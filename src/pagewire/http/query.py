"""Immutable query string parameters.

Keeps the parsed pairs in arrival order so the query can be re-encoded
for the page object's ``url`` without losing repeated keys.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl, urlencode


class QueryParams(Mapping[str, str]):
    """Parsed query string.

    ``params["page"]`` returns the first value, ``get_list`` all values.
    """

    _pairs: tuple[tuple[str, str], ...]
    _raw: bytes

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        pairs = parse_qsl(query_string.decode("latin-1"), keep_blank_values=True)
        object.__setattr__(self, "_pairs", tuple(pairs))

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._pairs))

    def __repr__(self) -> str:
        return f"QueryParams({self.encode()!r})"

    def get_list(self, key: str) -> list[str]:
        """All values for *key*, in order."""
        return [value for name, value in self._pairs if name == key]

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def encode(self) -> str:
        """Re-encode the parsed pairs as a query string (no leading ``?``).

        Parsing the result yields the same pairs, which is what makes the
        page object's ``url`` match the browser's address bar.
        """
        return urlencode(self._pairs)

    @property
    def raw(self) -> bytes:
        """The query string exactly as received."""
        return self._raw
