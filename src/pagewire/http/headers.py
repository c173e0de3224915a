"""Immutable, case-insensitive HTTP headers.

Built once from the raw ASGI byte pairs. Lookups are by lowercased
name; repeated headers keep every value in arrival order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only header mapping.

    ``headers["X-Inertia"]`` returns the first value, ``get_list`` all of them.
    Keys iterate lowercased.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> Headers:
        """Build from a plain ``{name: value}`` mapping (tests, adapters)."""
        return cls(
            tuple((k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items())
        )

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Headers is immutable")

    def __repr__(self) -> str:
        first = {name: values[0] for name, values in self._index.items()}
        return f"Headers({first!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        values = self._index.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*."""
        return list(self._index.get(key.lower(), ()))

    def get_csv(self, key: str) -> tuple[str, ...]:
        """Split a comma-separated header into trimmed, non-empty items.

        ``"a, b,,c"`` becomes ``("a", "b", "c")``. Missing headers give ``()``.
        """
        value = self.get(key)
        if not value:
            return ()
        return tuple(item.strip() for item in value.split(",") if item.strip())

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Raw header byte pairs, as received."""
        return self._raw
