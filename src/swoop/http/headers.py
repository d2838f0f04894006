"""Case-insensitive request headers."""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only view of the header pairs sent with a request.

    Names are folded to lower case once, at construction. Lookups return
    the first value sent under a name; ``get_list`` returns all of them
    in arrival order.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw
        self._index: dict[str, list[str]] = {}
        for name, value in raw:
            self._index.setdefault(name.decode("latin-1").lower(), []).append(
                value.decode("latin-1")
            )

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Headers({self._raw!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Header pairs exactly as the server delivered them."""
        return self._raw
