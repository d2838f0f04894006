"""Query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Parsed query string. Blank values are kept.

    Indexing returns the first value for a name, ``get_list`` every value.
    ``raw`` is the undecoded query string, used to rebuild ``Request.url``.
    """

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._pairs: tuple[tuple[str, str], ...] = tuple(
            parse_qsl(query_string.decode("latin-1"), keep_blank_values=True)
        )

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len({name for name, _ in self._pairs})

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get_list(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    @property
    def raw(self) -> bytes:
        return self._raw
