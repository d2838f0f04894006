"""Path matchers.

A route's path spec is resolved once, at registration, into one of
three matcher variants:

- ``"/users"``                  -> ``ExactMatcher``      (string equality)
- ``re.compile(r"^/users/\\d+")`` -> ``PatternMatcher``    (``pattern.search``)
- ``lambda request: ...``       -> ``PredicateMatcher``  (full request access)

Matchers only look at ``request.path`` (the query string is excluded)
unless a predicate inspects more.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeAlias

from swoop._internal.types import PathPredicate
from swoop.errors import InvalidArgument

if TYPE_CHECKING:
    from swoop.http.request import Request


class PathMatcher(Protocol):
    """Decides whether a route answers a request."""

    def __call__(self, request: "Request") -> bool: ...


@dataclass(frozen=True, slots=True)
class ExactMatcher:
    path: str

    def __call__(self, request: "Request") -> bool:
        return request.path == self.path


@dataclass(frozen=True, slots=True)
class PatternMatcher:
    pattern: re.Pattern[str]

    def __call__(self, request: "Request") -> bool:
        return self.pattern.search(request.path) is not None


@dataclass(frozen=True, slots=True)
class PredicateMatcher:
    predicate: PathPredicate

    def __call__(self, request: "Request") -> bool:
        return bool(self.predicate(request))


PathSpec: TypeAlias = str | re.Pattern[str] | PathPredicate


def compile_matcher(path: PathSpec) -> PathMatcher:
    """Resolve a path spec into its matcher.

    Raises ``InvalidArgument`` for an empty string or anything that is
    not a string, compiled pattern, or callable.
    """
    if isinstance(path, str):
        if not path:
            msg = "path must not be an empty string"
            raise InvalidArgument(msg)
        return ExactMatcher(path)
    if isinstance(path, re.Pattern):
        return PatternMatcher(path)
    if callable(path):
        return PredicateMatcher(path)
    msg = f"path must be a string, compiled pattern or callable, not {type(path).__name__}"
    raise InvalidArgument(msg)
