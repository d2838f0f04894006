"""Tests for swoop.routing.route — RouteOptions normalization."""

import pytest

from swoop.errors import InvalidArgument
from swoop.routing.route import RouteOptions, check_handler, check_middleware, normalize_options


async def mw_a(request, response, next):
    await next()


async def mw_b(request, response, next):
    await next()


class TestNormalizeOptions:
    def test_none_gives_no_middleware(self) -> None:
        assert normalize_options(None) == RouteOptions()

    def test_single_callable(self) -> None:
        assert normalize_options(mw_a).use == (mw_a,)

    def test_list_keeps_order(self) -> None:
        assert normalize_options([mw_b, mw_a]).use == (mw_b, mw_a)

    def test_tuple_accepted(self) -> None:
        assert normalize_options((mw_a,)).use == (mw_a,)

    def test_empty_list(self) -> None:
        assert normalize_options([]).use == ()

    def test_route_options_passthrough(self) -> None:
        options = RouteOptions(use=(mw_a, mw_b))
        assert normalize_options(options) is options

    def test_route_options_with_none_use(self) -> None:
        assert normalize_options(RouteOptions(use=None)).use == ()  # type: ignore[arg-type]

    def test_route_options_with_list_use(self) -> None:
        assert normalize_options(RouteOptions(use=[mw_a])).use == (mw_a,)  # type: ignore[arg-type]

    def test_rejects_other_types(self) -> None:
        with pytest.raises(InvalidArgument, match="options must be"):
            normalize_options("mw_a")  # type: ignore[arg-type]

    def test_rejects_non_callable_entry(self) -> None:
        with pytest.raises(InvalidArgument, match="position 1"):
            normalize_options([mw_a, 42])  # type: ignore[list-item]


class TestChecks:
    def test_check_middleware_accepts_callables(self) -> None:
        check_middleware((mw_a, mw_b))

    def test_check_middleware_names_label(self) -> None:
        with pytest.raises(InvalidArgument, match="global middleware at position 0"):
            check_middleware((None,), what="global middleware")

    def test_check_handler_rejects_none(self) -> None:
        with pytest.raises(InvalidArgument, match="handler must be callable"):
            check_handler(None)
