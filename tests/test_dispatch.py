"""Tests for swoop.server.handler and swoop.server.errors — the dispatcher."""

import logging

import pytest

from swoop.errors import ErrorHandlerFailure, HTTPError
from swoop.routing.matcher import ExactMatcher
from swoop.routing.route import Route
from swoop.routing.table import CompiledRouteTable
from swoop.server.errors import (
    call_error_handler,
    default_error_handler,
    default_not_found_handler,
)
from swoop.server.handler import dispatch, handle_request
from tests.helpers import RecordingSend, make_request, make_response


async def ok(request, response):
    await response.end("ok")


def table_for(path: str, handler) -> CompiledRouteTable:
    return CompiledRouteTable({"GET": (Route(ExactMatcher(path), handler),)})


class TestDispatch:
    async def test_matched_route(self) -> None:
        response, send = make_response()
        await dispatch(
            make_request("GET", "/"),
            response,
            table=table_for("/", ok),
            not_found_handler=default_not_found_handler,
            error_handler=default_error_handler,
        )
        assert send.status == 200
        assert send.body == b"ok"

    async def test_not_found(self) -> None:
        response, send = make_response()
        await dispatch(
            make_request("GET", "/missing"),
            response,
            table=table_for("/", ok),
            not_found_handler=default_not_found_handler,
            error_handler=default_error_handler,
        )
        assert send.status == 404

    async def test_error_handler_failure_escapes(self) -> None:
        async def broken_handler(request, response):
            raise ValueError("boom")

        async def broken_error_handler(error, request, response):
            raise RuntimeError("also broken")

        response, _ = make_response()
        with pytest.raises(ErrorHandlerFailure):
            await dispatch(
                make_request("GET", "/"),
                response,
                table=table_for("/", broken_handler),
                not_found_handler=default_not_found_handler,
                error_handler=broken_error_handler,
            )


class TestHandleRequest:
    async def test_builds_request_from_scope(self) -> None:
        seen: list[tuple[str, str]] = []

        async def handler(request, response):
            seen.append((request.method, request.url))
            await response.end()

        send = RecordingSend()

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        scope = {
            "type": "http",
            "method": "GET",
            "path": "/",
            "query_string": b"a=1",
            "headers": [],
        }
        await handle_request(
            scope,
            receive,
            send,
            table=table_for("/", handler),
            not_found_handler=default_not_found_handler,
            error_handler=default_error_handler,
        )
        assert seen == [("GET", "/?a=1")]
        assert send.status == 200

    async def test_error_handler_failure_logged_critical(self, caplog) -> None:
        async def broken_handler(request, response):
            raise ValueError("boom")

        async def broken_error_handler(error, request, response):
            raise RuntimeError("also broken")

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        scope = {"type": "http", "method": "GET", "path": "/", "headers": []}
        with (
            caplog.at_level(logging.CRITICAL, logger="swoop.server"),
            pytest.raises(ErrorHandlerFailure),
        ):
            await handle_request(
                scope,
                receive,
                RecordingSend(),
                table=table_for("/", broken_handler),
                not_found_handler=default_not_found_handler,
                error_handler=broken_error_handler,
            )
        assert "Error handler failed for GET /" in caplog.text


class TestCallErrorHandler:
    async def test_second_report_ignored(self, caplog) -> None:
        calls: list[BaseException] = []

        async def handler(error, request, response):
            calls.append(error)

        request = make_request()
        response, _ = make_response()
        await call_error_handler(handler, ValueError("first"), request, response)
        with caplog.at_level(logging.WARNING, logger="swoop.server"):
            await call_error_handler(handler, ValueError("second"), request, response)

        assert [str(e) for e in calls] == ["first"]
        assert "after the error handler ran" in caplog.text


class TestDefaultErrorHandler:
    async def test_generic_error_is_500(self, caplog) -> None:
        response, send = make_response()
        with caplog.at_level(logging.ERROR, logger="swoop.server"):
            await default_error_handler(ValueError("boom"), make_request(), response)
        assert send.status == 500
        assert response.finished
        assert "500 GET /" in caplog.text

    async def test_http_error_status_and_headers(self) -> None:
        response, send = make_response()
        error = HTTPError(status=405, headers=(("Allow", "GET"),))
        await default_error_handler(error, make_request("POST", "/"), response)
        assert send.status == 405
        assert (b"allow", b"GET") in send.messages[0]["headers"]

    async def test_keeps_status_already_sent(self) -> None:
        response, send = make_response()
        await response.write_head(202)
        await default_error_handler(ValueError("late"), make_request(), response)
        assert send.status == 202
        assert response.finished

    async def test_finished_response_untouched(self) -> None:
        response, send = make_response()
        await response.end("done")
        before = list(send.messages)
        await default_error_handler(ValueError("late"), make_request(), response)
        assert send.messages == before


class TestDefaultNotFoundHandler:
    async def test_sends_404(self) -> None:
        response, send = make_response()
        await default_not_found_handler(make_request("GET", "/x"), response)
        assert send.status == 404
        assert send.body == b""
