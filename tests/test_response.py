"""Tests for swoop.http.response — ASGI messages produced by the writer."""

import pytest

from tests.helpers import make_response


class TestEnd:
    async def test_end_with_body_sets_content_length(self) -> None:
        response, send = make_response()
        await response.end("hello")

        start, body = send.messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert (b"content-length", b"5") in start["headers"]
        assert body == {"type": "http.response.body", "body": b"hello", "more_body": False}
        assert response.finished

    async def test_end_without_body(self) -> None:
        response, send = make_response()
        await response.end()
        assert send.status == 200
        assert send.body == b""
        assert (b"content-length", b"0") in send.messages[0]["headers"]

    async def test_end_twice_raises(self) -> None:
        response, _ = make_response()
        await response.end()
        with pytest.raises(RuntimeError, match="already ended"):
            await response.end()

    async def test_explicit_content_length_kept(self) -> None:
        response, send = make_response()
        response.set_header("Content-Length", "3")
        await response.end(b"abc")
        lengths = [v for k, v in send.messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"3"]


class TestWriteHead:
    async def test_status_and_headers(self) -> None:
        response, send = make_response()
        await response.write_head(201, {"Content-Type": "text/plain"})
        assert response.headers_sent
        assert send.messages == []
        await response.end("made")
        assert send.status == 201
        assert (b"content-type", b"text/plain") in send.messages[0]["headers"]

    async def test_header_pairs_accepted(self) -> None:
        response, send = make_response()
        await response.write_head(200, [("X-A", "1"), ("X-A", "2")])
        await response.end()
        values = [v for k, v in send.messages[0]["headers"] if k == b"x-a"]
        assert values == [b"1", b"2"]

    async def test_write_head_twice_raises(self) -> None:
        response, _ = make_response()
        await response.write_head(200)
        with pytest.raises(RuntimeError, match="headers already sent"):
            await response.write_head(500)

    async def test_set_header_after_head_raises(self) -> None:
        response, _ = make_response()
        await response.write_head(200)
        with pytest.raises(RuntimeError, match="headers already sent"):
            response.set_header("X-Late", "1")

    def test_set_header_chains(self) -> None:
        response, _ = make_response()
        assert response.set_header("X-A", "1").set_header("X-B", "2") is response
        assert response.headers == (("X-A", "1"), ("X-B", "2"))


class TestStreaming:
    async def test_write_streams_chunks(self) -> None:
        response, send = make_response()
        await response.write("a")
        await response.write(b"b")
        await response.end()

        assert send.status == 200
        assert all(k != b"content-length" for k, _ in send.messages[0]["headers"])
        assert [m.get("more_body") for m in send.messages[1:]] == [True, True, False]
        assert send.body == b"ab"

    async def test_write_after_end_raises(self) -> None:
        response, _ = make_response()
        await response.end()
        with pytest.raises(RuntimeError, match="already ended"):
            await response.write("x")


class TestBodylessStatus:
    @pytest.mark.parametrize("status", [204, 304])
    async def test_body_dropped(self, status: int) -> None:
        response, send = make_response()
        await response.write_head(status)
        await response.end("ignored")
        assert send.status == status
        assert send.body == b""
