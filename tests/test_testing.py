"""Tests for swoop.testing — the in-process ASGI client."""

from swoop import App
from swoop.testing import TestClient, TestResponse


class TestTestClient:
    async def test_post_json(self) -> None:
        async def echo(request, response):
            data = await request.json()
            response.set_header("Content-Type", "application/json")
            await response.end(f'{{"got": "{data["name"]}"}}')

        app = App().post("/echo", echo)
        async with TestClient(app) as client:
            response = await client.post("/echo", json={"name": "swoop"})
        assert response.json() == {"got": "swoop"}
        assert response.header("Content-Type") == "application/json"

    async def test_put_body(self) -> None:
        async def size(request, response):
            await response.end(str(len(await request.body())))

        app = App().put("/size", size)
        async with TestClient(app) as client:
            assert (await client.put("/size", body=b"12345")).text == "5"

    async def test_delete_and_head(self) -> None:
        async def gone(request, response):
            await response.write_head(204)
            await response.end()

        app = App().delete("/x", gone).head("/x", gone)
        async with TestClient(app) as client:
            assert (await client.delete("/x")).status == 204
            assert (await client.head("/x")).status == 204


class TestTestResponse:
    def test_not_started(self) -> None:
        response = TestResponse(status=None, headers=(), body=b"", complete=False)
        assert not response.started

    def test_header_default(self) -> None:
        response = TestResponse(status=200, headers=(("x-a", "1"),), body=b"", complete=True)
        assert response.header("X-A") == "1"
        assert response.header("x-b", "none") == "none"
