"""Tests for responses that pass through unclassified."""

import json

import httpx

from conftest import TEST_RESPONSES, MockResponse, run
from gotcha import gotcha, is_ok, timed_out, was_client_error, was_redirected, was_server_error


class TestSuccessfulResponses:

    def test_get_json_success(self, server):
        """A 200 comes back as the response with its body untouched."""
        server.set_response("GET", "/success", TEST_RESPONSES["SUCCESS"])

        async def scenario():
            result = await gotcha(server.url("/success"), transport=server.transport())
            return result, await result.body.text()

        result, text = run(scenario())

        assert is_ok(result)
        assert result.status_code == 200
        assert result.headers["content-type"] == "application/json"
        assert text == '{"success":true,"data":"test"}'

    def test_no_predicate_other_than_is_ok_matches(self, server):
        server.set_response("GET", "/ok", MockResponse(204))

        async def scenario():
            result = await gotcha(server.url("/ok"), transport=server.transport())
            await result.body.aclose()
            return result

        result = run(scenario())

        assert result.status_code == 204
        assert not was_redirected(result)
        assert not was_client_error(result)
        assert not was_server_error(result)
        assert not timed_out(result)

    def test_informational_and_2xx_range(self, server):
        for code in (201, 202, 206, 299):
            server.set_response("GET", f"/code/{code}", MockResponse(code, body="x"))

        async def scenario():
            results = []
            for code in (201, 202, 206, 299):
                result = await gotcha(server.url(f"/code/{code}"), transport=server.transport())
                await result.body.aclose()
                results.append(result)
            return results

        results = run(scenario())

        assert [r.status_code for r in results] == [201, 202, 206, 299]
        assert all(is_ok(r) for r in results)

    def test_post_sends_body_and_headers(self, server):
        payload = {"message": "Hello from gotcha"}
        server.set_response("POST", "/echo", MockResponse(201, {"content-type": "application/json"}, json.dumps({"id": 1})))

        async def scenario():
            result = await gotcha(
                server.url("/echo"),
                {
                    "method": "post",
                    "headers": {"content-type": "application/json", "x-trace": "abc"},
                    "body": json.dumps(payload),
                },
                transport=server.transport(),
            )
            return result, await result.body.json()

        result, data = run(scenario())

        assert result.status_code == 201
        assert data == {"id": 1}
        sent = server.requests[0]
        assert sent.method == "POST"
        assert sent.headers["x-trace"] == "abc"
        assert json.loads(sent.content) == payload

    def test_opaque_and_transport_context(self, server):
        server.set_response("GET", "/opaque", MockResponse(200, body="ok"))
        marker = object()

        async def scenario():
            result = await gotcha(server.url("/opaque"), {"opaque": marker}, transport=server.transport())
            await result.body.aclose()
            return result

        result = run(scenario())

        assert result.opaque is marker
        assert result.trailers == {}
        assert result.context["http_version"] == "HTTP/1.1"

    def test_body_streams_in_chunks(self, server):
        server.set_response("GET", "/stream", MockResponse(200, body="a" * 20000))

        async def scenario():
            result = await gotcha(server.url("/stream"), transport=server.transport())
            chunks = [chunk async for chunk in result.body.aiter_bytes(chunk_size=4096)]
            return result, chunks

        result, chunks = run(scenario())

        assert b"".join(chunks) == b"a" * 20000
        assert result.body.closed

    def test_user_agent_from_config(self, server):
        server.set_response("GET", "/ua", MockResponse(200))

        async def scenario():
            result = await gotcha(server.url("/ua"), transport=server.transport())
            await result.body.aclose()

        run(scenario())

        assert server.requests[0].headers["user-agent"].startswith("gotcha/")

    def test_injected_client_is_left_open(self, server):
        server.set_response("GET", "/shared", MockResponse(200, body="shared"))

        async def scenario():
            from gotcha import HttpxTransport

            async with httpx.AsyncClient(transport=httpx.MockTransport(server._handle)) as client:
                transport = HttpxTransport(client=client)
                first = await gotcha(server.url("/shared"), transport=transport)
                await first.body.read()
                second = await gotcha(server.url("/shared"), transport=transport)
                return await second.body.text(), client.is_closed

        text, client_closed = run(scenario())

        assert text == "shared"
        assert client_closed is False
