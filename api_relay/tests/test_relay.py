"""
Tests for the relay service.

The outbound client uses httpx.MockTransport, so no test touches the network.
"""

import asyncio
import json
import threading
import time

import httpx
import pytest

from api_relay.schemas.proxy import ProxyRequest, ProxyResponse, ProxyErrorResponse
from api_relay.services.memory_storage import MemStorage
from api_relay.services.relay import (
    classify_error,
    create_http_client,
    parse_response_data,
    relay_request,
    upstream_status,
)


def origin(request: httpx.Request) -> httpx.Response:
    """Stub origin used by most tests."""
    if request.url.path == "/ok":
        return httpx.Response(200, json={"x": 1})
    if request.url.path == "/echo":
        return httpx.Response(
            200,
            json={
                "method": request.method,
                "headers": {"x-token": request.headers.get("x-token")},
                "body": request.content.decode(),
            },
        )
    if request.url.path == "/text":
        return httpx.Response(200, text="plain body", headers={"X-Trace": "abc"})
    if request.url.path == "/missing":
        return httpx.Response(404, json={"error": "not here"})
    if request.url.path == "/broken":
        return httpx.Response(500, text="boom")
    if request.url.path == "/fake-duration":
        return httpx.Response(200, json={"duration": 999999})
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


def run_relay(storage, descriptor: dict, handler=origin, timeout: float = 30.0):
    client = create_http_client(transport=httpx.MockTransport(handler))
    return asyncio.run(relay_request(ProxyRequest(**descriptor), storage, client, timeout=timeout))


class TestRelaySuccess:
    """Relays that reach the origin, whatever status it answers with."""

    def test_json_response_is_parsed(self):
        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/ok"})

        assert isinstance(result, ProxyResponse)
        assert result.data == {"x": 1}
        assert result.status == 200
        assert result.status_text == "OK"
        assert result.headers["content-type"] == "application/json"
        assert result.duration >= 0

    def test_history_record_matches_outcome(self):
        storage = MemStorage()
        descriptor = {
            "method": "post",
            "url": "https://example.test/echo",
            "headers": {"X-Token": "t1"},
            "body": '{"name": "widget"}',
        }
        result = run_relay(storage, descriptor)

        records = storage.list_api_requests()
        assert len(records) == 1
        record = records[0]
        assert record.method == "post"
        assert record.url == "https://example.test/echo"
        assert record.headers == {"X-Token": "t1"}
        assert record.body == '{"name": "widget"}'
        assert record.status == 200
        assert record.duration == result.duration
        assert record.response == result.data

    def test_method_upper_cased_and_body_sent(self):
        storage = MemStorage()
        result = run_relay(storage, {
            "method": "patch",
            "url": "https://example.test/echo",
            "headers": {"X-Token": "abc"},
            "body": "raw payload",
        })

        assert result.data == {
            "method": "PATCH",
            "headers": {"x-token": "abc"},
            "body": "raw payload",
        }

    def test_non_json_body_returned_as_text(self):
        result = run_relay(MemStorage(), {"method": "GET", "url": "https://example.test/text"})

        assert result.data == "plain body"
        assert result.headers["x-trace"] == "abc"

    @pytest.mark.parametrize("path,status_code,status_text", [
        ("/missing", 404, "Not Found"),
        ("/broken", 500, "Internal Server Error"),
    ])
    def test_error_statuses_are_successful_relays(self, path, status_code, status_text):
        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": f"https://example.test{path}"})

        assert isinstance(result, ProxyResponse)
        assert result.status == status_code
        assert result.status_text == status_text
        assert storage.list_api_requests()[0].status == status_code

    def test_origin_duration_field_is_ignored(self):
        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/fake-duration"})

        assert result.duration < 999999
        assert storage.list_api_requests()[0].duration == result.duration


class TestRelayFailure:
    """Transport failures become data and are still recorded."""

    def test_unreachable_origin(self):
        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/down"})

        assert isinstance(result, ProxyErrorResponse)
        assert result.status == 0
        assert result.error_type == "network_error"
        assert "Connection refused" in result.error

        records = storage.list_api_requests()
        assert len(records) == 1
        assert records[0].status == 0
        assert records[0].duration == result.duration
        assert records[0].response == {"error": result.error}

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("", request=request)

        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/slow"}, handler)

        assert result.error_type == "timeout"
        assert result.error == "Request timed out"
        assert result.status == 0
        assert storage.list_api_requests()[0].response == {"error": "Request timed out"}

    def test_unsupported_scheme(self):
        def handler(request):
            raise httpx.UnsupportedProtocol("Request URL has an unsupported protocol 'ftp://'.")

        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "ftp://example.test/file"}, handler)

        assert result.error_type == "invalid_url"
        assert result.status == 0
        assert storage.list_api_requests()[0].url == "ftp://example.test/file"

    def test_unexpected_exception(self):
        def handler(request):
            raise RuntimeError("transport exploded")

        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/"}, handler)

        assert result.error_type == "unknown"
        assert result.error == "transport exploded"
        assert len(storage.list_api_requests()) == 1

    def test_each_attempt_recorded_once(self):
        storage = MemStorage()
        for path in ("/ok", "/down", "/missing"):
            run_relay(storage, {"method": "GET", "url": f"https://example.test{path}"})

        urls = [r.url for r in storage.list_api_requests()]
        assert urls == [
            "https://example.test/missing",
            "https://example.test/down",
            "https://example.test/ok",
        ]


class TestHelpers:

    def test_parse_response_data(self):
        assert parse_response_data('{"a": [1, 2]}', "application/json; charset=utf-8") == {"a": [1, 2]}
        assert parse_response_data('{"a": 1}', "application/problem+json") == {"a": 1}
        assert parse_response_data("not json", "application/json") == "not json"
        assert parse_response_data('{"a": 1}', "text/plain") == '{"a": 1}'
        assert parse_response_data("", "application/json") == ""
        assert parse_response_data("x", None) == "x"

    def test_classify_error(self):
        request = httpx.Request("GET", "https://example.test/")
        assert classify_error(httpx.ConnectTimeout("", request=request))[0] == "timeout"
        assert classify_error(httpx.ConnectError("", request=request))[0] == "network_error"
        assert classify_error(httpx.RemoteProtocolError("", request=request))[0] == "network_error"
        assert classify_error(httpx.InvalidURL("bad"))[0] == "invalid_url"
        assert classify_error(asyncio.TimeoutError()) == ("timeout", "Request timed out")
        assert classify_error(ValueError("bad"))[0] == "unknown"

    def test_upstream_status(self):
        request = httpx.Request("GET", "https://example.test/")
        response = httpx.Response(503, request=request)
        exc = httpx.HTTPStatusError("unavailable", request=request, response=response)

        assert upstream_status(exc) == 503
        assert upstream_status(httpx.ConnectError("", request=request)) == 0
        assert upstream_status(json.JSONDecodeError("x", "", 0)) == 0


class TestRelayDeadline:
    """The relay timeout bounds the whole call, not each read."""

    def test_slow_drip_body_times_out(self):
        async def drip():
            for _ in range(8):
                await asyncio.sleep(0.1)
                yield b"x"

        def handler(request):
            return httpx.Response(200, content=drip())

        storage = MemStorage()
        started = time.perf_counter()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/drip"}, handler, timeout=0.3)
        elapsed = time.perf_counter() - started

        assert isinstance(result, ProxyErrorResponse)
        assert result.error_type == "timeout"
        assert result.error == "Request timed out"
        assert result.status == 0
        assert elapsed < 0.75

        record = storage.list_api_requests()[0]
        assert record.status == 0
        assert record.duration == result.duration
        assert record.response == {"error": "Request timed out"}

    def test_slow_origin_times_out(self):
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200)

        storage = MemStorage()
        result = run_relay(storage, {"method": "GET", "url": "https://example.test/slow"}, handler, timeout=0.1)

        assert result.error_type == "timeout"
        assert result.duration < 5000
        assert len(storage.list_api_requests()) == 1

    def test_fast_origin_within_deadline(self):
        async def handler(request):
            await asyncio.sleep(0.01)
            return httpx.Response(200, json={"x": 1})

        result = run_relay(MemStorage(), {"method": "GET", "url": "https://example.test/ok"}, handler, timeout=2.0)

        assert isinstance(result, ProxyResponse)
        assert result.data == {"x": 1}


class RecordingStorage(MemStorage):
    """Store noting which thread each history write runs on."""

    def __init__(self):
        super().__init__()
        self.write_threads = []

    def create_api_request(self, data):
        self.write_threads.append(threading.get_ident())
        return super().create_api_request(data)


class TestHistoryWriteThread:

    def test_history_written_off_event_loop_thread(self):
        storage = RecordingStorage()
        client = create_http_client(transport=httpx.MockTransport(origin))

        async def relay_both():
            loop_thread = threading.get_ident()
            await relay_request(ProxyRequest(method="GET", url="https://example.test/ok"), storage, client)
            await relay_request(ProxyRequest(method="GET", url="https://example.test/down"), storage, client)
            return loop_thread

        loop_thread = asyncio.run(relay_both())

        assert len(storage.write_threads) == 2
        assert loop_thread not in storage.write_threads
        assert len(storage.list_api_requests()) == 2
