"""Tests for the HTTP fetch client and proxy routing."""

import asyncio
import time

import httpx
import pytest

from pharmatrack.core.exceptions import FetchError, ProxyConfigurationError
from pharmatrack.scrapers.fetcher import FetchClient
from pharmatrack.scrapers.utils.proxy_manager import ProxyManager, extract_domain
from pharmatrack.scrapers.utils.user_agents import USER_AGENTS


def make_client(settings, handler) -> FetchClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FetchClient(settings, http_client=http_client)


class TestDirectFetch:
    async def test_returns_body_and_sends_browser_headers(self, test_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["url"] = str(request.url)
            return httpx.Response(200, text="<html><body>ok</body></html>")

        client = make_client(test_settings, handler)
        body = await client.fetch("https://www.farmaciatei.ro/produs.html")

        assert body == "<html><body>ok</body></html>"
        assert seen["url"] == "https://www.farmaciatei.ro/produs.html"
        assert seen["headers"]["User-Agent"] in USER_AGENTS
        assert seen["headers"]["Accept-Language"].startswith("ro-RO")
        assert "text/html" in seen["headers"]["Accept"]

    async def test_non_success_status_raises_fetch_error(self, test_settings):
        client = make_client(test_settings, lambda request: httpx.Response(404))

        with pytest.raises(FetchError) as exc_info:
            await client.fetch("https://www.catena.ro/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "HTTP 404: Not Found"

    async def test_timeout_raises_fetch_error(self, test_settings):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(test_settings, handler)

        with pytest.raises(FetchError) as exc_info:
            await client.fetch("https://www.catena.ro/slow")

        assert "Timeout after 30s" in exc_info.value.message

    async def test_transport_error_raises_fetch_error(self, test_settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(test_settings, handler)

        with pytest.raises(FetchError) as exc_info:
            await client.fetch("https://www.catena.ro/down")

        assert exc_info.value.status_code is None
        assert "ConnectError" in exc_info.value.message

    async def test_timeout_covers_slow_body(self, test_settings):
        stop = asyncio.Event()

        async def trickle(reader, writer):
            await reader.readuntil(b"\r\n\r\n")
            writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: 50\r\n\r\n")
            try:
                while not stop.is_set():
                    writer.write(b"x")
                    await writer.drain()
                    await asyncio.sleep(0.2)
            except ConnectionError:
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(trickle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        client = FetchClient(test_settings)
        started = time.monotonic()
        try:
            with pytest.raises(FetchError) as exc_info:
                await client.fetch(f"http://127.0.0.1:{port}/produs", timeout=0.5)
        finally:
            stop.set()
            await client.aclose()
            server.close()

        assert exc_info.value.message == "Timeout after 0.5s (direct)"
        assert time.monotonic() - started < 3.0


class TestProxyFetch:
    async def test_protected_domain_goes_through_proxy(self, test_settings):
        settings = test_settings.model_copy(update={"SCRAPER_API_KEY": "secret"})
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, text="<html>drmax</html>")

        client = make_client(settings, handler)
        body = await client.fetch("https://www.drmax.ro/vitamina-c")

        request = seen["request"]
        assert body == "<html>drmax</html>"
        assert request.url.host == "api.scraperapi.com"
        assert request.url.params["api_key"] == "secret"
        assert request.url.params["url"] == "https://www.drmax.ro/vitamina-c"
        assert request.url.params["country_code"] == "ro"

    async def test_missing_api_key_fails_before_any_request(self, test_settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        client = make_client(test_settings, handler)

        with pytest.raises(ProxyConfigurationError) as exc_info:
            await client.fetch("https://www.drmax.ro/vitamina-c")

        assert exc_info.value.domain == "drmax.ro"
        assert calls == []

    async def test_proxy_error_status_is_labelled(self, test_settings):
        settings = test_settings.model_copy(update={"SCRAPER_API_KEY": "secret"})
        client = make_client(settings, lambda request: httpx.Response(500))

        with pytest.raises(FetchError) as exc_info:
            await client.fetch("https://www.drmax.ro/vitamina-c")

        assert exc_info.value.message.startswith("Proxy HTTP 500")


class TestProxyManager:
    def test_needs_proxy_matches_subdomains(self):
        manager = ProxyManager(["drmax.ro"], api_key="k")

        assert manager.needs_proxy("https://www.drmax.ro/p")
        assert manager.needs_proxy("https://shop.drmax.ro/p")
        assert not manager.needs_proxy("https://notdrmax.ro/p")
        assert not manager.needs_proxy("https://www.catena.ro/p")

    def test_stats_do_not_leak_key(self):
        stats = ProxyManager(["drmax.ro"], api_key="secret").get_stats()

        assert stats["proxy_enabled"] is True
        assert "secret" not in str(stats)

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.Catena.ro/p", "catena.ro"),
            ("https://comenzi.farmaciatei.ro/p", "comenzi.farmaciatei.ro"),
            ("not a url", None),
        ],
    )
    def test_extract_domain(self, url, expected):
        assert extract_domain(url) == expected
