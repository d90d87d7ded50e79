"""HTTP fetch client with browser-like headers and proxy routing.

Retailer pages are plain server-rendered HTML, so a single httpx GET is
enough. Domains that reject non-browser clients are fetched through the
ScraperAPI proxy instead (see :mod:`pharmatrack.scrapers.utils.proxy_manager`).
"""

import asyncio
from typing import Dict, Optional

import httpx
import structlog

from pharmatrack.config import Settings
from pharmatrack.core.exceptions import FetchError
from pharmatrack.scrapers.utils.proxy_manager import ProxyManager
from pharmatrack.scrapers.utils.user_agents import build_browser_headers


logger = structlog.get_logger(__name__)


class FetchClient:
    """Fetches raw page markup.

    The configuration is handed in at construction; nothing is read from the
    environment while a request is in flight. An ``httpx.AsyncClient`` may be
    injected (tests use ``httpx.MockTransport``); otherwise one is created
    lazily and closed by :meth:`aclose`.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize fetch client.

        Args:
            settings: Timeouts, proxy domains and proxy credential
            http_client: Optional pre-built async HTTP client
        """
        self.settings = settings
        self.proxy_manager = ProxyManager(
            proxy_domains=settings.get_proxy_domains(),
            api_key=settings.SCRAPER_API_KEY,
            api_url=settings.SCRAPER_API_URL,
            country_code=settings.SCRAPER_API_COUNTRY,
        )
        self._client = http_client
        self._owns_client = http_client is None
        self.logger = logger.bind(service="fetch_client")

    async def __aenter__(self) -> "FetchClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, timeout: Optional[float] = None) -> str:
        """Fetch ``url`` and return the response body as text.

        Args:
            url: Page URL
            timeout: Seconds to wait for a response; defaults to the direct
                or proxy timeout from settings

        Returns:
            Raw page markup

        Raises:
            FetchError: On timeout, transport failure or a non-2xx status
            ProxyConfigurationError: If the domain needs the proxy and no
                API key is configured
        """
        if self.proxy_manager.needs_proxy(url):
            return await self._fetch_via_proxy(url, timeout or self.settings.PROXY_TIMEOUT_SECONDS)
        return await self._fetch_direct(url, timeout or self.settings.FETCH_TIMEOUT_SECONDS)

    async def _fetch_direct(self, url: str, timeout: float) -> str:
        return await self._send(
            url,
            request_url=url,
            params=None,
            headers=build_browser_headers(),
            timeout=timeout,
            via="direct",
        )

    async def _fetch_via_proxy(self, url: str, timeout: float) -> str:
        proxy_request = self.proxy_manager.build_request(url)
        return await self._send(
            url,
            request_url=proxy_request.url,
            params=proxy_request.params,
            headers={"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"},
            timeout=timeout,
            via="proxy",
        )

    async def _send(
        self,
        url: str,
        request_url: str,
        params: Optional[Dict[str, str]],
        headers: Dict[str, str],
        timeout: float,
        via: str,
    ) -> str:
        self.logger.debug("fetching_url", url=url, via=via, timeout=timeout)
        client = self._get_client()

        try:
            # httpx timeouts are per phase; wait_for bounds the whole exchange, body included
            response = await asyncio.wait_for(
                client.get(request_url, params=params, headers=headers, timeout=timeout),
                timeout=timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise FetchError(url, f"Timeout after {timeout:g}s ({via})") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(url, f"Request failed ({via}): {type(e).__name__}: {e}") from e

        if not response.is_success:
            prefix = "Proxy HTTP" if via == "proxy" else "HTTP"
            raise FetchError(
                url,
                f"{prefix} {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        self.logger.debug(
            "url_fetched",
            url=url,
            via=via,
            status_code=response.status_code,
            size=len(response.content),
        )
        return response.text
