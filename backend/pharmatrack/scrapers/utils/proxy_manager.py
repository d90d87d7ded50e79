"""Routing for domains that block direct (non-browser) traffic.

Those domains are fetched through ScraperAPI, a hosted fetch proxy that is
called as ``GET {api_url}?api_key=...&url=<target>&country_code=ro``.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

from pharmatrack.core.exceptions import ProxyConfigurationError


def extract_domain(url: str) -> Optional[str]:
    """Hostname of ``url`` lower-cased and without a ``www.`` prefix.

    Args:
        url: Absolute URL

    Returns:
        Bare domain, or None if the URL has no hostname
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def domain_matches(domain: str, registered: str) -> bool:
    """True if ``domain`` is ``registered`` or one of its subdomains."""
    return domain == registered or domain.endswith("." + registered)


@dataclass(frozen=True)
class ProxyRequest:
    """Concrete request to send to the fetch proxy."""

    url: str
    params: Dict[str, str]


class ProxyManager:
    """Decides which URLs go through the fetch proxy and builds the proxied request."""

    def __init__(
        self,
        proxy_domains: Iterable[str],
        api_key: str = "",
        api_url: str = "http://api.scraperapi.com",
        country_code: str = "ro",
    ):
        """Initialize proxy manager.

        Args:
            proxy_domains: Domains known to block direct requests
            api_key: ScraperAPI key; empty disables proxying
            api_url: ScraperAPI endpoint
            country_code: Exit country requested from the proxy
        """
        self.proxy_domains: List[str] = [d.lower() for d in proxy_domains]
        self.api_key = api_key
        self.api_url = api_url
        self.country_code = country_code

    def needs_proxy(self, url: str) -> bool:
        """Check whether ``url`` belongs to a domain on the deny-list."""
        domain = extract_domain(url)
        if not domain:
            return False
        return any(domain_matches(domain, d) for d in self.proxy_domains)

    def build_request(self, url: str) -> ProxyRequest:
        """Build the proxy call that fetches ``url``.

        Raises:
            ProxyConfigurationError: If no API key is configured
        """
        if not self.api_key:
            raise ProxyConfigurationError(extract_domain(url) or url)
        params = {"api_key": self.api_key, "url": url}
        if self.country_code:
            params["country_code"] = self.country_code
        return ProxyRequest(url=self.api_url, params=params)

    def get_stats(self) -> dict:
        """Describe the proxy configuration without leaking the key."""
        return {
            "proxy_domains": list(self.proxy_domains),
            "proxy_enabled": bool(self.api_key),
            "country_code": self.country_code,
        }
