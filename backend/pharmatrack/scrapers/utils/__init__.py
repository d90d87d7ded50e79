"""Scraper utilities for price normalization, retries, proxy routing and politeness delays."""

from .rate_limiter import RandomDelay
from .proxy_manager import ProxyManager, ProxyRequest, extract_domain, domain_matches
from .user_agents import (
    get_random_user_agent,
    build_browser_headers,
    BROWSER_HEADERS,
    USER_AGENTS,
)
from .normalizer import PriceNormalizer, parse_price, discount_percentage
from .retry import with_retry


__all__ = [
    # Politeness
    "RandomDelay",
    # Proxy routing
    "ProxyManager",
    "ProxyRequest",
    "extract_domain",
    "domain_matches",
    # User agents
    "get_random_user_agent",
    "build_browser_headers",
    "BROWSER_HEADERS",
    "USER_AGENTS",
    # Normalization
    "PriceNormalizer",
    "parse_price",
    "discount_percentage",
    # Retry
    "with_retry",
]
