"""Remedium Farm (remediumfarm.ro) and DucFarm (ducfarm.ro).

Both run the same shop platform, whose product summary block carries the
gross price in ``.product-summary__info--price-gross``.
"""

from pharmatrack.scrapers.base import RetailerExtractor


_PHRASES = (
    "stoc epuizat",
    "indisponibil",
    "nu este disponibil",
    "out of stock",
)

_PRICE_SELECTORS = (
    ".product-summary__info--price-gross",
    ".product-summary__info--price-box",
    ".product-price",
    '[itemprop="price"]',
    ".price",
)

_ORIGINAL_PRICE_SELECTORS = (
    ".product-summary__info--price-old",
    ".old-price",
    ".regular-price",
    "del .price",
    ".was-price",
)

REMEDIUM_FARM = RetailerExtractor(
    name="Remedium Farm",
    domains=("remediumfarm.ro",),
    out_of_stock_selectors=(),
    out_of_stock_phrases=_PHRASES,
    price_selectors=_PRICE_SELECTORS,
    original_price_selectors=_ORIGINAL_PRICE_SELECTORS,
)

DUCFARM = RetailerExtractor(
    name="DucFarm",
    domains=("ducfarm.ro",),
    out_of_stock_selectors=(),
    out_of_stock_phrases=_PHRASES,
    price_selectors=_PRICE_SELECTORS,
    original_price_selectors=_ORIGINAL_PRICE_SELECTORS,
)
