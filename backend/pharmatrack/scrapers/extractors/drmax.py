"""Dr. Max (drmax.ro).

The site rejects non-browser clients, so its pages are fetched through the
proxy (``drmax.ro`` is in the default PROXY_DOMAINS). Prices usually come
from the JSON-LD Product block; the selectors cover its Magento markup.
"""

from pharmatrack.scrapers.base import RetailerExtractor


DRMAX = RetailerExtractor(
    name="Dr. Max",
    domains=("drmax.ro",),
    out_of_stock_selectors=(
        ".out-of-stock",
        ".unavailable",
        ".product-unavailable",
    ),
    out_of_stock_phrases=(
        "stoc epuizat",
        "indisponibil",
        "nu este disponibil",
        "out of stock",
    ),
    price_selectors=(
        "[data-price-amount]",
        '[data-price-type="finalPrice"] .price',
        ".product-info-price .price",
        ".price-box .price",
        ".special-price .price",
        '[itemprop="price"]',
        ".product-price",
        ".price",
    ),
    original_price_selectors=(
        ".old-price .price",
        ".regular-price .price",
        "del .price",
        ".was-price",
        '[data-price-type="oldPrice"] .price',
    ),
)
