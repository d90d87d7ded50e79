"""Retailer-agnostic fallback extractor.

Used for every domain without a dedicated layout. The selector lists cover
schema.org microdata, common Magento/WooCommerce/PrestaShop price markup and
the Romanian class names seen on smaller pharmacy shops.
"""

from pharmatrack.scrapers.base import RetailerExtractor


GENERIC_OUT_OF_STOCK_PHRASES = (
    # Romanian
    "stoc epuizat",
    "indisponibil",
    "momentan indisponibil",
    "produs indisponibil",
    "nu este in stoc",
    "nu este în stoc",
    "nu este disponibil",
    # English
    "out of stock",
    "sold out",
    "unavailable",
    "stock depleted",
)

GENERIC = RetailerExtractor(
    name="Generic",
    domains=(),
    out_of_stock_selectors=(
        ".out-of-stock",
        ".unavailable",
        ".stoc-epuizat",
        ".indisponibil",
        ".product-unavailable",
        ".no-stock",
        '[data-availability="out-of-stock"]',
        ".sold-out",
    ),
    out_of_stock_phrases=GENERIC_OUT_OF_STOCK_PHRASES,
    price_selectors=(
        # Schema.org / microdata
        '[itemprop="price"]',
        "[data-price]",
        "[data-price-amount]",
        # Common classes
        ".product-price",
        ".price-box .price",
        ".special-price .price",
        ".final-price .price",
        ".current-price",
        ".sale-price",
        ".pret",
        ".pret-produs",
        # Generic elements
        "span.price",
        "div.price",
        ".price",
    ),
    original_price_selectors=(
        ".old-price",
        ".regular-price",
        ".original-price",
        "del .price",
        "del.price",
        ".was-price",
        ".price-old",
        ".pret-vechi",
        ".crossed-price",
        "s.price",
        "strike",
    ),
)
