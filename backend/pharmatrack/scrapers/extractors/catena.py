"""Catena (catena.ro)."""

from pharmatrack.scrapers.base import RetailerExtractor


CATENA = RetailerExtractor(
    name="Catena",
    domains=("catena.ro",),
    out_of_stock_selectors=(
        ".out-of-stock",
        ".unavailable",
        ".stoc-epuizat",
        ".indisponibil",
        ".product-unavailable",
        ".no-stock",
    ),
    out_of_stock_phrases=(
        "stoc epuizat",
        "indisponibil",
        "produs indisponibil",
        "out of stock",
    ),
    price_selectors=(
        ".product-price",
        ".price-box .price",
        ".special-price",
        ".final-price",
        "span.price",
        '[itemprop="price"]',
        ".current-price",
        ".pret-produs",
    ),
    original_price_selectors=(
        ".old-price",
        ".regular-price",
        "del .price",
        ".was-price",
        ".price-old",
        ".pret-vechi",
    ),
)
