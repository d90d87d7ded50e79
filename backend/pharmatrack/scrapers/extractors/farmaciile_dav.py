"""Farmaciile DAV (farmaciiledav.ro)."""

from pharmatrack.scrapers.base import RetailerExtractor


FARMACIILE_DAV = RetailerExtractor(
    name="Farmaciile DAV",
    domains=("farmaciiledav.ro",),
    out_of_stock_selectors=(
        ".out-of-stock",
        ".stoc-epuizat",
    ),
    out_of_stock_phrases=(
        "stoc epuizat",
        "indisponibil",
        "out of stock",
    ),
    price_selectors=(
        ".pr-price",
        ".product-price",
        '[itemprop="price"]',
    ),
    original_price_selectors=(
        ".pr-old-price",
        ".old-price",
        "del",
    ),
)
