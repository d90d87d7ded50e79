"""Farmacia Tei (farmaciatei.ro). Magento storefront, served from comenzi.farmaciatei.ro."""

from pharmatrack.scrapers.base import RetailerExtractor


FARMACIA_TEI = RetailerExtractor(
    name="Farmacia Tei",
    domains=("farmaciatei.ro", "comenzi.farmaciatei.ro"),
    out_of_stock_selectors=(
        ".out-of-stock",
        ".unavailable",
        '[data-stock="0"]',
        ".stoc-epuizat",
        ".indisponibil",
    ),
    out_of_stock_phrases=(
        "stoc epuizat",
        "indisponibil",
        "out of stock",
    ),
    price_selectors=(
        ".product-price .price",
        ".price-box .price",
        "[data-price-amount]",
        ".special-price .price",
        ".final-price .price",
        "span.price",
        ".product-info-price .price",
    ),
    original_price_selectors=(
        ".old-price .price",
        ".regular-price .price",
        ".price-box .old-price",
        "del .price",
        ".was-price",
    ),
)
