"""HelpNet (helpnet.ro)."""

from bs4 import BeautifulSoup

from pharmatrack.scrapers.base import RetailerExtractor


def add_to_cart_disabled(soup: BeautifulSoup) -> bool:
    """HelpNet keeps the add-to-cart button on unavailable products but disables it."""
    button = soup.select_one('[data-action="add-to-cart"], .add-to-cart, .btn-cart')
    return button is not None and button.has_attr("disabled")


HELPNET = RetailerExtractor(
    name="HelpNet",
    domains=("helpnet.ro",),
    out_of_stock_selectors=(
        ".out-of-stock",
        ".unavailable",
        ".stoc-epuizat",
        ".indisponibil",
        ".product-unavailable",
    ),
    out_of_stock_phrases=(
        "stoc epuizat",
        "indisponibil",
        "momentan indisponibil",
        "out of stock",
    ),
    price_selectors=(
        ".product-price",
        ".price-box .price",
        ".special-price",
        ".final-price",
        "span.price",
        '[itemprop="price"]',
        ".product-info-price .price",
    ),
    original_price_selectors=(
        ".old-price",
        ".regular-price",
        "del .price",
        ".was-price",
        ".price-old",
    ),
    stock_check=add_to_cart_disabled,
)
