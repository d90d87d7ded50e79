"""Per-retailer extraction tables.

Each module exposes one :class:`~pharmatrack.scrapers.base.RetailerExtractor`
value; :mod:`pharmatrack.scrapers.resolver` maps domains to them.
"""

from .generic import GENERIC
from .farmacia_tei import FARMACIA_TEI
from .catena import CATENA
from .helpnet import HELPNET
from .drmax import DRMAX
from .remedium_farm import REMEDIUM_FARM, DUCFARM
from .farmaciile_dav import FARMACIILE_DAV

# Dedicated layouts, in registry order
RETAILER_EXTRACTORS = (
    FARMACIA_TEI,
    CATENA,
    HELPNET,
    DRMAX,
    REMEDIUM_FARM,
    DUCFARM,
    FARMACIILE_DAV,
)

__all__ = [
    "GENERIC",
    "FARMACIA_TEI",
    "CATENA",
    "HELPNET",
    "DRMAX",
    "REMEDIUM_FARM",
    "DUCFARM",
    "FARMACIILE_DAV",
    "RETAILER_EXTRACTORS",
]
