"""Venue — адаптеры внешнего AMM venue.

- VenueAdapter: абстрактный интерфейс (fetch_pool / withdraw_all / swap / deposit)
- PaperVenueAdapter: in-memory симуляция для dry run
- load_adapter: подключение внешнего адаптера по dotted path
"""

from .base import VenueAdapter
from .loader import load_adapter, resolve_adapter_class
from .paper import PaperVenueAdapter, bps_to_fraction

__all__ = [
    "VenueAdapter",
    "PaperVenueAdapter",
    "bps_to_fraction",
    "load_adapter",
    "resolve_adapter_class",
]
