"""
Hotel Site Modules

Each module provides a site class holding the selectors, URL and
promo-modal parsing for one hotel website.
"""

from .base import BaseSite, CalendarSelectors, PromoSelectors, SiteConfig
from .riu import RiuSite

__all__ = [
    "BaseSite",
    "CalendarSelectors",
    "PromoSelectors",
    "SiteConfig",
    "RiuSite",
]
