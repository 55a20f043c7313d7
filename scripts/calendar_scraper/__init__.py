"""
Hotel Rate Calendar Scraper

Reselects Friday-to-Friday stays in a hotel site's calendar widget and
records the displayed price for each over a rolling 6-month window.
Site-specific selectors live in calendar_scraper/sites/.
"""

from .schema import DatePair, DateRangeResult, CouponOffer, ScrapeRun, validate_run
from .dates import DateRangeGenerator, friday_to_friday_pairs
from .base import SiteLoadError, click_with_fallback, create_browser, navigate_with_retry
from .navigator import CalendarNavigator, parse_month_label
from .registry import detect_site, get_site, get_site_config

__all__ = [
    "DatePair",
    "DateRangeResult",
    "CouponOffer",
    "ScrapeRun",
    "validate_run",
    "DateRangeGenerator",
    "friday_to_friday_pairs",
    "SiteLoadError",
    "click_with_fallback",
    "create_browser",
    "navigate_with_retry",
    "CalendarNavigator",
    "parse_month_label",
    "detect_site",
    "get_site",
    "get_site_config",
]
