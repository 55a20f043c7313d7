"""
Site Definitions

Selector and timeout configuration for a hotel site, plus the abstract
base class each site module implements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..schema import CouponOffer


@dataclass(frozen=True)
class CalendarSelectors:
    """
    Selectors for one calendar widget variant.

    `month_label`, `day_button` and `day_text` are queried inside a panel;
    the rest are page-scoped. `day_button` must already exclude disabled and
    other-month days. `clear`, when set, is clicked before check-in to drop a
    range left over from an earlier search.
    """

    trigger: str
    grid: str
    panel: str
    month_label: str
    day_button: str
    forward: str
    submit: str
    day_text: str = ""
    clear: str = ""
    pane_count: int = 1


@dataclass(frozen=True)
class PromoSelectors:
    """Promotional modal shown once per session."""

    modal: str
    title: str = ""
    message: str = ""
    code_input: str = ""
    close: str = ""


@dataclass(frozen=True)
class SiteConfig:
    site_id: str
    name: str
    url: str

    landing_calendar: CalendarSelectors
    results_calendar: CalendarSelectors

    price_container: str
    price_amount: str
    price_currency: str = ""

    cookie_accept: str = ""
    promo: Optional[PromoSelectors] = None

    # Timeouts (ms)
    nav_timeout_ms: int = 60000
    grid_timeout_ms: int = 5000
    price_timeout_ms: int = 15000
    trigger_timeout_ms: int = 10000
    settle_timeout_ms: int = 3000
    results_timeout_ms: int = 30000

    nav_retries: int = 3

    # Calendar paging bound
    max_forward: int = 6

    # Pause between date pairs (ms)
    pause_ms: int = 2000


class BaseSite(ABC):
    """
    Abstract base class for hotel sites.

    Subclasses must implement:
    - site_id: site identifier (e.g., "riu")
    - build_config(): selectors and URL for the site
    - parse_promo_text(): pure parsing of the promo modal (testable without browser)
    """

    site_id: str = ""

    @abstractmethod
    def build_config(self) -> SiteConfig:
        ...

    @abstractmethod
    def parse_promo_text(self, title: str, message: str, code_value: str = "") -> Optional[CouponOffer]:
        """Build a CouponOffer from promo modal text, or None if it carries no offer."""
        ...

    def format_price(self, amount: str, currency: str) -> str:
        """Join amount and currency label into the display string."""
        return " ".join(part for part in (amount.strip(), currency.strip()) if part)
