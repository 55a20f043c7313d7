"""
RIU Hotels (riu.com)

Hotel pages open on a landing search bar with a single-pane calendar.
Submitting it navigates to the room results page, whose search bar uses a
two-pane calendar and shows the final room price in the room footer.

Note: the results calendar only renders the "next month" arrow on the
right-hand panel; the left panel's arrow carries the hidden modifier.
"""

from __future__ import annotations

import re
from typing import Optional

from ..schema import CouponOffer
from .base import BaseSite, CalendarSelectors, PromoSelectors, SiteConfig


DEFAULT_HOTEL_URL = "https://www.riu.com/en/hotel/united-states/miami-beach/hotel-riu-plaza-miami-beach"

# The landing search only ever needs the current and next month; the panel,
# month label and forward selectors follow the results widget's naming and
# have not been checked against a paged landing calendar.
LANDING_CALENDAR = CalendarSelectors(
    trigger="#search-bar-datepicker_input",
    grid=".riu-ui-calendar",
    panel=".riu-ui-calendar article",
    month_label=".riu-ui-calendar__header--selection strong",
    day_button=(
        ".riu-ui-calendar__item--day"
        ":not(.riu-ui-calendar__item--disabled)"
        ":not(.riu-ui-calendar__item--otherMonth)"
    ),
    day_text="span",
    forward=".riu-ui-calendar__header--button:not(.riu-ui-calendar__header--button-hidden) button",
    submit="button[type='submit']",
    pane_count=1,
)

RESULTS_CALENDAR = CalendarSelectors(
    trigger="#datepicker-field",
    grid=".riu-datepicker__content--days-group",
    panel=".riu-datepicker article",
    month_label=".riu-datepicker__header--selection strong",
    day_button=(
        "button.riu-datepicker__item--day"
        ":not(.riu-datepicker__item--disabled)"
        ":not(.riu-datepicker__item--otherMonth)"
    ),
    day_text="span",
    forward=(
        ".riu-datepicker__header--button:not(.riu-datepicker__header--button-hidden) "
        "button[arialabel='Mes siguiente']"
    ),
    submit="#search-button",
    clear=".riu-datepicker__header",
    pane_count=2,
)

PROMO = PromoSelectors(
    modal=".riu-modal__content",
    title=".riu-modal__title",
    message=".riu-modal__message",
    code_input="input[name='promoCode']",
    close=".riu-modal__close",
)

_DISCOUNT_RE = re.compile(r"(\d{1,2}\s*%)(\s*(?:off|dto\.?|descuento))?", re.IGNORECASE)
# Keyword is case-insensitive, the code itself must be upper-case
_CODE_RE = re.compile(r"(?i:promo\s*code|code|c[oó]digo(?:\s+promocional)?|cup[oó]n)\s*:?\s*\"?([A-Z0-9]{4,20})\b")


class RiuSite(BaseSite):
    site_id = "riu"

    def build_config(self) -> SiteConfig:
        return SiteConfig(
            site_id=self.site_id,
            name="RIU Hotels & Resorts",
            url=DEFAULT_HOTEL_URL,
            landing_calendar=LANDING_CALENDAR,
            results_calendar=RESULTS_CALENDAR,
            price_container=".room-footer__price-final",
            price_amount=".room-footer__price-final .room-footer__price-final__content strong",
            price_currency=".room-footer__price-final .room-footer__price-final__content strong + *",
            cookie_accept="#onetrust-accept-btn-handler",
            promo=PROMO,
        )

    def parse_promo_text(self, title: str, message: str, code_value: str = "") -> Optional[CouponOffer]:
        """
        Parse the promo modal.

        The discount ("15% OFF") usually sits in the title and the code in
        the message body; a pre-filled promo code input wins over the text.
        """
        title = (title or "").strip()
        message = (message or "").strip()
        raw = "\n".join(part for part in (title, message) if part)

        discount = ""
        m = _DISCOUNT_RE.search(raw)
        if m:
            discount = re.sub(r"\s+", "", m.group(1))
            if m.group(2):
                discount = f"{discount} {m.group(2).strip().upper()}"

        code = (code_value or "").strip().upper()
        if not code:
            m = _CODE_RE.search(raw)
            if m:
                code = m.group(1)

        if not discount and not code:
            return None

        return CouponOffer(discount_label=discount, promo_code=code, raw_message=raw)
