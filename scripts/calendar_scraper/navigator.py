"""
Calendar Navigation

Pages a one- or two-pane month calendar forward until a target month is
visible, then clicks a day button inside that month's panel.

The visible months are always re-read from the page: repeated forward
clicks can leave the widget in a state that differs from what we last saw.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from .base import click_with_fallback, poll_until, query_text, safe_inner_text
from .sites.base import CalendarSelectors


MONTH_NAMES = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    # Spanish labels, shown when the site falls back to its default locale
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4, "mayo": 5, "junio": 6,
    "julio": 7, "agosto": 8, "septiembre": 9, "setiembre": 9, "octubre": 10,
    "noviembre": 11, "diciembre": 12,
}

_MONTH_RE = re.compile(r"\b(" + "|".join(MONTH_NAMES) + r")\b", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(\d{4})\b")

Month = tuple[int, int]  # (year, month)


def parse_month_label(text: str, default_year: Optional[int] = None) -> Optional[Month]:
    """
    Parse a panel header like 'September 2026' or 'octubre de 2026'.

    Returns (year, month), or None if no month name (or no year and no
    default_year) is found.
    """
    if not text:
        return None
    m = _MONTH_RE.search(text)
    if not m:
        return None
    month = MONTH_NAMES[m.group(1).lower()]

    y = _YEAR_RE.search(text)
    if y:
        return int(y.group(1)), month
    if default_year is not None:
        return default_year, month
    return None


class CalendarNavigator:
    """
    Drives one calendar widget variant on a page.

    pane_count on the selectors decides how many panels are considered
    visible; with two panes a month may appear in either.
    """

    def __init__(
        self,
        page,
        selectors: CalendarSelectors,
        max_forward: int = 6,
        settle_timeout: int = 3000,
    ):
        self.page = page
        self.selectors = selectors
        self.max_forward = max_forward
        self.settle_timeout = settle_timeout

    async def panels(self) -> list:
        found = await self.page.query_selector_all(self.selectors.panel)
        return found[: self.selectors.pane_count]

    async def visible_months(self) -> list[Optional[Month]]:
        """Parsed month label per visible panel, left to right."""
        months = []
        for panel in await self.panels():
            label = await query_text(panel, self.selectors.month_label)
            months.append(parse_month_label(label))
        return months

    async def find_panel(self, year: int, month: int):
        """Left-most visible panel showing the month, or None."""
        for panel in await self.panels():
            label = await query_text(panel, self.selectors.month_label)
            if parse_month_label(label) == (year, month):
                return panel
        return None

    async def _forward_control(self):
        control = await self.page.query_selector(self.selectors.forward)
        if control is None:
            return None
        if await control.is_disabled():
            return None
        return control

    async def navigate_to_month(self, year: int, month: int) -> bool:
        """
        Make (year, month) visible using the forward control only.

        At most max_forward clicks; no clicks at all if already visible.
        """
        target = (year, month)

        for advanced in range(self.max_forward + 1):
            months = await self.visible_months()
            if target in months:
                if advanced:
                    print(f"  ✓ Calendar on {month:02d}/{year} after {advanced} step(s)")
                return True

            known = [m for m in months if m is not None]
            if known and min(known) > target:
                print(f"  Target {month:02d}/{year} is before visible months {known}")
                return False

            if advanced == self.max_forward:
                break

            control = await self._forward_control()
            if control is None:
                print(f"  Next month control unavailable, stuck at {known}")
                return False
            if not await click_with_fallback(self.page, control):
                return False

            async def view_changed(before=months):
                return await self.visible_months() != before

            if not await poll_until(self.page, view_changed, timeout=self.settle_timeout):
                print("  Calendar did not change after next month click")

        print(f"  Could not reach {month:02d}/{year} within {self.max_forward} steps")
        return False

    async def find_day_button(self, panel, day: int):
        """Enabled in-month button whose label equals day exactly."""
        wanted = str(day)
        for button in await panel.query_selector_all(self.selectors.day_button):
            if self.selectors.day_text:
                text = await query_text(button, self.selectors.day_text)
            else:
                text = await safe_inner_text(button)
            if text == wanted:
                return button
        return None

    async def select_day(self, target: date) -> bool:
        """Bring target's month into view and click its day button."""
        if not await self.navigate_to_month(target.year, target.month):
            return False

        panel = await self.find_panel(target.year, target.month)
        if panel is None:
            print(f"  ✗ No panel for {target.strftime('%B %Y')}")
            return False

        button = await self.find_day_button(panel, target.day)
        if button is None:
            print(f"  ✗ Could not find clickable date: {target.day}")
            return False

        if not await click_with_fallback(self.page, button):
            return False
        print(f"  ✓ Clicked on date: {target.isoformat()}")
        return True
