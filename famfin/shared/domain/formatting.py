"""Presentation helpers: input masking, id-ID number/date formatting and
chart-series sanitizing."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from famfin.shared.domain.models import MonthlyStats

MAX_DATE_LENGTH = 10

MONTHS_SHORT = ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des"]
MONTHS_LONG = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

CURRENCY_SYMBOLS = {"IDR": "Rp", "USD": "US$", "EUR": "€"}

# Flet icon names (ft.Icons attribute names) per category
CATEGORY_ICONS = {
    "Gaji": "PAYMENTS",
    "Bonus": "CARD_GIFTCARD",
    "Investasi": "TRENDING_UP",
    "Makanan": "FASTFOOD",
    "Transport": "DIRECTIONS_CAR",
    "Belanja": "SHOPPING_CART",
    "Pendidikan": "SCHOOL",
    "Kesehatan": "MEDICAL_SERVICES",
    "Hiburan": "SPORTS_ESPORTS",
    "Lainnya": "MORE_HORIZ",
}
DEFAULT_CATEGORY_ICON = "MORE_HORIZ"

PERIOD_OPTIONS = [
    {"label": "1 Bulan", "value": 1},
    {"label": "3 Bulan", "value": 3},
    {"label": "6 Bulan", "value": 6},
    {"label": "12 Bulan", "value": 12},
]


# =============================================================================
# INPUT MASKING
# =============================================================================

def mask_date_input(text: str, previous: str = "") -> str:
    """Mask free text into a YYYY-MM-DD shape while the user types.

    Only digits and dashes survive. Separators are inserted after the year
    and the month, so typing ``2024`` shows ``2024-`` and one more digit gives
    ``2024-0``. Input longer than a full date is rejected and ``previous`` is
    returned unchanged.
    """
    cleaned = re.sub(r"[^0-9-]", "", text or "")

    # Pasted or fast-typed digits that skipped a separator
    if "-" not in cleaned and len(cleaned) > 4:
        cleaned = f"{cleaned[:4]}-{cleaned[4:]}"
    parts = cleaned.split("-")
    if len(parts) == 2 and len(parts[1]) > 2:
        cleaned = f"{parts[0]}-{parts[1][:2]}-{parts[1][2:]}"

    formatted = cleaned
    if len(cleaned) == 4 and "-" not in cleaned:
        formatted = cleaned + "-"
    elif len(cleaned) == 7 and len(cleaned.split("-")) == 2:
        formatted = cleaned + "-"

    if len(formatted) > MAX_DATE_LENGTH:
        return previous
    return formatted


# =============================================================================
# NUMBERS
# =============================================================================

def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def format_currency(amount: Any, currency: str = "IDR") -> str:
    """Format like ``Intl.NumberFormat('id-ID', {style: 'currency'})``.

    ``1500000`` → ``Rp 1.500.000,00``. Unparseable input formats as zero.
    """
    number = _to_float(amount) or 0.0
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    grouped = f"{abs(number):,.2f}"
    # en-US grouping → id-ID grouping
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if number < 0 and grouped.strip("0.,") else ""
    return f"{sign}{symbol} {grouped}"


def average(values: Iterable[Any]) -> float:
    """Mean of the numeric values after sanitizing; 0 for an empty series."""
    cleaned = sanitize_series(values)
    return sum(cleaned) / len(cleaned) if cleaned else 0.0


# =============================================================================
# DATES & NAMES
# =============================================================================

def parse_server_date(value: Any) -> Optional[date]:
    """Accept ``date``, ``datetime`` or ISO strings (``Z`` suffix allowed)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Any, long: bool = False, with_year: bool = True) -> str:
    """``12 Jan 2024`` (short) or ``12 Januari 2024`` (long); ``-`` when unknown."""
    parsed = parse_server_date(value)
    if parsed is None:
        return "-"
    month = (MONTHS_LONG if long else MONTHS_SHORT)[parsed.month - 1]
    if not with_year:
        return f"{parsed.day} {month}"
    return f"{parsed.day} {month} {parsed.year}"


def initials(name: Optional[str]) -> str:
    if not name or not name.strip():
        return "U"
    return "".join(word[0] for word in name.split()).upper()


def category_icon(category: Optional[str]) -> str:
    return CATEGORY_ICONS.get(category or "", DEFAULT_CATEGORY_ICON)


def type_label(transaction_type: Any) -> str:
    value = getattr(transaction_type, "value", transaction_type)
    return "Pemasukan" if value == "income" else "Pengeluaran"


def role_label(role: Optional[str]) -> str:
    return "Pemilik" if role == "owner" else "Anggota"


# =============================================================================
# CHARTS
# =============================================================================

def sanitize_series(values: Any) -> List[float]:
    """Make a series safe to plot.

    Non-numeric, NaN, infinite and missing values become 0, negatives are
    clamped to 0, and an empty or non-list input becomes ``[0]``.
    """
    if not isinstance(values, (list, tuple)):
        return [0.0]
    cleaned: List[float] = []
    for value in values:
        number = _to_float(value)
        cleaned.append(max(0.0, number) if number is not None else 0.0)
    return cleaned or [0.0]


def build_chart_data(stats: Optional[MonthlyStats]) -> Dict[str, List[Any]]:
    """Align month labels with sanitized income/expense series.

    Series are cut to the shortest of the three; missing or empty stats
    give the one-point default chart.
    """
    default = {"labels": ["Jan"], "income": [0.0], "expense": [0.0]}
    if stats is None or not stats.months or not stats.income or not stats.expense:
        return default

    income = sanitize_series(stats.income)
    expense = sanitize_series(stats.expense)
    labels = list(stats.months[: min(len(income), len(expense))])
    if not labels:
        return default

    return {
        "labels": labels,
        "income": income[: len(labels)],
        "expense": expense[: len(labels)],
    }
