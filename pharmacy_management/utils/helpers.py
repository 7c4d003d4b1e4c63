# utils/helpers.py
from datetime import date
import logging
from typing import Union, Optional

from ..constants import CURRENCY_SYMBOL

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def to_date(value: Union[str, date, None]) -> Optional[date]:
    """Coerce an ISO string or date into a date; None passes through."""
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
    symbol: str = "",
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.

    Pass symbol=CURRENCY_SYMBOL to prefix the rupee sign.
    """
    try:
        x = float(v)
    except Exception as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{symbol}{x:,.{places}f}"


def fmt_rupees(v: NumberLike) -> str:
    return fmt_money(v, symbol=CURRENCY_SYMBOL)


def fmt_phone(phone: str) -> str:
    """'9876543210' -> '+91 98765 43210' (other shapes are returned unchanged)."""
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    if len(digits) != 10:
        return phone
    return f"+91 {digits[:5]} {digits[5:]}"
