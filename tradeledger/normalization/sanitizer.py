"""Input sanitization for untrusted transaction fields.

Every function here is total: bad input comes back as an empty string or a
zero, never as an exception. Range and relationship checks belong to the
validator; this layer only normalizes and bounds.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from tradeledger.models.enums import OptionAction, OptionStrategy, StockAction
from tradeledger.utils.dates import parse_date

TEXT_MAX_LENGTH = 1000
NOTES_MAX_LENGTH = 500
ACCOUNT_NAME_MAX_LENGTH = 100
TICKER_MAX_LENGTH = 5

_ANGLE_BRACKETS_RE = re.compile(r"[<>]")
_JAVASCRIPT_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+=", re.IGNORECASE)
_NON_LETTER_RE = re.compile(r"[^A-Z]")
_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_NUMBER_PREFIX_RE = re.compile(r"-?(\d+\.?\d*|\.\d+)")
_NON_DATE_RE = re.compile(r"[^0-9\-]")

_OPTION_ACTIONS = {a.value for a in OptionAction}
_STOCK_ACTIONS = {a.value for a in StockAction}
_STRATEGIES = {s.value for s in OptionStrategy}


def sanitize_string(value: Any, max_length: int = TEXT_MAX_LENGTH) -> str:
    """Strip markup and script fragments, trim, and truncate."""
    if not value:
        return ""
    text = str(value)
    text = _ANGLE_BRACKETS_RE.sub("", text)
    text = _JAVASCRIPT_RE.sub("", text)
    text = _EVENT_HANDLER_RE.sub("", text)
    return text.strip()[:max_length]


def sanitize_notes(value: Any) -> str:
    return sanitize_string(value, NOTES_MAX_LENGTH)


def sanitize_account_name(value: Any) -> str:
    return sanitize_string(value, ACCOUNT_NAME_MAX_LENGTH)


def sanitize_ticker(value: Any) -> str:
    if not value:
        return ""
    return _NON_LETTER_RE.sub("", str(value).strip().upper())[:TICKER_MAX_LENGTH]


def sanitize_number(value: Any) -> Decimal:
    """Coerce to a finite Decimal; anything unparseable becomes 0.

    Strings keep only digits, ``.`` and ``-`` and are read up to the first
    character that no longer forms a number, so ``"$1,250.50"`` is 1250.50.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if isinstance(value, (int, float)):
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            return Decimal("0")
        return number if number.is_finite() else Decimal("0")

    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    match = _NUMBER_PREFIX_RE.match(cleaned)
    if not match:
        return Decimal("0")
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return Decimal("0")


def sanitize_date(value: Any) -> str:
    """Return a real ``YYYY-MM-DD`` date or an empty string."""
    if isinstance(value, date):
        return value.isoformat()
    if not value:
        return ""
    cleaned = _NON_DATE_RE.sub("", str(value))
    if parse_date(cleaned) is None:
        return ""
    return cleaned


def sanitize_option_action(value: Any) -> str:
    cleaned = str(value or "").strip().lower()
    return cleaned if cleaned in _OPTION_ACTIONS else ""


def sanitize_option_type(value: Any) -> str:
    cleaned = str(value or "").strip().lower()
    if cleaned in ("call", "c"):
        return "call"
    if cleaned in ("put", "p"):
        return "put"
    return ""


def sanitize_stock_action(value: Any) -> str:
    cleaned = str(value or "").strip().lower().replace("_", "-")
    return cleaned if cleaned in _STOCK_ACTIONS else ""


def sanitize_strategy(value: Any) -> str:
    """Unknown strategies fall back to ``other``: strategy never blocks a record."""
    cleaned = str(value or "").strip().lower().replace("_", "-")
    return cleaned if cleaned in _STRATEGIES else OptionStrategy.OTHER.value


def _pick(raw: dict, *keys: str) -> Any:
    """First present key among snake_case, camelCase and legacy names."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _whole_or_decimal(value: Decimal) -> int | Decimal:
    return int(value) if value == value.to_integral_value() else value


def sanitize_stock_record(raw: dict) -> dict:
    """Sanitize a raw stock record into keyword arguments for StockTransaction."""
    shares = sanitize_number(_pick(raw, "shares"))
    price = sanitize_number(_pick(raw, "price_per_share", "pricePerShare", "price"))
    total = _pick(raw, "total_amount", "totalAmount")
    split_ratio = _pick(raw, "split_ratio", "splitRatio")
    return {
        "id": str(_pick(raw, "id") or ""),
        "account_id": sanitize_string(_pick(raw, "account_id", "accountId"), ACCOUNT_NAME_MAX_LENGTH),
        "ticker": sanitize_ticker(_pick(raw, "ticker")),
        "action": sanitize_stock_action(_pick(raw, "action")),
        "shares": shares,
        "price_per_share": price,
        "fees": sanitize_number(_pick(raw, "fees")),
        "total_amount": sanitize_number(total) if total is not None else shares * price,
        "date": sanitize_date(_pick(raw, "date")),
        "split_ratio": str(split_ratio).strip() if split_ratio is not None else None,
        "notes": sanitize_notes(_pick(raw, "notes")),
    }


def sanitize_option_record(raw: dict, contract_multiplier: int = 100) -> dict:
    """Sanitize a raw option record into keyword arguments for OptionTransaction."""
    contracts = sanitize_number(_pick(raw, "contracts"))
    premium = sanitize_number(_pick(raw, "premium_per_share", "premiumPerShare", "premium"))
    total = _pick(raw, "total_premium", "totalPremium")
    realized = _pick(raw, "realized_pl", "realizedPL", "realizedPl")
    assignment = _pick(raw, "assignment_date", "assignmentDate")
    return {
        "id": str(_pick(raw, "id") or ""),
        "account_id": sanitize_string(_pick(raw, "account_id", "accountId"), ACCOUNT_NAME_MAX_LENGTH),
        "ticker": sanitize_ticker(_pick(raw, "ticker")),
        "strategy": sanitize_strategy(_pick(raw, "strategy")),
        "option_type": sanitize_option_type(_pick(raw, "option_type", "optionType", "type")),
        "action": sanitize_option_action(_pick(raw, "action")),
        "contracts": _whole_or_decimal(contracts),
        "strike_price": sanitize_number(_pick(raw, "strike_price", "strikePrice", "strike")),
        "premium_per_share": premium,
        "total_premium": (
            sanitize_number(total) if total is not None else contracts * premium * contract_multiplier
        ),
        "fees": sanitize_number(_pick(raw, "fees")),
        "expiration_date": sanitize_date(_pick(raw, "expiration_date", "expirationDate", "expiration")),
        "transaction_date": sanitize_date(_pick(raw, "transaction_date", "transactionDate", "date")),
        "assignment_date": sanitize_date(assignment) or None,
        "realized_pl": sanitize_number(realized) if realized is not None else None,
        "notes": sanitize_notes(_pick(raw, "notes")),
    }
