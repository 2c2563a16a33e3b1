"""Manual entry adapter for JSON transaction exports."""

import json
from pathlib import Path

from tradeledger.exceptions import ImportFormatError
from tradeledger.ingestion.base import BaseAdapter, ImportResult

OPTION_KEYS = {
    "optionType", "option_type", "strikePrice", "strike_price", "strike",
    "contracts", "expirationDate", "expiration_date", "expiration",
}
STOCK_KEYS = {"shares", "pricePerShare", "price_per_share", "price"}

STOCK_REQUIRED = (("ticker",), ("action",), ("shares",), ("date",))
OPTION_REQUIRED = (
    ("ticker",),
    ("action",),
    ("contracts",),
    ("strikePrice", "strike_price", "strike"),
    ("expirationDate", "expiration_date", "expiration"),
)


class ManualAdapter(BaseAdapter):
    """Imports a JSON list of records, or ``{"stock": [...], "options": [...]}``."""

    def parse(self, file_path: Path) -> ImportResult:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        source = str(file_path)
        try:
            raw = json.loads(file_path.read_text())
        except json.JSONDecodeError as exc:
            raise ImportFormatError(source, f"invalid JSON ({exc.msg})") from exc

        result = ImportResult(source=source)
        if isinstance(raw, dict):
            if not ({"stock", "options"} & raw.keys()):
                raise ImportFormatError(source, "expected 'stock' and/or 'options' keys")
            result.stock_records = self._records(raw.get("stock", []), source)
            result.option_records = self._records(raw.get("options", []), source)
            return result

        if not isinstance(raw, list):
            raise ImportFormatError(source, "expected a list of records or an object")
        if not raw:
            raise ImportFormatError(source, "file contains an empty list - no records to import")

        for record in self._records(raw, source):
            if self._detect_kind(record, source) == "option":
                result.option_records.append(record)
            else:
                result.stock_records.append(record)
        return result

    def validate(self, data: ImportResult) -> list[str]:
        errors = []
        for i, record in enumerate(data.stock_records):
            errors.extend(_missing(record, STOCK_REQUIRED, f"Stock record {i + 1}"))
        for i, record in enumerate(data.option_records):
            errors.extend(_missing(record, OPTION_REQUIRED, f"Option record {i + 1}"))
            if not ({"transactionDate", "transaction_date", "date"} & record.keys()):
                errors.append(f"Option record {i + 1}: transaction date is missing")
        return errors

    @staticmethod
    def _records(value, source: str) -> list[dict]:
        if not isinstance(value, list) or not all(isinstance(r, dict) for r in value):
            raise ImportFormatError(source, "records must be JSON objects in a list")
        return value

    @staticmethod
    def _detect_kind(record: dict, source: str) -> str:
        """Detect record kind from its field signature."""
        if OPTION_KEYS & record.keys():
            return "option"
        if STOCK_KEYS & record.keys():
            return "stock"
        raise ImportFormatError(source, f"cannot detect record kind from keys: {list(record)}")


def _missing(record: dict, required: tuple[tuple[str, ...], ...], label: str) -> list[str]:
    return [
        f"{label}: {names[0]} is missing"
        for names in required
        if not any(record.get(n) not in (None, "") for n in names)
    ]
