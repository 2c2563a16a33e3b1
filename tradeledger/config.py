"""Engine settings, overridable through TRADELEDGER_* environment variables."""

import os
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel

ENV_PREFIX = "TRADELEDGER_"


class LedgerSettings(BaseModel):
    wash_sale_window_days: int = 30
    price_warning_threshold: Decimal = Decimal("10000")
    expiration_warning_years: int = 2
    contract_multiplier: int = 100
    db_path: Path = Path.home() / ".tradeledger" / "ledger.db"

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings, letting environment variables override the defaults.

        ``TRADELEDGER_WASH_SALE_WINDOW_DAYS=45`` overrides
        ``wash_sale_window_days`` and so on. Unset variables keep defaults.
        """
        overrides = {}
        for name in cls.model_fields:
            value = os.environ.get(ENV_PREFIX + name.upper())
            if value is not None:
                overrides[name] = value
        return cls(**overrides)
