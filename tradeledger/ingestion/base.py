"""Base adapter interface for data ingestion."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ImportResult:
    """Raw records an adapter read, split by kind.

    Records stay untyped here; they are sanitized and validated when offered
    to a ``TransactionLog``.
    """

    source: str
    stock_records: list[dict] = field(default_factory=list)
    option_records: list[dict] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.stock_records) + len(self.option_records)


class BaseAdapter(ABC):
    """Abstract base class for all ingestion adapters."""

    @abstractmethod
    def parse(self, file_path: Path) -> ImportResult:
        """Read a file and return its records."""
        ...

    @abstractmethod
    def validate(self, data: ImportResult) -> list[str]:
        """Check parsed records for missing fields. Returns error messages."""
        ...
