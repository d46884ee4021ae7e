"""Synthetic change-log generator for exercising the pipeline without a database."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from faker import Faker

from .simulator import EncryptionSimulator


@dataclass(frozen=True)
class FieldConfig:
    """A column name and the function producing fake values for it."""

    name: str
    generator: Callable[[], str]


def default_fields(fake: Faker) -> List[FieldConfig]:
    return [
        FieldConfig("bio", lambda: fake.sentence(nb_words=5)),
        FieldConfig("email", fake.email),
        FieldConfig("phone", fake.phone_number),
        FieldConfig("address", fake.address),
    ]


def oracle_update_log(
    table: str,
    row_id: str,
    columns: Sequence[str],
    before: Dict[str, Any],
    after: Dict[str, Any],
    *,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    return {
        "action": "UPDATE",
        "table_name": table,
        "rowid": row_id,
        "changed_columns": list(columns),
        "timestamp": timestamp or datetime.now(timezone.utc),
        "before_values": before,
        "after_values": after,
    }


def postgres_update_log(
    table: str,
    primary_key: str,
    columns: Sequence[str],
    before: Dict[str, Any],
    after: Dict[str, Any],
    *,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    return {
        "operation": "UPDATE",
        "table": table,
        "primary_key": primary_key,
        "changed_columns": list(columns),
        "timestamp": timestamp or datetime.now(timezone.utc),
        "old_values": before,
        "new_values": after,
    }


_BUILDERS = {
    "oracle": oracle_update_log,
    "postgres": postgres_update_log,
}


class LogSimulator:
    """Produces raw UPDATE records whose after-values may be simulated ciphertext."""

    def __init__(
        self,
        encryption: Optional[EncryptionSimulator] = None,
        *,
        seed: Optional[int] = None,
        fake: Optional[Faker] = None,
    ) -> None:
        self.encryption = encryption or EncryptionSimulator()
        self.fake = fake or Faker()
        if seed is not None:
            self.fake.seed_instance(seed)

    def available_fields(self) -> List[FieldConfig]:
        return default_fields(self.fake)

    def select_fields(self, names: Sequence[str]) -> List[FieldConfig]:
        known = {field.name: field for field in self.available_fields()}
        unknown = [name for name in names if name not in known]
        if unknown:
            raise ValueError(f"Unknown simulated fields: {', '.join(unknown)}")
        return [known[name] for name in names]

    def generate(
        self,
        dialect: str,
        table: str,
        rows: int,
        fields: Optional[Sequence[FieldConfig]] = None,
    ) -> Iterator[Dict[str, Any]]:
        try:
            builder = _BUILDERS[dialect.lower()]
        except KeyError:
            raise ValueError(f"Unsupported database dialect: {dialect}") from None

        fields = list(fields) if fields is not None else self.available_fields()
        return self._rows(builder, table, rows, fields)

    def _rows(
        self,
        builder: Callable[..., Dict[str, Any]],
        table: str,
        rows: int,
        fields: Sequence[FieldConfig],
    ) -> Iterator[Dict[str, Any]]:
        columns = [field.name for field in fields]
        for number in range(1, rows + 1):
            before: Dict[str, Any] = {}
            after: Dict[str, Any] = {}
            for field in fields:
                before[field.name] = field.generator()
                after[field.name] = self.encryption.maybe_transform(field.generator())
            yield builder(table, f"row{number}", columns, before, after)


__all__ = [
    "FieldConfig",
    "LogSimulator",
    "default_fields",
    "oracle_update_log",
    "postgres_update_log",
]
