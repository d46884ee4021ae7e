"""Normalization of dialect-specific change-log records into :class:`LogData`."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence

from .models import EPOCH, LogData


class MalformedRecord(ValueError):
    """Raised when a raw record is not a key/value mapping."""


class MissingOrMistypedField(ValueError):
    """Raised by strict normalizers when canonical fields are absent or mistyped."""

    def __init__(self, problems: Mapping[str, "FieldStatus"]) -> None:
        self.problems = dict(problems)
        detail = ", ".join(f"{name} ({status.value})" for name, status in self.problems.items())
        super().__init__(f"Unusable fields in change record: {detail}")


class FieldStatus(str, Enum):
    PRESENT = "present"
    WRONG_TYPE = "wrong_type"
    ABSENT = "absent"


@dataclass(frozen=True)
class FieldAccess:
    """Outcome of reading one canonical field out of a raw record."""

    status: FieldStatus
    value: Any

    @property
    def ok(self) -> bool:
        return self.status is FieldStatus.PRESENT


@dataclass(frozen=True)
class DialectKeys:
    """Raw key names a dialect uses for each canonical field."""

    operation: str
    table: str
    row_identifier: str
    columns: str
    timestamp: str
    before: str
    after: str


CANONICAL_FIELDS = ("operation", "table", "row_identifier", "columns", "timestamp", "before", "after")


class LogNormalizer(Protocol):
    """Parses one raw change record into :class:`LogData`."""

    dialect: str

    def inspect(self, raw: object) -> Dict[str, FieldAccess]:
        ...

    def normalize(self, raw: object) -> LogData:
        ...


class KeyMappingNormalizer:
    """Field-remapping normalizer driven by a :class:`DialectKeys` table.

    Missing or mistyped fields are replaced with their zero value unless the
    normalizer is strict, in which case :class:`MissingOrMistypedField` is raised.
    """

    dialect = "generic"
    keys: DialectKeys

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def inspect(self, raw: object) -> Dict[str, FieldAccess]:
        record = _require_mapping(raw)
        keys = self.keys
        return {
            "operation": _string_field(record, keys.operation),
            "table": _string_field(record, keys.table),
            "row_identifier": _string_field(record, keys.row_identifier),
            "columns": _columns_field(record, keys.columns),
            "timestamp": _timestamp_field(record, keys.timestamp),
            "before": _mapping_field(record, keys.before),
            "after": _mapping_field(record, keys.after),
        }

    def normalize(self, raw: object) -> LogData:
        fields = self.inspect(raw)
        if self.strict:
            problems = {name: access.status for name, access in fields.items() if not access.ok}
            if problems:
                raise MissingOrMistypedField(problems)
        return LogData(**{name: access.value for name, access in fields.items()})


class OracleLogNormalizer(KeyMappingNormalizer):
    dialect = "oracle"
    keys = DialectKeys(
        operation="action",
        table="table_name",
        row_identifier="rowid",
        columns="changed_columns",
        timestamp="timestamp",
        before="before_values",
        after="after_values",
    )


class PostgresLogNormalizer(KeyMappingNormalizer):
    dialect = "postgres"
    keys = DialectKeys(
        operation="operation",
        table="table",
        row_identifier="primary_key",
        columns="changed_columns",
        timestamp="timestamp",
        before="old_values",
        after="new_values",
    )


_DIALECTS: Dict[str, Callable[..., LogNormalizer]] = {
    "oracle": OracleLogNormalizer,
    "postgres": PostgresLogNormalizer,
}


def register_dialect(name: str, factory: Callable[..., LogNormalizer]) -> None:
    _DIALECTS[name.lower()] = factory


def supported_dialects() -> Sequence[str]:
    return tuple(_DIALECTS)


def normalizer_for(dialect: str, *, strict: bool = False) -> LogNormalizer:
    try:
        factory = _DIALECTS[dialect.lower()]
    except KeyError:
        raise ValueError(f"Unsupported database dialect: {dialect}") from None
    return factory(strict=strict)


# ----------------------------------------------------------------------
# Field access helpers
# ----------------------------------------------------------------------
def _require_mapping(raw: object) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedRecord(f"Expected a key/value record, got {type(raw).__name__}")
    return raw


def _string_field(record: Mapping[str, Any], key: str) -> FieldAccess:
    if key not in record:
        return FieldAccess(FieldStatus.ABSENT, "")
    value = record[key]
    if isinstance(value, str):
        return FieldAccess(FieldStatus.PRESENT, value)
    return FieldAccess(FieldStatus.WRONG_TYPE, "")


def _columns_field(record: Mapping[str, Any], key: str) -> FieldAccess:
    if key not in record:
        return FieldAccess(FieldStatus.ABSENT, ())
    value = record[key]
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return FieldAccess(FieldStatus.PRESENT, tuple(value))
    return FieldAccess(FieldStatus.WRONG_TYPE, ())


def _timestamp_field(record: Mapping[str, Any], key: str) -> FieldAccess:
    if key not in record:
        return FieldAccess(FieldStatus.ABSENT, EPOCH)
    value = record[key]
    parsed: Optional[datetime] = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
    if parsed is None:
        return FieldAccess(FieldStatus.WRONG_TYPE, EPOCH)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return FieldAccess(FieldStatus.PRESENT, parsed)


def _mapping_field(record: Mapping[str, Any], key: str) -> FieldAccess:
    if key not in record:
        return FieldAccess(FieldStatus.ABSENT, {})
    value = record[key]
    if isinstance(value, Mapping):
        return FieldAccess(FieldStatus.PRESENT, dict(value))
    return FieldAccess(FieldStatus.WRONG_TYPE, {})


__all__ = [
    "CANONICAL_FIELDS",
    "DialectKeys",
    "FieldAccess",
    "FieldStatus",
    "KeyMappingNormalizer",
    "LogNormalizer",
    "MalformedRecord",
    "MissingOrMistypedField",
    "OracleLogNormalizer",
    "PostgresLogNormalizer",
    "normalizer_for",
    "register_dialect",
    "supported_dialects",
]
