"""Canonical records shared by the normalizer, signal processor and sinks."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _frozen_mapping(value: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class LogData:
    """Dialect-independent representation of one change-log entry."""

    operation: str = ""
    table: str = ""
    row_identifier: str = ""
    columns: Sequence[str] = ()
    timestamp: datetime = EPOCH
    before: Mapping[str, Any] = field(default_factory=dict)
    after: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "before", _frozen_mapping(self.before))
        object.__setattr__(self, "after", _frozen_mapping(self.after))

    def values_for(self, column: str) -> tuple[Any, Any]:
        """Return the ``(before, after)`` pair for ``column``; absent sides are ``None``."""

        return self.before.get(column), self.after.get(column)

    def as_dict(self) -> Dict[str, object]:
        return {
            "operation": self.operation,
            "table": self.table,
            "row_identifier": self.row_identifier,
            "columns": list(self.columns),
            "timestamp": self.timestamp.isoformat(),
            "before": dict(self.before),
            "after": dict(self.after),
        }


class AnomalyInput(BaseModel):
    """Per-field record handed to the external anomaly-detection sink."""

    operation: str
    table: str
    column: str = Field(description="Target field the signals were computed for")
    timestamp: datetime
    before_value: Any = Field(default=None, description="Raw value of the column before the change")
    after_value: Any = Field(default=None, description="Raw value of the column after the change")
    signal_vector: List[float] = Field(default_factory=list, description="Ordered signals, registry order")

    model_config = ConfigDict(frozen=True)

    def identifier(self) -> str:
        return f"{self.table}:{self.column}:{self.timestamp.isoformat()}"


__all__ = ["AnomalyInput", "EPOCH", "LogData"]
