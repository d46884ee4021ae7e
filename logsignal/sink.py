"""Assembly of :class:`AnomalyInput` records and the sinks that accept them."""
from __future__ import annotations

import json
import logging
from typing import List, Protocol, Sequence, TextIO

from .models import AnomalyInput, LogData

logger = logging.getLogger(__name__)

MAX_VALUE_LENGTH = 30


def assemble_anomaly_input(log_data: LogData, column: str, vector: Sequence[float]) -> AnomalyInput:
    before, after = log_data.values_for(column)
    return AnomalyInput(
        operation=log_data.operation,
        table=log_data.table,
        column=column,
        timestamp=log_data.timestamp,
        before_value=before,
        after_value=after,
        signal_vector=list(vector),
    )


class AnomalySink(Protocol):
    """Opaque accept-one-record consumer."""

    def accept(self, record: AnomalyInput, signal_names: Sequence[str] = ()) -> None:
        ...


def _truncate(value: object) -> str:
    text = "<nil>" if value is None else str(value)
    if len(text) > MAX_VALUE_LENGTH:
        return text[:MAX_VALUE_LENGTH] + "..."
    return text


def format_signals(vector: Sequence[float], names: Sequence[str]) -> str:
    parts = []
    for index, value in enumerate(vector):
        name = names[index] if index < len(names) else "unknown"
        parts.append(f"{name}={value:.4f}")
    return ", ".join(parts)


class LoggingSink:
    """Writes one compact log line per record."""

    def __init__(self, logger: logging.Logger = logger) -> None:
        self._logger = logger

    def accept(self, record: AnomalyInput, signal_names: Sequence[str] = ()) -> None:
        self._logger.info(
            "%s id=%s before=%s after=%s signals=%s",
            record.operation,
            record.identifier(),
            _truncate(record.before_value),
            _truncate(record.after_value),
            format_signals(record.signal_vector, signal_names),
        )


class JsonLinesSink:
    """Writes one JSON object per record to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def accept(self, record: AnomalyInput, signal_names: Sequence[str] = ()) -> None:
        payload = record.model_dump(mode="json")
        payload["signal_names"] = list(signal_names)
        self._stream.write(json.dumps(payload, default=str) + "\n")


class CollectingSink:
    """Keeps records in memory; used for local runs and tests."""

    def __init__(self) -> None:
        self.records: List[AnomalyInput] = []
        self.signal_names: List[Sequence[str]] = []

    def accept(self, record: AnomalyInput, signal_names: Sequence[str] = ()) -> None:
        self.records.append(record)
        self.signal_names.append(tuple(signal_names))


__all__ = [
    "AnomalySink",
    "CollectingSink",
    "JsonLinesSink",
    "LoggingSink",
    "assemble_anomaly_input",
    "format_signals",
]
