"""Orchestration: raw record -> LogData -> signal vectors -> sink."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

from .normalizer import LogNormalizer, MalformedRecord, MissingOrMistypedField
from .signals import SignalProcessor, SignalType, build_processor
from .sink import AnomalySink, assemble_anomaly_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFailure:
    """A record that was skipped and why."""

    index: int
    reason: str

    def as_dict(self) -> dict[str, object]:
        return {"index": self.index, "reason": self.reason}


@dataclass
class PipelineReport:
    """Counters for one :meth:`SignalPipeline.process` run."""

    processed: int = 0
    emitted: int = 0
    failures: List[RecordFailure] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.failures)

    def as_dict(self) -> dict[str, object]:
        return {
            "processed": self.processed,
            "emitted": self.emitted,
            "skipped": self.skipped,
            "failures": [failure.as_dict() for failure in self.failures],
        }


class SignalPipeline:
    """Builds one processor per target field and emits an AnomalyInput per (record, field)."""

    def __init__(
        self,
        normalizer: LogNormalizer,
        fields: Sequence[str],
        sink: AnomalySink,
        *,
        signals: Iterable[str | SignalType] = (),
        processors: Mapping[str, SignalProcessor] | None = None,
        logger: logging.Logger = logger,
    ) -> None:
        self.normalizer = normalizer
        self.fields = tuple(fields)
        self.sink = sink
        self._logger = logger
        signal_types = tuple(signals)
        self.processors: Dict[str, SignalProcessor] = dict(processors or {})
        for field_name in self.fields:
            if field_name not in self.processors:
                self.processors[field_name] = build_processor(field_name, signal_types)

    def process(self, records: Iterable[object]) -> PipelineReport:
        report = PipelineReport()
        for index, raw in enumerate(records):
            try:
                log_data = self.normalizer.normalize(raw)
            except (MalformedRecord, MissingOrMistypedField) as exc:
                self._logger.warning("Skipping record %s: %s", index, exc)
                report.failures.append(RecordFailure(index=index, reason=str(exc)))
                continue

            report.processed += 1
            for field_name in self.fields:
                processor = self.processors[field_name]
                vector = processor.generate_vector(log_data)
                record = assemble_anomaly_input(log_data, field_name, vector)
                self.sink.accept(record, processor.names)
                report.emitted += 1

        self._logger.debug(
            "Pipeline run complete: %s processed, %s emitted, %s skipped",
            report.processed,
            report.emitted,
            report.skipped,
        )
        return report


__all__ = ["PipelineReport", "RecordFailure", "SignalPipeline"]
