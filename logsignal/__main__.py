"""Generate simulated change logs and emit their signal vectors.

Usage:
    python -m logsignal                              # settings from LOGSIGNAL_* / .env
    python -m logsignal --dialect oracle --rows 50
    python -m logsignal --encryption AES --aes-mode GCM --key-size 16 --percentage 30
    python -m logsignal --format json --seed 7
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional, Sequence

from .config import EncryptionConfig, Settings, get_settings
from .logsim import LogSimulator
from .normalizer import normalizer_for, supported_dialects
from .pipeline import SignalPipeline
from .signals import SignalType
from .simulator import EncryptionSimulator
from .sink import AnomalySink, JsonLinesSink, LoggingSink

logger = logging.getLogger("logsignal")


def _split(value: str) -> List[str]:
    return [part for part in value.replace(",", " ").split() if part]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="logsignal",
        description="Turn simulated database change logs into anomaly-detection signal vectors",
    )
    parser.add_argument("--dialect", "-d", choices=sorted(supported_dialects()), default=None,
                        help="Change-log dialect to simulate (overrides settings)")
    parser.add_argument("--fields", type=_split, default=None,
                        help="Comma separated columns to change: bio, email, phone, address")
    parser.add_argument("--signals", type=_split, default=None,
                        help="Comma separated signal types: All, Levenshtein, Entropy")
    parser.add_argument("--encryption", "-e", default=None,
                        help="Simulated encryption type: None, AES or ChaCha20")
    parser.add_argument("--aes-mode", default=None, help="AES mode: CBC, CTR or GCM")
    parser.add_argument("--key-size", type=int, default=None, help="AES key size in bytes: 16, 24 or 32")
    parser.add_argument("--percentage", "-p", type=int, default=None,
                        help="Probability (0-100) that a value gets encrypted")
    parser.add_argument("--rows", "-n", type=int, default=None, help="Number of rows to simulate")
    parser.add_argument("--table", "-t", default=None, help="Table name used in the simulated logs")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible fixtures")
    parser.add_argument("--format", "-f", choices=["text", "json"], default=None, help="Output format")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "dialect": args.dialect,
        "fields": args.fields,
        "signals": args.signals,
        "encryption_type": args.encryption,
        "aes_mode": args.aes_mode,
        "aes_key_size": args.key_size,
        "encryption_percentage": args.percentage,
        "row_count": args.rows,
        "table": args.table,
        "seed": args.seed,
        "output_format": args.format,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={key: value for key, value in overrides.items() if value is not None})


def summarize(settings: Settings, encryption: EncryptionConfig) -> str:
    return "\n".join(
        [
            f"DB Type: {settings.dialect}",
            f"Selected Fields: {', '.join(settings.fields)}",
            f"Selected Signals: {', '.join(settings.signals)}",
            f"Encryption: {encryption.describe()}",
            f"Row Count: {settings.row_count}",
            f"Output Format: {settings.output_format}",
        ]
    )


def build_sink(settings: Settings) -> AnomalySink:
    if settings.output_format == "json":
        return JsonLinesSink(sys.stdout)
    return LoggingSink()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        encryption = settings.encryption_config()
        signals = [SignalType.parse(value) for value in settings.signals]
        normalizer = normalizer_for(settings.dialect)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    simulator = LogSimulator(
        EncryptionSimulator(encryption, rng=random.Random(settings.seed)),
        seed=settings.seed,
    )
    try:
        fields = simulator.select_fields(settings.fields)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    print(f"Configuration:\n{summarize(settings, encryption)}\n", file=sys.stderr)

    records = simulator.generate(settings.dialect, settings.table, settings.row_count, fields)
    pipeline = SignalPipeline(normalizer, settings.fields, build_sink(settings), signals=signals)
    report = pipeline.process(records)

    logger.info(
        "Processed %s records, emitted %s anomaly inputs, skipped %s",
        report.processed,
        report.emitted,
        report.skipped,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
