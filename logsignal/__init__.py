"""Log signal processor exports."""

from .config import (
    AESMode,
    EncryptionConfig,
    EncryptionType,
    InvalidEncryptionConfig,
    Settings,
    get_settings,
)
from .crypto import (
    AESCBCCipher,
    AESCTRCipher,
    AESGCMCipher,
    ChaCha20Cipher,
    CipherStrategy,
    CiphertextEnvelope,
    EntropyExhausted,
    NoneCipher,
    cipher_for,
)
from .models import AnomalyInput, LogData
from .normalizer import (
    FieldAccess,
    FieldStatus,
    LogNormalizer,
    MalformedRecord,
    MissingOrMistypedField,
    OracleLogNormalizer,
    PostgresLogNormalizer,
    normalizer_for,
)
from .pipeline import PipelineReport, RecordFailure, SignalPipeline
from .signals import (
    FieldEditDistanceGenerator,
    FieldEntropyDeltaGenerator,
    SignalGenerator,
    SignalProcessor,
    SignalType,
    build_processor,
)
from .simulator import EncryptionSimulator
from .sink import AnomalySink, CollectingSink, JsonLinesSink, LoggingSink, assemble_anomaly_input

__all__ = [
    "AESCBCCipher",
    "AESCTRCipher",
    "AESGCMCipher",
    "AESMode",
    "AnomalyInput",
    "AnomalySink",
    "ChaCha20Cipher",
    "CipherStrategy",
    "CiphertextEnvelope",
    "CollectingSink",
    "EncryptionConfig",
    "EncryptionSimulator",
    "EncryptionType",
    "EntropyExhausted",
    "FieldAccess",
    "FieldEditDistanceGenerator",
    "FieldEntropyDeltaGenerator",
    "FieldStatus",
    "InvalidEncryptionConfig",
    "JsonLinesSink",
    "LogData",
    "LogNormalizer",
    "LoggingSink",
    "MalformedRecord",
    "MissingOrMistypedField",
    "NoneCipher",
    "OracleLogNormalizer",
    "PipelineReport",
    "PostgresLogNormalizer",
    "RecordFailure",
    "Settings",
    "SignalGenerator",
    "SignalPipeline",
    "SignalProcessor",
    "SignalType",
    "assemble_anomaly_input",
    "build_processor",
    "cipher_for",
    "get_settings",
    "normalizer_for",
]
