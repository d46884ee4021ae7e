from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from logsignal.config import (  # noqa: E402
    AESMode,
    EncryptionConfig,
    EncryptionType,
    InvalidEncryptionConfig,
    Settings,
)


def test_surface_keys_and_defaults() -> None:
    config = EncryptionConfig(Type="AES", Percentage=25)
    assert config.type is EncryptionType.AES
    assert config.percentage == 25
    assert config.aes_mode is AESMode.CBC
    assert config.key_size == 32


def test_unset_mode_and_zero_key_size_fall_back_to_defaults() -> None:
    config = EncryptionConfig(type="AES", percentage=10, aes_mode="", key_size=0)
    assert config.aes_mode is AESMode.CBC
    assert config.key_size == 32
    assert EncryptionConfig(Type="aes", AESMode="gcm").aes_mode is AESMode.GCM


@pytest.mark.parametrize(
    "surface",
    [
        {"Type": "AES", "KeySize": 20},
        {"Type": "AES", "AESMode": "ECB"},
        {"Type": "Blowfish"},
        {"Type": "AES", "Percentage": 101},
        {"Type": "ChaCha20", "Percentage": -1},
    ],
)
def test_invalid_configurations(surface: dict) -> None:
    with pytest.raises(InvalidEncryptionConfig):
        EncryptionConfig(**surface)


def test_invalid_configuration_is_a_value_error() -> None:
    with pytest.raises(ValueError) as excinfo:
        EncryptionConfig(Type="AES", KeySize=20)
    assert "key" in str(excinfo.value).lower()


def test_config_is_frozen() -> None:
    config = EncryptionConfig(Type="ChaCha20", Percentage=50)
    with pytest.raises(ValidationError):
        config.percentage = 75  # type: ignore[misc]


def test_describe() -> None:
    assert EncryptionConfig().describe() == "None"
    assert EncryptionConfig(Type="AES", AESMode="CTR", KeySize=16, Percentage=30).describe() == "AES-128-CTR (30%)"
    assert EncryptionConfig(Type="ChaCha20", Percentage=5).describe() == "ChaCha20 (5%)"
    assert not EncryptionConfig(Type="AES", Percentage=0).enabled


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGSIGNAL_DIALECT", "Oracle")
    monkeypatch.setenv("LOGSIGNAL_FIELDS", "bio, phone,address")
    monkeypatch.setenv("LOGSIGNAL_SIGNALS", "Entropy")
    monkeypatch.setenv("LOGSIGNAL_ENCRYPTION_TYPE", "AES")
    monkeypatch.setenv("LOGSIGNAL_ENCRYPTION_PERCENTAGE", "40")
    monkeypatch.setenv("LOGSIGNAL_AES_MODE", "GCM")
    monkeypatch.setenv("LOGSIGNAL_AES_KEY_SIZE", "24")
    monkeypatch.setenv("LOGSIGNAL_SEED", "11")

    settings = Settings(_env_file=None)

    assert settings.dialect == "oracle"
    assert settings.fields == ["bio", "phone", "address"]
    assert settings.signals == ["Entropy"]
    assert settings.seed == 11
    config = settings.encryption_config()
    assert config.type is EncryptionType.AES
    assert config.aes_mode is AESMode.GCM
    assert config.key_size == 24
    assert config.percentage == 40


def test_settings_with_bad_key_size_fail_encryption_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGSIGNAL_ENCRYPTION_TYPE", "AES")
    monkeypatch.setenv("LOGSIGNAL_AES_KEY_SIZE", "20")
    settings = Settings(_env_file=None)
    with pytest.raises(InvalidEncryptionConfig):
        settings.encryption_config()
