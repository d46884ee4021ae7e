"""Configuration for the signal pipeline and the encryption simulator."""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AES_KEY_SIZES = (16, 24, 32)
DEFAULT_AES_KEY_SIZE = 32


class InvalidEncryptionConfig(ValueError):
    """Raised when an encryption configuration cannot be used."""


class EncryptionType(str, Enum):
    NONE = "None"
    AES = "AES"
    CHACHA20 = "ChaCha20"


class AESMode(str, Enum):
    CBC = "CBC"
    CTR = "CTR"
    GCM = "GCM"


class EncryptionConfig(BaseModel):
    """Validated encryption simulation settings.

    Accepts the external surface keys (``Type``, ``Percentage``, ``AESMode``,
    ``KeySize``) as well as the snake_case field names. Every validation
    failure surfaces as :class:`InvalidEncryptionConfig`.
    """

    type: EncryptionType = Field(default=EncryptionType.NONE, alias="Type")
    percentage: int = Field(default=0, ge=0, le=100, alias="Percentage")
    aes_mode: AESMode = Field(default=AESMode.CBC, alias="AESMode")
    key_size: int = Field(default=DEFAULT_AES_KEY_SIZE, alias="KeySize")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidEncryptionConfig(_describe(exc)) from exc

    @field_validator("type", mode="before")
    @classmethod
    def _match_type(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            for member in EncryptionType:
                if member.value.lower() == value.strip().lower():
                    return member
        return value

    @field_validator("aes_mode", mode="before")
    @classmethod
    def _default_mode(cls, value):  # type: ignore[override]
        if value in (None, ""):
            return AESMode.CBC
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("key_size", mode="before")
    @classmethod
    def _default_key_size(cls, value):  # type: ignore[override]
        if value in (None, 0, ""):
            return DEFAULT_AES_KEY_SIZE
        return value

    @field_validator("key_size")
    @classmethod
    def _check_key_size(cls, value: int) -> int:
        if value not in AES_KEY_SIZES:
            raise ValueError("AES key size must be 16, 24, or 32 bytes")
        return value

    @property
    def enabled(self) -> bool:
        return self.type is not EncryptionType.NONE and self.percentage > 0

    def describe(self) -> str:
        if self.type is EncryptionType.NONE:
            return "None"
        if self.type is EncryptionType.AES:
            return f"AES-{self.key_size * 8}-{self.aes_mode.value} ({self.percentage}%)"
        return f"{self.type.value} ({self.percentage}%)"


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}")
    return "Invalid encryption configuration: " + "; ".join(parts)


load_dotenv()


class Settings(BaseSettings):
    """Environment-backed settings, prefixed with ``LOGSIGNAL_``."""

    dialect: str = "postgres"
    table: str = "users"
    fields: Union[List[str], str] = Field(default_factory=lambda: ["bio", "email"])
    signals: Union[List[str], str] = Field(default_factory=lambda: ["All"])
    encryption_type: str = "None"
    encryption_percentage: int = 0
    aes_mode: str = "CBC"
    aes_key_size: int = DEFAULT_AES_KEY_SIZE
    row_count: int = 10
    seed: Optional[int] = None
    output_format: str = "text"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LOGSIGNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("fields", "signals", mode="before")
    @classmethod
    def _split_list(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            parts = [part.strip() for part in value.replace(",", " ").split()]
            return [part for part in parts if part]
        return value

    @field_validator("dialect", "output_format", mode="before")
    @classmethod
    def _lower(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("seed", mode="before")
    @classmethod
    def _optional_seed(cls, value):  # type: ignore[override]
        if value in (None, ""):
            return None
        return value

    def encryption_config(self) -> EncryptionConfig:
        return EncryptionConfig(
            type=self.encryption_type,
            percentage=self.encryption_percentage,
            aes_mode=self.aes_mode,
            key_size=self.aes_key_size,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = [
    "AESMode",
    "AES_KEY_SIZES",
    "EncryptionConfig",
    "EncryptionType",
    "InvalidEncryptionConfig",
    "Settings",
    "get_settings",
]
