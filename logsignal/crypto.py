"""Cipher strategies used to make simulated column values look tampered with.

Keys live only as long as the strategy instance and are never exposed, so the
produced ciphertext is a write-only artifact.
"""
from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from .config import AES_KEY_SIZES, AESMode, EncryptionConfig, EncryptionType, InvalidEncryptionConfig

SecureSource = Callable[[int], bytes]

AES_BLOCK_BYTES = algorithms.AES.block_size // 8
AEAD_NONCE_BYTES = 12
CHACHA20_KEY_BYTES = 32


class EntropyExhausted(RuntimeError):
    """Raised when the secure random source cannot provide key or nonce material."""


@dataclass(frozen=True)
class CiphertextEnvelope:
    """Wire form ``{tag}:{base64(iv_or_nonce || ciphertext [|| tag])}``."""

    algorithm: str
    payload: bytes

    def to_wire(self) -> str:
        return f"{self.algorithm}:{base64.b64encode(self.payload).decode('ascii')}"

    @classmethod
    def from_wire(cls, value: str) -> Optional["CiphertextEnvelope"]:
        """Split a tagged value; returns ``None`` when it is not one."""

        algorithm, sep, encoded = value.partition(":")
        if not sep or not algorithm or not encoded:
            return None
        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            return None
        return cls(algorithm=algorithm, payload=payload)


class CipherStrategy(Protocol):
    """Mutates a plaintext value into a tagged, encoded string."""

    @property
    def algorithm_tag(self) -> str:
        ...

    def encrypt(self, plaintext: str) -> str:
        ...


def _random_bytes(entropy: SecureSource, size: int) -> bytes:
    try:
        material = entropy(size)
    except OSError as exc:
        raise EntropyExhausted(f"Secure random source failed while reading {size} bytes") from exc
    if len(material) != size:
        raise EntropyExhausted(f"Secure random source returned {len(material)} of {size} bytes")
    return material


class NoneCipher:
    """Identity strategy."""

    algorithm_tag = EncryptionType.NONE.value

    def encrypt(self, plaintext: str) -> str:
        return plaintext


class _AESCipher:
    mode: AESMode

    def __init__(self, key_size: int = 32, *, entropy: SecureSource = os.urandom) -> None:
        if key_size not in AES_KEY_SIZES:
            raise InvalidEncryptionConfig("AES key size must be 16, 24, or 32 bytes")
        self._entropy = entropy
        self._key = _random_bytes(entropy, key_size)

    @property
    def key_bits(self) -> int:
        return len(self._key) * 8

    @property
    def algorithm_tag(self) -> str:
        return f"AES-{self.key_bits}-{self.mode.value}"

    def _wrap(self, prefix: bytes, ciphertext: bytes) -> str:
        return CiphertextEnvelope(algorithm=self.algorithm_tag, payload=prefix + ciphertext).to_wire()


class AESCBCCipher(_AESCipher):
    """AES-CBC with PKCS#7 padding; the IV is prepended to the ciphertext."""

    mode = AESMode.CBC

    def encrypt(self, plaintext: str) -> str:
        iv = _random_bytes(self._entropy, AES_BLOCK_BYTES)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return self._wrap(iv, ciphertext)


class AESCTRCipher(_AESCipher):
    """AES-CTR stream encryption; no padding, IV prepended."""

    mode = AESMode.CTR

    def encrypt(self, plaintext: str) -> str:
        iv = _random_bytes(self._entropy, AES_BLOCK_BYTES)
        encryptor = Cipher(algorithms.AES(self._key), modes.CTR(iv)).encryptor()
        ciphertext = encryptor.update(plaintext.encode("utf-8")) + encryptor.finalize()
        return self._wrap(iv, ciphertext)


class AESGCMCipher(_AESCipher):
    """AES-GCM; the sealed output carries its authentication tag, nonce prepended."""

    mode = AESMode.GCM

    def encrypt(self, plaintext: str) -> str:
        nonce = _random_bytes(self._entropy, AEAD_NONCE_BYTES)
        sealed = AESGCM(self._key).encrypt(nonce, plaintext.encode("utf-8"), None)
        return self._wrap(nonce, sealed)


class ChaCha20Cipher:
    """ChaCha20-Poly1305 with a 32-byte key; nonce prepended."""

    algorithm_tag = EncryptionType.CHACHA20.value

    def __init__(self, *, entropy: SecureSource = os.urandom) -> None:
        self._entropy = entropy
        self._key = _random_bytes(entropy, CHACHA20_KEY_BYTES)

    def encrypt(self, plaintext: str) -> str:
        nonce = _random_bytes(self._entropy, AEAD_NONCE_BYTES)
        sealed = ChaCha20Poly1305(self._key).encrypt(nonce, plaintext.encode("utf-8"), None)
        return CiphertextEnvelope(algorithm=self.algorithm_tag, payload=nonce + sealed).to_wire()


_AES_MODES: Dict[AESMode, Callable[..., _AESCipher]] = {
    AESMode.CBC: AESCBCCipher,
    AESMode.CTR: AESCTRCipher,
    AESMode.GCM: AESGCMCipher,
}


def cipher_for(config: EncryptionConfig, *, entropy: SecureSource = os.urandom) -> CipherStrategy:
    """Instantiate the strategy selected by ``config`` with fresh key material."""

    if config.type is EncryptionType.NONE:
        return NoneCipher()
    if config.type is EncryptionType.AES:
        try:
            factory = _AES_MODES[config.aes_mode]
        except KeyError:
            raise InvalidEncryptionConfig(f"Unsupported AES mode: {config.aes_mode}") from None
        return factory(config.key_size, entropy=entropy)
    if config.type is EncryptionType.CHACHA20:
        return ChaCha20Cipher(entropy=entropy)
    raise InvalidEncryptionConfig(f"Unsupported encryption type: {config.type}")


__all__ = [
    "AESCBCCipher",
    "AESCTRCipher",
    "AESGCMCipher",
    "AEAD_NONCE_BYTES",
    "AES_BLOCK_BYTES",
    "ChaCha20Cipher",
    "CipherStrategy",
    "CiphertextEnvelope",
    "EntropyExhausted",
    "NoneCipher",
    "SecureSource",
    "cipher_for",
]
