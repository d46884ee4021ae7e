from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from logsignal.config import EncryptionConfig, InvalidEncryptionConfig  # noqa: E402
from logsignal.crypto import (  # noqa: E402
    AEAD_NONCE_BYTES,
    AESCBCCipher,
    AESCTRCipher,
    AESGCMCipher,
    ChaCha20Cipher,
    CiphertextEnvelope,
    EntropyExhausted,
    NoneCipher,
    cipher_for,
)


class RecordingSource:
    """Secure source stand-in that records every request."""

    def __init__(self) -> None:
        self.requests: list[int] = []

    def __call__(self, size: int) -> bytes:
        self.requests.append(size)
        return os.urandom(size)


class FailingSource:
    """Secure source that behaves like an exhausted entropy pool."""

    def __init__(self, fail_after: int = 0) -> None:
        self.remaining = fail_after

    def __call__(self, size: int) -> bytes:
        if self.remaining <= 0:
            raise OSError("getrandom failed")
        self.remaining -= 1
        return os.urandom(size)


def decode(value: str, expected_tag: str) -> bytes:
    envelope = CiphertextEnvelope.from_wire(value)
    assert envelope is not None
    assert envelope.algorithm == expected_tag
    return envelope.payload


def test_none_cipher_is_identity() -> None:
    cipher = NoneCipher()
    assert cipher.encrypt("alice@example.com") == "alice@example.com"
    assert cipher.algorithm_tag == "None"


@pytest.mark.parametrize("key_size,bits", [(16, 128), (24, 192), (32, 256)])
def test_cbc_output_shape(key_size: int, bits: int) -> None:
    cipher = AESCBCCipher(key_size)
    for plaintext in ["", "a", "exactly16bytes!!", "a much longer biography sentence"]:
        value = cipher.encrypt(plaintext)
        assert value.startswith(f"AES-{bits}-CBC:")
        payload = decode(value, f"AES-{bits}-CBC")
        body = len(payload) - 16
        assert body > 0
        assert body % 16 == 0
        assert body == (len(plaintext.encode()) // 16 + 1) * 16


def test_ctr_output_has_no_padding() -> None:
    cipher = AESCTRCipher(24)
    value = cipher.encrypt("555-0100")
    payload = decode(value, "AES-192-CTR")
    assert len(payload) == 16 + len("555-0100")


def test_gcm_and_chacha_embed_nonce_and_tag() -> None:
    gcm = decode(AESGCMCipher(16).encrypt("secret"), "AES-128-GCM")
    chacha = decode(ChaCha20Cipher().encrypt("secret"), "ChaCha20")
    for payload in (gcm, chacha):
        assert len(payload) > AEAD_NONCE_BYTES
        assert len(payload) == AEAD_NONCE_BYTES + len("secret") + 16


def test_fresh_iv_per_call() -> None:
    cipher = AESCBCCipher()
    first = decode(cipher.encrypt("same value"), "AES-256-CBC")
    second = decode(cipher.encrypt("same value"), "AES-256-CBC")
    assert first[:16] != second[:16]
    assert first != second


def test_key_and_nonce_material_come_from_secure_source() -> None:
    source = RecordingSource()
    cipher = AESGCMCipher(24, entropy=source)
    cipher.encrypt("value")
    assert source.requests == [24, AEAD_NONCE_BYTES]

    source = RecordingSource()
    ChaCha20Cipher(entropy=source).encrypt("value")
    assert source.requests == [32, AEAD_NONCE_BYTES]


def test_exhausted_source_raises() -> None:
    with pytest.raises(EntropyExhausted):
        AESCBCCipher(entropy=FailingSource())

    cipher = AESCTRCipher(entropy=FailingSource(fail_after=1))
    with pytest.raises(EntropyExhausted):
        cipher.encrypt("value")

    with pytest.raises(EntropyExhausted):
        ChaCha20Cipher(entropy=lambda size: b"\x00" * (size - 1))


def test_invalid_key_size_rejected_by_cipher() -> None:
    with pytest.raises(InvalidEncryptionConfig):
        AESGCMCipher(20)


@pytest.mark.parametrize(
    "config,expected",
    [
        (EncryptionConfig(Type="None"), NoneCipher),
        (EncryptionConfig(Type="AES"), AESCBCCipher),
        (EncryptionConfig(Type="AES", AESMode="CTR"), AESCTRCipher),
        (EncryptionConfig(Type="AES", AESMode="GCM", KeySize=16), AESGCMCipher),
        (EncryptionConfig(Type="ChaCha20"), ChaCha20Cipher),
    ],
)
def test_cipher_for_dispatch(config: EncryptionConfig, expected: type) -> None:
    assert isinstance(cipher_for(config), expected)


def test_envelope_parsing_rejects_plain_values() -> None:
    assert CiphertextEnvelope.from_wire("alice@example.com") is None
    assert CiphertextEnvelope.from_wire("AES-256-CBC:not base64!") is None
    envelope = CiphertextEnvelope(algorithm="ChaCha20", payload=b"\x01\x02")
    assert CiphertextEnvelope.from_wire(envelope.to_wire()) == envelope
