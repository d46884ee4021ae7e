"""Probabilistic encryption of simulated column values."""
from __future__ import annotations

import logging
import os
import random
from typing import Optional

from .config import EncryptionConfig, EncryptionType
from .crypto import CipherStrategy, EntropyExhausted, SecureSource, cipher_for

logger = logging.getLogger(__name__)


class EncryptionSimulator:
    """Decides per value whether to replace it with tagged ciphertext.

    ``rng`` drives only the percentage decision and may be seeded for
    reproducible fixtures. Key, IV and nonce material always comes from the
    separate ``entropy`` source, which defaults to the operating system CSPRNG.
    """

    def __init__(
        self,
        config: Optional[EncryptionConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        entropy: SecureSource = os.urandom,
        logger: logging.Logger = logger,
    ) -> None:
        self.config = config or EncryptionConfig()
        self._rng = rng or random.Random()
        self._entropy = entropy
        self._logger = logger
        self.transformed = 0
        self.abandoned = 0

    def maybe_transform(self, value: str, config: Optional[EncryptionConfig] = None) -> str:
        config = config or self.config
        if config.type is EncryptionType.NONE or config.percentage <= 0:
            return value

        if config.percentage < 100 and self._rng.randrange(100) >= config.percentage:
            return value

        try:
            cipher = self._cipher(config)
            encrypted = cipher.encrypt(value)
        except EntropyExhausted as exc:
            self.abandoned += 1
            self._logger.warning("Abandoning simulated encryption, keeping original value: %s", exc)
            return value

        self.transformed += 1
        self._logger.debug("Encrypted simulated value with %s", cipher.algorithm_tag)
        return encrypted

    def _cipher(self, config: EncryptionConfig) -> CipherStrategy:
        return cipher_for(config, entropy=self._entropy)


__all__ = ["EncryptionSimulator"]
