"""
Algorithm selection — the hash/crypto pair that parameterizes a run.

Enum values are the Cargo feature names used by the workspace, so a
resolved selection can be appended to ``--features`` as-is.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class HashAlgorithm(str, Enum):
    SHA3 = "sha3hash"
    BLAKE2B = "blake2bhash"
    SM3 = "sm3hash"

    @property
    def short_name(self) -> str:
        return self.value.removesuffix("hash")


class CryptoAlgorithm(str, Enum):
    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"
    SM2 = "sm2"


DEFAULT_HASH = HashAlgorithm.SHA3
DEFAULT_CRYPTO = CryptoAlgorithm.SECP256K1


class AlgorithmSelection(BaseModel):
    """Resolved algorithm pair. Frozen once built."""

    model_config = ConfigDict(frozen=True)

    hash: HashAlgorithm = DEFAULT_HASH
    crypto: CryptoAlgorithm = DEFAULT_CRYPTO

    @property
    def features(self) -> tuple[str, str]:
        return (self.hash.value, self.crypto.value)

    def __str__(self) -> str:
        return f"{self.hash.value}+{self.crypto.value}"
