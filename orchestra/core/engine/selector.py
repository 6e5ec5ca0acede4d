"""
Algorithm selector — resolve user-supplied hash/crypto names.

Empty values fall back to the defaults (sha3hash, secp256k1). Anything
else must name a known member; a typo is a configuration error, never
a silent default.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TypeVar

from orchestra.core.errors import ConfigError
from orchestra.core.models.algorithm import (
    DEFAULT_CRYPTO,
    DEFAULT_HASH,
    AlgorithmSelection,
    CryptoAlgorithm,
    HashAlgorithm,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _lookup(enum_cls: type[E], raw: str, aliases: dict[str, E], label: str) -> E:
    value = raw.strip().lower()
    for member in enum_cls:
        if member.value == value:
            return member
    if value in aliases:
        return aliases[value]
    choices = ", ".join(m.value for m in enum_cls)
    raise ConfigError(f"Unknown {label} algorithm '{raw}' (expected one of: {choices})")


def parse_hash(name: str | None) -> HashAlgorithm:
    """Resolve a hash algorithm name. ``sha3`` and ``sha3hash`` are equivalent."""
    if not name or not name.strip():
        return DEFAULT_HASH
    aliases = {m.short_name: m for m in HashAlgorithm}
    return _lookup(HashAlgorithm, name, aliases, "hash")


def parse_crypto(name: str | None) -> CryptoAlgorithm:
    """Resolve a crypto algorithm name."""
    if not name or not name.strip():
        return DEFAULT_CRYPTO
    return _lookup(CryptoAlgorithm, name, {}, "crypto")


def resolve_selection(
    hash_name: str | None = None,
    crypto_name: str | None = None,
) -> AlgorithmSelection:
    """Build the algorithm selection for a run.

    Raises:
        ConfigError: if either name is non-empty and unknown.
    """
    selection = AlgorithmSelection(
        hash=parse_hash(hash_name),
        crypto=parse_crypto(crypto_name),
    )
    logger.info("Algorithms: hash=%s crypto=%s", selection.hash.value, selection.crypto.value)
    return selection
