"""
Sessionless authentication primitive: secp256k1 keypairs and canonical
low-S ECDSA signatures over caller-built message strings.
"""
from sessionless.errors import (
    SessionlessError,
    KeyGenerationFailed,
    KeyNotFound,
    SigningFailed,
    InvalidEncoding,
    ReadOnlyStore,
)
from sessionless.keys import KeyPair, generate_keys
from sessionless.keystore import (
    KeyStore,
    MemoryKeyStore,
    KeyringKeyStore,
    EnvKeyStore,
    sanitize_base_url,
    bases_with_keys,
    migrate_to_base,
)
from sessionless.sign_core import KECCAK256, SHA256
from sessionless.signer import Sessionless, timestamp_ms, new_uuid

__all__ = [
    "SessionlessError",
    "KeyGenerationFailed",
    "KeyNotFound",
    "SigningFailed",
    "InvalidEncoding",
    "ReadOnlyStore",
    "KeyPair",
    "generate_keys",
    "KeyStore",
    "MemoryKeyStore",
    "KeyringKeyStore",
    "EnvKeyStore",
    "sanitize_base_url",
    "bases_with_keys",
    "migrate_to_base",
    "KECCAK256",
    "SHA256",
    "Sessionless",
    "timestamp_ms",
    "new_uuid",
]
