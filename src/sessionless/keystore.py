# ============================================================================
# PROJECT: Sessionless Signer
# MODULE: keystore.py
# PURPOSE: Pluggable keypair persistence (memory, system keyring, env).
# ============================================================================

import json
import os
import threading

import keyring
from keyring.errors import PasswordDeleteError

from sessionless.errors import ReadOnlyStore
from sessionless.keys import KeyPair

DEFAULT_SERVICE = "sessionless"
DEFAULT_IDENTITY = "default"
BASE_PREFIX = "sessionless_keys_"
BASES_INDEX = "__bases__"

# guards read-modify-write of the bases index across stores
_index_lock = threading.Lock()


class KeyStore:
    """
    Synchronous persistence for at most one keypair per identity.
    Backend failures propagate unchanged; nothing here retries.
    """

    def save(self, keys: KeyPair) -> None:
        raise NotImplementedError

    def load(self):
        """Return the stored KeyPair, or None."""
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryKeyStore(KeyStore):
    def __init__(self, keys: KeyPair = None):
        self._keys = keys
        self._lock = threading.Lock()

    def save(self, keys: KeyPair) -> None:
        with self._lock:
            self._keys = keys

    def load(self):
        with self._lock:
            return self._keys

    def clear(self) -> None:
        with self._lock:
            self._keys = None


def sanitize_base_url(base_url: str) -> str:
    """
    "https://localhost:5116"       -> "localhost_5116"
    "http://example.com:8080/path" -> "example_com_8080_path"
    """
    return (
        base_url
        .replace("https://", "")
        .replace("http://", "")
        .replace(":", "_")
        .replace("/", "_")
        .replace(".", "_")
    )


class KeyringKeyStore(KeyStore):
    """
    Stores the keypair as one JSON entry in the system keyring
    (encrypted, per-user) under (service, identity).
    """

    def __init__(self, identity: str = DEFAULT_IDENTITY, service: str = DEFAULT_SERVICE):
        self.identity = identity
        self.service = service

    @classmethod
    def for_base(cls, base_url: str, service: str = DEFAULT_SERVICE) -> "KeyringKeyStore":
        return cls(BASE_PREFIX + sanitize_base_url(base_url), service)

    @property
    def base(self):
        if self.identity.startswith(BASE_PREFIX):
            return self.identity[len(BASE_PREFIX):]
        return None

    def save(self, keys: KeyPair) -> None:
        keyring.set_password(self.service, self.identity, keys.to_json())
        if self.base is not None:
            with _index_lock:
                bases = set(bases_with_keys(self.service))
                bases.add(self.base)
                _write_index(self.service, bases)

    def load(self):
        stored = keyring.get_password(self.service, self.identity)
        if stored is None:
            return None
        return KeyPair.from_json(stored)

    def clear(self) -> None:
        try:
            keyring.delete_password(self.service, self.identity)
        except PasswordDeleteError:
            pass  # already empty
        if self.base is not None:
            with _index_lock:
                bases = set(bases_with_keys(self.service))
                bases.discard(self.base)
                _write_index(self.service, bases)


def _write_index(service: str, bases) -> None:
    keyring.set_password(service, BASES_INDEX, json.dumps(sorted(bases)))


def bases_with_keys(service: str = DEFAULT_SERVICE) -> list:
    """Sanitized names of every base that has a keypair in the keyring."""
    stored = keyring.get_password(service, BASES_INDEX)
    if not stored:
        return []
    return sorted(json.loads(stored))


def migrate_to_base(source: KeyStore, base_url: str, service: str = DEFAULT_SERVICE) -> bool:
    """
    Copy the keypair held by source into the per-base keyring entry.
    The source entry is left in place. Returns False if source is empty.
    """
    keys = source.load()
    if keys is None:
        return False
    KeyringKeyStore.for_base(base_url, service).save(keys)
    return True


class EnvKeyStore(KeyStore):
    """Read-only store backed by a hex private key in the environment."""

    def __init__(self, var: str = "SESSIONLESS_PRIVATE_KEY"):
        self.var = var

    def save(self, keys: KeyPair) -> None:
        raise ReadOnlyStore(f"{self.var} is read-only; export the key instead")

    def load(self):
        private_key = os.getenv(self.var)
        if not private_key:
            return None
        return KeyPair.from_private_key(private_key)

    def clear(self) -> None:
        raise ReadOnlyStore(f"{self.var} is read-only; unset it instead")
