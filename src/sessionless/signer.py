# ============================================================================
# PROJECT: Sessionless Signer
# MODULE: signer.py
# PURPOSE: Keypair lifecycle plus sign/verify over caller-built messages.
# ============================================================================

import threading
import time
import uuid

from sessionless.errors import InvalidEncoding, KeyNotFound, SigningFailed
from sessionless.keys import KeyPair, generate_keys
from sessionless.sign_core import (
    HASH_NAMES,
    KECCAK256,
    decode_public_key,
    decode_signature,
    encode_signature,
    hash_message,
    sign_digest,
    verify_digest,
)


def timestamp_ms() -> str:
    """Milliseconds since the epoch, as the services expect it in messages."""
    return str(time.time_ns() // 1_000_000)


def new_uuid() -> str:
    return str(uuid.uuid4())


class Sessionless:
    """
    Holds at most one secp256k1 keypair and signs caller-built message
    strings with it.

    The hash convention is fixed per instance (keccak256 by default) and is
    used by both sign() and verify(). strict=True rejects high-S signatures
    in verify(); strict=False accepts them for peers that don't normalize.
    """

    def __init__(self, store=None, hash_name: str = KECCAK256, strict: bool = True, audit=None):
        if hash_name not in HASH_NAMES:
            raise ValueError(f"unknown hash convention: {hash_name!r}")
        self.store = store
        self.hash_name = hash_name
        self.strict = strict
        self.audit = audit
        self._keys = None
        self._lock = threading.Lock()

    # ---------- state ----------

    @property
    def has_keys(self) -> bool:
        return self._keys is not None

    def _require_keys(self) -> KeyPair:
        keys = self._keys
        if keys is None:
            raise KeyNotFound("no keypair loaded; call generate_keys() or load_keys() first")
        return keys

    def _record(self, event: str, **fields):
        if self.audit is not None:
            self.audit.append({"event": event, **fields})

    # ---------- key lifecycle ----------

    def generate_keys(self, seed: str = None) -> KeyPair:
        with self._lock:
            return self._generate_locked(seed)

    def _generate_locked(self, seed) -> KeyPair:
        keys = generate_keys(seed)
        if self.store is not None:
            self.store.save(keys)
        self._keys = keys
        self._record("keys_generated", pubKey=keys.public_key, seeded=seed is not None)
        return keys

    def load_keys(self):
        """Load the keypair from the store. Returns None if it holds none."""
        with self._lock:
            return self._load_locked()

    def _load_locked(self):
        if self.store is None:
            return None
        keys = self.store.load()
        if keys is None:
            return None
        self._keys = keys.validate()
        self._record("keys_loaded", pubKey=keys.public_key)
        return keys

    def ensure_keys(self) -> KeyPair:
        """Load the identity's keypair, creating it on first use."""
        with self._lock:
            if self._keys is not None:
                return self._keys
            keys = self._load_locked()
            if keys is None:
                keys = self._generate_locked(None)
            return keys

    def use_keys(self, keys: KeyPair) -> KeyPair:
        """Adopt an existing keypair without touching the store."""
        with self._lock:
            self._keys = keys.validate()
            return self._keys

    def clear_keys(self) -> None:
        with self._lock:
            if self.store is not None:
                self.store.clear()
            old, self._keys = self._keys, None
        if old is not None:
            self._record("keys_cleared", pubKey=old.public_key)

    # ---------- accessors ----------

    def get_public_key(self) -> str:
        return self._require_keys().public_key

    def get_address(self) -> str:
        return self._require_keys().address

    # ---------- sign / verify ----------

    def sign(self, message: str) -> str:
        """Return the 128-char lowercase hex R||S signature over message."""
        if not isinstance(message, str):
            raise TypeError("message must be a str")
        keys = self._require_keys()
        try:
            digest = hash_message(message, self.hash_name)
        except UnicodeEncodeError as e:
            raise InvalidEncoding(f"message is not encodable as UTF-8: {e}") from e
        try:
            r, s = sign_digest(keys.private_key_bytes, digest)
        except InvalidEncoding as e:
            raise SigningFailed(f"loaded private key is unusable: {e}") from e
        signature = encode_signature(r, s)
        self._record("message_signed", pubKey=keys.public_key, hash=self.hash_name, digest=digest.hex())
        return signature

    def verify(self, signature: str, message: str, public_key: str) -> bool:
        """
        True iff signature is valid for message under public_key.
        Malformed inputs give False rather than an exception.
        """
        if not isinstance(message, str):
            return False
        try:
            r, s = decode_signature(signature)
            point = decode_public_key(public_key)
        except InvalidEncoding:
            return False
        try:
            digest = hash_message(message, self.hash_name)
        except UnicodeEncodeError:
            return False
        return verify_digest(point, digest, r, s, strict=self.strict)

    def auth_payload(self, *fields: str, timestamp: str = None) -> dict:
        """
        Sign timestamp + fields (concatenated in the order given) and return
        the fields a service needs to check the request.
        """
        if timestamp is None:
            timestamp = timestamp_ms()
        keys = self._require_keys()
        signature = self.sign(timestamp + "".join(fields))
        return {"timestamp": timestamp, "pubKey": keys.public_key, "signature": signature}
