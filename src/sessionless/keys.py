# ============================================================================
# PROJECT: Sessionless Signer
# MODULE: keys.py
# PURPOSE: secp256k1 keypair type and key generation.
# ============================================================================

import hashlib
import json
import secrets
from dataclasses import dataclass

from eth_utils import decode_hex

from sessionless.errors import InvalidEncoding, KeyGenerationFailed
from sessionless.sign_core import (
    N,
    decode_public_key,
    derive_public_key,
    encode_public_key,
    public_key_to_address,
)


@dataclass(frozen=True)
class KeyPair:
    """Hex-encoded secp256k1 keypair; public_key is compressed SEC1."""
    private_key: str
    public_key: str

    @classmethod
    def from_private_key(cls, private_key: str) -> "KeyPair":
        raw = private_key_from_hex(private_key)
        return cls(raw.hex(), encode_public_key(derive_public_key(raw)))

    @property
    def private_key_bytes(self) -> bytes:
        return private_key_from_hex(self.private_key)

    @property
    def public_key_bytes(self) -> bytes:
        return decode_public_key(self.public_key)

    @property
    def address(self) -> str:
        return public_key_to_address(self.public_key_bytes)

    def validate(self) -> "KeyPair":
        """Raise InvalidEncoding unless public_key is derived from private_key."""
        derived = encode_public_key(derive_public_key(self.private_key_bytes))
        if not isinstance(self.public_key, str) or derived != self.public_key.lower():
            raise InvalidEncoding("public key does not match private key")
        return self

    def to_json(self) -> str:
        return json.dumps(
            {"publicKey": self.public_key, "privateKey": self.private_key},
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, text: str) -> "KeyPair":
        try:
            obj = json.loads(text)
            pair = cls(obj["privateKey"], obj["publicKey"])
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidEncoding(f"stored keypair is malformed: {e}") from e
        return pair.validate()

    def __repr__(self):
        # never print the private scalar
        return f"KeyPair(public_key={self.public_key!r})"


def private_key_from_hex(text: str) -> bytes:
    """
    Parse a 32-byte private scalar from hex, with or without 0x prefix,
    and check 1 <= d < N.
    """
    if not isinstance(text, str):
        raise InvalidEncoding("private key must be a hex string")
    if text.startswith("0x"):
        text = text[2:]
    if len(text) != 64:
        raise InvalidEncoding("private key must be 64 hex characters")
    try:
        raw = decode_hex(text)
    except ValueError as e:
        raise InvalidEncoding(f"private key is not valid hex: {e}") from e
    if not 1 <= int.from_bytes(raw, "big") < N:
        raise InvalidEncoding("private key is outside [1, N-1]")
    return raw


def _scalar_from_seed(seed: str) -> int:
    return int.from_bytes(hashlib.sha256(seed.encode("utf-8")).digest(), "big") % N


def generate_keys(seed: str = None) -> KeyPair:
    """
    Generate a keypair from 32 CSPRNG bytes, resampling until the scalar is
    in [1, N-1]. A seed derives the scalar as sha256(seed) mod N instead;
    that path is for reproducible fixtures and must not back a real identity.
    """
    if seed is not None:
        print("[WARN] Deriving keys from a seed. Use for test fixtures only.")
        d = _scalar_from_seed(seed)
        if d == 0:
            raise KeyGenerationFailed("seed reduces to the zero scalar")
        return KeyPair.from_private_key(d.to_bytes(32, "big").hex())

    while True:
        try:
            raw = secrets.token_bytes(32)
        except (NotImplementedError, OSError) as e:
            raise KeyGenerationFailed(f"random source unavailable: {e}") from e
        if 1 <= int.from_bytes(raw, "big") < N:
            return KeyPair.from_private_key(raw.hex())
