# ============================================================================
# PROJECT: Sessionless Signer
# MODULE: sign_core.py
# PURPOSE: secp256k1 primitives, message hashing and the R||S wire format.
# ============================================================================

import hashlib

from eth_hash.auto import keccak
from eth_utils import decode_hex, encode_hex
from coincurve import PrivateKey, PublicKey

from sessionless.errors import InvalidEncoding, SigningFailed

# secp256k1 group order
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HALF_N = N // 2

KECCAK256 = "keccak256"
SHA256 = "sha256"
HASH_NAMES = (KECCAK256, SHA256)

SIGNATURE_HEX_LEN = 128
PUBLIC_KEY_HEX_LEN = 66

# ---------- hashing ----------

def hash_message(message: str, hash_name: str = KECCAK256) -> bytes:
    """
    UTF-8 encode the message and hash it with the named convention.
    Keccak-256 and SHA-256 digests are not interchangeable.
    """
    data = message.encode("utf-8")
    if hash_name == KECCAK256:
        return keccak(data)
    if hash_name == SHA256:
        return hashlib.sha256(data).digest()
    raise ValueError(f"unknown hash convention: {hash_name!r}")

# ---------- fixed-width helpers ----------

def u256(x: int) -> bytes:
    return x.to_bytes(32, "big")

def _decode_fixed(text, hex_len: int, what: str) -> bytes:
    if not isinstance(text, str) or len(text) != hex_len:
        raise InvalidEncoding(f"{what} must be {hex_len} hex characters")
    try:
        raw = decode_hex(text)
    except (TypeError, ValueError) as e:
        raise InvalidEncoding(f"{what} is not valid hex: {e}") from e
    # decode_hex tolerates a 0x prefix, which would shorten the payload
    if len(raw) != hex_len // 2:
        raise InvalidEncoding(f"{what} must decode to {hex_len // 2} bytes")
    return raw

# ---------- low-S canonical form ----------

def is_low_s(s: int) -> bool:
    return 0 < s <= HALF_N

def normalize_s(s: int) -> int:
    # BIP-62: S above N/2 is replaced by N - S
    if s > HALF_N:
        return N - s
    return s

# ---------- wire encoding ----------

def encode_signature(r: int, s: int) -> str:
    return (u256(r) + u256(s)).hex()

def decode_signature(signature_hex: str):
    raw = _decode_fixed(signature_hex, SIGNATURE_HEX_LEN, "signature")
    return int.from_bytes(raw[:32], "big"), int.from_bytes(raw[32:], "big")

def encode_public_key(public_key: bytes) -> str:
    if len(public_key) != 33 or public_key[0] not in (2, 3):
        raise InvalidEncoding("public key must be 33 bytes of compressed SEC1")
    return public_key.hex()

def decode_public_key(public_key_hex: str) -> bytes:
    raw = _decode_fixed(public_key_hex, PUBLIC_KEY_HEX_LEN, "public key")
    if raw[0] not in (2, 3):
        raise InvalidEncoding("public key prefix must be 02 or 03")
    try:
        PublicKey(raw)
    except ValueError as e:
        raise InvalidEncoding(f"public key is not a point on secp256k1: {e}") from e
    return raw

# ---------- keys ----------

def derive_public_key(private_key: bytes) -> bytes:
    """Compressed SEC1 encoding of d*G."""
    return PrivateKey(private_key).public_key.format(compressed=True)

def public_key_to_address(public_key: bytes) -> str:
    """
    Ethereum-style address: last 20 bytes of keccak over the uncompressed
    point without its 0x04 prefix.
    """
    uncompressed = PublicKey(public_key).format(compressed=False)
    return encode_hex(keccak(uncompressed[1:])[-20:])

# ---------- deterministic secp256k1 ----------

def sign_digest(private_key: bytes, digest: bytes):
    """
    Sign a 32-byte digest. Returns (r, s) with s in low-S form.
    coincurve uses libsecp256k1 RFC6979 deterministic nonce generation.
    """
    if len(digest) != 32:
        raise SigningFailed(f"digest must be 32 bytes, got {len(digest)}")
    try:
        sig65 = PrivateKey(private_key).sign_recoverable(digest, hasher=None)
    except ValueError as e:
        raise SigningFailed(str(e)) from e

    r = int.from_bytes(sig65[:32], "big")
    s = int.from_bytes(sig65[32:64], "big")
    return r, normalize_s(s)

def verify_digest(public_key: bytes, digest: bytes, r: int, s: int, strict: bool = True) -> bool:
    """
    Check the ECDSA equation for (r, s) by recovering the signer's point and
    comparing it with public_key. Either recovery id may be the right one, so
    both are tried. Strict mode rejects high-S signatures.
    """
    if len(digest) != 32:
        return False
    if not (0 < r < N and 0 < s < N):
        return False
    if strict and not is_low_s(s):
        return False

    try:
        expected = PublicKey(public_key).format(compressed=True)
    except ValueError:
        return False

    rs = u256(r) + u256(s)
    for recid in (0, 1):
        try:
            recovered = PublicKey.from_signature_and_message(rs + bytes([recid]), digest, hasher=None)
        except ValueError:
            continue
        if recovered.format(compressed=True) == expected:
            return True
    return False
