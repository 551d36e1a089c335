import os

from sessionless.audit_log import AuditLog
from sessionless.keystore import DEFAULT_SERVICE, EnvKeyStore, KeyringKeyStore
from sessionless.sign_core import KECCAK256
from sessionless.signer import Sessionless

ENV_PRIVATE_KEY = "SESSIONLESS_PRIVATE_KEY"
ENV_HASH = "SESSIONLESS_HASH"
ENV_STRICT = "SESSIONLESS_STRICT"
ENV_SERVICE = "SESSIONLESS_KEYRING_SERVICE"
ENV_AUDIT_LOG = "SESSIONLESS_AUDIT_LOG"


def hash_name() -> str:
    return os.getenv(ENV_HASH, KECCAK256).strip().lower()


def strict() -> bool:
    return os.getenv(ENV_STRICT, "1").strip().lower() not in ("0", "false", "no")


def keyring_service() -> str:
    return os.getenv(ENV_SERVICE) or DEFAULT_SERVICE


def audit_log():
    path = os.getenv(ENV_AUDIT_LOG)
    return AuditLog(path) if path else None


def signer_from_env(base_url: str = None) -> Sessionless:
    """
    Build a signer from SESSIONLESS_* variables. An exported private key
    wins over the keyring; otherwise keys live in the keyring, per base
    when base_url is given.
    """
    if os.getenv(ENV_PRIVATE_KEY):
        store = EnvKeyStore(ENV_PRIVATE_KEY)
    elif base_url:
        store = KeyringKeyStore.for_base(base_url, keyring_service())
    else:
        store = KeyringKeyStore(service=keyring_service())
    return Sessionless(store=store, hash_name=hash_name(), strict=strict(), audit=audit_log())
