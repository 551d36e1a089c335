# ============================================================================
# PROJECT: Sessionless Signer
# MODULE: bootstrap_keys.py
# PURPOSE: One-time setup to create and safely store a Sessionless identity.
# ============================================================================

import argparse
import sys

from sessionless import config
from sessionless.keystore import KeyringKeyStore, bases_with_keys, migrate_to_base
from sessionless.signer import Sessionless


def _store(args):
    service = config.keyring_service()
    if args.base:
        return KeyringKeyStore.for_base(args.base, service)
    return KeyringKeyStore(service=service)


def bootstrap(args) -> int:
    """
    Generate a keypair and store it in the system keyring (encrypted,
    per-user). An existing identity is kept unless --force is given.
    """
    signer = Sessionless(store=_store(args), audit=config.audit_log())

    existing = signer.load_keys()
    if existing is not None and not args.force:
        print(f"[OK] Identity already exists: {existing.public_key}")
        print("  Use --force to replace it.")
        return 0

    keys = signer.generate_keys()
    print(f"[OK] Keys stored to system keyring")
    print(f"  Public key: {keys.public_key}")
    print(f"  Address:    {keys.address}")
    return 0


def show(args) -> int:
    keys = _store(args).load()
    if keys is None:
        print("[WARN] No keys stored. Run sessionless-bootstrap first.")
        return 1
    print(f"[OK] Public key: {keys.public_key}")
    print(f"  Address:    {keys.address}")
    return 0


def clear(args) -> int:
    _store(args).clear()
    print("[OK] Keys cleared from system keyring")
    return 0


def list_bases(args) -> int:
    bases = bases_with_keys(config.keyring_service())
    print(f"[OK] {len(bases)} base(s) with keys")
    for base in bases:
        print(f"  {base}")
    return 0


def migrate(args) -> int:
    service = config.keyring_service()
    if migrate_to_base(KeyringKeyStore(service=service), args.migrate, service):
        print(f"[OK] Default keys copied to base: {args.migrate}")
        return 0
    print("[WARN] No default keys to migrate")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sessionless-bootstrap",
        description="Create and manage Sessionless keys in the system keyring.",
    )
    parser.add_argument("--base", help="base server URL the identity belongs to")
    parser.add_argument("--force", action="store_true", help="replace an existing identity")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--show", action="store_true", help="print the stored public key")
    action.add_argument("--clear", action="store_true", help="delete the stored keys")
    action.add_argument("--list-bases", action="store_true", help="list bases that have keys")
    action.add_argument("--migrate", metavar="BASE", help="copy the default keys to BASE")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.show:
        handler = show
    elif args.clear:
        handler = clear
    elif args.list_bases:
        handler = list_bases
    elif args.migrate:
        handler = migrate
    else:
        handler = bootstrap

    try:
        return handler(args)
    except Exception as e:
        print(f"[FATAL] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
