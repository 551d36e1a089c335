"""Exceptions raised by the Sessionless signer."""


class SessionlessError(Exception):
    """Base class for every signer failure."""


class KeyGenerationFailed(SessionlessError):
    """The random source was unavailable or produced no usable scalar."""


class KeyNotFound(SessionlessError):
    """An operation needed a keypair but none is loaded."""


class SigningFailed(SessionlessError):
    """The underlying secp256k1 library refused to sign."""


class InvalidEncoding(SessionlessError):
    """A hex field was malformed, had the wrong length, or was off the curve."""


class ReadOnlyStore(SessionlessError):
    """The key store can be loaded from but not written or cleared."""
