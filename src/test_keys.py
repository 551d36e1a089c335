import pytest

from sessionless import keys as keys_mod
from sessionless.errors import InvalidEncoding, KeyGenerationFailed
from sessionless.keys import KeyPair, generate_keys, private_key_from_hex
from sessionless.sign_core import N, derive_public_key


def test_generated_public_key_matches_private():
    pair = generate_keys()
    assert len(pair.private_key) == 64
    assert len(pair.public_key) == 66
    assert pair.public_key[:2] in ("02", "03")
    assert pair.public_key == derive_public_key(bytes.fromhex(pair.private_key)).hex()


def test_seeded_keys_are_reproducible(capsys):
    a = generate_keys("test-seed-1")
    b = generate_keys("test-seed-1")
    c = generate_keys("test-seed-2")
    assert a == b
    assert a != c
    assert "[WARN]" in capsys.readouterr().out


def test_resamples_out_of_range_scalars(monkeypatch):
    good = (12345).to_bytes(32, "big")
    draws = iter([b"\x00" * 32, b"\xff" * 32, good])
    monkeypatch.setattr(keys_mod.secrets, "token_bytes", lambda n: next(draws))

    assert generate_keys().private_key == good.hex()


def test_random_source_unavailable(monkeypatch):
    def broken(n):
        raise NotImplementedError("no entropy")

    monkeypatch.setattr(keys_mod.secrets, "token_bytes", broken)
    with pytest.raises(KeyGenerationFailed):
        generate_keys()


def test_private_key_from_hex_accepts_prefix():
    assert private_key_from_hex("0x" + "1" * 64) == bytes.fromhex("1" * 64)


@pytest.mark.parametrize("bad", [
    "00" * 32,
    N.to_bytes(32, "big").hex(),
    "1" * 63,
    "xy" * 32,
    42,
])
def test_private_key_from_hex_rejects(bad):
    with pytest.raises(InvalidEncoding):
        private_key_from_hex(bad)


def test_json_round_trip():
    pair = KeyPair.from_private_key("1" * 64)
    assert KeyPair.from_json(pair.to_json()) == pair


def test_mismatched_pair_rejected():
    a = KeyPair.from_private_key("1" * 64)
    b = KeyPair.from_private_key("2" * 64)
    with pytest.raises(InvalidEncoding):
        KeyPair(a.private_key, b.public_key).validate()
    with pytest.raises(InvalidEncoding):
        KeyPair.from_json('{"publicKey":"%s","privateKey":"%s"}' % (b.public_key, a.private_key))


def test_malformed_json_rejected():
    with pytest.raises(InvalidEncoding):
        KeyPair.from_json("not json")
    with pytest.raises(InvalidEncoding):
        KeyPair.from_json('{"publicKey":"02"}')


def test_repr_hides_private_key():
    pair = KeyPair.from_private_key("1" * 64)
    assert "1" * 64 not in repr(pair)
