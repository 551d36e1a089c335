from sessionless.bootstrap_keys import main
from sessionless.keystore import KeyringKeyStore, bases_with_keys


def test_bootstrap_creates_identity(memory_keyring, capsys):
    assert main([]) == 0
    keys = KeyringKeyStore().load()
    assert keys is not None
    assert keys.public_key in capsys.readouterr().out


def test_bootstrap_keeps_existing(memory_keyring, capsys):
    main([])
    first = KeyringKeyStore().load()
    assert main([]) == 0
    assert KeyringKeyStore().load() == first
    assert "already exists" in capsys.readouterr().out

    assert main(["--force"]) == 0
    assert KeyringKeyStore().load() != first


def test_show_and_clear(memory_keyring, capsys):
    assert main(["--show"]) == 1
    main([])
    assert main(["--show"]) == 0
    assert main(["--clear"]) == 0
    assert KeyringKeyStore().load() is None
    assert "[WARN]" in capsys.readouterr().out


def test_bases(memory_keyring, capsys):
    assert main(["--base", "https://localhost:5116"]) == 0
    assert main(["--migrate", "https://dev.bdo.allyabase.com"]) == 1

    main([])
    assert main(["--migrate", "https://dev.bdo.allyabase.com"]) == 0
    assert bases_with_keys() == ["dev_bdo_allyabase_com", "localhost_5116"]

    capsys.readouterr()
    assert main(["--list-bases"]) == 0
    out = capsys.readouterr().out
    assert "2 base(s)" in out
    assert "localhost_5116" in out


def test_fatal_on_backend_error(memory_keyring, capsys, monkeypatch):
    def broken(*args):
        raise RuntimeError("keyring locked")

    monkeypatch.setattr(memory_keyring, "get_password", broken)
    assert main(["--show"]) == 1
    assert "[FATAL] keyring locked" in capsys.readouterr().out
