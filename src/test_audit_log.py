import json

from sessionless.audit_log import AuditLog


def test_append_writes_compact_lines(tmp_path):
    path = tmp_path / "audit.jsonl"
    log = AuditLog(str(path))

    entry = log.append({"event": "init", "message": "Audit log initialized"})
    log.append({"event": "second"})

    lines = path.read_text().splitlines()
    assert len(lines) == 2
    assert ", " not in lines[0]
    assert json.loads(lines[0]) == entry
    assert isinstance(entry["ts_ns"], int)


def test_append_does_not_mutate_caller_dict(tmp_path):
    entry = {"event": "x"}
    AuditLog(str(tmp_path / "a.jsonl")).append(entry)
    assert entry == {"event": "x"}


def test_read_missing_file(tmp_path):
    assert AuditLog(str(tmp_path / "missing.jsonl")).read() == []
