import json
import os
import time

DEFAULT_LOG = "sessionless_audit.jsonl"


class AuditLog:
    """Append-only JSONL trail of key and signing events."""

    def __init__(self, path: str = DEFAULT_LOG):
        self.path = path

    def append(self, entry: dict) -> dict:
        entry = dict(entry)
        entry["ts_ns"] = time.time_ns()
        # Serialize with minimal separators to be byte-dense and JSONL format
        entry_line = json.dumps(entry, separators=(",", ":")) + "\n"

        with open(self.path, "a", buffering=1) as f:
            f.write(entry_line)
            f.flush()
            os.fsync(f.fileno())
        return entry

    def read(self) -> list:
        if not os.path.exists(self.path):
            return []
        with open(self.path) as f:
            return [json.loads(line) for line in f if line.strip()]
