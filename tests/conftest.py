from __future__ import annotations

import pytest

from krill import config, keys, logger
from krill.__main__ import EditorContext


class FakeTerminal:
    """Stands in for krill.terminal.Terminal: scripted keys in, captured bytes out."""

    def __init__(self, rows: int = 12, cols: int = 40, keys_in=()):
        self.rows = rows
        self.cols = cols
        self.keys = list(keys_in)
        self.writes: list[bytes] = []
        self.resized = False
        self.cleared = False

    def get_window_size(self):
        return self.rows, self.cols

    def read_key(self):
        if not self.keys:
            raise AssertionError("FakeTerminal ran out of scripted keys")
        return self.keys.pop(0)

    def write(self, data: bytes):
        self.writes.append(bytes(data))

    def clear_screen(self):
        self.cleared = True
        self.write(b"\x1b[2J\x1b[H")


def type_text(text: str):
    return [keys.Character(ch) for ch in text]


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "LOG_FILE_PATH", str(tmp_path / "krill.log"))
    return tmp_path / "krill.log"


def make_context(lines=(), rows: int = 12, cols: int = 40, **settings):
    ctx = EditorContext(FakeTerminal(rows, cols), config.Settings(**settings))
    ctx.buffer.load(lines)
    return ctx
