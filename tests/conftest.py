import logging
from pathlib import Path

import pytest


class StubSource:
    """Random source that replays scripted draws and records each request"""

    def __init__(self, raws=(), uniforms=(), indexes=()):
        self.raws = list(raws)
        self.uniforms = list(uniforms)
        self.indexes = list(indexes)
        self.calls = []

    def raw_integer(self, bits):
        self.calls.append(("raw_integer", bits))
        return self.raws.pop(0)

    def uniform(self):
        self.calls.append(("uniform",))
        return self.uniforms.pop(0)

    def index(self, upper):
        self.calls.append(("index", upper))
        return self.indexes.pop(0)


@pytest.fixture
def stub_source():
    return StubSource


@pytest.fixture
def make_file(tmp_path: Path):
    """Write bytes to a fresh file under tmp_path and return its path as str"""
    counter = {"n": 0}

    def _make(content: bytes, name: str = "") -> str:
        counter["n"] += 1
        path = tmp_path / (name or f"input_{counter['n']}.txt")
        path.write_bytes(content)
        return str(path)

    return _make


@pytest.fixture
def five_lines(make_file) -> str:
    return make_file(b"a\nb\nc\nd\ne\n", "five.txt")


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the CLI's logging setup so handlers never outlive a test"""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)
    logging.captureWarnings(False)
