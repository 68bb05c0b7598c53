import io
import sys

import pytest


def _pnm(magic: bytes, width: int, height: int, data, maxval: int = 255) -> bytes:
    header = magic + b"\n%d %d\n%d\n" % (width, height, maxval)
    if isinstance(data, str):
        return header + data.encode("ascii")
    return header + bytes(data)


@pytest.fixture
def pnm():
    """Build a PNM file: binary rasters take an iterable of ints, plain ones a str."""
    return _pnm


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: bytes):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def fake_stdin(monkeypatch):
    def _feed(content: bytes):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(content)))
    return _feed


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("PNM_DEFAULT_KIND", raising=False)
    monkeypatch.delenv("PNM_LOG_LEVEL", raising=False)
