"""Shared fixtures: image trees on disk and a stand-in for the avifenc subprocess."""

import os
import subprocess
from datetime import datetime
from pathlib import Path

import pytest

from avif_batch.domain.image import ImageFile
from avif_batch.services import encoder_service


@pytest.fixture
def make_file(tmp_path):
    """Creates a file of `size` bytes below tmp_path, optionally with a fixed mtime."""

    def _make(rel_path: str, size: int = 10, mtime: datetime | None = None) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * size)
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _make


@pytest.fixture
def image_file():
    def _image(path: Path, size: int = 10, ext: str = "png", mtime: datetime = datetime(2024, 3, 9, 12, 0)) -> ImageFile:
        return ImageFile(path=path, mtime=mtime, ext=ext, size=size)

    return _image


class FakeAvifenc:
    """
    Replaces `run_cmd` in the encoder service.

    On success it writes an output of `ratio` times the source size to the
    destination argument; on failure it exits 1 and writes nothing.
    """

    def __init__(self, ratio: float = 0.5, returncode: int = 0, output: str = ""):
        self.ratio = ratio
        self.returncode = returncode
        self.output = output
        self.calls = []

    def __call__(self, cmd_list, show_cmd=False):
        self.calls.append(list(cmd_list))
        src, dst = Path(cmd_list[-2]), Path(cmd_list[-1])
        if self.returncode == 0:
            dst.write_bytes(b"a" * int(src.stat().st_size * self.ratio))
        return subprocess.CompletedProcess(cmd_list, self.returncode, stdout=self.output)


@pytest.fixture
def fake_avifenc(monkeypatch):
    """Installs a succeeding fake encoder and returns it for further tuning."""
    fake = FakeAvifenc()
    monkeypatch.setattr(encoder_service, "run_cmd", fake)
    return fake


def temp_leftovers(directory: Path):
    return sorted(p.name for p in directory.glob("avif_tmp_*"))
