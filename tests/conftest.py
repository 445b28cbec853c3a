from __future__ import annotations

import io
import struct
import threading
import time
from pathlib import Path
from typing import List, Tuple

import pytest
from PIL import Image

from svg2icon.rasterizer import Rasterizer

MINIMAL_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
    '<rect width="10" height="10" fill="#336699"/></svg>'
)


def make_png(size: int) -> bytes:
    image = Image.new("RGBA", (size, size), (size % 256, 64, 128, 255))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class FakeEngine:
    """Deterministic stand-in for the SVG renderer."""

    def __init__(self, fail_sizes=(), delay: float = 0.0) -> None:
        self.fail_sizes = set(fail_sizes)
        self.delay = delay
        self.calls: List[Tuple[Path, int]] = []
        self._active = 0
        self._guard = threading.Lock()
        self.max_active = 0

    def __call__(self, source: Path, pixel_size: int) -> bytes:
        with self._guard:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            self.calls.append((source, pixel_size))
            if self.delay:
                time.sleep(self.delay)
            if pixel_size in self.fail_sizes:
                raise RuntimeError(f"cannot render {pixel_size}")
            return make_png(pixel_size)
        finally:
            with self._guard:
                self._active -= 1


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def rasterizer(fake_engine: FakeEngine) -> Rasterizer:
    return Rasterizer(lambda: fake_engine)


@pytest.fixture
def svg_source(tmp_path: Path) -> Path:
    path = tmp_path / "logo.svg"
    path.write_text(MINIMAL_SVG, encoding="utf-8")
    return path


def read_ico_directory(data: bytes) -> Tuple[Tuple[int, int, int], list]:
    header = struct.unpack_from("<HHH", data, 0)
    entries = [
        struct.unpack_from("<BBBBHHII", data, 6 + 16 * index) for index in range(header[2])
    ]
    return header, entries


def read_icns_entries(data: bytes) -> list:
    entries = []
    offset = 8
    while offset < len(data):
        tag = data[offset : offset + 4].decode("ascii")
        (length,) = struct.unpack_from(">I", data, offset + 4)
        entries.append((tag, length, data[offset + 8 : offset + length]))
        offset += length
    return entries


def png_size(payload: bytes) -> Tuple[int, int]:
    with Image.open(io.BytesIO(payload)) as image:
        return image.size
