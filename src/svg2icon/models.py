from __future__ import annotations

from dataclasses import dataclass
from typing import List

VALID_SCALES = (1, 2)


@dataclass(frozen=True)
class SizeSpec:
    pixel_size: int
    scale: int = 1

    @property
    def render_size(self) -> int:
        return self.pixel_size * self.scale


@dataclass(frozen=True)
class RasterImage:
    """A PNG-encoded rendering of the source at one (size, scale) pair."""

    pixel_size: int
    scale: int
    data: bytes

    def __post_init__(self) -> None:
        if self.pixel_size <= 0:
            raise ValueError(f"pixel_size must be positive, got {self.pixel_size}")
        if self.scale not in VALID_SCALES:
            raise ValueError(f"scale must be 1 or 2, got {self.scale}")

    @property
    def byte_length(self) -> int:
        return len(self.data)

    @property
    def render_size(self) -> int:
        return self.pixel_size * self.scale

    @property
    def spec(self) -> SizeSpec:
        return SizeSpec(self.pixel_size, self.scale)


@dataclass(frozen=True)
class IcoDirectoryEntry:
    width: int
    height: int
    payload_length: int
    payload_offset: int
    color_planes: int = 0
    bits_per_pixel: int = 32


@dataclass(frozen=True)
class IcoContainer:
    entries: List[IcoDirectoryEntry]
    payloads: List[bytes]

    @property
    def file_length(self) -> int:
        return 6 + 16 * len(self.entries) + sum(len(p) for p in self.payloads)


@dataclass(frozen=True)
class IcnsEntry:
    type_tag: str
    payload: bytes

    @property
    def entry_length(self) -> int:
        return 8 + len(self.payload)


@dataclass(frozen=True)
class IcnsContainer:
    entries: List[IcnsEntry]

    @property
    def file_length(self) -> int:
        return 8 + sum(entry.entry_length for entry in self.entries)
