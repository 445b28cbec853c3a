from __future__ import annotations

import struct

TOTAL_LENGTH_OFFSET = 4

_LIMITS = {"B": 0xFF, "H": 0xFFFF, "I": 0xFFFFFFFF}


class BinaryWriter:
    """Append-only byte buffer with a fixed byte order.

    ``byteorder`` is a :mod:`struct` prefix: ``"<"`` for little-endian,
    ``">"`` for big-endian.
    """

    def __init__(self, byteorder: str) -> None:
        if byteorder not in ("<", ">"):
            raise ValueError(f"Unsupported byte order: {byteorder!r}")
        self.byteorder = byteorder
        self._buffer = bytearray()
        self._length_patched = False

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def position(self) -> int:
        return len(self._buffer)

    def _write_int(self, code: str, value: int) -> None:
        if not 0 <= value <= _LIMITS[code]:
            raise ValueError(f"Value {value} does not fit in field '{code}'")
        self._buffer += struct.pack(self.byteorder + code, value)

    def write_u8(self, value: int) -> None:
        self._write_int("B", value)

    def write_u16(self, value: int) -> None:
        self._write_int("H", value)

    def write_u32(self, value: int) -> None:
        self._write_int("I", value)

    def write_bytes(self, data: bytes) -> None:
        self._buffer += data

    def write_tag(self, tag: str) -> None:
        encoded = tag.encode("ascii")
        if len(encoded) != 4:
            raise ValueError(f"Type tags must be 4 ASCII bytes, got {tag!r}")
        self._buffer += encoded

    def patch_total_length(self) -> None:
        """Store the final buffer length as a u32 at offset 4."""
        if self._length_patched:
            raise RuntimeError("Total length has already been patched")
        if len(self._buffer) < TOTAL_LENGTH_OFFSET + 4:
            raise RuntimeError("No total length field to patch")
        struct.pack_into(
            self.byteorder + "I", self._buffer, TOTAL_LENGTH_OFFSET, len(self._buffer)
        )
        self._length_patched = True

    def getvalue(self) -> bytes:
        return bytes(self._buffer)
