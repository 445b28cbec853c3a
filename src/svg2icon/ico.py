from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .binary_writer import BinaryWriter
from .models import IcoContainer, IcoDirectoryEntry, RasterImage, SizeSpec
from .rasterizer import Rasterizer
from .sizes import ConfigurationError, ico_dimension, ico_sizes


logger = logging.getLogger(__name__)

HEADER_SIZE = 6
ENTRY_SIZE = 16
ICON_TYPE = 1


def render_ico_images(
    source: Path, rasterizer: Rasterizer, specs: Optional[Iterable[SizeSpec]] = None
) -> List[RasterImage]:
    images = []
    for spec in specs if specs is not None else ico_sizes():
        if spec.scale != 1:
            raise ConfigurationError(f"ICO entries cannot be scaled, got @{spec.scale}x")
        data = rasterizer.render(source, spec.render_size)
        images.append(RasterImage(spec.pixel_size, spec.scale, data))
    return images


def assemble_ico(images: Sequence[RasterImage]) -> IcoContainer:
    count = len(images)
    if not count:
        raise ConfigurationError("An ICO container needs at least one image")

    entries: List[IcoDirectoryEntry] = []
    seen = set()
    offset = HEADER_SIZE + ENTRY_SIZE * count
    for image in images:
        dimension = ico_dimension(image.pixel_size)
        if dimension in seen:
            raise ConfigurationError(f"Duplicate ICO entry for {image.pixel_size}px")
        seen.add(dimension)
        entries.append(
            IcoDirectoryEntry(
                width=dimension,
                height=dimension,
                payload_length=image.byte_length,
                payload_offset=offset,
            )
        )
        offset += image.byte_length

    return IcoContainer(entries=entries, payloads=[image.data for image in images])


def encode_ico(container: IcoContainer) -> bytes:
    writer = BinaryWriter("<")
    writer.write_u16(0)
    writer.write_u16(ICON_TYPE)
    writer.write_u16(len(container.entries))

    for entry in container.entries:
        writer.write_u8(entry.width)
        writer.write_u8(entry.height)
        writer.write_u8(0)  # color count
        writer.write_u8(0)  # reserved
        writer.write_u16(entry.color_planes)
        writer.write_u16(entry.bits_per_pixel)
        writer.write_u32(entry.payload_length)
        writer.write_u32(entry.payload_offset)

    for entry, payload in zip(container.entries, container.payloads):
        if writer.position != entry.payload_offset:
            raise ConfigurationError(
                f"Payload offset mismatch: expected {entry.payload_offset}, at {writer.position}"
            )
        writer.write_bytes(payload)

    return writer.getvalue()


def build_ico_bytes(source: Path, rasterizer: Rasterizer) -> bytes:
    images = render_ico_images(source, rasterizer)
    data = encode_ico(assemble_ico(images))
    logger.info("ICO assembled: entries=%d bytes=%d", len(images), len(data))
    return data
