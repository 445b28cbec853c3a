from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .binary_writer import BinaryWriter
from .models import IcnsContainer, IcnsEntry, RasterImage, SizeSpec
from .rasterizer import Rasterizer
from .sizes import ConfigurationError, icns_sizes, icns_type_tag


logger = logging.getLogger(__name__)

MAGIC = "icns"


def render_icns_images(
    source: Path, rasterizer: Rasterizer, specs: Optional[Iterable[SizeSpec]] = None
) -> List[RasterImage]:
    """Render every (size, scale) pair; @2x variants are rendered at double size."""
    specs = list(specs) if specs is not None else icns_sizes()
    # Resolve every tag before spending time on rendering.
    for spec in specs:
        icns_type_tag(spec)

    images = []
    for spec in specs:
        data = rasterizer.render(source, spec.render_size)
        images.append(RasterImage(spec.pixel_size, spec.scale, data))
    return images


def assemble_icns(images: Sequence[RasterImage]) -> IcnsContainer:
    entries: List[IcnsEntry] = []
    seen = set()
    for image in images:
        tag = icns_type_tag(image.spec)
        if tag in seen:
            raise ConfigurationError(f"Duplicate ICNS entry for tag {tag}")
        seen.add(tag)
        entries.append(IcnsEntry(type_tag=tag, payload=image.data))
    if not entries:
        raise ConfigurationError("An ICNS container needs at least one image")
    return IcnsContainer(entries=entries)


def encode_icns(container: IcnsContainer) -> bytes:
    writer = BinaryWriter(">")
    writer.write_tag(MAGIC)
    writer.write_u32(0)  # patched below

    for entry in container.entries:
        writer.write_tag(entry.type_tag)
        writer.write_u32(entry.entry_length)
        writer.write_bytes(entry.payload)

    writer.patch_total_length()
    return writer.getvalue()


def build_icns_bytes(source: Path, rasterizer: Rasterizer) -> bytes:
    images = render_icns_images(source, rasterizer)
    data = encode_icns(assemble_icns(images))
    logger.info("ICNS assembled: entries=%d bytes=%d", len(images), len(data))
    return data
