from __future__ import annotations

from typing import Dict, List

from .models import SizeSpec


class ConfigurationError(Exception):
    """Raised when the size table and the tag table disagree."""


ICO_SIZES = (16, 24, 32, 48, 64, 128, 256)

# (pixel_size, scale) -> OSType, in on-disk order.
ICNS_TYPE_TAGS: Dict[SizeSpec, str] = {
    SizeSpec(16, 1): "icp4",
    SizeSpec(16, 2): "ic11",
    SizeSpec(32, 1): "icp5",
    SizeSpec(32, 2): "ic12",
    SizeSpec(64, 1): "icp6",
    SizeSpec(128, 1): "ic07",
    SizeSpec(128, 2): "ic13",
    SizeSpec(256, 1): "ic08",
    SizeSpec(256, 2): "ic14",
    SizeSpec(512, 1): "ic09",
    SizeSpec(512, 2): "ic10",
}

ICO_MAX_DIMENSION = 256


def ico_sizes() -> List[SizeSpec]:
    return [SizeSpec(size, 1) for size in ICO_SIZES]


def icns_sizes() -> List[SizeSpec]:
    return list(ICNS_TYPE_TAGS)


def icns_type_tag(spec: SizeSpec) -> str:
    try:
        return ICNS_TYPE_TAGS[spec]
    except KeyError:
        raise ConfigurationError(
            f"No ICNS type tag for {spec.pixel_size}px @{spec.scale}x"
        ) from None


def ico_dimension(pixel_size: int) -> int:
    """Encode a pixel size for the one-byte ICO width/height field."""
    if not 1 <= pixel_size <= ICO_MAX_DIMENSION:
        raise ConfigurationError(f"ICO entries must be 1-256 px, got {pixel_size}")
    return 0 if pixel_size == ICO_MAX_DIMENSION else pixel_size
