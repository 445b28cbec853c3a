import io

import pytest
from PIL import Image

from conftest import FakeEngine, png_size, read_ico_directory
from svg2icon.ico import assemble_ico, build_ico_bytes, encode_ico, render_ico_images
from svg2icon.models import RasterImage, SizeSpec
from svg2icon.rasterizer import Rasterizer, RenderError
from svg2icon.sizes import ICO_SIZES, ConfigurationError, ico_sizes


def test_directory_matches_size_table(svg_source, rasterizer):
    data = build_ico_bytes(svg_source, rasterizer)
    (reserved, kind, count), entries = read_ico_directory(data)

    assert (reserved, kind) == (0, 1)
    assert count == len(ico_sizes())

    offset = 6 + 16 * count
    for size, entry in zip(ICO_SIZES, entries):
        width, height, colors, reserved, planes, bpp, length, entry_offset = entry
        expected = 0 if size == 256 else size
        assert (width, height) == (expected, expected)
        assert (colors, reserved, planes, bpp) == (0, 0, 0, 32)
        assert entry_offset == offset
        assert png_size(data[entry_offset : entry_offset + length]) == (size, size)
        offset += length

    assert offset == len(data)


def test_independent_decoder_reads_all_sizes(svg_source, rasterizer):
    data = build_ico_bytes(svg_source, rasterizer)
    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "ICO"
        assert set(image.info["sizes"]) == {(size, size) for size in ICO_SIZES}


def test_four_entry_table(svg_source, rasterizer):
    specs = [SizeSpec(size) for size in (16, 32, 48, 256)]
    images = render_ico_images(svg_source, rasterizer, specs)
    container = assemble_ico(images)
    data = encode_ico(container)

    (_, _, count), entries = read_ico_directory(data)
    assert count == 4
    assert len(data) == container.file_length
    assert len(data) == 6 + 16 * 4 + sum(image.byte_length for image in images)
    offsets = [entry[7] for entry in entries]
    assert offsets == sorted(offsets)


def test_render_failure_aborts(svg_source):
    rasterizer = Rasterizer(lambda: FakeEngine(fail_sizes={48}))
    with pytest.raises(RenderError):
        build_ico_bytes(svg_source, rasterizer)


def test_duplicate_dimensions_rejected():
    images = [RasterImage(32, 1, b"a"), RasterImage(32, 1, b"b")]
    with pytest.raises(ConfigurationError):
        assemble_ico(images)


def test_scaled_specs_rejected(svg_source, rasterizer):
    with pytest.raises(ConfigurationError):
        render_ico_images(svg_source, rasterizer, [SizeSpec(16, 2)])


def test_empty_container_rejected():
    with pytest.raises(ConfigurationError):
        assemble_ico([])
