import pytest

from svg2icon.binary_writer import BinaryWriter


def test_little_endian_fields():
    writer = BinaryWriter("<")
    writer.write_u8(0xAB)
    writer.write_u16(0x0102)
    writer.write_u32(0x01020304)
    assert writer.getvalue() == b"\xab\x02\x01\x04\x03\x02\x01"
    assert len(writer) == writer.position == 7


def test_big_endian_fields_and_tag():
    writer = BinaryWriter(">")
    writer.write_tag("icns")
    writer.write_u16(0x0102)
    writer.write_u32(0x01020304)
    writer.write_bytes(b"xyz")
    assert writer.getvalue() == b"icns\x01\x02\x01\x02\x03\x04xyz"


@pytest.mark.parametrize("method,value", [("write_u8", 256), ("write_u16", -1), ("write_u32", 1 << 32)])
def test_out_of_range_values_rejected(method, value):
    writer = BinaryWriter("<")
    with pytest.raises(ValueError):
        getattr(writer, method)(value)
    assert len(writer) == 0


def test_tag_must_be_four_bytes():
    with pytest.raises(ValueError):
        BinaryWriter(">").write_tag("ic1")


def test_unknown_byte_order():
    with pytest.raises(ValueError):
        BinaryWriter("!")


def test_patch_total_length_only_touches_offset_four():
    writer = BinaryWriter(">")
    writer.write_tag("icns")
    writer.write_u32(0)
    writer.write_bytes(b"\x00" * 12)
    writer.patch_total_length()
    data = writer.getvalue()
    assert data[:4] == b"icns"
    assert data[4:8] == (20).to_bytes(4, "big")
    assert data[8:] == b"\x00" * 12

    with pytest.raises(RuntimeError):
        writer.patch_total_length()


def test_patch_requires_length_field():
    writer = BinaryWriter(">")
    writer.write_tag("icns")
    with pytest.raises(RuntimeError):
        writer.patch_total_length()
