"""Tests for representation types of TIFF data types."""

from __future__ import annotations

import io
import struct

import pytest

from tiffdir import (
    BYTEORDER,
    DATATYPE,
    DATATYPE_SIZES,
    REPRESENTATIONS,
    Ascii,
    Byte,
    Double,
    EntryTypeRepr,
    FileHandle,
    Float,
    Long,
    Rational,
    Short,
    SignedByte,
    SignedLong,
    SignedRational,
    SignedShort,
    Undefined,
    UnexpectedEndOfStreamError,
    datatype_size,
    representation,
)
from tiffdir.entrytypes import embedded_bytes

LITTLE = BYTEORDER.LITTLE
BIG = BYTEORDER.BIG


def word(data, byteorder):
    """Return value field as decoded from 4 bytes in byte order."""
    return int.from_bytes(data, byteorder.longname)


class TestSizes:
    """Tests for declared sizes of data types."""

    def test_sizes(self):
        assert [DATATYPE_SIZES[DATATYPE(i)] for i in range(1, 13)] == [
            1, 1, 2, 4, 8, 1, 1, 2, 4, 4, 4, 8
        ]

    def test_datatype_size(self):
        assert datatype_size(DATATYPE.SHORT) == 2
        assert datatype_size(5) == 8
        assert datatype_size(10) == 4
        assert datatype_size(0) is None
        assert datatype_size(99) is None

    @pytest.mark.parametrize('reprtype', list(REPRESENTATIONS.values()))
    def test_representation_size(self, reprtype):
        assert reprtype.size() == DATATYPE_SIZES[reprtype.datatype]

    def test_signed_rational_itemsize(self):
        assert SignedRational.size() == 4
        assert SignedRational.itemsize() == 8
        assert Rational.itemsize() == 8


class TestRepresentation:
    """Tests for looking up representation types."""

    def test_representations(self):
        assert len(REPRESENTATIONS) == 12
        for datatype, reprtype in REPRESENTATIONS.items():
            assert reprtype.datatype is datatype

    @pytest.mark.parametrize(
        'arg,expected',
        [
            (DATATYPE.BYTE, Byte),
            (2, Ascii),
            ('short', Short),
            ('LONG', Long),
            (11, Float),
            (12, Double),
            (99, None),
        ],
    )
    def test_representation(self, arg, expected):
        assert representation(arg) is expected

    def test_representation_invalid_name(self):
        with pytest.raises(ValueError):
            representation('integer')

    @pytest.mark.parametrize('reprtype', [EntryTypeRepr, Short, Ascii])
    def test_marker(self, reprtype):
        with pytest.raises(TypeError):
            reprtype()


class TestEmbedded:
    """Tests for decoding values from the 4-byte value field."""

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_embedded_bytes(self, byteorder):
        data = b'\x01\x02\x03\x04'
        assert embedded_bytes(word(data, byteorder), byteorder) == data

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    @pytest.mark.parametrize(
        'reprtype,data,count,expected',
        [
            (Byte, b'\x01\x02\x03\xff', 4, [1, 2, 3, 255]),
            (Undefined, b'\x01\x02\x03\xff', 3, [1, 2, 3]),
            (SignedByte, b'\x01\xfe\x03\x80', 4, [1, -2, 3, -128]),
        ],
    )
    def test_bytes(self, byteorder, reprtype, data, count, expected):
        w = word(data, byteorder)
        result = [
            reprtype.read_from_u32(w, n, count, byteorder)
            for n in range(count)
        ]
        assert result == expected
        assert reprtype.read_from_u32(w, count, count, byteorder) is None

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_short(self, byteorder):
        data = struct.pack(byteorder.value + '2H', 640, 480)
        w = word(data, byteorder)
        assert Short.read_from_u32(w, 0, 2, byteorder) == 640
        assert Short.read_from_u32(w, 1, 2, byteorder) == 480
        assert Short.read_from_u32(w, 2, 4, byteorder) is None

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_signed_short(self, byteorder):
        data = struct.pack(byteorder.value + '2h', -1, 300)
        w = word(data, byteorder)
        assert SignedShort.read_from_u32(w, 0, 2, byteorder) == -1
        assert SignedShort.read_from_u32(w, 1, 2, byteorder) == 300

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_long(self, byteorder):
        data = struct.pack(byteorder.value + 'I', 0xDEADBEEF)
        w = word(data, byteorder)
        assert w == 0xDEADBEEF
        assert Long.read_from_u32(w, 0, 1, byteorder) == 0xDEADBEEF
        assert Long.read_from_u32(w, 1, 2, byteorder) is None

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_signed_long(self, byteorder):
        data = struct.pack(byteorder.value + 'i', -70000)
        w = word(data, byteorder)
        assert SignedLong.read_from_u32(w, 0, 1, byteorder) == -70000

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_float(self, byteorder):
        data = struct.pack(byteorder.value + 'f', -0.375)
        w = word(data, byteorder)
        assert Float.read_from_u32(w, 0, 1, byteorder) == -0.375
        assert Float.read_from_u32(w, 1, 1, byteorder) is None

    def test_float_bits(self):
        assert Float.read_from_u32(0x3FC00000, 0, 1, LITTLE) == 1.5
        assert Float.read_from_u32(0x3FC00000, 0, 1, BIG) == 1.5

    @pytest.mark.parametrize(
        'reprtype', [Rational, SignedRational, Double]
    )
    def test_never_embedded(self, reprtype):
        assert reprtype.read_from_u32(0x01020304, 0, 1, LITTLE) is None

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_ascii(self, byteorder):
        w = word(b'a\x00b\x00', byteorder)
        assert Ascii.read_from_u32(w, 0, 2, byteorder) == 'a'
        assert Ascii.read_from_u32(w, 1, 2, byteorder) == 'b'
        assert Ascii.read_from_u32(w, 2, 2, byteorder) is None

    def test_ascii_single(self):
        w = word(b'abc\x00', LITTLE)
        assert Ascii.read_from_u32(w, 0, 4, LITTLE) == 'abc'
        assert Ascii.read_from_u32(w, 1, 4, LITTLE) is None

    def test_ascii_unterminated(self):
        w = word(b'abcd', BIG)
        assert Ascii.read_from_u32(w, 0, 4, BIG) is None

    def test_ascii_bounds(self):
        w = word(b'\x00\x00\x00\x00', BIG)
        assert Ascii.read_from_u32(w, 3, 4, BIG) == ''
        assert Ascii.read_from_u32(w, 4, 8, BIG) is None
        assert Ascii.read_from_u32(w, -1, 4, BIG) is None


class TestReadFrom:
    """Tests for decoding values from a file handle."""

    def filehandle(self, data):
        return FileHandle(io.BytesIO(data))

    @pytest.mark.parametrize(
        'reprtype,fmt,value',
        [
            (Byte, 'B', 200),
            (SignedByte, 'b', -100),
            (Undefined, 'B', 7),
            (Short, 'H', 65535),
            (SignedShort, 'h', -2),
            (Long, 'I', 4000000000),
            (SignedLong, 'i', -4),
            (Float, 'f', 0.5),
            (Double, 'd', 1e-300),
        ],
    )
    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_numeric(self, byteorder, reprtype, fmt, value):
        data = struct.pack(byteorder.value + fmt * 3, *[value] * 3)
        fh = self.filehandle(data)
        nbytes, result = reprtype.read_from(fh, byteorder)
        assert nbytes == struct.calcsize(fmt)
        assert result == value
        assert reprtype.read_many_from(fh, byteorder, 2) == [value, value]

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_rational(self, byteorder):
        fh = self.filehandle(struct.pack(byteorder.value + '4I', 1, 2, 3, 4))
        assert Rational.read_from(fh, byteorder) == (8, (1, 2))
        fh.seek(0)
        assert Rational.read_many_from(fh, byteorder, 2) == [(1, 2), (3, 4)]

    @pytest.mark.parametrize('byteorder', [LITTLE, BIG])
    def test_signed_rational(self, byteorder):
        fh = self.filehandle(struct.pack(byteorder.value + '4i', -1, 2, 3, -4))
        assert SignedRational.read_from(fh, byteorder) == (8, (-1, 2))
        fh.seek(0)
        result = SignedRational.read_many_from(fh, byteorder, 2)
        assert result == [(-1, 2), (3, -4)]

    def test_ascii(self):
        fh = self.filehandle(b'Make\x00\x00Model\x00')
        assert Ascii.read_from(fh, LITTLE) == (5, 'Make')
        assert Ascii.read_from(fh, BIG) == (1, '')
        assert Ascii.read_many_from(fh, LITTLE, 1) == ['Model']

    def test_ascii_unterminated(self):
        fh = self.filehandle(b'Make')
        with pytest.raises(UnexpectedEndOfStreamError):
            Ascii.read_from(fh, LITTLE)

    def test_ascii_non_utf8(self):
        fh = self.filehandle(b'caf\xe9\x00')
        assert Ascii.read_from(fh, LITTLE) == (5, 'café')

    def test_truncated(self):
        fh = self.filehandle(b'\x01\x00\x00')
        with pytest.raises(UnexpectedEndOfStreamError):
            Long.read_from(fh, LITTLE)
        fh.seek(0)
        with pytest.raises(UnexpectedEndOfStreamError):
            Short.read_many_from(fh, LITTLE, 2)

    def test_native_types(self):
        fh = self.filehandle(struct.pack('>2H', 1, 2))
        result = Short.read_many_from(fh, BIG, 2)
        assert all(type(v) is int for v in result)
