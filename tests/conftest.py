"""Synthetic TIFF documents for tiffdir tests."""

from __future__ import annotations

import io
import struct

import pytest

from tiffdir import BYTEORDER, TiffReader

HEADER_SIZE = 4
ENTRY_SIZE = 12


def build_tiff(ifds, byteorder='<'):
    """Return TIFF document with chained IFDs as bytes.

    The entry count of the first IFD follows the magic number at offset 4.
    IFDs are stored consecutively, followed by the values that do not fit
    into the value fields. The next IFD offset is stored as 16-bit integer
    in a 4-byte field.

    Parameters:
        ifds:
            List of IFDs. Each IFD is a list of (tag, dtype, count, value)
            tuples. `value` is either an int, stored as the raw 32-bit
            value field, or bytes. Bytes of up to 4 bytes are embedded in
            the value field, longer bytes are stored after the IFDs.
        byteorder:
            '<' for little-endian, '>' for big-endian.

    """
    marker = BYTEORDER(byteorder).marker
    offsets = []
    offset = HEADER_SIZE
    for entries in ifds:
        offsets.append(offset)
        offset += 2 + ENTRY_SIZE * len(entries) + 4
    dataoffset = offset

    result = bytearray(marker + struct.pack(byteorder + 'H', 42))
    data = bytearray()
    for i, entries in enumerate(ifds):
        assert len(result) == offsets[i]
        result += struct.pack(byteorder + 'H', len(entries))
        for tag, dtype, count, value in entries:
            result += struct.pack(byteorder + 'HHI', tag, dtype, count)
            if isinstance(value, int):
                result += struct.pack(byteorder + 'I', value)
            elif len(value) <= 4:
                result += value.ljust(4, b'\x00')
            else:
                result += struct.pack(
                    byteorder + 'I', dataoffset + len(data)
                )
                data += value
        nextoffset = offsets[i + 1] if i + 1 < len(ifds) else 0
        result += struct.pack(byteorder + 'H', nextoffset) + b'\x00\x00'
    return bytes(result + data)


def open_tiff(data):
    """Return TiffDocument of TIFF document in bytes."""
    return TiffReader(io.BytesIO(data)).ifds()


@pytest.fixture
def tiff_builder():
    """Return function building TIFF documents."""
    return build_tiff


@pytest.fixture
def tiff_opener():
    """Return function opening TIFF documents from bytes."""
    return open_tiff


@pytest.fixture
def make_document():
    """Return function returning TiffDocument of synthetic IFDs."""

    def make(ifds, byteorder='<'):
        return open_tiff(build_tiff(ifds, byteorder))

    return make
