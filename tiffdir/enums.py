# enums.py

"""TIFF enumeration types."""

from __future__ import annotations

import enum

__all__ = [
    'BYTEORDER',
    'DATATYPE',
]


class BYTEORDER(enum.Enum):
    """Byte order of TIFF document.

    Values are the `struct` and NumPy byte order characters.

    """

    LITTLE = '<'
    """Little-endian, marked by b'II'."""
    BIG = '>'
    """Big-endian, marked by b'MM'."""

    @classmethod
    def frommarker(cls, marker: bytes, /) -> BYTEORDER | None:
        """Return byte order for 2-byte header marker or None if invalid.

        >>> BYTEORDER.frommarker(b'MM')
        <BYTEORDER.BIG: '>'>

        """
        return {b'II': cls.LITTLE, b'MM': cls.BIG}.get(bytes(marker))

    @property
    def marker(self) -> bytes:
        """Header marker of byte order."""
        return b'II' if self is BYTEORDER.LITTLE else b'MM'

    @property
    def longname(self) -> str:
        """Byte order name as used by `int.to_bytes`."""
        return 'little' if self is BYTEORDER.LITTLE else 'big'


class DATATYPE(enum.IntEnum):
    """TIFF tag data types."""

    BYTE = 1
    """8-bit unsigned integer."""
    ASCII = 2
    """8-bit byte with last byte null, containing 7-bit ASCII code."""
    SHORT = 3
    """16-bit unsigned integer."""
    LONG = 4
    """32-bit unsigned integer."""
    RATIONAL = 5
    """Two 32-bit unsigned integers, numerator and denominator of fraction."""
    SBYTE = 6
    """8-bit signed integer."""
    UNDEFINED = 7
    """8-bit byte that may contain anything."""
    SSHORT = 8
    """16-bit signed integer."""
    SLONG = 9
    """32-bit signed integer."""
    SRATIONAL = 10
    """Two 32-bit signed integers, numerator and denominator of fraction."""
    FLOAT = 11
    """Single precision (4-byte) IEEE format."""
    DOUBLE = 12
    """Double precision (8-byte) IEEE format."""
