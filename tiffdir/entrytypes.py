# entrytypes.py

"""Representation types of TIFF directory entry data types.

Each :py:class:`EntryTypeRepr` subclass binds one :py:class:`DATATYPE` to
a Python value type and knows how to decode values of that type:

- one value from a file handle (:py:meth:`EntryTypeRepr.read_from`),
- many consecutive values (:py:meth:`EntryTypeRepr.read_many_from`),
- one value embedded in the 4-byte value field of a directory entry
  (:py:meth:`EntryTypeRepr.read_from_u32`).

Representation classes are used as markers and are never instantiated:

>>> Short.datatype
<DATATYPE.SHORT: 3>
>>> Short.size()
2
>>> Short.read_from_u32(0x00000064, 0, 1, BYTEORDER.LITTLE)
100

"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING, ClassVar, final

from .enums import BYTEORDER, DATATYPE
from .utils import bytes2str, enumarg

if TYPE_CHECKING:
    from typing import Any

    from .fileio import FileHandle

__all__ = [
    'DATATYPE_SIZES',
    'REPRESENTATIONS',
    'Ascii',
    'Byte',
    'Double',
    'EntryTypeRepr',
    'Float',
    'Long',
    'Rational',
    'Short',
    'SignedByte',
    'SignedLong',
    'SignedRational',
    'SignedShort',
    'Undefined',
    'datatype_size',
    'embedded_bytes',
    'representation',
]

DATATYPE_SIZES: dict[DATATYPE, int] = {
    DATATYPE.BYTE: 1,
    DATATYPE.ASCII: 1,
    DATATYPE.SHORT: 2,
    DATATYPE.LONG: 4,
    DATATYPE.RATIONAL: 8,
    DATATYPE.SBYTE: 1,
    DATATYPE.UNDEFINED: 1,
    DATATYPE.SSHORT: 2,
    DATATYPE.SLONG: 4,
    # declared as 4 although values are read as two 32-bit fields
    DATATYPE.SRATIONAL: 4,
    DATATYPE.FLOAT: 4,
    DATATYPE.DOUBLE: 8,
}
"""Declared size in bytes of one item of :py:class:`DATATYPE`."""

VALUE_READ_MSG = 'when reading TIFF entry value'


def datatype_size(dtype: DATATYPE | int, /) -> int | None:
    """Return declared size of one item of data type or None if unknown.

    >>> datatype_size(DATATYPE.RATIONAL)
    8
    >>> datatype_size(99) is None
    True

    """
    try:
        return DATATYPE_SIZES[DATATYPE(dtype)]
    except ValueError:
        return None


def embedded_bytes(word: int, byteorder: BYTEORDER, /) -> bytes:
    """Return value field of directory entry as bytes stored in file.

    The value field was decoded as unsigned 32-bit integer in the byte order
    of the document. Encoding it again in that byte order recovers the
    original byte sequence, independent of the byte order.

    >>> embedded_bytes(0x61006200, BYTEORDER.BIG)
    b'a\\x00b\\x00'
    >>> embedded_bytes(0x00620061, BYTEORDER.LITTLE)
    b'a\\x00b\\x00'

    """
    return (word & 0xFFFFFFFF).to_bytes(4, byteorder.longname)


class EntryTypeRepr:
    """Representation of TIFF directory entry data type as Python type.

    Subclasses define the data type they represent and the `struct` format
    of one item in file. Fixed size numeric types need nothing else.

    """

    __slots__ = ()

    datatype: ClassVar[DATATYPE]
    """Data type of directory entries this type represents."""

    format: ClassVar[str] = ''
    """`struct` format of one item in file, without byte order."""

    dtype: ClassVar[str] = ''
    """NumPy data type of one item in file, without byte order."""

    @classmethod
    def size(cls) -> int:
        """Return declared size of one item in bytes."""
        return DATATYPE_SIZES[cls.datatype]

    @classmethod
    def itemsize(cls) -> int:
        """Return number of bytes one item occupies in file."""
        return struct.calcsize(cls.format)

    @classmethod
    def read_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, /
    ) -> tuple[int, Any]:
        """Return number of bytes read and one value read from file.

        Parameters:
            fh:
                File handle positioned at value.
            byteorder:
                Byte order of value in file.

        Raises:
            UnexpectedEndOfStreamError: File ended before value was read.

        """
        value = fh.read_scalar(cls.format, byteorder, VALUE_READ_MSG)
        return cls.itemsize(), value

    @classmethod
    def read_many_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, n: int, /
    ) -> list[Any]:
        """Return list of `n` consecutive values read from file.

        Parameters:
            fh:
                File handle positioned at first value.
            byteorder:
                Byte order of values in file.
            n:
                Number of values to read.

        Raises:
            UnexpectedEndOfStreamError: File ended before all values were read.

        """
        data = fh.read_array(byteorder.value + cls.dtype, n, VALUE_READ_MSG)
        return data.tolist()

    @classmethod
    def read_from_u32(
        cls, word: int, n: int, count: int, byteorder: BYTEORDER, /
    ) -> Any | None:
        """Return `n`-th value embedded in value field or None.

        Parameters:
            word:
                Value field of directory entry.
            n:
                Index of value to return.
            count:
                Number of values in directory entry.
            byteorder:
                Byte order the value field was decoded with.

        Returns:
            Decoded value, or None if `n` is not smaller than `count` or
            the value does not fit into 4 bytes.

        """
        itemsize = cls.itemsize()
        if n < 0 or n >= count or (n + 1) * itemsize > 4:
            return None
        data = embedded_bytes(word, byteorder)
        return struct.unpack_from(
            byteorder.value + cls.format, data, n * itemsize
        )[0]

    def __init__(self) -> None:
        msg = f'{type(self).__name__} is a marker type and cannot be created'
        raise TypeError(msg)


@final
class Byte(EntryTypeRepr):
    """8-bit unsigned integer represented as int."""

    datatype = DATATYPE.BYTE
    format = 'B'
    dtype = 'u1'


@final
class Ascii(EntryTypeRepr):
    """NULL terminated string represented as str.

    One item is a whole string, not a single byte. Strings are read up to
    and including their NULL terminator.

    """

    datatype = DATATYPE.ASCII
    format = 's'

    @classmethod
    def read_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, /
    ) -> tuple[int, str]:
        """Return number of bytes read and string read up to NULL byte."""
        data = bytearray()
        while True:
            b = fh.read_exact(1, VALUE_READ_MSG)
            if b == b'\x00':
                break
            data += b
        return len(data) + 1, bytes2str(bytes(data))

    @classmethod
    def read_many_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, n: int, /
    ) -> list[str]:
        """Return list of `n` consecutive NULL terminated strings."""
        return [cls.read_from(fh, byteorder)[1] for _ in range(n)]

    @classmethod
    def read_from_u32(
        cls, word: int, n: int, count: int, byteorder: BYTEORDER, /
    ) -> str | None:
        """Return `n`-th NULL terminated string embedded in value field.

        The value field holds up to `count` strings, which are split at
        NULL bytes. Trailing bytes without NULL terminator do not form a
        string.

        >>> Ascii.read_from_u32(0x61006200, 1, 2, BYTEORDER.BIG)
        'b'

        """
        if n < 0 or n >= count or n >= 4:
            return None
        data = embedded_bytes(word, byteorder)
        substrings = []
        start = 0
        for i, b in enumerate(data):
            if b == 0:
                substrings.append(data[start:i])
                start = i + 1
        if n >= len(substrings):
            return None
        return bytes2str(substrings[n])


@final
class Short(EntryTypeRepr):
    """16-bit unsigned integer represented as int."""

    datatype = DATATYPE.SHORT
    format = 'H'
    dtype = 'u2'


@final
class Long(EntryTypeRepr):
    """32-bit unsigned integer represented as int."""

    datatype = DATATYPE.LONG
    format = 'I'
    dtype = 'u4'


@final
class Rational(EntryTypeRepr):
    """Two 32-bit unsigned integers represented as (numerator, denominator)."""

    datatype = DATATYPE.RATIONAL
    format = 'II'
    dtype = 'u4'

    @classmethod
    def read_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, /
    ) -> tuple[int, tuple[int, int]]:
        """Return number of bytes read and fraction read from file."""
        data = fh.read_exact(cls.itemsize(), VALUE_READ_MSG)
        value = struct.unpack(byteorder.value + cls.format, data)
        return cls.itemsize(), value

    @classmethod
    def read_many_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, n: int, /
    ) -> list[tuple[int, int]]:
        """Return list of `n` consecutive fractions read from file."""
        data = fh.read_array(
            byteorder.value + cls.dtype, 2 * n, VALUE_READ_MSG
        )
        return [tuple(item) for item in data.reshape(-1, 2).tolist()]

    @classmethod
    def read_from_u32(
        cls, word: int, n: int, count: int, byteorder: BYTEORDER, /
    ) -> None:
        """Return None. Fractions never fit into the value field."""
        return None


@final
class SignedByte(EntryTypeRepr):
    """8-bit signed integer represented as int."""

    datatype = DATATYPE.SBYTE
    format = 'b'
    dtype = 'i1'


@final
class Undefined(EntryTypeRepr):
    """8-bit byte that may contain anything, represented as int."""

    datatype = DATATYPE.UNDEFINED
    format = 'B'
    dtype = 'u1'


@final
class SignedShort(EntryTypeRepr):
    """16-bit signed integer represented as int."""

    datatype = DATATYPE.SSHORT
    format = 'h'
    dtype = 'i2'


@final
class SignedLong(EntryTypeRepr):
    """32-bit signed integer represented as int."""

    datatype = DATATYPE.SLONG
    format = 'i'
    dtype = 'i4'


@final
class SignedRational(EntryTypeRepr):
    """Two 32-bit signed integers represented as (numerator, denominator).

    The declared size of the data type is 4 bytes, which is used to decide
    whether values are embedded in the value field. Values are read as two
    32-bit fields. Embedded values are never decoded.

    """

    datatype = DATATYPE.SRATIONAL
    format = 'ii'
    dtype = 'i4'

    @classmethod
    def read_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, /
    ) -> tuple[int, tuple[int, int]]:
        """Return number of bytes read and fraction read from file."""
        data = fh.read_exact(cls.itemsize(), VALUE_READ_MSG)
        value = struct.unpack(byteorder.value + cls.format, data)
        return cls.itemsize(), value

    @classmethod
    def read_many_from(
        cls, fh: FileHandle, byteorder: BYTEORDER, n: int, /
    ) -> list[tuple[int, int]]:
        """Return list of `n` consecutive fractions read from file."""
        data = fh.read_array(
            byteorder.value + cls.dtype, 2 * n, VALUE_READ_MSG
        )
        return [tuple(item) for item in data.reshape(-1, 2).tolist()]

    @classmethod
    def read_from_u32(
        cls, word: int, n: int, count: int, byteorder: BYTEORDER, /
    ) -> None:
        """Return None. Embedded fractions are not decoded."""
        return None


@final
class Float(EntryTypeRepr):
    """Single precision IEEE floating point represented as float.

    An embedded value is the bit pattern of the whole value field:

    >>> Float.read_from_u32(0x3FC00000, 0, 1, BYTEORDER.BIG)
    1.5

    """

    datatype = DATATYPE.FLOAT
    format = 'f'
    dtype = 'f4'


@final
class Double(EntryTypeRepr):
    """Double precision IEEE floating point represented as float."""

    datatype = DATATYPE.DOUBLE
    format = 'd'
    dtype = 'f8'

    @classmethod
    def read_from_u32(
        cls, word: int, n: int, count: int, byteorder: BYTEORDER, /
    ) -> None:
        """Return None. Doubles never fit into the value field."""
        return None


REPRESENTATIONS: dict[DATATYPE, type[EntryTypeRepr]] = {
    repr_.datatype: repr_
    for repr_ in (
        Byte,
        Ascii,
        Short,
        Long,
        Rational,
        SignedByte,
        Undefined,
        SignedShort,
        SignedLong,
        SignedRational,
        Float,
        Double,
    )
}
"""Map :py:class:`DATATYPE` to representation type."""


def representation(
    dtype: DATATYPE | int | str, /
) -> type[EntryTypeRepr] | None:
    """Return representation type of data type or None if unknown.

    >>> representation('rational')
    <class 'tiffdir.entrytypes.Rational'>
    >>> representation(99) is None
    True

    """
    datatype = enumarg(DATATYPE, dtype)
    if not isinstance(datatype, DATATYPE):
        return None
    return REPRESENTATIONS[datatype]
