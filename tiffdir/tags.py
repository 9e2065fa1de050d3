# tags.py

"""TIFF directory entry class."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from .entrytypes import datatype_size, representation
from .enums import DATATYPE
from .utils import enumstr, logger
from .values import all_entry_values, entry_values

if TYPE_CHECKING:
    from typing import Any

    from .entrytypes import EntryTypeRepr
    from .tiffdir import TiffDocument
    from .values import EntryValues


@final
class TiffEntry:
    """TIFF directory entry structure.

    TiffEntry instances are not thread-safe. All attributes are read-only.

    Values of the entry are not read until requested via
    :py:meth:`TiffEntry.values` or :py:meth:`TiffEntry.all_values`.

    Parameters:
        parent:
            TIFF document entry belongs to.
        offset:
            Position of entry structure in file.
        tag:
            Decimal code of tag.
        dtype:
            Data type of entry value items.
        count:
            Number of items in entry value.
        valueoffset:
            Value field of entry structure. Either embedded data or
            position of entry value in file.

    """

    __slots__ = (
        'count',
        'dtype',
        'offset',
        'parent',
        'tag',
        'valueoffset',
    )

    parent: TiffDocument
    """TIFF document entry belongs to."""

    offset: int
    """Position of entry structure in file."""

    tag: int
    """Decimal code of tag."""

    dtype: DATATYPE | int
    """:py:class:`DATATYPE` of entry value item, or code if unknown."""

    count: int
    """Number of items in entry value."""

    valueoffset: int
    """Value field of entry structure."""

    def __init__(
        self,
        parent: TiffDocument,
        offset: int,
        tag: int,
        dtype: DATATYPE | int,
        count: int,
        valueoffset: int,
        /,
    ) -> None:
        self.parent = parent
        self.offset = int(offset)
        self.tag = int(tag)
        self.count = int(count)
        self.valueoffset = int(valueoffset)
        try:
            self.dtype = DATATYPE(dtype)
        except ValueError:
            self.dtype = int(dtype)

    @classmethod
    def fromfile(cls, parent: TiffDocument, /, offset: int) -> TiffEntry:
        """Return TiffEntry instance read from file.

        Unknown data types do not raise but are kept as integer codes.

        Parameters:
            parent:
                TIFF document entry is read from.
            offset:
                Position of entry structure in file.

        Raises:
            UnexpectedEndOfStreamError:
                File ended before entry structure was read.

        """
        fh = parent.filehandle
        byteorder = parent.byteorder
        with fh.lock:
            fh.seek(offset)
            tag = fh.read_scalar(
                'H', byteorder, 'when reading TIFF IFD entry tag'
            )
            dtype = fh.read_scalar(
                'H', byteorder, 'when reading TIFF IFD entry type'
            )
            count = fh.read_scalar(
                'I', byteorder, 'when reading TIFF IFD entry data count'
            )
            valueoffset = fh.read_scalar(
                'I', byteorder, 'when reading TIFF IFD entry data offset'
            )
        entry = cls(parent, offset, tag, dtype, count, valueoffset)
        if not isinstance(entry.dtype, DATATYPE):
            logger().warning(
                f'<tiffdir.TiffEntry {tag} @{offset}> '
                f'unknown data type {dtype!r}'
            )
        return entry

    def values(
        self, reprtype: type[EntryTypeRepr] | None = None, /
    ) -> EntryValues | None:
        """Return iterator over entry values.

        Parameters:
            reprtype:
                Type to represent values as, for example
                :py:class:`tiffdir.Short`.
                By default, the type registered for the entry's data type.

        Returns:
            Lazy iterator over values, or None if `reprtype` does not
            match the data type of the entry or the data type is unknown.

        """
        if reprtype is None:
            reprtype = representation(self.dtype)
            if reprtype is None:
                return None
        return entry_values(self, reprtype)

    def all_values(
        self, reprtype: type[EntryTypeRepr] | None = None, /
    ) -> list[Any] | None:
        """Return list of all entry values.

        Either all values are returned or an exception is raised.

        Parameters:
            reprtype:
                Type to represent values as.
                By default, the type registered for the entry's data type.

        Returns:
            List of values, or None if `reprtype` does not match
            the data type of the entry or the data type is unknown.

        Raises:
            UnexpectedEndOfStreamError:
                File ended before all values were read.

        """
        if reprtype is None:
            reprtype = representation(self.dtype)
            if reprtype is None:
                return None
        return all_entry_values(self, reprtype)

    @property
    def dtype_name(self) -> str:
        """Name of data type of entry value."""
        if isinstance(self.dtype, DATATYPE):
            return enumstr(self.dtype)
        return f'TYPE{self.dtype}'

    @property
    def valuebytecount(self) -> int | None:
        """Declared number of bytes of entry value or None if unknown."""
        size = datatype_size(self.dtype)
        if size is None:
            return None
        return size * self.count

    @property
    def is_embedded(self) -> bool:
        """Entry value is embedded in value field of entry structure."""
        size = self.valuebytecount
        return size is not None and size <= 4

    def __repr__(self) -> str:
        return f'<tiffdir.TiffEntry {self.tag} @{self.offset}>'

    def __str__(self) -> str:
        dtype = self.dtype_name
        if self.count != 1:
            dtype += f'[{self.count}]'
        if self.is_embedded:
            where = f'= 0x{self.valueoffset:08X}'
        else:
            where = f'@{self.valueoffset}'
        return f'TiffEntry {self.tag} @{self.offset} {dtype} {where}'
