# values.py

"""Lazy sequences of TIFF directory entry values.

Values of a directory entry are either embedded in the entry's 4-byte value
field, if the declared size of all items does not exceed 4 bytes, or stored
elsewhere in the file at the offset given by the value field.

:py:func:`entry_values` returns an :py:class:`EmbeddedValues` or
:py:class:`ReferencedValues` iterator accordingly.
:py:func:`all_entry_values` returns all values at once.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from .entrytypes import datatype_size

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    from .entrytypes import EntryTypeRepr
    from .enums import BYTEORDER
    from .tags import TiffEntry
    from .tiffdir import TiffDocument

__all__ = [
    'EmbeddedValues',
    'EntryValues',
    'ReferencedValues',
    'all_entry_values',
    'entry_values',
]


class EntryValues:
    """Iterator over values of TIFF directory entry.

    EntryValues are forward-only and cannot be restarted.
    Once an error was raised, the iterator is exhausted.

    """

    __slots__ = ('count', 'index', 'representation')

    representation: type[EntryTypeRepr]
    """Type the values are represented as."""

    count: int
    """Number of values in directory entry."""

    index: int
    """Index of next value."""

    is_embedded: bool = False
    """Values are embedded in value field of directory entry."""

    def __init__(
        self, representation: type[EntryTypeRepr], count: int, /
    ) -> None:
        self.representation = representation
        self.count = int(count)
        self.index = 0

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return (
            f'<tiffdir.{type(self).__name__} '
            f'{self.representation.__name__}[{self.count}] '
            f'@{self.index}>'
        )


@final
class EmbeddedValues(EntryValues):
    """Iterator over values embedded in value field of directory entry.

    Does not access the file. Iteration ends after `count` values or at the
    first value that cannot be decoded from the value field.

    Parameters:
        representation:
            Type the values are represented as.
        word:
            Value field of directory entry.
        count:
            Number of values in directory entry.
        byteorder:
            Byte order the value field was decoded with.

    """

    __slots__ = ('byteorder', 'word')

    word: int
    """Value field of directory entry."""

    byteorder: BYTEORDER
    """Byte order the value field was decoded with."""

    is_embedded = True

    def __init__(
        self,
        representation: type[EntryTypeRepr],
        word: int,
        count: int,
        byteorder: BYTEORDER,
        /,
    ) -> None:
        super().__init__(representation, count)
        self.word = int(word)
        self.byteorder = byteorder

    def __next__(self) -> Any:
        if self.index >= self.count:
            raise StopIteration
        value = self.representation.read_from_u32(
            self.word, self.index, self.count, self.byteorder
        )
        if value is None:
            self.index = self.count
            raise StopIteration
        self.index += 1
        return value


@final
class ReferencedValues(EntryValues):
    """Iterator over values stored at offset in file.

    Each value is read after seeking to the position following the previous
    value, so that values of variable size, such as strings, are supported.

    Parameters:
        representation:
            Type the values are represented as.
        parent:
            TIFF document the directory entry belongs to.
        offset:
            Position of first value in file.
        count:
            Number of values in directory entry.

    """

    __slots__ = ('offset', 'parent')

    parent: TiffDocument
    """TIFF document the directory entry belongs to."""

    offset: int
    """Position of next value in file."""

    def __init__(
        self,
        representation: type[EntryTypeRepr],
        parent: TiffDocument,
        offset: int,
        count: int,
        /,
    ) -> None:
        super().__init__(representation, count)
        self.parent = parent
        self.offset = int(offset)

    def __next__(self) -> Any:
        if self.index >= self.count:
            raise StopIteration
        fh = self.parent.filehandle
        try:
            with fh.lock:
                fh.seek(self.offset)
                size, value = self.representation.read_from(
                    fh, self.parent.byteorder
                )
        except Exception:
            self.index = self.count
            raise
        self.offset += size
        self.index += 1
        return value


def entry_values(
    entry: TiffEntry, representation: type[EntryTypeRepr], /
) -> EntryValues | None:
    """Return iterator over values of directory entry.

    Parameters:
        entry:
            Directory entry to read values of.
        representation:
            Type to represent values as.

    Returns:
        :py:class:`EmbeddedValues` if the declared size of all values does
        not exceed 4 bytes, else :py:class:`ReferencedValues`.
        None if `representation` does not match the data type of `entry`
        or the data type is unknown.

    """
    if entry.dtype != representation.datatype:
        return None
    size = datatype_size(entry.dtype)
    if size is None:
        return None
    if size * entry.count <= 4:
        return EmbeddedValues(
            representation,
            entry.valueoffset,
            entry.count,
            entry.parent.byteorder,
        )
    return ReferencedValues(
        representation, entry.parent, entry.valueoffset, entry.count
    )


def all_entry_values(
    entry: TiffEntry, representation: type[EntryTypeRepr], /
) -> list[Any] | None:
    """Return list of all values of directory entry.

    Referenced values are read with a single seek. If reading fails, the
    exception is raised and no partial list is returned.

    Parameters:
        entry:
            Directory entry to read values of.
        representation:
            Type to represent values as.

    Returns:
        List of values, or None if `representation` does not match the data
        type of `entry` or the data type is unknown.

    Raises:
        UnexpectedEndOfStreamError: File ended before all values were read.

    """
    values = entry_values(entry, representation)
    if values is None:
        return None
    if values.is_embedded:
        return list(values)
    parent = entry.parent
    fh = parent.filehandle
    with fh.lock:
        fh.seek(entry.valueoffset)
        return representation.read_many_from(
            fh, parent.byteorder, entry.count
        )
