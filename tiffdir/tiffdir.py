# tiffdir.py

# Copyright (c) 2008-2026, Christoph Gohlke
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright notice,
#    this list of conditions and the following disclaimer in the documentation
#    and/or other materials provided with the distribution.
#
# 3. Neither the name of the copyright holder nor the names of its
#    contributors may be used to endorse or promote products derived from
#    this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.


r"""Lazily read image file directories (IFDs) from TIFF files.

Tiffdir is a Python library to walk the chain of image file directories in
a TIFF file or seekable binary stream and decode the entries of each
directory into Python values, without reading the file into memory.

Tiffdir does not decode image data, does not interpret the meaning of tags,
and does not write TIFF files.

:License: BSD-3-Clause
:Version: 2026.10.19

Requirements
------------

- `CPython <https://www.python.org>`_ 3.11 or newer
- `NumPy <https://pypi.org/project/numpy>`_ 1.26 or newer

Notes
-----

The reader expects the entry count of the first IFD immediately after the
header's magic number, at offset 4, instead of following the 4-byte offset
stored there. The offset of the next IFD is read as a 16-bit integer.

Values of directory entries are embedded in the entry's value field if the
declared size of all items does not exceed 4 bytes. The declared size of
SRATIONAL items is 4 bytes, although they are read as two 32-bit integers.

All objects derived from a document share the document's file handle and
seek before each read. They must not be used from several threads at once.

Examples
--------

Walk the IFDs of a TIFF file and print the entries' values:

>>> import io
>>> with TiffReader(io.BytesIO(
...     b'II*\x00\x01\x00\x00\x01\x03\x00\x01\x00\x00\x00d\x00\x00\x00'
...     b'\x00\x00'
... )).ifds() as tif:
...     for ifd in tif:
...         for entry in ifd:
...             print(entry.tag, entry.all_values(Short))
...
256 [100]

"""

from __future__ import annotations

__version__ = '2026.10.19'

__all__ = [
    'BYTEORDER',
    'DATATYPE',
    'DATATYPE_SIZES',
    'REPRESENTATIONS',
    'Ascii',
    'Byte',
    'Double',
    'EmbeddedValues',
    'EntryTypeRepr',
    'EntryValues',
    'FileHandle',
    'Float',
    'InvalidFormatError',
    'Long',
    'NullContext',
    'Rational',
    'ReferencedValues',
    'Short',
    'SignedByte',
    'SignedLong',
    'SignedRational',
    'SignedShort',
    'TiffDocument',
    'TiffEntry',
    'TiffFileError',
    'TiffIfd',
    'TiffIfds',
    'TiffReader',
    'Undefined',
    'UnexpectedEndOfStreamError',
    '__version__',
    'all_entry_values',
    'datatype_size',
    'entry_values',
    'logger',
    'representation',
]

import io
import os
from typing import IO, TYPE_CHECKING, final

from .entrytypes import (
    DATATYPE_SIZES,
    REPRESENTATIONS,
    Ascii,
    Byte,
    Double,
    EntryTypeRepr,
    Float,
    Long,
    Rational,
    Short,
    SignedByte,
    SignedLong,
    SignedRational,
    SignedShort,
    Undefined,
    datatype_size,
    representation,
)
from .enums import BYTEORDER, DATATYPE
from .fileio import FileHandle, NullContext
from .tags import TiffEntry
from .utils import (
    InvalidFormatError,
    TiffFileError,
    UnexpectedEndOfStreamError,
    logger,
)
from .values import (
    EmbeddedValues,
    EntryValues,
    ReferencedValues,
    all_entry_values,
    entry_values,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType
    from typing import Any, Literal, Self

FIRST_IFD_OFFSET = 4
"""Position of entry count of first IFD, following the magic number."""

ENTRY_SIZE = 12
"""Size of directory entry structure in bytes."""


@final
class TiffReader:
    """Open TIFF file for lazily reading its IFDs.

    The file handle is owned by the reader until :py:meth:`TiffReader.ifds`
    hands it over to the returned :py:class:`TiffDocument`.

    Parameters:
        file:
            Specifies TIFF file to read.
            File objects must be open in binary mode and positioned at the
            TIFF header.
        mode:
            File open mode if `file` is file name. The default is 'rb'.
        name:
            Name of file if `file` is file handle.
        offset:
            Start position of embedded file.
            The default is the current file position.
        size:
            Size of embedded file. The default is the number of bytes
            from the `offset` to the end of the file.

    """

    __slots__ = ('_fh',)

    _fh: FileHandle | None

    def __init__(
        self,
        file: str | os.PathLike[Any] | FileHandle | IO[bytes],
        /,
        *,
        mode: Literal['r', 'rb'] | None = None,
        name: str | None = None,
        offset: int | None = None,
        size: int | None = None,
    ) -> None:
        if mode not in {None, 'r', 'rb'}:
            msg = f'invalid {mode=}'
            raise ValueError(msg)
        self._fh = FileHandle(
            file, mode=mode, name=name, offset=offset, size=size
        )

    def ifds(self) -> TiffDocument:
        """Return document to iterate over IFDs after validating header.

        The header must start with byte order mark b'II' or b'MM', followed
        by the magic number 42 in that byte order.

        Raises:
            InvalidFormatError:
                Byte order mark or magic number are invalid.
            UnexpectedEndOfStreamError:
                File is too short to contain a header.
            ValueError:
                IFDs were already requested from this reader.

        """
        fh = self._fh
        if fh is None:
            msg = f'{self!r} was already opened'
            raise ValueError(msg)
        try:
            fh.seek(0)
            bom = fh.read_exact(2, 'while reading byte order mark')
            byteorder = BYTEORDER.frommarker(bom)
            if byteorder is None:
                msg = f'invalid TIFF byte order mark {bom!r}'
                raise InvalidFormatError(msg)
            magic = fh.read_scalar(
                'H', byteorder, 'when reading TIFF magic number'
            )
            if magic != 42:
                msg = f'invalid TIFF magic number {magic}'
                raise InvalidFormatError(msg)
        except Exception:
            fh.close()
            self._fh = None
            raise
        self._fh = None
        logger().debug(f'{fh!r} opened with {byteorder.name} byte order')
        return TiffDocument(fh, byteorder)

    def close(self) -> None:
        """Close file handle if not handed over to document."""
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._fh is None:
            return '<tiffdir.TiffReader closed>'
        return f'<tiffdir.TiffReader {self._fh.name!r}>'


@final
class TiffDocument:
    """Lazy state of TIFF document.

    A document owns the file handle and holds the byte order and the
    position of the next IFD. The position is shared by all
    :py:class:`TiffIfds` iterators derived from the document, such that
    the IFD chain is walked only once.

    TiffDocument instances must be closed with :py:meth:`TiffDocument.close`,
    which is automatically called when using the 'with' context manager.

    TiffDocument instances are not thread-safe.

    Parameters:
        filehandle:
            File handle positioned anywhere in a validated TIFF file.
        byteorder:
            Byte order of TIFF file.
        next_ifd_offset:
            Position of first IFD in file.

    """

    __slots__ = ('_fh', '_visited', 'byteorder', 'next_ifd_offset')

    byteorder: BYTEORDER
    """Byte order of TIFF document."""

    next_ifd_offset: int
    """Position of entry count of next IFD, or 0 if chain is exhausted."""

    _fh: FileHandle
    _visited: set[int]

    def __init__(
        self,
        filehandle: FileHandle,
        byteorder: BYTEORDER,
        /,
        next_ifd_offset: int = FIRST_IFD_OFFSET,
    ) -> None:
        self._fh = filehandle
        self.byteorder = byteorder
        self.next_ifd_offset = int(next_ifd_offset)
        self._visited = set()

    @property
    def filehandle(self) -> FileHandle:
        """File handle."""
        return self._fh

    @property
    def filename(self) -> str:
        """Name of file handle."""
        return self._fh.name

    def close(self) -> None:
        """Close file handle."""
        self._fh.close()

    def __iter__(self) -> TiffIfds:
        return TiffIfds(self)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f'<tiffdir.TiffDocument {self._fh.name!r}>'

    def __str__(self) -> str:
        return '\n '.join(
            (
                'TiffDocument',
                self._fh.name,
                f'{self._fh.size} bytes',
                f'{self.byteorder.name} byte order',
                (
                    'exhausted'
                    if self.next_ifd_offset == 0
                    else f'next IFD @{self.next_ifd_offset}'
                ),
            )
        )


@final
class TiffIfds:
    """Iterator over IFDs of TIFF document.

    Each step reads the entry count of the IFD at the document's next IFD
    position and the position of the following IFD. The chain ends when
    that position is 0 or refers to an IFD that was already read. After an
    error was raised, the document's chain is exhausted.

    Parameters:
        parent: TIFF document to walk IFDs of.

    """

    __slots__ = ('parent',)

    parent: TiffDocument
    """TIFF document IFDs are read from."""

    def __init__(self, parent: TiffDocument, /) -> None:
        self.parent = parent

    def __iter__(self) -> Iterator[TiffIfd]:
        return self

    def __next__(self) -> TiffIfd:
        parent = self.parent
        offset = parent.next_ifd_offset
        if offset == 0:
            raise StopIteration
        if offset in parent._visited:
            logger().error(
                f'{parent!r} invalid circular reference to IFD @{offset}'
            )
            parent.next_ifd_offset = 0
            raise StopIteration
        parent._visited.add(offset)
        fh = parent.filehandle
        byteorder = parent.byteorder
        try:
            with fh.lock:
                fh.seek(offset)
                entry_count = fh.read_scalar(
                    'H', byteorder, 'when reading number of entries in an IFD'
                )
                if entry_count == 0:
                    msg = f'number of entries in IFD @{offset} is zero'
                    raise InvalidFormatError(msg)
                fh.seek(offset + 2 + entry_count * ENTRY_SIZE)
                next_ifd_offset = fh.read_scalar(
                    'H', byteorder, 'when reading the next IFD offset'
                )
        except Exception:
            parent.next_ifd_offset = 0
            raise
        parent.next_ifd_offset = next_ifd_offset
        logger().debug(
            f'{parent!r} IFD @{offset} with {entry_count} entries, '
            f'next IFD @{next_ifd_offset}'
        )
        return TiffIfd(parent, offset, entry_count)

    def __repr__(self) -> str:
        return f'<tiffdir.TiffIfds @{self.parent.next_ifd_offset}>'


@final
class TiffIfd:
    """Iterator over entries of one IFD.

    TiffIfd instances are forward-only and cannot be restarted.
    After an error was raised, no further entries are read.

    Parameters:
        parent:
            TIFF document IFD belongs to.
        offset:
            Position of IFD's entry count in file.
        entry_count:
            Number of entries in IFD.

    """

    __slots__ = ('entry_count', 'index', 'offset', 'parent')

    parent: TiffDocument
    """TIFF document IFD belongs to."""

    offset: int
    """Position of IFD's entry count in file."""

    entry_count: int
    """Number of entries in IFD."""

    index: int
    """Index of next entry."""

    def __init__(
        self, parent: TiffDocument, offset: int, entry_count: int, /
    ) -> None:
        self.parent = parent
        self.offset = int(offset)
        self.entry_count = int(entry_count)
        self.index = 0

    def entryoffset(self, index: int, /) -> int:
        """Return position of entry structure in file."""
        return self.offset + 2 + index * ENTRY_SIZE

    @property
    def nextoffset(self) -> int:
        """Position of the next IFD offset in file."""
        return self.entryoffset(self.entry_count)

    def __iter__(self) -> Iterator[TiffEntry]:
        return self

    def __next__(self) -> TiffEntry:
        if self.index >= self.entry_count:
            raise StopIteration
        try:
            entry = TiffEntry.fromfile(
                self.parent, self.entryoffset(self.index)
            )
        except Exception:
            self.index = self.entry_count
            raise
        self.index += 1
        return entry

    def __repr__(self) -> str:
        return f'<tiffdir.TiffIfd @{self.offset}>'

    def __str__(self) -> str:
        return f'TiffIfd @{self.offset} {self.entry_count} entries'
