# fileio.py

"""File I/O helpers for tiffdir."""

from __future__ import annotations

import contextlib
import io
import os
import struct
import threading
from typing import IO, TYPE_CHECKING, cast, final

import numpy

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Any, Literal, Self

    from numpy.typing import DTypeLike, NDArray

    from .enums import BYTEORDER

from .utils import UnexpectedEndOfStreamError, snipstr


@final
class NullContext:
    """Null context manager. Can be used as a dummy reentrant lock.

    >>> with NullContext():
    ...     pass
    ...

    """

    __slots__ = ()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        pass

    def __repr__(self) -> str:
        return 'NullContext()'


class FileHandle:
    """Binary file handle.

    A limited, special purpose binary file handle that can:

    - handle embedded files (for example, TIFF within other containers).
    - read exactly sized byte strings, scalars, and NumPy arrays
      in explicit byte order, raising on short reads.

    All positions are relative to the start of the embedded file.
    When initialized from another file handle, do not use the other handle
    unless this FileHandle is closed.

    FileHandle instances are not thread-safe.

    Parameters:
        file:
            File name or seekable binary stream, such as open file
            or BytesIO.
        mode:
            File open mode if `file` is file name.
            The default is 'rb'. Files are always opened in binary mode.
        name:
            Name of file if `file` is binary stream.
        offset:
            Start position of embedded file.
            The default is the current file position.
        size:
            Size of embedded file.
            The default is the number of bytes from `offset` to
            the end of the file.

    """

    __slots__ = (
        '_close',
        '_dir',
        '_fh',
        '_file',
        '_lock',
        '_mode',
        '_name',
        '_offset',
        '_size',
    )

    _file: str | os.PathLike[Any] | FileHandle | IO[bytes] | None
    _fh: IO[bytes] | None
    _mode: str
    _name: str
    _dir: str
    _offset: int
    _size: int
    _close: bool
    _lock: threading.RLock | NullContext

    def __init__(
        self,
        file: str | os.PathLike[Any] | FileHandle | IO[bytes],
        /,
        mode: Literal['r', 'rb'] | None = None,
        *,
        name: str | None = None,
        offset: int | None = None,
        size: int | None = None,
    ) -> None:
        self._mode = 'rb' if mode is None else mode
        self._fh = None
        self._file = file  # reference to original argument for re-opening
        self._name = name if name else ''
        self._dir = ''
        self._offset = -1 if offset is None else offset
        self._size = -1 if size is None else size
        self._close = True
        self._lock = NullContext()
        self.open()
        assert self._fh is not None

    def open(self) -> None:
        """Open or re-open file."""
        if self._fh is not None:
            return  # file is open

        if isinstance(self._file, os.PathLike):
            self._file = os.fspath(self._file)

        if isinstance(self._file, str):
            # file name
            if self._mode[-1:] != 'b':
                self._mode += 'b'
            if self._mode != 'rb':
                msg = f'invalid mode {self._mode}'
                raise ValueError(msg)
            self._file = os.path.realpath(self._file)
            self._dir, self._name = os.path.split(self._file)
            self._fh = open(  # noqa: SIM115
                self._file, self._mode, encoding=None
            )
            self._close = True
            self._offset = max(0, self._offset)
        elif isinstance(self._file, FileHandle):
            # FileHandle
            self._fh = self._file._fh
            self._offset = max(0, self._offset)
            self._offset += self._file._offset
            self._close = False
            if not self._name:
                if self._offset:
                    name, ext = os.path.splitext(self._file._name)
                    self._name = f'{name}@{self._offset}{ext}'
                else:
                    self._name = self._file._name
            self._mode = self._file._mode
            self._dir = self._file._dir
        elif hasattr(self._file, 'seek'):
            # binary stream: open file, BytesIO
            if isinstance(self._file, io.TextIOBase):
                msg = f'{self._file!r} is not open in binary mode'
                raise TypeError(msg)
            self._fh = cast(IO[bytes], self._file)
            try:
                self._fh.tell()
            except Exception:
                msg = 'binary stream is not seekable'
                raise ValueError(msg) from None

            if self._offset < 0:
                self._offset = self._fh.tell()
            self._close = False
            if not self._name:
                try:
                    self._dir, self._name = os.path.split(self._fh.name)
                except (AttributeError, TypeError):
                    self._name = 'Unnamed binary stream'
            with contextlib.suppress(AttributeError):
                self._mode = self._fh.mode
        else:
            msg = (
                'the first parameter must be a file name '
                'or seekable binary file object, '
                f'not {type(self._file)!r}'
            )
            raise ValueError(msg)

        assert self._fh is not None

        if self._offset:
            self._fh.seek(self._offset)

        if self._size < 0:
            pos = self._fh.tell()
            self._fh.seek(0, os.SEEK_END)
            self._size = self._fh.tell() - self._offset
            self._fh.seek(pos)

    def close(self) -> None:
        """Close file handle."""
        if self._close and self._fh is not None:
            with contextlib.suppress(Exception):
                self._fh.close()
        self._fh = None

    def tell(self) -> int:
        """Return file's current position."""
        assert self._fh is not None
        return self._fh.tell() - self._offset

    def seek(self, offset: int, /, whence: int = 0) -> int:
        """Set file's current position.

        Parameters:
            offset:
                Position of file handle relative to position indicated
                by `whence`.
            whence:
                Relative position of `offset`.
                0 (`os.SEEK_SET`) beginning of file (default).
                1 (`os.SEEK_CUR`) current position.
                2 (`os.SEEK_END`) end of file.

        """
        assert self._fh is not None
        if self._offset:
            if whence == 0:
                return (
                    self._fh.seek(self._offset + offset, whence) - self._offset
                )
            if whence == 2 and self._size > 0:
                return (
                    self._fh.seek(self._offset + self._size + offset, 0)
                    - self._offset
                )
        return self._fh.seek(offset, whence)

    def read(self, size: int = -1, /) -> bytes:
        """Return bytes read from file.

        Parameters:
            size:
                Number of bytes to read from file.
                By default, read until the end of the file.

        """
        if size < 0 and self._offset:
            size = self._size
        assert self._fh is not None
        return self._fh.read(size)

    def read_exact(self, size: int, /, what: str = '') -> bytes:
        """Return exactly `size` bytes read from file.

        Parameters:
            size:
                Number of bytes to read from file.
            what:
                Description of the read operation, used in error messages.

        Raises:
            UnexpectedEndOfStreamError:
                File ended before `size` bytes could be read.

        """
        assert self._fh is not None
        data = self._fh.read(size)
        if len(data) != size:
            msg = (
                f'unexpected end of stream {what}'.rstrip()
                + f', expected {size} bytes, got {len(data)}'
            )
            raise UnexpectedEndOfStreamError(msg)
        return data

    def read_scalar(
        self, fmt: str, byteorder: BYTEORDER, /, what: str = ''
    ) -> Any:
        """Return one scalar read from file in byte order.

        Parameters:
            fmt:
                Single `struct` format character, for example 'H' for
                unsigned 16-bit or 'f' for 32-bit float.
            byteorder:
                Byte order of value in file.
            what:
                Description of the read operation, used in error messages.

        Raises:
            UnexpectedEndOfStreamError:
                File ended before the value could be read.

        """
        fmt = byteorder.value + fmt
        data = self.read_exact(struct.calcsize(fmt), what)
        return struct.unpack(fmt, data)[0]

    def read_array(
        self,
        dtype: DTypeLike | None,
        count: int,
        /,
        what: str = '',
    ) -> NDArray[Any]:
        """Return NumPy array from file in native byte order.

        Parameters:
            dtype:
                Data type of array to read, including byte order.
            count:
                Number of items to read.
            what:
                Description of the read operation, used in error messages.

        Raises:
            UnexpectedEndOfStreamError:
                File ended before all items could be read.

        """
        dtype = numpy.dtype(dtype)
        data = self.read_exact(count * dtype.itemsize, what)
        result = numpy.frombuffer(data, dtype, count)
        if not dtype.isnative:
            # byteswap to native byte order (one copy)
            return result.byteswap().view(dtype.newbyteorder())
        return result.copy()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
        self._file = None

    def __repr__(self) -> str:
        return f'<tiffdir.FileHandle {snipstr(self._name, 32)!r}>'

    def __str__(self) -> str:
        return '\n '.join(
            (
                'FileHandle',
                self._name,
                self._dir,
                f'{self._size} bytes',
                'closed' if self._fh is None else 'open',
            )
        )

    @property
    def name(self) -> str:
        """Name of file or stream."""
        return self._name

    @property
    def dirname(self) -> str:
        """Directory in which file is stored."""
        return self._dir

    @property
    def path(self) -> str:
        """Absolute path of file."""
        return os.path.join(self._dir, self._name)

    @property
    def size(self) -> int:
        """Size of file in bytes."""
        return self._size

    @property
    def closed(self) -> bool:
        """File is closed."""
        return self._fh is None

    @property
    def lock(self) -> threading.RLock | NullContext:
        """Reentrant lock to synchronize seeks and reads."""
        return self._lock

    @lock.setter
    def lock(self, value: bool, /) -> None:
        self.set_lock(value)

    def set_lock(self, lock: bool) -> None:  # noqa: FBT001
        """Set reentrant lock to synchronize seeks and reads."""
        if bool(lock) == isinstance(self._lock, NullContext):
            self._lock = threading.RLock() if lock else NullContext()

    @property
    def has_lock(self) -> bool:
        """A reentrant lock is currently used to sync seeks and reads."""
        return not isinstance(self._lock, NullContext)
