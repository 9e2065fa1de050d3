# utils.py

"""Utility functions for tiffdir."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class TiffFileError(ValueError):
    """Exception to indicate invalid TIFF structure."""


class InvalidFormatError(TiffFileError):
    """Exception to indicate violation of TIFF header or IFD structure."""


class UnexpectedEndOfStreamError(TiffFileError, EOFError):
    """Exception to indicate stream ended before a read was complete."""


def logger() -> logging.Logger:
    """Return logger for tiffdir module."""
    return logging.getLogger('tiffdir')


def snipstr(string: str, /, length: int = 16, *, ellipsis: str = '…') -> str:
    """Return string cut to specified length.

    >>> snipstr('abcdefghijklmnop', 8)
    'abcdefg…'

    """
    if length < 1:
        msg = f'invalid {length=}'
        raise ValueError(msg)
    if len(string) <= length:
        return string
    return string[: max(0, length - len(ellipsis))] + ellipsis


def enumstr(enum: Any, /) -> str:
    """Return short string representation of Enum member.

    >>> from tiffdir.enums import DATATYPE
    >>> enumstr(DATATYPE.SHORT)
    'SHORT'
    >>> enumstr(99)
    '99'

    """
    name = getattr(enum, 'name', None)
    if name is None:
        return str(enum)
    return str(name)


def enumarg(enum: type[enum.IntEnum], arg: Any, /) -> enum.IntEnum | int:
    """Return enum member from its name or value, or int if undefined.

    Unlike the strict lookup, unknown integer values are returned as int.

    >>> from tiffdir.enums import DATATYPE
    >>> enumarg(DATATYPE, 3)
    <DATATYPE.SHORT: 3>
    >>> enumarg(DATATYPE, 'ascii')
    <DATATYPE.ASCII: 2>
    >>> enumarg(DATATYPE, 99)
    99

    """
    if isinstance(arg, str):
        try:
            return enum[arg.upper()]
        except KeyError as exc:
            msg = f'invalid argument {arg!r}'
            raise ValueError(msg) from exc
    try:
        return enum(arg)
    except ValueError:
        return int(arg)


def bytes2str(
    b: bytes, /, encoding: str | None = None, errors: str = 'strict'
) -> str:
    """Return Unicode string from encoded bytes up to first NULL character.

    >>> bytes2str(b'Make\\x00')
    'Make'

    """
    i = b.find(b'\x00')
    if i >= 0:
        b = b[:i]
    try:
        return b.decode('utf-8' if encoding is None else encoding, errors)
    except UnicodeDecodeError:
        if encoding is not None:
            raise
        return b.decode('cp1252', 'replace')
