# Copyright (c) 2026, hexxer developers
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
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

r"""Generic utility functions."""

import contextlib
import io
import os
import re
import sys
from typing import IO
from typing import Any
from typing import Iterator
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import TypeVar
from typing import Union

from .base import AnyBytes
from .base import AnyPath
from .base import ConfigError
from .base import SourceReadError

SUFFIX_SCALE: Mapping[str, int] = {
    **{unit: 1 << (10 * power) for power, unit in enumerate('kmgt', 1)},
    **{unit + 'ib': 1 << (10 * power) for power, unit in enumerate('kmgt', 1)},
    **{unit + 'b': 10 ** (3 * power) for power, unit in enumerate('kmgt', 1)},
}
r"""Integer suffix to scale factor: ``k``/``kib`` are binary, ``kb`` decimal."""

_INT_REGEX = re.compile(r'^(?P<sign>[+-]?)\s*'
                        r'(?P<prefix>0[xbo]?)?'
                        r'(?P<digits>[0-9a-f]+)'
                        r'(?P<hex>h?)\s*'
                        r'(?P<scale>[kmgt](i?b)?)?$')

_PREFIX_RADIX: Mapping[str, int] = {'': 10, '0': 8, '0o': 8, '0b': 2, '0x': 16}

DISCARD_BLOCK_SIZE = 4096
r"""Bytes read at once while discarding input."""

_T = TypeVar('_T')


def chop(
    vector: Sequence[_T],
    window: int,
) -> Iterator[Sequence[_T]]:
    r"""Yields consecutive `window` long slices of `vector`.

    The last slice is shorter if the length of `vector` is not a multiple
    of `window`.

    Examples:
        >>> list(chop('ABCDEFG', 3))
        ['ABC', 'DEF', 'G']
    """
    window = int(window)
    if window < 1:
        raise ValueError('non-positive window')

    for index in range(0, len(vector), window):
        yield vector[index:index + window]


def parse_int(
    value: Union[str, Any],
) -> Optional[int]:
    r"""Parses an integer from command line text.

    Strings are case-insensitive. A ``0x`` prefix or an ``h`` postfix
    selects hexadecimal, ``0b`` binary, ``0o`` or a bare leading ``0``
    octal. A trailing :data:`SUFFIX_SCALE` unit multiplies the value.
    ``None`` passes through, other objects go through :func:`int`.

    Examples:
        >>> parse_int('-0x10')
        -16

        >>> parse_int('2 KiB')
        2048

        >>> parse_int('0Ah')
        10
    """
    if value is None:
        return None

    if not isinstance(value, str):
        return int(value)

    match = _INT_REGEX.match(value.strip().lower())
    if not match:
        raise ValueError(f'invalid syntax: {value!r}')

    prefix = match.group('prefix') or ''
    if match.group('hex'):
        if prefix in ('0b', '0o'):
            raise ValueError(f'invalid syntax: {value!r}')
        radix = 16
    else:
        radix = _PREFIX_RADIX[prefix]

    result = int(match.group('digits'), radix)
    result *= SUFFIX_SCALE.get(match.group('scale') or '', 1)
    return -result if match.group('sign') == '-' else result


def discard_bytes(stream: IO, size: int) -> int:
    r"""Discards bytes from a forward-only stream.

    Args:
        stream (stream):
            Readable binary stream.

        size (int):
            Number of bytes to discard.

    Returns:
        int: Number of bytes actually discarded; less than `size` only if the
        end of the stream was reached.

    Examples:
        >>> import io
        >>> stream = io.BytesIO(b'abcdef')
        >>> discard_bytes(stream, 4), stream.read()
        (4, b'ef')
    """

    discarded = 0
    while discarded < size:
        chunk = stream.read(min(DISCARD_BLOCK_SIZE, size - discarded))
        if not chunk:
            break
        discarded += len(chunk)
    return discarded


def is_seekable(stream: IO) -> bool:

    seekable = getattr(stream, 'seekable', None)
    try:
        return bool(seekable and seekable())
    except ValueError:  # closed stream
        return False


@contextlib.contextmanager
def open_source(
    infile: Optional[Union[AnyPath, AnyBytes, IO]] = None,
    seek: Optional[int] = None,
) -> Iterator[Tuple[IO, int]]:
    r"""Opens a byte source at the requested position.

    Files opened here are closed when leaving the context, on every exit path.
    Streams provided by the caller are left open.

    Args:
        infile (str or bytes or stream):
            Input data.
            If :obj:`str` or path-like, it is considered as the input file
            path.
            If :obj:`bytes`, it is the input byte chunk.
            If ``None``, it reads from the standard input.
            Otherwise it is a readable binary stream.

        seek (int):
            Input position.
            A non-negative value is an absolute position from the start;
            a negative value is relative to the end of the input, and
            requires a seekable input.
            If ``None``, the current position is kept.

    Yields:
        couple: ``(stream, position)``, where `position` is the actual stream
        position of the next byte to read.

    Raises:
        :class:`ConfigError`: negative seek on a non-seekable input.
        :class:`SourceReadError`: input error while seeking.
    """

    close = False
    if infile is None:
        stream = sys.stdin.buffer
    elif isinstance(infile, (str, os.PathLike)):
        stream = open(infile, 'rb')
        close = True
    elif isinstance(infile, (bytes, bytearray, memoryview)):
        stream = io.BytesIO(infile)
    else:
        stream = infile

    try:
        seekable = is_seekable(stream)
        try:
            if seek is None:
                position = stream.tell() if seekable else 0

            elif seekable:
                if seek < 0:
                    size = stream.seek(0, io.SEEK_END)
                    position = stream.seek(max(0, size + seek), io.SEEK_SET)
                else:
                    position = stream.seek(seek, io.SEEK_SET)

            elif seek < 0:
                raise ConfigError('negative seek requires a seekable input')

            else:
                position = discard_bytes(stream, seek)

        except OSError as exc:
            raise SourceReadError(f'cannot seek input: {exc}') from exc

        yield stream, position

    finally:
        if close:
            stream.close()
