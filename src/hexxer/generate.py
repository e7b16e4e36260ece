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

r"""Source code array generation."""

import enum
import io
import os
import re
import sys
from typing import IO
from typing import Iterator
from typing import Optional
from typing import Union

from .base import AnyBytes
from .base import AnyPath
from .base import ConfigError
from .base import NumericBase
from .base import SourceReadError
from .octets import format_octet
from .utils import is_seekable
from .utils import open_source

DEFAULT_ARRAY_COLUMNS: int = 12
r"""Default array items per line."""

DEFAULT_ARRAY_NAME: str = 'data'
r"""Array name when it cannot be derived from the input file name."""


class Language(enum.Enum):
    r"""Target programming language."""

    C = 'c'
    CPP = 'cpp'
    RUST = 'rust'
    PYTHON = 'python'


def _literal_prefix(base: NumericBase, language: Language) -> str:

    if base is NumericBase.HEX:
        return '0x'
    elif base is NumericBase.BINARY:
        return '0b'
    elif base is NumericBase.OCTAL:
        return '0' if language in (Language.C, Language.CPP) else '0o'
    else:
        return ''


def format_literal(
    value: int,
    base: NumericBase = NumericBase.HEX,
    language: Language = Language.C,
) -> str:
    r"""Renders an octet as a source code integer literal.

    Args:
        value (int):
            Octet value.

        base (:class:`NumericBase`):
            Numeric base of the literal.

        language (:class:`Language`):
            Target language, which selects the literal prefix.

    Returns:
        str: Integer literal.

    Examples:
        >>> format_literal(10)
        '0x0a'
        >>> format_literal(8, NumericBase.OCTAL, Language.PYTHON)
        '0o010'
        >>> format_literal(7, NumericBase.DECIMAL)
        '7'
    """

    if base is NumericBase.DECIMAL:
        return str(value.__index__())
    return _literal_prefix(base, language) + format_octet(value, base)


def make_array_name(path: Optional[str], capitalize: bool = False) -> str:
    r"""Derives an array name from a file path.

    Args:
        path (str):
            Input file path; ``None`` selects :data:`DEFAULT_ARRAY_NAME`.

        capitalize (bool):
            Converts the name to upper case.

    Returns:
        str: Valid identifier.

    Examples:
        >>> make_array_name('images/logo-2.png')
        'logo_2_png'
        >>> make_array_name('1.bin', capitalize=True)
        '_1_BIN'
    """

    if path:
        name = re.sub('[^0-9a-zA-Z]+', '_', os.path.basename(str(path)))
        if not name or name[0].isdigit():
            name = '_' + name
    else:
        name = DEFAULT_ARRAY_NAME

    if capitalize:
        name = name.upper()
    return name


def _header(language: Language, name: str, size: Optional[int], vector: bool) -> str:

    if language is Language.C:
        return f'#include <stdint.h>\n\nuint8_t {name}[] = {{'

    elif language is Language.CPP:
        if vector:
            return (f'#include <vector>\n#include <cstdint>\n\n'
                    f'std::vector<uint8_t> {name} = {{')
        else:
            return (f'#include <array>\n#include <cstdint>\n\n'
                    f'std::array<uint8_t, {size}> {name} = {{')

    elif language is Language.RUST:
        if vector:
            return f'pub static {name}: &[u8] = &['
        else:
            return f'pub const {name}: [u8; {size}] = ['

    else:
        return f'{name} = ['


def _read(source: IO, size: int) -> bytes:

    try:
        return source.read(size)
    except OSError as exc:
        raise SourceReadError(f'cannot read input: {exc}') from exc


_FOOTERS = {
    Language.C: '};',
    Language.CPP: '};',
    Language.RUST: '];',
    Language.PYTHON: ']',
}


def iter_array_text(
    source: IO,
    language: Union[Language, str] = Language.C,
    name: str = DEFAULT_ARRAY_NAME,
    base: Union[NumericBase, str] = NumericBase.HEX,
    columns: Optional[int] = None,
    length: Optional[int] = None,
    size: Optional[int] = None,
    vector: bool = False,
    linesep: str = '\n',
) -> Iterator[str]:
    r"""Formats a byte source into a source code array definition.

    Args:
        source (stream):
            Readable binary stream, already at the position to convert.

        language (:class:`Language` or str):
            Target programming language.

        name (str):
            Array variable name.

        base (:class:`NumericBase` or str):
            Numeric base of the array items.

        columns (int):
            Array items per line; ``None`` or zero selects
            :data:`DEFAULT_ARRAY_COLUMNS`.

        length (int):
            Maximum number of octets to read; ``None`` for unbounded.

        size (int):
            Number of octets that will be read, when known.
            Fixed-size arrays need it in advance: if ``None``, the whole input
            is buffered to count it.

        vector (bool):
            Uses a growable container (C++, Rust) instead of a fixed-size
            array.

        linesep (str):
            Line terminator.

    Yields:
        str: Lines of source code, with line terminators.

    Examples:
        >>> import io
        >>> lines = iter_array_text(io.BytesIO(b'\x01\x02\x03'), 'python', columns=2)
        >>> print(''.join(lines), end='')
        data = [
          0x01, 0x02,
          0x03,
        ]
    """

    language = Language(language)
    base = NumericBase.parse(base)
    columns = (columns or DEFAULT_ARRAY_COLUMNS).__index__()
    if columns < 0:
        raise ConfigError(f'invalid column count: {columns!r}')
    if length is not None and length < 0:
        raise ConfigError(f'negative length: {length!r}')

    sized = not vector and language in (Language.CPP, Language.RUST)
    if sized and size is None:
        data = _read(source, -1 if length is None else length)
        source = io.BytesIO(data)
        size = len(data)
    elif size is not None and length is not None:
        size = min(size, length)

    header = _header(language, name, size, vector)
    yield header.replace('\n', linesep) + linesep

    total = 0

    while True:
        if length is None:
            chunk = _read(source, columns)
        else:
            chunk = _read(source, min(columns, length - total))
        if not chunk:
            break

        items = ', '.join(format_literal(value, base, language) for value in chunk)
        yield f'  {items},{linesep}'
        total += len(chunk)

    yield _FOOTERS[language] + linesep


def generate_core(
    infile: Optional[Union[AnyPath, AnyBytes, IO]] = None,
    outfile: Optional[Union[AnyPath, IO]] = None,
    language: Union[Language, str] = Language.C,
    name: Optional[str] = None,
    capitalize: bool = False,
    vector: bool = False,
    base: Union[NumericBase, str] = NumericBase.HEX,
    columns: Optional[int] = None,
    seek: Optional[int] = None,
    length: Optional[int] = None,
    linesep: Optional[str] = None,
) -> IO:
    r"""Converts binary data into a source code array definition.

    Args:
        infile (str or bytes):
            Input data.
            If :obj:`str`, it is considered as the input file path.
            If :obj:`bytes`, it is the input byte chunk.
            If ``None``, it reads from the standard input.

        outfile (str or stream):
            Output source code.
            If :obj:`str`, it is considered as the output file path.
            If ``None``, it writes to the standard output.
            Otherwise it is a writable binary stream.

        language (:class:`Language` or str):
            Target programming language.

        name (str):
            Array variable name.
            If ``None``, it is derived from the input file name.

        capitalize (bool):
            Converts the array variable name to upper case.

        vector (bool):
            Uses a growable container (C++, Rust).

        base (:class:`NumericBase` or str):
            Numeric base of the array items.

        columns (int):
            Array items per line.

        seek (int):
            Input position to start from; negative values count from the end
            of the input.

        length (int):
            Stops after `length` octets.

        linesep (str):
            Line separator.
            If ``None``, it defaults to :data:`os.linesep`.

    Returns:
        stream: The handle to the output stream.
    """

    if name is None:
        path = infile if isinstance(infile, (str, os.PathLike)) else None
        name = make_array_name(path, capitalize=capitalize)
    elif capitalize:
        name = name.upper()

    if linesep is None:
        linesep = os.linesep

    outstream: Optional[IO] = None
    try:
        # Output stream binding
        if outfile is None:
            outstream = sys.stdout.buffer
        elif isinstance(outfile, (str, os.PathLike)):
            outstream = open(outfile, 'wb')
        else:
            outstream = outfile

        with open_source(infile, seek) as (instream, position):
            size = None
            if is_seekable(instream):
                size = max(0, instream.seek(0, io.SEEK_END) - position)
                instream.seek(position, io.SEEK_SET)

            lines = iter_array_text(instream, language=language, name=name,
                                    base=base, columns=columns, length=length,
                                    size=size, vector=vector, linesep=linesep)
            for line in lines:
                outstream.write(line.encode())

        outstream.flush()

    finally:
        if outstream is not None and isinstance(outfile, (str, os.PathLike)):
            outstream.close()

    return outstream
