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

r"""Dump formatter: bytes to dump text."""

import logging
import os
import sys
from typing import IO
from typing import Callable
from typing import Iterator
from typing import NamedTuple
from typing import Optional
from typing import Tuple
from typing import Union

from .base import AnyBytes
from .base import AnyPath
from .base import ConfigError
from .base import DisplayClass
from .base import NumericBase
from .base import SourceReadError
from .colors import ColorChoice
from .colors import ColorToken
from .colors import colorize_line
from .colors import resolve_color
from .layout import LayoutModel
from .octets import DISPLAY_CLASSES
from .octets import GLYPHS
from .octets import OCTET_TOKENS
from .octets import format_offset
from .utils import open_source

_log = logging.getLogger(__name__)


class DumpLine(NamedTuple):
    r"""A rendered dump line.

    Attributes:
        start_offset (int):
            Displayed offset of the first octet of the line.

        octets (tuple):
            ``(value, display_class)`` couples of the octets of the line.
            There are fewer octets than the layout columns only on the last
            line.

        parity (bool):
            Alternate row flag; toggles at each line.
            It only affects coloring.

        tokens (tuple):
            ``(color_key, text)`` couples, in rendering order.
            The color key is ``None`` for separators and padding.
    """

    start_offset: int
    octets: Tuple[Tuple[int, DisplayClass], ...]
    parity: bool
    tokens: Tuple[ColorToken, ...]

    @property
    def text(self) -> str:
        r"""Rendered line text, without line terminator."""
        return ''.join(text for _, text in self.tokens)

    @property
    def data(self) -> bytes:
        r"""Octets of the line, as a byte string."""
        return bytes(value for value, _ in self.octets)


def _read_chunk(read: Callable[[int], bytes], size: int) -> bytes:

    chunk = read(size)
    if chunk and len(chunk) < size:
        # Short reads from pipes are not the end of input
        buffer = bytearray(chunk)
        while len(buffer) < size:
            more = read(size - len(buffer))
            if not more:
                break
            buffer.extend(more)
        chunk = bytes(buffer)
    return chunk


def _render_line(
    offset: int,
    chunk: AnyBytes,
    layout: LayoutModel,
    parity: bool,
) -> DumpLine:

    classes = DISPLAY_CLASSES
    table = OCTET_TOKENS[layout.base]
    octets = tuple((value, classes[value]) for value in chunk)
    tokens = []
    append = tokens.append

    if layout.plain:
        append((None, ''.join(table[value] for value in chunk)))
        return DumpLine(offset, octets, parity, tuple(tokens))

    if layout.show_offset:
        append(('offset', format_offset(offset, layout.decimal_offset) + ': '))

    grouping = layout.grouping
    for index, value in enumerate(chunk):
        if index and index % grouping == 0:
            append((None, ' '))
        append((classes[value].value, table[value]))

    # Panel separator, then padding to keep the text panel aligned
    padding = [' ']
    blank = ' ' * layout.token_width
    for index in range(len(chunk), layout.line_columns):
        if index % grouping == 0:
            padding.append(' ')
        padding.append(blank)
    append((None, ''.join(padding)))

    if layout.show_text:
        for value in chunk:
            klass = classes[value]
            key = 'glyph' if klass is DisplayClass.PRINTABLE else klass.value
            append((key, GLYPHS[value]))

    return DumpLine(offset, octets, parity, tuple(tokens))


def iter_dump_lines(
    source: IO,
    layout: LayoutModel,
    start: int = 0,
    length: Optional[int] = None,
) -> Iterator[DumpLine]:
    r"""Formats a byte source into dump lines.

    The source is read forward only, once, one line at a time; the iterator
    can be abandoned at any line boundary.
    Iteration ends when the source has no more data, or when `length` octets
    have been read.

    Args:
        source (stream):
            Readable binary stream, already at the position to dump.

        layout (:class:`LayoutModel`):
            Dump layout.

        start (int):
            Actual stream position of the first octet.
            The displayed offsets start at ``start + layout.display_bias``.

        length (int):
            Maximum number of octets to read; ``None`` for unbounded.

    Yields:
        :class:`DumpLine`: Rendered lines.

    Raises:
        :class:`ConfigError`: negative displayed offset or length.
        :class:`SourceReadError`: the source failed; no partial line is
        yielded.

    Examples:
        >>> import io
        >>> layout = LayoutModel(columns=4)
        >>> for line in iter_dump_lines(io.BytesIO(b'ABCDEF'), layout):
        ...     print(repr(line.text))
        '00000000: 4142 4344 ABCD'
        '00000004: 4546      EF'
    """

    offset = start + layout.display_bias
    if offset < 0:
        raise ConfigError(f'negative displayed offset: {offset!r}')

    if length is not None:
        length = length.__index__()
        if length < 0:
            raise ConfigError(f'negative length: {length!r}')

    read = source.read
    read_size = layout.read_size
    total = 0
    parity = False

    while True:
        if length is None:
            size = read_size
        else:
            size = min(read_size, length - total)
            if size <= 0:
                break

        try:
            chunk = _read_chunk(read, size)
        except OSError as exc:
            raise SourceReadError(f'cannot read input: {exc}') from exc

        if not chunk:
            break

        yield _render_line(offset, chunk, layout, parity)

        total += len(chunk)
        offset += len(chunk)
        parity = not parity


def iter_dump_text(
    source: IO,
    layout: LayoutModel,
    start: int = 0,
    length: Optional[int] = None,
    color: bool = False,
    linesep: str = '\n',
) -> Iterator[str]:
    r"""Formats a byte source into dump text.

    Like :func:`iter_dump_lines`, but yields the rendered text, with line
    terminators.
    An unbounded plain layout yields a single line, terminated only once at
    the end of the input (or not at all for empty input).

    Args:
        source (stream):
            Readable binary stream, already at the position to dump.

        layout (:class:`LayoutModel`):
            Dump layout.

        start (int):
            Actual stream position of the first octet.

        length (int):
            Maximum number of octets to read; ``None`` for unbounded.

        color (bool):
            Colors annotated lines with ANSI codes.

        linesep (str):
            Line terminator.

    Yields:
        str: Rendered text chunks.

    Examples:
        >>> import io
        >>> layout = LayoutModel.plain_layout(columns=0)
        >>> ''.join(iter_dump_text(io.BytesIO(b'\xDE\xAD\xBE\xEF'), layout))
        'deadbeef\n'
    """

    unbounded = layout.plain and not layout.line_columns
    color = color and not layout.plain
    emitted = False

    for line in iter_dump_lines(source, layout, start=start, length=length):
        text = colorize_line(line) if color else line.text
        if unbounded:
            emitted = True
            yield text
        else:
            yield text + linesep

    if unbounded and emitted:
        yield linesep


def dump_core(
    infile: Optional[Union[AnyPath, AnyBytes, IO]] = None,
    outfile: Optional[Union[AnyPath, IO]] = None,
    columns: Optional[int] = None,
    grouping: int = 2,
    base: Union[NumericBase, str] = NumericBase.HEX,
    plain: bool = False,
    show_offset: bool = True,
    show_text: bool = True,
    decimal_offset: bool = False,
    offset: int = 0,
    seek: Optional[int] = None,
    length: Optional[int] = None,
    color: Union[ColorChoice, str, bool, None] = None,
    linesep: Optional[str] = None,
    encoding: str = 'utf-8',
) -> IO:
    r"""Dumps binary data as text.

    Args:
        infile (str or bytes):
            Input data.
            If :obj:`str`, it is considered as the input file path.
            If :obj:`bytes`, it is the input byte chunk.
            If ``None``, it reads from the standard input.

        outfile (str or stream):
            Output text.
            If :obj:`str`, it is considered as the output file path.
            If ``None``, it writes to the standard output.
            Otherwise it is a writable binary stream.

        columns (int):
            Octets per line; see :class:`LayoutModel`.

        grouping (int):
            Octets per group.

        base (:class:`NumericBase` or str):
            Numeric base of the octet tokens.

        plain (bool):
            Plain dump: no offset panel, no text panel, no separators.

        show_offset (bool):
            Shows the offset panel.

        show_text (bool):
            Shows the text panel.

        decimal_offset (bool):
            Shows offsets in base 10.

        offset (int):
            Added to the displayed file position.

        seek (int):
            Input position to start from; negative values count from the end
            of the input.

        length (int):
            Stops after `length` octets.

        color (:class:`ColorChoice` or str or bool):
            Coloring policy; ``None`` is *auto*.

        linesep (str):
            Line separator.
            If ``None``, it defaults to :data:`os.linesep`.

        encoding (str):
            Output text encoding.

    Returns:
        stream: The handle to the output stream.
    """

    if plain:
        show_offset = False
        show_text = False

    layout = LayoutModel(
        columns=columns,
        grouping=grouping,
        base=base,
        show_offset=show_offset,
        show_text=show_text,
        decimal_offset=decimal_offset,
        display_bias=offset,
    )

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

        colored = resolve_color(color, outstream)
        write = outstream.write

        with open_source(infile, seek) as (instream, position):
            _log.debug('dumping from input position %d with %r', position, layout)
            chunks = iter_dump_text(instream, layout, start=position, length=length,
                                    color=colored, linesep=linesep)
            for text in chunks:
                write(text.encode(encoding))

        outstream.flush()

    finally:
        if outstream is not None and isinstance(outfile, (str, os.PathLike)):
            outstream.close()

    return outstream
