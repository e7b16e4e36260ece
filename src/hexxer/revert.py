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

r"""Dump parser: dump text back to bytes.

Each line is decoded on its own: offsets embedded in the offset panel are
honored, so that lines may come in any order and leave gaps (e.g. a dump of
just the modified regions of a larger file).
Only the numeric panel is decoded; the text panel glyphs are only counted.
"""

import io
import logging
import os
import re
import sys
from typing import IO
from typing import Callable
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from .base import AnyBytes
from .base import AnyPath
from .base import ConfigError
from .base import MalformedLine
from .base import MalformedToken
from .base import MissingOffset
from .base import NumericBase
from .base import ParseError
from .base import SourceReadError
from .layout import LayoutModel
from .octets import parse_offset
from .octets import parse_octet
from .sink import SparseByteSink
from .sink import SparseWrite
from .utils import chop

_log = logging.getLogger(__name__)

_GROUP_REGEX = re.compile(r'(?P<space>\s*)(?P<group>\S+)')

ErrorHandler = Callable[[ParseError], None]


def _split_offset(text: str, layout: LayoutModel) -> Tuple[int, str]:

    head, sep, panel = text.partition(':')
    if not sep:
        raise MissingOffset('missing offset separator')

    displayed = parse_offset(head, layout.decimal_offset)
    offset = displayed - layout.display_bias
    if offset < 0:
        raise MissingOffset(f'offset before display offset: {head.strip()!r}')
    return offset, panel


def _tokenize(panel: str, layout: LayoutModel) -> List[int]:

    base = layout.base
    width = layout.token_width
    limit = layout.line_columns
    text_panel = layout.show_text
    values: List[int] = []

    for match in _GROUP_REGEX.finditer(panel):
        if text_panel and values and len(match.group('space')) >= 2:
            break  # text panel boundary

        if limit and len(values) >= limit:
            if text_panel:
                # the rest is the text panel: one glyph per octet, no spaces
                glyphs = panel[match.start('group'):].rstrip()
                if len(glyphs) != len(values) or len(glyphs.split()) > 1:
                    raise MalformedLine(f'more than {limit} tokens')
                break
            raise MalformedLine(f'more than {limit} tokens')

        group = match.group('group')
        if len(group) % width:
            raise MalformedToken(f'group width is not a multiple of {width}: {group!r}')

        tokens = list(chop(group, width))
        if limit and len(values) + len(tokens) > limit:
            raise MalformedLine(f'more than {limit} tokens')

        values.extend(parse_octet(token, base) for token in tokens)

    return values


def parse_line(
    text: str,
    layout: LayoutModel,
    offset: int = 0,
) -> Tuple[int, List[int]]:
    r"""Parses a single dump line.

    Args:
        text (str):
            Line text, without line terminator.

        layout (:class:`LayoutModel`):
            Expected dump layout.

        offset (int):
            Offset of the line, used only when the layout has no offset panel.

    Returns:
        couple: ``(offset, values)``, where `offset` is the actual offset of
        the first octet, and `values` is the list of octet values.

    Raises:
        :class:`MissingOffset`: invalid offset panel.
        :class:`MalformedToken`: invalid numeric token.
        :class:`MalformedLine`: too many tokens.

    Examples:
        >>> layout = LayoutModel(columns=4)
        >>> parse_line('00000010: 4142 4344 ABCD', layout)
        (16, [65, 66, 67, 68])
        >>> parse_line('00000004: 4546      EF', layout)
        (4, [69, 70])
        >>> plain = LayoutModel.plain_layout(columns=0)
        >>> parse_line('deadbeef', plain, offset=8)
        (8, [222, 173, 190, 239])
    """

    if layout.show_offset:
        offset, panel = _split_offset(text, layout)
    else:
        panel = text

    values = _tokenize(panel, layout)
    return offset, values


def _decode_line(line: Union[str, AnyBytes], encoding: str) -> str:

    if isinstance(line, (bytes, bytearray, memoryview)):
        line = bytes(line).decode(encoding, errors='replace')
    return line.rstrip('\r\n')


def iter_revert_writes(
    lines: Iterable[Union[str, AnyBytes]],
    layout: LayoutModel,
    start: int = 0,
    on_error: Optional[ErrorHandler] = None,
    encoding: str = 'utf-8',
) -> Iterator[SparseWrite]:
    r"""Parses dump lines into sparse writes.

    Malformed lines do not stop parsing: each offending line is skipped, and
    its error is passed to `on_error`, or logged as a warning if `on_error`
    is ``None``.
    Blank lines are ignored.

    Without offset panel, each line is expected to follow the previous one;
    a skipped line is assumed to hold a full line of octets.

    Args:
        lines (iterable):
            Dump text lines, as :obj:`str` or :obj:`bytes`.

        layout (:class:`LayoutModel`):
            Expected dump layout.

        start (int):
            Offset of the first line, when the layout has no offset panel.

        on_error (callable):
            Called with each :class:`ParseError`, which holds the line number
            and text.

        encoding (str):
            Encoding of :obj:`bytes` lines.

    Yields:
        :class:`SparseWrite`: Octets in line order, left to right.

    Examples:
        >>> layout = LayoutModel(columns=2)
        >>> lines = ['00000010: 4142  AB', '00000030: 43  C']
        >>> [tuple(write) for write in iter_revert_writes(lines, layout)]
        [(16, 65), (17, 66), (48, 67)]
    """

    cursor = start.__index__()
    skip = layout.line_columns

    for number, line in enumerate(lines, 1):
        text = _decode_line(line, encoding)
        if not text.strip():
            continue

        try:
            offset, values = parse_line(text, layout, cursor)

        except ParseError as exc:
            exc.line_number = number
            exc.line = text
            if on_error is None:
                _log.warning('skipping %s', exc)
            else:
                on_error(exc)
            if not layout.show_offset:
                cursor += skip
            continue

        for index, value in enumerate(values):
            yield SparseWrite(offset + index, value)

        cursor = offset + len(values)


def _iter_source_lines(stream: IO) -> Iterator[bytes]:

    lines = iter(stream)
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except OSError as exc:
            raise SourceReadError(f'cannot read input: {exc}') from exc
        yield line


def revert_core(
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
    start: int = 0,
    fill: Optional[int] = 0,
    absolute: bool = False,
    patch: bool = False,
    on_error: Optional[ErrorHandler] = None,
    encoding: str = 'utf-8',
) -> IO:
    r"""Converts dump text back into binary data.

    Args:
        infile (str or bytes):
            Input dump text.
            If :obj:`str`, it is considered as the input file path.
            If :obj:`bytes`, it is the input text chunk.
            If ``None``, it reads from the standard input.

        outfile (str or stream):
            Output data.
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
            Plain dump: no offset panel, no text panel.

        show_offset (bool):
            Lines have the offset panel.

        show_text (bool):
            Lines have the text panel.

        decimal_offset (bool):
            Offsets are in base 10.

        offset (int):
            Display offset added to the file positions found in the dump;
            it is subtracted back.

        start (int):
            Offset of the first line, when lines have no offset panel.

        fill (int):
            Octet value for offsets not found in the dump.
            If ``None``, gaps raise :class:`hexxer.base.IncompleteRange`.

        absolute (bool):
            Output data starts from offset zero, rather than from the lowest
            offset found.

        patch (bool):
            Writes each contiguous run at its own offset into the output,
            without truncating it; offsets not found in the dump keep their
            original content.
            The output must be seekable.

        on_error (callable):
            Called with each malformed line error; ``None`` logs a warning.

        encoding (str):
            Input text encoding.

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

    if patch and outfile is None:
        raise ConfigError('patch mode requires a seekable output')

    instream: Optional[IO] = None
    outstream: Optional[IO] = None
    sink = SparseByteSink()

    try:
        # Input stream binding
        if infile is None:
            instream = sys.stdin.buffer
        elif isinstance(infile, (str, os.PathLike)):
            instream = open(infile, 'rb')
        elif isinstance(infile, (bytes, bytearray, memoryview)):
            instream = io.BytesIO(infile)
        else:
            instream = infile

        writes = iter_revert_writes(_iter_source_lines(instream), layout, start=start,
                                    on_error=on_error, encoding=encoding)
        sink.record_all(writes)
        _log.debug('reverted %d octets within %r', len(sink), sink.span)

        # Output stream binding
        if outfile is None:
            outstream = sys.stdout.buffer
        elif isinstance(outfile, (str, os.PathLike)):
            mode = 'r+b' if patch and os.path.exists(outfile) else 'wb'
            outstream = open(outfile, mode)
        else:
            outstream = outfile

        if patch:
            for address, data in sink.blocks():
                outstream.seek(address, io.SEEK_SET)
                outstream.write(data)
        else:
            data = sink.materialize(fill=fill, start=(0 if absolute else None))
            outstream.write(data)

        outstream.flush()

    finally:
        if instream is not None and isinstance(infile, (str, os.PathLike)):
            instream.close()

        if outstream is not None and isinstance(outfile, (str, os.PathLike)):
            outstream.close()

    return outstream
