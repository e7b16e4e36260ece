import io
import re

import pytest
from test_base import replace_stdin
from test_base import replace_stdout

from hexxer.base import ConfigError
from hexxer.base import DisplayClass
from hexxer.base import SourceReadError
from hexxer.dump import DumpLine
from hexxer.dump import dump_core
from hexxer.dump import iter_dump_lines
from hexxer.dump import iter_dump_text
from hexxer.layout import LayoutModel

ANSI_REGEX = re.compile(r'\x1b\[[0-9;]*m')

HELLO = b'Hello, World!\n'


class TrickleStream:

    def __init__(self, data):
        self._stream = io.BytesIO(data)

    def read(self, size=-1):
        return self._stream.read(min(size, 1))


class FailingStream:

    def read(self, size=-1):
        raise OSError('device not ready')


def dump_text(data, **kwargs):
    kwargs.setdefault('linesep', '\n')
    kwargs.setdefault('color', 'never')
    stream = io.BytesIO()
    dump_core(data, stream, **kwargs)
    return stream.getvalue().decode()


def test_dump_lines_doctest():
    layout = LayoutModel(columns=4)
    lines = list(iter_dump_lines(io.BytesIO(b'ABCDEF'), layout))
    assert [line.text for line in lines] == [
        '00000000: 4142 4344 ABCD',
        '00000004: 4546      EF',
    ]


def test_dump_line_fields():
    layout = LayoutModel(columns=4)
    lines = list(iter_dump_lines(io.BytesIO(b'A\x00\x0a\xFFB'), layout, start=0x20))
    assert len(lines) == 2

    line = lines[0]
    assert isinstance(line, DumpLine)
    assert line.start_offset == 0x20
    assert line.data == b'A\x00\x0a\xFF'
    assert line.octets == (
        (0x41, DisplayClass.PRINTABLE),
        (0x00, DisplayClass.NUL),
        (0x0A, DisplayClass.CONTROL),
        (0xFF, DisplayClass.UNDEFINED),
    )
    assert line.text == '00000020: 4100 0aff A␀␊.'

    assert lines[1].start_offset == 0x24
    assert lines[1].data == b'B'


def test_dump_parity_alternates():
    layout = LayoutModel(columns=2)
    lines = list(iter_dump_lines(io.BytesIO(bytes(7)), layout))
    assert [line.parity for line in lines] == [False, True, False, True]


def test_dump_group_separators():
    layout = LayoutModel(columns=16, grouping=4)
    line = next(iter_dump_lines(io.BytesIO(bytes(range(16))), layout))
    panel = line.text[10:10 + layout.panel_width]
    assert panel == '00010203 04050607 08090a0b 0c0d0e0f'
    assert [index for index, char in enumerate(panel) if char == ' '] == [8, 17, 26]


def test_dump_short_line_padding():
    data = bytes(range(0x41, 0x41 + 37))
    for columns, grouping, base in [(16, 2, 'hex'), (16, 4, 'hex'), (7, 3, 'octal'),
                                    (5, 1, 'binary'), (8, 8, 'decimal')]:
        layout = LayoutModel(columns=columns, grouping=grouping, base=base)
        lines = list(iter_dump_lines(io.BytesIO(data), layout))
        text_start = 10 + layout.panel_width + 1
        for line in lines:
            assert len(line.text) == text_start + len(line.octets)
            assert line.text[text_start:] == line.data.decode()
        assert len(lines[-1].octets) < columns


def test_dump_bases():
    assert dump_text(b'\x08\xFF', columns=2, grouping=1, base='octal') == (
        '00000000: 010 377 ␈.\n'
    )
    assert dump_text(b'\x07A', columns=2, base='decimal') == (
        '00000000: 007065 ␇A\n'
    )
    assert dump_text(b'\x05', columns=1, grouping=1, base='binary') == (
        '00000000: 00000101 ␅\n'
    )


def test_dump_default_layout():
    text = dump_text(bytes(range(0x30, 0x50)))
    assert text == (
        '00000000: 3031 3233 3435 3637 3839 3a3b 3c3d 3e3f 0123456789:;<=>?\n'
        '00000010: 4041 4243 4445 4647 4849 4a4b 4c4d 4e4f @ABCDEFGHIJKLMNO\n'
    )


def test_dump_hello():
    text = dump_text(HELLO, columns=8, grouping=4)
    assert text == (
        '00000000: 48656c6c 6f2c2057 Hello,␠W\n'
        '00000008: 6f726c64 210a     orld!␊\n'
    )


def test_dump_no_text():
    text = dump_text(b'ABCDEF', columns=4, show_text=False)
    assert text == (
        '00000000: 4142 4344 \n'
        '00000004: 4546      \n'
    )


def test_dump_no_offset():
    text = dump_text(b'ABCDEF', columns=4, show_offset=False)
    assert text == (
        '4142 4344 ABCD\n'
        '4546      EF\n'
    )


def test_dump_plain_unbounded():
    assert dump_text(b'\xDE\xAD\xBE\xEF', plain=True, columns=0) == 'deadbeef\n'
    assert dump_text(bytes(100), plain=True, columns=0) == '00' * 100 + '\n'


def test_dump_plain_default_columns():
    text = dump_text(bytes(range(31)), plain=True)
    lines = text.splitlines()
    assert len(lines) == 2
    assert lines[0] == ''.join('%02x' % i for i in range(30))
    assert lines[1] == '1e'


def test_dump_plain_ignores_grouping():
    assert dump_text(b'\x01\x02\x03', plain=True, grouping=1) == '010203\n'


def test_dump_empty():
    assert dump_text(b'') == ''
    assert dump_text(b'', plain=True, columns=0) == ''


def test_dump_decimal_offset():
    text = dump_text(bytes(16), columns=4, decimal_offset=True, show_text=False)
    assert text.splitlines()[-1] == '00000012: 0000 0000 '

    text = dump_text(bytes(16), columns=4, show_text=False)
    assert text.splitlines()[-1] == '0000000c: 0000 0000 '


def test_dump_display_bias():
    data = bytes(range(32))
    text = dump_text(data, seek=16, offset=-16)
    assert text.startswith('00000000: 1011 1213 ')

    text = dump_text(data, offset=0x100, length=16)
    assert text.startswith('00000100: 0001 0203 ')

    with pytest.raises(ConfigError, match='negative displayed offset'):
        dump_text(data, seek=16, offset=-17)


def test_dump_seek_negative():
    text = dump_text(bytes(range(32)), seek=-4)
    assert text.startswith('0000001c: 1c1d 1e1f ')


def test_dump_seek_past_end():
    assert dump_text(bytes(8), seek=100) == ''


def test_dump_length():
    layout = LayoutModel(columns=4)
    lines = list(iter_dump_lines(io.BytesIO(bytes(16)), layout, length=5))
    assert [len(line.octets) for line in lines] == [4, 1]

    assert dump_text(bytes(16), length=0) == ''

    with pytest.raises(ConfigError, match='negative length'):
        dump_text(bytes(16), length=-1)


def test_dump_short_reads():
    layout = LayoutModel(columns=4)
    lines = list(iter_dump_lines(TrickleStream(b'ABCDEFGHI'), layout))
    assert [line.data for line in lines] == [b'ABCD', b'EFGH', b'I']


def test_dump_read_error():
    layout = LayoutModel()
    lines = iter_dump_lines(FailingStream(), layout)
    with pytest.raises(SourceReadError, match='device not ready') as excinfo:
        next(lines)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_dump_invalid_layout():
    with pytest.raises(ConfigError):
        dump_text(b'ABC', grouping=0)

    with pytest.raises(ConfigError):
        dump_text(b'ABC', columns=-1)


def test_dump_color_always():
    text = dump_text(b'A\x00\x0a\xFF' * 4, columns=4, color='always')
    lines = text.splitlines()
    assert all('\x1b[' in line for line in lines)
    assert lines[0] != lines[1].replace('00000004', '00000000')  # alternate rows

    plain = dump_text(b'A\x00\x0a\xFF' * 4, columns=4, color='never')
    assert ANSI_REGEX.sub('', text) == plain


def test_dump_color_auto():
    assert '\x1b[' not in dump_text(b'ABC', color='auto')
    assert '\x1b[' not in dump_text(b'ABC', color=None)


def test_dump_color_plain():
    assert dump_text(b'ABC', plain=True, color='always') == '414243\n'


def test_dump_text_linesep():
    layout = LayoutModel(columns=2)
    chunks = list(iter_dump_text(io.BytesIO(b'ABC'), layout, linesep='\r\n'))
    assert chunks == ['00000000: 4142 AB\r\n', '00000002: 43   C\r\n']


def test_dump_file(tmp_path):
    path_in = tmp_path / 'data.bin'
    path_out = tmp_path / 'data.txt'
    path_in.write_bytes(HELLO)

    dump_core(str(path_in), str(path_out), columns=8, grouping=4, linesep='\n')

    assert path_out.read_bytes() == (
        b'00000000: 48656c6c 6f2c2057 Hello,\xe2\x90\xa0W\n'
        b'00000008: 6f726c64 210a     orld!\xe2\x90\x8a\n'
    )


def test_dump_stdinout():
    stream_in = io.BytesIO(b'ABCDEF')
    stream_out = io.BytesIO()

    with replace_stdin(stream_in), replace_stdout(stream_out):
        dump_core(columns=4, linesep='\n')

    assert stream_out.getvalue() == (
        b'00000000: 4142 4344 ABCD\n'
        b'00000004: 4546      EF\n'
    )


def test_dump_stdin_negative_seek():
    class Pipe(io.RawIOBase):
        def seekable(self):
            return False

        def readable(self):
            return True

    with replace_stdin(Pipe()), replace_stdout():
        with pytest.raises(ConfigError, match='seekable'):
            dump_core(seek=-16)
