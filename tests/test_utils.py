import io
from typing import Any
from typing import Mapping
from typing import Type

import pytest

from hexxer.base import ConfigError
from hexxer.base import SourceReadError
from hexxer.utils import chop
from hexxer.utils import discard_bytes
from hexxer.utils import is_seekable
from hexxer.utils import open_source
from hexxer.utils import parse_int

PARSE_INT_PASS: Mapping[Any, int] = {
    None: None,

    '123': 123,
    ' 123 ': 123,
    '\t123\t': 123,
    '+123': 123,
    '-123': -123,
    ' +123 ': 123,
    ' -123 ': -123,
    ' + 123 ': 123,
    ' - 123 ': -123,

    '0xDEADBEEF': 0xDEADBEEF,
    '0XDEADBEEF': 0xDEADBEEF,
    'DEADBEEFh': 0xDEADBEEF,
    'DEADBEEFH': 0xDEADBEEF,
    '-0x10': -16,

    '0b101100111000': 0b101100111000,

    '01234567': 0o1234567,
    '0o1234567': 0o1234567,
    '0O1234567': 0o1234567,

    '1k': 2**10,
    '1M': 2**20,
    '1 G': 2**30,

    '1KiB': 2**10,
    '1 mib': 2**20,
    '1GiB': 2**30,

    '1 KB': 10**3,
    '1MB': 10**6,
    '1gb': 10**9,

    b'456': 456,
    123: 123,
    135.7: 135,
}

PARSE_INT_FAIL: Mapping[Any, Type[BaseException]] = {
    Ellipsis: TypeError,
    'x': ValueError,
    '0b1h': ValueError,
    '0o1h': ValueError,
    (1,): TypeError,
}


class Pipe:

    def __init__(self, data):
        self._stream = io.BytesIO(data)
        self.read = self._stream.read

    def seekable(self):
        return False


class BrokenSeekStream(io.BytesIO):

    def seek(self, offset, whence=io.SEEK_SET):
        raise OSError('illegal seek')


def test_chop():
    with pytest.raises(ValueError):
        next(chop(b'ABDEFG', -1))


def test_chop_doctest():
    assert list(chop(b'ABCDEFG', 2)) == [b'AB', b'CD', b'EF', b'G']
    assert b':'.join(chop(b'ABCDEFG', 2)) == b'AB:CD:EF:G'
    assert list(chop('ABCDEFG', 3)) == ['ABC', 'DEF', 'G']
    assert list(chop('', 3)) == []


def test_parse_int_fail():
    for value_in, raised_exception in PARSE_INT_FAIL.items():
        with pytest.raises(raised_exception):
            parse_int(value_in)


def test_parse_int_pass():
    for value_in, value_out in PARSE_INT_PASS.items():
        assert parse_int(value_in) == value_out


def test_discard_bytes():
    stream = Pipe(b'abcdef')
    assert discard_bytes(stream, 4) == 4
    assert stream.read() == b'ef'

    stream = Pipe(b'abc')
    assert discard_bytes(stream, 10) == 3
    assert stream.read() == b''

    assert discard_bytes(Pipe(b'abc'), 0) == 0


def test_is_seekable():
    assert is_seekable(io.BytesIO()) is True
    assert is_seekable(Pipe(b'')) is False
    assert is_seekable(object()) is False

    stream = io.BytesIO()
    stream.close()
    assert is_seekable(stream) is False


def test_open_source_bytes():
    with open_source(b'ABCDEF') as (stream, position):
        assert position == 0
        assert stream.read() == b'ABCDEF'

    with open_source(b'ABCDEF', 2) as (stream, position):
        assert position == 2
        assert stream.read() == b'CDEF'

    with open_source(bytearray(b'ABCDEF'), -2) as (stream, position):
        assert position == 4
        assert stream.read() == b'EF'


def test_open_source_negative_clamps():
    with open_source(b'ABC', -10) as (stream, position):
        assert position == 0
        assert stream.read() == b'ABC'


def test_open_source_stream_kept_open():
    source = io.BytesIO(b'ABCDEF')
    source.seek(3)
    with open_source(source) as (stream, position):
        assert stream is source
        assert position == 3
    assert not source.closed


def test_open_source_path_closed(tmp_path):
    path = tmp_path / 'data.bin'
    path.write_bytes(b'ABCDEF')

    with open_source(str(path), 1) as (stream, position):
        assert position == 1
        assert stream.read(2) == b'BC'
    assert stream.closed

    with pytest.raises(RuntimeError):
        with open_source(path) as (stream, _):
            raise RuntimeError()
    assert stream.closed


def test_open_source_pipe():
    with open_source(Pipe(b'ABCDEF'), 4) as (stream, position):
        assert position == 4
        assert stream.read() == b'EF'

    with open_source(Pipe(b'ABC'), 10) as (stream, position):
        assert position == 3

    with open_source(Pipe(b'ABC')) as (stream, position):
        assert position == 0

    with pytest.raises(ConfigError, match='seekable'):
        with open_source(Pipe(b'ABCDEF'), -1):
            pass


def test_open_source_seek_error():
    with pytest.raises(SourceReadError, match='illegal seek') as excinfo:
        with open_source(BrokenSeekStream(b'ABC'), 1):
            pass
    assert isinstance(excinfo.value.__cause__, OSError)
