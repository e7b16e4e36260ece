import io
import sys
from typing import IO
from typing import Optional

import pytest

from hexxer.base import ConfigError
from hexxer.base import DisplayClass
from hexxer.base import HexxerError
from hexxer.base import IncompleteRange
from hexxer.base import MalformedLine
from hexxer.base import MalformedToken
from hexxer.base import MissingOffset
from hexxer.base import NumericBase
from hexxer.base import ParseError
from hexxer.base import SourceReadError


class replace_stdin:

    def __init__(self, stream: IO):
        self.buffer = stream
        self.original = sys.stdin

    def __enter__(self):
        sys.stdin = self
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        sys.stdin = self.original


class replace_stdout:

    def __init__(self, stream: Optional[IO] = None):
        if stream is None:
            stream = io.BytesIO()
        self.buffer = stream
        self.original = sys.stdout
        self.write = stream.write

    def __enter__(self):
        sys.stdout = self
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        sys.stdout = self.original


def test_numeric_base_widths():
    assert NumericBase.HEX.width == 2
    assert NumericBase.OCTAL.width == 3
    assert NumericBase.DECIMAL.width == 3
    assert NumericBase.BINARY.width == 8


def test_numeric_base_radix():
    assert NumericBase.HEX.radix == 16
    assert NumericBase.OCTAL.radix == 8
    assert NumericBase.DECIMAL.radix == 10
    assert NumericBase.BINARY.radix == 2


def test_numeric_base_parse():
    assert NumericBase.parse('hex') is NumericBase.HEX
    assert NumericBase.parse('X') is NumericBase.HEX
    assert NumericBase.parse(' Octal ') is NumericBase.OCTAL
    assert NumericBase.parse('dec') is NumericBase.DECIMAL
    assert NumericBase.parse('bin') is NumericBase.BINARY
    assert NumericBase.parse(NumericBase.BINARY) is NumericBase.BINARY


def test_numeric_base_parse_raises():
    with pytest.raises(ValueError, match='unknown numeric base'):
        NumericBase.parse('sexagesimal')


def test_display_class_values():
    assert DisplayClass.PRINTABLE == 'printable'
    assert DisplayClass('nul') is DisplayClass.NUL
    assert {klass.value for klass in DisplayClass} == {
        'printable', 'nul', 'control', 'undefined',
    }


def test_error_hierarchy():
    assert issubclass(ConfigError, HexxerError)
    assert issubclass(ConfigError, ValueError)
    assert issubclass(SourceReadError, HexxerError)
    assert issubclass(SourceReadError, OSError)
    assert issubclass(IncompleteRange, ValueError)
    for error_type in (MalformedToken, MalformedLine, MissingOffset):
        assert issubclass(error_type, ParseError)
        assert issubclass(error_type, ValueError)


def test_parse_error_str():
    error = MalformedToken('invalid hex digits')
    assert str(error) == 'invalid hex digits'
    assert error.line_number is None
    assert error.line is None

    error = MissingOffset('invalid offset', line_number=3, line='xyz')
    assert str(error) == 'line 3: invalid offset'
    assert error.message == 'invalid offset'
    assert error.line == 'xyz'


def test_incomplete_range():
    error = IncompleteRange([(4, 5), (0x10, 0x20)])
    assert error.gaps == [(4, 5), (0x10, 0x20)]
    assert str(error) == 'unwritten ranges: [0x4, 0x5), [0x10, 0x20)'
