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

r"""Base types, enumerations and exceptions."""

import enum
import os
from typing import Any
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    TypeAlias = Any  # Python < 3.10

AnyBytes: TypeAlias = Union[bytes, bytearray, memoryview]
AnyPath: TypeAlias = Union[bytes, bytearray, str, os.PathLike]
Interval: TypeAlias = Tuple[int, int]


class DisplayClass(str, enum.Enum):
    r"""Display class of an octet.

    The display class is a pure function of the octet value, used to pick the
    glyph of the text panel and the color of both panels.
    Its value doubles as the color key looked up by
    :data:`hexxer.colors.TOKEN_COLOR_CODES`.
    """

    PRINTABLE = 'printable'
    r"""ASCII graphic character, from ``0x21`` to ``0x7E``."""

    NUL = 'nul'
    r"""The null octet ``0x00``."""

    CONTROL = 'control'
    r"""ASCII control character, or the space character ``0x20``."""

    UNDEFINED = 'undefined'
    r"""Any octet outside of the ASCII range."""


class NumericBase(enum.Enum):
    r"""Numeric base of the octet tokens.

    Each base has a fixed token width, so that a token of any octet value
    always takes the same number of characters.
    """

    HEX = 'hex'
    OCTAL = 'octal'
    DECIMAL = 'decimal'
    BINARY = 'binary'

    @property
    def radix(self) -> int:
        return _BASE_RADIX[self]

    @property
    def width(self) -> int:
        r"""Token width, in characters."""
        return _BASE_WIDTH[self]

    @classmethod
    def parse(cls, value: Union[str, 'NumericBase']) -> 'NumericBase':
        r"""Converts a name into a numeric base.

        Args:
            value (str or :class:`NumericBase`):
                Base name (case-insensitive), or a numeric base itself.
                Short aliases ``x``, ``o``, ``d``, ``b`` and the names
                ``hexadecimal``, ``oct``, ``dec``, ``bin`` are accepted.

        Returns:
            :class:`NumericBase`: The matching numeric base.

        Examples:
            >>> NumericBase.parse('OCT')
            <NumericBase.OCTAL: 'octal'>
            >>> NumericBase.parse('x').width
            2
        """

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return _BASE_ALIASES[key]
        except KeyError:
            raise ValueError(f'unknown numeric base: {value!r}') from None


_BASE_RADIX = {
    NumericBase.HEX: 16,
    NumericBase.OCTAL: 8,
    NumericBase.DECIMAL: 10,
    NumericBase.BINARY: 2,
}

_BASE_WIDTH = {
    NumericBase.HEX: 2,
    NumericBase.OCTAL: 3,
    NumericBase.DECIMAL: 3,
    NumericBase.BINARY: 8,
}

_BASE_ALIASES = {
    'hex': NumericBase.HEX,
    'hexadecimal': NumericBase.HEX,
    'x': NumericBase.HEX,
    'octal': NumericBase.OCTAL,
    'oct': NumericBase.OCTAL,
    'o': NumericBase.OCTAL,
    'decimal': NumericBase.DECIMAL,
    'dec': NumericBase.DECIMAL,
    'd': NumericBase.DECIMAL,
    'binary': NumericBase.BINARY,
    'bin': NumericBase.BINARY,
    'b': NumericBase.BINARY,
}


# ----------------------------------------------------------------------------

class HexxerError(Exception):
    r"""Base class of all the errors raised by this package."""


class ConfigError(HexxerError, ValueError):
    r"""Invalid layout or option combination.

    Raised when a configuration is built, never in the middle of a pass.
    """


class SourceReadError(HexxerError, OSError):
    r"""The byte source failed while being read.

    The original :class:`OSError` is chained as ``__cause__``.
    """


class ParseError(HexxerError, ValueError):
    r"""A dump text line cannot be parsed.

    These errors are recoverable: the offending line is skipped and parsing
    goes on with the following lines.

    Attributes:
        line_number (int):
            One-based index of the offending line, or ``None`` if unknown.

        line (str):
            Text of the offending line, or ``None`` if unknown.
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        super().__init__(message)
        self.message: str = message
        self.line_number: Optional[int] = line_number
        self.line: Optional[str] = line

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f'line {self.line_number}: {self.message}'


class MalformedToken(ParseError):
    r"""A numeric token has the wrong width, alphabet or value."""


class MalformedLine(ParseError):
    r"""A line holds more tokens than the layout allows."""


class MissingOffset(ParseError):
    r"""The offset panel is absent or cannot be parsed."""


class IncompleteRange(HexxerError, ValueError):
    r"""Contiguous data was requested, but some offsets were never written.

    Attributes:
        gaps (list of couples):
            The unwritten ``(start, endex)`` intervals.
    """

    def __init__(self, gaps: Sequence[Interval]):
        self.gaps: List[Interval] = [(start, endex) for start, endex in gaps]
        holes = ', '.join(f'[0x{start:X}, 0x{endex:X})' for start, endex in self.gaps)
        super().__init__(f'unwritten ranges: {holes}')
