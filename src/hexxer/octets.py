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

r"""Octet classification and numeric token conversion."""

import re
import unicodedata
from typing import Mapping
from typing import Pattern
from typing import Sequence

from .base import DisplayClass
from .base import MalformedToken
from .base import MissingOffset
from .base import NumericBase

REPLACEMENT_CHAR: str = '�'
r"""Glyph used when a control picture is not available."""

UNDEFINED_GLYPH: str = '.'
r"""Glyph of octets outside of the ASCII range."""

CONTROL_PICTURES_BASE: int = 0x2400
r"""First codepoint of the Unicode *Control Pictures* block."""


def _build_display_classes() -> Sequence[DisplayClass]:

    classes = []
    for value in range(256):
        if 0x21 <= value <= 0x7E:
            classes.append(DisplayClass.PRINTABLE)
        elif value == 0x00:
            classes.append(DisplayClass.NUL)
        elif value <= 0x20 or value == 0x7F:
            classes.append(DisplayClass.CONTROL)
        else:
            classes.append(DisplayClass.UNDEFINED)
    return tuple(classes)


def _control_picture(value: int) -> str:

    char = chr(CONTROL_PICTURES_BASE + value)
    if unicodedata.category(char) == 'Cn':  # unassigned
        return REPLACEMENT_CHAR
    return char


def _build_glyphs() -> Sequence[str]:

    glyphs = []
    for value, klass in enumerate(DISPLAY_CLASSES):
        if klass is DisplayClass.PRINTABLE:
            glyphs.append(chr(value))
        elif klass is DisplayClass.UNDEFINED:
            glyphs.append(UNDEFINED_GLYPH)
        else:
            glyphs.append(_control_picture(value))
    return tuple(glyphs)


DISPLAY_CLASSES: Sequence[DisplayClass] = _build_display_classes()
r"""Mapping from octet value to display class."""

GLYPHS: Sequence[str] = _build_glyphs()
r"""Mapping from octet value to text panel glyph."""

OCTET_TOKENS: Mapping[NumericBase, Sequence[str]] = {
    NumericBase.HEX: tuple('%02x' % b for b in range(256)),
    NumericBase.OCTAL: tuple('%03o' % b for b in range(256)),
    NumericBase.DECIMAL: tuple('%03d' % b for b in range(256)),
    NumericBase.BINARY: tuple(bin(b)[2:].zfill(8) for b in range(256)),
}
r"""Mapping from numeric base and octet value to token string."""

_TOKEN_ALPHABETS: Mapping[NumericBase, Pattern] = {
    NumericBase.HEX: re.compile(r'^[0-9A-Fa-f]+$'),
    NumericBase.OCTAL: re.compile(r'^[0-7]+$'),
    NumericBase.DECIMAL: re.compile(r'^[0-9]+$'),
    NumericBase.BINARY: re.compile(r'^[01]+$'),
}

_OFFSET_HEX_REGEX = re.compile(r'^[0-9A-Fa-f]+$')
_OFFSET_DEC_REGEX = re.compile(r'^[0-9]+$')

OFFSET_DIGITS: int = 8
r"""Minimum number of digits of a rendered offset."""


def _check_octet(value: int) -> int:

    value = value.__index__()
    if not 0 <= value <= 255:
        raise ValueError(f'invalid octet: {value!r}')
    return value


def classify(value: int) -> DisplayClass:
    r"""Classifies an octet for display.

    Args:
        value (int):
            Octet value, within ``0 ... 255``.

    Returns:
        :class:`DisplayClass`: The display class of the octet.

    Examples:
        >>> classify(ord('A'))
        <DisplayClass.PRINTABLE: 'printable'>
        >>> classify(0x00)
        <DisplayClass.NUL: 'nul'>
        >>> classify(0x20)
        <DisplayClass.CONTROL: 'control'>
        >>> classify(0xFF)
        <DisplayClass.UNDEFINED: 'undefined'>
    """

    return DISPLAY_CLASSES[_check_octet(value)]


def glyph(value: int) -> str:
    r"""Text panel glyph of an octet.

    Printable octets are shown as their ASCII character.
    The null octet, control characters and the space character are shown as
    their Unicode *control picture* (codepoint ``0x2400 + value``), or
    :data:`REPLACEMENT_CHAR` if such codepoint is not assigned.
    Any other octet is shown as :data:`UNDEFINED_GLYPH`.

    Args:
        value (int):
            Octet value, within ``0 ... 255``.

    Returns:
        str: Single character glyph.

    Examples:
        >>> glyph(ord('A'))
        'A'
        >>> glyph(0x00)
        '␀'
        >>> glyph(0x0A)
        '␊'
        >>> glyph(0x80)
        '.'
    """

    return GLYPHS[_check_octet(value)]


def format_octet(value: int, base: NumericBase = NumericBase.HEX) -> str:
    r"""Renders an octet as a fixed-width numeric token.

    Args:
        value (int):
            Octet value, within ``0 ... 255``.

        base (:class:`NumericBase`):
            Numeric base of the token.

    Returns:
        str: Token of exactly ``base.width`` characters.

    Examples:
        >>> format_octet(0xAB)
        'ab'
        >>> format_octet(8, NumericBase.OCTAL)
        '010'
        >>> format_octet(7, NumericBase.DECIMAL)
        '007'
        >>> format_octet(5, NumericBase.BINARY)
        '00000101'
    """

    return OCTET_TOKENS[base][_check_octet(value)]


def parse_octet(token: str, base: NumericBase = NumericBase.HEX) -> int:
    r"""Parses a fixed-width numeric token.

    Hexadecimal tokens are case-insensitive.

    Args:
        token (str):
            Token string, exactly ``base.width`` characters long.

        base (:class:`NumericBase`):
            Numeric base of the token.

    Returns:
        int: Octet value.

    Raises:
        :class:`MalformedToken`: wrong width, alphabet or value.

    Examples:
        >>> parse_octet('aB')
        171
        >>> parse_octet('377', NumericBase.OCTAL)
        255
        >>> parse_octet('256', NumericBase.DECIMAL)
        Traceback (most recent call last):
            ...
        hexxer.base.MalformedToken: octet value overflow: '256'
    """

    width = base.width
    if len(token) != width:
        raise MalformedToken(f'token width is not {width}: {token!r}')

    if not _TOKEN_ALPHABETS[base].match(token):
        raise MalformedToken(f'invalid {base.value} digits: {token!r}')

    value = int(token, base.radix)
    if value > 255:
        raise MalformedToken(f'octet value overflow: {token!r}')
    return value


def format_offset(offset: int, decimal: bool = False) -> str:
    r"""Renders an offset for the offset panel.

    Args:
        offset (int):
            Non-negative offset value.

        decimal (bool):
            Renders in base 10 instead of base 16.

    Returns:
        str: Zero-padded offset, at least :data:`OFFSET_DIGITS` wide.

    Examples:
        >>> format_offset(0x1F)
        '0000001f'
        >>> format_offset(31, decimal=True)
        '00000031'
    """

    offset = offset.__index__()
    if offset < 0:
        raise ValueError(f'negative offset: {offset!r}')
    if decimal:
        return '%0*d' % (OFFSET_DIGITS, offset)
    else:
        return '%0*x' % (OFFSET_DIGITS, offset)


def parse_offset(text: str, decimal: bool = False) -> int:
    r"""Parses the text of an offset panel.

    Any non-zero number of digits is accepted, surrounding whitespace
    included.

    Args:
        text (str):
            Offset text, without the trailing colon.

        decimal (bool):
            Parses in base 10 instead of base 16.

    Returns:
        int: Offset value.

    Raises:
        :class:`MissingOffset`: invalid offset text.

    Examples:
        >>> parse_offset('00000010')
        16
        >>> parse_offset('  00000010', decimal=True)
        10
    """

    text = text.strip()
    regex = _OFFSET_DEC_REGEX if decimal else _OFFSET_HEX_REGEX
    if not regex.match(text):
        raise MissingOffset(f'invalid offset: {text!r}')
    return int(text, 10 if decimal else 16)
