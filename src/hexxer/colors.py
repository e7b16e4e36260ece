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

r"""ANSI coloring of dump lines.

The dump core only tags each rendered token with an abstract *color key*;
this module turns those keys into ANSI escape sequences, when the coloring
policy allows it.
"""

import enum
import os
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

import colorama

ColorToken = Tuple[Optional[str], str]
r"""A ``(color_key, text)`` pair; ``None`` key for uncolored text."""


class ColorChoice(enum.Enum):
    r"""Coloring policy."""

    AUTO = 'auto'
    r"""Colors only when writing to an interactive terminal."""

    NEVER = 'never'
    ALWAYS = 'always'

    @classmethod
    def parse(cls, value: Union[str, bool, None, 'ColorChoice']) -> 'ColorChoice':
        r"""Converts a generic value into a coloring policy.

        Args:
            value:
                A :class:`ColorChoice`, its name (case-insensitive), a boolean
                (``True`` always, ``False`` never), or ``None`` (auto).

        Returns:
            :class:`ColorChoice`: Coloring policy.

        Examples:
            >>> ColorChoice.parse('Always')
            <ColorChoice.ALWAYS: 'always'>
            >>> ColorChoice.parse(None)
            <ColorChoice.AUTO: 'auto'>
        """

        if isinstance(value, cls):
            return value
        if value is None:
            return cls.AUTO
        if isinstance(value, bool):
            return cls.ALWAYS if value else cls.NEVER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f'invalid color choice: {value!r}') from None


def _code(fore: str, style: str = colorama.Style.NORMAL) -> str:
    return style + fore


TOKEN_COLOR_CODES: Mapping[str, str] = {
    '':             colorama.Style.RESET_ALL,
    'offset':       _code(colorama.Fore.LIGHTBLUE_EX),
    'offsetalt':    _code(colorama.Fore.BLUE),
    'glyph':        _code(colorama.Fore.LIGHTBLUE_EX),
    'glyphalt':     _code(colorama.Fore.BLUE),
    'printable':    _code(colorama.Fore.LIGHTWHITE_EX),
    'printablealt': _code(colorama.Fore.WHITE),
    'nul':          _code(colorama.Fore.LIGHTBLACK_EX),
    'nulalt':       _code(colorama.Fore.WHITE, colorama.Style.DIM),
    'control':      _code(colorama.Fore.LIGHTGREEN_EX),
    'controlalt':   _code(colorama.Fore.GREEN),
    'undefined':    _code(colorama.Fore.LIGHTRED_EX),
    'undefinedalt': _code(colorama.Fore.RED),
}
r"""ANSI color codes for each color key.

Keys suffixed with ``alt`` apply to odd rows."""


def resolve_color(
    choice: Union[ColorChoice, str, bool, None],
    stream: Optional[Any] = None,
) -> bool:
    r"""Tells whether output shall be colored.

    Args:
        choice:
            Coloring policy, as accepted by :meth:`ColorChoice.parse`.

        stream:
            Output stream, checked by the :attr:`ColorChoice.AUTO` policy.

    Returns:
        bool: Output shall be colored.

    Examples:
        >>> import io
        >>> resolve_color('always', io.StringIO())
        True
        >>> resolve_color('auto', io.StringIO())
        False
    """

    choice = ColorChoice.parse(choice)

    if choice is ColorChoice.ALWAYS:
        return True
    elif choice is ColorChoice.NEVER:
        return False
    else:
        if os.environ.get('NO_COLOR'):
            return False
        isatty = getattr(stream, 'isatty', None)
        try:
            return bool(isatty and isatty())
        except ValueError:  # closed stream
            return False


def colorize_tokens(
    tokens: Sequence[ColorToken],
    alternate: bool = False,
) -> str:
    r"""Joins color tokens with ANSI color codes.

    For each token, its key is used to look up the ANSI color code from
    :data:`TOKEN_COLOR_CODES`; the ``alt`` variant is used for `alternate`
    rows.
    Tokens with a ``None`` key inherit the current color.
    The returned text is terminated by a reset code.

    Args:
        tokens (list of couples):
            Sequence of ``(color_key, text)`` couples.

        alternate (bool):
            Uses the alternate row colors.

    Returns:
        str: Colored text.

    Examples:
        >>> colorize_tokens([('offset', '00000000'), (None, ': ')])
        '\x1b[22m\x1b[94m00000000: \x1b[0m'
    """

    codes = TOKEN_COLOR_CODES
    suffix = 'alt' if alternate else ''
    parts = []
    current = None

    for key, text in tokens:
        if not text:
            continue
        if key is not None:
            code = codes.get(key + suffix, codes[''])
            if code != current:
                parts.append(code)
                current = code
        parts.append(text)

    parts.append(codes[''])
    return ''.join(parts)


def colorize_line(line: Any) -> str:
    r"""Colors a dump line.

    Args:
        line (:class:`hexxer.dump.DumpLine`):
            Dump line to color, according to its row parity.

    Returns:
        str: Colored line text, without line terminator.
    """

    return colorize_tokens(line.tokens, alternate=line.parity)
