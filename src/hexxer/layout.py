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

r"""Dump layout configuration."""

from typing import Any
from typing import Optional
from typing import Tuple
from typing import Union

from .base import ConfigError
from .base import NumericBase

DEFAULT_COLUMNS: int = 16
r"""Default octets per line of an annotated dump."""

DEFAULT_PLAIN_COLUMNS: int = 30
r"""Default octets per line of a plain dump."""

FALLBACK_COLUMNS: int = 32
r"""Octets per line (or per read) when the column count is zero."""

DEFAULT_GROUPING: int = 2
r"""Default octets per group."""

MAX_COLUMNS: int = 0xFFFF
r"""Maximum column count and group size."""


class LayoutModel:
    r"""Layout of a dump.

    It tells how octets are mapped to text, both when formatting and when
    parsing a dump.
    It is validated once at construction and never changes afterwards; use
    :meth:`replace` to derive a modified layout.

    A layout showing neither the offset panel nor the text panel is a *plain*
    layout: octet tokens are concatenated without any separators.

    Args:
        columns (int):
            Octets per line.
            ``None`` selects :data:`DEFAULT_COLUMNS`, or
            :data:`DEFAULT_PLAIN_COLUMNS` for a plain layout.
            Zero makes a plain dump a single unbounded line, while an annotated
            dump falls back to :data:`FALLBACK_COLUMNS`.

        grouping (int):
            Octets per group; a space separates adjacent groups.
            It must be positive, unless the layout is plain (where it is
            ignored).

        base (:class:`NumericBase` or str):
            Numeric base of the octet tokens.

        show_offset (bool):
            Shows the offset panel.

        show_text (bool):
            Shows the text panel.

        decimal_offset (bool):
            Offsets are in base 10 instead of base 16.

        display_bias (int):
            Added to the stream position when rendering offsets, and
            subtracted from offsets when parsing.

    Raises:
        :class:`ConfigError`: invalid layout.

    Examples:
        >>> layout = LayoutModel(columns=8, grouping=4)
        >>> layout.line_columns, layout.panel_width
        (8, 17)
        >>> LayoutModel(show_offset=False, show_text=False).line_columns
        30
        >>> LayoutModel(grouping=0)
        Traceback (most recent call last):
            ...
        hexxer.base.ConfigError: grouping must be positive
    """

    __slots__ = (
        '_columns',
        '_grouping',
        '_base',
        '_show_offset',
        '_show_text',
        '_decimal_offset',
        '_display_bias',
    )

    def __init__(
        self,
        columns: Optional[int] = None,
        grouping: int = DEFAULT_GROUPING,
        base: Union[NumericBase, str] = NumericBase.HEX,
        show_offset: bool = True,
        show_text: bool = True,
        decimal_offset: bool = False,
        display_bias: int = 0,
    ):

        if columns is not None:
            columns = columns.__index__()
            if not 0 <= columns <= MAX_COLUMNS:
                raise ConfigError(f'invalid column count: {columns!r}')

        grouping = grouping.__index__()
        show_offset = bool(show_offset)
        show_text = bool(show_text)
        plain = not show_offset and not show_text

        if not plain and grouping <= 0:
            raise ConfigError('grouping must be positive')
        if not 0 <= grouping <= MAX_COLUMNS:
            raise ConfigError(f'invalid grouping: {grouping!r}')

        try:
            base = NumericBase.parse(base)
        except ValueError as exc:
            raise ConfigError(str(exc)) from None

        self._columns: Optional[int] = columns
        self._grouping: int = grouping
        self._base: NumericBase = base
        self._show_offset: bool = show_offset
        self._show_text: bool = show_text
        self._decimal_offset: bool = bool(decimal_offset)
        self._display_bias: int = display_bias.__index__()

    def __eq__(self, other: Any) -> bool:

        if not isinstance(other, LayoutModel):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:

        return hash(self._key())

    def __repr__(self) -> str:

        return (f'{type(self).__name__}('
                f'columns={self._columns!r}, '
                f'grouping={self._grouping!r}, '
                f'base={self._base!s}, '
                f'show_offset={self._show_offset!r}, '
                f'show_text={self._show_text!r}, '
                f'decimal_offset={self._decimal_offset!r}, '
                f'display_bias={self._display_bias!r})')

    def _key(self) -> Tuple:

        return (self._columns, self._grouping, self._base, self._show_offset,
                self._show_text, self._decimal_offset, self._display_bias)

    @classmethod
    def annotated(cls, **kwargs: Any) -> 'LayoutModel':
        r"""Builds a layout with both offset and text panels.

        Args:
            kwargs:
                Other :class:`LayoutModel` arguments.

        Returns:
            :class:`LayoutModel`: Annotated layout.
        """

        kwargs['show_offset'] = True
        kwargs['show_text'] = True
        return cls(**kwargs)

    @classmethod
    def plain_layout(cls, **kwargs: Any) -> 'LayoutModel':
        r"""Builds a plain layout.

        Args:
            kwargs:
                Other :class:`LayoutModel` arguments.

        Returns:
            :class:`LayoutModel`: Plain layout.

        Examples:
            >>> LayoutModel.plain_layout(columns=0).plain
            True
        """

        kwargs['show_offset'] = False
        kwargs['show_text'] = False
        return cls(**kwargs)

    def replace(self, **changes: Any) -> 'LayoutModel':
        r"""Derives a new layout.

        Args:
            changes:
                :class:`LayoutModel` arguments to change.

        Returns:
            :class:`LayoutModel`: New validated layout.

        Examples:
            >>> LayoutModel().replace(display_bias=-16).display_bias
            -16
        """

        kwargs = dict(
            columns=self._columns,
            grouping=self._grouping,
            base=self._base,
            show_offset=self._show_offset,
            show_text=self._show_text,
            decimal_offset=self._decimal_offset,
            display_bias=self._display_bias,
        )
        kwargs.update(changes)
        return type(self)(**kwargs)

    @property
    def columns(self) -> Optional[int]:
        r"""Octets per line, as configured."""
        return self._columns

    @property
    def grouping(self) -> int:
        return self._grouping

    @property
    def base(self) -> NumericBase:
        return self._base

    @property
    def show_offset(self) -> bool:
        return self._show_offset

    @property
    def show_text(self) -> bool:
        return self._show_text

    @property
    def decimal_offset(self) -> bool:
        return self._decimal_offset

    @property
    def display_bias(self) -> int:
        return self._display_bias

    @property
    def plain(self) -> bool:
        r"""Plain layout: neither offsets nor text are shown."""
        return not self._show_offset and not self._show_text

    @property
    def line_columns(self) -> int:
        r"""Effective octets per line.

        Zero only for an unbounded plain layout.
        """

        columns = self._columns
        plain = self.plain
        if columns is None:
            return DEFAULT_PLAIN_COLUMNS if plain else DEFAULT_COLUMNS
        elif columns == 0:
            return 0 if plain else FALLBACK_COLUMNS
        else:
            return columns

    @property
    def read_size(self) -> int:
        r"""Octets read from the source per iteration."""
        return self.line_columns or FALLBACK_COLUMNS

    @property
    def token_width(self) -> int:
        return self._base.width

    @property
    def offset_radix(self) -> int:
        return 10 if self._decimal_offset else 16

    @property
    def panel_width(self) -> int:
        r"""Rendered width of a full octet panel.

        It accounts for group separators, but not for the trailing panel
        separator.
        Zero for an unbounded plain layout.
        """

        columns = self.line_columns
        width = columns * self.token_width
        if columns and not self.plain:
            width += (columns - 1) // self._grouping
        return width
