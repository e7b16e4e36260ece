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

r"""Sparse collection of reverted octets."""

from typing import Iterable
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from bytesparse import Memory

from .base import IncompleteRange
from .base import Interval


class SparseWrite(NamedTuple):
    r"""An octet written at an absolute offset."""

    offset: int
    value: int


class SparseByteSink:
    r"""Sparse byte sink.

    It collects :class:`SparseWrite` items in any order, then materializes
    them either as contiguous data or as sparse data.
    A later write at the same offset overrides the earlier one.

    Examples:
        >>> sink = SparseByteSink()
        >>> sink.record_all([SparseWrite(3, 0x41), SparseWrite(5, 0x43)])
        >>> sink.blocks()
        [(3, b'A'), (5, b'C')]
        >>> sink.materialize(fill=0x2E)
        b'A.C'
        >>> sink.materialize()
        Traceback (most recent call last):
            ...
        hexxer.base.IncompleteRange: unwritten ranges: [0x4, 0x5)
    """

    def __init__(self):

        self._memory: Memory = Memory()

    def __len__(self) -> int:
        r"""Number of distinct offsets written."""

        return sum(endex - start for start, endex in self._memory.intervals())

    def __repr__(self) -> str:

        return f'<{type(self).__name__} span={self.span!r} size={len(self)}>'

    @property
    def memory(self) -> Memory:
        r""":class:`bytesparse.Memory`: Underlying sparse memory."""
        return self._memory

    @property
    def span(self) -> Interval:
        r"""couple: ``(start, endex)`` interval of the written offsets.

        ``(0, 0)`` when nothing was written.
        """

        memory = self._memory
        if not self:
            return 0, 0
        return memory.start, memory.endex

    def record(self, write: Tuple[int, int]) -> None:
        r"""Records a single write.

        Args:
            write (:class:`SparseWrite`):
                ``(offset, value)`` couple.
        """

        offset, value = write
        offset = offset.__index__()
        value = value.__index__()
        if offset < 0:
            raise ValueError(f'negative offset: {offset!r}')
        if not 0 <= value <= 255:
            raise ValueError(f'invalid octet: {value!r}')
        self._memory.poke(offset, value)

    def record_all(self, writes: Iterable[Tuple[int, int]]) -> None:
        r"""Records many writes, in order."""

        record = self.record
        for write in writes:
            record(write)

    def gaps(self, start: Optional[int] = None) -> List[Interval]:
        r"""Unwritten intervals within the span.

        Args:
            start (int):
                Start of the inspected range; ``None`` for the lowest written
                offset.

        Returns:
            list of couples: ``(start, endex)`` gaps.
        """

        memory = self._memory
        if not self:
            return []
        if start is None:
            start = memory.start
        if start > memory.start:
            raise ValueError('start after the first written offset')

        gaps = []
        if start < memory.start:
            gaps.append((start, memory.start))
        gaps.extend((gap_start, gap_endex)
                    for gap_start, gap_endex in memory.gaps(memory.start, memory.endex))
        return gaps

    def blocks(self) -> List[Tuple[int, bytes]]:
        r"""Contiguous runs of written octets.

        Returns:
            list of couples: ``(offset, data)`` runs, by ascending offset.
        """

        return [(address, bytes(data))
                for address, data in self._memory.to_blocks()]

    def materialize(
        self,
        fill: Optional[int] = None,
        start: Optional[int] = None,
    ) -> bytes:
        r"""Builds contiguous data.

        Args:
            fill (int):
                Octet value for unwritten offsets.
                If ``None``, any gap raises :class:`IncompleteRange`.

            start (int):
                First offset of the data; ``None`` for the lowest written
                offset.
                It cannot be after the lowest written offset.

        Returns:
            bytes: Data from `start` up to the highest written offset.

        Raises:
            :class:`IncompleteRange`: gaps found without `fill` value.
        """

        if not self:
            return b''

        gaps = self.gaps(start)
        memory = self._memory

        if gaps:
            if fill is None:
                raise IncompleteRange(gaps)
            fill = fill.__index__()
            if not 0 <= fill <= 255:
                raise ValueError(f'invalid fill octet: {fill!r}')
            memory = memory.copy()
            for gap_start, gap_endex in gaps:
                memory.flood(start=gap_start, endex=gap_endex, pattern=fill)

        return bytes(memory.to_bytes())

    def materialize_sparse(self) -> List[SparseWrite]:
        r"""Lists the written octets.

        Returns:
            list of :class:`SparseWrite`: Written octets, by ascending offset.
        """

        return [SparseWrite(address + index, value)
                for address, data in self.blocks()
                for index, value in enumerate(data)]
