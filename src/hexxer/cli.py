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

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m hexxer` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``hexxer.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``hexxer.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import contextlib
import os
import sys
from typing import Callable
from typing import Iterator
from typing import Optional

import click

from .__init__ import __version__
from .base import HexxerError
from .base import NumericBase
from .colors import ColorChoice
from .dump import dump_core
from .generate import Language
from .generate import generate_core
from .logging_config import setup_logging
from .revert import revert_core
from .utils import parse_int


class BasedIntParamType(click.ParamType):
    name = 'integer'

    def convert(self, value, param, ctx):
        try:
            return parse_int(value)
        except ValueError:
            self.fail(f'invalid integer: {value!r}', param, ctx)


class ByteIntParamType(click.ParamType):
    name = 'byte'

    def convert(self, value, param, ctx):
        try:
            b = parse_int(value)
            if not 0 <= b <= 255:
                raise ValueError()
            return b
        except ValueError:
            self.fail(f'invalid byte: {value!r}', param, ctx)


BASED_INT = BasedIntParamType()
BYTE_INT = ByteIntParamType()

FILE_PATH_IN = click.Path(dir_okay=False, allow_dash=True, readable=True, exists=True)
FILE_PATH_OUT = click.Path(dir_okay=False, allow_dash=True, writable=True)

BASE_CHOICE = click.Choice([base.value for base in NumericBase], case_sensitive=False)
COLOR_CHOICE = click.Choice([choice.value for choice in ColorChoice], case_sensitive=False)
LANGUAGE_CHOICE = click.Choice([language.value for language in Language], case_sensitive=False)
LOG_LEVEL_CHOICE = click.Choice(['debug', 'info', 'warning', 'error'], case_sensitive=False)


# ----------------------------------------------------------------------------

def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


def set_log_level(ctx, _, value):

    if ctx.resilient_parsing:
        return value

    setup_logging(value)
    return value


def _silence_stdout() -> None:

    # Python flushes the standard output at exit, which would fail again
    with contextlib.suppress(OSError, ValueError):
        fileno = sys.stdout.fileno()
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, fileno)


@contextlib.contextmanager
def reporting_errors() -> Iterator[None]:

    try:
        yield

    except BrokenPipeError:
        _silence_stdout()
        raise click.exceptions.Exit(0)

    except HexxerError as exc:
        raise click.ClickException(str(exc)) from exc


def _none_if_dash(path: Optional[str]) -> Optional[str]:

    return None if path == '-' else path


def layout_options(func: Callable) -> Callable:

    options = [
        click.option('-p', '--plain', 'plain', is_flag=True, help="""
            Plain dump: only the octet values, without separators.

            Same as --no-offset --no-text.
        """),
        click.option('--no-offset', 'no_offset', is_flag=True, help="""
            Hides the offset panel.
        """),
        click.option('--no-text', 'no_text', is_flag=True, help="""
            Hides the text panel.
        """),
        click.option('-d', '--decimal', 'decimal_offset', is_flag=True, help="""
            Offsets are in decimal instead of hexadecimal.
        """),
        click.option('-b', '--base', 'base', type=BASE_CHOICE, default='hex',
                     show_default=True, help="""
            Numeric base of the octet values.
        """),
        click.option('-c', '--columns', 'columns', type=BASED_INT, help="""
            Octets per line.

            Default: 16 (-p/--plain: 30).
            With -p/--plain, 0 results in one long line.
        """),
        click.option('-g', '--grouping', 'grouping', type=BASED_INT, default=2,
                     show_default=True, help="""
            Octets per group. Not used with -p/--plain.
        """),
        click.option('-o', '--offset', 'offset', type=BASED_INT, default=0, help="""
            Adds <offset> to the displayed file position.
        """),
    ]
    for option in reversed(options):
        func = option(func)
    return func


# ============================================================================

@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.option('--log-level', type=LOG_LEVEL_CHOICE, default='warning',
              show_default=True, is_eager=True, expose_value=False,
              callback=set_log_level, help="""
    Logging level of the diagnostic messages, written to standard error.
""")
@click.option('-V', '--version', is_flag=True, is_eager=True,
              expose_value=False, callback=print_version, help="""
    Prints the package version number.
""")
def main() -> None:
    """
    Renders binary data as a hex dump, and reverts a hex dump back into binary
    data.

    Being built with `Click <https://click.palletsprojects.com/en/stable/>`_, all the
    commands follow POSIX-like syntax rules, as well as reserving the virtual
    file path ``-`` for command chaining via standard output/input buffering.
    """


# ----------------------------------------------------------------------------

@main.command()
@layout_options
@click.option('-s', '--seek', 'seek', type=BASED_INT, help="""
    Input seeking.

    Starts at <seek> bytes absolute input offset.
    Negative values are relative to the end of the input,
    which is not supported for the standard input.
""")
@click.option('-l', '--length', '--len', 'length', type=BASED_INT, help="""
    Stops after <length> octets.
""")
@click.option('--color', '--colour', 'color', type=COLOR_CHOICE, default='auto',
              show_default=True, help="""
    Colors the output.
""")
@click.argument('infile', type=FILE_PATH_IN, required=False)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def dump(
    plain: bool,
    no_offset: bool,
    no_text: bool,
    decimal_offset: bool,
    base: str,
    columns: Optional[int],
    grouping: int,
    offset: int,
    seek: Optional[int],
    length: Optional[int],
    color: str,
    infile: Optional[str],
    outfile: Optional[str],
) -> None:
    r"""Dumps binary data as text.

    ``INFILE`` is the path of the input file.
    Set to ``-`` or leave empty to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` or leave empty to write to standard output.

    Each line shows the offset of its first octet, the octet values in groups,
    and their text representation: printable ASCII characters are shown as
    such, control characters as Unicode control pictures, and any other octet
    as a dot.
    """

    with reporting_errors():
        dump_core(
            infile=_none_if_dash(infile),
            outfile=_none_if_dash(outfile),
            columns=columns,
            grouping=grouping,
            base=base,
            plain=plain,
            show_offset=not no_offset,
            show_text=not no_text,
            decimal_offset=decimal_offset,
            offset=offset,
            seek=seek,
            length=length,
            color=color,
        )


# ----------------------------------------------------------------------------

@main.command()
@layout_options
@click.option('-f', '--fill', 'fill', type=BYTE_INT, default=0, show_default=True, help="""
    Byte value used to fill offsets missing from the dump.
""")
@click.option('--strict', is_flag=True, help="""
    Fails if any offsets are missing from the dump, instead of filling them.
""")
@click.option('-a', '--absolute', is_flag=True, help="""
    Output data starts from offset zero, instead of from the lowest offset
    found in the dump.
""")
@click.option('--patch', is_flag=True, help="""
    Patches the output file in place: each line is written at its own offset,
    without truncating the file.
""")
@click.option('--start', 'start', type=BASED_INT, default=0, help="""
    Offset of the first line, when the dump has no offsets.
""")
@click.argument('infile', type=FILE_PATH_IN, required=False)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def reverse(
    plain: bool,
    no_offset: bool,
    no_text: bool,
    decimal_offset: bool,
    base: str,
    columns: Optional[int],
    grouping: int,
    offset: int,
    fill: int,
    strict: bool,
    absolute: bool,
    patch: bool,
    start: int,
    infile: Optional[str],
    outfile: Optional[str],
) -> None:
    r"""Reverts a dump into binary data.

    ``INFILE`` is the path of the input dump.
    Set to ``-`` or leave empty to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` or leave empty to write to standard output.

    The offsets found in the dump are honored, so lines may come in any order
    and leave gaps. Only the octet values are decoded; the text panel is
    ignored. Malformed lines are reported and skipped.
    """

    with reporting_errors():
        revert_core(
            infile=_none_if_dash(infile),
            outfile=_none_if_dash(outfile),
            columns=columns,
            grouping=grouping,
            base=base,
            plain=plain,
            show_offset=not no_offset,
            show_text=not no_text,
            decimal_offset=decimal_offset,
            offset=offset,
            start=start,
            fill=(None if strict else fill),
            absolute=absolute,
            patch=patch,
        )


# ----------------------------------------------------------------------------

@main.command()
@click.option('-L', '--language', 'language', type=LANGUAGE_CHOICE, default='c',
              show_default=True, help="""
    Target programming language.
""")
@click.option('-n', '--name', 'name', help="""
    Array variable name.

    By default it is derived from the input file name.
""")
@click.option('-C', '--capitalize', is_flag=True, help="""
    Converts the array variable name to upper case.
""")
@click.option('-V', '--vector', is_flag=True, help="""
    Uses a growable container (C++, Rust) instead of a fixed-size array.
""")
@click.option('-b', '--base', 'base', type=BASE_CHOICE, default='hex',
              show_default=True, help="""
    Numeric base of the array items.
""")
@click.option('-c', '--columns', 'columns', type=BASED_INT, help="""
    Array items per line. Default: 12.
""")
@click.option('-s', '--seek', 'seek', type=BASED_INT, help="""
    Input seeking; negative values are relative to the end of the input.
""")
@click.option('-l', '--length', '--len', 'length', type=BASED_INT, help="""
    Stops after <length> octets.
""")
@click.argument('infile', type=FILE_PATH_IN, required=False)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def generate(
    language: str,
    name: Optional[str],
    capitalize: bool,
    vector: bool,
    base: str,
    columns: Optional[int],
    seek: Optional[int],
    length: Optional[int],
    infile: Optional[str],
    outfile: Optional[str],
) -> None:
    r"""Converts binary data into a source code array.

    ``INFILE`` is the path of the input file.
    Set to ``-`` or leave empty to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` or leave empty to write to standard output.
    """

    with reporting_errors():
        generate_core(
            infile=_none_if_dash(infile),
            outfile=_none_if_dash(outfile),
            language=language.lower(),
            name=name,
            capitalize=capitalize,
            vector=vector,
            base=base,
            columns=columns,
            seek=seek,
            length=length,
        )
