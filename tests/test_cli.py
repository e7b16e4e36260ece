import logging
from pathlib import Path
from typing import Any
from typing import cast as _cast

import pytest
from click.testing import CliRunner

import hexxer.cli
from hexxer import __version__ as _version
from hexxer.__main__ import main as _main
from hexxer.base import SourceReadError
from hexxer.cli import main
from hexxer.logging_config import LOGGER_NAME

HELLO = b'Hello, World!\n'

HELLO_DUMP = (
    '00000000: 4865 6c6c 6f2c 2057 6f72 6c64 210a      Hello,␠World!␊\n'
)


@pytest.fixture
def tmppath(tmpdir):
    return Path(str(tmpdir))


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()


def invoke(args, **kwargs):
    runner = CliRunner()
    return runner.invoke(_cast(Any, main), args, **kwargs)


def read_text(path):
    data = Path(str(path)).read_bytes().decode()
    return data.replace('\r\n', '\n')  # normalize


def test_main_module():
    _main('not_main')


def test_help():
    result = invoke(['--help'])
    assert result.exit_code == 0
    for command in ('dump', 'reverse', 'generate'):
        assert command in result.output

    for command in ('dump', 'reverse', 'generate'):
        result = invoke([command, '-h'])
        assert result.exit_code == 0


def test_version():
    for option in ('-V', '--version'):
        result = invoke([option])
        assert result.exit_code == 0
        assert result.output.strip() == _version


def test_dump_files(tmppath):
    path_in = tmppath / 'hello.bin'
    path_out = tmppath / 'hello.txt'
    path_in.write_bytes(HELLO)

    result = invoke(['dump', str(path_in), str(path_out)])
    assert result.exit_code == 0
    assert read_text(path_out) == HELLO_DUMP


def test_dump_stdinout():
    result = invoke(['dump'], input=HELLO)
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().replace('\r\n', '\n') == HELLO_DUMP

    result = invoke(['dump', '-', '-'], input=HELLO)
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().replace('\r\n', '\n') == HELLO_DUMP


def test_dump_options(tmppath):
    path_in = tmppath / 'data.bin'
    path_in.write_bytes(bytes(range(32)))

    result = invoke(['dump', '-c', '8', '-g', '4', '--seek=-8', '-o', '0x100',
                     '--no-text', str(path_in)])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().splitlines() == ['00000118: 18191a1b 1c1d1e1f ']

    result = invoke(['dump', '-c', '4', '-l', '6', '-d', '-b', 'decimal', '--no-offset',
                     str(path_in)])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().splitlines() == [
        '000001 002003 ␀␁␂␃',
        '004005        ␄␅',
    ]


def test_dump_plain():
    result = invoke(['dump', '-p', '-c', '0'], input=b'\xDE\xAD\xBE\xEF')
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().strip() == 'deadbeef'

    result = invoke(['dump', '--plain', '--color', 'always'], input=b'\x01\x02')
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().strip() == '0102'


def test_dump_color():
    result = invoke(['dump', '--colour', 'always'], input=HELLO)
    assert result.exit_code == 0
    assert '\x1b[' in result.stdout_bytes.decode()

    result = invoke(['dump', '--color', 'auto'], input=HELLO)
    assert result.exit_code == 0
    assert '\x1b[' not in result.stdout_bytes.decode()


def test_dump_invalid_options():
    result = invoke(['dump', '-g', '0'], input=HELLO)
    assert result.exit_code == 1
    assert 'grouping must be positive' in result.output

    result = invoke(['dump', '-c', 'many'], input=HELLO)
    assert result.exit_code == 2
    assert 'invalid integer' in result.output

    result = invoke(['dump', '-b', 'roman'], input=HELLO)
    assert result.exit_code == 2


def test_dump_broken_pipe(monkeypatch):
    def dump_core(**kwargs):
        raise BrokenPipeError()

    monkeypatch.setattr(hexxer.cli, 'dump_core', dump_core)
    result = invoke(['dump'], input=HELLO)
    assert result.exit_code == 0


def test_dump_log_level():
    result = invoke(['--log-level', 'debug', 'dump'], input=HELLO)
    assert result.exit_code == 0
    assert 'dumping from input position 0' in result.output


def test_reverse_files(tmppath):
    path_in = tmppath / 'hello.txt'
    path_out = tmppath / 'hello.bin'
    path_in.write_text(HELLO_DUMP, encoding='utf-8')

    result = invoke(['reverse', str(path_in), str(path_out)])
    assert result.exit_code == 0
    assert path_out.read_bytes() == HELLO


def test_reverse_round_trip():
    data = bytes(range(256))
    for options in (['-c', '7', '-g', '3'], ['-b', 'binary'], ['-p'], ['-p', '-c', '0'],
                    ['--no-offset', '-b', 'octal'], ['-d', '-o', '1000']):
        result = invoke(['dump'] + options, input=data)
        assert result.exit_code == 0, options

        result = invoke(['reverse'] + options, input=result.stdout_bytes)
        assert result.exit_code == 0, options
        assert result.stdout_bytes == data, options


def test_reverse_sparse():
    text = b'00000010: 4142  AB\n00000030: 43    C\n'

    result = invoke(['reverse', '-c', '2'], input=text)
    assert result.exit_code == 0
    assert result.stdout_bytes == b'AB' + bytes(0x1E) + b'C'

    result = invoke(['reverse', '-c', '2', '-f', '0xFF', '-a'], input=text)
    assert result.exit_code == 0
    assert result.stdout_bytes == b'\xFF' * 0x10 + b'AB' + b'\xFF' * 0x1E + b'C'

    result = invoke(['reverse', '-c', '2', '--strict'], input=text)
    assert result.exit_code == 1
    assert 'unwritten ranges: [0x12, 0x30)' in result.output


def test_reverse_invalid_fill():
    result = invoke(['reverse', '-f', '256'], input=b'')
    assert result.exit_code == 2
    assert 'invalid byte' in result.output


def test_reverse_malformed_lines():
    text = b'00000000: 4142  AB\ngarbage\n00000002: 4344  CD\n'
    result = invoke(['reverse', '-c', '2'], input=text)
    assert result.exit_code == 0
    assert result.stdout_bytes == b'ABCD'
    assert 'line 2: missing offset separator' in result.output


def test_reverse_patch(tmppath):
    path_in = tmppath / 'patch.txt'
    path_out = tmppath / 'data.bin'
    path_in.write_bytes(b'00000002: 7a7a  zz\n')
    path_out.write_bytes(b'ABCDEF')

    result = invoke(['reverse', '-c', '2', '--patch', str(path_in), str(path_out)])
    assert result.exit_code == 0
    assert path_out.read_bytes() == b'ABzzEF'

    result = invoke(['reverse', '-c', '2', '--patch', str(path_in)])
    assert result.exit_code == 1
    assert 'patch mode' in result.output


def test_reverse_start():
    result = invoke(['reverse', '-p', '--start', '2', '-a'], input=b'4142\n')
    assert result.exit_code == 0
    assert result.stdout_bytes == b'\x00\x00AB'


def test_generate_file(tmppath):
    path_in = tmppath / 'hello.bin'
    path_in.write_bytes(HELLO)

    result = invoke(['generate', '-L', 'python', str(path_in)])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode().replace('\r\n', '\n') == (
        'hello_bin = [\n'
        '  0x48, 0x65, 0x6c, 0x6c, 0x6f, 0x2c, 0x20, 0x57, 0x6f, 0x72, 0x6c, 0x64,\n'
        '  0x21, 0x0a,\n'
        ']\n'
    )


def test_generate_options(tmppath):
    path_out = tmppath / 'hello.rs'

    result = invoke(['generate', '-L', 'Rust', '-n', 'hello', '-C', '-V', '-b', 'binary',
                     '-c', '2', '-s', '1', '-l', '3', '-', str(path_out)], input=HELLO)
    assert result.exit_code == 0
    assert read_text(path_out) == (
        'pub static HELLO: &[u8] = &[\n'
        '  0b01100101, 0b01101100,\n'
        '  0b01101100,\n'
        '];\n'
    )


def test_read_error_reported(monkeypatch):
    def failing_core(*args, **kwargs):
        raise SourceReadError('cannot read input: device not ready')

    for command, core in (('reverse', 'revert_core'), ('generate', 'generate_core')):
        monkeypatch.setattr(hexxer.cli, core, failing_core)
        result = invoke([command], input=HELLO)
        assert result.exit_code == 1, command
        assert 'Error: cannot read input: device not ready' in result.output


def test_generate_invalid_language():
    result = invoke(['generate', '-L', 'cobol'], input=HELLO)
    assert result.exit_code == 2
