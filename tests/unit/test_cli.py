"""Tests for CLI tool."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

from bencodec.cli.main import main, render


def run_cli(*args: str) -> subprocess.CompletedProcess:  # type: ignore[type-arg]
    return subprocess.run(
        [sys.executable, "-m", "bencodec.cli.main", *args],
        capture_output=True,
    )


RECORDS_SOURCE = '''
from typing import ClassVar

from bencodec import BaseRecord, BencodeField


class Peer(BaseRecord):
    """Peer record."""

    ip: str
    peer_id: bytes = BencodeField("peer id")
    port: int = BencodeField(",omitempty", default=0)

    bencode_max_bytes: ClassVar[int] = 64


class Sorted(BaseRecord):
    """Sorted record."""

    b: int = 0
    a: int = 0

    bencode_sorted_fields: ClassVar[bool] = True
'''


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert b"bencodec: Typed Bencode Codec" in result.stdout
    assert b"--decode" in result.stdout
    assert b"--encode-json" in result.stdout
    assert b"--analyze" in result.stdout


def test_cli_no_arguments_prints_help() -> None:
    """Test CLI without an action."""
    result = run_cli()
    assert result.returncode == 0
    assert b"usage: bencodec" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert b"bencodec 0.1.0" in result.stdout


def test_cli_decode(tmp_path: Path, sample_dict_bytes: bytes) -> None:
    """Test CLI --decode prints JSON."""
    path = tmp_path / "sample.bencode"
    path.write_bytes(sample_dict_bytes)
    result = run_cli("--decode", str(path))
    assert result.returncode == 0
    assert json.loads(result.stdout) == {"cow": "moo", "spam": "eggs"}


def test_cli_decode_malformed(tmp_path: Path) -> None:
    """Test CLI --decode with out-of-order keys."""
    path = tmp_path / "bad.bencode"
    path.write_bytes(b"d1:bi1e1:ai2ee")
    result = run_cli("--decode", str(path))
    assert result.returncode == 2
    assert b"ERR_KEY_ORDER" in result.stderr
    assert b"offset 7" in result.stderr


def test_cli_verbose_logs_rejections(tmp_path: Path) -> None:
    """Test -v enables debug logging."""
    path = tmp_path / "bad.bencode"
    path.write_bytes(b"i01e")
    result = run_cli("-v", "--decode", str(path))
    assert result.returncode == 2
    assert b"DEBUG bencodec.codec.decoder: rejected" in result.stderr


def test_cli_encode_json(tmp_path: Path, sample_dict_bytes: bytes) -> None:
    """Test CLI --encode-json writes canonical bencode to stdout."""
    path = tmp_path / "sample.json"
    path.write_text('{"spam": "eggs", "cow": "moo"}')
    result = run_cli("--encode-json", str(path))
    assert result.returncode == 0
    assert result.stdout == sample_dict_bytes


def test_cli_encode_json_output_file(tmp_path: Path) -> None:
    """Test CLI --encode-json with --output."""
    source = tmp_path / "list.json"
    source.write_text("[1, [2, true], {}]")
    target = tmp_path / "list.bencode"
    result = run_cli("--encode-json", str(source), "-o", str(target))
    assert result.returncode == 0
    assert result.stdout == b""
    assert target.read_bytes() == b"li1eli2ei1eedee"


@pytest.mark.parametrize(
    "document, code",
    [
        ('{"a": 1.5}', b"ERR_UNSUPPORTED_TYPE"),
        ('{"a": null}', b"ERR_REQUIRED_FIELD_ABSENT"),
    ],
)
def test_cli_encode_json_unencodable(tmp_path: Path, document: str, code: bytes) -> None:
    """Test JSON values with no bencode form."""
    path = tmp_path / "bad.json"
    path.write_text(document)
    result = run_cli("--encode-json", str(path))
    assert result.returncode == 2
    assert code in result.stderr
    assert b"$['a']" in result.stderr


def test_cli_encode_invalid_json(tmp_path: Path) -> None:
    """Test a file that is not JSON."""
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    result = run_cli("--encode-json", str(path))
    assert result.returncode == 1
    assert b"invalid JSON" in result.stderr


def test_cli_analyze(tmp_path: Path) -> None:
    """Test CLI --analyze lists field descriptors."""
    path = tmp_path / "records.py"
    path.write_text(RECORDS_SOURCE)
    result = run_cli("--analyze", str(path))
    assert result.returncode == 0
    out = result.stdout.decode()
    assert "2 records loaded." in out
    assert "Peer" in out and "Sorted" in out
    assert "peer_id -> 'peer id'" in out
    assert "Allowed maximum size of record: 64 bytes" in out
    assert "Encoded size with zero values: 19 bytes" in out
    assert "Field order: sorted by wire name" in out
    assert "omitempty" in out


def test_cli_analyze_no_records(tmp_path: Path) -> None:
    """Test CLI --analyze with a file defining no records."""
    path = tmp_path / "empty.py"
    path.write_text("X = 1\n")
    result = run_cli("--analyze", str(path))
    assert result.returncode == 0
    assert b"No record classes found" in result.stdout


@pytest.mark.parametrize("flag", ["--analyze", "--decode", "--encode-json"])
def test_cli_missing_file(flag: str) -> None:
    """Test CLI with missing file."""
    result = run_cli(flag, "nonexistent.file")
    assert result.returncode == 1
    assert b"File not found" in result.stderr


def test_main_in_process(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test main() returns exit codes without exiting."""
    path = tmp_path / "value.bencode"
    path.write_bytes(b"li1e2:\xff\x00e")
    argv: List[str] = ["--decode", str(path)]
    assert main(argv) == 0
    assert json.loads(capsys.readouterr().out) == [1, "0xff00"]


def test_render() -> None:
    """Test conversion of decoded values for display."""
    assert render({b"k": [b"text", b"\x80", 3]}) == {"k": ["text", "0x80", 3]}
