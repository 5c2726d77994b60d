"""Main CLI entry point for bencodec."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .. import __version__
from ..codec import decode, encode
from ..exceptions import BencodeError
from .analyze import analyze_file

logger = logging.getLogger("bencodec.cli")


def render(value: Any) -> Any:
    """Convert a decoded value to something json.dumps accepts.

    Byte strings become text when they are valid UTF-8, otherwise ``0x``-prefixed hex.
    """
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return "0x" + value.hex()
    if isinstance(value, list):
        return [render(item) for item in value]
    if isinstance(value, dict):
        return {render(key): render(item) for key, item in value.items()}
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bencodec",
        description="bencodec: Typed Bencode Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bencodec --decode file.torrent         Show a bencoded file as JSON
  bencodec --encode-json data.json       Encode JSON to bencode on stdout
  bencodec --analyze records.py          Show record field descriptors
  bencodec --version                      Show version
        """,
    )

    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze record classes and show their field descriptors",
    )
    action.add_argument(
        "--decode",
        metavar="FILE",
        type=str,
        help="Decode a bencoded file and print it as JSON",
    )
    action.add_argument(
        "--encode-json",
        metavar="FILE",
        type=str,
        help="Encode a JSON file to bencode",
    )

    parser.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        type=str,
        help="Write --encode-json output to FILE instead of stdout",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="version",
        version=f"bencodec {__version__}",
    )
    return parser


def _cmd_decode(file_path: Path) -> None:
    value = decode(file_path.read_bytes())
    print(json.dumps(render(value), indent=2, ensure_ascii=False))


def _cmd_encode_json(file_path: Path, output: Optional[str]) -> None:
    with file_path.open("rb") as f:
        document = json.load(f)
    data = encode(document)
    if output:
        Path(output).write_bytes(data)
        logger.debug("wrote %d bytes to %s", len(data), output)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the bencodec CLI.

    Returns:
        Exit code (0 for success, 1 for usage or file errors, 2 for codec errors)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    file_arg = args.analyze or args.decode or args.encode_json
    if file_arg is None:
        parser.print_help()
        return 0

    file_path = Path(file_arg)
    if not file_path.exists():
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        return 1

    try:
        if args.analyze:
            analyze_file(file_path)
        elif args.decode:
            _cmd_decode(file_path)
        else:
            _cmd_encode_json(file_path, args.output)
    except BencodeError as e:
        print(f"bencodec: error [{e.code}]: {e}", file=sys.stderr)
        return 2
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error processing file: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
