#!/usr/bin/env python3
"""
dataprinter.py - Render a selected byte buffer as text for copying elsewhere.

Reads bytes from a file, a hex string or stdin, narrows them to the selected
range, and renders them through one of the dump formats in the formats/
folder: hex dump (with or without the ASCII column), hex stream, C-style
escaped string, printable text or raw binary.

Usage:
    python dataprinter.py [--type hex_dump] [--file capture.bin | --hex "45 00 00 3c"]
                          [--offset 14] [--length 20] [--width 16]
                          [--output out.txt] [--list] [--columns]
                          [--log-db ./logs] [--history 20] [--verbose]

Format script API:
    def dump(data: bytes, config: FormatConfig) -> str | bytes: ...
    Module-level docstring shown as description in --list.

dataprinter.ini format:
    [printer]
    byte_line_length = 16
    bytes_view = hex

    [format:hex_only]              # matches filename stem hex_only.py
    byte_line_length = 32
"""

import argparse
import configparser
import importlib.util
import inspect
import re
import sqlite3
import sys
import traceback
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from hexdump import FormatConfig, hex_chars
from run_history import DumpRun, RunHistory, format_run

INI_NAME         = "dataprinter.ini"
DEFAULT_TYPE     = "hex_dump"
DEFAULT_FORMATS  = str(Path(__file__).parent / "formats")

_HEX_PREFIX = re.compile(r"^0[xX]")
_HEX_SEPS   = re.compile(r"[\s:,\-]+")


# ─── Settings ────────────────────────────────────────────────────────────────

def read_settings(folder: str) -> configparser.ConfigParser:
    """Parse <folder>/dataprinter.ini; a missing file yields empty settings."""
    cfg = configparser.ConfigParser()
    cfg.read(Path(folder) / INI_NAME, encoding="utf-8")
    return cfg


def setting(cfg: configparser.ConfigParser, key: str, dump_type: str = None,
            fallback: str = None) -> str:
    """Look a key up in [format:<dump_type>] first, then in [printer]."""
    value = cfg.get("printer", key, fallback=fallback)
    if dump_type:
        value = cfg.get(f"format:{dump_type}", key, fallback=value)
    return value


def _parse_width(value) -> int:
    try:
        width = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"byte_line_length must be an integer, got {value!r}") from None
    if width < 1:
        raise ValueError(f"byte_line_length must be at least 1, got {width}")
    return width


def build_config(cfg: configparser.ConfigParser, dump_type: str = None) -> FormatConfig:
    """FormatConfig for one dump type. Raises ValueError for a bad line width."""
    width = setting(cfg, "byte_line_length", dump_type)
    if width is None:
        return FormatConfig()
    return FormatConfig(byte_line_length=_parse_width(width))


def get_bytes_view(cfg: configparser.ConfigParser) -> str:
    return setting(cfg, "bytes_view", fallback="hex").strip()


# ─── Format scripts ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DumpFormat:
    """A format script from the formats folder; dump is None if it failed to load."""
    name:        str
    path:        str
    description: str
    dump:        object = None

    @property
    def label(self) -> str:
        if self.dump is None:
            return f"⚠ {self.name}"
        return self.name.replace("_", " ").title()


def _check_dump_signature(fn):
    if not callable(fn):
        raise AttributeError("'dump' must be a function")
    try:
        inspect.signature(fn).bind(b"", FormatConfig())
    except TypeError:
        raise TypeError("'dump' must accept (data, config)") from None
    except ValueError:
        pass  # builtins without a signature


def load_format(script_path: str) -> DumpFormat:
    """
    Import a format script by path and check it exposes dump(data, config).
    Raises FileNotFoundError, AttributeError or TypeError.
    """
    path = Path(script_path).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Script not found: {path}")

    spec   = importlib.util.spec_from_file_location(f"dataprinter_format_{path.stem}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    fn = getattr(module, "dump", None)
    if fn is None:
        raise AttributeError("Script must define a 'dump(data, config)' function")
    _check_dump_signature(fn)

    doc = inspect.getdoc(module) or inspect.getdoc(fn) or ""
    description = doc.strip().partition("\n")[0] or "No description."
    return DumpFormat(path.stem, str(path), description, fn)


def scan_formats(folder: str) -> list:
    """
    Every public *.py script in folder as a DumpFormat, sorted by name.
    Scripts that fail to load stay in the list with dump=None and the
    error as their description.
    """
    folder = Path(folder)
    if not folder.is_dir():
        return []

    formats = []
    for script in sorted(folder.glob("[!_]*.py")):
        try:
            formats.append(load_format(str(script)))
        except Exception as exc:
            formats.append(DumpFormat(script.stem, str(script), f"Load error: {exc}"))
    return formats


# ─── Input helpers ───────────────────────────────────────────────────────────

def parse_hex(text: str) -> bytes:
    """
    Parse hex text such as '45 00 00 3c', '4500003c', '45:00:00:3c' or
    '0x45 0x00' into bytes.
    """
    tokens = [t for t in _HEX_SEPS.split(text.strip()) if t]
    cleaned = "".join(_HEX_PREFIX.sub("", t, count=1) for t in tokens)
    try:
        return bytes.fromhex(cleaned)
    except ValueError:
        raise ValueError(f"Not a valid hex byte string: {text!r}") from None


def select_range(data: bytes, offset: int = 0, length: int = None) -> bytes:
    """Return the selected slice of data; offset/length must be non-negative."""
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")
    if length is not None and length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    end = None if length is None else offset + length
    return data[offset:end]


def _describe(exc: Exception) -> str:
    # KeyError wraps its message in quotes
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


# ─── Printer ─────────────────────────────────────────────────────────────────

class DataPrinter:
    def __init__(self, formats_folder: str = DEFAULT_FORMATS, width: int = None,
                 verbose: bool = False, history: RunHistory = None, stream=None):

        self.formats_folder = formats_folder
        self.width          = None if width is None else _parse_width(width)
        self.verbose        = verbose
        self.history        = history
        self.stream         = stream if stream is not None else sys.stderr

        self.dump_count     = 0
        self.error_count    = 0

        self._cfg      = read_settings(formats_folder)
        self._formats  = {f.name: f for f in scan_formats(formats_folder)}

        broken = [f.name for f in self._formats.values() if f.dump is None]
        msg = f"Scanned '{formats_folder}': {len(self._formats) - len(broken)} formats"
        if broken:
            msg += f", failed: {', '.join(broken)}"
        self._log(msg, "warn" if broken else "info")

    @property
    def registry(self) -> list:
        return list(self._formats.values())

    def get_format(self, dump_type: str) -> DumpFormat:
        try:
            return self._formats[dump_type]
        except KeyError:
            names = ", ".join(self._formats) or "none"
            raise KeyError(f"Unknown dump type '{dump_type}' (available: {names})") from None

    def config_for(self, dump_type: str) -> FormatConfig:
        config = build_config(self._cfg, dump_type)
        if self.width is not None:
            config = replace(config, byte_line_length=self.width)
        return config

    def hex_chars(self) -> int:
        return hex_chars(get_bytes_view(self._cfg))

    # ── Rendering ─────────────────────────────────────────────────────────────

    def print_data(self, dump_type: str, data: bytes, offset: int = 0,
                   source: str = ""):
        """
        Render data with the named format. Returns str, or bytes for binary.
        offset and source only describe the selection in the run history.
        """
        data   = bytes(data)
        config = None
        try:
            fmt = self.get_format(dump_type)
            if fmt.dump is None:
                raise RuntimeError(f"Format '{dump_type}' failed to load: {fmt.description}")
            config = self.config_for(dump_type)
            self._log(f"▶ [{dump_type}] {len(data)} bytes, "
                      f"{config.byte_line_length} per line")
            result = fmt.dump(data, config)
        except Exception as exc:
            self.error_count += 1
            self._log(f"✗ [{dump_type}] {_describe(exc)}", "err")
            if self.verbose and not isinstance(exc, (KeyError, RuntimeError, ValueError)):
                self._log(traceback.format_exc().rstrip(), "err")
            self._record(DumpRun.from_error(dump_type, data, exc, config, source, offset))
            raise

        if not isinstance(result, (str, bytes)):
            result = str(result)

        if result:
            unit = "bytes" if isinstance(result, bytes) else "chars"
            self._log(f"✓ {len(result)} {unit} rendered", "ok")
        else:
            self._log(f"Nothing to print for [{dump_type}]", "warn")

        self.dump_count += 1
        self._record(DumpRun.from_result(dump_type, data, result, config, source, offset))
        return result

    def _record(self, run: DumpRun):
        if self.history is not None:
            self.history.record(run)

    # ── Logging ───────────────────────────────────────────────────────────────

    def _log(self, message: str, tag: str = "info"):
        if self.verbose:
            ts = datetime.now().strftime("%H:%M:%S")
            self.stream.write(f"[{ts}] {tag:<4} {message}\n")


# ─── Entry point ─────────────────────────────────────────────────────────────

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Render bytes as a hex dump, hex stream, escaped string, text or binary."
    )
    parser.add_argument("--type", "-t", default=DEFAULT_TYPE,
                        help=f"Dump type (format script name, default: {DEFAULT_TYPE}).")
    parser.add_argument("--formats", "-F", default=DEFAULT_FORMATS,
                        help="Folder to scan (default: <script dir>/formats).")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--file", "-f", default=None,
                        help="Read bytes from this file (default: stdin).")
    source.add_argument("--hex", "-x", default=None,
                        help="Take bytes from a hex string, e.g. '45 00 00 3c'.")
    parser.add_argument("--offset", type=int, default=0,
                        help="First byte of the selection (default: 0).")
    parser.add_argument("--length", type=int, default=None,
                        help="Number of bytes to select (default: to the end).")
    parser.add_argument("--width", "-w", type=int, default=None,
                        help="Bytes per hex dump line (overrides dataprinter.ini).")
    parser.add_argument("--output", "-o", default=None,
                        help="Write the result to this file instead of stdout.")
    parser.add_argument("--list", "-l", action="store_true",
                        help="List available dump types and exit.")
    parser.add_argument("--columns", action="store_true",
                        help="Print the byte view row width in characters and exit.")
    parser.add_argument("--log-db", default=None,
                        help="Folder for the dataprinter.db run history (optional).")
    parser.add_argument("--history", type=int, default=None, metavar="N",
                        help="Print the last N runs from --log-db and exit.")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log progress to stderr.")
    return parser.parse_args(argv)


def _source_name(args) -> str:
    if args.hex is not None:
        return "hex"
    if args.file is not None:
        return f"file:{args.file}"
    return "stdin"


def _read_input(args) -> bytes:
    if args.hex is not None:
        return parse_hex(args.hex)
    if args.file is not None:
        return Path(args.file).read_bytes()
    return sys.stdin.buffer.read()


def _write_output(result, output: str = None):
    if output:
        if isinstance(result, bytes):
            Path(output).write_bytes(result)
        else:
            Path(output).write_text(result, encoding="utf-8")
    elif isinstance(result, bytes):
        sys.stdout.buffer.write(result)
        sys.stdout.buffer.flush()
    else:
        sys.stdout.write(result)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.history is not None and not args.log_db:
        print("error: --history needs --log-db", file=sys.stderr)
        return 2

    try:
        history = RunHistory(args.log_db) if args.log_db else None

        if args.history is not None:
            for run in history.recent(args.history):
                print(format_run(run))
            return 0

        printer = DataPrinter(args.formats, width=args.width,
                              verbose=args.verbose, history=history)

        if args.list:
            for fmt in printer.registry:
                print(f"{fmt.name:<16} {fmt.description}")
            return 0

        if args.columns:
            print(printer.hex_chars())
            return 0

        data   = select_range(_read_input(args), args.offset, args.length)
        result = printer.print_data(args.type, data, args.offset, _source_name(args))
        _write_output(result, args.output)
        return 0

    except (OSError, sqlite3.Error, ValueError, KeyError, RuntimeError) as exc:
        print(f"error: {_describe(exc)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
