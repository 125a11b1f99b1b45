#!/usr/bin/env python3
"""
run_history.py — SQLite record of DataPrinter dump runs.

One row per run in <log dir>/dataprinter.db:

    runs(id, started_at, dump_type, source, sel_offset, byte_count,
         byte_line_length, output_kind, output_size, status, error)

status is 'ok', 'empty' or 'error'; output_kind is 'text' or 'binary'
(NULL when the run failed). Runs older than RETAIN_DAYS are dropped when
the history is opened.
"""

import sqlite3
from contextlib import closing
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timedelta
from pathlib import Path

RETAIN_DAYS = 30
DB_NAME     = "dataprinter.db"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS runs (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        started_at       TEXT NOT NULL,
        dump_type        TEXT NOT NULL,
        source           TEXT NOT NULL DEFAULT '',
        sel_offset       INTEGER NOT NULL DEFAULT 0,
        byte_count       INTEGER NOT NULL,
        byte_line_length INTEGER,
        output_kind      TEXT,
        output_size      INTEGER NOT NULL DEFAULT 0,
        status           TEXT NOT NULL,
        error            TEXT NOT NULL DEFAULT ''
    );
    CREATE INDEX IF NOT EXISTS idx_runs_type ON runs(dump_type);
"""


@dataclass(frozen=True)
class DumpRun:
    dump_type:        str
    byte_count:       int
    status:           str
    source:           str = ""
    sel_offset:       int = 0
    byte_line_length: int = None
    output_kind:      str = None
    output_size:      int = 0
    error:            str = ""
    started_at:       str = ""
    id:               int = None

    @classmethod
    def from_result(cls, dump_type: str, data: bytes, result, config=None,
                    source: str = "", sel_offset: int = 0) -> "DumpRun":
        """Describe a finished run from its input and rendered output."""
        return cls(
            dump_type=dump_type,
            byte_count=len(data),
            status="ok" if result else "empty",
            source=source,
            sel_offset=sel_offset,
            byte_line_length=config.byte_line_length if config else None,
            output_kind="binary" if isinstance(result, bytes) else "text",
            output_size=len(result),
        )

    @classmethod
    def from_error(cls, dump_type: str, data: bytes, exc: Exception, config=None,
                   source: str = "", sel_offset: int = 0) -> "DumpRun":
        return cls(
            dump_type=dump_type,
            byte_count=len(data),
            status="error",
            source=source,
            sel_offset=sel_offset,
            byte_line_length=config.byte_line_length if config else None,
            error=f"{type(exc).__name__}: {exc}",
        )


_COLUMNS = [f.name for f in fields(DumpRun)]


class RunHistory:
    def __init__(self, log_dir: str):
        folder = Path(log_dir)
        folder.mkdir(parents=True, exist_ok=True)
        self.db_path = str(folder / DB_NAME)

        with closing(self._connect()) as conn, conn:
            conn.executescript(_SCHEMA)
            cutoff = (datetime.now() - timedelta(days=RETAIN_DAYS)).isoformat()
            conn.execute("DELETE FROM runs WHERE started_at < ?", (cutoff,))

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def record(self, run: DumpRun) -> int:
        """Store a run and return its row id."""
        row = asdict(run)
        row.pop("id")
        row["started_at"] = run.started_at or datetime.now().isoformat()
        names = ", ".join(row)
        marks = ", ".join("?" * len(row))
        with closing(self._connect()) as conn, conn:
            cur = conn.execute(f"INSERT INTO runs({names}) VALUES({marks})",
                               tuple(row.values()))
            return cur.lastrowid

    def recent(self, limit: int = 20, dump_type: str = None,
               status: str = None) -> list:
        """Latest runs first, optionally filtered by dump type and status."""
        clauses, params = [], []
        if dump_type:
            clauses.append("dump_type = ?")
            params.append(dump_type)
        if status:
            clauses.append("status = ?")
            params.append(status)
        where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
        params.append(limit)
        with closing(self._connect()) as conn:
            rows = conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM runs {where} "
                f"ORDER BY id DESC LIMIT ?", params
            ).fetchall()
        return [DumpRun(**dict(r)) for r in rows]

    def totals(self) -> dict:
        """Per dump type: number of runs, failures and input bytes rendered."""
        with closing(self._connect()) as conn:
            rows = conn.execute(
                "SELECT dump_type, COUNT(*) AS runs, "
                "SUM(status = 'error') AS errors, "
                "SUM(CASE WHEN status != 'error' THEN byte_count ELSE 0 END) AS bytes "
                "FROM runs GROUP BY dump_type ORDER BY dump_type"
            ).fetchall()
        return {r["dump_type"]: {"runs": r["runs"], "errors": r["errors"],
                                 "bytes": r["bytes"]} for r in rows}


def format_run(run: DumpRun) -> str:
    """One line per run for --history."""
    when  = run.started_at[:19].replace("T", " ")
    width = f"/{run.byte_line_length}" if run.byte_line_length else ""
    if run.status == "error":
        outcome = run.error
    else:
        outcome = f"{run.output_size} {'bytes' if run.output_kind == 'binary' else 'chars'}"
    return (f"{when}  {run.status:<5} {run.dump_type}{width}  "
            f"{run.byte_count} bytes @ {run.sel_offset} from {run.source or '-'}  → {outcome}")
