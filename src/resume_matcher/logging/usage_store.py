"""SQLite-backed usage log storage."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from resume_matcher.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".resume-matcher" / "usage.db"

_FIELDS = (
    "id",
    "timestamp",
    "mode",
    "resume_name",
    "match_score",
    "sections_selected",
    "sections_improved",
    "skills_added",
    "elapsed_seconds",
    "total_input_tokens",
    "total_output_tokens",
    "llm_calls",
    "estimated_cost_usd",
    "success",
    "error_message",
)
_LIST_FIELDS = ("sections_selected", "sections_improved")


class UsageStore:
    """SQLite store (WAL mode) for analyze/improve run logs."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    timestamp TEXT NOT NULL,
                    mode TEXT NOT NULL,
                    resume_name TEXT,
                    match_score INTEGER,
                    sections_selected TEXT NOT NULL DEFAULT '[]',
                    sections_improved TEXT NOT NULL DEFAULT '[]',
                    skills_added INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    total_input_tokens INTEGER NOT NULL DEFAULT 0,
                    total_output_tokens INTEGER NOT NULL DEFAULT 0,
                    llm_calls INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        row = log.model_dump()
        row["timestamp"] = log.timestamp.isoformat()
        for name in _LIST_FIELDS:
            row[name] = json.dumps(row[name])
        placeholders = ", ".join(f":{name}" for name in _FIELDS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO usage_logs ({', '.join(_FIELDS)}) VALUES ({placeholders})",
                row,
            )

    def get_logs(self, mode: str | None = None, limit: int = 50) -> list[UsageLog]:
        """Retrieve the most recent logs, optionally filtered by mode."""
        query = f"SELECT {', '.join(_FIELDS)} FROM usage_logs"
        params: tuple = ()
        if mode is not None:
            query += " WHERE mode = ?"
            params = (mode,)
        query += " ORDER BY timestamp DESC LIMIT ?"
        with self._connect() as conn:
            rows = conn.execute(query, (*params, limit)).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self) -> dict:
        """Aggregate the current month's runs."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*),
                       SUM(total_input_tokens),
                       SUM(total_output_tokens),
                       SUM(estimated_cost_usd),
                       AVG(match_score),
                       SUM(skills_added),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM usage_logs
                   WHERE timestamp >= ?""",
                (month_start.isoformat(),),
            ).fetchone()
        return {
            "total_runs": row[0] or 0,
            "total_input_tokens": row[1] or 0,
            "total_output_tokens": row[2] or 0,
            "total_cost_usd": row[3] or 0.0,
            "avg_match_score": round(row[4], 1) if row[4] is not None else None,
            "total_skills_added": row[5] or 0,
            "success_rate": (row[6] / row[0] * 100) if row[0] else 0.0,
            "month": now.strftime("%Y-%m"),
        }

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        data = dict(zip(_FIELDS, row))
        for name in _LIST_FIELDS:
            data[name] = json.loads(data[name])
        data["success"] = bool(data["success"])
        return UsageLog.model_validate(data)
