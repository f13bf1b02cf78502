import logging
import os
import sqlite3
from datetime import datetime

SCHEMA = """
    CREATE TABLE IF NOT EXISTS logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp TEXT,
        level TEXT,
        logger TEXT,
        message TEXT
    );
"""


class SQLiteHandler(logging.Handler):
    """
    A logging handler that keeps quiz warnings in an SQLite database.

    The ``logs`` table is created on construction. Each record opens its own
    connection, so the handler can be shared by request threads and the
    event loop.
    """

    def __init__(self, db_path: str):
        super().__init__()
        self.db_path = db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = self._connect()
        with conn:
            conn.execute(SCHEMA)
        conn.close()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def emit(self, record):
        try:
            conn = self._connect()
            with conn:
                conn.execute(
                    "INSERT INTO logs (timestamp, level, logger, message) "
                    "VALUES (?, ?, ?, ?)",
                    (
                        datetime.fromtimestamp(record.created).isoformat(sep=" "),
                        record.levelname,
                        record.name,
                        self.format(record),
                    ),
                )
            conn.close()
        except Exception:
            self.handleError(record)
