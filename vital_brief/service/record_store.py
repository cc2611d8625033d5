import asyncio
import datetime as dt
from pathlib import Path
from typing import List, Optional, Sequence, Union

import duckdb
from loguru import logger

from vital_brief.service.errors import PersistenceError
from vital_brief.service.insight_analysis.common.data_models import DailyRecord, RecordSources

RECORD_COLUMNS = [
    "date",
    "sleep_minutes",
    "hrv_ms",
    "resting_hr_bpm",
    "steps",
    "active_energy_kcal",
    "workout_minutes",
    "workout_count",
    "sources",
]


class DailyRecordStore:
    """Local cache of the daily record history and the last sync timestamp.

    Records live in a DuckDB database. Every public method takes the same asyncio lock,
    so concurrent callers never interleave their reads and writes.
    """

    _RECORDS_TABLE_NAME = "daily_records"
    _SYNC_TABLE_NAME = "sync_metadata"
    _LAST_SYNC_KEY = "last_sync"

    def __init__(self, db_path: Union[str, Path]):
        """
        Open (or create) the database.

        Args:
            db_path: Path of the DuckDB file, or ":memory:".
        """
        self.db_path = db_path
        self._lock = asyncio.Lock()

        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self.conn = duckdb.connect(str(db_path))
            self._initialize_tables()
        except duckdb.Error as e:
            logger.error(f"Error opening record store at {db_path}: {str(e)}")
            raise PersistenceError("open", str(e)) from e

        logger.info(f"Connected to record store at {db_path}")

    def _initialize_tables(self) -> None:
        """Create the tables if they don't exist."""
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._RECORDS_TABLE_NAME} (
                date DATE PRIMARY KEY,
                sleep_minutes DOUBLE,
                hrv_ms DOUBLE,
                resting_hr_bpm DOUBLE,
                steps DOUBLE,
                active_energy_kcal DOUBLE,
                workout_minutes DOUBLE,
                workout_count INTEGER,
                sources VARCHAR
            )
            """
        )
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._SYNC_TABLE_NAME} (
                key VARCHAR PRIMARY KEY,
                value VARCHAR
            )
            """
        )

    @staticmethod
    def _to_row(record: DailyRecord) -> tuple:
        return (
            record.date,
            record.sleep_minutes,
            record.hrv_ms,
            record.resting_hr_bpm,
            record.steps,
            record.active_energy_kcal,
            record.workout_minutes,
            record.workout_count,
            record.sources.model_dump_json(),
        )

    @staticmethod
    def _from_row(row: tuple) -> DailyRecord:
        values = dict(zip(RECORD_COLUMNS, row))
        sources_json = values.pop("sources")
        sources = RecordSources.model_validate_json(sources_json) if sources_json else RecordSources()
        return DailyRecord(sources=sources, **values)

    async def save_records(self, records: Sequence[DailyRecord]) -> None:
        """
        Replace the stored history with the given records.

        Raises:
            PersistenceError: If the records could not be written. The previous history is kept.
        """
        async with self._lock:
            logger.info(f"Saving {len(records)} daily records")
            placeholders = ", ".join("?" for _ in RECORD_COLUMNS)
            try:
                self.conn.begin()
                self.conn.execute(f"DELETE FROM {self._RECORDS_TABLE_NAME}")
                if records:
                    self.conn.executemany(
                        f"INSERT INTO {self._RECORDS_TABLE_NAME} ({', '.join(RECORD_COLUMNS)}) VALUES ({placeholders})",
                        [self._to_row(record) for record in records],
                    )
                self.conn.commit()
            except duckdb.Error as e:
                self.conn.rollback()
                logger.error(f"Error saving daily records: {str(e)}")
                raise PersistenceError("save", str(e)) from e

    async def load_records(self) -> List[DailyRecord]:
        """
        Load the stored history, newest first.

        Returns:
            List of records, empty if nothing has been saved yet.
        """
        async with self._lock:
            try:
                rows = self.conn.execute(
                    f"SELECT {', '.join(RECORD_COLUMNS)} FROM {self._RECORDS_TABLE_NAME} ORDER BY date DESC"
                ).fetchall()
            except duckdb.Error as e:
                logger.error(f"Error loading daily records: {str(e)}")
                raise PersistenceError("load", str(e)) from e

        return [self._from_row(row) for row in rows]

    async def save_sync_timestamp(self, timestamp: dt.datetime) -> None:
        """Store the time of the last successful sync."""
        async with self._lock:
            try:
                self.conn.execute(
                    f"INSERT OR REPLACE INTO {self._SYNC_TABLE_NAME} (key, value) VALUES (?, ?)",
                    (self._LAST_SYNC_KEY, timestamp.isoformat()),
                )
            except duckdb.Error as e:
                logger.error(f"Error saving sync timestamp: {str(e)}")
                raise PersistenceError("save", str(e)) from e

    async def load_sync_timestamp(self) -> Optional[dt.datetime]:
        """Load the time of the last successful sync, or None if there was none."""
        async with self._lock:
            try:
                row = self.conn.execute(
                    f"SELECT value FROM {self._SYNC_TABLE_NAME} WHERE key = ?", (self._LAST_SYNC_KEY,)
                ).fetchone()
            except duckdb.Error as e:
                logger.error(f"Error loading sync timestamp: {str(e)}")
                raise PersistenceError("load", str(e)) from e

        return dt.datetime.fromisoformat(row[0]) if row else None

    async def clear(self) -> None:
        """Remove all cached records and the sync timestamp."""
        async with self._lock:
            logger.info("Clearing record store")
            try:
                self.conn.execute(f"DELETE FROM {self._RECORDS_TABLE_NAME}")
                self.conn.execute(f"DELETE FROM {self._SYNC_TABLE_NAME}")
            except duckdb.Error as e:
                logger.error(f"Error clearing record store: {str(e)}")
                raise PersistenceError("clear", str(e)) from e

    def close(self) -> None:
        """Close the database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            logger.info("Closed record store")
