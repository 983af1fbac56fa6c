"""
Output sinks for seller records.

Records are pushed one at a time as the orchestrator produces them, so a
run that is killed halfway keeps everything emitted so far.
"""

import json
import logging
from pathlib import Path
from typing import List, Sequence

from sqlalchemy.exc import SQLAlchemyError

from sellers.base import SellerRecord
from .database import SellerRecordRow

logger = logging.getLogger(__name__)


class MemorySink:
    """Keeps records in a list."""

    def __init__(self):
        self.records: List[SellerRecord] = []

    def append(self, record: SellerRecord) -> None:
        self.records.append(record)


class JsonLinesSink:
    """Appends one JSON object per line to a file, flushing after each record."""

    def __init__(self, path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open('a', encoding='utf-8')
        self.count = 0

    def append(self, record: SellerRecord) -> None:
        self._file.write(json.dumps(record.to_dict(), ensure_ascii=False) + '\n')
        self._file.flush()
        self.count += 1

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
            logger.info(f"Wrote {self.count} record(s) to {self.path}")


class DatabaseSink:
    """Inserts each record as a seller_records row and commits immediately."""

    def __init__(self, session):
        """
        Args:
            session: SQLAlchemy session (owned by the caller)
        """
        self.db = session
        self.count = 0

    def append(self, record: SellerRecord) -> None:
        try:
            self.db.add(SellerRecordRow.from_record(record))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.count += 1

    def close(self) -> None:
        self.db.close()


class MultiSink:
    """Forwards every record to several sinks, in order."""

    def __init__(self, sinks: Sequence):
        self.sinks = list(sinks)

    def append(self, record: SellerRecord) -> None:
        for sink in self.sinks:
            sink.append(record)

    def close(self) -> None:
        for sink in self.sinks:
            close = getattr(sink, 'close', None)
            if close is not None:
                close()
