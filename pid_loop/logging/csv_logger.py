"""
CSV log of control-loop ticks.

The controller and the simulation loop each write one row per tick. Rows
are kept in memory and written out in batches of ``buffer_size`` so a
long run does not touch the disk on every tick.
"""

from typing import Any, Dict, List, Mapping, Sequence, Union
from pathlib import Path
import csv


class CSVLogger:
    """
    Batched per-tick CSV writer with a fixed column set.

    ``log`` accepts a mapping or any record with a ``to_dict()`` method
    (``TickResult``, ``PIDState``). Columns missing from a row are left
    empty and keys outside ``columns`` are dropped.

    Example:
        >>> with CSVLogger("room.csv", columns=TICK_COLUMNS) as log:
        ...     log.log(loop.tick())
    """

    def __init__(
        self,
        file_path: str,
        columns: Sequence[str],
        buffer_size: int = 100,
        append: bool = False
    ):
        if not columns:
            raise ValueError("columns cannot be empty")
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")

        self._file_path = Path(file_path)
        self._columns = list(columns)
        self._buffer_size = buffer_size
        self._pending: List[Dict[str, Any]] = []
        self._rows_written = 0

        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        needs_header = not (append and self._file_path.exists() and self._file_path.stat().st_size > 0)

        self._file = open(self._file_path, 'a' if append else 'w', newline='')
        self._writer = csv.DictWriter(
            self._file, fieldnames=self._columns, restval='', extrasaction='ignore'
        )
        if needs_header:
            self._writer.writeheader()
        self._closed = False

    def log(self, row: Union[Mapping[str, Any], Any]) -> None:
        """Queue one row; writes the batch once ``buffer_size`` rows are waiting."""
        if self._closed:
            raise RuntimeError(f"CSV log {self._file_path} is closed")
        if hasattr(row, 'to_dict'):
            row = row.to_dict()
        self._pending.append(dict(row))
        if len(self._pending) >= self._buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write queued rows. On an I/O error the rows stay queued."""
        if self._closed or not self._pending:
            return
        try:
            self._writer.writerows(self._pending)
            self._file.flush()
        except OSError as e:
            raise RuntimeError(f"Failed to write {self._file_path}: {e}") from e
        self._rows_written += len(self._pending)
        self._pending.clear()

    def close(self) -> None:
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True
            self._file.close()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def rows_written(self) -> int:
        """Rows already on disk."""
        return self._rows_written

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
