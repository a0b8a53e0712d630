"""
Rolling in-memory history of tick records.

Keeps the most recent ``max_size`` rows, which is what a scrolling chart
or any other live observer needs without unbounded memory growth.
"""

from typing import List, Dict, Any, Optional, Sequence
from collections import deque
import csv

import numpy as np

from pid_loop.utils.validators import validate_positive


class DataBuffer:
    """
    Fixed-capacity buffer of row dictionaries; the oldest rows drop out first.
    """

    def __init__(self, max_size: int = 10000, columns: Optional[List[str]] = None):
        """
        Initialize data buffer.

        Args:
            max_size: Maximum number of rows to store
            columns: Optional list of expected columns (used for CSV export)
        """
        validate_positive(max_size, "max_size")

        self._max_size = int(max_size)
        self._columns = columns
        self._buffer: deque = deque(maxlen=self._max_size)

    def append(self, data: Dict[str, Any]) -> None:
        """Add a row to the buffer."""
        self._buffer.append(dict(data))

    def extend(self, data_list: Sequence[Dict[str, Any]]) -> None:
        """Add multiple rows to the buffer."""
        for data in data_list:
            self._buffer.append(dict(data))

    def get_all(self) -> List[Dict[str, Any]]:
        """Get all buffered rows, oldest first."""
        return list(self._buffer)

    def get_last(self, n: int) -> List[Dict[str, Any]]:
        """Get the last n rows."""
        if n <= 0:
            return []
        return list(self._buffer)[-n:]

    def get_column(self, column: str) -> np.ndarray:
        """Get all values for a column as a float array (missing values become nan)."""
        return np.array(
            [row.get(column, np.nan) for row in self._buffer],
            dtype=float
        )

    def clear(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def is_full(self) -> bool:
        """Check if buffer is at max capacity."""
        return len(self._buffer) >= self._max_size

    def to_csv(self, file_path: str) -> None:
        """
        Export buffer contents to CSV file.

        Args:
            file_path: Output file path
        """
        data = self.get_all()
        if not data:
            return

        columns = self._columns or list(data[0].keys())

        with open(file_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=columns, extrasaction='ignore')
            writer.writeheader()
            writer.writerows(data)
