"""Tick logging components."""

from pid_loop.logging.csv_logger import CSVLogger
from pid_loop.logging.data_buffer import DataBuffer

__all__ = [
    "CSVLogger",
    "DataBuffer",
]
