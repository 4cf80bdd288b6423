"""Timestamp helpers; every service takes ``now`` as epoch seconds."""

import time
from datetime import datetime

from chatroom.constants import TIME_FORMAT


def now() -> float:
    return time.time()


def to_epoch_ms(timestamp: float) -> int:
    return int(timestamp * 1000)


def format_time(timestamp: float) -> str:
    """Local wall-clock HH:MM:SS."""
    return datetime.fromtimestamp(timestamp).strftime(TIME_FORMAT)
