"""Time-ordered snowflake identifiers relative to a custom epoch."""

import os
import socket
import threading
import time
import zlib
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from lyntfeed.config import DEFAULT_EPOCH_MS


TIMESTAMP_BITS = 41
NODE_BITS = 10
SEQUENCE_BITS = 12

MAX_NODE_ID = (1 << NODE_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1
NODE_SHIFT = SEQUENCE_BITS
TIMESTAMP_SHIFT = SEQUENCE_BITS + NODE_BITS


@dataclass(frozen=True)
class SnowflakeParts:
    """Decoded components of a snowflake identifier."""

    timestamp_ms: int
    node_id: int
    sequence: int
    created_at: datetime


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def default_node_id() -> int:
    """Derive a node id from hostname and pid."""
    seed = f"{socket.gethostname()}:{os.getpid()}".encode()
    return zlib.crc32(seed) & MAX_NODE_ID


class SnowflakeGenerator:
    """
    Thread-safe snowflake generator.

    Layout (most significant first): 41 bits of milliseconds since the
    epoch, 10 bits of node id, 12 bits of per-millisecond sequence.

    Example:
        gen = SnowflakeGenerator(node_id=1)
        item_id = gen.next()
    """

    def __init__(
        self,
        node_id: int | None = None,
        epoch_ms: int = DEFAULT_EPOCH_MS,
        clock: Callable[[], int] = _wall_clock_ms,
    ):
        """
        Initialize generator.

        Args:
            node_id: Discriminator for this process (0-1023), derived if None
            epoch_ms: Custom epoch in Unix milliseconds
            clock: Millisecond clock, injectable for tests
        """
        if node_id is None:
            node_id = default_node_id()
        if not 0 <= node_id <= MAX_NODE_ID:
            raise ValueError(f"node_id must be between 0 and {MAX_NODE_ID}")

        self.node_id = node_id
        self.epoch_ms = epoch_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    def _elapsed_ms(self) -> int:
        elapsed = self._clock() - self.epoch_ms
        if elapsed < 0:
            raise ValueError("clock is before the configured epoch")
        return elapsed

    def next_id(self) -> int:
        """
        Return the next identifier as an integer.

        When all sequence numbers of the current millisecond are used the
        caller waits for the clock to move on. The wait happens outside the
        lock and lasts under a millisecond unless the clock has gone back.
        """
        while True:
            with self._lock:
                snowflake = self._try_next()
            if snowflake is not None:
                return snowflake
            time.sleep(0.0001)

    def _try_next(self) -> int | None:
        """Allocate an id, or return None if this millisecond is exhausted."""
        now = self._elapsed_ms()

        # Clock went backwards: stay on the last timestamp
        if now < self._last_ms:
            now = self._last_ms

        if now >= 1 << TIMESTAMP_BITS:
            raise OverflowError("snowflake timestamp range exhausted")

        if now == self._last_ms:
            if self._sequence == MAX_SEQUENCE:
                return None
            self._sequence += 1
        else:
            self._sequence = 0

        self._last_ms = now
        return (
            (now << TIMESTAMP_SHIFT)
            | (self.node_id << NODE_SHIFT)
            | self._sequence
        )

    def next(self) -> str:
        """Return the next identifier as a decimal string."""
        return str(self.next_id())

    def timestamp_of(self, snowflake: int | str) -> datetime:
        """Return the creation instant encoded in an identifier."""
        return decode(snowflake, self.epoch_ms).created_at


def decode(snowflake: int | str, epoch_ms: int = DEFAULT_EPOCH_MS) -> SnowflakeParts:
    """
    Split an identifier into its components.

    Args:
        snowflake: Identifier as int or decimal string
        epoch_ms: Epoch the identifier was generated against

    Returns:
        SnowflakeParts with the absolute creation time
    """
    value = int(snowflake)
    if value < 0:
        raise ValueError("snowflake must be non-negative")

    elapsed = value >> TIMESTAMP_SHIFT
    timestamp_ms = elapsed + epoch_ms
    return SnowflakeParts(
        timestamp_ms=timestamp_ms,
        node_id=(value >> NODE_SHIFT) & MAX_NODE_ID,
        sequence=value & MAX_SEQUENCE,
        created_at=datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc),
    )
