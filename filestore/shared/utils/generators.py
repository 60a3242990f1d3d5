"""ID generators: 64-bit time-ordered integers for storage rows.

Layout (most significant first): 41 bits of milliseconds since EPOCH_MS,
10 bits of worker id, 12 bits of per-millisecond sequence. Ids sort by
creation time and fit a signed BIGINT column.
"""

import threading
import time

# 2024-01-01T00:00:00Z
EPOCH_MS = 1704067200000

WORKER_BITS = 10
SEQUENCE_BITS = 12
MAX_WORKER_ID = (1 << WORKER_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1


class IdGenerator:
    """Thread-safe snowflake-style id generator for one worker."""

    def __init__(self, worker_id: int = 0) -> None:
        if not 0 <= worker_id <= MAX_WORKER_ID:
            raise ValueError(f"worker_id must be between 0 and {MAX_WORKER_ID}")
        self.worker_id = worker_id
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    @staticmethod
    def _now_ms() -> int:
        return time.time_ns() // 1_000_000

    def next_id(self) -> int:
        """Return the next id; blocks until the next millisecond if the sequence is exhausted."""
        with self._lock:
            now = self._now_ms()
            # Clock moved backwards: keep issuing from the last seen millisecond.
            if now < self._last_ms:
                now = self._last_ms
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    while now <= self._last_ms:
                        now = self._now_ms()
            else:
                self._sequence = 0
            self._last_ms = now
            return (
                ((now - EPOCH_MS) << (WORKER_BITS + SEQUENCE_BITS))
                | (self.worker_id << SEQUENCE_BITS)
                | self._sequence
            )


_generator = IdGenerator()


def configure_id_generator(worker_id: int) -> None:
    """Replace the process-wide generator (called once at startup)."""
    global _generator
    _generator = IdGenerator(worker_id)


def generate_id() -> int:
    """Generate a new 64-bit time-ordered id.

    Returns:
        A positive integer unique within this worker.
    """
    return _generator.next_id()
