import logging

logger = logging.getLogger(__name__)


class ResponseBuffer:
    """
    Fixed capacity byte buffer holding raw response bodies.

    With flush enabled each response overwrites the previous one,
    otherwise responses are appended after the current cursor.
    """

    def __init__(self, capacity: int, flush: bool = True):
        if capacity <= 0:
            raise ValueError("Response buffer capacity must be positive")
        self.capacity = capacity
        self.flush = flush
        self._data = bytearray()
        self.pos = 0

    def begin_response(self) -> int:
        """Prepare for a new response and return the offset it starts at."""
        if self.flush:
            self.reset()
        return self.pos

    def write(self, chunk: bytes) -> int:
        """
        Append a chunk at the cursor.

        Returns the number of bytes accepted, 0 if the chunk would
        overflow the buffer. Nothing is written in that case.
        """
        size = len(chunk)
        if self.pos + size > self.capacity:
            logger.warning(
                "Response chunk rejected | pos=%s chunk=%s capacity=%s",
                self.pos, size, self.capacity,
            )
            return 0
        del self._data[self.pos:]
        self._data.extend(chunk)
        self.pos += size
        return size

    def rollback(self, offset: int) -> None:
        """Drop everything written after offset."""
        offset = max(0, min(offset, self.pos))
        del self._data[offset:]
        self.pos = offset

    def reset(self) -> None:
        self._data.clear()
        self.pos = 0

    def getvalue(self, start: int = 0) -> bytes:
        return bytes(self._data[start:self.pos])

    @property
    def text(self) -> str:
        return self._data[:self.pos].decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return self.pos
