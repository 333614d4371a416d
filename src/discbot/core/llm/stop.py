"""Client-side stop-sequence enforcement for streamed text."""

from collections.abc import Iterable


class StopSequenceFilter:
    """Cut streamed text at the first occurrence of any stop sequence.

    ``feed`` returns the part of the incoming text that can be emitted
    now. The longest tail that may still grow into a stop sequence is
    held back; it is released by a later ``feed`` or by ``flush``.
    Once a stop sequence is seen, ``stopped`` is set and nothing further
    is emitted.
    """

    def __init__(self, stop: Iterable[str] = ()) -> None:
        self._stop = tuple(s for s in stop if s)
        self._max_hold = max((len(s) for s in self._stop), default=1) - 1
        self._pending = ""
        self.stopped = False

    def feed(self, text: str) -> str:
        if self.stopped:
            return ""
        if not self._stop:
            return text

        buffer = self._pending + text
        hits = [i for i in (buffer.find(s) for s in self._stop) if i != -1]
        if hits:
            self.stopped = True
            self._pending = ""
            return buffer[: min(hits)]

        hold = self._hold_length(buffer)
        self._pending = buffer[len(buffer) - hold :]
        return buffer[: len(buffer) - hold]

    def flush(self) -> str:
        pending, self._pending = self._pending, ""
        return "" if self.stopped else pending

    def _hold_length(self, buffer: str) -> int:
        for size in range(min(len(buffer), self._max_hold), 0, -1):
            tail = buffer[-size:]
            if any(s.startswith(tail) for s in self._stop):
                return size
        return 0


def truncate_at_stop(text: str, stop: Iterable[str]) -> str:
    """Non-streaming counterpart of ``StopSequenceFilter``."""
    stop_filter = StopSequenceFilter(stop)
    return stop_filter.feed(text) + stop_filter.flush()
