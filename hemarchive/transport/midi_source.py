from __future__ import annotations

import logging
import queue
import threading
import time
from enum import Enum
from typing import Protocol

import mido


class ThreadControl(Enum):
    STOP = "stop"


class PendingSource(Protocol):
    def receive_pending(self) -> list[mido.Message]: ...


class MidiSource:
    """Background reader delivering inbound messages through a queue.

    Each message is copied with `time` set to milliseconds since `start()`,
    which is the time base the archive writer expects. The controlling
    thread posts `ThreadControl.STOP` on `control` to end it.
    """

    def __init__(
        self,
        source: PendingSource,
        messages: queue.Queue[mido.Message] | None = None,
        *,
        poll_interval_s: float = 0.001,
    ) -> None:
        self._source = source
        self.messages: queue.Queue[mido.Message] = messages if messages is not None else queue.Queue()
        self.control: queue.Queue[ThreadControl] = queue.Queue()
        self._poll_interval_s = poll_interval_s
        self._thread: threading.Thread | None = None
        self._started_at = 0.0
        self._error: BaseException | None = None

        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def error(self) -> BaseException | None:
        """The exception that ended the reader thread, if any."""
        return self._error

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._started_at) * 1000)

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._started_at = time.monotonic()
        self._thread = threading.Thread(target=self._run, name="hem-midi-rx", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self.control.put(ThreadControl.STOP)

    def join(self, timeout: float | None = 2.0) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _run(self) -> None:
        self._logger.debug("MIDI reader started")
        try:
            while True:
                try:
                    command = self.control.get_nowait()
                except queue.Empty:
                    command = None
                if command is ThreadControl.STOP:
                    break

                for msg in self._source.receive_pending():
                    self.messages.put(msg.copy(time=self.elapsed_ms()))
                time.sleep(self._poll_interval_s)
        except Exception as exc:  # surfaced to the controlling thread via `error`
            self._logger.error("MIDI reader failed: %s", exc)
            self._error = exc
        self._logger.debug("MIDI reader stopped")
