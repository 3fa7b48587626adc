from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of queries cannot
    starve ingestion.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._can_proceed = threading.Condition(self._lock)
        self._active_readers = 0
        self._waiting_writers = 0
        self._writer_active = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._can_proceed:
            while self._writer_active or self._waiting_writers:
                self._can_proceed.wait()
            self._active_readers += 1
        try:
            yield
        finally:
            with self._can_proceed:
                self._active_readers -= 1
                if self._active_readers == 0:
                    self._can_proceed.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._can_proceed:
            self._waiting_writers += 1
            try:
                while self._writer_active or self._active_readers:
                    self._can_proceed.wait()
            finally:
                self._waiting_writers -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._can_proceed:
                self._writer_active = False
                self._can_proceed.notify_all()
