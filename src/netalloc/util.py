"""
    Copyright 2024 Inmanta

    Licensed under the Apache License, Version 2.0 (the "License");
    you may not use this file except in compliance with the License.
    You may obtain a copy of the License at

        http://www.apache.org/licenses/LICENSE-2.0

    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Contact: code@inmanta.com
"""

import contextlib
import threading
from collections.abc import Iterator


class ReadWriteLock:
    """
    A readers-writer lock for threads.

    Any number of readers may hold the lock at the same time, a writer holds it exclusively. Writers are serialized among
    themselves and wait for the active readers to leave. Once a writer holds the lock, new readers wait until it is released.

    This lock is not reentrant: a thread holding the lock must not acquire it again.
    """

    def __init__(self) -> None:
        self._readers = 0
        self._state_lock = threading.Lock()
        self._writer_lock = threading.Lock()
        self._no_readers = threading.Condition(self._state_lock)

    def acquire_read(self) -> None:
        with self._no_readers:
            self._readers += 1

    def release_read(self) -> None:
        with self._no_readers:
            self._readers -= 1
            if self._readers == 0:
                self._no_readers.notify_all()

    def acquire_write(self) -> None:
        self._writer_lock.acquire()
        self._state_lock.acquire()
        try:
            while self._readers > 0:
                self._no_readers.wait()
        except BaseException:
            # wait() holds the state lock again when it raises
            self._state_lock.release()
            self._writer_lock.release()
            raise

    def release_write(self) -> None:
        self._state_lock.release()
        self._writer_lock.release()

    @contextlib.contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextlib.contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
