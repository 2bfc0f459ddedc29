"""Per-task mutual exclusion for read-modify-write commands.

A task and its applications/roster form one consistency unit. Row locks
(`SELECT ... FOR UPDATE`) serialize writers across processes on PostgreSQL;
this registry serializes writers inside one process, which is the only guard
SQLite gets.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class TaskLockRegistry:
    """Hands out one re-entrant lock per task id, dropping it once unused."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}
        self._holders: dict[str, int] = {}

    @contextmanager
    def hold(self, id_task: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(id_task, threading.RLock())
            self._holders[id_task] = self._holders.get(id_task, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._holders[id_task] -= 1
                if self._holders[id_task] == 0:
                    del self._holders[id_task]
                    del self._locks[id_task]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


task_locks = TaskLockRegistry()
