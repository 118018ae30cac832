"""
In-memory implementation of the store protocols.

The collections keep records in insertion order. Every mutation builds the
next record dict and passes it to _commit() before adopting it, so a failed
commit leaves the collection untouched; file_provider overrides that hook
to persist.
"""

from __future__ import annotations

from dataclasses import replace

from zvault.errors import NotFoundError
from zvault.providers import (
    Clock,
    Filter,
    Secret,
    SystemClock,
    Task,
    matches_filter,
    matches_query,
)


class SecretCollection:
    """SecretStore backed by a dict."""

    def __init__(self, clock: Clock, records: list[Secret] | None = None):
        self._clock = clock
        self._records: dict[str, Secret] = {s.id: s for s in records or ()}

    def _commit(self, records: dict[str, Secret]) -> None:
        """Called with the post-mutation records before they replace the current ones."""

    def _apply(self, records: dict[str, Secret]) -> None:
        self._commit(records)
        self._records = records

    def add(self, secret: Secret) -> None:
        self._apply({**self._records, secret.id: secret})

    def get(self, secret_id: str) -> Secret:
        try:
            return self._records[secret_id]
        except KeyError:
            raise NotFoundError(f"secret {secret_id} not found") from None

    def list(self) -> list[Secret]:
        return list(self._records.values())

    def update(self, secret: Secret) -> Secret:
        if secret.id not in self._records:
            raise NotFoundError(f"secret {secret.id} not found")
        stored = replace(secret, updated_at=self._clock.now())
        self._apply({**self._records, secret.id: stored})
        return stored

    def delete(self, secret_id: str) -> None:
        if secret_id not in self._records:
            raise NotFoundError(f"secret {secret_id} not found")
        self._apply({k: s for k, s in self._records.items() if k != secret_id})

    def search(self, query: str) -> list[Secret]:
        return [s for s in self._records.values() if matches_query(s, query)]


class TaskCollection:
    """TaskStore backed by a dict."""

    def __init__(self, records: list[Task] | None = None):
        self._records: dict[str, Task] = {t.id: t for t in records or ()}

    def _commit(self, records: dict[str, Task]) -> None:
        """Called with the post-mutation records before they replace the current ones."""

    def _apply(self, records: dict[str, Task]) -> None:
        self._commit(records)
        self._records = records

    def add(self, task: Task) -> None:
        self._apply({**self._records, task.id: task})

    def get(self, task_id: str) -> Task:
        try:
            return self._records[task_id]
        except KeyError:
            raise NotFoundError(f"task {task_id} not found") from None

    def list(self, f: Filter = Filter()) -> list[Task]:
        return [t for t in self._records.values() if matches_filter(t, f)]

    def update(self, task: Task) -> Task:
        if task.id not in self._records:
            raise NotFoundError(f"task {task.id} not found")
        self._apply({**self._records, task.id: task})
        return task

    def delete(self, task_id: str) -> None:
        if task_id not in self._records:
            raise NotFoundError(f"task {task_id} not found")
        self._apply({k: t for k, t in self._records.items() if k != task_id})

    def clear_done(self) -> int:
        kept = {tid: t for tid, t in self._records.items() if not t.done}
        removed = len(self._records) - len(kept)
        if removed:
            self._apply(kept)
        return removed


class MemoryVault:
    """Vault whose contents live only as long as the process."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()
        self._secrets = SecretCollection(self._clock)
        self._tasks = TaskCollection()
        self.closed = False

    @property
    def secrets(self) -> SecretCollection:
        return self._secrets

    @property
    def tasks(self) -> TaskCollection:
        return self._tasks

    def close(self) -> None:
        self.closed = True
