"""
Record snapshots and collaborator protocols.

Protocols define the interface; implementations can be swapped
for testing or alternative storage backends.
"""

from __future__ import annotations

import secrets as _random
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Protocol

from zvault.errors import ValidationError


class SecretType(str, Enum):
    """Kind of secret; the value is the stored tag."""

    PASSWORD = "password"
    API_KEY = "apikey"
    SSH_KEY = "sshkey"
    NOTE = "note"

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    SecretType.PASSWORD: "password",
    SecretType.API_KEY: "api key",
    SecretType.SSH_KEY: "ssh key",
    SecretType.NOTE: "note",
}

# Keys every secret of a type must carry, then keys it may carry.
REQUIRED_FIELDS: dict[SecretType, tuple[str, ...]] = {
    SecretType.PASSWORD: ("url", "username", "password"),
    SecretType.API_KEY: ("service", "key"),
    SecretType.SSH_KEY: ("label", "private_key", "public_key"),
    SecretType.NOTE: ("content",),
}

OPTIONAL_FIELDS: dict[SecretType, tuple[str, ...]] = {
    SecretType.PASSWORD: ("totp_secret", "notes"),
    SecretType.API_KEY: ("notes",),
    SecretType.SSH_KEY: ("passphrase", "notes"),
    SecretType.NOTE: (),
}


class Priority(str, Enum):
    """Task priority; NONE is stored as an empty string."""

    NONE = ""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value or "none"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    def next(self) -> Priority:
        """Cycle none -> low -> medium -> high -> none."""
        order = list(Priority)
        return order[(order.index(self) + 1) % len(order)]


_PRIORITY_RANK = {
    Priority.NONE: 0,
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}


class FilterStatus(str, Enum):
    """Completion filter for task listings."""

    ALL = "all"
    PENDING = "pending"
    DONE = "done"


def generate_id() -> str:
    """8 lowercase hex characters from 4 random bytes."""
    return _random.token_hex(4)


@dataclass(frozen=True)
class Secret:
    """Immutable snapshot of a stored secret."""

    id: str
    name: str
    type: SecretType
    created_at: datetime
    updated_at: datetime
    fields: dict[str, str] = field(default_factory=dict)
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        allowed = REQUIRED_FIELDS[self.type] + OPTIONAL_FIELDS[self.type]
        unknown = sorted(set(self.fields) - set(allowed))
        if unknown:
            raise ValidationError(
                f"{self.type.value} secret has unknown fields: {', '.join(unknown)}"
            )
        missing = [k for k in REQUIRED_FIELDS[self.type] if k not in self.fields]
        if missing:
            raise ValidationError(
                f"{self.type.value} secret is missing fields: {', '.join(missing)}"
            )

    def field(self, key: str) -> str:
        """Field value, or empty string when the key is absent."""
        return self.fields.get(key, "")

    @property
    def totp_secret(self) -> str:
        return self.field("totp_secret")

    @property
    def has_totp(self) -> bool:
        return self.totp_secret != ""


def _new_secret(
    name: str,
    secret_type: SecretType,
    values: dict[str, str],
    now: datetime,
    tags: tuple[str, ...] = (),
) -> Secret:
    fields = {k: values.get(k, "") for k in REQUIRED_FIELDS[secret_type]}
    # optional keys only when they hold something
    for key in OPTIONAL_FIELDS[secret_type]:
        if values.get(key):
            fields[key] = values[key]
    return Secret(
        id=generate_id(),
        name=name,
        type=secret_type,
        fields=fields,
        tags=tuple(tags),
        created_at=now,
        updated_at=now,
    )


def new_password(
    name: str,
    url: str,
    username: str,
    password: str,
    now: datetime,
    totp_secret: str = "",
    notes: str = "",
    tags: tuple[str, ...] = (),
) -> Secret:
    return _new_secret(
        name,
        SecretType.PASSWORD,
        {
            "url": url,
            "username": username,
            "password": password,
            "totp_secret": totp_secret,
            "notes": notes,
        },
        now,
        tags,
    )


def new_api_key(
    name: str,
    service: str,
    key: str,
    now: datetime,
    notes: str = "",
    tags: tuple[str, ...] = (),
) -> Secret:
    return _new_secret(
        name,
        SecretType.API_KEY,
        {"service": service, "key": key, "notes": notes},
        now,
        tags,
    )


def new_ssh_key(
    name: str,
    label: str,
    private_key: str,
    public_key: str,
    now: datetime,
    passphrase: str = "",
    notes: str = "",
    tags: tuple[str, ...] = (),
) -> Secret:
    return _new_secret(
        name,
        SecretType.SSH_KEY,
        {
            "label": label,
            "private_key": private_key,
            "public_key": public_key,
            "passphrase": passphrase,
            "notes": notes,
        },
        now,
        tags,
    )


def new_note(
    name: str, content: str, now: datetime, tags: tuple[str, ...] = ()
) -> Secret:
    return _new_secret(name, SecretType.NOTE, {"content": content}, now, tags)


def new_secret(
    secret_type: SecretType,
    name: str,
    values: dict[str, str],
    now: datetime,
    tags: tuple[str, ...] = (),
) -> Secret:
    """Build a secret of any type from a key -> value map."""
    return _new_secret(name, secret_type, values, now, tags)


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a task."""

    id: str
    title: str
    created_at: datetime
    done: bool = False
    priority: Priority = Priority.NONE
    due: date | None = None
    tags: tuple[str, ...] = ()
    completed_at: datetime | None = None

    def toggled(self, now: datetime) -> Task:
        """Flip done; completion time is set on false->true, cleared otherwise."""
        if self.done:
            return replace(self, done=False, completed_at=None)
        return replace(self, done=True, completed_at=now)


def new_task(title: str, now: datetime) -> Task:
    return Task(id=generate_id(), title=title, created_at=now)


@dataclass(frozen=True)
class Filter:
    """Task list query. Empty fields match everything; fields conjoin."""

    status: FilterStatus = FilterStatus.ALL
    priority: Priority = Priority.NONE
    tag: str = ""


def matches_query(secret: Secret, query: str) -> bool:
    """Name substring (case-insensitive), exact tag, or exact type."""
    q = query.lower()
    if q in secret.name.lower():
        return True
    if q in secret.tags:
        return True
    return secret.type.value == q


def matches_filter(task: Task, f: Filter) -> bool:
    if f.status == FilterStatus.PENDING and task.done:
        return False
    if f.status == FilterStatus.DONE and not task.done:
        return False
    if f.priority != Priority.NONE and task.priority != f.priority:
        return False
    if f.tag and f.tag not in task.tags:
        return False
    return True


def parse_tags(raw: str) -> tuple[str, ...]:
    """Split on commas, trim, drop empties."""
    return tuple(t.strip() for t in raw.split(",") if t.strip())


# Serialization


def _parse_datetime(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def secret_to_dict(s: Secret) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "type": s.type.value,
        "fields": dict(s.fields),
        "tags": list(s.tags),
        "created_at": s.created_at.isoformat(),
        "updated_at": s.updated_at.isoformat(),
    }


def secret_from_dict(data: dict) -> Secret:
    return Secret(
        id=data["id"],
        name=data.get("name", ""),
        type=SecretType(data["type"]),
        fields=dict(data.get("fields", {})),
        tags=tuple(data.get("tags") or ()),
        created_at=_parse_datetime(data["created_at"]),
        updated_at=_parse_datetime(data["updated_at"]),
    )


def task_to_dict(t: Task) -> dict:
    data = {
        "id": t.id,
        "title": t.title,
        "done": t.done,
        "priority": t.priority.value,
        "tags": list(t.tags),
        "created_at": t.created_at.isoformat(),
    }
    if t.due is not None:
        data["due_date"] = t.due.isoformat()
    if t.completed_at is not None:
        data["completed_at"] = t.completed_at.isoformat()
    return data


def task_from_dict(data: dict) -> Task:
    due = data.get("due_date")
    return Task(
        id=data["id"],
        title=data.get("title", ""),
        done=data.get("done", False),
        priority=Priority(data.get("priority", "")),
        due=date.fromisoformat(due) if due else None,
        tags=tuple(data.get("tags") or ()),
        created_at=_parse_datetime(data["created_at"]),
        completed_at=_parse_datetime(data.get("completed_at")),
    )


# Collaborator protocols


class Clock(Protocol):
    """Source of "now" for every component that needs it."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the local wall clock (timezone-aware)."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class SecretStore(Protocol):
    """Protocol for secret persistence."""

    def add(self, secret: Secret) -> None:
        ...

    def get(self, secret_id: str) -> Secret:
        """Raise NotFoundError when absent."""
        ...

    def list(self) -> list[Secret]:
        ...

    def update(self, secret: Secret) -> Secret:
        """Whole-record replace; returns the stored copy."""
        ...

    def delete(self, secret_id: str) -> None:
        ...

    def search(self, query: str) -> list[Secret]:
        ...


class TaskStore(Protocol):
    """Protocol for task persistence."""

    def add(self, task: Task) -> None:
        ...

    def get(self, task_id: str) -> Task:
        ...

    def list(self, f: Filter = Filter()) -> list[Task]:
        ...

    def update(self, task: Task) -> Task:
        ...

    def delete(self, task_id: str) -> None:
        ...

    def clear_done(self) -> int:
        """Delete every done task; return the count removed."""
        ...


class Vault(Protocol):
    """An opened vault exposing independent sub-stores."""

    @property
    def secrets(self) -> SecretStore:
        ...

    @property
    def tasks(self) -> TaskStore:
        ...

    def close(self) -> None:
        ...


class VaultOpener(Protocol):
    """Opens (or creates) a vault directory with a password."""

    def __call__(self, directory, password: str) -> Vault:
        ...


class Clipboard(Protocol):
    """System clipboard primitive."""

    def copy(self, text: str) -> None:
        """Raise ClipboardError on failure."""
        ...

    def clear(self) -> None:
        """Best effort; never raises."""
        ...
