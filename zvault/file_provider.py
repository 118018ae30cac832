"""
Encrypted on-disk implementation of the Vault protocol.

Each collection is one Fernet token holding a JSON document. The key is
derived from the password with PBKDF2-HMAC-SHA256 over a per-vault salt,
and a small key-check token tells a wrong password apart from a corrupt
collection.
"""

from __future__ import annotations

import base64
import json
import logging
import os
from pathlib import Path
from typing import Callable

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from jsonschema import SchemaError, ValidationError, validate

from zvault import errors
from zvault.errors import AuthenticationError, StoreError
from zvault.memory_provider import SecretCollection, TaskCollection
from zvault.providers import (
    Clock,
    SystemClock,
    secret_from_dict,
    secret_to_dict,
    task_from_dict,
    task_to_dict,
)

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"

SALT_FILE = "salt"
KEYCHECK_FILE = "keycheck"
SECRETS_FILE = "secrets.enc"
TASKS_FILE = "tasks.enc"

DOCUMENT_VERSION = 1
KDF_ITERATIONS = 480_000
SALT_BYTES = 16
_KEYCHECK_PLAINTEXT = b"zvault-keycheck"


def validate_document(data: dict, schema_name: str) -> None:
    """Validate a decrypted document against its bundled schema."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    try:
        schema = json.loads(schema_path.read_text())
        validate(instance=data, schema=schema)
    except OSError as e:
        raise StoreError(f"schema not found: {schema_path}") from e
    except SchemaError as e:
        raise StoreError(f"invalid schema {schema_name}: {e.message}") from e
    except ValidationError as e:
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        raise StoreError(f"{schema_name}: validation error at '{path}': {e.message}") from e


def derive_key(password: str, salt: bytes, iterations: int = KDF_ITERATIONS) -> bytes:
    """Fernet key (url-safe base64) from a password and salt."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))


def _write_atomic(path: Path, payload: bytes) -> None:
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(payload)
        os.chmod(tmp, 0o600)
        os.replace(tmp, path)
    except OSError as e:
        raise StoreError(f"write {path.name}: {e}") from e


def _load_salt(directory: Path) -> bytes:
    path = directory / SALT_FILE
    if path.exists():
        try:
            return path.read_bytes()
        except OSError as e:
            raise StoreError(f"read {path.name}: {e}") from e
    salt = os.urandom(SALT_BYTES)
    _write_atomic(path, salt)
    return salt


def _verify_password(directory: Path, fernet: Fernet) -> None:
    path = directory / KEYCHECK_FILE
    if not path.exists():
        _write_atomic(path, fernet.encrypt(_KEYCHECK_PLAINTEXT))
        return
    try:
        token = path.read_bytes()
    except OSError as e:
        raise StoreError(f"read {path.name}: {e}") from e
    try:
        fernet.decrypt(token)
    except InvalidToken:
        raise AuthenticationError("open store: wrong password") from None


class _EncryptedDocument:
    """One collection file: decrypt + validate on load, encrypt on save."""

    def __init__(self, path: Path, fernet: Fernet, schema_name: str):
        self.path = path
        self.schema_name = schema_name
        self._fernet: Fernet | None = fernet

    def load(self, from_dict: Callable[[dict], object]) -> list:
        if not self.path.exists():
            return []
        try:
            raw = self._require_key().decrypt(self.path.read_bytes())
            data = json.loads(raw)
        except InvalidToken:
            raise StoreError(f"{self.path.name}: cannot decrypt collection") from None
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"{self.path.name}: {e}") from e

        validate_document(data, self.schema_name)
        try:
            return [from_dict(item) for item in data["records"]]
        except (errors.ValidationError, KeyError, ValueError) as e:
            raise StoreError(f"{self.path.name}: bad record: {e}") from e

    def save(self, records: list[dict]) -> None:
        doc = {"version": DOCUMENT_VERSION, "records": records}
        token = self._require_key().encrypt(json.dumps(doc).encode("utf-8"))
        _write_atomic(self.path, token)

    def forget_key(self) -> None:
        self._fernet = None

    def _require_key(self) -> Fernet:
        if self._fernet is None:
            raise StoreError("vault is closed")
        return self._fernet


class EncryptedSecretCollection(SecretCollection):
    """SecretCollection persisted to an encrypted document."""

    def __init__(self, document: _EncryptedDocument, clock: Clock):
        self._document = document
        super().__init__(clock, document.load(secret_from_dict))

    def _commit(self, records: dict) -> None:
        self._document.save([secret_to_dict(s) for s in records.values()])


class EncryptedTaskCollection(TaskCollection):
    """TaskCollection persisted to an encrypted document."""

    def __init__(self, document: _EncryptedDocument):
        self._document = document
        super().__init__(document.load(task_from_dict))

    def _commit(self, records: dict) -> None:
        self._document.save([task_to_dict(t) for t in records.values()])


class FileVault:
    """Vault stored as encrypted files in one directory."""

    def __init__(self, directory: Path, fernet: Fernet, clock: Clock):
        self.directory = directory
        self._documents = [
            _EncryptedDocument(directory / SECRETS_FILE, fernet, "secrets"),
            _EncryptedDocument(directory / TASKS_FILE, fernet, "tasks"),
        ]
        self._secrets = EncryptedSecretCollection(self._documents[0], clock)
        self._tasks = EncryptedTaskCollection(self._documents[1])

    @property
    def secrets(self) -> EncryptedSecretCollection:
        return self._secrets

    @property
    def tasks(self) -> EncryptedTaskCollection:
        return self._tasks

    def close(self) -> None:
        """Drop key material; further writes fail."""
        for doc in self._documents:
            doc.forget_key()
        logger.info("vault closed: %s", self.directory)


def open_vault(
    directory: str | Path,
    password: str,
    clock: Clock | None = None,
    iterations: int = KDF_ITERATIONS,
) -> FileVault:
    """Open or create the vault at directory."""
    directory = Path(directory)
    try:
        directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        salt = _load_salt(directory)
    except OSError as e:
        raise StoreError(f"create vault directory: {e}") from e

    fernet = Fernet(derive_key(password, salt, iterations))
    _verify_password(directory, fernet)
    vault = FileVault(directory, fernet, clock or SystemClock())
    logger.info("vault opened: %s", directory)
    return vault
