"""Repository for the authenticated session snapshot (Playwright storage state)."""

import json
import os
import tempfile
from dataclasses import dataclass, field


META_KEY = "snapshot_meta"
FAILURE_SUFFIX = ".failed"


@dataclass
class SessionSnapshot:
    """Storage state captured after a successful login."""

    payload: dict
    created_at: float
    ttl_seconds: int = 3600
    path: str = field(default="", compare=False)

    def age(self, now):
        return now - self.created_at

    def is_fresh(self, now, ttl_seconds=None):
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        return self.age(now) < ttl

    @property
    def storage_state(self):
        """Payload in the shape Playwright's new_context(storage_state=...) expects."""
        return self.payload


class AuthStateRepository:
    """Read, atomic write and removal of the snapshot file and its failure marker."""

    @staticmethod
    def read(path, default_ttl=3600):
        """
        Loads the snapshot stored at ``path``.

        Files written by other tooling carry no metadata; for those the file
        modification time stands in for the acquisition time.

        Returns:
            SessionSnapshot, or None when the file does not exist.

        Raises:
            OSError: If the file exists but cannot be read.
            ValueError: If the content is not a JSON object or its metadata is malformed.
        """
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
            mtime = os.path.getmtime(path)
        except FileNotFoundError:
            return None

        if not isinstance(data, dict):
            raise ValueError(f"Snapshot is not a JSON object: {path}")

        meta = data.pop(META_KEY, None)
        if meta is None:
            meta = {}
        if not isinstance(meta, dict):
            raise ValueError(f"{META_KEY} is not a JSON object: {path}")
        created_at = _number(meta.get("created_at", mtime), "created_at", path)
        ttl_seconds = _number(meta.get("ttl_seconds", default_ttl), "ttl_seconds", path)
        return SessionSnapshot(
            payload=data,
            created_at=float(created_at),
            ttl_seconds=int(ttl_seconds),
            path=path,
        )

    @staticmethod
    def save(path, payload, created_at, ttl_seconds):
        """
        Persists a snapshot, replacing any previous one atomically.

        The content goes to a temporary file in the same directory which is
        then renamed over ``path``, so readers see the old file or the new
        one and never a partial write.
        """
        document = dict(payload)
        document[META_KEY] = {"created_at": created_at, "ttl_seconds": ttl_seconds}
        _write_atomic(path, document)

        return SessionSnapshot(
            payload=dict(payload),
            created_at=created_at,
            ttl_seconds=ttl_seconds,
            path=path,
        )

    @staticmethod
    def delete(path):
        """Removes the snapshot. Returns True if a file was deleted."""
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False

    # ── failure marker ──

    @staticmethod
    def failure_path(path):
        return f"{path}{FAILURE_SUFFIX}"

    @staticmethod
    def save_failure(path, failed_at, error_type, message, step=None):
        """Records a failed login next to the snapshot so other workers can reuse the outcome."""
        _write_atomic(AuthStateRepository.failure_path(path), {
            "failed_at": failed_at,
            "error_type": error_type,
            "message": message,
            "step": step,
        })

    @staticmethod
    def read_failure(path):
        """
        Returns the recorded failure as a dict, or None.

        An unreadable or malformed marker counts as absent.
        """
        try:
            with open(AuthStateRepository.failure_path(path), "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            return None
        if not isinstance(data, dict) or not _is_number(data.get("failed_at")):
            return None
        return data

    @staticmethod
    def clear_failure(path):
        return AuthStateRepository.delete(AuthStateRepository.failure_path(path))


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(value, key, path):
    if not _is_number(value):
        raise ValueError(f"{META_KEY}.{key} must be a number, got {value!r}: {path}")
    return value


def _write_atomic(path, document):
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".snapshot-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
