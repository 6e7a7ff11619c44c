"""
Shared authentication state for the UI suite.

A successful login is captured once as a Playwright storage-state snapshot
and reused by every test (and every xdist worker) until it goes stale.

  • Fresh snapshot on disk   → returned as is, no login
  • Absent / stale snapshot  → one login, even with many concurrent callers
  • Login failure            → raised to every waiter, no snapshot written

Within a process, callers that arrive while a login is running wait on the
same Future. Across processes, a file lock next to the snapshot serializes
logins and the lock holder re-checks freshness before logging in again.
A failed login leaves a `.failed` marker; workers that were queued on the
lock while it happened raise that error instead of trying again.
"""

import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass
from enum import Enum

from filelock import FileLock, Timeout

from repositories.auth_state_repo import AuthStateRepository
from services.auth_errors import (
    AcquisitionError,
    AcquisitionRejected,
    AcquisitionTimeout,
    AuthStateError,
    StaleLockHeld,
    StorageUnavailable,
)
from services.session_acquirer import Credentials, SessionAcquirer
from utils.logger import get_logger

log = get_logger("auth")

DEFAULT_TTL_SECONDS = 3600
DEFAULT_ACQUIRE_TIMEOUT = 60


class SessionState(Enum):
    NO_SESSION = "NoSession"
    FRESH = "Fresh"
    STALE = "Stale"
    ACQUIRING = "Acquiring"
    FAILED = "Failed"


@dataclass
class AuthConfig:
    """Everything the cache needs, validated once at construction."""

    storage_path: str
    credentials: Credentials
    target_url: str
    acquirer: SessionAcquirer
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT
    lock_grace_seconds: float = None

    def __post_init__(self):
        if not self.storage_path:
            raise ValueError("storage_path is required")
        if not self.target_url:
            raise ValueError("target_url is required")
        if self.acquirer is None:
            raise ValueError("acquirer is required")
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self.acquire_timeout <= 0:
            raise ValueError("acquire_timeout must be positive")
        if self.lock_grace_seconds is None:
            self.lock_grace_seconds = self.acquire_timeout * 2
        elif self.lock_grace_seconds <= 0:
            raise ValueError("lock_grace_seconds must be positive")

    @property
    def lock_path(self):
        return f"{self.storage_path}.lock"


def _read(path, ttl_seconds):
    try:
        return AuthStateRepository.read(path, default_ttl=ttl_seconds)
    except (OSError, ValueError) as e:
        raise StorageUnavailable(f"Cannot read session snapshot ({e})", path) from e


class AuthStateCache:
    """Fresh-or-acquire cache around one snapshot file."""

    def __init__(self, config, clock=time.time):
        self.config = config
        self._clock = clock
        self._lock = threading.Lock()
        self._inflight = None
        self.state = SessionState.NO_SESSION
        self.last_error = None
        self.acquisitions = 0

    def ensure_session(self):
        """
        Returns a fresh snapshot, logging in only when needed.

        Raises:
            AcquisitionError: The login failed or timed out.
            StorageUnavailable: The snapshot file cannot be read or written.
            StaleLockHeld: Another process kept the login lock too long.
        """
        config = self.config
        with self._lock:
            snapshot = _read(config.storage_path, config.ttl_seconds)
            now = self._clock()
            if snapshot is not None and snapshot.is_fresh(now, config.ttl_seconds):
                self.state = SessionState.FRESH
                log.debug(
                    f"✓ Using existing authentication (age: {snapshot.age(now) / 60:.0f} minutes)"
                )
                return snapshot

            flight = self._inflight
            leader = flight is None
            if leader:
                self.state = SessionState.STALE if snapshot else SessionState.NO_SESSION
                log.info(f"Session snapshot {self.state.value}, acquiring a new one")
                flight = self._inflight = Future()
                self.state = SessionState.ACQUIRING

        if not leader:
            log.debug("Waiting on in-flight authentication")
            return flight.result()

        try:
            snapshot = self._acquire_locked(config)
        except Exception as e:
            with self._lock:
                self._inflight = None
                self.state = SessionState.FAILED
                self.last_error = e
            log.error(f"❌ Authentication failed: {e}")
            flight.set_exception(e)
            raise
        except BaseException:
            with self._lock:
                self._inflight = None
                self.state = SessionState.NO_SESSION
            flight.set_exception(AuthStateError("Authentication interrupted"))
            raise

        with self._lock:
            self._inflight = None
            self.state = SessionState.FRESH
            self.last_error = None
        flight.set_result(snapshot)
        return snapshot

    def reset(self):
        with self._lock:
            if self._inflight is None:
                self.state = SessionState.NO_SESSION
                self.last_error = None

    # ── internals ──

    def _acquire_locked(self, config):
        lock_dir = os.path.dirname(os.path.abspath(config.lock_path))
        try:
            os.makedirs(lock_dir, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create auth directory ({e})", lock_dir) from e

        waiting_since = time.time()
        lock = FileLock(config.lock_path)
        try:
            lock.acquire(timeout=config.lock_grace_seconds)
        except Timeout as e:
            log.warning(
                f"⚠️  Auth lock {config.lock_path} held for more than "
                f"{config.lock_grace_seconds}s by another process"
            )
            raise StaleLockHeld(config.lock_path, config.lock_grace_seconds) from e

        try:
            # another worker may have logged in while we waited for the lock
            snapshot = _read(config.storage_path, config.ttl_seconds)
            if snapshot is not None and snapshot.is_fresh(self._clock(), config.ttl_seconds):
                log.info("✓ Reusing authentication saved by another worker")
                return snapshot

            # ...or failed to, in which case its error is ours too
            failure = AuthStateRepository.read_failure(config.storage_path)
            if failure is not None and failure["failed_at"] > waiting_since:
                log.warning("⚠️  Login already failed in another worker, not retrying")
                raise _failure_error(failure, config.target_url)

            try:
                payload = self._run_acquirer(config)
            except AcquisitionError as e:
                self._record_failure(config, e)
                raise
            return self._persist(config, payload)
        finally:
            lock.release()

    def _run_acquirer(self, config):
        self.acquisitions += 1
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="auth-acquire")
        future = executor.submit(config.acquirer.acquire, config.credentials, config.target_url)
        try:
            payload = future.result(timeout=config.acquire_timeout)
        except FuturesTimeout:
            raise AcquisitionTimeout(
                f"Login did not finish within {config.acquire_timeout}s",
                target_url=config.target_url, step=_current_step(config.acquirer),
            ) from None
        except AuthStateError:
            raise
        except Exception as e:
            raise AcquisitionError(
                f"Login raised {type(e).__name__}: {e}",
                target_url=config.target_url, step=_current_step(config.acquirer),
            ) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not isinstance(payload, dict):
            raise AcquisitionError(
                "Login returned no session payload",
                target_url=config.target_url, step="capture storage state",
            )
        return payload

    def _persist(self, config, payload):
        try:
            snapshot = AuthStateRepository.save(
                config.storage_path, payload, self._clock(), config.ttl_seconds
            )
            AuthStateRepository.clear_failure(config.storage_path)
        except OSError as e:
            raise StorageUnavailable(f"Cannot write session snapshot ({e})", config.storage_path) from e
        log.info(f"✓ Authentication state saved to {config.storage_path}")
        return snapshot

    def _record_failure(self, config, error):
        try:
            AuthStateRepository.save_failure(
                config.storage_path, time.time(), type(error).__name__,
                error.reason, error.step,
            )
        except OSError as e:
            log.warning(f"⚠️  Could not record login failure for other workers ({e})")


_FAILURE_TYPES = {
    "AcquisitionRejected": AcquisitionRejected,
    "AcquisitionTimeout": AcquisitionTimeout,
}


def _failure_error(failure, target_url):
    error_class = _FAILURE_TYPES.get(failure.get("error_type"), AcquisitionError)
    return error_class(
        f"Login failed in another worker: {failure.get('message')}",
        target_url=target_url, step=failure.get("step"),
    )


def _current_step(acquirer):
    return getattr(acquirer, "current_step", None) or "acquire"


# ═══════════════════════════════════════════
# PROCESS-WIDE REGISTRY
# ═══════════════════════════════════════════

_caches = {}
_registry_lock = threading.Lock()


def get_cache(config, clock=None):
    """Returns the cache for ``config.storage_path``, creating it on first use."""
    key = os.path.abspath(config.storage_path)
    with _registry_lock:
        cache = _caches.get(key)
        if cache is None:
            cache = AuthStateCache(config, clock=clock or time.time)
            _caches[key] = cache
        else:
            cache.config = config
            if clock is not None:
                cache._clock = clock
        return cache


def ensure_session(config):
    """Returns a fresh session snapshot for ``config`` (see AuthStateCache)."""
    return get_cache(config).ensure_session()


def invalidate(storage_path):
    """Deletes the snapshot and any recorded failure; the next ensure_session logs in again."""
    try:
        deleted = AuthStateRepository.delete(storage_path)
        AuthStateRepository.clear_failure(storage_path)
    except OSError as e:
        raise StorageUnavailable(f"Cannot delete session snapshot ({e})", storage_path) from e

    with _registry_lock:
        cache = _caches.get(os.path.abspath(storage_path))
    if cache is not None:
        cache.reset()

    if deleted:
        log.info(f"🗑️  Session snapshot removed: {storage_path}")
    return deleted


def read_snapshot(storage_path, default_ttl=DEFAULT_TTL_SECONDS):
    """Returns the persisted SessionSnapshot, or None if there is none."""
    return _read(storage_path, default_ttl)


def snapshot_state(storage_path, ttl_seconds=None, now=None):
    """Classifies the persisted snapshot as "absent", "fresh" or "stale"."""
    snapshot = read_snapshot(storage_path, ttl_seconds or DEFAULT_TTL_SECONDS)
    if snapshot is None:
        return "absent"
    now = time.time() if now is None else now
    return "fresh" if snapshot.is_fresh(now, ttl_seconds) else "stale"


def reset_caches():
    """Forgets every in-memory cache (files on disk are untouched)."""
    with _registry_lock:
        _caches.clear()
