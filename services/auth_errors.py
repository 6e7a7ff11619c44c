"""Exceptions raised while obtaining or persisting the shared session."""


class AuthStateError(Exception):
    """Base class for every shared-session failure."""


class AcquisitionError(AuthStateError):
    """The interactive login did not produce a session."""

    def __init__(self, message, target_url=None, step=None):
        self.target_url = target_url
        self.step = step
        self.reason = message
        details = []
        if target_url:
            details.append(f"target={target_url}")
        if step:
            details.append(f"step={step}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class AcquisitionTimeout(AcquisitionError):
    """The login sequence exceeded its time bound."""


class AcquisitionRejected(AcquisitionError):
    """Credentials were refused or the login screen reported an error."""


class StorageUnavailable(AuthStateError):
    """The snapshot file cannot be read, written or removed."""

    def __init__(self, message, path=None):
        self.path = path
        if path:
            message = f"{message}: {path}"
        super().__init__(message)


class StaleLockHeld(AuthStateError):
    """Another process has held the acquisition lock past the grace period."""

    def __init__(self, lock_path, grace_seconds):
        self.lock_path = lock_path
        self.grace_seconds = grace_seconds
        super().__init__(
            f"Acquisition lock {lock_path} held for more than {grace_seconds}s; "
            f"clear it with scripts_auth/clear_auth.py if no login is running"
        )
