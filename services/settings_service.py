"""Suite settings: playwright_config defaults overridden by the environment / .env."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

import playwright_config as defaults
from services.auth_state_service import AuthConfig
from services.session_acquirer import Credentials, PlaywrightSessionAcquirer

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _get_int(env, key, default, minimum=1):
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {value}")
    return value


def _get_bool(env, key, default):
    raw = env.get(key, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{key} must be true/false, got {raw!r}")


@dataclass
class SuiteSettings:
    """Every recognized option with its default."""

    base_url: str = defaults.BASE_URL
    username: str = ""
    password: str = field(default="", repr=False)
    auth_state_path: str = defaults.AUTH_STATE_PATH
    auth_ttl_seconds: int = defaults.AUTH_TTL_SECONDS
    auth_acquire_timeout: int = defaults.AUTH_ACQUIRE_TIMEOUT
    auth_lock_grace_seconds: int = None
    login_portal: str = defaults.LOGIN_PORTAL
    headless: bool = defaults.HEADLESS
    slow_mo: int = defaults.SLOW_MO
    timeout_ms: int = defaults.DEFAULT_TIMEOUT
    navigation_timeout_ms: int = defaults.NAVIGATION_TIMEOUT
    action_timeout_ms: int = defaults.ACTION_TIMEOUT
    workers: int = defaults.WORKERS
    log_level: str = defaults.LOG_LEVEL

    @classmethod
    def from_env(cls, environ=None, dotenv_path=None):
        """
        Builds settings from ``environ`` (default: os.environ after loading .env).

        Raises:
            ValueError: If a value cannot be parsed; the message names the key.
        """
        if environ is None:
            load_dotenv(dotenv_path)
            environ = os.environ

        base_url = environ.get("BASE_URL", "").strip() or defaults.BASE_URL
        acquire_timeout = _get_int(environ, "AUTH_ACQUIRE_TIMEOUT", defaults.AUTH_ACQUIRE_TIMEOUT)
        grace = _get_int(environ, "AUTH_LOCK_GRACE_SECONDS", acquire_timeout * 2)

        settings = cls(
            base_url=base_url.rstrip("/"),
            username=environ.get("SUPERADMIN_USERNAME", "").strip(),
            password=environ.get("SUPERADMIN_PASSWORD", ""),
            auth_state_path=environ.get("AUTH_STATE_PATH", "").strip() or defaults.AUTH_STATE_PATH,
            auth_ttl_seconds=_get_int(environ, "AUTH_TTL_SECONDS", defaults.AUTH_TTL_SECONDS),
            auth_acquire_timeout=acquire_timeout,
            auth_lock_grace_seconds=grace,
            login_portal=environ.get("LOGIN_PORTAL", defaults.LOGIN_PORTAL).strip(),
            headless=_get_bool(environ, "HEADLESS", defaults.HEADLESS),
            slow_mo=_get_int(environ, "SLOW_MO", defaults.SLOW_MO, minimum=0),
            timeout_ms=_get_int(environ, "TIMEOUT", defaults.DEFAULT_TIMEOUT),
            navigation_timeout_ms=_get_int(environ, "NAVIGATION_TIMEOUT", defaults.NAVIGATION_TIMEOUT),
            action_timeout_ms=_get_int(environ, "ACTION_TIMEOUT", defaults.ACTION_TIMEOUT),
            workers=_get_int(environ, "WORKERS", defaults.WORKERS),
            log_level=(environ.get("LOG_LEVEL", "").strip() or defaults.LOG_LEVEL).upper(),
        )
        if not settings.base_url.startswith(("http://", "https://")):
            raise ValueError(f"BASE_URL must start with http:// or https://, got {base_url!r}")
        return settings

    @property
    def credentials(self):
        return Credentials(self.username, self.password)

    def build_acquirer(self):
        return PlaywrightSessionAcquirer(
            headless=self.headless,
            navigation_timeout_ms=self.navigation_timeout_ms,
            action_timeout_ms=min(self.action_timeout_ms, self.auth_acquire_timeout * 1000),
            login_portal=self.login_portal,
            slow_mo=self.slow_mo,
        )

    def auth_config(self, acquirer=None):
        return AuthConfig(
            storage_path=self.auth_state_path,
            credentials=self.credentials,
            target_url=self.base_url,
            acquirer=acquirer or self.build_acquirer(),
            ttl_seconds=self.auth_ttl_seconds,
            acquire_timeout=self.auth_acquire_timeout,
            lock_grace_seconds=self.auth_lock_grace_seconds,
        )
