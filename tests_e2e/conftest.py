"""
Shared fixtures for every Playwright test of the admin portal.

Handles:
  • Target reachability check (the whole UI suite is skipped if BASE_URL is down)
  • One login per run, cached in playwright/.auth/user.json and shared by xdist workers
  • Browser, context and page with standard settings
  • Screenshot on failure
"""

import os
import sys
import time
import urllib.error
import urllib.request

import pytest
from playwright.sync_api import sync_playwright

# ── Project path ─────────────────────────────────────────────────────────
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

import playwright_config as cfg
from services.auth_errors import AuthStateError
from services.auth_state_service import ensure_session, invalidate
from services.settings_service import SuiteSettings
from utils.error_handler import ErrorHandler
from utils.logger import TestLogger, configure_logging

SETTINGS = SuiteSettings.from_env()
configure_logging(SETTINGS.log_level)
SCREENSHOTS_DIR = os.path.join(ROOT_DIR, cfg.SCREENSHOTS_DIR)


# ═══════════════════════════════════════════════════════════════════════════
# OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

def pytest_addoption(parser):
    parser.addoption(
        "--fresh-auth", action="store_true", default=False,
        help="discard the cached login and authenticate again",
    )


def pytest_configure(config):
    # only the controller process clears the cache, never each xdist worker
    if config.getoption("--fresh-auth") and not hasattr(config, "workerinput"):
        invalidate(SETTINGS.auth_state_path)


# ═══════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def _target_reachable(url, timeout=cfg.SERVER_CHECK_TIMEOUT):
    """Polls the target until it answers (any HTTP status) or the timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            urllib.request.urlopen(url, timeout=2)
            return True
        except urllib.error.HTTPError:
            return True
        except (urllib.error.URLError, ConnectionError, OSError):
            time.sleep(0.3)
    return False


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES — TARGET / AUTH
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def settings():
    return SETTINGS


@pytest.fixture(scope="session")
def live_target(settings):
    """Base URL of the portal; skips the UI suite when it is not reachable."""
    if not _target_reachable(settings.base_url):
        pytest.skip(f"Target {settings.base_url} is not reachable")
    return settings.base_url


@pytest.fixture(scope="session")
def auth_state(settings, live_target):
    """Fresh session snapshot, logging in at most once across all workers."""
    try:
        return ensure_session(settings.auth_config())
    except AuthStateError as e:
        pytest.exit(f"Authentication setup failed: {e}", returncode=1)


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES — BROWSER / CONTEXT / PAGE
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def browser_instance(settings):
    """One Chromium instance for the whole session (per worker)."""
    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=settings.headless, slow_mo=settings.slow_mo)
        yield browser
        browser.close()


def _new_context(browser, settings, base_url, storage_state=None):
    ctx = browser.new_context(
        viewport=cfg.VIEWPORT,
        base_url=base_url,
        ignore_https_errors=True,
        storage_state=storage_state,
    )
    ctx.set_default_timeout(settings.timeout_ms)
    ctx.set_default_navigation_timeout(settings.navigation_timeout_ms)
    return ctx


@pytest.fixture()
def context(browser_instance, settings, live_target, auth_state):
    """Context restored from the shared login."""
    ctx = _new_context(browser_instance, settings, live_target, auth_state.storage_state)
    yield ctx
    ctx.close()


@pytest.fixture()
def page(context):
    pg = context.new_page()
    yield pg
    pg.close()


@pytest.fixture()
def anon_page(browser_instance, settings, live_target):
    """Page with empty cookies/storage, for tests of the login flow itself."""
    ctx = _new_context(browser_instance, settings, live_target)
    pg = ctx.new_page()
    yield pg
    ctx.close()


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES — LOGGING / DIAGNOSTICS
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture()
def log(request):
    return TestLogger(request.node.name)


@pytest.fixture()
def error_handler(request):
    pg = request.getfixturevalue("page")
    return ErrorHandler(pg, request.node.name)


# ═══════════════════════════════════════════════════════════════════════════
# HOOKS — SCREENSHOT ON FAILURE
# ═══════════════════════════════════════════════════════════════════════════

@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Captures a screenshot when a test fails."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when == "call" and rep.failed and cfg.SCREENSHOT_ON_FAILURE:
        page_fixture = item.funcargs.get("page") or item.funcargs.get("anon_page")
        if page_fixture and not page_fixture.is_closed():
            os.makedirs(SCREENSHOTS_DIR, exist_ok=True)
            name = item.nodeid.replace("::", "_").replace("/", "_").replace("\\", "_")
            path = os.path.join(SCREENSHOTS_DIR, f"{name}.png")
            try:
                page_fixture.screenshot(path=path)
                print(f"\n📸 Screenshot saved: {path}")
            except Exception as e:
                print(f"\n⚠️  Screenshot failed: {e}")
