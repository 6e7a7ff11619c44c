"""
Session acquisition: drives a real browser through the login form and
returns the resulting Playwright storage state.

The auth cache only depends on ``SessionAcquirer.acquire``; tests swap in a stub.
"""

from dataclasses import dataclass

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from pages.auth.login_page import LoginPage
from services.auth_errors import AcquisitionError, AcquisitionRejected, AcquisitionTimeout
from utils.logger import get_logger

log = get_logger("auth.acquirer")


def _first_line(error):
    lines = str(error).strip().splitlines()
    return lines[0] if lines else type(error).__name__


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    def __repr__(self):
        return f"Credentials(username={self.username!r}, password='***')"


class SessionAcquirer:
    """Capability that performs an interactive login."""

    # name of the login step in progress, read by the cache when it times out
    current_step = None

    def acquire(self, credentials, target_url):
        """
        Logs in and returns the raw session payload.

        Args:
            credentials: Credentials to submit.
            target_url: Root URL of the application under test.

        Returns:
            dict with the browser storage state (cookies, origins).

        Raises:
            AcquisitionError: If the login did not produce a session.
        """
        raise NotImplementedError


class PlaywrightSessionAcquirer(SessionAcquirer):
    """Logs in with headless Chromium using the LoginPage page object."""

    def __init__(self, headless=True, navigation_timeout_ms=30000,
                 action_timeout_ms=15000, login_portal=None, slow_mo=0):
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.action_timeout_ms = action_timeout_ms
        self.login_portal = login_portal or None
        self.slow_mo = slow_mo

    def acquire(self, credentials, target_url):
        self.current_step = "read credentials"
        if not credentials.username or not credentials.password:
            raise AcquisitionRejected(
                "SUPERADMIN_USERNAME / SUPERADMIN_PASSWORD are not set",
                target_url=target_url, step="read credentials",
            )

        step = self.current_step = "launch browser"
        log.info(f"🔐 Performing authentication against {target_url}")
        with sync_playwright() as pw:
            browser = None
            try:
                browser = pw.chromium.launch(headless=self.headless, slow_mo=self.slow_mo)
                context = browser.new_context(ignore_https_errors=True, base_url=target_url)
                context.set_default_timeout(self.action_timeout_ms)
                context.set_default_navigation_timeout(self.navigation_timeout_ms)
                page = context.new_page()
                login_page = LoginPage(page)

                if self.login_portal:
                    step = self.current_step = f"open login portal '{self.login_portal}'"
                    login_page.goto_via_portal(self.login_portal)
                else:
                    step = self.current_step = "open login page"
                    login_page.goto_login_page()

                step = self.current_step = "submit credentials"
                login_page.submit_credentials(credentials.username, credentials.password)

                step = self.current_step = "wait for post-login marker"
                outcome = login_page.profile_card.or_(login_page.error_message).first
                outcome.wait_for(state="visible", timeout=self.navigation_timeout_ms)
                if not login_page.profile_card.is_visible():
                    message = login_page.get_error_message(timeout=1000) or "login rejected"
                    raise AcquisitionRejected(
                        f"Login failed: {message.strip()}", target_url=target_url, step=step
                    )

                step = self.current_step = "wait for page to settle"
                page.wait_for_load_state("networkidle")

                step = self.current_step = "capture storage state"
                payload = context.storage_state()
            except PlaywrightTimeoutError as e:
                raise AcquisitionTimeout(_first_line(e), target_url=target_url, step=step) from e
            except PlaywrightError as e:
                raise AcquisitionError(_first_line(e), target_url=target_url, step=step) from e
            finally:
                if browser is not None:
                    browser.close()

        log.info("✓ Authentication successful")
        return payload
