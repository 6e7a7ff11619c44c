"""Login page object: user ID / password form and post-login checks."""

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from pages.base_page import BasePage

ERROR_BANNER = ".alert-danger, .toast-error, #toast-container, [role='alert']"


class LoginPage(BasePage):
    """Handles the authentication flow with semantic locators."""

    POST_LOGIN_TIMEOUT = 15000

    def __init__(self, page):
        super().__init__(page)
        self.username_input = page.get_by_role("textbox", name="Enter user ID")
        self.password_input = page.get_by_role("textbox", name="Enter password")
        self.login_button = page.get_by_role("button", name="Log in")
        self.error_message = page.locator(ERROR_BANNER)
        self.profile_card = page.locator(".profile-card")

    # ── navigation ──

    def goto_login_page(self):
        self.page.goto("/login")
        self.page.wait_for_load_state("domcontentloaded")

    def goto_via_portal(self, portal_name, timeout=10000):
        """Opens the landing page and picks the login portal from the banner menu."""
        self.page.goto("/landing")
        self.page.wait_for_load_state("domcontentloaded")
        self.page.get_by_role("banner").get_by_role("button", name="Log in").click()
        self.page.get_by_role("menuitem", name=portal_name).click()
        self.page.wait_for_url("**/login", timeout=timeout)

    # ── login ──

    def submit_credentials(self, username, password):
        """Fills and submits the form without waiting for the outcome."""
        self.username_input.fill(username)
        self.password_input.fill(password)
        self.login_button.click()

    def login(self, username, password):
        self.goto_login_page()
        self.submit_credentials(username, password)
        self.profile_card.wait_for(state="visible", timeout=self.POST_LOGIN_TIMEOUT)

    # ── verification ──

    def is_logged_in(self):
        return "/login" not in self.page.url

    def validate_login_form(self):
        return (
            self.username_input.is_visible()
            and self.password_input.is_visible()
            and self.login_button.is_visible()
        )

    def get_error_message(self, timeout=3000):
        try:
            self.error_message.first.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError:
            return None
        return self.error_message.first.text_content()

    def expect_error(self, expected_message):
        actual = self.get_error_message()
        if not actual or expected_message not in actual:
            raise AssertionError(
                f'Expected error "{expected_message}" but got "{actual}"'
            )
