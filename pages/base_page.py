"""Common behaviour shared by every page object."""

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import expect

SUCCESS_TOAST = ".toast-success, .alert-success, .mat-snack-bar-container, [role='alert']:has-text('success')"


class BasePage:
    """Wraps a Playwright ``Page`` with navigation and form helpers."""

    def __init__(self, page):
        self.page = page

    # ── navigation ──

    def navigate(self, path=""):
        self.page.goto(path)
        self.page.wait_for_load_state("networkidle")

    def wait_for_url(self, pattern, timeout=10000):
        self.page.wait_for_url(pattern, timeout=timeout)

    # ── form interactions ──

    def click_button(self, button):
        """Clicks a button given its accessible name or a ready locator."""
        if isinstance(button, str):
            button = self.page.get_by_role("button", name=button, exact=True)
        button.click()

    def fill_field(self, field, value):
        """Fills a field given its label or a ready locator."""
        if isinstance(field, str):
            field = self.page.get_by_label(field, exact=True)
        field.fill(value)

    def select_option(self, label, option_text):
        self.page.get_by_label(label, exact=True).select_option(label=option_text)

    def pick_mat_option(self, trigger, option_text, exact=True):
        """Opens a Material select/autocomplete and clicks the option by name."""
        trigger.click()
        self.page.get_by_role("option", name=option_text.strip(), exact=exact).click()

    # ── waits / checks ──

    def expect_text_visible(self, text, timeout=5000):
        expect(self.page.get_by_text(text, exact=True)).to_be_visible(timeout=timeout)

    def wait_for_element(self, locator, timeout=5000):
        locator.wait_for(state="visible", timeout=timeout)
        return locator

    def element_exists(self, locator, timeout=1000):
        try:
            locator.wait_for(state="attached", timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            return False

    def wait_for_success_toast(self, timeout=5000):
        toast = self.page.locator(SUCCESS_TOAST).first
        expect(toast).to_be_visible(timeout=timeout)
        # toasts fade out on their own
        toast.wait_for(state="hidden", timeout=timeout + 2000)

    def is_visible(self, locator, timeout=5000):
        try:
            locator.wait_for(state="visible", timeout=timeout)
            return True
        except PlaywrightError:
            return False
