"""
Error handling, recovery and diagnostics for UI tests.

    handler = ErrorHandler(page, "Unit Types")
    try:
        form_page.save()
    except PlaywrightError as e:
        handler.log_error("Submit form", e, {"name": "Engineering"})
        raise
"""

import json
import os
import re
import traceback
from datetime import datetime

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

import playwright_config as cfg
from utils.logger import TestLogger

ERROR_LOCATOR = "[role='alert'], .error-message, .mat-error"


def _timestamp():
    return re.sub(r"[:.]", "-", datetime.now().isoformat())


class ErrorHandler:
    """Screenshots, diagnostics and retry strategies bound to one page."""

    def __init__(self, page, test_name="Test", screenshot_dir=None, logs_dir=None):
        self.page = page
        self.logger = TestLogger(test_name)
        self.screenshot_dir = screenshot_dir or cfg.SCREENSHOTS_DIR
        self.logs_dir = logs_dir or cfg.LOGS_DIR
        for directory in (self.screenshot_dir, self.logs_dir):
            os.makedirs(directory, exist_ok=True)

    # ═══════════════════════════════════════════
    # DIAGNOSTICS
    # ═══════════════════════════════════════════

    def capture_screenshot(self, name):
        """Saves a full-page screenshot. Returns the path, or None on failure."""
        path = os.path.join(self.screenshot_dir, f"{name}-{_timestamp()}.png")
        try:
            self.page.screenshot(path=path, full_page=True)
        except PlaywrightError as e:
            self.logger.error("Failed to capture screenshot", e)
            return None
        self.logger.info(f"📸 Screenshot saved: {path}")
        return path

    def collect_diagnostics(self):
        """URL, title, ready state, main heading and visible error texts."""
        try:
            return {
                "timestamp": datetime.now().isoformat(),
                "url": self.page.url,
                "title": self.page.title(),
                "ready_state": self.page.evaluate("() => document.readyState"),
                "page_heading": self.page.evaluate(
                    "() => document.querySelector('h1, h2, [role=\"heading\"]')?.textContent"
                ),
                "visible_errors": self.page.evaluate(
                    """() => Array.from(document.querySelectorAll('[role="alert"], .error, .mat-error'))
                        .map(el => el.textContent).filter(Boolean)"""
                ),
            }
        except PlaywrightError as e:
            self.logger.error("Failed to collect diagnostics", e)
            return {}

    def log_error(self, action_description, error, context=None):
        """
        Logs a failure with screenshot, diagnostics and a JSON report.

        Returns:
            dict with the report that was written to ``logs_dir``.
        """
        context = context or {}
        self.logger.error(f"Failed: {action_description}", error)

        screenshot = self.capture_screenshot(
            re.sub(r"\s+", "-", action_description).lower()
        )
        diagnostics = self.collect_diagnostics()
        if context:
            self.logger.debug("Error context:", context)
        self.logger.debug("Page diagnostics:", diagnostics)

        report = {
            "action": action_description,
            "error": {
                "type": type(error).__name__,
                "message": str(error),
                "stack": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            },
            "context": context,
            "diagnostics": diagnostics,
            "screenshot": screenshot,
            "timestamp": datetime.now().isoformat(),
        }
        self.save_error_report(report)
        return report

    def save_error_report(self, report):
        path = os.path.join(self.logs_dir, f"error-{_timestamp()}.json")
        try:
            with open(path, "w", encoding="utf-8") as fh:
                json.dump(report, fh, indent=2, default=str)
        except OSError as e:
            self.logger.error("Failed to save error report", e)
            return None
        self.logger.info(f"📋 Error report saved: {path}")
        return path

    # ═══════════════════════════════════════════
    # RECOVERY STRATEGIES
    # ═══════════════════════════════════════════

    def handle_not_found(self, selector, action, max_retries=3):
        """Retries ``action`` with a linear backoff of 300ms per attempt."""
        for attempt in range(1, max_retries + 1):
            try:
                self.logger.debug(f"Attempt {attempt}/{max_retries}")
                return action()
            except PlaywrightError as e:
                if attempt == max_retries:
                    self.logger.error(
                        f"Element not found after {max_retries} retries: {selector}", e
                    )
                    raise
                self.logger.warn(f"Retry {attempt}/{max_retries}: {e}")
                self.page.wait_for_timeout(300 * attempt)

    def handle_timeout(self, primary_action, fallback_action):
        """Runs ``fallback_action`` when ``primary_action`` times out."""
        try:
            return primary_action()
        except PlaywrightTimeoutError:
            self.logger.warn("Timeout detected, trying fallback strategy")
            return fallback_action()

    def handle_network_error(self, action, max_retries=3, delay_ms=500):
        """Retries ``action`` with a fixed delay between attempts."""
        for attempt in range(1, max_retries + 1):
            try:
                self.logger.debug(f"Network attempt {attempt}/{max_retries}")
                return action()
            except PlaywrightError:
                if attempt == max_retries:
                    self.logger.error(f"Network operation failed after {max_retries} attempts")
                    raise
                self.logger.warn(
                    f"Network error on attempt {attempt}, retrying in {delay_ms}ms..."
                )
                self.page.wait_for_timeout(delay_ms)

    # ═══════════════════════════════════════════
    # CHECKS
    # ═══════════════════════════════════════════

    def wait_for_error_message(self, error_text, timeout=5000):
        locator = self.page.locator(ERROR_LOCATOR).first
        try:
            locator.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError:
            self.capture_screenshot("error-message-not-found")
            raise AssertionError(
                f'Expected error message not found: "{error_text}"\nTimeout: {timeout}ms'
            ) from None

        message = locator.text_content() or ""
        if error_text not in message:
            self.capture_screenshot("error-message-mismatch")
            raise AssertionError(f"Error message found but text doesn't match. Got: {message}")
        self.logger.info(f"✓ Expected error found: {error_text}")
        return message

    def verify_page_accessible(self):
        try:
            if not self.page.title():
                self.logger.warn("Page title is empty")
                return False
            html = self.page.content()
        except PlaywrightError as e:
            self.logger.error("Failed to verify page accessibility", e)
            return False

        if "error" in html and "500" in html:
            self.logger.error("Found server error on page")
            return False
        self.logger.info("Page is accessible")
        return True

    def create_summary(self, test_error):
        return {
            "passed": False,
            "error": str(test_error),
            "type": type(test_error).__name__,
            "timestamp": datetime.now().isoformat(),
            "duration": self.logger.elapsed(),
        }
