"""Unit tests for the suite utilities that do not need a browser."""

import logging
import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from utils.assertions import assert_table_not_empty, assert_url_contains
from utils.csv_reader import CsvReadError, data_file, read_csv
from utils.error_handler import ErrorHandler
from utils.form_helper import parse_flag, set_checked, split_list
from utils.logger import ColorFormatter, TestLogger, format_data


class FakeCheckbox:
    def __init__(self, checked):
        self.checked = checked
        self.clicks = 0

    def is_checked(self):
        return self.checked

    def click(self):
        self.clicks += 1
        self.checked = not self.checked


class TestCsvReader(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp(prefix="csv_")

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def _write(self, content):
        path = os.path.join(self.tmp_dir, "data.csv")
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(content)
        return path

    def test_rows_are_keyed_by_trimmed_headers(self):
        path = self._write(" Name (English) , Type \n Engineering , Static \n\n,\nSignals,Field\n")

        rows = read_csv(path)

        self.assertEqual(rows, [
            {"Name (English)": "Engineering", "Type": "Static"},
            {"Name (English)": "Signals", "Type": "Field"},
        ])

    def test_missing_cells_become_empty_strings(self):
        rows = read_csv(self._write("a,b,c\n1\n"))
        self.assertEqual(rows, [{"a": "1", "b": "", "c": ""}])

    def test_empty_file_gives_no_rows(self):
        self.assertEqual(read_csv(self._write("")), [])

    def test_missing_file_names_the_path(self):
        missing = os.path.join(self.tmp_dir, "nope.csv")
        with self.assertRaises(CsvReadError) as ctx:
            read_csv(missing)
        self.assertIn(missing, str(ctx.exception))

    def test_bundled_unit_type_data_loads(self):
        rows = read_csv(data_file("unit_types.csv"))
        self.assertGreater(len(rows), 0)
        self.assertIn("Name (English)", rows[0])
        self.assertIn("Corps", rows[0])


class TestFormHelper(unittest.TestCase):

    def test_parse_flag(self):
        for value in ("Yes", "y", "TRUE", "1", "x", True):
            self.assertTrue(parse_flag(value), value)
        for value in ("No", "", None, "0", "false", False):
            self.assertFalse(parse_flag(value), value)

    def test_set_checked_only_clicks_on_change(self):
        box = FakeCheckbox(checked=False)

        self.assertTrue(set_checked(box, "Yes"))
        self.assertFalse(set_checked(box, True))
        self.assertTrue(set_checked(box, "No"))

        self.assertEqual(box.clicks, 2)
        self.assertFalse(box.checked)

    def test_split_list(self):
        self.assertEqual(split_list(" Signals, Engineers ,,"), ["Signals", "Engineers"])
        self.assertEqual(split_list(""), [])


class TestLoggerFormatting(unittest.TestCase):

    def test_format_data(self):
        self.assertEqual(format_data("plain"), "plain")
        self.assertEqual(format_data(ValueError("boom")), "ValueError: boom")
        self.assertIn('"name": "Engineering"', format_data({"name": "Engineering"}))

    def test_plain_formatter_without_tty(self):
        record = logging.LogRecord("uisuite", logging.WARNING, __file__, 1, "slow page", None, None)
        self.assertEqual(ColorFormatter(use_color=False).format(record), "[WARNING] slow page")

    def test_test_logger_prefixes_name(self):
        logger = logging.getLogger("uisuite.test.capture")
        with self.assertLogs(logger, level="INFO") as captured:
            TestLogger("Unit Types", logger=logger).step("1. Navigate")
        self.assertIn("[Unit Types] 📍 1. Navigate", captured.output[0])


class FakeLocator:
    def __init__(self, text="", visible=True, count=0):
        self.text = text
        self.visible = visible
        self._count = count

    @property
    def first(self):
        return self

    def wait_for(self, state="visible", timeout=None):
        if not self.visible:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    def text_content(self):
        return self.text

    def count(self):
        return self._count


class FakePage:
    """Records waits and screenshots instead of driving a browser."""

    def __init__(self, title="Unit Types", content="<html><body>ok</body></html>",
                 locator=None, url="http://localhost:4200/"):
        self._title = title
        self._content = content
        self._locator = locator or FakeLocator()
        self.url = url
        self.waits = []
        self.screenshots = []

    def wait_for_timeout(self, ms):
        self.waits.append(ms)

    def screenshot(self, path, full_page=False):
        self.screenshots.append(path)

    def title(self):
        return self._title

    def content(self):
        return self._content

    def evaluate(self, script):
        return None

    def locator(self, selector):
        return self._locator


class FlakyAction:
    """Fails ``failures`` times with ``error`` and then returns "done"."""

    def __init__(self, failures, error=PlaywrightError):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"attempt {self.calls} failed")
        return "done"


class TestErrorHandler(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp(prefix="errors_")
        self.page = FakePage()
        self.handler = self._handler(self.page)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def _handler(self, page):
        return ErrorHandler(
            page, "Unit Types",
            screenshot_dir=os.path.join(self.tmp_dir, "shots"),
            logs_dir=os.path.join(self.tmp_dir, "logs"),
        )

    def test_not_found_retries_with_linear_backoff(self):
        action = FlakyAction(failures=2)

        self.assertEqual(self.handler.handle_not_found("#save", action), "done")

        self.assertEqual(action.calls, 3)
        self.assertEqual(self.page.waits, [300, 600])

    def test_not_found_reraises_on_last_attempt(self):
        action = FlakyAction(failures=5)

        with self.assertRaises(PlaywrightError):
            self.handler.handle_not_found("#save", action, max_retries=3)

        self.assertEqual(action.calls, 3)
        self.assertEqual(self.page.waits, [300, 600])

    def test_not_found_does_not_retry_other_errors(self):
        action = FlakyAction(failures=1, error=ValueError)

        with self.assertRaises(ValueError):
            self.handler.handle_not_found("#save", action)

        self.assertEqual(action.calls, 1)
        self.assertEqual(self.page.waits, [])

    def test_network_error_retries_with_fixed_delay(self):
        action = FlakyAction(failures=2)

        self.assertEqual(self.handler.handle_network_error(action, delay_ms=250), "done")
        self.assertEqual(self.page.waits, [250, 250])

        with self.assertRaises(PlaywrightError):
            self.handler.handle_network_error(FlakyAction(failures=3), max_retries=3)

    def test_timeout_runs_fallback(self):
        result = self.handler.handle_timeout(
            FlakyAction(failures=1, error=PlaywrightTimeoutError), lambda: "fallback"
        )
        self.assertEqual(result, "fallback")

    def test_timeout_handler_lets_other_errors_through(self):
        with self.assertRaises(PlaywrightError):
            self.handler.handle_timeout(FlakyAction(failures=1), lambda: "fallback")

    def test_wait_for_error_message(self):
        page = FakePage(locator=FakeLocator(text="Name is required"))
        handler = self._handler(page)

        self.assertEqual(handler.wait_for_error_message("is required"), "Name is required")
        with self.assertRaises(AssertionError):
            handler.wait_for_error_message("already exists")
        self.assertEqual(len(page.screenshots), 1)

    def test_wait_for_error_message_timeout(self):
        page = FakePage(locator=FakeLocator(visible=False))

        with self.assertRaises(AssertionError) as ctx:
            self._handler(page).wait_for_error_message("is required", timeout=100)

        self.assertIn("Timeout: 100ms", str(ctx.exception))
        self.assertEqual(len(page.screenshots), 1)

    def test_verify_page_accessible(self):
        self.assertTrue(self.handler.verify_page_accessible())
        self.assertFalse(self._handler(FakePage(title="")).verify_page_accessible())
        self.assertFalse(
            self._handler(FakePage(content="<h1>500</h1> Internal error")).verify_page_accessible()
        )

    def test_log_error_writes_json_report(self):
        report = self.handler.log_error("Save unit type", ValueError("boom"), {"row": 1})

        self.assertEqual(report["error"]["type"], "ValueError")
        self.assertEqual(report["context"], {"row": 1})
        self.assertEqual(len(os.listdir(os.path.join(self.tmp_dir, "logs"))), 1)


class TestAssertions(unittest.TestCase):

    def test_table_not_empty(self):
        assert_table_not_empty(FakePage(locator=FakeLocator(count=2)), "tbody > tr", min_rows=2)
        with self.assertRaises(AssertionError):
            assert_table_not_empty(FakePage(locator=FakeLocator(count=0)), "tbody > tr")

    def test_url_contains_plain_text(self):
        page = FakePage(url="http://localhost:4200/administration/unit-types")
        assert_url_contains(page, "/administration/unit-types")
        with self.assertRaises(AssertionError):
            assert_url_contains(page, "/login")


if __name__ == "__main__":
    unittest.main()
