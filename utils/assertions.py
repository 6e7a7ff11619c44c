"""
Reusable UI assertions built on Playwright's ``expect``.

    assert_table_not_empty(page, "tbody > tr")
    assert_table_contains(page, "tbody", "Engineering")
    assert_url_contains(page, "/administration")
"""

from playwright.sync_api import expect


# ── tables / lists ──

def assert_table_not_empty(page, row_selector, min_rows=1):
    count = page.locator(row_selector).count()
    assert count >= min_rows, f"Expected at least {min_rows} rows in {row_selector}, found {count}"


def assert_table_contains(page, table_selector, value):
    expect(page.locator(table_selector).first).to_contain_text(value)


# ── elements ──

def assert_element_enabled(page, selector, should_be_enabled=True):
    locator = page.locator(selector)
    if should_be_enabled:
        expect(locator).to_be_enabled()
    else:
        expect(locator).to_be_disabled()


# ── navigation ──

def assert_url_contains(page, pattern):
    if isinstance(pattern, str):
        assert pattern in page.url, f"Expected URL to contain {pattern!r}, got {page.url}"
    else:
        expect(page).to_have_url(pattern)
