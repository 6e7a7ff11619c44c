"""Administration → Unit list."""

from pages.base_page import BasePage


class UnitListPage(BasePage):
    PATH = "/administration/units"

    def __init__(self, page):
        super().__init__(page)
        self.create_button = page.get_by_role("button", name="Create Unit")
        self.search_input = page.get_by_role("combobox", name="Search")
        self.rows = page.locator(".mat-row, [role='row']")

    def navigate(self):
        super().navigate(self.PATH)

    def expect_on_page(self, timeout=10000):
        self.search_input.wait_for(state="visible", timeout=timeout)

    def search(self, name):
        self.search_input.fill(name)
        self.page.keyboard.press("Enter")
        self.page.wait_for_load_state("networkidle")

    def row_count(self):
        return self.rows.count()
