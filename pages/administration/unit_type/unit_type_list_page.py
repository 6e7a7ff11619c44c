"""Administration → Unit Type list: search, create, row lookup."""

from pages.base_page import BasePage


class UnitTypeListPage(BasePage):
    PATH = "/administration/unit-types"

    def __init__(self, page):
        super().__init__(page)
        self.breadcrumb = page.locator("main-breadcrumb").get_by_text("Unit Types")
        self.create_button = page.get_by_role("button", name="Create Unit Type")
        self.import_button = page.get_by_role("button", name="Import")
        self.export_button = page.get_by_role("button", name="Export")
        self.search_input = page.get_by_role("combobox", name="Search")
        self.name_column_header = page.get_by_role("button", name="Name", exact=True)

    def row_by_name(self, name):
        return self.page.locator(".mat-row, [role='row']").filter(has_text=name).first

    def navigate(self):
        super().navigate(self.PATH)

    def expect_on_page(self, timeout=10000):
        self.create_button.wait_for(state="visible", timeout=timeout)
        self.search_input.wait_for(state="visible", timeout=timeout)

    def click_create(self):
        self.create_button.click()
        self.page.get_by_text("Create Unit Type").first.wait_for(state="visible")

    def search(self, name):
        self.search_input.fill(name)
        self.page.keyboard.press("Enter")
        self.page.wait_for_load_state("networkidle")

    def is_unit_type_visible(self, name, timeout=5000):
        return self.is_visible(self.row_by_name(name), timeout=timeout)
