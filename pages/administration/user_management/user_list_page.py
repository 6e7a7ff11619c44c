"""Administration → User management list."""

from pages.base_page import BasePage


class UserListPage(BasePage):
    PATH = "/administration/user-management"

    def __init__(self, page):
        super().__init__(page)
        self.create_button = page.get_by_role("button", name="Create User")
        self.search_input = page.get_by_role("combobox", name="Search")
        self.rows = page.locator(".mat-row, [role='row']")

    def navigate(self):
        super().navigate(self.PATH)

    def expect_on_page(self, timeout=10000):
        self.search_input.wait_for(state="visible", timeout=timeout)

    def search(self, username):
        self.search_input.fill(username)
        self.page.keyboard.press("Enter")
        self.page.wait_for_load_state("networkidle")
