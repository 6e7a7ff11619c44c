"""Administration → Roles & Permissions list."""

from pages.base_page import BasePage


class RoleListPage(BasePage):
    PATH = "/administration/roles-permissions"

    def __init__(self, page):
        super().__init__(page)
        self.create_button = page.get_by_role("button", name="Create Permission Group")
        self.rows = page.locator(".mat-row, [role='row']")

    def navigate(self):
        super().navigate(self.PATH)

    def expect_on_page(self, timeout=10000):
        self.create_button.wait_for(state="visible", timeout=timeout)

    def click_create(self):
        self.create_button.click()
