"""Administration → Organogram node configuration, Permissions tab."""

from pages.base_page import BasePage
from utils.form_helper import set_checked


class ConfigPermissionPage(BasePage):

    def __init__(self, page):
        super().__init__(page)
        self.permissions_tab = page.get_by_role("tab", name="Permissions")
        self.save_button = page.get_by_role("button", name="Save")

    def expect_on_page(self, timeout=10000):
        self.permissions_tab.wait_for(state="visible", timeout=timeout)

    def open(self):
        self.permissions_tab.click()

    def set_permission(self, name, enabled):
        return set_checked(self.page.get_by_role("checkbox", name=name), enabled)
