"""Administration → Permission group create/edit form."""

from pages.base_page import BasePage


class PermissionGroupFormPage(BasePage):

    def __init__(self, page):
        super().__init__(page)
        self.name_input = page.get_by_label("Group Name", exact=True)
        self.save_button = page.get_by_role("button", name="Save")
        self.cancel_button = page.get_by_role("button", name="Cancel")

    def expect_on_page(self, timeout=10000):
        self.name_input.wait_for(state="visible", timeout=timeout)

    def cancel(self):
        self.cancel_button.click()
