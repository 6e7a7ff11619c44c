"""Administration → Organogram node right-click menu."""

from pages.base_page import BasePage


class NodeContextMenuPage(BasePage):

    def __init__(self, page):
        super().__init__(page)
        self.menu = page.get_by_role("menu")
        self.configure_item = page.get_by_role("menuitem", name="Configure")
        self.add_child_item = page.get_by_role("menuitem", name="Add Child")

    def expect_on_page(self, timeout=5000):
        self.menu.wait_for(state="visible", timeout=timeout)

    def choose(self, item_name):
        self.page.get_by_role("menuitem", name=item_name).click()

    def close(self):
        self.page.keyboard.press("Escape")
        self.menu.wait_for(state="hidden")
