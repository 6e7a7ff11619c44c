"""Administration → Organogram tree view."""

from pages.base_page import BasePage


class OrganogramPage(BasePage):
    PATH = "/administration/organogram"

    def __init__(self, page):
        super().__init__(page)
        self.tree = page.get_by_role("tree")
        self.nodes = page.get_by_role("treeitem")

    def navigate(self):
        super().navigate(self.PATH)

    def expect_on_page(self, timeout=10000):
        self.tree.wait_for(state="visible", timeout=timeout)

    def node(self, name):
        return self.nodes.filter(has_text=name).first

    def open_context_menu(self, name):
        self.node(name).click(button="right")
