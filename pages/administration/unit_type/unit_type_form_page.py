"""
Administration → Unit Type form.

Rows from test_data/unit_types.csv map onto the form by column name:
Name (English), Name (Bengali), Short Name (English), Short Name (Bengali),
Category, Service, Type (Static/Field), Depot, Workshop, Corps (comma separated).
"""

import re

from pages.base_page import BasePage
from utils.form_helper import set_checked, split_list


class UnitTypeFormPage(BasePage):
    LIST_URL = re.compile(r"/administration/unit-types/?(\?.*)?$")

    def __init__(self, page):
        super().__init__(page)
        # inputs
        self.name_en = page.get_by_label("Name (English)", exact=True)
        self.name_bn = page.get_by_label("Name (Bengali)", exact=True)
        self.short_name_en = page.get_by_label("Short Name (English)", exact=True)
        self.short_name_bn = page.get_by_label("Short Name (Bengali)", exact=True)
        # selects
        self.category_select = page.get_by_label("Category", exact=True)
        self.service_select = page.get_by_label("Services", exact=True)
        self.corps_select = page.get_by_label("Select corps", exact=True)
        # radios / checkboxes
        self.static_radio = page.get_by_label("Static", exact=True)
        self.field_radio = page.get_by_label("Field", exact=True)
        self.depot_checkbox = page.get_by_label("Depot", exact=True)
        self.workshop_checkbox = page.get_by_label("Workshop", exact=True)
        # buttons
        self.save_button = page.get_by_role("button", name="Create")
        self.update_button = page.get_by_role("button", name="Update")
        self.cancel_button = page.get_by_role("button", name="Cancel")

    def expect_on_page(self, timeout=10000):
        self.name_en.wait_for(state="visible", timeout=timeout)

    # ── filling ──

    def fill_form(self, data):
        self.name_en.fill(data.get("Name (English)", ""))
        self.name_bn.fill(data.get("Name (Bengali)", ""))
        if data.get("Short Name (English)"):
            self.short_name_en.fill(data["Short Name (English)"])
        if data.get("Short Name (Bengali)"):
            self.short_name_bn.fill(data["Short Name (Bengali)"])

        if data.get("Category"):
            self.pick_mat_option(self.category_select, data["Category"])
        if data.get("Service"):
            self.pick_mat_option(self.service_select, data["Service"])

        unit_kind = data.get("Type", "").strip().lower()
        if unit_kind == "static":
            self.static_radio.check()
        elif unit_kind == "field":
            self.field_radio.check()

        set_checked(self.depot_checkbox, data.get("Depot", ""))
        set_checked(self.workshop_checkbox, data.get("Workshop", ""))

        for corps in split_list(data.get("Corps", "")):
            self.select_corps(corps)

    def select_corps(self, corps):
        self.corps_select.click()
        self.corps_select.fill(corps)
        option = self.page.get_by_role("option", name=corps, exact=False).first
        if self.is_visible(option, timeout=2000):
            option.click()
        self.corps_select.press("Escape")

    def clear_form(self):
        for field in (self.name_en, self.name_bn, self.short_name_en, self.short_name_bn):
            field.clear()

    # ── submit ──

    def save(self, timeout=15000):
        """Clicks Create (or Update in edit mode) and waits for the list page."""
        button = self.save_button if self.element_exists(self.save_button) else self.update_button
        button.click()
        self.page.wait_for_url(self.LIST_URL, timeout=timeout)
        return True

    def cancel(self):
        self.cancel_button.click()
        self.page.wait_for_load_state("networkidle")
