"""Small helpers for form controls fed from CSV rows."""

TRUTHY = {"yes", "y", "true", "1", "x"}


def parse_flag(value):
    """Interprets CSV cells like "Yes", "true", "1" or "x" as checked."""
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def set_checked(checkbox, should_be_checked):
    """Clicks the checkbox only if its state differs. Returns True if it clicked."""
    should_be_checked = parse_flag(should_be_checked)
    if checkbox.is_checked() != should_be_checked:
        checkbox.click()
        return True
    return False


def split_list(value, sep=","):
    """Splits a multi-value CSV cell, dropping blanks."""
    return [item.strip() for item in (value or "").split(sep) if item.strip()]
