"""
Structured logging for the UI suite.

    from utils.logger import TestLogger
    log = TestLogger("Unit Types")
    log.step("1. Navigate to unit types")
    log.action("Click", "Create Unit Type button")
    log.check("Unit type found in list")
"""

import json
import logging
import os
import sys
import time

# ═══════════════════════════════════════════
# LEVEL COLORS
# ═══════════════════════════════════════════
_COLORS = {
    logging.DEBUG: "\x1b[36m",    # cyan
    logging.INFO: "\x1b[32m",     # green
    logging.WARNING: "\x1b[33m",  # yellow
    logging.ERROR: "\x1b[31m",    # red
    logging.CRITICAL: "\x1b[31m",
}
_RESET = "\x1b[0m"

ROOT_LOGGER = "uisuite"
_configured = False


class ColorFormatter(logging.Formatter):
    """Prefixes every record with a colored level name when writing to a TTY."""

    def __init__(self, use_color=True):
        super().__init__("%(levelname_colored)s %(message)s")
        self.use_color = use_color

    def format(self, record):
        name = record.levelname
        if self.use_color:
            name = f"{_COLORS.get(record.levelno, '')}[{name}]{_RESET}"
        else:
            name = f"[{name}]"
        record.levelname_colored = name
        return super().format(record)


def configure_logging(level=None):
    """Installs the console handler on the suite's root logger once."""
    global _configured
    logger = logging.getLogger(ROOT_LOGGER)
    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    if _configured:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColorFormatter(use_color=sys.stdout.isatty()))
    logger.addHandler(handler)
    _configured = True
    return logger


def get_logger(name):
    """Returns a child of the suite logger, e.g. ``uisuite.auth``."""
    configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def format_data(data, limit=200):
    if isinstance(data, str):
        return data
    if isinstance(data, BaseException):
        return f"{type(data).__name__}: {data}"
    try:
        return json.dumps(data, indent=2, default=str)[:limit]
    except (TypeError, ValueError):
        return str(data)


class TestLogger:
    """Per-test logger that stamps each line with elapsed time and test name."""

    __test__ = False  # not a pytest test class

    def __init__(self, test_name="Test", logger=None):
        self.test_name = test_name
        self.logger = logger or get_logger("test")
        self.start_time = time.monotonic()

    def elapsed(self):
        return f"{time.monotonic() - self.start_time:.1f}s"

    def _log(self, level, message, data=None):
        if not self.logger.isEnabledFor(level):
            return
        text = f"[{self.elapsed()}] [{self.test_name}] {message}"
        if data is not None:
            text += f"\n     Data: {format_data(data)}"
        self.logger.log(level, text)

    def debug(self, message, data=None):
        self._log(logging.DEBUG, message, data)

    def info(self, message, data=None):
        self._log(logging.INFO, message, data)

    def warn(self, message, data=None):
        self._log(logging.WARNING, message, data)

    def error(self, message, data=None):
        self._log(logging.ERROR, message, data)

    # ── helpers ──

    def step(self, name):
        self.info(f"📍 {name}")

    def action(self, action, description):
        self.info(f"✅ {action}: {description}")

    def check(self, assertion):
        self.info(f"🔍 Assert: {assertion}")

    def passed(self, message="Test passed"):
        self.info(f"✨ {message}")

    def failed(self, message="Test failed"):
        self.error(f"❌ {message}")

    def performance(self, operation, duration_ms):
        if duration_ms > 1000:
            self.warn(f"⏱️  {operation}: {duration_ms}ms (slow)")
        else:
            self.info(f"⏱️  {operation}: {duration_ms}ms")

    def data(self, label, value):
        self.debug(f"📊 {label}:", value)

    def section(self, title):
        line = "═" * 50
        self.logger.info(f"\n{line}\n  {title}\n{line}")

    def reset(self, new_test_name=None):
        if new_test_name:
            self.test_name = new_test_name
        self.start_time = time.monotonic()
