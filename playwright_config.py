"""
Global Playwright configuration for the admin portal UI suite.
Centralizes defaults for the target server, auth cache, timeouts and browser.
Every value can be overridden from the environment (see services/settings_service.py).
"""

# ═══════════════════════════════════════════
# TARGET SERVER
# ═══════════════════════════════════════════
BASE_URL = "http://localhost:4200"
SERVER_CHECK_TIMEOUT = 10  # seconds to wait for the target to answer

# ═══════════════════════════════════════════
# SHARED AUTHENTICATION STATE
# ═══════════════════════════════════════════
AUTH_STATE_PATH = "playwright/.auth/user.json"
AUTH_TTL_SECONDS = 3600
AUTH_ACQUIRE_TIMEOUT = 60  # seconds for the whole interactive login
LOGIN_PORTAL = ""  # e.g. "ORDISS Main" to log in through the landing page

# ═══════════════════════════════════════════
# TIMEOUTS (milliseconds)
# ═══════════════════════════════════════════
DEFAULT_TIMEOUT = 60000
NAVIGATION_TIMEOUT = 30000
ACTION_TIMEOUT = 10000

# ═══════════════════════════════════════════
# BROWSER OPTIONS
# ═══════════════════════════════════════════
HEADLESS = True
SLOW_MO = 0  # ms between actions (useful for debugging: 100-500)
VIEWPORT = {"width": 1280, "height": 720}
WORKERS = 1

# ═══════════════════════════════════════════
# SCREENSHOT / LOGS
# ═══════════════════════════════════════════
SCREENSHOT_ON_FAILURE = True
SCREENSHOTS_DIR = "test-results/screenshots"
LOGS_DIR = "test-results/logs"
LOG_LEVEL = "INFO"

# ═══════════════════════════════════════════
# TEST DATA
# ═══════════════════════════════════════════
TEST_DATA_DIR = "test_data"
