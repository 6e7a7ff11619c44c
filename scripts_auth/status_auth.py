"""
📊 Cached Login Status
Shows whether the shared session snapshot exists, its age and whether it is still fresh.
"""

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from services.auth_errors import StorageUnavailable
from services.auth_state_service import read_snapshot
from services.settings_service import SuiteSettings


def get_status_emoji(condition):
    return "✅" if condition else "❌"


def format_age(age):
    """Formats a timedelta as a short human-readable age."""
    total = int(age.total_seconds())
    if total < 60:
        return f"{total}s"
    if total < 3600:
        return f"{total // 60}min"
    hours, rest = divmod(total, 3600)
    return f"{hours}h {rest // 60}min"


def print_status(settings):
    path = settings.auth_state_path
    lock_path = path + ".lock"

    print("\n" + "═" * 60)
    print("📊 CACHED LOGIN STATUS".center(60))
    print("═" * 60 + "\n")

    print(f"🌐 Target: {settings.base_url}")
    print(f"👤 User: {settings.username or '(not set)'}")

    try:
        snapshot = read_snapshot(path, settings.auth_ttl_seconds)
    except StorageUnavailable as e:
        print(f"\n❌ Snapshot unreadable: {e}")
        print("   Run scripts_auth/clear_auth.py to remove it.\n")
        return 1

    print(f"{get_status_emoji(snapshot is not None)} Snapshot: {path}")
    if snapshot is None:
        print("\n⚠️  No cached login; the next test run will log in.\n")
        return 0

    now = datetime.now().timestamp()
    fresh = snapshot.is_fresh(now, settings.auth_ttl_seconds)
    created = datetime.fromtimestamp(snapshot.created_at)
    print(f"   Created: {created.strftime('%d/%m/%Y %H:%M:%S')}")
    print(f"   {get_status_emoji(fresh)} Age: {format_age(timedelta(seconds=snapshot.age(now)))}"
          f" (TTL {settings.auth_ttl_seconds}s)")
    print(f"   Cookies: {len(snapshot.payload.get('cookies', []))}")

    if os.path.exists(lock_path):
        print(f"\n🔒 Lock file present: {lock_path}")

    print("\n" + ("✅ Session is fresh" if fresh else "⚠️  Session is stale; it will be renewed") + "\n")
    return 0


def main():
    sys.exit(print_status(SuiteSettings.from_env()))


if __name__ == "__main__":
    main()
